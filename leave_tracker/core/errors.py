from typing import List, Optional

from fastapi import status


class LeaveTrackerError(Exception):
    """Base for every business-rule failure; rendered as the failure envelope."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request failed"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[dict]] = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationFailed(LeaveTrackerError):
    default_message = "Validation failed"

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationFailed":
        return cls(message, errors=[{"field": field, "message": message}])


class DuplicateIdentity(LeaveTrackerError):
    default_message = "User already exists"


class InvalidTransition(LeaveTrackerError):
    default_message = "Leave application has already been reviewed"


class InvalidCredentials(LeaveTrackerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid email or password"


class AccountDeactivated(LeaveTrackerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Account has been deactivated"


class NoToken(LeaveTrackerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "No token provided, authorization denied"


class InvalidToken(LeaveTrackerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid token, authorization denied"


class TokenExpired(LeaveTrackerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Token expired, please login again"


class IdentityNotFound(LeaveTrackerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "User not found, authorization denied"


class Forbidden(LeaveTrackerError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFound(LeaveTrackerError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"
