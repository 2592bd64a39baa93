import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ..config import Settings, get_request_settings
from ..database import get_db
from ..models.user import User, ROLE_ADMIN, ROLE_FACULTY, ROLE_STUDENT
from .errors import AccountDeactivated, Forbidden, IdentityNotFound, InvalidToken, NoToken
from .security import decode_access_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_request_settings),
) -> User:
    """Resolve the bearer token to a live, active identity and attach it to the request."""
    if credentials is None or not credentials.credentials:
        raise NoToken()

    payload = decode_access_token(credentials.credentials, settings)

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise InvalidToken()

    user = db.get(User, user_id)
    if user is None:
        logger.info("Token for unknown user id=%s", user_id)
        raise IdentityNotFound()

    if not user.is_active:
        raise AccountDeactivated("Account deactivated, authorization denied")

    request.state.user = user
    return user


def require_roles(*allowed_roles: str):
    """Build a dependency that admits only the listed roles; runs after get_current_user."""
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed_roles:
            raise Forbidden(f"Access denied. Required roles: {', '.join(allowed_roles)}")
        return current_user
    return role_checker


require_student = require_roles(ROLE_STUDENT)
require_faculty = require_roles(ROLE_FACULTY)
require_admin = require_roles(ROLE_ADMIN)
require_faculty_or_admin = require_roles(ROLE_FACULTY, ROLE_ADMIN)
