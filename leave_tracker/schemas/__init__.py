from .common import Pagination
from .user import (
    StudentRegistration, FacultyRegistration, AdminRegistration,
    RegistrationDraft, PublicRegistration,
    LoginRequest, ProfileUpdate, ActiveUpdate, UserResponse
)
from .leave import (
    DocumentIn, LeaveCreate, ReviewRequest,
    LeaveSummary, LeaveResponse, LeaveStats
)

__all__ = [
    "Pagination",
    # User schemas
    "StudentRegistration", "FacultyRegistration", "AdminRegistration",
    "RegistrationDraft", "PublicRegistration",
    "LoginRequest", "ProfileUpdate", "ActiveUpdate", "UserResponse",
    # Leave schemas
    "DocumentIn", "LeaveCreate", "ReviewRequest",
    "LeaveSummary", "LeaveResponse", "LeaveStats"
]
