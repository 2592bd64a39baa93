from ..database import Base
from .user import User, Student, Faculty, Admin
from .leave import LeaveApplication, LeaveDocument

__all__ = [
    "Base",
    "User",
    "Student",
    "Faculty",
    "Admin",
    # Leave models
    "LeaveApplication",
    "LeaveDocument",
]
