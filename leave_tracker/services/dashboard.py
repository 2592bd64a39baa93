from sqlalchemy.orm import Session

from ..models.user import User, ROLE_FACULTY, ROLE_STUDENT
from . import leaves

RECENT_LIMIT = 5


def build_dashboard(db: Session, user: User) -> dict:
    """Landing view: role-scoped counts plus a short list. Read-only."""
    data = {"stats": leaves.leave_stats(db, user)}

    if user.role == ROLE_STUDENT:
        recent, _ = leaves.list_own(db, user, page=1, limit=RECENT_LIMIT)
        data["recent_leaves"] = recent
    elif user.role == ROLE_FACULTY:
        pending, _ = leaves.list_pending(db, user, page=1, limit=RECENT_LIMIT)
        data["pending_leaves"] = pending
    return data
