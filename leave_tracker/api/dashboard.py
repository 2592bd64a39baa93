from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.user import User
from ..core.permissions import get_current_user
from ..services.dashboard import build_dashboard
from .leaves import serialize_leave

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("")
def get_dashboard(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Counts plus a short list for the landing page"""
    data = build_dashboard(db, current_user)
    for key in ("recent_leaves", "pending_leaves"):
        if key in data:
            data[key] = [serialize_leave(leave) for leave in data[key]]
    return {"success": True, "data": data}
