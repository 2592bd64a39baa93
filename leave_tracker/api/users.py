from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.user import User
from ..schemas.common import Pagination
from ..schemas.user import ActiveUpdate, Department, UserResponse
from ..core.permissions import get_current_user, require_admin, require_faculty_or_admin
from ..services import identity

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/students")
def list_students(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    department: Optional[Department] = None,
    semester: Optional[int] = Query(None, ge=1, le=8),
    current_user: User = Depends(require_faculty_or_admin),
    db: Session = Depends(get_db),
):
    """Get students, optionally by department and semester"""
    students, total = identity.list_students(db, page, limit, department, semester)
    return {
        "success": True,
        "data": {
            "students": [UserResponse.model_validate(s).model_dump(mode="json") for s in students],
            "pagination": Pagination.build(page, limit, total).model_dump(),
        },
    }


@router.get("/faculty")
def list_faculty(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    faculty = identity.list_faculty(db)
    return {
        "success": True,
        "data": {"faculty": [UserResponse.model_validate(f).model_dump(mode="json") for f in faculty]},
    }


@router.put("/{user_id}/active")
def set_user_active(
    user_id: int,
    update: ActiveUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Activate or deactivate an account (admin only)"""
    user = identity.set_active(db, user_id, update.is_active)
    return {"success": True, "user": UserResponse.model_validate(user).model_dump(mode="json")}
