from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.leave import LeaveApplication
from ..models.user import User
from ..schemas.common import Pagination
from ..schemas.leave import LeaveCreate, LeaveResponse, LeaveSummary, ReviewRequest
from ..core.permissions import get_current_user, require_faculty, require_student
from ..services import leaves as workflow

router = APIRouter(prefix="/leaves", tags=["leaves"])


def serialize_leave(leave: LeaveApplication) -> dict:
    return LeaveResponse.model_validate(leave).model_dump(mode="json")


def _page(items: List[LeaveApplication], page: int, limit: int, total: int) -> dict:
    return {
        "success": True,
        "data": {
            "leaves": [serialize_leave(leave) for leave in items],
            "pagination": Pagination.build(page, limit, total).model_dump(),
        },
    }


@router.post("/apply", status_code=status.HTTP_201_CREATED)
def apply_for_leave(
    draft: LeaveCreate,
    current_user: User = Depends(require_student),
    db: Session = Depends(get_db),
):
    """Submit a leave application (students only)"""
    leave = workflow.submit_leave(db, current_user, draft)
    return {
        "success": True,
        "message": "Leave application submitted successfully",
        "data": {"leave": LeaveSummary.model_validate(leave).model_dump(mode="json")},
    }


@router.get("/my-leaves")
def get_my_leaves(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[str] = None,
    current_user: User = Depends(require_student),
    db: Session = Depends(get_db),
):
    items, total = workflow.list_own(db, current_user, page, limit, status)
    return _page(items, page, limit, total)


@router.get("/pending")
def get_pending_leaves(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    department: Optional[str] = None,
    current_user: User = Depends(require_faculty),
    db: Session = Depends(get_db),
):
    """Pending applications for the reviewer's department, oldest first"""
    items, total = workflow.list_pending(db, current_user, page, limit, department)
    return _page(items, page, limit, total)


@router.get("/all")
def get_all_leaves(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[str] = None,
    leave_type: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    current_user: User = Depends(require_faculty),
    db: Session = Depends(get_db),
):
    """Department applications filtered by status, type and start-date window"""
    items, total = workflow.list_all(
        db, current_user, page, limit,
        status=status, leave_type=leave_type, start_from=start_date, start_to=end_date,
    )
    return _page(items, page, limit, total)


@router.get("/calendar")
def get_leave_calendar(
    start_date: date,
    end_date: date,
    current_user: User = Depends(require_faculty),
    db: Session = Depends(get_db),
):
    """Department applications overlapping a date window"""
    items = workflow.list_in_range(db, current_user, start_date, end_date)
    return {"success": True, "data": {"leaves": [serialize_leave(leave) for leave in items]}}


@router.get("/stats")
def get_stats(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"success": True, "data": workflow.leave_stats(db, current_user)}


@router.get("/{leave_id}")
def get_leave(leave_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    leave = workflow.get_leave(db, current_user, leave_id)
    return {"success": True, "data": {"leave": serialize_leave(leave)}}


@router.put("/{leave_id}/approve")
def approve_leave(
    leave_id: int,
    review: Optional[ReviewRequest] = None,
    current_user: User = Depends(require_faculty),
    db: Session = Depends(get_db),
):
    comments = review.comments if review else None
    leave = workflow.approve_leave(db, current_user, leave_id, comments)
    return {
        "success": True,
        "message": "Leave application approved successfully",
        "data": {"leave": serialize_leave(leave)},
    }


@router.put("/{leave_id}/reject")
def reject_leave(
    leave_id: int,
    review: Optional[ReviewRequest] = None,
    current_user: User = Depends(require_faculty),
    db: Session = Depends(get_db),
):
    comments = review.comments if review else None
    leave = workflow.reject_leave(db, current_user, leave_id, comments)
    return {
        "success": True,
        "message": "Leave application rejected successfully",
        "data": {"leave": serialize_leave(leave)},
    }
