"""Leave workflow: submission, role-scoped reads, and the one-time review.

A leave application starts ``pending`` and moves exactly once, to
``approved`` or ``rejected``, by a faculty member of the same department.
Reads are scoped: students see their own records, faculty see their
department's records.
"""
import logging
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, and_, update
from sqlalchemy.orm import Session, selectinload

from ..core.errors import Forbidden, InvalidTransition, NotFound, ValidationFailed
from ..database import utcnow
from ..models.leave import (
    LeaveApplication, LeaveDocument, inclusive_days,
    LEAVE_PENDING, LEAVE_APPROVED, LEAVE_REJECTED, LEAVE_STATUSES, LEAVE_TYPES,
)
from ..models.user import User, ROLE_FACULTY, ROLE_STUDENT
from ..schemas.leave import LeaveCreate

logger = logging.getLogger(__name__)

DEFAULT_APPROVAL_COMMENT = "Approved"

_RELATED = (
    selectinload(LeaveApplication.student),
    selectinload(LeaveApplication.reviewer),
    selectinload(LeaveApplication.documents),
)


def _clean_choice(value: Optional[str], allowed, field: str) -> Optional[str]:
    """Blank filters mean "no filter"; anything else must be a known value."""
    if value is None or value == "":
        return None
    if value not in allowed:
        raise ValidationFailed.for_field(field, f"{field} must be one of: {', '.join(allowed)}")
    return value


def _paginate(query, page: int, limit: int, *order_by) -> Tuple[List[LeaveApplication], int]:
    total = query.count()
    items = (
        query.options(*_RELATED)
        .order_by(*order_by)
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return items, total


def submit_leave(db: Session, student: User, draft: LeaveCreate, today: Optional[date] = None) -> LeaveApplication:
    """File a new application for ``student``; it always starts pending."""
    today = today or date.today()

    errors = []
    if draft.start_date < today:
        errors.append({"field": "start_date", "message": "Start date cannot be in the past"})
    if draft.end_date < draft.start_date:
        errors.append({"field": "end_date", "message": "End date must be after or equal to start date"})
    if errors:
        raise ValidationFailed(errors[0]["message"], errors=errors)

    leave = LeaveApplication(
        student_id=student.id,
        student_name=student.name,
        roll_number=student.roll_number,
        department=student.department,
        semester=student.semester,
        leave_type=draft.leave_type,
        start_date=draft.start_date,
        end_date=draft.end_date,
        total_days=inclusive_days(draft.start_date, draft.end_date),
        reason=draft.reason,
        contact_number=draft.contact_number or student.phone,
        emergency_contact=draft.emergency_contact or "",
        status=LEAVE_PENDING,
        applied_at=utcnow(),
        documents=[LeaveDocument(**doc.model_dump()) for doc in draft.documents],
    )

    db.add(leave)
    db.commit()
    db.refresh(leave)

    logger.info(
        "Leave application saved: %s (%s) - %s - %s",
        leave.student_name, leave.roll_number, leave.leave_type, leave.status,
    )
    return leave


def list_own(
    db: Session, student: User, page: int, limit: int, status: Optional[str] = None
) -> Tuple[List[LeaveApplication], int]:
    """The student's applications, newest first."""
    status = _clean_choice(status, LEAVE_STATUSES, "status")

    query = db.query(LeaveApplication).filter(LeaveApplication.student_id == student.id)
    if status:
        query = query.filter(LeaveApplication.status == status)

    return _paginate(query, page, limit, LeaveApplication.applied_at.desc(), LeaveApplication.id.desc())


def list_pending(
    db: Session, faculty: User, page: int, limit: int, department: Optional[str] = None
) -> Tuple[List[LeaveApplication], int]:
    """Pending applications in the reviewer's department, oldest first."""
    if department and department != faculty.department:
        raise Forbidden("You can only view pending leaves from your department")

    query = db.query(LeaveApplication).filter(
        LeaveApplication.status == LEAVE_PENDING,
        LeaveApplication.department == faculty.department,
    )
    return _paginate(query, page, limit, LeaveApplication.applied_at.asc(), LeaveApplication.id.asc())


def list_all(
    db: Session,
    faculty: User,
    page: int,
    limit: int,
    status: Optional[str] = None,
    leave_type: Optional[str] = None,
    start_from: Optional[date] = None,
    start_to: Optional[date] = None,
) -> Tuple[List[LeaveApplication], int]:
    """Every application in the reviewer's department, filterable, newest first."""
    status = _clean_choice(status, LEAVE_STATUSES, "status")
    leave_type = _clean_choice(leave_type, LEAVE_TYPES, "leave_type")

    query = db.query(LeaveApplication).filter(LeaveApplication.department == faculty.department)
    if status:
        query = query.filter(LeaveApplication.status == status)
    if leave_type:
        query = query.filter(LeaveApplication.leave_type == leave_type)
    if start_from:
        query = query.filter(LeaveApplication.start_date >= start_from)
    if start_to:
        query = query.filter(LeaveApplication.start_date <= start_to)

    return _paginate(query, page, limit, LeaveApplication.applied_at.desc(), LeaveApplication.id.desc())


def list_in_range(db: Session, faculty: User, start: date, end: date) -> List[LeaveApplication]:
    """Department applications whose date range overlaps [start, end], by start date."""
    if end < start:
        raise ValidationFailed.for_field("end_date", "End date must be after or equal to start date")

    return (
        db.query(LeaveApplication)
        .options(*_RELATED)
        .filter(
            LeaveApplication.department == faculty.department,
            or_(
                LeaveApplication.start_date.between(start, end),
                LeaveApplication.end_date.between(start, end),
                and_(LeaveApplication.start_date <= start, LeaveApplication.end_date >= end),
            ),
        )
        .order_by(LeaveApplication.start_date.asc(), LeaveApplication.id.asc())
        .all()
    )


def _load(db: Session, leave_id: int) -> LeaveApplication:
    leave = db.query(LeaveApplication).options(*_RELATED).filter(LeaveApplication.id == leave_id).first()
    if leave is None:
        raise NotFound("Leave application not found")
    return leave


def get_leave(db: Session, user: User, leave_id: int) -> LeaveApplication:
    """Fetch one application if the caller owns it or reviews its department."""
    leave = _load(db, leave_id)

    if user.role == ROLE_STUDENT and leave.student_id == user.id:
        return leave
    if user.role == ROLE_FACULTY and leave.department == user.department:
        return leave
    raise Forbidden()


def _review(db: Session, faculty: User, leave_id: int, new_status: str, comments: str) -> LeaveApplication:
    leave = _load(db, leave_id)

    if leave.status != LEAVE_PENDING:
        raise InvalidTransition()
    if faculty.role != ROLE_FACULTY or leave.department != faculty.department:
        raise Forbidden("You can only review leaves from your department")

    # Guarded write: a concurrent review that got there first leaves zero rows to update
    result = db.execute(
        update(LeaveApplication)
        .where(LeaveApplication.id == leave.id, LeaveApplication.status == LEAVE_PENDING)
        .values(
            status=new_status,
            reviewed_by=faculty.id,
            reviewer_name=faculty.name,
            review_date=utcnow(),
            comments=comments,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        raise InvalidTransition()

    db.commit()
    db.refresh(leave)
    return leave


def approve_leave(db: Session, faculty: User, leave_id: int, comments: Optional[str] = None) -> LeaveApplication:
    comments = (comments or "").strip() or DEFAULT_APPROVAL_COMMENT
    leave = _review(db, faculty, leave_id, LEAVE_APPROVED, comments)
    logger.info("Leave approved: %s (%s) by %s", leave.student_name, leave.roll_number, faculty.name)
    return leave


def reject_leave(db: Session, faculty: User, leave_id: int, comments: Optional[str]) -> LeaveApplication:
    comments = (comments or "").strip()
    if not comments:
        raise ValidationFailed.for_field("comments", "Comments are required when rejecting a leave")

    leave = _review(db, faculty, leave_id, LEAVE_REJECTED, comments)
    logger.info("Leave rejected: %s (%s) by %s", leave.student_name, leave.roll_number, faculty.name)
    return leave


def leave_stats(db: Session, user: User) -> dict:
    """Counts by status for the student's own records or the faculty's department."""
    if user.role == ROLE_STUDENT:
        scope = LeaveApplication.student_id == user.id
    elif user.role == ROLE_FACULTY:
        scope = LeaveApplication.department == user.department
    else:
        return {}

    counts = dict(
        db.query(LeaveApplication.status, func.count(LeaveApplication.id))
        .filter(scope)
        .group_by(LeaveApplication.status)
        .all()
    )
    return {
        "total_leaves": sum(counts.values()),
        "pending_leaves": counts.get(LEAVE_PENDING, 0),
        "approved_leaves": counts.get(LEAVE_APPROVED, 0),
        "rejected_leaves": counts.get(LEAVE_REJECTED, 0),
    }
