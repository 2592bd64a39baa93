from datetime import date

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Date, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base, utcnow

LEAVE_PENDING = "pending"
LEAVE_APPROVED = "approved"
LEAVE_REJECTED = "rejected"
LEAVE_STATUSES = (LEAVE_PENDING, LEAVE_APPROVED, LEAVE_REJECTED)

LEAVE_TYPES = ("medical", "personal", "emergency", "exam", "family", "other")


def inclusive_days(start: date, end: date) -> int:
    """Number of calendar days covered by [start, end], both ends counted."""
    return abs((end - start).days) + 1


class LeaveApplication(Base):
    """One leave request; student fields are copied at submission time."""
    __tablename__ = "leave_applications"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    # Snapshot of the student when the request was filed
    student_name = Column(String(50), nullable=False)
    roll_number = Column(String(30), nullable=False)
    department = Column(String(10), nullable=False)
    semester = Column(Integer, nullable=False)

    leave_type = Column(String(20), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    total_days = Column(Integer, nullable=False)
    reason = Column(Text, nullable=False)
    contact_number = Column(String(10))
    emergency_contact = Column(String(100))

    status = Column(String(20), nullable=False, default=LEAVE_PENDING)  # pending, approved, rejected
    reviewed_by = Column(Integer, ForeignKey("users.id"))
    reviewer_name = Column(String(50))
    review_date = Column(DateTime(timezone=True))
    comments = Column(String(300))

    applied_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    student = relationship("User", foreign_keys=[student_id])
    reviewer = relationship("User", foreign_keys=[reviewed_by])
    documents = relationship(
        "LeaveDocument",
        back_populates="leave",
        cascade="all, delete-orphan",
        order_by="LeaveDocument.id",
    )

    __table_args__ = (
        Index("ix_leave_student_applied", "student_id", "applied_at"),
        Index("ix_leave_status_department", "status", "department"),
        Index("ix_leave_dates", "start_date", "end_date"),
        Index("ix_leave_reviewer_date", "reviewed_by", "review_date"),
    )

    @property
    def duration(self) -> str:
        if self.total_days == 1:
            return "1 day"
        return f"{self.total_days} days"

    @property
    def is_current(self) -> bool:
        today = date.today()
        return self.status == LEAVE_APPROVED and self.start_date <= today <= self.end_date

    @property
    def is_upcoming(self) -> bool:
        return self.status == LEAVE_APPROVED and self.start_date > date.today()


class LeaveDocument(Base):
    """Supporting document descriptor attached to a leave application"""
    __tablename__ = "leave_documents"

    id = Column(Integer, primary_key=True, index=True)
    leave_id = Column(Integer, ForeignKey("leave_applications.id"), nullable=False, index=True)
    filename = Column(String(255), nullable=False)
    original_name = Column(String(255), nullable=False)
    mime_type = Column(String(100), nullable=False)
    size = Column(Integer, nullable=False)
    path = Column(String(500), nullable=False)
    uploaded_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    leave = relationship("LeaveApplication", back_populates="documents")
