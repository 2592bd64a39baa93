from datetime import date, datetime
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

LeaveType = Literal["medical", "personal", "emergency", "exam", "family", "other"]
LeaveStatus = Literal["pending", "approved", "rejected"]

MAX_DOCUMENTS = 5
MAX_DOCUMENT_SIZE = 5 * 1024 * 1024
ALLOWED_DOCUMENT_EXTENSIONS = (".jpeg", ".jpg", ".png", ".gif", ".pdf", ".doc", ".docx")
ALLOWED_DOCUMENT_MIME_TYPES = (
    "image/jpeg",
    "image/png",
    "image/gif",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)

Reason = Annotated[str, StringConstraints(strip_whitespace=True, min_length=10, max_length=500)]
Comments = Annotated[str, StringConstraints(strip_whitespace=True, max_length=300)]


class DocumentIn(BaseModel):
    filename: str = Field(min_length=1, max_length=255)
    original_name: str = Field(min_length=1, max_length=255)
    mime_type: str = Field(min_length=1, max_length=100)
    size: int = Field(gt=0, le=MAX_DOCUMENT_SIZE)
    path: str = Field(min_length=1, max_length=500)

    @field_validator("original_name")
    @classmethod
    def allowed_kind(cls, value: str) -> str:
        if not value.lower().endswith(ALLOWED_DOCUMENT_EXTENSIONS):
            raise ValueError("Only images, PDFs, and document files are allowed")
        return value

    @field_validator("mime_type")
    @classmethod
    def allowed_mime_type(cls, value: str) -> str:
        if value.lower() not in ALLOWED_DOCUMENT_MIME_TYPES:
            raise ValueError("Only images, PDFs, and document files are allowed")
        return value.lower()


class LeaveCreate(BaseModel):
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: Reason
    contact_number: Optional[Annotated[str, StringConstraints(pattern=r"^[0-9]{10}$")]] = None
    emergency_contact: Optional[Annotated[str, StringConstraints(strip_whitespace=True, max_length=100)]] = None
    documents: List[DocumentIn] = Field(default_factory=list, max_length=MAX_DOCUMENTS)


class ReviewRequest(BaseModel):
    comments: Optional[Comments] = None


class DocumentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    filename: str
    original_name: str
    mime_type: str
    size: int
    path: str
    uploaded_at: Optional[datetime] = None


class StudentBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: str
    roll_number: Optional[str] = None


class ReviewerBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    employee_id: Optional[str] = None


class LeaveSummary(BaseModel):
    """Returned right after submission"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    total_days: int
    status: LeaveStatus
    applied_at: datetime


class LeaveResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: int
    student_name: str
    roll_number: str
    department: str
    semester: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    total_days: int
    duration: str
    reason: str
    contact_number: Optional[str] = None
    emergency_contact: Optional[str] = None
    documents: List[DocumentResponse] = []
    status: LeaveStatus
    reviewed_by: Optional[int] = None
    reviewer_name: Optional[str] = None
    review_date: Optional[datetime] = None
    comments: Optional[str] = None
    applied_at: datetime
    is_current: bool
    is_upcoming: bool
    student: Optional[StudentBrief] = None
    reviewer: Optional[ReviewerBrief] = None


class LeaveStats(BaseModel):
    total_leaves: int = 0
    pending_leaves: int = 0
    approved_leaves: int = 0
    rejected_leaves: int = 0
