from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints, field_validator

Department = Literal["CSE", "ECE", "ME", "CE", "EE", "IT"]
Role = Literal["student", "faculty", "admin"]

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=50)]
Phone = Annotated[str, StringConstraints(pattern=r"^[0-9]{10}$")]
Password = Annotated[str, Field(min_length=6)]
Identifier = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=30)]
Semester = Annotated[int, Field(ge=1, le=8)]


class RegistrationBase(BaseModel):
    name: Name
    email: EmailStr
    password: Password
    department: Department
    phone: Phone

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.lower()


class StudentRegistration(RegistrationBase):
    role: Literal["student"]
    roll_number: Identifier
    semester: Semester


class FacultyRegistration(RegistrationBase):
    role: Literal["faculty"]
    employee_id: Identifier


class AdminRegistration(RegistrationBase):
    role: Literal["admin"]


# Any identity the service can create; the role picks the required field set
RegistrationDraft = Annotated[
    Union[StudentRegistration, FacultyRegistration, AdminRegistration],
    Field(discriminator="role"),
]

# Self-service registration is limited to students and faculty
PublicRegistration = Annotated[
    Union[StudentRegistration, FacultyRegistration],
    Field(discriminator="role"),
]


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)
    role: Literal["student", "faculty", "admin"]


class ProfileUpdate(BaseModel):
    name: Optional[Name] = None
    phone: Optional[Phone] = None
    semester: Optional[Semester] = None


class ActiveUpdate(BaseModel):
    is_active: bool


class UserResponse(BaseModel):
    """Public profile; the password hash is never part of it."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: Role
    department: Department
    phone: str
    roll_number: Optional[str] = None
    semester: Optional[int] = None
    employee_id: Optional[str] = None
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None
