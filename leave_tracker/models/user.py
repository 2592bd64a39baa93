from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.sql import func
from ..database import Base

ROLE_STUDENT = "student"
ROLE_FACULTY = "faculty"
ROLE_ADMIN = "admin"


class User(Base):
    """Shared identity columns; the concrete role is one of the subclasses below."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)  # stored lower-case
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, index=True)  # student, faculty, admin
    department = Column(String(10), nullable=False, index=True)
    phone = Column(String(10), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __mapper_args__ = {
        "polymorphic_on": role,
    }

    @property
    def display_name(self) -> str:
        return self.name


class Student(User):
    roll_number = Column(String(30), unique=True, index=True)
    semester = Column(Integer)

    __mapper_args__ = {"polymorphic_identity": ROLE_STUDENT}

    @property
    def display_name(self) -> str:
        return f"{self.name} ({self.roll_number})"


class Faculty(User):
    employee_id = Column(String(30), unique=True, index=True)

    __mapper_args__ = {"polymorphic_identity": ROLE_FACULTY}

    @property
    def display_name(self) -> str:
        return f"{self.name} ({self.employee_id})"


class Admin(User):
    __mapper_args__ = {"polymorphic_identity": ROLE_ADMIN}


IDENTITY_CLASSES = {
    ROLE_STUDENT: Student,
    ROLE_FACULTY: Faculty,
    ROLE_ADMIN: Admin,
}
