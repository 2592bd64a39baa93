"""Identity store and credential verification.

Registration picks the concrete identity class from the draft's role, so a
student always carries a roll number and semester and a faculty member
always carries an employee id.
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import Settings
from ..core.errors import AccountDeactivated, DuplicateIdentity, InvalidCredentials, NotFound
from ..core.security import create_access_token, get_password_hash, token_claims_for, verify_password
from ..database import utcnow
from ..models.user import User, Student, Faculty, IDENTITY_CLASSES, ROLE_STUDENT
from ..schemas.user import FacultyRegistration, ProfileUpdate, StudentRegistration

logger = logging.getLogger(__name__)


def find_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def _check_unique(db: Session, draft) -> None:
    if find_by_email(db, draft.email):
        raise DuplicateIdentity("User already exists with this email")

    if isinstance(draft, StudentRegistration):
        if db.query(Student).filter(Student.roll_number == draft.roll_number).first():
            raise DuplicateIdentity("Student with this roll number already exists")

    if isinstance(draft, FacultyRegistration):
        if db.query(Faculty).filter(Faculty.employee_id == draft.employee_id).first():
            raise DuplicateIdentity("Faculty with this employee ID already exists")


def register_user(db: Session, draft, settings: Settings) -> User:
    """Create an identity from a validated registration draft."""
    _check_unique(db, draft)

    fields = draft.model_dump(exclude={"password", "role"})
    fields["email"] = draft.email.lower()
    identity_class = IDENTITY_CLASSES[draft.role]
    user = identity_class(
        password_hash=get_password_hash(draft.password, settings),
        is_active=True,
        **fields,
    )

    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration with the same keys
        db.rollback()
        raise DuplicateIdentity("User already exists")
    db.refresh(user)

    logger.info("Registered %s id=%s email=%s", user.role, user.id, user.email)
    return user


def authenticate(db: Session, email: str, password: str, role: str, settings: Settings) -> Tuple[str, User]:
    """Check credentials for the claimed role and issue a session token."""
    user = find_by_email(db, email)
    if user is None:
        logger.info("Login failed for %s: unknown email", email)
        raise InvalidCredentials()

    if user.role != role:
        logger.info("Login failed for %s: role mismatch (stored=%s, claimed=%s)", email, user.role, role)
        raise InvalidCredentials("Invalid role selected")

    if not verify_password(password, user.password_hash):
        logger.info("Login failed for %s: bad password", email)
        raise InvalidCredentials()

    if not user.is_active:
        logger.info("Login refused for %s: account deactivated", email)
        raise AccountDeactivated()

    user.last_login = utcnow()
    db.commit()
    db.refresh(user)

    token = create_access_token(token_claims_for(user), settings)
    logger.info("Login successful: %s (%s)", user.display_name, user.role)
    return token, user


def update_profile(db: Session, user: User, changes: ProfileUpdate) -> User:
    """Apply name/phone/semester changes; semester only applies to students."""
    if changes.name:
        user.name = changes.name
    if changes.phone:
        user.phone = changes.phone
    if changes.semester is not None and user.role == ROLE_STUDENT:
        user.semester = changes.semester

    db.commit()
    db.refresh(user)
    return user


def set_active(db: Session, user_id: int, is_active: bool) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    user.is_active = is_active
    db.commit()
    db.refresh(user)
    logger.info("User id=%s active=%s", user.id, is_active)
    return user


def list_students(
    db: Session,
    page: int,
    limit: int,
    department: Optional[str] = None,
    semester: Optional[int] = None,
) -> Tuple[List[Student], int]:
    query = db.query(Student)
    if department:
        query = query.filter(Student.department == department)
    if semester is not None:
        query = query.filter(Student.semester == semester)

    total = query.count()
    students = (
        query.order_by(Student.name.asc(), Student.id.asc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return students, total


def list_faculty(db: Session) -> List[Faculty]:
    return db.query(Faculty).order_by(Faculty.name.asc(), Faculty.id.asc()).all()
