import sys

from pydantic import TypeAdapter
from sqlalchemy.exc import SQLAlchemyError

from leave_tracker.config import get_settings
from leave_tracker.core.errors import LeaveTrackerError
from leave_tracker.database import Base, build_engine, build_session_factory
from leave_tracker.models import User
from leave_tracker.schemas.user import RegistrationDraft
from leave_tracker.services.identity import register_user

INITIAL_USERS = [
    {
        "role": "admin",
        "name": "Admin User",
        "email": "admin@college.edu",
        "password": "admin123",
        "department": "CSE",
        "phone": "9000000001",
    },
    {
        "role": "faculty",
        "name": "Faculty Member",
        "email": "faculty1@college.edu",
        "password": "faculty123",
        "department": "CSE",
        "phone": "9000000002",
        "employee_id": "FAC001",
    },
    {
        "role": "student",
        "name": "Student One",
        "email": "student1@college.edu",
        "password": "student123",
        "department": "CSE",
        "phone": "9000000003",
        "roll_number": "CSE2023001",
        "semester": 3,
    },
]


def create_initial_users():
    """Create initial users for the leave tracker"""
    settings = get_settings()
    drafts = TypeAdapter(RegistrationDraft)

    try:
        engine = build_engine(settings)
        Base.metadata.create_all(bind=engine)
        db = build_session_factory(engine)()
    except SQLAlchemyError as e:
        print(f"Could not open database {settings.database_url}: {e}")
        return False

    try:
        existing_users = db.query(User).count()
        if existing_users > 0:
            print(f"Database already has {existing_users} users")
            return True

        for user_data in INITIAL_USERS:
            user = register_user(db, drafts.validate_python(user_data), settings)
            print(f"Created user: {user.email} ({user.role})")

        print("\nLogin Credentials:")
        print("=" * 50)
        for user_data in INITIAL_USERS:
            print(f"Email: {user_data['email']}")
            print(f"Password: {user_data['password']}")
            print(f"Role: {user_data['role']}")
            print("-" * 30)
        return True

    except (LeaveTrackerError, SQLAlchemyError) as e:
        print(f"Error creating users: {e}")
        return False
    finally:
        db.close()


if __name__ == "__main__":
    success = create_initial_users()
    sys.exit(0 if success else 1)
