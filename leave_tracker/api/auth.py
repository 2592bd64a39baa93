from typing import Annotated

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from ..config import Settings, get_request_settings
from ..database import get_db
from ..models.user import User
from ..schemas.user import LoginRequest, ProfileUpdate, PublicRegistration, UserResponse
from ..core.permissions import get_current_user
from ..services import identity

router = APIRouter(prefix="/auth", tags=["authentication"])


def _profile(user: User) -> dict:
    return UserResponse.model_validate(user).model_dump(mode="json")


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    draft: Annotated[PublicRegistration, Body()],
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_request_settings),
):
    """Register a new student or faculty member"""
    user = identity.register_user(db, draft, settings)
    return {
        "success": True,
        "message": "User registered successfully",
        "data": {"user": _profile(user)},
    }


@router.post("/login")
def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_request_settings),
):
    """Login and get access token"""
    token, user = identity.authenticate(
        db, credentials.email, credentials.password, credentials.role, settings
    )
    return {
        "success": True,
        "message": "Login successful",
        "token": token,
        "user": _profile(user),
    }


@router.get("/me")
def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current user information"""
    return {"success": True, "user": _profile(current_user)}


@router.put("/profile")
def update_profile(
    changes: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = identity.update_profile(db, current_user, changes)
    return {
        "success": True,
        "message": "Profile updated successfully",
        "user": _profile(user),
    }


@router.post("/logout")
def logout(current_user: User = Depends(get_current_user)):
    # Tokens are self-contained; the client discards its copy
    return {"success": True, "message": "Logged out successfully"}
