"""
User routes: registration, login/logout and profile lookup.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ConfigDict, Field

from reviewhub.domain.errors import NotFound, Unauthorized, ValidationError
from reviewhub.infrastructure.persistence import Database, parse_object_id

from ..auth import (
    get_db,
    hash_password,
    login_session,
    logout_session,
    require_user,
    verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users"])


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    password: Optional[str] = None
    bio: Optional[str] = None
    profile_image_url: Optional[str] = Field(None, alias="profileImageURL")
    name: Optional[str] = Field(None, alias="Name")


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


@router.post("/register", status_code=201)
def register(body: RegisterRequest, db: Database = Depends(get_db)):
    if not body.email or not body.password:
        logger.warning("Registration rejected: missing email or password")
        raise ValidationError("Email and password are required!")

    email = body.email.strip()
    if db.get_user_by_email(email):
        logger.warning(f"Registration rejected: {email} already exists")
        raise ValidationError("User already exists!")

    user = db.create_user(
        email=email,
        password_hash=hash_password(body.password),
        name=body.name or "",
        bio=body.bio or "",
        profile_image_url=body.profile_image_url or "",
    )

    return {
        "message": "User registration was successful",
        "user": {"id": user.id, "email": user.email, "Name": user.name},
    }


@router.post("/login")
def login(body: LoginRequest, request: Request, db: Database = Depends(get_db)):
    if not body.email or not body.password:
        raise ValidationError("Email and password are required!")

    user = db.get_user_by_email(body.email.strip())
    if not user or not verify_password(body.password, user.password_hash):
        logger.warning(f"Failed login for {body.email}")
        raise Unauthorized("Invalid credentials")

    login_session(request, user)
    logger.info(f"User {user.id} logged in")
    return {"message": "Login successful", "user": user.to_public_dict()}


@router.post("/logout")
def logout(request: Request):
    logout_session(request)
    return {"message": "Logged out"}


@router.get("/user/{user_id}")
def get_user(user_id: str, db: Database = Depends(get_db)):
    user = db.get_user_by_id(parse_object_id(user_id, "Invalid user ID"))
    if not user:
        raise NotFound("User not found")
    return user.to_public_dict()


@router.post("/user/{user_id}")
def get_current_user(
    user_id: str,
    session_user: str = Depends(require_user),
    db: Database = Depends(get_db),
):
    """The logged-in user's own profile; the path id is not consulted."""
    user = db.get_user_by_id(parse_object_id(session_user, "Invalid user ID"))
    if not user:
        raise NotFound("User not found")
    return user.to_public_dict()
