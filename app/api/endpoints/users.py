"""
User endpoints.

Listing and creating users is admin-only; a user's own record can be read,
changed or deleted by that user or by an admin.
"""

import logging
import secrets
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_admin_user, get_same_user_or_admin
from app.core.security import create_access_token
from app.crud import user as user_crud
from app.schemas.user import (
    UserCreateRequest,
    UserUpdateRequest,
    UserResponse,
    UserDetailResponse,
    UserCreateResponse,
)

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=201, response_model=UserCreateResponse)
def create_user(
    request: UserCreateRequest,
    db: Session = Depends(get_db),
    admin_user: dict = Depends(get_admin_user)
):
    """
    Add a user (admin only). The new user may be an admin.

    When no password is supplied a random one is generated; the user is
    expected to reset it. Returns the user and a token for them.
    """
    user_data = request.model_dump(by_alias=True, mode="json")
    if user_data["password"] is None:
        user_data["password"] = secrets.token_urlsafe(12)

    user = user_crud.register(db, user_data)
    logger.info(f"Admin {admin_user['username']} created user {user['username']}")
    return UserCreateResponse(user=user, access_token=create_access_token(user))


@router.get("/", response_model=List[UserResponse])
def list_users(
    db: Session = Depends(get_db),
    admin_user: dict = Depends(get_admin_user)
):
    """List all users (admin only)."""
    return user_crud.get_multi(db)


@router.get("/{username}", response_model=UserDetailResponse)
def get_user(
    username: str,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_same_user_or_admin)
):
    """Retrieve a user with the ids of the jobs they applied to."""
    return user_crud.get_by_username(db, username)


@router.patch("/{username}", response_model=UserResponse)
def update_user(
    username: str,
    request: UserUpdateRequest,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_same_user_or_admin)
):
    """
    Partially update a user.

    Fields can be: { firstName, lastName, password, email }
    """
    return user_crud.update(db, username, request.model_dump(by_alias=True, exclude_unset=True, mode="json"))


@router.delete("/{username}")
def delete_user(
    username: str,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_same_user_or_admin)
):
    """Delete a user."""
    user_crud.delete(db, username)
    return {"deleted": username}


@router.post("/{username}/jobs/{job_id}")
def apply_to_job(
    username: str,
    job_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_same_user_or_admin)
):
    """Apply to a job. Applying twice to the same job fails with 400."""
    user_crud.apply_to_job(db, username, job_id)
    return {"applied": job_id}
