"""
Pydantic schemas for users, authentication and applications.
"""

from pydantic import BaseModel, EmailStr, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional


class UserRegisterRequest(BaseModel):
    """Request schema for self-registration (never an admin)."""
    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(..., min_length=5, max_length=72)  # bcrypt limit
    first_name: str = Field(..., min_length=1, max_length=30)
    last_name: str = Field(..., min_length=1, max_length=30)
    email: EmailStr

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "forbid"


class UserCreateRequest(BaseModel):
    """Request schema for admins adding a user; a password is generated when omitted."""
    username: str = Field(..., min_length=1, max_length=25)
    password: Optional[str] = Field(None, min_length=5, max_length=72)
    first_name: str = Field(..., min_length=1, max_length=30)
    last_name: str = Field(..., min_length=1, max_length=30)
    email: EmailStr
    is_admin: bool = False

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "forbid"


class UserUpdateRequest(BaseModel):
    """Request schema for partially updating a user."""
    # Fields may be omitted but not set to null
    password: str = Field(None, min_length=5, max_length=72)
    first_name: str = Field(None, min_length=1, max_length=30)
    last_name: str = Field(None, min_length=1, max_length=30)
    email: EmailStr = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "forbid"


class UserLoginRequest(BaseModel):
    """Request schema for obtaining a token."""
    username: str
    password: str


class TokenResponse(BaseModel):
    """JWT token response."""
    access_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    """User profile response (no password)."""
    username: str
    first_name: str
    last_name: str
    email: str
    is_admin: bool

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class UserDetailResponse(UserResponse):
    """User profile with the ids of jobs applied to."""
    jobs: List[int] = []


class UserCreateResponse(BaseModel):
    """Admin-created user plus a token for them."""
    user: UserResponse
    access_token: str
    token_type: str = "bearer"
