"""
Pydantic schemas for companies.

Field names are snake_case in Python and camelCase on the wire.
"""

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional

from app.schemas.job import JobSummary


class CompanyCreateRequest(BaseModel):
    """Schema for creating a new company"""
    handle: str = Field(..., min_length=1, max_length=25)
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    num_employees: Optional[int] = Field(None, ge=0)
    logo_url: Optional[str] = None

    @field_validator("handle")
    @classmethod
    def normalize_handle(cls, v: str) -> str:
        """Handles are stored lowercase."""
        return v.lower()

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "forbid"


class CompanyUpdateRequest(BaseModel):
    """Schema for partially updating a company; handle cannot change"""
    name: str = Field(None, min_length=1)  # omit to keep; null is rejected
    description: Optional[str] = None
    num_employees: Optional[int] = Field(None, ge=0)
    logo_url: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "forbid"


class CompanyResponse(BaseModel):
    """Schema for company response"""
    handle: str
    name: str
    description: Optional[str] = None
    num_employees: Optional[int] = None
    logo_url: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class CompanyDetailResponse(CompanyResponse):
    """Company with its job postings"""
    jobs: List[JobSummary] = []
