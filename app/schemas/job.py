from decimal import Decimal
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Optional


class JobCreateRequest(BaseModel):
    """Schema for creating a new job"""
    title: str = Field(..., min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[Decimal] = Field(None, ge=0, le=1, description="Fraction of the company, 0 to 1")
    company_handle: str = Field(..., min_length=1, max_length=25)

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "forbid"


class JobUpdateRequest(BaseModel):
    """Schema for partially updating a job; id and companyHandle cannot change"""
    title: str = Field(None, min_length=1)  # omit to keep; null is rejected
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[Decimal] = Field(None, ge=0, le=1)

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "forbid"


class JobSummary(BaseModel):
    """Job as listed under its company"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[str] = None


class JobResponse(JobSummary):
    """Schema for job response"""
    company_handle: str

    class Config:
        alias_generator = to_camel
        populate_by_name = True
