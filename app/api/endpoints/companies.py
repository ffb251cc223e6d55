"""
Company endpoints.

Reads are public; writes require an admin token.
"""

from typing import List
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_admin_user
from app.crud import company as company_crud
from app.schemas.company import (
    CompanyCreateRequest,
    CompanyUpdateRequest,
    CompanyResponse,
    CompanyDetailResponse,
)

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.post("/", status_code=201, response_model=CompanyResponse)
def create_company(
    request: CompanyCreateRequest,
    db: Session = Depends(get_db),
    admin_user: dict = Depends(get_admin_user)
):
    """Create a company. Fails with 400 if the handle is taken."""
    return company_crud.create(db, request.model_dump(by_alias=True, exclude_unset=True, mode="json"))


@router.get("/", response_model=List[CompanyResponse])
def list_companies(request: Request, db: Session = Depends(get_db)):
    """
    List companies ordered by name.

    Optional query filters:
    - name: case-insensitive substring of the company name
    - minEmployees / maxEmployees: exclusive bounds on numEmployees

    Any other query parameter is rejected with 400.
    """
    return company_crud.get_multi(db, dict(request.query_params))


@router.get("/{handle}", response_model=CompanyDetailResponse)
def get_company(handle: str, db: Session = Depends(get_db)):
    """Retrieve a company with its jobs."""
    return company_crud.get_by_handle(db, handle)


@router.patch("/{handle}", response_model=CompanyResponse)
def update_company(
    handle: str,
    request: CompanyUpdateRequest,
    db: Session = Depends(get_db),
    admin_user: dict = Depends(get_admin_user)
):
    """
    Partially update a company.

    Fields can be: { name, description, numEmployees, logoUrl }
    """
    return company_crud.update(db, handle, request.model_dump(by_alias=True, exclude_unset=True, mode="json"))


@router.delete("/{handle}")
def delete_company(
    handle: str,
    db: Session = Depends(get_db),
    admin_user: dict = Depends(get_admin_user)
):
    """Delete a company and its jobs."""
    company_crud.delete(db, handle)
    return {"deleted": handle}
