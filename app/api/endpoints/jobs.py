from typing import List
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_admin_user
from app.crud import job as job_crud
from app.schemas.job import JobCreateRequest, JobUpdateRequest, JobResponse

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.post("/", status_code=201, response_model=JobResponse)
def create_job(
    request: JobCreateRequest,
    db: Session = Depends(get_db),
    admin_user: dict = Depends(get_admin_user)
):
    """
    Create a new job posting.

    Returns the job with its generated id. Fails with 404 if the company
    does not exist and 400 if the company already posted this title.
    """
    return job_crud.create(db, request.model_dump(by_alias=True, exclude_unset=True, mode="json"))


@router.get("/", response_model=List[JobResponse])
def list_jobs(request: Request, db: Session = Depends(get_db)):
    """
    List jobs ordered by title.

    Optional query filters:
    - title: case-insensitive substring of the job title
    - minSalary: salary strictly above this value
    - hasEquity: true to only list jobs offering equity
    """
    return job_crud.get_multi(db, dict(request.query_params))


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: int, db: Session = Depends(get_db)):
    """Retrieve a job by ID."""
    return job_crud.get_by_id(db, job_id)


@router.patch("/{job_id}", response_model=JobResponse)
def update_job(
    job_id: int,
    request: JobUpdateRequest,
    db: Session = Depends(get_db),
    admin_user: dict = Depends(get_admin_user)
):
    """
    Partially update a job.

    Fields can be: { title, salary, equity }
    """
    return job_crud.update(db, job_id, request.model_dump(by_alias=True, exclude_unset=True, mode="json"))


@router.delete("/{job_id}")
def delete_job(
    job_id: int,
    db: Session = Depends(get_db),
    admin_user: dict = Depends(get_admin_user)
):
    """Delete a job by ID."""
    job_crud.delete(db, job_id)
    return {"deleted": job_id}
