"""
CRUD operations for Job model.

Jobs are keyed by a generated id and belong to one company. Equity comes
back as a numeric string so fractions like 0.01 survive the round trip.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import DuplicateError, NotFoundError, ValidationError
from app.crud.sql import (
    FilterSpec,
    build_filter_clause,
    build_partial_update,
    check_filter_keys,
    contains_pattern,
    parse_flag,
    run,
    to_int,
)

logger = logging.getLogger(__name__)

COLUMNS = {
    "companyHandle": "company_handle",
}

UPDATABLE_FIELDS = ("title", "salary", "equity")

FILTERS = {
    "title": FilterSpec("lower(title)", "LIKE", contains_pattern),
    "minSalary": FilterSpec("salary", ">", to_int),
    # Only hasEquity=true reaches the builder; it means "equity above zero"
    "hasEquity": FilterSpec("equity", ">", lambda flag: 0),
}

_SELECT_FIELDS = 'id, title, salary, equity, company_handle AS "companyHandle"'


def format_equity(value: Any) -> Optional[str]:
    """Equity as a numeric string, whatever the driver hands back."""
    if value is None:
        return None
    if isinstance(value, float):
        value = Decimal(repr(value))
    return str(value)


def _to_job(row: Mapping[str, Any]) -> Dict[str, Any]:
    job = dict(row)
    job["equity"] = format_equity(job["equity"])
    return job


def create(db: Session, job_data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Create a new job in the database.

    Args:
        db: Database session
        job_data: {title, salary?, equity?, companyHandle}

    Returns:
        {id, title, salary, equity, companyHandle} with the generated id

    Raises:
        NotFoundError: If the company does not exist
        DuplicateError: If the company already posted a job with this title
    """
    title = job_data["title"]
    company_handle = job_data["companyHandle"]

    company = run(db, "SELECT handle FROM companies WHERE handle = $1", [company_handle]).first()
    if not company:
        raise NotFoundError(f"No company: {company_handle}")

    duplicate = run(
        db,
        "SELECT id FROM jobs WHERE title = $1 AND company_handle = $2",
        [title, company_handle],
    ).first()
    if duplicate:
        raise DuplicateError(f"Duplicate job: {title} at {company_handle}")

    try:
        job = run(
            db,
            f"""INSERT INTO jobs
                (title, salary, equity, company_handle)
                VALUES ($1, $2, $3, $4)
                RETURNING {_SELECT_FIELDS}""",
            [title, job_data.get("salary"), job_data.get("equity"), company_handle],
        ).mappings().one()
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateError(f"Duplicate job: {title} at {company_handle}")

    logger.info(f"Created job {job['id']}: {title} at {company_handle}")
    return _to_job(job)


def get_multi(db: Session, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    Retrieve jobs ordered by title, optionally filtered.

    Args:
        db: Database session
        filters: Any of {title, minSalary, hasEquity}. title matches
            case-insensitively anywhere in the job title; minSalary is
            exclusive; hasEquity=true keeps jobs with non-zero equity and
            hasEquity=false applies no equity restriction.

    Raises:
        ValidationError: On unknown filter keys or unparseable values
    """
    filters = dict(filters or {})
    check_filter_keys(filters, FILTERS)

    if "hasEquity" in filters and not parse_flag(filters["hasEquity"]):
        del filters["hasEquity"]

    where, values = build_filter_clause(filters, FILTERS)

    rows = run(
        db,
        f"""SELECT {_SELECT_FIELDS}
            FROM jobs
            {where}
            ORDER BY title, id""",
        values,
    ).mappings().all()

    return [_to_job(row) for row in rows]


def get_by_id(db: Session, job_id: int) -> Dict[str, Any]:
    """
    Retrieve a job by its ID.

    Raises:
        NotFoundError: If no job has this id
    """
    job = run(
        db,
        f"""SELECT {_SELECT_FIELDS}
            FROM jobs
            WHERE id = $1""",
        [job_id],
    ).mappings().first()

    if not job:
        raise NotFoundError(f"No job: {job_id}")

    return _to_job(job)


def update(db: Session, job_id: int, job_data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a job. Only title, salary and equity can change.

    Raises:
        ValidationError: If job_data is empty or names id/companyHandle/unknown fields
        NotFoundError: If no job has this id
        DuplicateError: If the company already posted a job with the new title
    """
    unknown = [key for key in job_data if key not in UPDATABLE_FIELDS]
    if unknown:
        raise ValidationError(f"Cannot update job field: {unknown[0]}")

    set_clause, values = build_partial_update(job_data, COLUMNS)
    job_id_idx = len(values) + 1

    try:
        job = run(
            db,
            f"""UPDATE jobs
                SET {set_clause}
                WHERE id = ${job_id_idx}
                RETURNING {_SELECT_FIELDS}""",
            [*values, job_id],
        ).mappings().first()
    except IntegrityError:
        db.rollback()
        raise DuplicateError(f"Duplicate job: {job_data.get('title')}")

    if not job:
        raise NotFoundError(f"No job: {job_id}")

    job = _to_job(job)
    db.commit()
    logger.info(f"Updated job {job_id}: {', '.join(job_data)}")
    return job


def delete(db: Session, job_id: int) -> None:
    """
    Delete a job by ID.

    Raises:
        NotFoundError: If no job has this id
    """
    deleted = run(
        db,
        """DELETE
           FROM jobs
           WHERE id = $1
           RETURNING id""",
        [job_id],
    ).first()

    if not deleted:
        raise NotFoundError(f"No job: {job_id}")

    db.commit()
    logger.info(f"Deleted job {job_id}")
