"""
CRUD operations for Company model.

Statements are plain parameterized SQL built with the helpers in app.crud.sql.
Rows come back already reshaped to the API's camelCase field names.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import DuplicateError, NotFoundError, ValidationError
from app.crud.job import format_equity
from app.crud.sql import FilterSpec, build_filter_clause, build_partial_update, contains_pattern, run, to_int

logger = logging.getLogger(__name__)

COLUMNS = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}

UPDATABLE_FIELDS = ("name", "description", "numEmployees", "logoUrl")

FILTERS = {
    "name": FilterSpec("lower(name)", "LIKE", contains_pattern),
    "minEmployees": FilterSpec("num_employees", ">", to_int),
    "maxEmployees": FilterSpec("num_employees", "<", to_int),
}

_SELECT_FIELDS = 'handle, name, description, num_employees AS "numEmployees", logo_url AS "logoUrl"'


def create(db: Session, company_data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Create a new company.

    Args:
        db: Database session
        company_data: {handle, name, description?, numEmployees?, logoUrl?}

    Returns:
        {handle, name, description, numEmployees, logoUrl}

    Raises:
        DuplicateError: If a company with this handle already exists
    """
    handle = company_data["handle"]

    duplicate = run(db, "SELECT handle FROM companies WHERE handle = $1", [handle]).first()
    if duplicate:
        raise DuplicateError(f"Duplicate company: {handle}")

    try:
        company = run(
            db,
            f"""INSERT INTO companies
                (handle, name, description, num_employees, logo_url)
                VALUES ($1, $2, $3, $4, $5)
                RETURNING {_SELECT_FIELDS}""",
            [
                handle,
                company_data["name"],
                company_data.get("description"),
                company_data.get("numEmployees"),
                company_data.get("logoUrl"),
            ],
        ).mappings().one()
        db.commit()
    except IntegrityError:
        # A concurrent insert won the race, or the name is taken
        db.rollback()
        raise DuplicateError(f"Duplicate company: {handle}")

    logger.info(f"Created company {handle}")
    return dict(company)


def get_multi(db: Session, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    Retrieve companies ordered by name, optionally filtered.

    Args:
        db: Database session
        filters: Any of {name, minEmployees, maxEmployees}. name matches
            case-insensitively anywhere in the company name; the employee
            bounds are exclusive.

    Raises:
        ValidationError: On unknown filter keys, non-integer bounds, or
            minEmployees greater than maxEmployees
    """
    filters = dict(filters or {})

    where, values = build_filter_clause(filters, FILTERS)

    if "minEmployees" in filters and "maxEmployees" in filters:
        if to_int(filters["minEmployees"]) > to_int(filters["maxEmployees"]):
            raise ValidationError("minEmployees cannot be greater than maxEmployees")

    rows = run(
        db,
        f"""SELECT {_SELECT_FIELDS}
            FROM companies
            {where}
            ORDER BY name""",
        values,
    ).mappings().all()

    return [dict(row) for row in rows]


def get_by_handle(db: Session, handle: str) -> Dict[str, Any]:
    """
    Retrieve a company and its jobs.

    Returns:
        {handle, name, description, numEmployees, logoUrl, jobs}
        where jobs is [{id, title, salary, equity}, ...] ordered by id

    Raises:
        NotFoundError: If no company has this handle
    """
    rows = run(
        db,
        """SELECT c.handle,
                  c.name,
                  c.description,
                  c.num_employees AS "numEmployees",
                  c.logo_url AS "logoUrl",
                  j.id AS "jobId",
                  j.title AS "jobTitle",
                  j.salary AS "jobSalary",
                  j.equity AS "jobEquity"
           FROM companies c
           LEFT JOIN jobs j ON j.company_handle = c.handle
           WHERE c.handle = $1
           ORDER BY j.id""",
        [handle],
    ).mappings().all()

    if not rows:
        raise NotFoundError(f"No company: {handle}")

    first = rows[0]
    company = {key: first[key] for key in ("handle", "name", "description", "numEmployees", "logoUrl")}
    company["jobs"] = [
        {
            "id": row["jobId"],
            "title": row["jobTitle"],
            "salary": row["jobSalary"],
            "equity": format_equity(row["jobEquity"]),
        }
        for row in rows
        if row["jobId"] is not None
    ]
    return company


def update(db: Session, handle: str, company_data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a company; only the supplied fields change.

    Args:
        db: Database session
        handle: Company to update
        company_data: Any of {name, description, numEmployees, logoUrl}

    Raises:
        ValidationError: If company_data is empty or names a non-updatable field
        NotFoundError: If no company has this handle
        DuplicateError: If the new name belongs to another company
    """
    unknown = [key for key in company_data if key not in UPDATABLE_FIELDS]
    if unknown:
        raise ValidationError(f"Cannot update company field: {unknown[0]}")

    set_clause, values = build_partial_update(company_data, COLUMNS)
    handle_idx = len(values) + 1

    try:
        company = run(
            db,
            f"""UPDATE companies
                SET {set_clause}
                WHERE handle = ${handle_idx}
                RETURNING {_SELECT_FIELDS}""",
            [*values, handle],
        ).mappings().first()
    except IntegrityError:
        db.rollback()
        raise DuplicateError(f"Duplicate company name: {company_data.get('name')}")

    if not company:
        raise NotFoundError(f"No company: {handle}")

    company = dict(company)
    db.commit()
    logger.info(f"Updated company {handle}: {', '.join(company_data)}")
    return company


def delete(db: Session, handle: str) -> None:
    """
    Delete a company by handle. Its jobs go with it (ON DELETE CASCADE).

    Raises:
        NotFoundError: If no company has this handle
    """
    deleted = run(
        db,
        """DELETE
           FROM companies
           WHERE handle = $1
           RETURNING handle""",
        [handle],
    ).first()

    if not deleted:
        raise NotFoundError(f"No company: {handle}")

    db.commit()
    logger.info(f"Deleted company {handle}")
