"""
CRUD operations for User model and job applications.
"""

import logging
from typing import Any, Dict, List, Mapping
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import DuplicateError, NotFoundError, UnauthorizedError, ValidationError
from app.core.security import get_password_hash, verify_password
from app.crud.sql import build_partial_update, run

logger = logging.getLogger(__name__)

COLUMNS = {
    "firstName": "first_name",
    "lastName": "last_name",
}

UPDATABLE_FIELDS = ("password", "firstName", "lastName", "email")

_SELECT_FIELDS = (
    'username, first_name AS "firstName", last_name AS "lastName", '
    'email, is_admin AS "isAdmin"'
)


def _to_user(row: Mapping[str, Any]) -> Dict[str, Any]:
    user = dict(row)
    # SQLite hands booleans back as 0/1
    user["isAdmin"] = bool(user["isAdmin"])
    return user


def authenticate(db: Session, username: str, password: str) -> Dict[str, Any]:
    """
    Check a username/password pair.

    Returns:
        {username, firstName, lastName, email, isAdmin}

    Raises:
        UnauthorizedError: If the user does not exist or the password is wrong
    """
    row = run(
        db,
        f"""SELECT {_SELECT_FIELDS}, password
            FROM users
            WHERE username = $1""",
        [username],
    ).mappings().first()

    if row and verify_password(password, row["password"]):
        user = {key: value for key, value in row.items() if key != "password"}
        return _to_user(user)

    logger.warning(f"Failed login for {username}")
    raise UnauthorizedError("Invalid username/password")


def register(db: Session, user_data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Create a user with a hashed password.

    Args:
        db: Database session
        user_data: {username, password, firstName, lastName, email, isAdmin?}

    Raises:
        DuplicateError: If the username is taken
    """
    username = user_data["username"]

    duplicate = run(db, "SELECT username FROM users WHERE username = $1", [username]).first()
    if duplicate:
        raise DuplicateError(f"Duplicate username: {username}")

    try:
        user = run(
            db,
            f"""INSERT INTO users
                (username, password, first_name, last_name, email, is_admin)
                VALUES ($1, $2, $3, $4, $5, $6)
                RETURNING {_SELECT_FIELDS}""",
            [
                username,
                get_password_hash(user_data["password"]),
                user_data["firstName"],
                user_data["lastName"],
                user_data["email"],
                bool(user_data.get("isAdmin", False)),
            ],
        ).mappings().one()
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateError(f"Duplicate username: {username}")

    logger.info(f"Registered user {username} (admin: {bool(user_data.get('isAdmin', False))})")
    return _to_user(user)


def get_multi(db: Session) -> List[Dict[str, Any]]:
    """Retrieve all users ordered by username."""
    rows = run(
        db,
        f"""SELECT {_SELECT_FIELDS}
            FROM users
            ORDER BY username""",
    ).mappings().all()
    return [_to_user(row) for row in rows]


def get_by_username(db: Session, username: str) -> Dict[str, Any]:
    """
    Retrieve a user and the ids of the jobs they applied to.

    Returns:
        {username, firstName, lastName, email, isAdmin, jobs}

    Raises:
        NotFoundError: If no user has this username
    """
    row = run(
        db,
        f"""SELECT {_SELECT_FIELDS}
            FROM users
            WHERE username = $1""",
        [username],
    ).mappings().first()

    if not row:
        raise NotFoundError(f"No user: {username}")

    user = _to_user(row)
    applications = run(
        db,
        """SELECT job_id
           FROM applications
           WHERE username = $1
           ORDER BY job_id""",
        [username],
    ).scalars().all()
    user["jobs"] = list(applications)
    return user


def update(db: Session, username: str, user_data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a user. A new password is hashed before storage.

    Raises:
        ValidationError: If user_data is empty or names a non-updatable field
        NotFoundError: If no user has this username
    """
    unknown = [key for key in user_data if key not in UPDATABLE_FIELDS]
    if unknown:
        raise ValidationError(f"Cannot update user field: {unknown[0]}")

    user_data = dict(user_data)
    if user_data.get("password") is not None:
        user_data["password"] = get_password_hash(user_data["password"])

    set_clause, values = build_partial_update(user_data, COLUMNS)
    username_idx = len(values) + 1

    user = run(
        db,
        f"""UPDATE users
            SET {set_clause}
            WHERE username = ${username_idx}
            RETURNING {_SELECT_FIELDS}""",
        [*values, username],
    ).mappings().first()

    if not user:
        raise NotFoundError(f"No user: {username}")

    user = _to_user(user)
    db.commit()
    logger.info(f"Updated user {username}: {', '.join(user_data)}")
    return user


def delete(db: Session, username: str) -> None:
    """
    Delete a user by username.

    Raises:
        NotFoundError: If no user has this username
    """
    deleted = run(
        db,
        """DELETE
           FROM users
           WHERE username = $1
           RETURNING username""",
        [username],
    ).first()

    if not deleted:
        raise NotFoundError(f"No user: {username}")

    db.commit()
    logger.info(f"Deleted user {username}")


def apply_to_job(db: Session, username: str, job_id: int) -> None:
    """
    Record that a user applied to a job.

    Raises:
        NotFoundError: If the user or the job does not exist
        DuplicateError: If the user already applied to this job
    """
    if not run(db, "SELECT username FROM users WHERE username = $1", [username]).first():
        raise NotFoundError(f"No user: {username}")

    if not run(db, "SELECT id FROM jobs WHERE id = $1", [job_id]).first():
        raise NotFoundError(f"No job: {job_id}")

    existing = run(
        db,
        "SELECT job_id FROM applications WHERE username = $1 AND job_id = $2",
        [username, job_id],
    ).first()
    if existing:
        raise DuplicateError(f"{username} already applied to job {job_id}")

    try:
        run(
            db,
            """INSERT INTO applications (username, job_id)
               VALUES ($1, $2)""",
            [username, job_id],
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateError(f"{username} already applied to job {job_id}")

    logger.info(f"{username} applied to job {job_id}")
