"""
SQL fragment builders shared by the CRUD modules.

Fragments use 1-based positional placeholders ($1, $2, ...) and always come
paired with the list of values to bind, so caller input never ends up inside
SQL text. `run` turns the placeholders into SQLAlchemy bind parameters and
executes the statement on the request's session.
"""

import logging
import re
from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Optional, Sequence

from sqlalchemy import text
from sqlalchemy.engine import Result
from sqlalchemy.orm import Session

from app.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\$(\d+)")


class SqlFragment(NamedTuple):
    """A clause with its positionally matched bind values."""
    clause: str
    values: List[Any]


def map_column(name: str, mapping: Mapping[str, str]) -> str:
    """Storage column for an external field name; unmapped names pass through."""
    return mapping.get(name, name)


def build_partial_update(data: Mapping[str, Any], column_mapping: Mapping[str, str]) -> SqlFragment:
    """
    Build the SET part of a partial UPDATE.

    Args:
        data: External field name -> new value, in the order to assign them
        column_mapping: External field name -> column name, for names that differ

    Returns:
        SqlFragment such as ('"first_name" = $1, "age" = $2', ["Aliya", 32]).
        The caller binds its row selector at $len(values)+1.

    Raises:
        ValidationError: If data is empty
    """
    if not data:
        raise ValidationError("No data")

    assignments = [
        f'"{map_column(name, column_mapping)}" = ${position}'
        for position, name in enumerate(data, start=1)
    ]
    return SqlFragment(", ".join(assignments), list(data.values()))


def to_int(value: Any) -> int:
    """Coerce a query-string value to an integer."""
    if isinstance(value, bool):
        raise ValidationError(f"Expected an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Expected an integer, got {value!r}")


def parse_flag(value: Any) -> bool:
    """Coerce a query-string value to a boolean flag."""
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    raise ValidationError(f"Expected true or false, got {value!r}")


def contains_pattern(value: Any) -> str:
    """LIKE pattern for a case-insensitive substring match on lower(column)."""
    return f"%{str(value).lower()}%"


def _identity(value: Any) -> Any:
    return value


class FilterSpec(NamedTuple):
    """How one recognized query parameter becomes a WHERE predicate."""
    column: str
    operator: str
    transform: Callable[[Any], Any] = _identity


def check_filter_keys(params: Mapping[str, Any], recognized_filters: Mapping[str, FilterSpec]) -> None:
    """Raise ValidationError naming the first key not in recognized_filters."""
    for key in params:
        if key not in recognized_filters:
            logger.warning(f"Rejected unknown filter parameter: {key}")
            raise ValidationError(f"Invalid filter parameter: {key}")


def build_filter_clause(params: Mapping[str, Any], recognized_filters: Mapping[str, FilterSpec]) -> SqlFragment:
    """
    Build a WHERE clause from optional query parameters.

    Every key must be in recognized_filters. Each key contributes one
    parenthesized predicate, in the order the keys were given:

        {"name": "net", "minEmployees": "10"}
        -> ("WHERE (lower(name) LIKE $1) AND (num_employees > $2)", ["%net%", 10])

    Empty params give an empty clause and no values.

    Raises:
        ValidationError: On the first unknown key, or a value its transform rejects
    """
    check_filter_keys(params, recognized_filters)

    if not params:
        return SqlFragment("", [])

    predicates = []
    values = []
    for position, (key, value) in enumerate(params.items(), start=1):
        spec = recognized_filters[key]
        predicates.append(f"({spec.column} {spec.operator} ${position})")
        values.append(spec.transform(value))

    return SqlFragment("WHERE " + " AND ".join(predicates), values)


def run(db: Session, sql: str, values: Optional[Sequence[Any]] = None) -> Result:
    """
    Execute a statement written with $N placeholders.

    $N is rewritten to the named bind :pN and values[N-1] is bound to it.
    """
    values = list(values or [])
    params: Dict[str, Any] = {f"p{position}": value for position, value in enumerate(values, start=1)}
    statement = text(_PLACEHOLDER.sub(lambda match: f":p{match.group(1)}", sql))
    return db.execute(statement, params)
