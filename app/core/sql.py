"""
Helpers for building parameterized SQL fragments.

The compilers here never touch the database. They turn caller-supplied
field sets into SQL text with positional `$n` placeholders plus the list of
values to bind, which the CRUD layer then executes through SQLAlchemy.
"""

import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy import text
from sqlalchemy.sql.elements import TextClause

from app.core.exceptions import BadRequestError

# Quoted identifiers and string literals match first so that a `$n`
# inside them is left alone.
_PLACEHOLDER_RE = re.compile(r""""(?:[^"]|"")*"|'(?:[^']|'')*'|\$(\d+)""")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Escape character for LIKE patterns built from caller text
LIKE_ESCAPE = "\\"


class PlaceholderSequence:
    """
    Ordered list of bound values that hands out `$n` placeholders.

    Placeholders are numbered from 1 in the order values are added, so a
    fragment compiled by one helper can be extended by the caller (e.g. a
    trailing `WHERE id = $N`) without recomputing indices.
    """

    def __init__(self) -> None:
        self.values: List[Any] = []

    @property
    def next_index(self) -> int:
        return len(self.values) + 1

    def add(self, value: Any) -> str:
        """Bind `value` and return the placeholder that refers to it."""
        placeholder = f"${self.next_index}"
        self.values.append(value)
        return placeholder

    def bind(self, sql: str) -> Tuple[TextClause, Dict[str, Any]]:
        return bind_positional(sql, self.values)

    def __len__(self) -> int:
        return len(self.values)


def bind_positional(sql: str, values: List[Any]) -> Tuple[TextClause, Dict[str, Any]]:
    """
    Convert `$n` placeholders into SQLAlchemy named binds.

    Args:
        sql: SQL text using `$1`, `$2`, ... placeholders
        values: Values in placeholder order

    Returns:
        Tuple of (TextClause, params dict) ready for `Session.execute`

    Raises:
        ValueError: If the SQL references a placeholder with no bound value
    """
    for match in _PLACEHOLDER_RE.finditer(sql):
        if match.group(1) is None:
            continue
        index = int(match.group(1))
        if index < 1 or index > len(values):
            raise ValueError(f"Placeholder ${index} has no bound value ({len(values)} given)")

    rendered = _PLACEHOLDER_RE.sub(
        lambda m: m.group(0) if m.group(1) is None else f":p{m.group(1)}",
        sql
    )
    params = {f"p{i}": value for i, value in enumerate(values, start=1)}
    return text(rendered), params


def compile_update(
    updates: Mapping[str, Any],
    aliases: Optional[Mapping[str, str]] = None
) -> Tuple[str, PlaceholderSequence]:
    """
    Build the SET clause of a partial UPDATE.

    Args:
        updates: Field name -> new value; must not be empty
        aliases: Field name -> column name for fields whose column differs

    Returns:
        Tuple of (set clause, placeholder sequence holding the values)

    Raises:
        BadRequestError: If `updates` is empty, or a field or column name is
            not a plain identifier
    """
    if not updates:
        raise BadRequestError("No data")

    aliases = aliases or {}
    sequence = PlaceholderSequence()
    columns = []
    for field, value in updates.items():
        column = aliases.get(field, field)
        if not _IDENTIFIER_RE.match(field) or not _IDENTIFIER_RE.match(column):
            raise BadRequestError(f"Invalid field name: {field!r}")
        columns.append(f'"{column}"={sequence.add(value)}')

    return ", ".join(columns), sequence


def compile_set_clause(
    updates: Mapping[str, Any],
    aliases: Optional[Mapping[str, str]] = None
) -> Tuple[str, List[Any]]:
    """
    Build the SET clause of a partial UPDATE.

    >>> compile_set_clause({"a": 1, "b": 2}, {"b": "b_col"})
    ('"a"=$1, "b_col"=$2', [1, 2])

    The caller appends its own predicates starting at `$len(values) + 1`.
    """
    set_clause, sequence = compile_update(updates, aliases)
    return set_clause, list(sequence.values)


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so that `value` only matches itself."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def _criterion(criteria: Any, name: str) -> Any:
    if criteria is None:
        return None
    if isinstance(criteria, Mapping):
        return criteria.get(name)
    return getattr(criteria, name, None)


def compile_filter(criteria: Any) -> Tuple[str, List[Any]]:
    """
    Build the WHERE fragment for a job listing.

    Args:
        criteria: JobFilter or mapping with optional `title`, `min_salary`
            and `has_equity` keys

    Returns:
        Tuple of (where clause, values). An empty clause means no WHERE
        should be appended at all.
    """
    title = _criterion(criteria, "title")
    min_salary = _criterion(criteria, "min_salary")
    has_equity = _criterion(criteria, "has_equity")

    sequence = PlaceholderSequence()
    conditions = []

    if title is not None:
        pattern = sequence.add(f"%{escape_like(title)}%")
        conditions.append(f"LOWER(title) LIKE LOWER({pattern}) ESCAPE '{LIKE_ESCAPE}'")
    if min_salary is not None:
        conditions.append(f"salary >= {sequence.add(min_salary)}")
    # Only narrows; has_equity=False does not exclude equity-bearing jobs.
    if has_equity:
        conditions.append("equity > 0")

    return " AND ".join(conditions), sequence.values
