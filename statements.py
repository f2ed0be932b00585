# statements.py
"""
Builds the DML statements issued by the console.

Values never end up inside the SQL text: each one becomes an Oracle positional
bind (:1, :2, ...) carried in ``Statement.params``. Table and column names
cannot be bound, so they go through ``clean_identifier`` instead.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from errors import ValidationError
from sanitizer import clean, clean_identifier

NULL_LITERAL = "null"


@dataclass(frozen=True)
class Statement:
    sql: str
    params: tuple = ()


def _is_null_literal(value: str) -> bool:
    # Only the literal text "null" is special cased; absent values are not.
    return value.lower() == NULL_LITERAL


def _comparisons(mapping: Mapping[str, str], params: list) -> list[str]:
    parts = []
    for column, value in mapping.items():
        params.append(value)
        parts.append(f"{clean_identifier(column)} = :{len(params)}")
    return parts


def build_insert(table: str, values: Sequence[str]) -> Statement:
    """
    INSERT INTO <table> VALUES (...). Every value has to survive ``clean``
    non-empty; a value spelled "null" is sent as SQL NULL.
    """
    table_name = clean_identifier(table)
    if not values:
        raise ValidationError(f"No values supplied for insert into {table_name}.")

    params: list = []
    items = []
    for value in values:
        cleaned = clean(value)
        if not cleaned:
            raise ValidationError(f"Empty value supplied for insert into {table_name}.")
        if _is_null_literal(cleaned):
            items.append("NULL")
        else:
            params.append(value)
            items.append(f":{len(params)}")

    return Statement(f"INSERT INTO {table_name} VALUES ({', '.join(items)})", tuple(params))


def build_update(table: str, selector: Mapping[str, str], payload: Mapping[str, str]) -> Statement:
    table_name = clean_identifier(table)
    if not payload:
        raise ValidationError(f"Nothing to update in {table_name}.")
    if not selector:
        raise ValidationError(f"Update of {table_name} needs at least one key column.")

    params: list = []
    assignments = _comparisons(payload, params)
    conditions = _comparisons(selector, params)
    sql = f"UPDATE {table_name} SET {', '.join(assignments)} WHERE {' AND '.join(conditions)}"
    return Statement(sql, tuple(params))


def build_delete(table: str, selector: Mapping[str, str], condition: str | None = None) -> Statement:
    """
    ``condition`` is an extra predicate written by this application
    (e.g. "grade IS NULL"), never by the user.
    """
    table_name = clean_identifier(table)
    if not selector:
        raise ValidationError(f"Delete from {table_name} needs at least one key column.")

    params: list = []
    conditions = _comparisons(selector, params)
    if condition:
        conditions.append(condition)
    return Statement(f"DELETE FROM {table_name} WHERE {' AND '.join(conditions)}", tuple(params))


def build_select(table: str, clause: str | None = None, columns: Sequence[str] = (), params: Sequence = ()) -> Statement:
    """The trailing clause is appended verbatim and must come from application code."""
    table_name = clean_identifier(table)
    projection = ", ".join(clean_identifier(c) for c in columns) if columns else "*"
    sql = f"SELECT {projection} FROM {table_name}"
    if clause:
        sql = f"{sql} {clause}"
    return Statement(sql, tuple(params))
