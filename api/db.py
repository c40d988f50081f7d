"""Database engine holder and helpers that run the DDL engine for API requests."""

from __future__ import annotations

from typing import Any

from sqlalchemy.engine import Engine

from crossddl.columns import TARGET_DIALECTS
from crossddl.databases import DialectAdapter, get_adapter_for_engine, supported_dialects
from crossddl.errors import UnsupportedDialectError, UnsupportedTypeError
from crossddl.mappers import get_mapper
from crossddl.table import TableBuilder

_engine: Engine | None = None


def set_engine(engine: Engine | None) -> None:
    """Set the global engine (called from app lifespan)."""
    global _engine
    _engine = engine


def get_engine() -> Engine:
    """Return the global engine. Raises RuntimeError if not set."""
    if _engine is None:
        raise RuntimeError("Database engine not initialized")
    return _engine


def get_adapter() -> DialectAdapter:
    """Dialect adapter for the global engine."""
    eng = get_engine()
    adapter = get_adapter_for_engine(eng)
    if adapter is None:
        raise UnsupportedDialectError(
            f"Unsupported source dialect {eng.dialect.name}; expected one of: {', '.join(supported_dialects())}"
        )
    return adapter


def get_tables(schema: str) -> list[str]:
    """Return sorted table names in the given schema."""
    return sorted(get_adapter().fetch_tables(schema))


def resolve_table_name(schema: str, table: str) -> str | None:
    """Resolve requested table to the canonical DB table name (case-insensitive)."""
    tables = get_tables(schema)
    if table in tables:
        return table
    by_lower = {name.lower(): name for name in tables}
    return by_lower.get((table or "").lower())


def get_columns(schema: str, table: str) -> list[dict[str, Any]]:
    """Column metadata of a table plus the type each target dialect would get.

    A column whose type has no mapping to a target reports None for it.
    """
    mapper = get_mapper(get_adapter())
    result: list[dict[str, Any]] = []
    for column in mapper.fetch_columns(schema, table).values():
        entry = column.to_dict()
        target_types: dict[str, str | None] = {}
        for target in TARGET_DIALECTS:
            try:
                target_types[target.value] = mapper.target_type(column, target)
            except UnsupportedTypeError:
                target_types[target.value] = None
        entry["target_types"] = target_types
        result.append(entry)
    return result


def get_table_ddl(schema: str, table: str, target: str, skip_unused: bool = True) -> str:
    """CREATE TABLE statement for one table in the target dialect."""
    builder = TableBuilder(get_adapter(), skip_unused_columns=skip_unused)
    return builder.build_table_def(schema, table, target)
