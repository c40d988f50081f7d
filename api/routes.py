"""API routes: list tables, inspect column metadata and render table DDL."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from api import db
from api.auth import require_bearer_token
from crossddl.columns import TARGET_DIALECTS, parse_target
from crossddl.config import Settings
from crossddl.errors import ColumnNotFoundError, UnsupportedDialectError, UnsupportedTypeError

router = APIRouter(prefix="/api", tags=["ddl"])

_SCHEMA_HELP = "Database/schema/owner to read; defaults to SOURCE_SCHEMA or SCHEMA env."


def _resolve_schema(schema: str | None) -> str:
    if schema and schema.strip():
        return schema.strip()
    default = Settings.from_env().schema
    if not default:
        raise HTTPException(status_code=422, detail="schema is required (query parameter or SOURCE_SCHEMA env)")
    return default


def _resolve_table(schema_name: str, table: str) -> str:
    try:
        resolved = db.resolve_table_name(schema_name, table)
    except Exception as e:
        raise HTTPException(status_code=500, detail={"detail": "Database error", "schema": schema_name}) from e
    if not resolved:
        raise HTTPException(status_code=404, detail={"detail": "Table not found", "schema": schema_name})
    return resolved


@router.get("/tables")
def list_tables(
    _: None = Depends(require_bearer_token),
    schema: str | None = Query(None, description=_SCHEMA_HELP),
):
    """List table names of a schema."""
    schema_name = _resolve_schema(schema)
    try:
        tables = db.get_tables(schema_name)
    except UnsupportedDialectError as e:
        raise HTTPException(status_code=422, detail={"detail": str(e), "schema": schema_name}) from e
    except Exception as e:
        raise HTTPException(status_code=500, detail={"detail": "Database error", "schema": schema_name}) from e
    return {"schema": schema_name, "tables": tables}


@router.get("/{table}/columns")
def get_columns(
    table: str,
    _: None = Depends(require_bearer_token),
    schema: str | None = Query(None, description=_SCHEMA_HELP),
):
    """Sampled column metadata of a table, with the type each target dialect would use."""
    schema_name = _resolve_schema(schema)
    resolved_table = _resolve_table(schema_name, table)
    try:
        columns = db.get_columns(schema_name, resolved_table)
    except ColumnNotFoundError as e:
        raise HTTPException(status_code=404, detail={"detail": str(e), "schema": schema_name}) from e
    except Exception as e:
        raise HTTPException(status_code=500, detail={"detail": "Database error", "schema": schema_name}) from e
    return {"schema": schema_name, "table": resolved_table, "columns": columns}


@router.get("/{table}/ddl")
def get_table_ddl(
    table: str,
    _: None = Depends(require_bearer_token),
    schema: str | None = Query(None, description=_SCHEMA_HELP),
    target: str = Query("mysql", description=f"One of: {', '.join(d.value for d in TARGET_DIALECTS)}"),
    skip_unused: bool = Query(True, description="Drop columns holding at most one distinct value."),
):
    """CREATE TABLE statement for the table in the target dialect."""
    schema_name = _resolve_schema(schema)
    try:
        target_dialect = parse_target(target)
    except UnsupportedDialectError as e:
        raise HTTPException(status_code=422, detail={"detail": str(e), "schema": schema_name}) from e
    resolved_table = _resolve_table(schema_name, table)
    try:
        ddl = db.get_table_ddl(schema_name, resolved_table, target_dialect.value, skip_unused=skip_unused)
    except ColumnNotFoundError as e:
        raise HTTPException(status_code=404, detail={"detail": str(e), "schema": schema_name}) from e
    except (UnsupportedTypeError, UnsupportedDialectError) as e:
        raise HTTPException(status_code=422, detail={"detail": str(e), "schema": schema_name}) from e
    except Exception as e:
        raise HTTPException(status_code=500, detail={"detail": "Database error", "schema": schema_name}) from e
    return {
        "schema": schema_name,
        "table": resolved_table,
        "target": target_dialect.value,
        "ddl": ddl,
    }
