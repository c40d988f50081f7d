"""
Dialect adapter base class for multi-database support.

Each source database (MySQL, Oracle, MSSQL) implements this interface to provide
dialect-specific quoting, escaping and catalog introspection on top of a
SQLAlchemy engine.
"""

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import text
from sqlalchemy.engine import Engine

from ..columns import Dialect
from ..errors import ParameterTypeError


class ParamType(IntEnum):
    """Kinds of value accepted by DialectAdapter.escape."""

    NULL = 0
    INT = 1
    STR = 2
    BLOB = 3
    BOOL = 5


class DialectAdapter(ABC):
    """Abstract base for database dialect adapters."""

    dialect: Dialect

    def __init__(self, engine: Optional[Engine]):
        self.engine = engine

    # ==================== Quoting ====================

    @abstractmethod
    def quote_identifier(self, name: str) -> str:
        """Quote a single identifier (table, column, schema)."""
        pass

    def quote_table(self, schema: str, table: str) -> str:
        """Quote schema.table for use in FROM clauses."""
        if schema:
            return f"{self.quote_identifier(schema)}.{self.quote_identifier(table)}"
        return self.quote_identifier(table)

    def quote_column(self, col: str) -> str:
        """Quote a column name."""
        return self.quote_identifier(col)

    def escape(self, value: Any, param_type: ParamType = ParamType.STR) -> str:
        """Render a value as a SQL literal that is safe to embed in statement text.

        Raises:
            ParameterTypeError: INT was requested for a value that is not integer-like.
        """
        if param_type == ParamType.NULL or value is None:
            return "NULL"
        if param_type == ParamType.INT:
            if isinstance(value, int) and not isinstance(value, bool):
                return str(value)
            if isinstance(value, str) and value.isascii() and value.isdigit():
                return str(int(value))
            raise ParameterTypeError(f"Parameter {value} is not an integer")
        if param_type == ParamType.BOOL:
            return "1" if value else "0"
        if param_type == ParamType.BLOB:
            return self.escape_binary(_as_bytes(value))
        return self.escape_string(str(value))

    def escape_string(self, value: str) -> str:
        return "'" + value.replace("'", "''") + "'"

    def escape_binary(self, value: bytes) -> str:
        return "0x" + value.hex()

    # ==================== Query primitives ====================

    def fetch_all(self, sql: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Run a statement and return its rows as dicts keyed by lower-cased column label."""
        with self.engine.connect() as conn:
            rows = conn.execute(text(sql), params or {}).mappings().fetchall()
        # Oracle returns keys in uppercase; normalize for case-insensitive lookup
        return [{str(k).lower(): v for k, v in row.items()} for row in rows]

    def fetch_one(self, sql: str, params: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        rows = self.fetch_all(sql, params)
        return rows[0] if rows else None

    # ==================== Catalog ====================

    @abstractmethod
    def fetch_tables(self, database: Optional[str] = None) -> Union[List[str], Dict[str, List[str]]]:
        """List tables of one schema, or {schema: [tables]} for every schema when none is given."""
        pass

    @abstractmethod
    def fetch_column_names(self, database: str, table: str) -> List[str]:
        """Column names of a table in declared ordinal order."""
        pass

    @abstractmethod
    def fetch_column_catalog(self, database: str, table: str, column: str) -> Optional[Dict[str, Any]]:
        """Raw catalog row for one column, or None if the catalog has no such column."""
        pass

    @abstractmethod
    def fetch_primary_key(self, database: str, table: str) -> List[str]:
        """Primary key columns in key order."""
        pass

    @abstractmethod
    def fetch_indexes(self, database: str, table: str) -> Dict[str, List[str]]:
        """Secondary indexes as {index_name: [columns in index order]}, primary key excluded."""
        pass

    @abstractmethod
    def time_of_day_condition(self, quoted_column: str) -> str:
        """Predicate that is true when a temporal value has a non-midnight time of day."""
        pass

    def is_unaggregatable_error(self, exc: Exception) -> bool:
        """Whether a failed sampling query means the engine cannot aggregate the column's type."""
        return False

    @staticmethod
    def _group_rows(rows: List[Dict[str, Any]], key: str, value: str) -> Dict[str, List[Any]]:
        grouped: Dict[str, List[Any]] = {}
        for row in rows:
            grouped.setdefault(row[key], []).append(row[value])
        return grouped

    @staticmethod
    def _without_primary_key(indexes: Dict[str, List[str]], primary_key: List[str]) -> Dict[str, List[str]]:
        """Drop the first index whose column list is exactly the primary key."""
        if not primary_key:
            return indexes
        for name, columns in indexes.items():
            if columns == primary_key:
                return {k: v for k, v in indexes.items() if k != name}
        return indexes


def _as_bytes(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    return str(value).encode("utf-8")
