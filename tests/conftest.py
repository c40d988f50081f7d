"""Shared fixtures: an in-memory source database behind the real dialect adapters.

The fake sources override only the catalog listing methods. Every sampling,
probe and SHOW COLUMNS statement still goes through fetch_all as SQL text and
is answered from the column's in-memory values, so the statements the engine
generates are exercised as written.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, time
from typing import Any, Dict, List, Optional

import pytest
from sqlalchemy.exc import DBAPIError

from crossddl.databases import MssqlAdapter, MySQLAdapter, OracleAdapter

SCHEMA = "shop"

_DISTINCT_COUNT = re.compile(
    r"^SELECT COUNT\(\*\) AS value_count FROM \(SELECT (?P<col>\S+) FROM (?P<table>\S+) GROUP BY \S+\) distinctvalues$"
)
_BOUNDS = re.compile(
    r"^SELECT MIN\((?P<col>\S+)\) AS rowmin, MAX\(\S+\) AS rowmax FROM (?P<table>\S+) WHERE \S+ IS NOT NULL$"
)
_NON_NULL = re.compile(
    r"^SELECT COUNT\(\*\) AS value_count FROM (?P<table>\S+) WHERE (?P<col>\S+) IS NOT NULL(?P<time_of_day> AND .+)?$"
)
_DISTINCT_VALUES = re.compile(
    r"^SELECT DISTINCT (?P<col>\S+) FROM (?P<table>\S+) WHERE \S+ IS NOT NULL ORDER BY \S+ ASC$"
)
_SHOW_COLUMNS = re.compile(r"^SHOW COLUMNS FROM (?P<table>\S+) LIKE (?P<col>'.*')$")


@dataclass
class FakeColumn:
    name: str
    catalog: Dict[str, Any]
    values: List[Any] = field(default_factory=list)
    declaration: Optional[str] = None
    unaggregatable: bool = False

    @property
    def non_null(self) -> List[Any]:
        return [v for v in self.values if v is not None]


@dataclass
class FakeTable:
    name: str
    columns: List[FakeColumn]
    primary_key: List[str] = field(default_factory=list)
    indexes: Dict[str, List[str]] = field(default_factory=dict)

    def column(self, name: str) -> Optional[FakeColumn]:
        for column in self.columns:
            if column.name == name:
                return column
        return None


def _unquote(identifier: str) -> str:
    return identifier.split(".")[-1][1:-1]


class FakeSourceMixin:
    """Answers catalog calls and sampling SQL from FakeTable definitions."""

    def __init__(self, *tables: FakeTable, schema: str = SCHEMA):
        super().__init__(None)
        self.schema = schema
        self.tables = {table.name: table for table in tables}
        self.queries: List[str] = []

    # Catalog

    def fetch_tables(self, database=None):
        if database is None:
            return {self.schema: sorted(self.tables)}
        return sorted(self.tables) if database == self.schema else []

    def fetch_column_names(self, database, table):
        return [column.name for column in self.tables[table].columns]

    def fetch_column_catalog(self, database, table, column):
        fake_table = self.tables.get(table)
        fake_column = fake_table.column(column) if fake_table else None
        return dict(fake_column.catalog) if fake_column else None

    def fetch_primary_key(self, database, table):
        return list(self.tables[table].primary_key)

    def fetch_indexes(self, database, table):
        return {name: list(cols) for name, cols in self.tables[table].indexes.items()}

    # Statements

    def _column(self, match) -> FakeColumn:
        table = self.tables[_unquote(match.group("table"))]
        column = table.column(_unquote(match.group("col")))
        assert column is not None, f"unknown column in {match.string}"
        return column

    def _check_aggregatable(self, column: FakeColumn, sql: str) -> None:
        if column.unaggregatable:
            raise DBAPIError(sql, {}, Exception("ORA-00997: illegal use of LONG datatype"))

    def fetch_all(self, sql, params=None):
        sql = " ".join(sql.split())
        self.queries.append(sql)

        match = _DISTINCT_COUNT.match(sql)
        if match:
            column = self._column(match)
            self._check_aggregatable(column, sql)
            return [{"value_count": len(set(column.values))}]

        match = _BOUNDS.match(sql)
        if match:
            column = self._column(match)
            self._check_aggregatable(column, sql)
            values = column.non_null
            return [{"rowmin": min(values) if values else None, "rowmax": max(values) if values else None}]

        match = _NON_NULL.match(sql)
        if match:
            values = self._column(match).non_null
            if match.group("time_of_day"):
                values = [v for v in values if isinstance(v, datetime) and v.time() != time(0)]
            return [{"value_count": len(values)}]

        match = _DISTINCT_VALUES.match(sql)
        if match:
            column = self._column(match)
            return [{column.name.lower(): value} for value in sorted(set(column.non_null))]

        match = _SHOW_COLUMNS.match(sql)
        if match:
            column = self._column(match)
            return [{"field": column.name, "type": column.declaration}] if column.declaration else []

        raise AssertionError(f"Unexpected query: {sql}")

    def queries_matching(self, prefix: str) -> List[str]:
        return [sql for sql in self.queries if sql.startswith(prefix)]


class FakeMySQLSource(FakeSourceMixin, MySQLAdapter):
    pass


class FakeOracleSource(FakeSourceMixin, OracleAdapter):
    pass


class FakeMssqlSource(FakeSourceMixin, MssqlAdapter):
    pass


def mysql_column(
    name: str,
    data_type: str,
    values=(),
    *,
    length: Optional[int] = None,
    precision: Optional[int] = None,
    scale: Optional[int] = None,
    nullable: bool = False,
    unsigned: bool = False,
    declaration: Optional[str] = None,
) -> FakeColumn:
    column_type = declaration or data_type.lower() + (" unsigned" if unsigned else "")
    catalog = {
        "table_schema": SCHEMA,
        "column_name": name,
        "data_type": data_type.lower(),
        "character_maximum_length": length,
        "numeric_precision": precision,
        "scale": scale,
        "is_nullable": "YES" if nullable else "NO",
        "column_type": column_type,
    }
    return FakeColumn(name, catalog, list(values), declaration=declaration)


def oracle_column(
    name: str,
    data_type: str,
    values=(),
    *,
    data_length: int = 22,
    precision: Optional[int] = None,
    scale: Optional[int] = None,
    char_length: int = 0,
    nullable: bool = False,
    unaggregatable: bool = False,
) -> FakeColumn:
    catalog = {
        "table_schema": SCHEMA,
        "column_name": name,
        "data_type": data_type,
        "data_length": data_length,
        "data_precision": precision,
        "data_scale": scale,
        "nullable": "Y" if nullable else "N",
        "char_length": char_length,
    }
    return FakeColumn(name, catalog, list(values), unaggregatable=unaggregatable)


def mssql_column(
    name: str,
    data_type: str,
    values=(),
    *,
    length: Optional[int] = None,
    precision: Optional[int] = None,
    scale: Optional[int] = None,
    nullable: bool = False,
) -> FakeColumn:
    catalog = {
        "table_schema": SCHEMA,
        "column_name": name,
        "data_type": data_type.lower(),
        "character_maximum_length": length,
        "numeric_precision": precision,
        "scale": scale,
        "is_nullable": "YES" if nullable else "NO",
    }
    return FakeColumn(name, catalog, list(values))


@pytest.fixture()
def orders_table() -> FakeTable:
    """MySQL-source table with keys, indexes, an enum candidate and an unused column."""
    ids = [1, 2, 3, 4, 5]
    return FakeTable(
        name="Orders",
        columns=[
            mysql_column("id", "int", ids, precision=10, scale=0),
            mysql_column("customer_code", "varchar", [f"C{i:03d}" for i in ids], length=100),
            mysql_column("email", "varchar", [f"user{i}@example.com" for i in ids], length=120),
            mysql_column("status", "varchar", ["new", "paid", "new", "shipped", "paid"], length=20),
            mysql_column("notes", "text", [f"note {i}" for i in ids], length=65535),
            mysql_column("legacy_flag", "tinyint", [0, 0, 0, 0, 0], precision=3, scale=0),
            mysql_column("created_at", "datetime", [datetime(2024, 1, i, 9, 30) for i in ids], scale=0),
        ],
        primary_key=["id"],
        indexes={
            "IDX_Created": ["created_at"],
            "idx_customer": ["customer_code"],
            "idx_legacy": ["legacy_flag", "id"],
            "idx_notes": ["notes"],
            "idx_wide": ["customer_code", "email"],
        },
    )


@pytest.fixture()
def orders_source(orders_table) -> FakeMySQLSource:
    return FakeMySQLSource(orders_table)
