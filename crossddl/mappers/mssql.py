"""Type mapper for SQL Server / Azure SQL sources."""

from typing import Any, Dict, Optional

from ..columns import ColumnMetadata, Dialect
from .base import DeclaredColumn, TypeMapper, optional_int, timestamp_type_for_range

# Declared length of a (N)VARCHAR(MAX) / VARBINARY(MAX) column
MAX_LENGTH = -1

_UNIQUEIDENTIFIER_LENGTH = 36

_DATETIME_TYPES = frozenset({"DATETIME", "DATETIME2", "SMALLDATETIME"})

_MYSQL_TYPES = {
    "BIT": "TINYINT UNSIGNED",
    "TINYINT": "TINYINT UNSIGNED",
    "SMALLINT": "SMALLINT",
    "INT": "INT",
    "BIGINT": "BIGINT",
    "DECIMAL": "DECIMAL",
    "NUMERIC": "DECIMAL",
    "MONEY": "DECIMAL",
    "SMALLMONEY": "DECIMAL",
    "FLOAT": "FLOAT",
    "REAL": "DOUBLE",
    "DATE": "DATE",
    "TIME": "TIME",
    "CHAR": "CHAR",
    "NCHAR": "CHAR",
    "TEXT": "LONGTEXT",
    "NTEXT": "LONGTEXT",
    "BINARY": "BINARY",
    "IMAGE": "LONGBLOB",
    "ROWVERSION": "VARCHAR",
    "TIMESTAMP": "VARCHAR",
    "HIERARCHYID": "VARCHAR",
    "XML": "VARCHAR",
    "UNIQUEIDENTIFIER": "CHAR",
}

_ORACLE_TYPES = {
    "FLOAT": "BINARY_FLOAT",
    "REAL": "BINARY_DOUBLE",
    "DATE": "DATE",
    "TIME": "TIME",
    "CHAR": "NCHAR",
    "NCHAR": "NCHAR",
    "UNIQUEIDENTIFIER": "CHAR",
}
for _name in ("BIT", "TINYINT", "SMALLINT", "INT", "BIGINT", "DECIMAL", "NUMERIC", "MONEY", "SMALLMONEY"):
    _ORACLE_TYPES[_name] = "NUMBER"
for _name in ("VARCHAR", "NVARCHAR", "TEXT", "NTEXT", "ROWVERSION", "TIMESTAMP", "HIERARCHYID", "XML"):
    _ORACLE_TYPES[_name] = "NVARCHAR"
for _name in ("BINARY", "VARBINARY", "IMAGE"):
    _ORACLE_TYPES[_name] = "BLOB"


class MSSQLSourceMapper(TypeMapper):
    """SQL Server source."""

    source = Dialect.MSSQL
    LENGTH_TYPES = frozenset({
        "TINYINT", "SMALLINT", "INT", "BIGINT",
        "DECIMAL", "NUMERIC", "MONEY", "SMALLMONEY",
        "BIT", "FLOAT", "REAL",
        "CHAR", "NCHAR", "VARCHAR", "NVARCHAR",
        "BINARY", "VARBINARY",
        "ROWVERSION", "TIMESTAMP", "HIERARCHYID", "XML",
    })
    DISTINCT_SKIP_TYPES = frozenset({"TEXT", "NTEXT", "IMAGE"})
    BOUNDS_SKIP_TYPES = frozenset({"BIT", "TEXT", "NTEXT", "IMAGE", "UNIQUEIDENTIFIER"})

    def read_catalog(self, row: Dict[str, Any]) -> DeclaredColumn:
        return DeclaredColumn(
            original_type=str(row["data_type"]).upper(),
            length=optional_int(row["character_maximum_length"] or row["numeric_precision"]),
            precision=optional_int(row["numeric_precision"]),
            scale=optional_int(row["scale"]),
            is_nullable=row["is_nullable"] == "YES",
        )

    def column_length(self, original_type: str, length: Optional[int]) -> int:
        if original_type == "UNIQUEIDENTIFIER":
            return _UNIQUEIDENTIFIER_LENGTH
        return super().column_length(original_type, length)

    def to_mysql_type(self, column: ColumnMetadata) -> str:
        original_type = column.original_type
        if original_type in _DATETIME_TYPES:
            return "DATETIME" if self.has_time_of_day(column) else "DATE"
        if original_type == "DATETIMEOFFSET":
            return timestamp_type_for_range(column.min_value, column.max_value)
        if original_type in ("VARCHAR", "NVARCHAR"):
            return "LONGTEXT" if column.length == MAX_LENGTH else "VARCHAR"
        if original_type == "VARBINARY":
            return "LONGBLOB" if column.length == MAX_LENGTH else "VARBINARY"
        try:
            return _MYSQL_TYPES[original_type]
        except KeyError:
            raise self.unsupported(column, Dialect.MYSQL) from None

    def to_oracle_type(self, column: ColumnMetadata) -> str:
        if column.original_type in _DATETIME_TYPES or column.original_type == "DATETIMEOFFSET":
            return "TIMESTAMP" if column.precision else "DATE"
        try:
            return _ORACLE_TYPES[column.original_type]
        except KeyError:
            raise self.unsupported(column, Dialect.ORACLE) from None
