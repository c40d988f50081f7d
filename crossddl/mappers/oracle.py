"""Type mapper for Oracle sources."""

import re
from typing import Any, Dict

from ..columns import ColumnMetadata, Dialect
from .base import DeclaredColumn, TypeMapper, integer_type_for_range, optional_int, timestamp_type_for_range

# TIMESTAMP(6) WITH TIME ZONE -> TIMESTAMP WITH TIME ZONE
_FRACTIONAL_PRECISION = re.compile(r"\(\d+\)")

_MYSQL_TYPES = {
    "CHAR": "CHAR",
    "NCHAR": "CHAR",
    "VARCHAR": "VARCHAR",
    "VARCHAR2": "VARCHAR",
    "NVARCHAR": "VARCHAR",
    "NVARCHAR2": "VARCHAR",
    "BINARY_FLOAT": "FLOAT",
    "BINARY_DOUBLE": "DOUBLE",
    "BLOB": "LONGBLOB",
    "BFILE": "LONGBLOB",
    "LONG RAW": "LONGBLOB",
    "RAW": "LONGBLOB",
    "LONG": "LONGTEXT",
    "CLOB": "LONGTEXT",
    "NCLOB": "LONGTEXT",
    "ROWID": "LONGTEXT",
}

_TIMESTAMP_TYPES = frozenset({
    "TIMESTAMP",
    "TIMESTAMP WITH TIME ZONE",
    "TIMESTAMP WITH LOCAL TIME ZONE",
})


class OracleSourceMapper(TypeMapper):
    """Oracle source: NUMBER and TIMESTAMP columns are narrowed from sampled bounds."""

    source = Dialect.ORACLE
    LENGTH_TYPES = frozenset({
        "NUMBER",
        "CHAR", "NCHAR",
        "VARCHAR", "VARCHAR2", "NVARCHAR", "NVARCHAR2",
        "BINARY_FLOAT", "BINARY_DOUBLE",
    })

    def read_catalog(self, row: Dict[str, Any]) -> DeclaredColumn:
        original_type = _FRACTIONAL_PRECISION.sub("", str(row["data_type"]).upper())
        return DeclaredColumn(
            original_type=original_type,
            length=optional_int(row["char_length"] or row["data_length"]),
            precision=optional_int(row["data_precision"]),
            scale=optional_int(row["data_scale"]),
            is_nullable=row["nullable"] == "Y",
        )

    def to_mysql_type(self, column: ColumnMetadata) -> str:
        original_type = column.original_type
        if original_type == "NUMBER":
            if column.scale:
                return "DECIMAL"
            return integer_type_for_range(column.min_value, column.max_value)
        if original_type in _TIMESTAMP_TYPES:
            return timestamp_type_for_range(column.min_value, column.max_value)
        if original_type == "DATE":
            return "DATETIME" if self.has_time_of_day(column) else "DATE"
        try:
            return _MYSQL_TYPES[original_type]
        except KeyError:
            raise self.unsupported(column, Dialect.MYSQL) from None

    def to_oracle_type(self, column: ColumnMetadata) -> str:
        return column.original_type
