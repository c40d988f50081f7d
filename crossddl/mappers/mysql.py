"""Type mapper for MySQL / MariaDB sources."""

from typing import Any, Dict, List

from ..columns import ColumnMetadata, Dialect
from ..ddl import parse_declared_values
from .base import DeclaredColumn, TypeMapper, optional_int

_LENGTH_TYPES = frozenset({
    "BIT",
    "TINYINT", "TINYINT UNSIGNED",
    "SMALLINT", "SMALLINT UNSIGNED",
    "MEDIUMINT", "MEDIUMINT UNSIGNED",
    "INT", "INT UNSIGNED",
    "BIGINT", "BIGINT UNSIGNED",
    "DECIMAL", "DECIMAL UNSIGNED",
    "FLOAT", "FLOAT UNSIGNED",
    "DOUBLE", "DOUBLE UNSIGNED",
    "CHAR", "TIME", "YEAR", "VARCHAR",
})

_ORACLE_TYPES = {
    "FLOAT": "BINARY_FLOAT",
    "FLOAT UNSIGNED": "BINARY_FLOAT",
    "DOUBLE": "BINARY_DOUBLE",
    "DOUBLE UNSIGNED": "BINARY_DOUBLE",
    "TIMESTAMP": "TIMESTAMP",
    "CHAR": "CHAR",
    "TIME": "CHAR",
    "YEAR": "CHAR",
    "ENUM": "NVARCHAR",
    "SET": "NVARCHAR",
    "VARCHAR": "NVARCHAR",
}
for _name in ("BIT", "TINYINT", "SMALLINT", "MEDIUMINT", "INT", "BIGINT", "DECIMAL"):
    _ORACLE_TYPES[_name] = "NUMBER"
    _ORACLE_TYPES[f"{_name} UNSIGNED"] = "NUMBER"
for _name in ("TINYBLOB", "SMALLBLOB", "BLOB", "MEDIUMBLOB", "LONGBLOB", "BINARY", "VARBINARY"):
    _ORACLE_TYPES[_name] = "BLOB"
for _name in ("TINYTEXT", "SMALLTEXT", "TEXT", "MEDIUMTEXT", "LONGTEXT"):
    _ORACLE_TYPES[_name] = "NCLOB"


class MySQLSourceMapper(TypeMapper):
    """MySQL source: the native type already is the MySQL target type."""

    source = Dialect.MYSQL
    LENGTH_TYPES = _LENGTH_TYPES

    def read_catalog(self, row: Dict[str, Any]) -> DeclaredColumn:
        original_type = str(row["data_type"]).upper()
        if "unsigned" in str(row.get("column_type") or "").lower():
            original_type += " UNSIGNED"
        return DeclaredColumn(
            original_type=original_type,
            length=optional_int(row["character_maximum_length"] or row["numeric_precision"]),
            precision=optional_int(row["numeric_precision"]),
            scale=optional_int(row["scale"]),
            is_nullable=row["is_nullable"] == "YES",
        )

    def to_mysql_type(self, column: ColumnMetadata) -> str:
        return column.original_type

    def to_oracle_type(self, column: ColumnMetadata) -> str:
        if column.original_type in ("DATE", "DATETIME"):
            return "TIMESTAMP" if column.precision else "DATE"
        try:
            return _ORACLE_TYPES[column.original_type]
        except KeyError:
            raise self.unsupported(column, Dialect.ORACLE) from None

    def fetch_declared_values(self, column: ColumnMetadata) -> List[str]:
        declaration = self.adapter.fetch_column_type_declaration(column.database, column.table, column.name)
        return parse_declared_values(declaration or "")
