"""Per-source-dialect type mappers."""

from ..columns import Dialect
from ..databases.base import DialectAdapter
from ..errors import UnsupportedDialectError
from .base import TypeMapper, integer_type_for_range, timestamp_type_for_range
from .mssql import MSSQLSourceMapper
from .mysql import MySQLSourceMapper
from .oracle import OracleSourceMapper

__all__ = [
    "MSSQLSourceMapper",
    "MySQLSourceMapper",
    "OracleSourceMapper",
    "TypeMapper",
    "get_mapper",
    "integer_type_for_range",
    "timestamp_type_for_range",
]

_MAPPERS = {
    Dialect.MYSQL: MySQLSourceMapper,
    Dialect.ORACLE: OracleSourceMapper,
    Dialect.MSSQL: MSSQLSourceMapper,
}


def get_mapper(adapter: DialectAdapter) -> TypeMapper:
    """Type mapper for the adapter's source dialect."""
    mapper_cls = _MAPPERS.get(adapter.dialect)
    if mapper_cls is None:
        raise UnsupportedDialectError(f"No type mapper for dialect {adapter.dialect}")
    return mapper_cls(adapter)
