"""Cross-dialect CREATE TABLE generation from live database catalogs and sampled data."""

from .columns import UNBOUNDED_COUNT, ColumnMetadata, Dialect
from .ddl import column_definition
from .errors import (
    ColumnNotFoundError,
    CrossDDLError,
    ParameterTypeError,
    UnsupportedDialectError,
    UnsupportedTypeError,
)
from .mappers import get_mapper
from .table import TableBuilder

__version__ = "0.1.0"

__all__ = [
    "UNBOUNDED_COUNT",
    "ColumnMetadata",
    "ColumnNotFoundError",
    "CrossDDLError",
    "Dialect",
    "ParameterTypeError",
    "TableBuilder",
    "UnsupportedDialectError",
    "UnsupportedTypeError",
    "column_definition",
    "get_mapper",
]
