"""
Portable per-column model shared by every source dialect.

A ColumnMetadata combines what the source catalog declares about a column
(type, length, precision, scale, nullability) with what sampling the stored
data revealed (distinct-value count, min/max). It is built once per column
by a TypeMapper and never mutated afterwards.
"""

import sys
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .errors import UnsupportedDialectError

# Distinct count reported when sampling was skipped for the column's type
UNBOUNDED_COUNT = sys.maxsize


class Dialect(str, Enum):
    """SQL engines known to crossddl."""

    MYSQL = "mysql"
    ORACLE = "oracle"
    MSSQL = "mssql"

    @classmethod
    def parse(cls, value: Any) -> "Dialect":
        """Resolve a dialect from a name such as 'mysql' or 'ORACLE'."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnsupportedDialectError(f"Unsupported dialect: {value}") from None


TARGET_DIALECTS = (Dialect.MYSQL, Dialect.ORACLE)


def parse_target(value: Any) -> Dialect:
    """Resolve a DDL target dialect; only MySQL and Oracle are renderable."""
    dialect = Dialect.parse(value)
    if dialect not in TARGET_DIALECTS:
        raise UnsupportedDialectError(f"Cannot render DDL for target dialect: {dialect.value}")
    return dialect


@dataclass(frozen=True)
class ColumnMetadata:
    """Declared and sampled facts about one column of one table."""

    database: str
    table: str
    name: str
    original_type: str
    length: int = 0
    precision: Optional[int] = None
    scale: Optional[int] = None
    is_nullable: bool = True
    min_value: Optional[str] = None
    max_value: Optional[str] = None
    distinct_value_count: int = UNBOUNDED_COUNT

    @property
    def is_unused(self) -> bool:
        """Constant or empty columns carry no information."""
        return self.distinct_value_count <= 1

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
