"""
Type mapper base class.

A TypeMapper is selected once per source dialect. It builds ColumnMetadata
from the source catalog plus sampled data, and translates the originating
type of a column into the best-fit type name of each target dialect.
"""

import logging
from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, FrozenSet, List, NamedTuple, Optional

from ..columns import ColumnMetadata, Dialect, parse_target
from ..databases.base import DialectAdapter
from ..errors import ColumnNotFoundError, UnsupportedTypeError
from ..sampler import ValueSampler, value_to_text

logger = logging.getLogger(__name__)

# Exclusive upper bounds on max(value); signed tiers compare max(|min|, max)
UNSIGNED_INTEGER_TIERS = (
    ("TINYINT UNSIGNED", Decimal("256")),
    ("SMALLINT UNSIGNED", Decimal("65536")),
    ("MEDIUMINT UNSIGNED", Decimal("16777216")),
    ("INT UNSIGNED", Decimal("4294967296")),
    ("BIGINT UNSIGNED", Decimal("18446744073709551616")),
)
SIGNED_INTEGER_TIERS = (
    ("TINYINT", Decimal("128")),
    ("SMALLINT", Decimal("32768")),
    ("MEDIUMINT", Decimal("8388608")),
    ("INT", Decimal("2147483648")),
    ("BIGINT", Decimal("9223372036854775808")),
)

# Range a MySQL TIMESTAMP can hold
TIMESTAMP_RANGE = ("1970-01-01 00:00:01", "2038-01-19 03:14:07")


class DeclaredColumn(NamedTuple):
    """Catalog facts about a column, before sampling."""

    original_type: str
    length: Optional[int]
    precision: Optional[int]
    scale: Optional[int]
    is_nullable: bool


def _to_decimal(value: Optional[str]) -> Decimal:
    if value is None or value == "":
        return Decimal(0)
    try:
        return Decimal(value)
    except InvalidOperation:
        raise ValueError(f"Not a numeric bound: {value!r}") from None


def integer_type_for_range(min_value: Optional[str], max_value: Optional[str]) -> str:
    """Smallest MySQL integer type holding [min_value, max_value].

    Non-negative ranges get an UNSIGNED type. Ranges too wide for BIGINT fall
    back to NUMERIC (unsigned) or DECIMAL (signed). Bounds are compared as
    arbitrary-precision decimals.
    """
    low = _to_decimal(min_value)
    high = _to_decimal(max_value)
    if low >= 0:
        for type_name, limit in UNSIGNED_INTEGER_TIERS:
            if high < limit:
                return type_name
        return "NUMERIC"
    magnitude = max(abs(low), high)
    for type_name, limit in SIGNED_INTEGER_TIERS:
        if magnitude < limit:
            return type_name
    return "DECIMAL"


def timestamp_type_for_range(min_value: Optional[str], max_value: Optional[str]) -> str:
    """TIMESTAMP if every observed value fits MySQL's TIMESTAMP range, else DATETIME."""
    if min_value is None or max_value is None:
        return "DATETIME"
    if min_value >= TIMESTAMP_RANGE[0] and max_value <= TIMESTAMP_RANGE[1]:
        return "TIMESTAMP"
    return "DATETIME"


def optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


class TypeMapper(ABC):
    """Abstract base for per-source-dialect type mappers."""

    source: Dialect

    # Types whose declared length is meaningful; every other type reports 0
    LENGTH_TYPES: FrozenSet[str] = frozenset()
    # Types the source engine cannot usefully group or order
    DISTINCT_SKIP_TYPES: FrozenSet[str] = frozenset()
    BOUNDS_SKIP_TYPES: FrozenSet[str] = frozenset()

    def __init__(self, adapter: DialectAdapter):
        self.adapter = adapter
        self.sampler = ValueSampler(adapter)

    # ==================== Column metadata ====================

    @abstractmethod
    def read_catalog(self, row: Dict[str, Any]) -> DeclaredColumn:
        """Interpret a raw catalog row from the adapter."""
        pass

    def column_length(self, original_type: str, length: Optional[int]) -> int:
        if original_type in self.LENGTH_TYPES:
            return int(length or 0)
        return 0

    def describe_column(self, database: str, table: str, column: str) -> ColumnMetadata:
        """Build the metadata for one column: catalog lookup plus sampling."""
        row = self.adapter.fetch_column_catalog(database, table, column)
        if row is None:
            raise ColumnNotFoundError(database, table, column)
        declared = self.read_catalog(row)
        sampled = self.sampler.sample(
            database,
            table,
            column,
            distinct=declared.original_type not in self.DISTINCT_SKIP_TYPES,
            bounds=declared.original_type not in self.BOUNDS_SKIP_TYPES,
        )
        return ColumnMetadata(
            database=database,
            table=table,
            name=column,
            original_type=declared.original_type,
            length=self.column_length(declared.original_type, declared.length),
            precision=declared.precision,
            scale=declared.scale,
            is_nullable=declared.is_nullable,
            min_value=sampled.min_value,
            max_value=sampled.max_value,
            distinct_value_count=sampled.distinct_value_count,
        )

    def fetch_columns(self, database: str, table: str) -> Dict[str, ColumnMetadata]:
        """Metadata for every column of a table, in declared ordinal order."""
        columns: Dict[str, ColumnMetadata] = {}
        for name in self.adapter.fetch_column_names(database, table):
            columns[name] = self.describe_column(database, table, name)
        logger.debug(f"Described {len(columns)} columns of {database}.{table}")
        return columns

    # ==================== Type translation ====================

    def target_type(self, column: ColumnMetadata, target: Any) -> str:
        """Best-fit type name for the column in the target dialect."""
        target = parse_target(target)
        if target is Dialect.MYSQL:
            return self.to_mysql_type(column)
        return self.to_oracle_type(column)

    @abstractmethod
    def to_mysql_type(self, column: ColumnMetadata) -> str:
        pass

    @abstractmethod
    def to_oracle_type(self, column: ColumnMetadata) -> str:
        pass

    def unsupported(self, column: ColumnMetadata, target: Dialect) -> UnsupportedTypeError:
        return UnsupportedTypeError(column.original_type, target.value)

    # ==================== Probes ====================

    def has_time_of_day(self, column: ColumnMetadata) -> bool:
        """Whether any stored value of a date-like column has a non-midnight time."""
        qt = self.adapter.quote_table(column.database, column.table)
        qc = self.adapter.quote_column(column.name)
        sql = (
            f"SELECT COUNT(*) AS value_count FROM {qt} "
            f"WHERE {qc} IS NOT NULL AND {self.adapter.time_of_day_condition(qc)}"
        )
        logger.debug(sql)
        row = self.adapter.fetch_one(sql)
        return bool(row and int(row["value_count"]) > 0)

    def fetch_distinct_values(self, column: ColumnMetadata) -> List[str]:
        """Distinct non-null values currently stored, as trimmed text."""
        qt = self.adapter.quote_table(column.database, column.table)
        qc = self.adapter.quote_column(column.name)
        sql = f"SELECT DISTINCT {qc} FROM {qt} WHERE {qc} IS NOT NULL ORDER BY {qc} ASC"
        logger.debug(sql)
        values = []
        for row in self.adapter.fetch_all(sql):
            value = value_to_text(next(iter(row.values())))
            values.append(value.strip() if value is not None else "")
        return values

    def fetch_declared_values(self, column: ColumnMetadata) -> List[str]:
        """Declared value domain of an ENUM/SET column."""
        raise self.unsupported(column, Dialect.MYSQL)
