"""
Value sampling: read-only aggregate queries that learn how a column is
actually populated (distinct-value count and observed min/max).
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Optional, Tuple

from sqlalchemy.exc import DBAPIError

from .columns import UNBOUNDED_COUNT
from .databases.base import DialectAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SampledValues:
    distinct_value_count: int = UNBOUNDED_COUNT
    min_value: Optional[str] = None
    max_value: Optional[str] = None


def value_to_text(value: Any) -> Optional[str]:
    """Render a sampled value in the source's natural textual form."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    return str(value)


class ValueSampler:
    """Runs sampling queries for one column at a time through a dialect adapter."""

    def __init__(self, adapter: DialectAdapter):
        self.adapter = adapter

    def _parts(self, database: str, table: str, column: str) -> Tuple[str, str]:
        return self.adapter.quote_table(database, table), self.adapter.quote_column(column)

    def count_distinct(self, database: str, table: str, column: str) -> int:
        """Number of GROUP BY groups; NULL counts as one group."""
        qt, qc = self._parts(database, table, column)
        sql = f"SELECT COUNT(*) AS value_count FROM (SELECT {qc} FROM {qt} GROUP BY {qc}) distinctvalues"
        logger.debug(sql)
        row = self.adapter.fetch_one(sql)
        return int(row["value_count"]) if row else 0

    def fetch_bounds(self, database: str, table: str, column: str) -> Tuple[Optional[str], Optional[str]]:
        qt, qc = self._parts(database, table, column)
        sql = f"SELECT MIN({qc}) AS rowmin, MAX({qc}) AS rowmax FROM {qt} WHERE {qc} IS NOT NULL"
        logger.debug(sql)
        row = self.adapter.fetch_one(sql)
        if not row:
            return None, None
        return value_to_text(row["rowmin"]), value_to_text(row["rowmax"])

    def count_non_null(self, database: str, table: str, column: str) -> int:
        qt, qc = self._parts(database, table, column)
        sql = f"SELECT COUNT(*) AS value_count FROM {qt} WHERE {qc} IS NOT NULL"
        logger.debug(sql)
        row = self.adapter.fetch_one(sql)
        return int(row["value_count"]) if row else 0

    def sample(
        self,
        database: str,
        table: str,
        column: str,
        distinct: bool = True,
        bounds: bool = True,
    ) -> SampledValues:
        """Sample a column, skipping the distinct count and/or bounds when asked.

        If the engine refuses to aggregate the column's type, the non-null row
        count is reported as a best-effort distinct count and bounds stay empty.
        """
        distinct_count = UNBOUNDED_COUNT
        min_value = max_value = None
        try:
            if distinct:
                distinct_count = self.count_distinct(database, table, column)
            if bounds:
                min_value, max_value = self.fetch_bounds(database, table, column)
        except DBAPIError as e:
            if not self.adapter.is_unaggregatable_error(e):
                raise
            distinct_count = self.count_non_null(database, table, column) or 1
            min_value = max_value = None
        return SampledValues(distinct_count, min_value, max_value)
