"""Oracle dialect adapter."""

import logging
from typing import Any, Dict, List, Optional, Union

from ..columns import Dialect
from .base import DialectAdapter

logger = logging.getLogger(__name__)

# LONG columns cannot be grouped or passed to MIN/MAX
_LONG_AGGREGATION_ERROR = "ORA-00997"


class OracleAdapter(DialectAdapter):
    """Oracle dialect adapter."""

    dialect = Dialect.ORACLE

    def quote_identifier(self, name: str) -> str:
        return '"' + str(name).replace('"', '""') + '"'

    def escape_binary(self, value: bytes) -> str:
        return f"HEXTORAW('{value.hex().upper()}')"

    def fetch_tables(self, database: Optional[str] = None) -> Union[List[str], Dict[str, List[str]]]:
        if database:
            rows = self.fetch_all(
                "SELECT OWNER, TABLE_NAME FROM ALL_TABLES WHERE OWNER = :owner ORDER BY TABLE_NAME ASC",
                {"owner": database},
            )
            return [row["table_name"] for row in rows]
        rows = self.fetch_all("SELECT OWNER, TABLE_NAME FROM ALL_TABLES")
        return self._group_rows(rows, "owner", "table_name")

    def fetch_column_names(self, database: str, table: str) -> List[str]:
        rows = self.fetch_all(
            """
            SELECT COLUMN_NAME
            FROM ALL_TAB_COLUMNS
            WHERE OWNER = :owner AND TABLE_NAME = :table_name
            ORDER BY COLUMN_ID ASC
            """,
            {"owner": database, "table_name": table},
        )
        return [row["column_name"] for row in rows]

    def fetch_column_catalog(self, database: str, table: str, column: str) -> Optional[Dict[str, Any]]:
        return self.fetch_one(
            """
            SELECT OWNER AS TABLE_SCHEMA,
                   TABLE_NAME,
                   COLUMN_NAME,
                   DATA_TYPE,
                   DATA_LENGTH,
                   DATA_PRECISION,
                   DATA_SCALE,
                   NULLABLE,
                   CHAR_LENGTH
            FROM ALL_TAB_COLUMNS
            WHERE OWNER = :owner
                  AND TABLE_NAME = :table_name
                  AND COLUMN_NAME = :column_name
            """,
            {"owner": database, "table_name": table, "column_name": column},
        )

    def fetch_primary_key(self, database: str, table: str) -> List[str]:
        rows = self.fetch_all(
            """
            SELECT cols.POSITION, cols.COLUMN_NAME
            FROM ALL_CONSTRAINTS cons
                 JOIN ALL_CONS_COLUMNS cols
                   ON cons.CONSTRAINT_NAME = cols.CONSTRAINT_NAME
                      AND cons.OWNER = cols.OWNER
            WHERE cols.TABLE_NAME = :table_name
                  AND cons.CONSTRAINT_TYPE = 'P'
                  AND cols.OWNER = :owner
            ORDER BY cols.POSITION
            """,
            {"owner": database, "table_name": table},
        )
        return [row["column_name"] for row in rows]

    def fetch_indexes(self, database: str, table: str) -> Dict[str, List[str]]:
        rows = self.fetch_all(
            """
            SELECT INDEX_NAME, COLUMN_NAME
            FROM ALL_IND_COLUMNS
            WHERE TABLE_NAME = :table_name
                  AND TABLE_OWNER = :owner
            ORDER BY INDEX_NAME ASC, COLUMN_POSITION ASC
            """,
            {"owner": database, "table_name": table},
        )
        indexes = self._group_rows(rows, "index_name", "column_name")
        return self._without_primary_key(indexes, self.fetch_primary_key(database, table))

    def time_of_day_condition(self, quoted_column: str) -> str:
        return f"TO_CHAR({quoted_column}, 'SSSSS') > 0"

    def is_unaggregatable_error(self, exc: Exception) -> bool:
        if _LONG_AGGREGATION_ERROR in str(exc):
            logger.warning(f"Cannot aggregate LONG column: {exc}")
            return True
        return False
