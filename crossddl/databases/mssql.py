"""Microsoft SQL Server / Azure SQL dialect adapter."""

import logging
from typing import Any, Dict, List, Optional, Union

from ..columns import Dialect
from .base import DialectAdapter

logger = logging.getLogger(__name__)

# MySQL identifier limit; longer SQL Server index names are cut down to it
_MAX_INDEX_NAME_LENGTH = 64

_INDEX_COLUMNS_SQL = """
    SELECT ind.name AS INDEX_NAME,
           col.name AS COLUMN_NAME
    FROM sys.indexes ind
         JOIN sys.index_columns ic
           ON ind.object_id = ic.object_id
              AND ind.index_id = ic.index_id
         JOIN sys.columns col
           ON ic.object_id = col.object_id
              AND ic.column_id = col.column_id
         JOIN sys.tables t
           ON ind.object_id = t.object_id
         JOIN sys.schemas s
           ON t.schema_id = s.schema_id
    WHERE {condition}
          AND s.name = :schema
          AND t.name = :table_name
    ORDER BY ind.name ASC, ic.index_column_id ASC
"""


class MssqlAdapter(DialectAdapter):
    """Microsoft SQL Server / Azure SQL dialect adapter."""

    dialect = Dialect.MSSQL

    def quote_identifier(self, name: str) -> str:
        return "[" + str(name).replace("]", "]]") + "]"

    def fetch_tables(self, database: Optional[str] = None) -> Union[List[str], Dict[str, List[str]]]:
        if database:
            rows = self.fetch_all(
                """
                SELECT TABLE_SCHEMA, TABLE_NAME
                FROM INFORMATION_SCHEMA.TABLES
                WHERE TABLE_SCHEMA = :schema
                ORDER BY TABLE_NAME ASC
                """,
                {"schema": database},
            )
            return [row["table_name"] for row in rows]
        rows = self.fetch_all("SELECT TABLE_SCHEMA, TABLE_NAME FROM INFORMATION_SCHEMA.TABLES")
        return self._group_rows(rows, "table_schema", "table_name")

    def fetch_column_names(self, database: str, table: str) -> List[str]:
        rows = self.fetch_all(
            """
            SELECT COLUMN_NAME
            FROM INFORMATION_SCHEMA.COLUMNS
            WHERE TABLE_SCHEMA = :schema AND TABLE_NAME = :table_name
            ORDER BY ORDINAL_POSITION ASC
            """,
            {"schema": database, "table_name": table},
        )
        return [row["column_name"] for row in rows]

    def fetch_column_catalog(self, database: str, table: str, column: str) -> Optional[Dict[str, Any]]:
        return self.fetch_one(
            """
            SELECT TABLE_SCHEMA,
                   TABLE_NAME,
                   COLUMN_NAME,
                   DATA_TYPE,
                   CHARACTER_MAXIMUM_LENGTH,
                   NUMERIC_PRECISION,
                   COALESCE(DATETIME_PRECISION, NUMERIC_SCALE) AS SCALE,
                   IS_NULLABLE
            FROM INFORMATION_SCHEMA.COLUMNS
            WHERE TABLE_SCHEMA = :schema
                  AND TABLE_NAME = :table_name
                  AND COLUMN_NAME = :column_name
            """,
            {"schema": database, "table_name": table, "column_name": column},
        )

    def fetch_primary_key(self, database: str, table: str) -> List[str]:
        params = {"schema": database, "table_name": table}
        rows = self.fetch_all(
            _INDEX_COLUMNS_SQL.format(condition="ind.is_primary_key = 1 AND col.is_nullable = 0"),
            params,
        )
        if rows:
            return [row["column_name"] for row in rows]

        # No declared key: fall back to a uniqueidentifier column
        row = self.fetch_one(
            """
            SELECT COLUMN_NAME
            FROM INFORMATION_SCHEMA.COLUMNS
            WHERE DATA_TYPE = 'uniqueidentifier'
                  AND TABLE_SCHEMA = :schema
                  AND TABLE_NAME = :table_name
            ORDER BY ORDINAL_POSITION ASC
            """,
            params,
        )
        if row:
            logger.info(f"No primary key on {database}.{table}; using uniqueidentifier column {row['column_name']}")
            return [row["column_name"]]
        return []

    def fetch_indexes(self, database: str, table: str) -> Dict[str, List[str]]:
        rows = self.fetch_all(
            _INDEX_COLUMNS_SQL.format(condition="ind.is_primary_key = 0"),
            {"schema": database, "table_name": table},
        )
        indexes: Dict[str, List[str]] = {}
        for row in rows:
            name = row["index_name"][:_MAX_INDEX_NAME_LENGTH]
            indexes.setdefault(name, []).append(row["column_name"])
        return indexes

    def time_of_day_condition(self, quoted_column: str) -> str:
        return f"CONVERT(VARCHAR(8), {quoted_column}, 108) != '00:00:00'"
