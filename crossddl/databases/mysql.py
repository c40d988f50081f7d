"""MySQL / MariaDB dialect adapter."""

from typing import Any, Dict, List, Optional, Union

from ..columns import Dialect
from .base import DialectAdapter

# Same character set as mysql_real_escape_string
_STRING_ESCAPES = str.maketrans({
    "\0": "\\0",
    "\n": "\\n",
    "\r": "\\r",
    "\\": "\\\\",
    "'": "\\'",
    '"': '\\"',
    "\x1a": "\\Z",
})


class MySQLAdapter(DialectAdapter):
    """MySQL / MariaDB dialect adapter."""

    dialect = Dialect.MYSQL

    def quote_identifier(self, name: str) -> str:
        return "`" + str(name).replace("`", "``") + "`"

    def escape_string(self, value: str) -> str:
        return "'" + value.translate(_STRING_ESCAPES) + "'"

    def fetch_tables(self, database: Optional[str] = None) -> Union[List[str], Dict[str, List[str]]]:
        if database:
            rows = self.fetch_all(
                """
                SELECT TABLE_SCHEMA, TABLE_NAME
                FROM INFORMATION_SCHEMA.TABLES
                WHERE TABLE_SCHEMA = :database
                ORDER BY TABLE_NAME ASC
                """,
                {"database": database},
            )
            return [row["table_name"] for row in rows]
        rows = self.fetch_all("SELECT TABLE_SCHEMA, TABLE_NAME FROM INFORMATION_SCHEMA.TABLES")
        return self._group_rows(rows, "table_schema", "table_name")

    def fetch_column_names(self, database: str, table: str) -> List[str]:
        rows = self.fetch_all(
            """
            SELECT COLUMN_NAME
            FROM INFORMATION_SCHEMA.COLUMNS
            WHERE TABLE_SCHEMA = :database AND TABLE_NAME = :table_name
            ORDER BY ORDINAL_POSITION ASC
            """,
            {"database": database, "table_name": table},
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
                   IS_NULLABLE,
                   COLUMN_TYPE
            FROM INFORMATION_SCHEMA.COLUMNS
            WHERE TABLE_SCHEMA = :database
                  AND TABLE_NAME = :table_name
                  AND COLUMN_NAME = :column_name
            """,
            {"database": database, "table_name": table, "column_name": column},
        )

    def fetch_column_type_declaration(self, database: str, table: str, column: str) -> Optional[str]:
        """Full declared type, e.g. "enum('abc','def')", as reported by SHOW COLUMNS."""
        row = self.fetch_one(
            f"SHOW COLUMNS FROM {self.quote_table(database, table)} LIKE {self.escape(column)}"
        )
        return row["type"] if row else None

    def fetch_primary_key(self, database: str, table: str) -> List[str]:
        rows = self.fetch_all(
            """
            SELECT ORDINAL_POSITION, COLUMN_NAME
            FROM INFORMATION_SCHEMA.KEY_COLUMN_USAGE
            WHERE CONSTRAINT_SCHEMA = :database
                  AND TABLE_NAME = :table_name
                  AND CONSTRAINT_NAME = 'PRIMARY'
            ORDER BY ORDINAL_POSITION
            """,
            {"database": database, "table_name": table},
        )
        return [row["column_name"] for row in rows]

    def fetch_indexes(self, database: str, table: str) -> Dict[str, List[str]]:
        rows = self.fetch_all(
            """
            SELECT INDEX_NAME, COLUMN_NAME
            FROM INFORMATION_SCHEMA.STATISTICS
            WHERE TABLE_SCHEMA = :database
                  AND TABLE_NAME = :table_name
                  AND INDEX_NAME != 'PRIMARY'
            ORDER BY INDEX_NAME ASC, SEQ_IN_INDEX ASC
            """,
            {"database": database, "table_name": table},
        )
        indexes = self._group_rows(rows, "index_name", "column_name")
        return self._without_primary_key(indexes, self.fetch_primary_key(database, table))

    def time_of_day_condition(self, quoted_column: str) -> str:
        return f"TIME({quoted_column}) != '00:00:00'"
