"""
CREATE TABLE assembly.

TableBuilder walks one source table: it describes every column, drops
unused ones when asked to, renders the column clauses and appends the
primary key and secondary index clauses the target engine can hold.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from .columns import ColumnMetadata, Dialect, parse_target
from .databases.base import DialectAdapter
from .ddl import column_definition, quote_identifier
from .mappers import TypeMapper, get_mapper

logger = logging.getLogger(__name__)

# InnoDB key prefix limit for utf8mb4 columns
MYSQL_KEY_LENGTH_LIMIT = 191
MYSQL_TABLE_OPTIONS = "ENGINE=InnoDB ROW_FORMAT=COMPRESSED"

# MySQL cannot index these without a prefix length
_UNINDEXABLE_MYSQL_TYPE = re.compile(r"(BLOB|TEXT)$")


class TableBuilder:
    """Renders CREATE TABLE statements for tables of one source connection."""

    def __init__(
        self,
        adapter: DialectAdapter,
        mapper: Optional[TypeMapper] = None,
        skip_unused_columns: bool = True,
    ):
        self.adapter = adapter
        self.mapper = mapper or get_mapper(adapter)
        self.skip_unused_columns = skip_unused_columns

    def fetch_columns(self, database: str, table: str) -> Dict[str, ColumnMetadata]:
        """Columns of the table in ordinal order, minus unused ones when skipping is on."""
        columns = self.mapper.fetch_columns(database, table)
        if not self.skip_unused_columns:
            return columns
        unused = [name for name, column in columns.items() if column.is_unused]
        if unused:
            logger.info(f"Skipping unused columns of {table}: {', '.join(unused)}")
        return {name: column for name, column in columns.items() if not column.is_unused}

    def build_mysql_table_def(self, database: str, table: str) -> str:
        return self.build_table_def(database, table, Dialect.MYSQL)

    def build_oracle_table_def(self, database: str, table: str) -> str:
        return self.build_table_def(database, table, Dialect.ORACLE)

    def build_table_def(self, database: str, table: str, target: Any = Dialect.MYSQL) -> str:
        """CREATE TABLE statement for one table in the target dialect.

        Raises:
            UnsupportedTypeError: a column has no mapping to the target; nothing is rendered.
        """
        target = parse_target(target)
        logger.info(f"Rendering {target.value} DDL for {database}.{table}")

        columns = self.fetch_columns(database, table)
        target_types = {name: self.mapper.target_type(column, target) for name, column in columns.items()}
        column_defs = [
            column_definition(self.mapper, column, target, target_types[name])
            for name, column in columns.items()
        ]

        table_def = f"CREATE TABLE {quote_identifier(table.lower(), target)} (\n"
        table_def += ",\n".join(column_defs)

        primary_key = self.adapter.fetch_primary_key(database, table)
        if primary_key and self._primary_key_fits(table, primary_key, columns, target):
            table_def += ",\n\nPRIMARY KEY ("
            table_def += ", \n".join(quote_identifier(name.lower(), target) for name in primary_key)
            table_def += ")"

        for index_name, index_columns in self.adapter.fetch_indexes(database, table).items():
            if not self._index_fits(table, index_name, index_columns, columns, target_types, target):
                continue
            table_def += ",\n"
            table_def += f"KEY {quote_identifier(index_name.lower(), target)} ("
            table_def += ", ".join(quote_identifier(name.lower(), target) for name in index_columns)
            table_def += ")"

        if target is Dialect.MYSQL:
            table_def += f") {MYSQL_TABLE_OPTIONS}"
        else:
            table_def += ")"

        logger.info(f"Rendered {len(column_defs)} columns for {database}.{table}")
        return table_def

    def build_schema_defs(self, database: str, target: Any = Dialect.MYSQL) -> Dict[str, str]:
        """CREATE TABLE statements for every table of a schema, keyed by table name."""
        tables = sorted(self.adapter.fetch_tables(database))
        return {table: self.build_table_def(database, table, target) for table in tables}

    def _primary_key_fits(
        self,
        table: str,
        primary_key: List[str],
        columns: Dict[str, ColumnMetadata],
        target: Dialect,
    ) -> bool:
        missing = [name for name in primary_key if name not in columns]
        if missing:
            logger.info(f"Omitting primary key of {table}: unused columns {', '.join(missing)}")
            return False
        if target is Dialect.MYSQL:
            length = sum(columns[name].length for name in primary_key)
            if length > MYSQL_KEY_LENGTH_LIMIT:
                logger.info(f"Omitting primary key of {table}: key length {length} > {MYSQL_KEY_LENGTH_LIMIT}")
                return False
        return True

    def _index_fits(
        self,
        table: str,
        index_name: str,
        index_columns: List[str],
        columns: Dict[str, ColumnMetadata],
        target_types: Dict[str, str],
        target: Dialect,
    ) -> bool:
        missing = [name for name in index_columns if name not in columns]
        if missing:
            logger.info(f"Skipping index {index_name} of {table}: unused columns {', '.join(missing)}")
            return False
        if target is not Dialect.MYSQL:
            return True
        length = sum(columns[name].length for name in index_columns)
        if length > MYSQL_KEY_LENGTH_LIMIT:
            logger.info(f"Skipping index {index_name} of {table}: key length {length} > {MYSQL_KEY_LENGTH_LIMIT}")
            return False
        blobs = [name for name in index_columns if _UNINDEXABLE_MYSQL_TYPE.search(target_types[name])]
        if blobs:
            logger.info(f"Skipping index {index_name} of {table}: BLOB/TEXT columns {', '.join(blobs)}")
            return False
        return True
