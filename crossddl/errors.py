"""Exceptions raised by the type-inference and DDL-rendering engine."""

from typing import Optional


class CrossDDLError(Exception):
    """Base class for all crossddl failures."""


class UnsupportedTypeError(CrossDDLError):
    """An originating column type has no mapping to the requested target dialect."""

    def __init__(self, type_name: str, target: Optional[str] = None):
        self.type_name = type_name
        self.target = target
        super().__init__(f"Unknown conversion for column type {type_name}")


class ParameterTypeError(CrossDDLError, ValueError):
    """A value could not be escaped as the requested parameter kind."""


class ColumnNotFoundError(CrossDDLError, LookupError):
    """The catalog has no row for the requested column."""

    def __init__(self, database: str, table: str, column: str):
        self.database = database
        self.table = table
        self.column = column
        super().__init__(f"Column {database}.{table}.{column} not found in catalog")


class UnsupportedDialectError(CrossDDLError, ValueError):
    """Unknown source engine or target dialect name."""
