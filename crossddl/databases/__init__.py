"""Database dialect adapters for multi-database support."""

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from .base import DialectAdapter, ParamType
from .mssql import MssqlAdapter
from .mysql import MySQLAdapter
from .oracle import OracleAdapter

__all__ = [
    "DialectAdapter",
    "MssqlAdapter",
    "MySQLAdapter",
    "OracleAdapter",
    "ParamType",
    "create_source_engine",
    "get_adapter",
    "get_adapter_for_engine",
    "supported_dialects",
]

_ADAPTERS = {
    "mysql": MySQLAdapter,
    "mariadb": MySQLAdapter,
    "mssql": MssqlAdapter,
    "oracle": OracleAdapter,
}


def get_adapter(dialect_name: str, engine: Optional[Engine] = None) -> Optional[DialectAdapter]:
    """Get the dialect adapter for the given dialect name.

    Args:
        dialect_name: SQLAlchemy dialect name (e.g. mysql, mssql, oracle).
        engine: Engine the adapter runs its queries on.

    Returns:
        DialectAdapter instance or None if dialect is not supported.
    """
    adapter_cls = _ADAPTERS.get(dialect_name)
    if adapter_cls is None:
        return None
    return adapter_cls(engine)


def get_adapter_for_engine(engine: Engine) -> Optional[DialectAdapter]:
    """Get the dialect adapter bound to the given engine."""
    return get_adapter(engine.dialect.name, engine)


def supported_dialects() -> tuple:
    """Return tuple of supported dialect names."""
    return tuple(_ADAPTERS.keys())


def create_source_engine(database_url: str) -> Engine:
    """Create a SQLAlchemy engine for reading a source database."""
    if database_url.startswith("mssql+"):
        connect_args = {"timeout": 10}
    elif database_url.startswith("oracle"):
        connect_args = {}
    else:
        connect_args = {"connect_timeout": 10}
    return create_engine(
        database_url,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        connect_args=connect_args,
    )
