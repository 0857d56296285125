"""SQL dialects for the supported database engines."""

from collections.abc import Callable

from . import db2, derby, h2, hsqldb, mysql, oracle, postgresql, sqlite, sqlserver
from .base import (
    BASE_DEFAULTS,
    BASE_TYPE_NAMES,
    Dialect,
    DialectType,
    ErrorClassifier,
    get_message,
    get_sql_state,
    is_default_invalid_column_error,
)

DIALECTS: dict[DialectType, Callable[[], Dialect]] = {
    DialectType.DERBY: derby.create_dialect,
    DialectType.DB2: db2.create_dialect,
    DialectType.H2: h2.create_dialect,
    DialectType.HSQLDB: hsqldb.create_dialect,
    DialectType.MYSQL: mysql.create_dialect,
    DialectType.ORACLE: oracle.create_dialect,
    DialectType.POSTGRESQL: postgresql.create_dialect,
    DialectType.SQLSERVER: sqlserver.create_dialect,
    DialectType.SQLITE: sqlite.create_dialect,
}


def create_dialect(dialect_type: DialectType | str) -> Dialect:
    """Create a new dialect instance for the given engine.

    Args:
        dialect_type: Engine type or its name (case-insensitive)

    Returns:
        A fresh, independently mutable Dialect

    Raises:
        ValueError: If the engine is not supported
    """
    if isinstance(dialect_type, str):
        dialect_type = DialectType(dialect_type.lower())
    return DIALECTS[dialect_type]()


__all__ = [
    "BASE_DEFAULTS",
    "BASE_TYPE_NAMES",
    "DIALECTS",
    "Dialect",
    "DialectType",
    "ErrorClassifier",
    "create_dialect",
    "get_message",
    "get_sql_state",
    "is_default_invalid_column_error",
]
