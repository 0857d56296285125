"""Common type definitions for the mediastore system."""

from enum import Enum
from typing import Any, TypeAlias

StatementParamType: TypeAlias = list[Any] | tuple[Any, ...] | None
RowType: TypeAlias = tuple[Any, ...]


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class SqlType(str, Enum):
    """Generic SQL column types mapped to vendor keywords by a dialect."""

    VARCHAR = "VARCHAR"
    CHAR = "CHAR"
    SMALLINT = "SMALLINT"
    INTEGER = "INTEGER"
    BIGINT = "BIGINT"
    BOOLEAN = "BOOLEAN"
    TIMESTAMP = "TIMESTAMP"
    LONGVARCHAR = "LONGVARCHAR"
    VARBINARY = "VARBINARY"


class IndexType(str, Enum):
    """Kinds of table index."""

    INDEX = "index"
    PRIMARY_KEY = "primary_key"


class ConnectionStatus(str, Enum):
    """State of a database connection."""

    NOT_CONNECTED = "not_connected"
    CONNECTED = "connected"
    ERROR = "error"


class ResultStatus(str, Enum):
    """Outcome of a non-fatal database operation."""

    OK = "ok"
    IGNORED = "ignored"
    FAILED = "failed"
