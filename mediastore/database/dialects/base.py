"""Data-driven SQL dialect shared by every supported database engine."""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from mediastore.types import SqlType
from mediastore.utils import (
    format_utc,
    from_epoch_millis,
    serialize_exception,
    to_epoch_millis,
)

BASE_TYPE_NAMES: dict[SqlType, str] = {
    SqlType.VARCHAR: "VARCHAR",
    SqlType.SMALLINT: "SMALLINT",
    SqlType.INTEGER: "INTEGER",
    SqlType.BIGINT: "BIGINT",
    SqlType.CHAR: "CHAR(1)",
    SqlType.TIMESTAMP: "TIMESTAMP",
    SqlType.BOOLEAN: "BOOLEAN",
    SqlType.LONGVARCHAR: "CLOB",
    SqlType.VARBINARY: "BLOB",
}

BASE_DEFAULTS: dict[SqlType, str] = {
    SqlType.SMALLINT: "0",
    SqlType.INTEGER: "0",
    SqlType.BIGINT: "0",
    SqlType.BOOLEAN: "FALSE",
}

_SQL_STATE = re.compile(r"^[0-9A-Z]{5}$")


class DialectType(str, Enum):
    """Supported database engines."""

    DERBY = "derby"
    DB2 = "db2"
    H2 = "h2"
    HSQLDB = "hsqldb"
    MYSQL = "mysql"
    ORACLE = "oracle"
    POSTGRESQL = "postgresql"
    SQLSERVER = "sqlserver"
    SQLITE = "sqlite"


def merge_type_names(**overrides: str) -> dict[SqlType, str]:
    """Base type names with per-engine overrides keyed by SqlType name."""
    names = dict(BASE_TYPE_NAMES)
    names.update({SqlType[key]: value for key, value in overrides.items()})
    return names


def merge_defaults(**overrides: str) -> dict[SqlType, str]:
    """Base default literals with per-engine overrides keyed by SqlType name."""
    values = dict(BASE_DEFAULTS)
    values.update({SqlType[key]: value for key, value in overrides.items()})
    return values


def _driver_error(ex: BaseException) -> BaseException:
    # Unwrap errors re-raised by SQLAlchemy around the DB-API exception
    orig = getattr(ex, "orig", None)
    return orig if isinstance(orig, BaseException) else ex


def get_message(ex: BaseException | None) -> str:
    """Message text of a driver exception, empty when there is none."""
    if ex is None:
        return ""
    return str(_driver_error(ex))


def get_sql_state(ex: BaseException | None) -> str | None:
    """Best-effort SQLSTATE of a driver exception.

    Drivers disagree on where the code lives: psycopg exposes ``sqlstate`` or
    ``pgcode``, pyodbc and several others put it first in ``args``.
    """
    if ex is None:
        return None
    ex = _driver_error(ex)
    for attr in ("sqlstate", "pgcode", "sql_state"):
        value = getattr(ex, attr, None)
        if isinstance(value, str) and value:
            return value
    if ex.args and isinstance(ex.args[0], str) and _SQL_STATE.match(ex.args[0]):
        return ex.args[0]
    return None


@dataclass
class ErrorClassifier:
    """Recognises one class of driver error.

    An exception matches when any configured signal matches: the name of a
    class in its MRO, a marker in its message, a SQLSTATE code, or a marker
    anywhere in its formatted traceback.
    """

    markers: list[str] = field(default_factory=list)
    ignore_case: bool = False
    exception_types: list[str] = field(default_factory=list)
    sql_states: list[str] = field(default_factory=list)
    traceback_markers: list[str] = field(default_factory=list)

    def add_marker(self, marker: str) -> None:
        if marker not in self.markers:
            self.markers.append(marker)

    def matches(self, ex: BaseException | None) -> bool:
        if ex is None:
            return False

        driver_ex = _driver_error(ex)
        if self.exception_types:
            names = {cls.__name__ for cls in type(driver_ex).__mro__}
            if names.intersection(self.exception_types):
                return True

        if self.markers:
            message = get_message(ex)
            if self.ignore_case:
                message = message.lower()
                if any(marker.lower() in message for marker in self.markers):
                    return True
            elif any(marker in message for marker in self.markers):
                return True

        if self.sql_states and get_sql_state(ex) in self.sql_states:
            return True

        if self.traceback_markers:
            text = serialize_exception(driver_ex)
            if any(marker in text for marker in self.traceback_markers):
                return True

        return False


def default_invalid_column() -> ErrorClassifier:
    """Heuristic used by most engines: the message mentions a column."""
    return ErrorClassifier(markers=["column"], ignore_case=True)


def is_default_invalid_column_error(ex: BaseException | None) -> bool:
    return default_invalid_column().matches(ex)


@dataclass
class Dialect:
    """SQL syntax, type system and error conventions of one database engine.

    Every engine is described by a configuration block in its own module;
    there is no per-engine subclass. Type names and defaults start from the
    ANSI base maps and are overridden where the engine diverges.
    """

    dialect_type: DialectType
    case_sensitive: bool = True
    use_integer_for_boolean: bool = True
    use_string_for_clob: bool = False
    use_bytes_for_blob: bool = False
    type_names: dict[SqlType, str] = field(default_factory=merge_type_names)
    defaults: dict[SqlType, str] = field(default_factory=merge_defaults)
    reserved_words: list[str] = field(default_factory=list)
    constraint_violation: ErrorClassifier = field(default_factory=ErrorClassifier)
    data_too_long: ErrorClassifier = field(default_factory=ErrorClassifier)
    tablespace_error: ErrorClassifier = field(default_factory=ErrorClassifier)
    invalid_column: ErrorClassifier = field(default_factory=default_invalid_column)
    date_format: str | None = None
    date_template: str = "{date}"
    yesterday_date: str = ""
    zero_date: str | None = None
    session_timeout_sql: str | None = None

    def __post_init__(self) -> None:
        self._reserved_pattern: re.Pattern[str] | None = None

    @property
    def name(self) -> str:
        return self.dialect_type.value

    def is_case_sensitive(self) -> bool:
        return self.case_sensitive

    def get_type_name(self, sql_type: SqlType) -> str:
        return self.type_names[sql_type]

    def get_default(self, sql_type: SqlType) -> str | None:
        return self.defaults.get(sql_type)

    # Reserved words

    def add_reserved_word(self, word: str) -> None:
        if word not in self.reserved_words:
            self.reserved_words.append(word)
            self._reserved_pattern = None

    def is_reserved_word(self, word: str) -> bool:
        return word in self.reserved_words

    def quote_reserved_words(self, sql: str) -> str:
        """Wrap every reserved word used as a whole token in double quotes.

        Matching is case-sensitive. Tokens that are already quoted and words
        embedded in longer identifiers are left unchanged, so quoting the same
        statement twice is harmless.

        Args:
            sql: Raw SQL statement

        Returns:
            SQL with reserved words quoted
        """
        if not self.reserved_words:
            return sql

        if self._reserved_pattern is None:
            words = "|".join(
                re.escape(word)
                for word in sorted(self.reserved_words, key=len, reverse=True)
            )
            self._reserved_pattern = re.compile(rf'(?<![\w"])(?:{words})(?![\w"])')
        return self._reserved_pattern.sub(lambda match: f'"{match.group(0)}"', sql)

    # Error classification

    def is_constraint_violation(self, ex: BaseException | None) -> bool:
        return self.constraint_violation.matches(ex)

    def is_data_too_long(self, ex: BaseException | None) -> bool:
        return self.data_too_long.matches(ex)

    def is_tablespace_error(self, ex: BaseException | None) -> bool:
        return self.tablespace_error.matches(ex)

    def is_invalid_column_error(self, ex: BaseException | None) -> bool:
        return self.invalid_column.matches(ex)

    # Dates

    def get_date_conversion(self, millis: int) -> str:
        """Render epoch millis as a date literal expression in UTC."""
        if self.date_format is None:
            return str(millis)
        return self.date_template.format(date=format_utc(millis, self.date_format))

    def get_yesterday_date(self) -> str:
        return self.yesterday_date

    def get_zero_date(self) -> str:
        if self.zero_date is not None:
            return self.zero_date
        return self.get_date_conversion(0)

    # Value binding

    def to_db_timestamp(self, value: datetime | None) -> Any:
        """Convert a datetime into the value bound for a TIMESTAMP column."""
        if value is None:
            return None
        if self.date_format is None:
            return to_epoch_millis(value)
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    def from_db_timestamp(self, value: Any) -> datetime | None:
        """Convert a TIMESTAMP column value into an aware UTC datetime."""
        if value is None:
            return None
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value.replace(tzinfo=timezone.utc)
            return value.astimezone(timezone.utc)
        if isinstance(value, str):
            if value.isdigit():
                return from_epoch_millis(int(value))
            parsed = datetime.fromisoformat(value)
            return self.from_db_timestamp(parsed)
        return from_epoch_millis(int(value))

    def to_db_boolean(self, value: bool | None) -> Any:
        if value is None:
            return None
        if self.use_integer_for_boolean:
            return 1 if value else 0
        return bool(value)

    def session_timeout_statement(self, seconds: int) -> str | None:
        """SQL that limits statement run time for the session, if supported."""
        if self.session_timeout_sql is None or seconds <= 0:
            return None
        return self.session_timeout_sql.format(
            seconds=seconds, millis=seconds * 1000
        )
