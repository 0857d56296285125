"""Database driver descriptors and the registry of supported drivers."""

from dataclasses import dataclass, field
from string import Template
from typing import Any
from urllib.parse import quote_plus

from mediastore.constants import EMBEDDED_SUFFIX
from mediastore.log import get_logger

from .dialects import Dialect, DialectType, create_dialect
from .dialects.base import is_default_invalid_column_error

logger = get_logger(__name__)

DEFAULT_AUTH_FORMAT = "${username}:${password}@"


@dataclass
class DatabaseDriver:
    """Describes how to reach one kind of database.

    The URL format is a ``string.Template`` producing a SQLAlchemy URL; it may
    reference ``hostname``, ``port``, ``database``, ``directory`` and ``auth``.
    The auth format may reference ``username`` and ``password`` and is only
    rendered when a username is given.

    The query timeout reaches the driver either as a connect argument
    (``query_timeout_arg``, seconds) or as an attribute set on the DB-API
    connection (``query_timeout_attr``, seconds times ``query_timeout_scale``).
    """

    type: str
    name: str
    url_format: str
    dialect_type: DialectType
    auth_format: str = DEFAULT_AUTH_FORMAT
    embedded: bool = False
    allow_empty_username: bool = False
    allow_empty_password: bool = False
    connection_parameters: str = ""
    default_database_name: str | None = None
    connect_args: dict[str, Any] = field(default_factory=dict)
    connect_timeout_arg: str | None = None
    query_timeout_arg: str | None = None
    query_timeout_attr: str | None = None
    query_timeout_scale: int = 1
    close_on_exception: bool = False
    dialect: Dialect | None = None

    def __post_init__(self) -> None:
        if self.embedded and not self.name.endswith(EMBEDDED_SUFFIX):
            self.name = f"{self.name}{EMBEDDED_SUFFIX}"
        if self.dialect is None:
            self.dialect = create_dialect(self.dialect_type)

    def __str__(self) -> str:
        return self.name

    @property
    def has_default_database(self) -> bool:
        return self.default_database_name is not None

    def get_connection_string(
        self,
        hostname: str | None = None,
        port: int | None = None,
        database: str | None = None,
        username: str | None = None,
        password: str | None = None,
        directory: str | None = None,
        parameters: str | None = None,
    ) -> str:
        """Render the SQLAlchemy URL for this driver.

        Args:
            hostname: Database host
            port: Database port
            database: Database name (or file name for embedded drivers)
            username: User name; credentials are omitted when empty
            password: Password
            directory: Directory holding embedded database files
            parameters: Extra URL parameters appended after the driver's own

        Returns:
            SQLAlchemy connection URL
        """
        auth = ""
        if username:
            auth = Template(self.auth_format).safe_substitute(
                username=quote_plus(username),
                password=quote_plus(password or ""),
            )

        url = Template(self.url_format).safe_substitute(
            hostname=hostname or "",
            port="" if port is None else str(port),
            database=database or self.default_database_name or "",
            directory=directory or ".",
            auth=auth,
        )
        url += self.connection_parameters
        if parameters:
            separator = "&" if "?" in url else "?"
            url += parameters if parameters[0] in "?&" else separator + parameters
        return url

    def engine_connect_args(
        self, connect_timeout: int | None = None, query_timeout: int | None = None
    ) -> dict[str, Any]:
        """DB-API connect arguments, including the timeouts the driver accepts."""
        args = dict(self.connect_args)
        if connect_timeout is not None and self.connect_timeout_arg is not None:
            args[self.connect_timeout_arg] = connect_timeout
        if query_timeout is not None and self.query_timeout_arg is not None:
            args[self.query_timeout_arg] = query_timeout
        return args

    # Dialect pass-throughs

    def is_constraint_violation(self, ex: BaseException | None) -> bool:
        return self.dialect is not None and self.dialect.is_constraint_violation(ex)

    def is_data_too_long(self, ex: BaseException | None) -> bool:
        return self.dialect is not None and self.dialect.is_data_too_long(ex)

    def is_tablespace_error(self, ex: BaseException | None) -> bool:
        return self.dialect is not None and self.dialect.is_tablespace_error(ex)

    def is_invalid_column_error(self, ex: BaseException | None) -> bool:
        if self.dialect is not None:
            return self.dialect.is_invalid_column_error(ex)
        return is_default_invalid_column_error(ex)

    def get_date_conversion(self, millis: int) -> str:
        if self.dialect is None:
            return ""
        return self.dialect.get_date_conversion(millis)

    def use_integer_for_boolean(self) -> bool:
        return self.dialect is None or self.dialect.use_integer_for_boolean

    def use_string_for_clob(self) -> bool:
        return self.dialect is not None and self.dialect.use_string_for_clob

    def use_bytes_for_blob(self) -> bool:
        return self.dialect is not None and self.dialect.use_bytes_for_blob


_drivers: dict[str, DatabaseDriver] = {}


def register_driver(driver: DatabaseDriver) -> DatabaseDriver:
    """Add a driver to the registry, replacing any with the same type code."""
    _drivers[driver.type] = driver
    logger.debug(f"Registered database driver: {driver.type}")
    return driver


def get_driver(type_code: str) -> DatabaseDriver | None:
    return _drivers.get(type_code)


def get_driver_ignore_case(name: str) -> DatabaseDriver | None:
    """Find a driver by its display name, ignoring case."""
    name = name.lower()
    for driver in _drivers.values():
        if driver.name.lower() == name:
            return driver
    return None


def get_driver_name(type_code: str) -> str:
    driver = get_driver(type_code)
    return driver.name if driver is not None else ""


def driver_types() -> list[str]:
    """Type codes of every registered driver in registration order."""
    return list(_drivers)


def get_connection_string(type_code: str, **kwargs: Any) -> str:
    """Render the connection URL for a registered driver type.

    Raises:
        KeyError: If the driver type is not registered
    """
    return _drivers[type_code].get_connection_string(**kwargs)


ORACLE = register_driver(
    DatabaseDriver(
        type="oracle",
        name="Oracle",
        url_format="oracle+oracledb://${auth}${hostname}:${port}/${database}",
        dialect_type=DialectType.ORACLE,
        query_timeout_attr="call_timeout",
        query_timeout_scale=1000,
    )
)

SQLSERVER = register_driver(
    DatabaseDriver(
        type="sqlserver",
        name="SQL Server",
        url_format="mssql+pyodbc://${auth}${hostname}:${port}/${database}",
        dialect_type=DialectType.SQLSERVER,
        allow_empty_password=True,
        default_database_name="master",
        connection_parameters="?driver=ODBC+Driver+18+for+SQL+Server",
        connect_timeout_arg="timeout",
        query_timeout_attr="timeout",
    )
)

# ANSI mode lets double-quoted reserved words act as identifiers
MYSQL = register_driver(
    DatabaseDriver(
        type="mysql",
        name="MySQL",
        url_format="mysql+pymysql://${auth}${hostname}:${port}/${database}",
        dialect_type=DialectType.MYSQL,
        allow_empty_password=True,
        connection_parameters="?charset=utf8mb4",
        connect_args={"init_command": "SET sql_mode='ANSI'"},
        connect_timeout_arg="connect_timeout",
    )
)

DB2 = register_driver(
    DatabaseDriver(
        type="db2",
        name="IBM DB2",
        url_format="db2+ibm_db://${auth}${hostname}:${port}/${database}",
        dialect_type=DialectType.DB2,
    )
)

DERBY = register_driver(
    DatabaseDriver(
        type="derby",
        name="Derby",
        url_format="derby://${auth}${hostname}:${port}/${database}",
        dialect_type=DialectType.DERBY,
        allow_empty_username=True,
        allow_empty_password=True,
    )
)

DERBY_EMBEDDED = register_driver(
    DatabaseDriver(
        type="derby-embedded",
        name="Derby",
        url_format="derby:///${directory}/${database}",
        dialect_type=DialectType.DERBY,
        embedded=True,
        allow_empty_username=True,
        allow_empty_password=True,
        connection_parameters="?create=true",
    )
)

POSTGRESQL = register_driver(
    DatabaseDriver(
        type="postgresql",
        name="PostgreSQL",
        url_format="postgresql+psycopg2://${auth}${hostname}:${port}/${database}",
        dialect_type=DialectType.POSTGRESQL,
        allow_empty_password=True,
        connect_timeout_arg="connect_timeout",
    )
)

# The sqlite3 module invalidates a statement that raised, so it is re-prepared
# sqlite3 has no statement timeout; the query timeout bounds lock waits
SQLITE = register_driver(
    DatabaseDriver(
        type="sqlite",
        name="SQLite",
        url_format="sqlite:///${directory}/${database}",
        dialect_type=DialectType.SQLITE,
        embedded=True,
        allow_empty_username=True,
        allow_empty_password=True,
        close_on_exception=True,
        connect_args={"check_same_thread": False},
        query_timeout_arg="timeout",
    )
)

HSQLDB = register_driver(
    DatabaseDriver(
        type="hsqldb",
        name="HSQLDB",
        url_format="hsqldb://${auth}${hostname}:${port}/${database}",
        dialect_type=DialectType.HSQLDB,
        allow_empty_password=True,
    )
)

HSQLDB_EMBEDDED = register_driver(
    DatabaseDriver(
        type="hsqldb-embedded",
        name="HSQLDB",
        url_format="hsqldb:///${directory}/${database}",
        dialect_type=DialectType.HSQLDB,
        embedded=True,
        allow_empty_username=True,
        allow_empty_password=True,
    )
)

H2 = register_driver(
    DatabaseDriver(
        type="h2",
        name="H2",
        url_format="h2://${auth}${hostname}:${port}/${database}",
        dialect_type=DialectType.H2,
        allow_empty_password=True,
    )
)

H2_EMBEDDED = register_driver(
    DatabaseDriver(
        type="h2-embedded",
        name="H2",
        url_format="h2:///${directory}/${database}",
        dialect_type=DialectType.H2,
        embedded=True,
        allow_empty_username=True,
        allow_empty_password=True,
    )
)
