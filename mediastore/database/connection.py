"""Database connection shared by every registry and gateway."""

from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import NoSuchModuleError, SQLAlchemyError

from mediastore.constants import QUERY_TIMEOUT
from mediastore.log import get_logger
from mediastore.types import ConnectionStatus
from mediastore.utils import serialize_exception

from .dialects import get_sql_state
from .drivers import DatabaseDriver, get_driver
from .exceptions import DatabaseError, MissingParameterError
from .properties import ConnectionProperties
from .statement import PreparedStatement

if TYPE_CHECKING:
    from .registry import GatewayRegistry

logger = get_logger(__name__)

_DISCONNECT_MARKERS = ("shutdown", "inconsistent state", "reset", "socket", "abort")


class DatabaseConnection:
    """Owns the engine and the single DB-API connection used by all gateways.

    Autocommit is emulated: while ``auto_commit`` is set, every update is
    committed as soon as it has executed.
    """

    def __init__(
        self,
        query_timeout: int = QUERY_TIMEOUT,
        debug: bool = False,
        create_missing_tables: bool = True,
    ) -> None:
        self.name = ""
        self.query_timeout = query_timeout
        self.create_missing_tables = create_missing_tables
        self.debug = debug
        self.driver: DatabaseDriver | None = None
        self.engine: Engine | None = None
        self.connection: Any = None
        self.status = ConnectionStatus.NOT_CONNECTED
        self.connect_exception: Exception | None = None
        self.auto_commit = True
        self.registries: list["GatewayRegistry"] = []

    def __str__(self) -> str:
        return self.name

    def __enter__(self) -> "DatabaseConnection":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def is_internal(self) -> bool:
        """Whether the database is owned by this application and may be altered."""
        return True

    @property
    def paramstyle(self) -> str:
        if self.engine is None:
            return "qmark"
        return self.engine.dialect.loaded_dbapi.paramstyle

    def _fail(self, parameter: str, message: str) -> bool:
        self.connect_exception = MissingParameterError(parameter, message)
        logger.error(message)
        return False

    def _require_driver(self) -> DatabaseDriver:
        if self.driver is None or self.driver.dialect is None:
            raise DatabaseError("Database driver not set; call connect() first")
        return self.driver

    def _validate(self, properties: ConnectionProperties) -> bool:
        driver = self._require_driver()

        if not properties.hostname and not driver.embedded:
            return self._fail("hostname", "Database hostname not defined")
        if properties.port == 0 and not driver.embedded:
            return self._fail("port", "Database port not defined")

        if properties.database_name:
            self.name = properties.database_name
        elif driver.default_database_name is not None:
            self.name = driver.default_database_name
        else:
            return self._fail("database_name", "Database name not defined")

        if not properties.username and not driver.allow_empty_username:
            return self._fail("username", "Database username not defined")
        if not properties.password and not driver.allow_empty_password:
            return self._fail("password", "Database password not defined")
        return True

    def connect(self, properties: ConnectionProperties, verbose: bool = False) -> bool:
        """Open the connection, create the registries and bootstrap their tables.

        Args:
            properties: Connection parameters
            verbose: Whether to log the connection banner

        Returns:
            True if the connection was established

        Raises:
            MissingParameterError: If no driver exists for the requested type
        """
        if self.engine is not None:
            self.close()

        self.connection = None
        self.status = ConnectionStatus.NOT_CONNECTED

        if not properties.type:
            logger.error("Database driver type not defined")
            return False

        self.driver = get_driver(properties.type)
        if self.driver is None:
            raise MissingParameterError(
                "type", f"Driver not found for driver type '{properties.type}'"
            )

        if not self._validate(properties):
            self.status = ConnectionStatus.ERROR
            return False

        try:
            self._connect_internal(properties, verbose)
            if self.connect_exception is not None:
                logger.info(f"Reconnected to database '{self.name}' successfully")
                self.connect_exception = None
        except NoSuchModuleError as e:
            message = f"No SQLAlchemy dialect available for driver '{self.driver.type}'"
            self.connect_exception = MissingParameterError("type", f"{message}: {e}")
            self.status = ConnectionStatus.ERROR
            logger.error(message)
            return False
        except Exception as e:
            if self.connect_exception is None:
                state = get_sql_state(e)
                suffix = f" state={state}" if state else ""
                logger.error(
                    f"Unable to connect to database '{self.name}': "
                    f"{type(e).__name__}: {e}{suffix}"
                )
            self.connect_exception = e
            self.status = ConnectionStatus.ERROR
            return False

        if verbose:
            self.show_banner()

        self.create_registries()
        if self.create_missing_tables:
            self.create_tables()
        return True

    def _connect_internal(self, properties: ConnectionProperties, verbose: bool) -> None:
        driver = self._require_driver()

        url = driver.get_connection_string(
            hostname=properties.hostname,
            port=properties.port or None,
            database=properties.database_name,
            username=properties.username,
            password=properties.password,
            directory=properties.directory,
            parameters=properties.parameters,
        )
        if self.debug:
            logger.info(
                f"Connecting to database '{self.name}' "
                f"with user '{properties.username or ''}' using: {url}"
            )

        if driver.embedded and properties.directory:
            Path(properties.directory).mkdir(parents=True, exist_ok=True)

        connect_timeout = (
            properties.connect_timeout if properties.connect_timeout > 0 else None
        )
        query_timeout = self.query_timeout if self.query_timeout > 0 else None
        self.engine = create_engine(
            url, connect_args=driver.engine_connect_args(connect_timeout, query_timeout)
        )
        self.connection = self.engine.raw_connection()
        self.auto_commit = True
        self._apply_query_timeout()

        self.status = (
            ConnectionStatus.CONNECTED
            if self.is_connected()
            else ConnectionStatus.NOT_CONNECTED
        )
        if verbose and self.status == ConnectionStatus.CONNECTED:
            if self.connect_exception is None:
                logger.info(f"Connected to database '{self.name}' successfully")

    def _apply_query_timeout(self) -> None:
        driver = self._require_driver()
        if self.query_timeout <= 0:
            return

        if driver.query_timeout_attr is not None:
            setattr(
                self.connection.dbapi_connection,
                driver.query_timeout_attr,
                self.query_timeout * driver.query_timeout_scale,
            )

        sql = driver.dialect.session_timeout_statement(self.query_timeout)
        if sql is None:
            return
        cursor = self.connection.cursor()
        try:
            cursor.execute(sql)
        finally:
            cursor.close()
        self.commit()

    def show_banner(self) -> None:
        if self.engine is None:
            return
        dialect = self.engine.dialect
        version = ".".join(str(v) for v in dialect.server_version_info or ())
        logger.info(f"Database: {dialect.name} {version}".rstrip())
        logger.info(f"Database Driver: {dialect.driver}")

    def get_driver_info(self) -> str:
        if self.engine is None:
            return ""
        return f"{self.engine.dialect.name}+{self.engine.dialect.driver}"

    # Registries

    def create_registries(self) -> None:
        """Create the gateway registries that use this connection.

        Subclasses override this to construct their registries.
        """

    def add_registry(self, registry: "GatewayRegistry") -> None:
        if registry not in self.registries:
            self.registries.append(registry)

    def has_registries(self) -> bool:
        return len(self.registries) > 0

    def has_missing_table(self) -> bool:
        return any(registry.has_missing_table() for registry in self.registries)

    def create_tables(self) -> None:
        for registry in self.registries:
            registry.create_tables()

    def close_registries(self) -> None:
        for registry in self.registries:
            registry.close()

    # Metadata

    def table_exists(self, table_name: str) -> bool:
        """Check the database catalogue for a table."""
        if self.engine is None or not table_name:
            return False
        return inspect(self.engine).has_table(table_name)

    def get_column_names(self, table_name: str) -> list[str]:
        if self.engine is None:
            return []
        return [column["name"] for column in inspect(self.engine).get_columns(table_name)]

    # Statements and transactions

    def cursor(self) -> Any:
        if self.connection is None:
            raise RuntimeError("Database not connected")
        return self.connection.cursor()

    def prepare_statement(self, sql: str) -> PreparedStatement:
        return PreparedStatement(self, sql)

    def execute(self, sql: str) -> None:
        """Execute a statement without parameters, committing in autocommit mode."""
        cursor = self.cursor()
        try:
            cursor.execute(sql)
            if self.auto_commit:
                self.commit()
        except Exception:
            if self.auto_commit:
                self.rollback()
            raise
        finally:
            cursor.close()

    def set_auto_commit(self, auto_commit: bool) -> None:
        """Switch autocommit on or off; switching it on commits pending work."""
        if auto_commit and not self.auto_commit and self.connection is not None:
            self.commit()
        self.auto_commit = auto_commit

    def commit(self) -> None:
        if self.connection is not None:
            self.connection.commit()

    def rollback(self) -> None:
        if self.connection is not None:
            self.connection.rollback()

    # Lifecycle

    def is_connected(self, validate: bool = False) -> bool:
        """Check whether the connection is open.

        Args:
            validate: Whether to ping the server rather than check local state

        Returns:
            True if the connection is usable
        """
        if self.connection is None or self.engine is None:
            return False

        try:
            if validate:
                connected = self.engine.dialect.do_ping(self.connection.dbapi_connection)
            else:
                connected = self.connection.is_valid
        except (SQLAlchemyError, self.engine.dialect.loaded_dbapi.Error) as e:
            logger.warning(f"Connection check failed for '{self.name}': {e}")
            self.status = ConnectionStatus.ERROR
            return False

        self.status = (
            ConnectionStatus.CONNECTED if connected else ConnectionStatus.NOT_CONNECTED
        )
        return bool(connected)

    def close(self, verbose: bool = False) -> None:
        """Close every registry, then the connection and its engine.

        Runs whether or not the connection is still valid.
        """
        try:
            self.close_registries()
            if self.connection is not None:
                if verbose:
                    logger.info(f"Attempting to disconnect from database '{self.name}' ...")
                self.connection.close()
                if verbose:
                    logger.info(f"Disconnected from database '{self.name}' successfully")
        except Exception as e:
            logger.error(
                f"Error disconnecting from database '{self.name}': "
                f"{type(e).__name__}: {e}"
            )
        finally:
            self.registries.clear()
            if self.engine is not None:
                self.engine.dispose()
            self.connection = None
            self.engine = None
            self.status = ConnectionStatus.NOT_CONNECTED

    @staticmethod
    def is_syntax_error(ex: BaseException) -> bool:
        """Whether an error looks like a bad statement rather than a lost connection."""
        message = str(ex).lower()
        return (
            len(message) > 0
            and not any(marker in message for marker in _DISCONNECT_MARKERS)
            and "closed" not in message
        )

    @staticmethod
    def is_disconnect_error(ex: BaseException) -> bool:
        """Whether an error indicates the connection was lost."""
        text = serialize_exception(ex)
        return any(marker in text for marker in _DISCONNECT_MARKERS) or (
            "closed" in text or "Closed" in text
        )
