"""Base class for per-table record gateways."""

import threading
from typing import TYPE_CHECKING, Any

from mediastore.log import get_logger
from mediastore.types import RowType, StatementParamType

from .dialects import Dialect
from .drivers import DatabaseDriver
from .result import OperationResult
from .schema import TableBuilder, TableSpec
from .statement import PreparedStatement

if TYPE_CHECKING:
    from .connection import DatabaseConnection
    from .registry import GatewayRegistry

logger = get_logger(__name__)


def _read_lob(value: Any) -> Any:
    # Drivers that stream LOBs hand back objects rather than values
    if hasattr(value, "read"):
        return value.read()
    if hasattr(value, "getvalue"):
        return value.getvalue()
    return value


class BaseGateway:
    """Runtime for one table: schema lifecycle plus a cache of statements.

    The table definition is built once, at construction, by ``define_table``.
    The table moves from unchecked to absent or created when the catalogue is
    checked, and to created when ``check_table`` creates it on an internal
    connection. Concrete gateways run every read and write under ``lock`` and
    return None, an empty list or -1 without touching the database while
    ``has_connection`` is false.
    """

    def __init__(self, registry: "GatewayRegistry", table_name: str) -> None:
        """Initialize the gateway and register it with its registry.

        Args:
            registry: Registry owning the connection this gateway uses
            table_name: Table name; folded to lower case when the dialect
                does not preserve identifier case
        """
        self.registry = registry
        self.lock = threading.RLock()
        self._statements: dict[str, PreparedStatement] = {}

        if not self.dialect.is_case_sensitive():
            table_name = table_name.lower()
        self.table_name = table_name

        builder = TableBuilder(table_name)
        self.define_table(builder)
        self.table: TableSpec = builder.build()

        self._has_table = self._table_exists()
        registry.register(self)

    def __str__(self) -> str:
        return self.table_name

    def define_table(self, builder: TableBuilder) -> None:
        """Add this table's columns and indices to the builder."""

    @property
    def driver(self) -> DatabaseDriver:
        return self.registry.driver

    @property
    def dialect(self) -> Dialect:
        return self.registry.dialect

    @property
    def database(self) -> "DatabaseConnection":
        return self.registry.connection

    @property
    def connection(self) -> Any:
        """The underlying DB-API connection, None when not connected."""
        return self.database.connection

    # Table lifecycle

    def has_table(self) -> bool:
        return self._has_table

    def has_connection(self) -> bool:
        return self._has_table and self.connection is not None

    def _table_exists(self) -> bool:
        if not self.table_name or not self.database.is_connected():
            return False
        try:
            return self.database.table_exists(self.table_name)
        except Exception as e:
            logger.warning(f"Unable to check for table {self.table_name}: {e}")
            return False

    def has_column(self, column: str) -> bool:
        """Check the live catalogue for a column of this table."""
        if not self.database.is_connected():
            return False
        try:
            names = self.database.get_column_names(self.table_name)
        except Exception as e:
            logger.warning(f"Unable to read columns of {self.table_name}: {e}")
            return False
        return column.lower() in (name.lower() for name in names)

    def check_table(self) -> OperationResult:
        """Create the table if it is missing and the database is internal."""
        if not self.database.is_internal():
            return OperationResult.ignored("External database")
        if self._has_table:
            return OperationResult.ignored("Table exists")
        return self.create_table()

    def create_table(self) -> OperationResult:
        """Create the table and its indices.

        Failures are logged and reported in the result; the table stays
        absent.
        """
        if self.connection is None:
            return OperationResult.ignored("Not connected")

        with self.lock:
            try:
                self.database.execute(self.table.table_sql(self.dialect))
                logger.info(f"{self.table_name} table created in database")

                indices = self.table.indices_sql(self.dialect)
                for sql in indices:
                    self.database.execute(sql)
                if indices:
                    logger.info(f"{len(indices)} indices created in database")
            except Exception as e:
                logger.error(f"Failed to create table {self.table_name}: {e}")
                return OperationResult.failed(e)

            self._has_table = True
            return OperationResult.ok()

    def alter_table(self) -> None:
        """Apply schema changes to an existing table."""

    def drop_table(self) -> OperationResult:
        if self.connection is None or not self.table_name:
            return OperationResult.ignored("Not connected")

        with self.lock:
            try:
                self.database.execute(f"drop table {self.table_name}")
            except Exception as e:
                logger.error(f"Failed to drop table {self.table_name}: {e}")
                return OperationResult.failed(e)

            logger.info(f"{self.table_name} dropped from database")
            self._has_table = False
            return OperationResult.ok()

    # Statements

    def prepare_statement(self, query: str) -> PreparedStatement:
        """Prepare a query after quoting the dialect's reserved words."""
        return self.database.prepare_statement(self.dialect.quote_reserved_words(query))

    def statement(self, key: str, query: str) -> PreparedStatement:
        """Return the cached statement for key, preparing it on first use."""
        stmt = self._statements.get(key)
        if stmt is None or stmt.closed:
            stmt = self.prepare_statement(query)
            self._statements[key] = stmt
        return stmt

    def close_statement(self, key: str) -> None:
        stmt = self._statements.pop(key, None)
        if stmt is not None:
            stmt.close()

    def close(self) -> None:
        """Close every cached statement."""
        for key in list(self._statements):
            self.close_statement(key)

    def clear_parameters(self, stmt: PreparedStatement | None) -> OperationResult:
        if stmt is None:
            return OperationResult.ignored("No statement")
        try:
            stmt.clear_parameters()
        except Exception as e:
            return OperationResult.ignored(str(e), e)
        return OperationResult.ok()

    def handle_insert_error(self, key: str, ex: BaseException) -> bool:
        """Apply the insert failure policy.

        The cached statement is discarded when the driver invalidates
        statements that raised. Returns True when the error is a constraint
        violation, meaning the record already exists and the error can be
        ignored; the caller re-raises otherwise.
        """
        if self.driver.close_on_exception:
            self.close_statement(key)
        return self.driver.is_constraint_violation(ex)

    def pre_query(self) -> None:
        # Embedded engines need an explicit transaction around queries
        if self.driver.embedded:
            self.database.set_auto_commit(False)

    def post_query(self) -> None:
        if self.driver.embedded:
            self.database.set_auto_commit(True)

    def run_query(
        self, key: str, sql: str, params: StatementParamType = None
    ) -> list[RowType]:
        """Run a cached query bracketed by pre_query and post_query."""
        self.pre_query()
        try:
            stmt = self.statement(key, sql)
            self.clear_parameters(stmt)
            return stmt.execute_query(params or [])
        finally:
            self.post_query()

    def run_update(self, key: str, sql: str, params: StatementParamType) -> int:
        """Run a cached insert, update or delete and return the row count."""
        stmt = self.statement(key, sql)
        self.clear_parameters(stmt)
        return stmt.execute_update(params)

    # Values

    def get_clob(self, row: RowType, index: int) -> str:
        """Read a character LOB column as a string."""
        value = row[index]
        if value is None:
            return ""
        if not self.driver.use_string_for_clob():
            value = _read_lob(value)
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value).decode("utf-8")
        return str(value)

    def get_blob(self, row: RowType, index: int) -> bytes | None:
        """Read a binary LOB column as bytes."""
        value = row[index]
        if value is None:
            return None
        if not self.driver.use_bytes_for_blob():
            value = _read_lob(value)
        return bytes(value)

    def to_timestamp(self, value: Any) -> Any:
        return self.dialect.to_db_timestamp(value)

    def from_timestamp(self, value: Any) -> Any:
        return self.dialect.from_db_timestamp(value)
