"""Prepared statements over a DB-API cursor."""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from mediastore.log import get_logger
from mediastore.types import RowType

from .exceptions import StatementClosedError

if TYPE_CHECKING:
    from .connection import DatabaseConnection

logger = get_logger(__name__)


def convert_placeholders(sql: str, paramstyle: str) -> str:
    """Rewrite ``?`` placeholders into the driver's DB-API paramstyle.

    Placeholders inside quoted literals or identifiers are left alone. For
    the ``format`` and ``pyformat`` styles every literal ``%`` is doubled.

    Args:
        sql: Statement written with ``?`` placeholders
        paramstyle: DB-API paramstyle of the driver

    Returns:
        Statement using the driver's placeholder syntax
    """
    percent = paramstyle in ("format", "pyformat")
    if paramstyle == "qmark":
        return sql

    out: list[str] = []
    quote: str | None = None
    position = 0
    for ch in sql:
        if percent and ch == "%":
            out.append("%%")
            continue
        if quote is not None:
            if ch == quote:
                quote = None
            out.append(ch)
            continue
        if ch in ("'", '"'):
            quote = ch
            out.append(ch)
        elif ch == "?":
            position += 1
            if percent:
                out.append("%s")
            elif paramstyle == "numeric":
                out.append(f":{position}")
            elif paramstyle == "named":
                out.append(f":p{position}")
            else:
                raise ValueError(f"Unsupported paramstyle: {paramstyle}")
        else:
            out.append(ch)
    return "".join(out)


class PreparedStatement:
    """A reusable statement bound to the shared DB-API connection.

    The cursor is created on first execution and kept until the statement is
    closed. Updates are committed when the connection is in autocommit mode.
    """

    def __init__(self, connection: "DatabaseConnection", sql: str) -> None:
        self.connection = connection
        self.paramstyle = connection.paramstyle
        self.sql = convert_placeholders(sql, self.paramstyle)
        self._cursor: Any = None
        self._parameters: list[Any] = []
        self.closed = False

    def __repr__(self) -> str:
        return f"PreparedStatement({self.sql!r})"

    @property
    def parameters(self) -> list[Any]:
        return list(self._parameters)

    def set_parameters(self, params: Sequence[Any]) -> None:
        self._check_open()
        self._parameters = list(params)

    def clear_parameters(self) -> None:
        self._check_open()
        self._parameters = []

    def _check_open(self) -> None:
        if self.closed:
            raise StatementClosedError(f"Statement is closed: {self.sql}")

    def _bind(self, params: Sequence[Any] | None) -> Any:
        values = list(params) if params is not None else self._parameters
        if self.paramstyle == "named":
            return {f"p{i}": value for i, value in enumerate(values, start=1)}
        return tuple(values)

    def _execute(self, params: Sequence[Any] | None) -> Any:
        self._check_open()
        if self._cursor is None:
            self._cursor = self.connection.cursor()
        try:
            self._cursor.execute(self.sql, self._bind(params))
        except Exception:
            if self.connection.auto_commit:
                self.connection.rollback()
            raise
        return self._cursor

    def execute_query(self, params: Sequence[Any] | None = None) -> list[RowType]:
        """Execute a query and fetch every row.

        Args:
            params: Values for the placeholders, or the bound parameters if None

        Returns:
            Fetched rows as tuples
        """
        cursor = self._execute(params)
        return [tuple(row) for row in cursor.fetchall()]

    def execute_update(self, params: Sequence[Any] | None = None) -> int:
        """Execute an INSERT, UPDATE, DELETE or DDL statement.

        Args:
            params: Values for the placeholders, or the bound parameters if None

        Returns:
            Number of affected rows, -1 when the driver does not report it
        """
        cursor = self._execute(params)
        if self.connection.auto_commit:
            self.connection.commit()
        return cursor.rowcount

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._cursor is not None:
            try:
                self._cursor.close()
            except Exception as e:
                logger.debug(f"Ignored error closing statement: {e}")
            self._cursor = None
