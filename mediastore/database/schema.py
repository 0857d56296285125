"""Table definitions rendered as dialect-specific DDL."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mediastore.types import IndexType, SqlType

if TYPE_CHECKING:
    from .dialects import Dialect


def _column_list(columns: str | Sequence[str]) -> tuple[str, ...]:
    if isinstance(columns, str):
        return (columns,)
    return tuple(columns)


@dataclass(frozen=True)
class ColumnSpec:
    """A single table column."""

    name: str
    sql_type: SqlType
    size: int = 0
    required: bool = False
    has_default: bool = False

    def __post_init__(self) -> None:
        if self.name is None:
            object.__setattr__(self, "name", "")

    def render_definition(self, dialect: "Dialect") -> str:
        """Render the column clause used inside CREATE TABLE.

        The clause is ``name TYPE[(size)][ NOT NULL][ DEFAULT value]`` with the
        name double quoted when the dialect reserves it.

        Args:
            dialect: Dialect supplying type names, defaults and reserved words

        Returns:
            Column definition SQL fragment
        """
        name = self.name
        if dialect.is_reserved_word(name):
            name = f'"{name}"'

        sql = f"{name} {dialect.get_type_name(self.sql_type)}"
        if self.size > 0:
            sql += f"({self.size})"
        if self.required:
            sql += " NOT NULL"
        if self.has_default:
            sql += f" DEFAULT {dialect.get_default(self.sql_type)}"
        return sql


@dataclass(frozen=True)
class IndexSpec:
    """A primary key constraint or a secondary index."""

    name: str
    kind: IndexType
    columns: tuple[str, ...]
    table_name: str = ""

    def __post_init__(self) -> None:
        if self.name is None:
            object.__setattr__(self, "name", "")
        if self.table_name is None:
            object.__setattr__(self, "table_name", "")
        if not self.columns:
            raise ValueError(f"Index {self.name} must have at least one column")
        if self.kind == IndexType.INDEX and not self.table_name:
            raise ValueError(f"Index {self.name} requires a table name")

    @property
    def is_primary_key(self) -> bool:
        return self.kind == IndexType.PRIMARY_KEY

    def render_create_statement(self) -> str:
        """Render the index as SQL.

        A primary key renders as an inline ``CONSTRAINT`` clause, any other
        index as a standalone ``CREATE INDEX`` statement.
        """
        columns = ",".join(self.columns)
        if self.is_primary_key:
            return f"CONSTRAINT {self.name} PRIMARY KEY ({columns})"
        return f"CREATE INDEX {self.name} ON {self.table_name}({columns})"


@dataclass(frozen=True)
class TableSpec:
    """Immutable definition of a table, its primary key and its indices."""

    name: str
    columns: tuple[ColumnSpec, ...] = ()
    primary_key: IndexSpec | None = None
    indices: tuple[IndexSpec, ...] = ()

    @property
    def initialised(self) -> bool:
        """Whether any columns have been defined."""
        return len(self.columns) > 0

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]

    def get_column(self, name: str) -> ColumnSpec | None:
        for column in self.columns:
            if column.name.lower() == name.lower():
                return column
        return None

    def table_sql(self, dialect: "Dialect") -> str:
        """Render the CREATE TABLE statement for the given dialect.

        Args:
            dialect: Dialect used to render column types

        Returns:
            CREATE TABLE SQL statement
        """
        name = self.name if dialect.is_case_sensitive() else self.name.lower()
        clauses = [column.render_definition(dialect) for column in self.columns]
        if self.primary_key is not None:
            clauses.append(self.primary_key.render_create_statement())
        return f"CREATE TABLE {name} ( {', '.join(clauses)})"

    def indices_sql(self, dialect: "Dialect") -> list[str]:
        """Render the CREATE INDEX statements in declaration order."""
        return [index.render_create_statement() for index in self.indices]


@dataclass
class TableBuilder:
    """Accumulates columns and indices, then builds an immutable TableSpec."""

    name: str
    columns: list[ColumnSpec] = field(default_factory=list)
    primary_key: IndexSpec | None = None
    indices: list[IndexSpec] = field(default_factory=list)

    def add_column(
        self,
        name: str,
        sql_type: SqlType,
        size: int = 0,
        required: bool = False,
        default: bool = False,
    ) -> "TableBuilder":
        """Append a column; columns render in the order they are added."""
        self.columns.append(
            ColumnSpec(
                name=name,
                sql_type=sql_type,
                size=size,
                required=required,
                has_default=default,
            )
        )
        return self

    def set_primary_key(
        self, name: str, columns: str | Sequence[str]
    ) -> "TableBuilder":
        self.primary_key = IndexSpec(
            name=name, kind=IndexType.PRIMARY_KEY, columns=_column_list(columns)
        )
        return self

    def add_index(self, name: str, columns: str | Sequence[str]) -> "TableBuilder":
        self.indices.append(
            IndexSpec(
                name=name,
                kind=IndexType.INDEX,
                columns=_column_list(columns),
                table_name=self.name,
            )
        )
        return self

    def build(self) -> TableSpec:
        return TableSpec(
            name=self.name,
            columns=tuple(self.columns),
            primary_key=self.primary_key,
            indices=tuple(self.indices),
        )
