"""Tests for table definitions and their DDL."""

import dataclasses

import pytest

from mediastore.database.dialects import DialectType, create_dialect
from mediastore.database.schema import ColumnSpec, IndexSpec, TableBuilder, TableSpec
from mediastore.types import IndexType, SqlType


@pytest.fixture
def table() -> TableSpec:
    builder = TableBuilder("SAMPLES")
    builder.add_column("ID", SqlType.VARCHAR, 36, required=True)
    builder.add_column("NAME", SqlType.VARCHAR, 30)
    builder.add_column("ENABLED", SqlType.BOOLEAN, default=True)
    builder.set_primary_key("SAMPLES_PK", "ID")
    builder.add_index("SAMPLES_NAME_IDX", ["NAME", "ENABLED"])
    return builder.build()


class TestColumnSpec:
    """Test column clause rendering."""

    def test_required_with_size(self) -> None:
        column = ColumnSpec("ID", SqlType.VARCHAR, 36, required=True)
        assert column.render_definition(create_dialect("sqlite")) == (
            "ID VARCHAR(36) NOT NULL"
        )

    def test_default_value(self) -> None:
        column = ColumnSpec("ENABLED", SqlType.BOOLEAN, has_default=True)
        assert column.render_definition(create_dialect("derby")) == (
            "ENABLED SMALLINT DEFAULT 0"
        )
        assert column.render_definition(create_dialect("h2")) == (
            "ENABLED BOOLEAN DEFAULT FALSE"
        )

    def test_vendor_type(self) -> None:
        column = ColumnSpec("CREATED_DATE", SqlType.TIMESTAMP, required=True)
        assert column.render_definition(create_dialect("mysql")) == (
            "CREATED_DATE DATETIME NOT NULL"
        )

    def test_reserved_name_is_quoted(self) -> None:
        column = ColumnSpec("ATTRIBUTES", SqlType.LONGVARCHAR, required=True)
        assert column.render_definition(create_dialect(DialectType.DB2)) == (
            '"ATTRIBUTES" CLOB NOT NULL'
        )
        assert column.render_definition(create_dialect(DialectType.SQLITE)) == (
            "ATTRIBUTES TEXT NOT NULL"
        )


class TestIndexSpec:
    """Test primary keys and indices."""

    def test_primary_key(self) -> None:
        index = IndexSpec("T_PK", IndexType.PRIMARY_KEY, ("A", "B"))
        assert index.is_primary_key
        assert index.render_create_statement() == "CONSTRAINT T_PK PRIMARY KEY (A,B)"

    def test_index(self) -> None:
        index = IndexSpec("T_IDX", IndexType.INDEX, ("A",), table_name="T")
        assert not index.is_primary_key
        assert index.render_create_statement() == "CREATE INDEX T_IDX ON T(A)"

    def test_requires_columns(self) -> None:
        with pytest.raises(ValueError):
            IndexSpec("T_PK", IndexType.PRIMARY_KEY, ())

    def test_index_requires_table(self) -> None:
        with pytest.raises(ValueError):
            IndexSpec("T_IDX", IndexType.INDEX, ("A",))


class TestTableSpec:
    """Test table DDL rendering."""

    def test_table_sql(self, table: TableSpec) -> None:
        assert table.table_sql(create_dialect("sqlite")) == (
            "CREATE TABLE SAMPLES ( ID VARCHAR(36) NOT NULL, NAME VARCHAR(30), "
            "ENABLED BOOLEAN DEFAULT FALSE, CONSTRAINT SAMPLES_PK PRIMARY KEY (ID))"
        )

    def test_table_name_folded_for_case_insensitive_dialect(
        self, table: TableSpec
    ) -> None:
        sql = table.table_sql(create_dialect("postgresql"))
        assert sql.startswith("CREATE TABLE samples ( ID VARCHAR(36) NOT NULL")

    def test_indices_sql(self, table: TableSpec) -> None:
        assert table.indices_sql(create_dialect("sqlite")) == [
            "CREATE INDEX SAMPLES_NAME_IDX ON SAMPLES(NAME,ENABLED)"
        ]

    def test_columns(self, table: TableSpec) -> None:
        assert table.initialised
        assert table.column_names == ["ID", "NAME", "ENABLED"]
        assert table.get_column("name") is table.columns[1]
        assert table.get_column("missing") is None

    def test_is_immutable(self, table: TableSpec) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            table.name = "OTHER"  # type: ignore[misc]

    def test_without_primary_key(self) -> None:
        table = TableBuilder("LOG").add_column("LINE", SqlType.LONGVARCHAR).build()
        assert table.table_sql(create_dialect("postgresql")) == (
            "CREATE TABLE log ( LINE TEXT)"
        )
        assert table.indices_sql(create_dialect("postgresql")) == []


def test_empty_builder() -> None:
    table = TableBuilder("EMPTY").build()
    assert not table.initialised
    assert table.primary_key is None
