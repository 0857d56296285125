"""Tests for the per-engine SQL dialects."""

import sqlite3
from datetime import datetime, timezone

import pytest
from sqlalchemy import exc as sa_exc

from mediastore.database.dialects import (
    DIALECTS,
    Dialect,
    DialectType,
    ErrorClassifier,
    create_dialect,
    get_message,
    get_sql_state,
)
from mediastore.types import SqlType


class IntegrityError(Exception):
    """Stand-in for a DB-API IntegrityError raised by a driver."""


class PgError(Exception):
    sqlstate = "23505"


CONSTRAINT_VIOLATIONS = {
    DialectType.DERBY: Exception(
        "The statement was aborted because it would have caused a duplicate key value"
    ),
    DialectType.DB2: IntegrityError("SQL0803N One or more values are duplicates"),
    DialectType.H2: Exception("Unique index or primary key violation"),
    DialectType.HSQLDB: Exception(
        "integrity constraint violation: unique constraint or index violation"
    ),
    DialectType.MYSQL: Exception("Duplicate entry '1' for key 'PRIMARY'"),
    DialectType.ORACLE: Exception("ORA-00001: unique constraint (PK) violated"),
    DialectType.POSTGRESQL: Exception(
        'duplicate key value violates unique constraint "parameters_pk"'
    ),
    DialectType.SQLSERVER: Exception("Violation of PRIMARY KEY constraint 'PK'"),
    DialectType.SQLITE: sqlite3.IntegrityError("UNIQUE constraint failed: PARAMETERS.ID"),
}


class TestTypeNames:
    """Test the type name and default maps."""

    @pytest.mark.parametrize("dialect_type", list(DialectType))
    @pytest.mark.parametrize("sql_type", list(SqlType))
    def test_every_type_has_a_name(
        self, dialect_type: DialectType, sql_type: SqlType
    ) -> None:
        assert create_dialect(dialect_type).get_type_name(sql_type)

    @pytest.mark.parametrize(
        "dialect_type,expected",
        [
            (DialectType.SQLSERVER, "BIT"),
            (DialectType.MYSQL, "TINYINT(1)"),
            (DialectType.DERBY, "SMALLINT"),
            (DialectType.DB2, "SMALLINT"),
            (DialectType.ORACLE, "SMALLINT"),
            (DialectType.H2, "BOOLEAN"),
            (DialectType.POSTGRESQL, "BOOLEAN"),
        ],
    )
    def test_boolean_type(self, dialect_type: DialectType, expected: str) -> None:
        assert create_dialect(dialect_type).get_type_name(SqlType.BOOLEAN) == expected

    def test_overrides(self) -> None:
        """Test engines override only the types that diverge."""
        mysql = create_dialect(DialectType.MYSQL)
        oracle = create_dialect(DialectType.ORACLE)

        assert mysql.get_type_name(SqlType.TIMESTAMP) == "DATETIME"
        assert mysql.get_type_name(SqlType.VARCHAR) == "VARCHAR"
        assert oracle.get_type_name(SqlType.VARCHAR) == "VARCHAR2"
        assert oracle.get_type_name(SqlType.TIMESTAMP) == "DATE"
        assert oracle.get_type_name(SqlType.INTEGER) == "NUMBER(10,0)"
        assert create_dialect("sqlserver").get_type_name(SqlType.LONGVARCHAR) == (
            "VARCHAR(MAX)"
        )
        assert create_dialect("postgresql").get_type_name(SqlType.LONGVARCHAR) == "TEXT"
        assert create_dialect("sqlite").get_type_name(SqlType.LONGVARCHAR) == "TEXT"
        assert create_dialect("h2").get_type_name(SqlType.LONGVARCHAR) == "CLOB"

    def test_defaults(self) -> None:
        assert create_dialect("h2").get_default(SqlType.BOOLEAN) == "FALSE"
        assert create_dialect("derby").get_default(SqlType.BOOLEAN) == "0"
        assert create_dialect("h2").get_default(SqlType.VARCHAR) is None


class TestFactory:
    """Test dialect construction."""

    def test_every_engine_is_registered(self) -> None:
        assert set(DIALECTS) == set(DialectType)

    def test_name_lookup_ignores_case(self) -> None:
        dialect = create_dialect("PostgreSQL")
        assert dialect.dialect_type == DialectType.POSTGRESQL
        assert dialect.name == "postgresql"

    def test_unknown_engine(self) -> None:
        with pytest.raises(ValueError):
            create_dialect("access")

    def test_instances_are_independent(self) -> None:
        first = create_dialect(DialectType.DB2)
        second = create_dialect(DialectType.DB2)

        first.add_reserved_word("VALUE")

        assert first.is_reserved_word("VALUE")
        assert not second.is_reserved_word("VALUE")

    @pytest.mark.parametrize(
        "dialect_type,expected",
        [
            (DialectType.MYSQL, False),
            (DialectType.POSTGRESQL, False),
            (DialectType.ORACLE, True),
            (DialectType.SQLITE, True),
            (DialectType.DERBY, True),
        ],
    )
    def test_case_sensitivity(self, dialect_type: DialectType, expected: bool) -> None:
        assert create_dialect(dialect_type).is_case_sensitive() is expected


class TestReservedWords:
    """Test quoting of reserved words."""

    @pytest.fixture
    def db2(self) -> Dialect:
        return create_dialect(DialectType.DB2)

    def test_quotes_whole_tokens(self, db2: Dialect) -> None:
        sql = "SELECT ID, ATTRIBUTES FROM EMAILS WHERE ATTRIBUTES IS NOT NULL"
        assert db2.quote_reserved_words(sql) == (
            'SELECT ID, "ATTRIBUTES" FROM EMAILS WHERE "ATTRIBUTES" IS NOT NULL'
        )

    def test_quoting_is_idempotent(self, db2: Dialect) -> None:
        sql = "UPDATE EMAILS SET ATTRIBUTES=? WHERE ID=?"
        once = db2.quote_reserved_words(sql)
        assert db2.quote_reserved_words(once) == once

    def test_ignores_partial_and_lowercase_matches(self, db2: Dialect) -> None:
        sql = "SELECT MY_ATTRIBUTES, ATTRIBUTES_OLD, attributes FROM T"
        assert db2.quote_reserved_words(sql) == sql

    def test_no_reserved_words(self) -> None:
        sqlite = create_dialect(DialectType.SQLITE)
        sql = "SELECT ATTRIBUTES FROM EMAILS"
        assert sqlite.quote_reserved_words(sql) == sql

    def test_added_word_is_quoted(self, db2: Dialect) -> None:
        db2.add_reserved_word("VALUE")
        assert db2.quote_reserved_words("SELECT VALUE FROM PARAMETERS") == (
            'SELECT "VALUE" FROM PARAMETERS'
        )


class TestErrorClassification:
    """Test the driver error classifiers."""

    @pytest.mark.parametrize("dialect_type", list(DialectType))
    def test_constraint_violation(self, dialect_type: DialectType) -> None:
        dialect = create_dialect(dialect_type)
        assert dialect.is_constraint_violation(CONSTRAINT_VIOLATIONS[dialect_type])

    @pytest.mark.parametrize("dialect_type", list(DialectType))
    def test_unrelated_error(self, dialect_type: DialectType) -> None:
        dialect = create_dialect(dialect_type)
        error = OSError("connection refused")

        assert not dialect.is_constraint_violation(error)
        assert not dialect.is_data_too_long(error)
        assert not dialect.is_tablespace_error(error)
        assert not dialect.is_constraint_violation(None)

    def test_sql_state(self) -> None:
        """Test errors are recognised by SQLSTATE alone."""
        assert create_dialect("postgresql").is_constraint_violation(PgError("boom"))
        assert create_dialect("derby").is_data_too_long(Exception("22001", "boom"))
        assert not create_dialect("oracle").is_constraint_violation(PgError("boom"))

    def test_wrapped_driver_error(self) -> None:
        """Test SQLAlchemy wrappers are unwrapped before matching."""
        orig = sqlite3.IntegrityError("UNIQUE constraint failed: EMAILS.ID")
        wrapped = sa_exc.IntegrityError("INSERT INTO EMAILS", [], orig)

        assert create_dialect("sqlite").is_constraint_violation(wrapped)
        assert get_message(wrapped) == "UNIQUE constraint failed: EMAILS.ID"

    def test_data_too_long(self) -> None:
        assert create_dialect("mysql").is_data_too_long(
            Exception("Data too long for column 'NAME' at row 1")
        )
        assert create_dialect("oracle").is_data_too_long(
            Exception("ORA-12899: value too large for column")
        )
        assert create_dialect("postgresql").is_data_too_long(
            Exception("value too long for type character varying(30)")
        )

    def test_tablespace_error(self) -> None:
        assert create_dialect("mysql").is_tablespace_error(
            Exception("The table 'EMAILS' is full")
        )
        assert create_dialect("oracle").is_tablespace_error(
            Exception("ORA-01653: unable to extend table")
        )

    def test_tablespace_error_in_cause(self) -> None:
        """Test SQL Server finds the allocation failure in the chained trace."""
        try:
            try:
                raise Exception("Could not allocate space for object 'EMAILS'")
            except Exception as e:
                raise RuntimeError("batch failed") from e
        except RuntimeError as e:
            error = e

        assert create_dialect("sqlserver").is_tablespace_error(error)
        assert not create_dialect("mysql").is_tablespace_error(error)

    def test_invalid_column(self) -> None:
        assert create_dialect("mysql").is_invalid_column_error(
            Exception("Unknown COLUMN 'X' in field list")
        )
        assert create_dialect("db2").is_invalid_column_error(
            Exception("Invalid parameter index 7")
        )
        sqlserver = create_dialect("sqlserver")
        assert sqlserver.is_invalid_column_error(Exception("The column index is out of range"))
        assert not sqlserver.is_invalid_column_error(Exception("Invalid Column name"))

    def test_classifier_markers_are_configurable(self) -> None:
        classifier = ErrorClassifier(markers=["violation"])
        assert not classifier.matches(Exception("already exists"))

        classifier.add_marker("already exists")
        classifier.add_marker("already exists")

        assert classifier.markers == ["violation", "already exists"]
        assert classifier.matches(Exception("row already exists"))

    def test_get_sql_state(self) -> None:
        assert get_sql_state(PgError()) == "23505"
        assert get_sql_state(Exception("HY000", "general error")) == "HY000"
        assert get_sql_state(Exception("not a state")) is None
        assert get_sql_state(None) is None


class TestDates:
    """Test date literal rendering and timestamp binding."""

    @pytest.mark.parametrize(
        "dialect_type,expected",
        [
            (DialectType.DERBY, "TIMESTAMP('19700101000000')"),
            (
                DialectType.ORACLE,
                "TO_DATE('01-01-1970 00:00:00','DD-MM-YYYY HH24:MI:SS')",
            ),
            (
                DialectType.POSTGRESQL,
                "TO_TIMESTAMP('01-01-1970 00:00:00','DD-MM-YYYY HH24:MI:SS')",
            ),
            (
                DialectType.MYSQL,
                "STR_TO_DATE('01-01-1970 00:00:00','%d-%m-%Y %H:%i:%s')",
            ),
            (DialectType.SQLSERVER, "CAST('1970-01-01 00:00:00' AS DATETIME2)"),
            (DialectType.SQLITE, "0"),
        ],
    )
    def test_epoch_conversion(self, dialect_type: DialectType, expected: str) -> None:
        assert create_dialect(dialect_type).get_date_conversion(0) == expected

    def test_conversion_uses_utc(self) -> None:
        derby = create_dialect(DialectType.DERBY)
        assert derby.get_date_conversion(1700000000000) == "TIMESTAMP('20231114221320')"
        assert create_dialect("sqlite").get_date_conversion(1234) == "1234"

    def test_zero_and_yesterday(self) -> None:
        sqlserver = create_dialect(DialectType.SQLSERVER)
        postgresql = create_dialect(DialectType.POSTGRESQL)

        assert sqlserver.get_zero_date() == "CAST('1970-01-01 00:00:00' AS DATETIME2)"
        assert postgresql.get_zero_date() == postgresql.get_date_conversion(0)
        assert postgresql.get_yesterday_date() == "NOW() - INTERVAL '1 DAY'"
        assert create_dialect("oracle").get_yesterday_date() == "SYSDATE-1"

    def test_timestamp_binding(self) -> None:
        value = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

        assert create_dialect("sqlite").to_db_timestamp(value) == 1700000000000
        assert create_dialect("postgresql").to_db_timestamp(value) == datetime(
            2023, 11, 14, 22, 13, 20
        )
        assert create_dialect("sqlite").to_db_timestamp(None) is None

    @pytest.mark.parametrize(
        "raw",
        [
            1700000000000,
            "1700000000000",
            "2023-11-14 22:13:20",
            datetime(2023, 11, 14, 22, 13, 20),
        ],
    )
    def test_timestamp_reading(self, raw: object) -> None:
        expected = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
        assert create_dialect("sqlite").from_db_timestamp(raw) == expected

    def test_boolean_binding(self) -> None:
        assert create_dialect("oracle").to_db_boolean(True) == 1
        assert create_dialect("postgresql").to_db_boolean(True) is True
        assert create_dialect("h2").to_db_boolean(None) is None


def test_session_timeout_statement() -> None:
    assert create_dialect("postgresql").session_timeout_statement(60) == (
        "SET statement_timeout = 60000"
    )
    assert create_dialect("h2").session_timeout_statement(5) == "SET QUERY_TIMEOUT 5000"
    assert create_dialect("postgresql").session_timeout_statement(0) is None
    assert create_dialect("sqlite").session_timeout_statement(60) is None
