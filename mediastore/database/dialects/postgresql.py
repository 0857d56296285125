"""PostgreSQL dialect."""

from mediastore.constants import DATE_FORMAT_DMY

from .base import Dialect, DialectType, ErrorClassifier, merge_type_names


def create_dialect() -> Dialect:
    return Dialect(
        dialect_type=DialectType.POSTGRESQL,
        case_sensitive=False,
        use_integer_for_boolean=False,
        use_string_for_clob=True,
        use_bytes_for_blob=True,
        type_names=merge_type_names(LONGVARCHAR="TEXT", VARBINARY="BYTEA"),
        constraint_violation=ErrorClassifier(
            markers=["violates"], sql_states=["23505"]
        ),
        data_too_long=ErrorClassifier(
            markers=["value too long"], sql_states=["22001"]
        ),
        tablespace_error=ErrorClassifier(
            markers=["No space left on device"], sql_states=["53100"]
        ),
        date_format=DATE_FORMAT_DMY,
        date_template="TO_TIMESTAMP('{date}','DD-MM-YYYY HH24:MI:SS')",
        yesterday_date="NOW() - INTERVAL '1 DAY'",
        session_timeout_sql="SET statement_timeout = {millis}",
    )
