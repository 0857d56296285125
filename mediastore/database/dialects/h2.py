"""H2 dialect."""

from mediastore.constants import DATE_FORMAT_DMY

from .base import Dialect, DialectType, ErrorClassifier


def create_dialect() -> Dialect:
    # No tablespaces, so the tablespace classifier never matches
    return Dialect(
        dialect_type=DialectType.H2,
        constraint_violation=ErrorClassifier(markers=["violation"]),
        data_too_long=ErrorClassifier(
            markers=["Value too long"], sql_states=["22001"]
        ),
        date_format=DATE_FORMAT_DMY,
        date_template="PARSEDATETIME('{date}','dd-MM-yyyy HH:mm:ss')",
        yesterday_date="DATEADD('DAY', -1, CURRENT_TIMESTAMP)",
        session_timeout_sql="SET QUERY_TIMEOUT {millis}",
    )
