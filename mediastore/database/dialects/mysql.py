"""MySQL dialect."""

from mediastore.constants import DATE_FORMAT_DMY

from .base import Dialect, DialectType, ErrorClassifier, merge_type_names


def create_dialect() -> Dialect:
    return Dialect(
        dialect_type=DialectType.MYSQL,
        case_sensitive=False,
        type_names=merge_type_names(
            TIMESTAMP="DATETIME",
            BOOLEAN="TINYINT(1)",
            LONGVARCHAR="LONGTEXT",
            VARBINARY="LONGBLOB",
        ),
        constraint_violation=ErrorClassifier(
            markers=["Duplicate entry"], exception_types=["IntegrityError"]
        ),
        data_too_long=ErrorClassifier(
            markers=["Data too long"], sql_states=["22001"]
        ),
        tablespace_error=ErrorClassifier(markers=["is full"]),
        date_format=DATE_FORMAT_DMY,
        date_template="STR_TO_DATE('{date}','%d-%m-%Y %H:%i:%s')",
        yesterday_date="DATE_SUB(NOW(), INTERVAL 1 DAY)",
        session_timeout_sql="SET SESSION max_execution_time = {millis}",
    )
