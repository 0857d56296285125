"""Microsoft SQL Server dialect."""

from mediastore.constants import DATE_FORMAT_ISO

from .base import Dialect, DialectType, ErrorClassifier, merge_defaults, merge_type_names


def create_dialect() -> Dialect:
    return Dialect(
        dialect_type=DialectType.SQLSERVER,
        type_names=merge_type_names(
            BIGINT="NUMERIC(19)",
            TIMESTAMP="DATETIME2",
            LONGVARCHAR="VARCHAR(MAX)",
            VARBINARY="VARBINARY(MAX)",
            BOOLEAN="BIT",
        ),
        defaults=merge_defaults(BOOLEAN="0"),
        reserved_words=["PERCENT"],
        constraint_violation=ErrorClassifier(markers=["Violation"]),
        data_too_long=ErrorClassifier(
            markers=["bigger than max size", "unreasonable conversion"]
        ),
        # The allocation message is only found in the nested driver trace
        tablespace_error=ErrorClassifier(
            traceback_markers=["Could not allocate space", "is full"]
        ),
        invalid_column=ErrorClassifier(markers=["column", "out of range"]),
        date_format=DATE_FORMAT_ISO,
        date_template="CAST('{date}' AS DATETIME2)",
        yesterday_date="DATEADD(day, -1, GETDATE())",
        zero_date="CAST('1970-01-01 00:00:00' AS DATETIME2)",
    )
