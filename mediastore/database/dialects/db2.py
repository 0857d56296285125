"""IBM DB2 dialect."""

from mediastore.constants import DATE_FORMAT_DMY

from .base import Dialect, DialectType, ErrorClassifier, merge_defaults, merge_type_names


def create_dialect() -> Dialect:
    return Dialect(
        dialect_type=DialectType.DB2,
        type_names=merge_type_names(BOOLEAN="SMALLINT"),
        defaults=merge_defaults(BOOLEAN="0"),
        reserved_words=["ATTRIBUTES"],
        constraint_violation=ErrorClassifier(
            markers=["SQLCODE=-803"],
            exception_types=["IntegrityError"],
            sql_states=["23505"],
        ),
        data_too_long=ErrorClassifier(
            markers=["SQLCODE=-302", "SQLCODE=-404"], sql_states=["22001"]
        ),
        tablespace_error=ErrorClassifier(
            markers=["SQLCODE=-289", "is full"], sql_states=["57011"]
        ),
        invalid_column=ErrorClassifier(
            markers=["column", "parameter index"], ignore_case=True
        ),
        date_format=DATE_FORMAT_DMY,
        date_template="TO_DATE('{date}','DD-MM-YYYY HH24:MI:SS')",
        yesterday_date="CURRENT TIMESTAMP - 1 DAY",
    )
