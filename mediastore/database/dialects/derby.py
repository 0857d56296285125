"""Apache Derby dialect."""

from mediastore.constants import DATE_FORMAT_DERBY

from .base import Dialect, DialectType, ErrorClassifier, merge_defaults, merge_type_names


def create_dialect() -> Dialect:
    return Dialect(
        dialect_type=DialectType.DERBY,
        type_names=merge_type_names(BOOLEAN="SMALLINT"),
        defaults=merge_defaults(BOOLEAN="0"),
        constraint_violation=ErrorClassifier(
            markers=["duplicate key"], sql_states=["23505"]
        ),
        data_too_long=ErrorClassifier(
            markers=["truncation error"], sql_states=["22001"]
        ),
        tablespace_error=ErrorClassifier(
            markers=["not enough space", "is full"], sql_states=["XSDG3"]
        ),
        date_format=DATE_FORMAT_DERBY,
        date_template="TIMESTAMP('{date}')",
        yesterday_date="{fn TIMESTAMPADD(SQL_TSI_DAY, -1, CURRENT_TIMESTAMP)}",
    )
