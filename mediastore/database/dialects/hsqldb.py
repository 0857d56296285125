"""HyperSQL (HSQLDB) dialect."""

from mediastore.constants import DATE_FORMAT_DMY

from .base import Dialect, DialectType, ErrorClassifier


def create_dialect() -> Dialect:
    return Dialect(
        dialect_type=DialectType.HSQLDB,
        constraint_violation=ErrorClassifier(
            markers=["integrity constraint violation"],
            exception_types=["IntegrityError"],
        ),
        data_too_long=ErrorClassifier(
            markers=["right truncation"], sql_states=["22001"]
        ),
        tablespace_error=ErrorClassifier(markers=["is full"]),
        date_format=DATE_FORMAT_DMY,
        date_template="TO_TIMESTAMP('{date}','DD-MM-YYYY HH24:MI:SS')",
        yesterday_date="CURRENT_TIMESTAMP - 1 DAY",
    )
