"""Oracle dialect."""

from mediastore.constants import DATE_FORMAT_DMY

from .base import Dialect, DialectType, ErrorClassifier, merge_defaults, merge_type_names


def create_dialect() -> Dialect:
    return Dialect(
        dialect_type=DialectType.ORACLE,
        type_names=merge_type_names(
            VARCHAR="VARCHAR2",
            TIMESTAMP="DATE",
            SMALLINT="NUMBER(5,0)",
            INTEGER="NUMBER(10,0)",
            BIGINT="NUMBER(19,0)",
            BOOLEAN="SMALLINT",
        ),
        defaults=merge_defaults(BOOLEAN="0"),
        constraint_violation=ErrorClassifier(markers=["ORA-00001"]),
        data_too_long=ErrorClassifier(
            markers=["bigger than max size", "ORA-12899"]
        ),
        tablespace_error=ErrorClassifier(markers=["unable to extend", "ORA-01653"]),
        date_format=DATE_FORMAT_DMY,
        date_template="TO_DATE('{date}','DD-MM-YYYY HH24:MI:SS')",
        yesterday_date="SYSDATE-1",
    )
