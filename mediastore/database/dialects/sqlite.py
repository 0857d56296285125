"""SQLite dialect.

Timestamps are stored as epoch milliseconds, so date literals are plain
integers.
"""

from .base import Dialect, DialectType, ErrorClassifier, merge_type_names


def create_dialect() -> Dialect:
    return Dialect(
        dialect_type=DialectType.SQLITE,
        use_string_for_clob=True,
        use_bytes_for_blob=True,
        type_names=merge_type_names(LONGVARCHAR="TEXT"),
        # The driver reports a misused statement after a failed insert
        constraint_violation=ErrorClassifier(
            markers=["constraint failed", "statement is not executing"]
        ),
        data_too_long=ErrorClassifier(markers=["value too long"]),
        yesterday_date="(CAST(strftime('%s','now') AS INTEGER) - 86400) * 1000",
    )
