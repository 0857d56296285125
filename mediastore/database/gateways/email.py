"""Gateway for the EMAILS table."""

from typing import TYPE_CHECKING

from mediastore.log import get_logger
from mediastore.models.admin import DeliveryStatus, Email
from mediastore.types import RowType, SqlType

from ..gateway import BaseGateway
from ..schema import TableBuilder

if TYPE_CHECKING:
    from ..registry import GatewayRegistry

logger = get_logger(__name__)

COLUMNS = (
    "ID, CREATED_DATE, UPDATED_DATE, SUBJECT, ATTRIBUTES, PROVIDER, MESSAGE_ID, STATUS"
)

GET_BY_ID_SQL = f"SELECT {COLUMNS} FROM EMAILS WHERE ID=?"
INSERT_SQL = (
    "INSERT INTO EMAILS"
    "( ID, CREATED_DATE, UPDATED_DATE, SUBJECT, ATTRIBUTES, STATUS )"
    "VALUES"
    "( ?, ?, ?, ?, ?, ? )"
)
UPDATE_SQL = (
    "UPDATE EMAILS SET UPDATED_DATE=?, SUBJECT=?, ATTRIBUTES=?, PROVIDER=?, "
    "MESSAGE_ID=?, STATUS=? WHERE ID=?"
)
LIST_SQL = f"SELECT {COLUMNS} FROM EMAILS ORDER BY CREATED_DATE"
LIST_BY_STATUS_SQL = (
    f"SELECT {COLUMNS} FROM EMAILS WHERE STATUS=? ORDER BY CREATED_DATE"
)
COUNT_SQL = "SELECT COUNT(*) FROM EMAILS"
DELETE_SQL = "DELETE FROM EMAILS WHERE ID=?"


class EmailGateway(BaseGateway):
    """Reads and writes outgoing emails.

    Sender, body and recipients live in the ATTRIBUTES CLOB as JSON.
    """

    def __init__(self, registry: "GatewayRegistry") -> None:
        super().__init__(registry, "EMAILS")

    def define_table(self, builder: TableBuilder) -> None:
        builder.add_column("ID", SqlType.VARCHAR, 36, required=True)
        builder.add_column("CREATED_DATE", SqlType.TIMESTAMP, required=True)
        builder.add_column("UPDATED_DATE", SqlType.TIMESTAMP)
        builder.add_column("SUBJECT", SqlType.VARCHAR, 128, required=True)
        builder.add_column("ATTRIBUTES", SqlType.LONGVARCHAR, required=True)
        builder.add_column("PROVIDER", SqlType.VARCHAR, 15)
        builder.add_column("MESSAGE_ID", SqlType.VARCHAR, 60)
        builder.add_column("STATUS", SqlType.VARCHAR, 15, required=True)
        builder.set_primary_key("EMAILS_PK", "ID")
        builder.add_index("EMAILS_STATUS_IDX", "STATUS")

    def _to_email(self, row: RowType) -> Email:
        email = Email(
            id=row[0],
            created_date=self.from_timestamp(row[1]),
            updated_date=self.from_timestamp(row[2]),
            subject=row[3],
            provider=row[5],
            message_id=row[6],
            status=DeliveryStatus(row[7]),
        )
        email.set_attributes(self.get_clob(row, 4))
        return email

    def get_by_id(self, email_id: str) -> Email | None:
        with self.lock:
            if not self.has_connection():
                return None
            rows = self.run_query("get_by_id", GET_BY_ID_SQL, [email_id])
            return self._to_email(rows[-1]) if rows else None

    def add(self, email: Email | None) -> None:
        """Insert an email; an email that already exists is ignored."""
        with self.lock:
            if not self.has_connection() or email is None:
                return
            try:
                self.run_update(
                    "insert",
                    INSERT_SQL,
                    [
                        email.id,
                        self.to_timestamp(email.created_date),
                        self.to_timestamp(email.updated_date),
                        email.subject,
                        email.attributes_json(),
                        email.status.value,
                    ],
                )
                logger.info(f"Created email '{email.id}' in {self.table_name}")
            except Exception as ex:
                if not self.handle_insert_error("insert", ex):
                    raise

    def update(self, email: Email | None) -> None:
        with self.lock:
            if not self.has_connection() or email is None:
                return
            self.run_update(
                "update",
                UPDATE_SQL,
                [
                    self.to_timestamp(email.updated_date),
                    email.subject,
                    email.attributes_json(),
                    email.provider,
                    email.message_id,
                    email.status.value,
                    email.id,
                ],
            )
            logger.info(f"Updated email '{email.id}' in {self.table_name}")

    def list_all(self, status: DeliveryStatus | None = None) -> list[Email]:
        """List emails oldest first, optionally only those with a status."""
        with self.lock:
            if not self.has_connection():
                return []
            if status is None:
                rows = self.run_query("list", LIST_SQL)
            else:
                rows = self.run_query(
                    "list_by_status", LIST_BY_STATUS_SQL, [status.value]
                )
            return [self._to_email(row) for row in rows]

    def count(self) -> int:
        with self.lock:
            if not self.has_connection():
                return -1
            rows = self.run_query("count", COUNT_SQL)
            return int(rows[0][0])

    def delete(self, email: Email | None) -> None:
        with self.lock:
            if not self.has_connection() or email is None:
                return
            self.run_update("delete", DELETE_SQL, [email.id])
            logger.info(f"Deleted email '{email.id}' in {self.table_name}")
