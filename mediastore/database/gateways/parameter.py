"""Gateway for the PARAMETERS table."""

from typing import TYPE_CHECKING

from mediastore.log import get_logger
from mediastore.models.admin import Parameter, ParameterType
from mediastore.types import RowType, SqlType

from ..gateway import BaseGateway
from ..schema import TableBuilder

if TYPE_CHECKING:
    from ..registry import GatewayRegistry

logger = get_logger(__name__)

COLUMNS = "ID, CREATED_DATE, UPDATED_DATE, TYPE, NAME, VALUE"

GET_BY_ID_SQL = f"SELECT {COLUMNS} FROM PARAMETERS WHERE ID=?"
GET_BY_NAME_SQL = f"SELECT {COLUMNS} FROM PARAMETERS WHERE TYPE=? AND NAME=?"
INSERT_SQL = (
    "INSERT INTO PARAMETERS"
    "( ID, CREATED_DATE, UPDATED_DATE, TYPE, NAME, VALUE )"
    "VALUES"
    "( ?, ?, ?, ?, ?, ? )"
)
UPDATE_SQL = "UPDATE PARAMETERS SET UPDATED_DATE=?, TYPE=?, NAME=?, VALUE=? WHERE ID=?"
LIST_SQL = f"SELECT {COLUMNS} FROM PARAMETERS"
COUNT_SQL = "SELECT COUNT(*) FROM PARAMETERS"
DELETE_SQL = "DELETE FROM PARAMETERS WHERE ID=?"


class ParameterGateway(BaseGateway):
    """Reads and writes configuration parameters."""

    def __init__(self, registry: "GatewayRegistry") -> None:
        super().__init__(registry, "PARAMETERS")

    def define_table(self, builder: TableBuilder) -> None:
        builder.add_column("ID", SqlType.VARCHAR, 36, required=True)
        builder.add_column("CREATED_DATE", SqlType.TIMESTAMP, required=True)
        builder.add_column("UPDATED_DATE", SqlType.TIMESTAMP)
        builder.add_column("TYPE", SqlType.VARCHAR, 20, required=True)
        builder.add_column("NAME", SqlType.VARCHAR, 30, required=True)
        builder.add_column("VALUE", SqlType.VARCHAR, 10, required=True)
        builder.set_primary_key("PARAMETERS_PK", ["ID"])
        builder.add_index("PARAMETERS_NAME_IDX", ["TYPE", "NAME"])

    def _to_parameter(self, row: RowType) -> Parameter:
        return Parameter(
            id=row[0],
            created_date=self.from_timestamp(row[1]),
            updated_date=self.from_timestamp(row[2]),
            type=ParameterType(row[3]),
            name=row[4],
            value=row[5],
        )

    def get_by_id(self, parameter_id: str) -> Parameter | None:
        with self.lock:
            if not self.has_connection():
                return None
            rows = self.run_query("get_by_id", GET_BY_ID_SQL, [parameter_id])
            return self._to_parameter(rows[-1]) if rows else None

    def get_by_name(self, parameter_type: ParameterType, name: str) -> Parameter | None:
        with self.lock:
            if not self.has_connection():
                return None
            rows = self.run_query(
                "get_by_name", GET_BY_NAME_SQL, [parameter_type.value, name]
            )
            return self._to_parameter(rows[-1]) if rows else None

    def add(self, parameter: Parameter | None) -> None:
        """Insert a parameter; a parameter that already exists is ignored."""
        with self.lock:
            if not self.has_connection() or parameter is None:
                return
            try:
                self.run_update(
                    "insert",
                    INSERT_SQL,
                    [
                        parameter.id,
                        self.to_timestamp(parameter.created_date),
                        self.to_timestamp(parameter.updated_date),
                        parameter.type.value,
                        parameter.name,
                        parameter.value,
                    ],
                )
                logger.info(f"Created parameter '{parameter.id}' in {self.table_name}")
            except Exception as ex:
                if not self.handle_insert_error("insert", ex):
                    raise
                logger.debug(f"Parameter '{parameter.id}' already exists")

    def update(self, parameter: Parameter | None) -> None:
        with self.lock:
            if not self.has_connection() or parameter is None:
                return
            self.run_update(
                "update",
                UPDATE_SQL,
                [
                    self.to_timestamp(parameter.updated_date),
                    parameter.type.value,
                    parameter.name,
                    parameter.value,
                    parameter.id,
                ],
            )
            logger.info(f"Updated parameter '{parameter.id}' in {self.table_name}")

    def list_all(self) -> list[Parameter]:
        with self.lock:
            if not self.has_connection():
                return []
            return [self._to_parameter(row) for row in self.run_query("list", LIST_SQL)]

    def count(self) -> int:
        with self.lock:
            if not self.has_connection():
                return -1
            rows = self.run_query("count", COUNT_SQL)
            return int(rows[0][0])

    def delete(self, parameter: Parameter | None) -> None:
        with self.lock:
            if not self.has_connection() or parameter is None:
                return
            self.run_update("delete", DELETE_SQL, [parameter.id])
            logger.info(f"Deleted parameter '{parameter.id}' in {self.table_name}")

    def set_default(
        self, parameter_type: ParameterType, name: str, value: str | int
    ) -> Parameter | None:
        """Add a parameter with the given value unless it is already defined.

        Returns:
            The stored parameter, or None when the table is unavailable
        """
        with self.lock:
            parameter = self.get_by_name(parameter_type, name)
            if parameter is None:
                parameter = Parameter(type=parameter_type, name=name, value=str(value))
                self.add(parameter)
                parameter = self.get_by_name(parameter_type, name)
            return parameter
