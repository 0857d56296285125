"""Registry of the gateways sharing one database connection."""

import threading
from typing import TYPE_CHECKING

from mediastore.log import get_logger

from .dialects import Dialect
from .drivers import DatabaseDriver
from .exceptions import DatabaseError

if TYPE_CHECKING:
    from .connection import DatabaseConnection
    from .gateway import BaseGateway

logger = get_logger(__name__)


class GatewayRegistry:
    """Owns the gateways created against one connection.

    Gateways register themselves on construction. The registry lock guards
    registration and closing only; each gateway serialises its own work.
    """

    def __init__(self, connection: "DatabaseConnection") -> None:
        if connection.driver is None:
            raise ValueError("Connection has no driver; connect before creating gateways")
        self.connection = connection
        self.driver: DatabaseDriver = connection.driver
        self._gateways: list["BaseGateway"] = []
        self._lock = threading.Lock()
        connection.add_registry(self)

    @property
    def dialect(self) -> Dialect:
        if self.driver.dialect is None:
            raise DatabaseError(f"Driver '{self.driver.type}' has no dialect")
        return self.driver.dialect

    @property
    def gateways(self) -> list["BaseGateway"]:
        return list(self._gateways)

    def register(self, gateway: "BaseGateway") -> None:
        """Add a gateway unless one for the same table is already registered."""
        with self._lock:
            if self.get_gateway(gateway.table_name) is None:
                self._gateways.append(gateway)

    def get_gateway(self, table_name: str) -> "BaseGateway | None":
        name = table_name.lower()
        for gateway in self._gateways:
            if gateway.table_name.lower() == name:
                return gateway
        return None

    def create_tables(self) -> None:
        """Create the missing tables of every registered gateway."""
        for gateway in self.gateways:
            result = gateway.check_table()
            if result.is_failed:
                logger.warning(f"Table {gateway.table_name} not created: {result.message}")

    def has_missing_table(self) -> bool:
        return any(not gateway.has_table() for gateway in self.gateways)

    def close(self) -> None:
        """Close the statements of every gateway and forget them.

        The connection itself belongs to the caller and stays open.
        """
        with self._lock:
            for gateway in self._gateways:
                gateway.close()
            self._gateways.clear()

    def is_constraint_violation(self, ex: BaseException | None) -> bool:
        return self.driver.is_constraint_violation(ex)

    def is_data_too_long(self, ex: BaseException | None) -> bool:
        return self.driver.is_data_too_long(ex)
