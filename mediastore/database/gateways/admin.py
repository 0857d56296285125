"""Registry of the administration gateways and the connection that owns it."""

from typing import TYPE_CHECKING

from mediastore.constants import QUERY_TIMEOUT

from ..connection import DatabaseConnection
from ..registry import GatewayRegistry
from .email import EmailGateway
from .parameter import ParameterGateway

if TYPE_CHECKING:
    from mediastore.config import Settings


class AdminRegistry(GatewayRegistry):
    """Gateways for parameters and emails."""

    def __init__(self, connection: DatabaseConnection) -> None:
        super().__init__(connection)
        self._parameters = ParameterGateway(self)
        self._emails = EmailGateway(self)

    @property
    def parameters(self) -> ParameterGateway:
        return self._parameters

    @property
    def emails(self) -> EmailGateway:
        return self._emails


class AdminDatabase(DatabaseConnection):
    """Connection that creates the administration tables once connected."""

    def __init__(
        self,
        query_timeout: int = QUERY_TIMEOUT,
        debug: bool = False,
        create_missing_tables: bool = True,
    ) -> None:
        super().__init__(
            query_timeout=query_timeout,
            debug=debug,
            create_missing_tables=create_missing_tables,
        )
        self.admin: AdminRegistry | None = None

    def create_registries(self) -> None:
        self.registries.clear()
        self.admin = AdminRegistry(self)


def open_admin_database(
    settings: "Settings", verbose: bool = False
) -> AdminDatabase:
    """Connect to the database described by the application settings.

    Args:
        settings: Application settings
        verbose: Whether to log the connection banner

    Returns:
        The database; check ``is_connected()`` since failures are not raised
    """
    database = AdminDatabase(
        query_timeout=settings.query_timeout,
        debug=settings.is_development,
        create_missing_tables=settings.create_tables,
    )
    database.connect(settings.connection_properties(), verbose=verbose)
    return database
