"""Record gateways for the administration tables."""

from .admin import AdminDatabase, AdminRegistry, open_admin_database
from .email import EmailGateway
from .parameter import ParameterGateway

__all__ = [
    "AdminDatabase",
    "AdminRegistry",
    "EmailGateway",
    "ParameterGateway",
    "open_admin_database",
]
