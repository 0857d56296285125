"""Portable SQL persistence layer."""

from .connection import DatabaseConnection
from .dialects import Dialect, DialectType, ErrorClassifier, create_dialect
from .drivers import DatabaseDriver, get_driver, get_driver_ignore_case, register_driver
from .exceptions import DatabaseError, MissingParameterError, StatementClosedError
from .gateway import BaseGateway
from .properties import ConnectionProperties
from .registry import GatewayRegistry
from .result import OperationResult
from .schema import ColumnSpec, IndexSpec, TableBuilder, TableSpec
from .statement import PreparedStatement

__all__ = [
    "BaseGateway",
    "ColumnSpec",
    "ConnectionProperties",
    "DatabaseConnection",
    "DatabaseDriver",
    "DatabaseError",
    "Dialect",
    "DialectType",
    "ErrorClassifier",
    "GatewayRegistry",
    "IndexSpec",
    "MissingParameterError",
    "OperationResult",
    "PreparedStatement",
    "StatementClosedError",
    "TableBuilder",
    "TableSpec",
    "create_dialect",
    "get_driver",
    "get_driver_ignore_case",
    "register_driver",
]
