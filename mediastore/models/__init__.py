"""Record models for the mediastore system."""

from .admin import DeliveryStatus, Email, Parameter, ParameterType

__all__ = [
    "DeliveryStatus",
    "Email",
    "Parameter",
    "ParameterType",
]
