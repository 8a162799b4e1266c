"""HTTP transport - Cliente del Sense Ingress API."""

from .client import (
    DeliveryResult,
    IngressClient,
    RegistrationResult,
)
from .schemas import DeviceProperties, RegistrationRequest, RegistrationResponse

__all__ = [
    "DeliveryResult",
    "IngressClient",
    "RegistrationResult",
    "DeviceProperties",
    "RegistrationRequest",
    "RegistrationResponse",
]
