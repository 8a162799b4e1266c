"""Domain layer - Modelos del gateway."""

from .advertisement import (
    HUMITEMP_PATTERN,
    DevicePattern,
    RawAdvertisement,
    normalize_service_uuid,
)
from .credential import Credential, CredentialSource, CredentialState
from .event import (
    DEFAULT_TEMPERATURE_UNIT,
    HUMIDITY_UNITS,
    MeasurementKind,
    SensorEvent,
)
from .record import SensorRecord

__all__ = [
    "HUMITEMP_PATTERN",
    "DevicePattern",
    "RawAdvertisement",
    "normalize_service_uuid",
    "Credential",
    "CredentialSource",
    "CredentialState",
    "DEFAULT_TEMPERATURE_UNIT",
    "HUMIDITY_UNITS",
    "MeasurementKind",
    "SensorEvent",
    "SensorRecord",
]
