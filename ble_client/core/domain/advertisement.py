"""Modelos de anuncio BLE y patrón de dispositivo."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable

# Sufijo Bluetooth Base UUID para expandir identificadores de 16/32 bits
_BASE_UUID_SUFFIX = "-0000-1000-8000-00805f9b34fb"


def normalize_service_uuid(value: str) -> str:
    """Normaliza un UUID de servicio a su forma de 128 bits en minúsculas.

    "AA20" -> "0000aa20-0000-1000-8000-00805f9b34fb"
    """
    v = value.strip().lower()
    if v.startswith("0x"):
        v = v[2:]
    if len(v) == 4:
        return f"0000{v}{_BASE_UUID_SUFFIX}"
    if len(v) == 8:
        return f"{v}{_BASE_UUID_SUFFIX}"
    return v


def normalize_services(values: Iterable[str]) -> FrozenSet[str]:
    return frozenset(normalize_service_uuid(v) for v in values)


@dataclass(frozen=True)
class RawAdvertisement:
    """Anuncio recibido del escáner. Inmutable, uno por callback.

    `manufacturer_data` es el segmento de fabricante completo, tal cual
    llega por radio (incluye los 2 bytes iniciales de company id).
    """
    manufacturer_data: bytes
    rssi: int
    local_name: str = ""
    service_uuids: FrozenSet[str] = frozenset()
    address: str = ""
    received_at: float = field(default_factory=time.time)

    def __post_init__(self):
        object.__setattr__(self, "service_uuids", normalize_services(self.service_uuids))


@dataclass(frozen=True)
class DevicePattern:
    """Identifica la clase de sensor de interés.

    Nombre y conjunto de servicios se comparan por igualdad exacta.
    """
    name: str
    service_uuids: FrozenSet[str]

    def __post_init__(self):
        object.__setattr__(self, "service_uuids", normalize_services(self.service_uuids))

    def matches(self, advertisement: RawAdvertisement) -> bool:
        return (
            advertisement.local_name == self.name
            and advertisement.service_uuids == self.service_uuids
        )


HUMITEMP_PATTERN = DevicePattern(
    name="HumiTemp Sensor Tag",
    service_uuids=frozenset({"aa20"}),
)
