"""Construcción de eventos a partir de un SensorRecord.

Un registro produce exactamente dos eventos: temperatura y humedad.
Valor = parte entera + décima, negado si el flag de signo es distinto de 0.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, List, Optional

from ..domain.event import (
    DEFAULT_TEMPERATURE_UNIT,
    HUMIDITY_UNITS,
    MeasurementKind,
    SensorEvent,
)
from ..domain.record import SensorRecord
from ...errors import AddressFormatError

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_address(address: bytes) -> str:
    """[0x00, 0x1A, 0x2B, 0xFF, 0x00, 0x11] -> "00:1A:2B:FF:00:11"."""
    if len(address) != 6:
        raise AddressFormatError(f"address must be 6 bytes, got {len(address)}")
    return ":".join(f"{b:02X}" for b in address)


def signed_value(sign: int, whole: int, fraction: int) -> float:
    # fraction no se valida: un solo dígito en cable, precisión de una décima
    value = float(whole) + float(fraction) / 10.0
    if sign != 0:
        value = -value
    return value


def build_temperature_event(
    record: SensorRecord,
    rssi: int,
    *,
    units: str = DEFAULT_TEMPERATURE_UNIT,
    address: str = "",
    clock: Optional[Clock] = None,
) -> SensorEvent:
    return SensorEvent(
        address=address,
        rssi=rssi,
        kind=MeasurementKind.TEMPERATURE,
        node_id=format_address(record.address),
        timestamp=(clock or _utc_now)(),
        sensor_value=signed_value(
            record.temperature_sign,
            record.temperature_whole,
            record.temperature_fraction,
        ),
        units=units[:1] or DEFAULT_TEMPERATURE_UNIT,
    )


def build_humidity_event(
    record: SensorRecord,
    rssi: int,
    *,
    address: str = "",
    clock: Optional[Clock] = None,
) -> SensorEvent:
    return SensorEvent(
        address=address,
        rssi=rssi,
        kind=MeasurementKind.HUMIDITY,
        node_id=format_address(record.address),
        timestamp=(clock or _utc_now)(),
        sensor_value=signed_value(
            record.humidity_sign,
            record.humidity_whole,
            record.humidity_fraction,
        ),
        units=HUMIDITY_UNITS,
    )


def build_events(
    record: SensorRecord,
    rssi: int,
    *,
    temperature_unit: str = DEFAULT_TEMPERATURE_UNIT,
    address: str = "",
    clock: Optional[Clock] = None,
) -> List[SensorEvent]:
    """Construye [temperatura, humedad].

    Raises:
        AddressFormatError: si la dirección del registro no tiene 6 bytes.
    """
    return [
        build_temperature_event(
            record, rssi, units=temperature_unit, address=address, clock=clock
        ),
        build_humidity_event(record, rssi, address=address, clock=clock),
    ]
