"""Decodificador del payload binario HumiTemp.

Layout fijo, little-endian, 13 bytes:

    offset  tamaño  campo
    0       u8      temperature_sign
    1       u8      temperature_whole
    2       u8      temperature_fraction
    3       u8      humidity_sign
    4       u8      humidity_whole
    5       u8      humidity_fraction
    6       u8      update_rate
    7       6s      address

Los dos primeros bytes coinciden con el company id del segmento de
fabricante: el sensor los reutiliza como signo y parte entera.
"""

from __future__ import annotations

import struct
from typing import Union

from ..domain.record import SensorRecord
from ...errors import DecodeError

ADDRESS_SIZE = 6

RECORD_STRUCT = struct.Struct(f"<7B{ADDRESS_SIZE}s")
RECORD_SIZE = RECORD_STRUCT.size

_BYTE_FIELDS = (
    "temperature_sign",
    "temperature_whole",
    "temperature_fraction",
    "humidity_sign",
    "humidity_whole",
    "humidity_fraction",
    "update_rate",
)


def decode_record(payload: Union[bytes, bytearray, memoryview]) -> SensorRecord:
    """Decodifica el payload de fabricante a SensorRecord.

    Raises:
        DecodeError: si el payload no es bytes o su longitud no es RECORD_SIZE.
    """
    if not isinstance(payload, (bytes, bytearray, memoryview)):
        raise DecodeError(f"payload must be bytes, got {type(payload).__name__}")

    data = bytes(payload)
    if len(data) < RECORD_SIZE:
        raise DecodeError(
            f"payload too short: {len(data)} bytes, expected {RECORD_SIZE}"
        )
    if len(data) > RECORD_SIZE:
        raise DecodeError(
            f"payload too long: {len(data)} bytes, expected {RECORD_SIZE}"
        )

    *fields, address = RECORD_STRUCT.unpack(data)
    return SensorRecord(*fields, address=address)


def encode_record(record: SensorRecord) -> bytes:
    """Operación inversa de decode_record (simuladores y tests)."""
    values = []
    for name in _BYTE_FIELDS:
        value = getattr(record, name)
        if not isinstance(value, int) or not 0 <= value <= 0xFF:
            raise DecodeError(f"{name} out of range (0-255): {value!r}")
        values.append(value)

    if len(record.address) != ADDRESS_SIZE:
        raise DecodeError(
            f"address must be {ADDRESS_SIZE} bytes, got {len(record.address)}"
        )

    return RECORD_STRUCT.pack(*values, bytes(record.address))
