"""Evento enviado al Sense Ingress API.

Formato de cable:
{
    "address": "AA:BB:CC:DD:EE:FF",
    "rssi": -60,
    "id": "Temperature",
    "nodeID": "00:1A:2B:FF:00:11",
    "timestamp_iso8601": "2026-10-18T12:00:00.123456Z",
    "sensor_value": 23.5,
    "units": "C"
}
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class MeasurementKind(str, Enum):
    """Tipo de medición (campo `id` del evento)."""
    TEMPERATURE = "Temperature"
    HUMIDITY = "Humidity"


HUMIDITY_UNITS = "% RH"
DEFAULT_TEMPERATURE_UNIT = "C"


class SensorEvent(BaseModel):
    """Una medición lista para enviar."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, use_enum_values=True)

    address: str = ""
    rssi: int
    kind: MeasurementKind = Field(..., alias="id")
    node_id: str = Field(..., alias="nodeID")
    timestamp: datetime = Field(..., alias="timestamp_iso8601")
    sensor_value: float
    units: str

    def to_payload(self) -> bytes:
        """Serializa a JSON con los nombres de campo del API."""
        return self.model_dump_json(by_alias=True).encode("utf-8")
