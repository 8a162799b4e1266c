"""Tests del constructor de eventos.

Ejecutar:
    pytest tests/test_event_builder.py -v
"""

import json
from datetime import datetime, timezone

import pytest

from ble_client.core.domain import MeasurementKind, SensorRecord
from ble_client.core.pipeline import (
    build_events,
    build_humidity_event,
    build_temperature_event,
    format_address,
    signed_value,
)
from ble_client.errors import AddressFormatError

FIXED_NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def record() -> SensorRecord:
    return SensorRecord(
        temperature_sign=0,
        temperature_whole=23,
        temperature_fraction=5,
        humidity_sign=0,
        humidity_whole=45,
        humidity_fraction=2,
        update_rate=10,
        address=bytes([0x00, 0x1A, 0x2B, 0xFF, 0x00, 0x11]),
    )


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


# =============================================================================
# DIRECCIÓN
# =============================================================================

class TestFormatAddress:
    """Formato XX:XX:XX:XX:XX:XX en mayúsculas, con ceros a la izquierda."""

    def test_example_address(self):
        address = bytes([0x00, 0x1A, 0x2B, 0xFF, 0x00, 0x11])
        assert format_address(address) == "00:1A:2B:FF:00:11"

    def test_record_order_is_kept(self):
        assert format_address(bytes([1, 2, 3, 4, 5, 6])) == "01:02:03:04:05:06"

    @pytest.mark.parametrize("size", [0, 5, 7])
    def test_bad_length(self, size):
        with pytest.raises(AddressFormatError):
            format_address(bytes(size))


# =============================================================================
# VALOR CON SIGNO
# =============================================================================

class TestSignedValue:
    """valor = (signo ? -1 : 1) * (entero + décima / 10)."""

    def test_all_combinations(self):
        for sign in (0, 1, 0x80, 0xFF):
            for whole in (0, 1, 23, 99, 255):
                for fraction in range(10):
                    expected = (-1 if sign else 1) * (whole + fraction / 10)
                    assert signed_value(sign, whole, fraction) == expected

    def test_fraction_is_not_range_checked(self):
        assert signed_value(0, 1, 12) == pytest.approx(2.2)


# =============================================================================
# EVENTOS
# =============================================================================

class TestBuildEvents:
    """Un registro produce temperatura y humedad."""

    def test_temperature_event(self, record, clock):
        event = build_temperature_event(record, -61, clock=clock)

        assert event.kind == MeasurementKind.TEMPERATURE.value
        assert event.node_id == "00:1A:2B:FF:00:11"
        assert event.rssi == -61
        assert event.sensor_value == 23.5
        assert event.units == "C"
        assert event.timestamp == FIXED_NOW

    def test_negative_temperature(self, record, clock):
        negative = SensorRecord(1, 23, 5, 0, 45, 2, 10, address=record.address)

        event = build_temperature_event(negative, -61, clock=clock)

        assert event.sensor_value == -23.5

    def test_temperature_unit_uses_first_char(self, record, clock):
        event = build_temperature_event(record, -61, units="Fahrenheit", clock=clock)
        assert event.units == "F"

    def test_humidity_event(self, record, clock):
        event = build_humidity_event(record, -61, clock=clock)

        assert event.kind == "Humidity"
        assert event.sensor_value == 45.2
        assert event.units == "% RH"

    def test_build_events_order(self, record, clock):
        events = build_events(record, -61, clock=clock)

        assert [e.kind for e in events] == ["Temperature", "Humidity"]

    def test_timestamp_defaults_to_utc_now(self, record):
        before = datetime.now(timezone.utc)
        event = build_temperature_event(record, -61)
        after = datetime.now(timezone.utc)

        assert event.timestamp.tzinfo is not None
        assert before <= event.timestamp <= after

    def test_radio_address_is_carried(self, record, clock):
        event = build_humidity_event(record, -61, address="C4:7C:8D:6A:00:01", clock=clock)
        assert event.address == "C4:7C:8D:6A:00:01"

    def test_bad_address_fails_both_builders(self, clock):
        bad = SensorRecord(0, 23, 5, 0, 45, 2, 10, address=bytes(4))

        with pytest.raises(AddressFormatError):
            build_temperature_event(bad, -61, clock=clock)
        with pytest.raises(AddressFormatError):
            build_humidity_event(bad, -61, clock=clock)


# =============================================================================
# FORMATO DE CABLE
# =============================================================================

class TestPayload:
    """JSON con los nombres de campo del Ingress API."""

    def test_payload_field_names(self, record, clock):
        event = build_temperature_event(record, -61, address="AA:BB", clock=clock)

        body = json.loads(event.to_payload())

        assert set(body) == {
            "address",
            "rssi",
            "id",
            "nodeID",
            "timestamp_iso8601",
            "sensor_value",
            "units",
        }
        assert body["id"] == "Temperature"
        assert body["nodeID"] == "00:1A:2B:FF:00:11"
        assert body["sensor_value"] == 23.5
        assert body["units"] == "C"
        assert body["address"] == "AA:BB"

    def test_timestamp_is_iso8601_utc(self, record, clock):
        body = json.loads(build_humidity_event(record, -61, clock=clock).to_payload())

        ts = datetime.fromisoformat(body["timestamp_iso8601"].replace("Z", "+00:00"))
        assert ts == FIXED_NOW
