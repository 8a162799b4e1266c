from .event_builder import (
    build_events,
    build_humidity_event,
    build_temperature_event,
    format_address,
    signed_value,
)

__all__ = [
    "build_events",
    "build_humidity_event",
    "build_temperature_event",
    "format_address",
    "signed_value",
]
