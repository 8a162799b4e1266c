"""BLE transport - escáner bleak."""

from .scanner import BleakAdvertisementSource, advertisement_from_bleak

__all__ = ["BleakAdvertisementSource", "advertisement_from_bleak"]
