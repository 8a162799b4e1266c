"""Transportes del gateway.

- base: interface AdvertisementSource
- ble/: escáner BLE (bleak)
- http/: cliente del Sense Ingress API (httpx)
"""

from .base import AdvertisementSource, StaticAdvertisementSource

__all__ = ["AdvertisementSource", "StaticAdvertisementSource"]
