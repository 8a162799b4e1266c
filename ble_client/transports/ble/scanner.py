"""Escáner BLE sobre bleak expuesto como iterador.

bleak es asyncio y entrega anuncios por callback. Aquí:
- el loop asyncio del escáner corre en un thread dedicado (ble-scanner)
- el callback convierte a RawAdvertisement y encola (cola acotada)
- __iter__ consume la cola en orden de llegada hasta stop()

Se permiten duplicados (BlueZ DuplicateData): el sensor repite el mismo
anuncio con cada nueva lectura.
"""

from __future__ import annotations

import asyncio
import logging
import queue
import threading
from typing import Any, Dict, Iterator, Optional

from bleak import BleakScanner

from ..base import AdvertisementSource
from ...core.domain.advertisement import RawAdvertisement

logger = logging.getLogger(__name__)


def advertisement_from_bleak(device, advertisement_data) -> RawAdvertisement:
    """Convierte (BLEDevice, AdvertisementData) de bleak a RawAdvertisement.

    bleak separa el company id (clave del dict) del resto del segmento de
    fabricante; se vuelve a anteponer en little-endian para recuperar el
    segmento tal cual llegó por radio.
    """
    manufacturer_data = b""
    for company_id, data in (advertisement_data.manufacturer_data or {}).items():
        manufacturer_data = int(company_id).to_bytes(2, "little") + bytes(data)
        break

    return RawAdvertisement(
        manufacturer_data=manufacturer_data,
        rssi=int(advertisement_data.rssi),
        local_name=advertisement_data.local_name or "",
        service_uuids=frozenset(advertisement_data.service_uuids or ()),
        address=device.address or "",
    )


class ScannerStats:
    """Estadísticas del escáner."""

    def __init__(self):
        self.received = 0
        self.dropped = 0

    def __str__(self) -> str:
        return f"Stats: received={self.received} dropped={self.dropped}"

    def to_dict(self) -> dict:
        return {"received": self.received, "dropped": self.dropped}


class BleakAdvertisementSource(AdvertisementSource):
    """Fuente de anuncios BLE reales."""

    def __init__(
        self,
        allow_duplicates: bool = True,
        scanning_mode: str = "active",
        adapter: Optional[str] = None,
        queue_size: int = 1000,
        start_timeout: float = 10.0,
        poll_interval: float = 0.5,
    ):
        self.allow_duplicates = allow_duplicates
        self.scanning_mode = scanning_mode
        self.adapter = adapter
        self.start_timeout = start_timeout
        self.poll_interval = poll_interval

        self._queue: "queue.Queue[RawAdvertisement]" = queue.Queue(maxsize=queue_size)
        self._thread: Optional[threading.Thread] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._stop_requested: Optional[asyncio.Event] = None

        self._started = threading.Event()
        self._stopping = threading.Event()
        self._finished = threading.Event()
        self._error: Optional[BaseException] = None

        self._stats = ScannerStats()

    def start(self) -> bool:
        """Arranca el thread del escáner y espera a que bleak confirme."""
        if self._thread is not None and self._thread.is_alive():
            return True

        self._started.clear()
        self._stopping.clear()
        self._finished.clear()
        self._error = None

        self._thread = threading.Thread(target=self._run, name="ble-scanner", daemon=True)
        self._thread.start()

        if not self._started.wait(self.start_timeout):
            logger.error("[BLE] Scanner start timeout (%.1fs)", self.start_timeout)
            self.stop()
            return False

        if self._error is not None:
            logger.error("[BLE] Error setting up ble listener: %s", self._error)
            return False

        logger.info(
            "[BLE] Scanning (mode=%s duplicates=%s adapter=%s)",
            self.scanning_mode,
            self.allow_duplicates,
            self.adapter or "default",
        )
        return True

    def stop(self) -> None:
        self._stopping.set()

        loop, stop_requested = self._loop, self._stop_requested
        if loop is not None and stop_requested is not None:
            try:
                loop.call_soon_threadsafe(stop_requested.set)
            except RuntimeError:
                # loop ya cerrado
                pass

        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=self.start_timeout)

        logger.info("[BLE] Stopped. %s", self._stats)

    def __iter__(self) -> Iterator[RawAdvertisement]:
        while True:
            try:
                adv = self._queue.get(timeout=self.poll_interval)
            except queue.Empty:
                if self._finished.is_set():
                    return
                continue
            yield adv

    def _run(self) -> None:
        try:
            asyncio.run(self._scan())
        except Exception as e:
            self._error = e
            logger.error("[BLE] Scanner failed: %s", e)
        finally:
            self._loop = None
            self._stop_requested = None
            self._finished.set()
            self._started.set()

    async def _scan(self) -> None:
        self._loop = asyncio.get_running_loop()
        self._stop_requested = asyncio.Event()

        kwargs: Dict[str, Any] = {
            "detection_callback": self._on_detection,
            "scanning_mode": self.scanning_mode,
            "bluez": {"filters": {"DuplicateData": self.allow_duplicates}},
        }
        if self.adapter:
            kwargs["adapter"] = self.adapter

        scanner = BleakScanner(**kwargs)
        await scanner.start()
        self._started.set()
        try:
            if not self._stopping.is_set():
                await self._stop_requested.wait()
        finally:
            await scanner.stop()

    def _on_detection(self, device, advertisement_data) -> None:
        """Callback de bleak (corre en el loop del escáner)."""
        self._stats.received += 1
        try:
            adv = advertisement_from_bleak(device, advertisement_data)
        except (TypeError, ValueError) as e:
            logger.debug("[BLE] Unusable advertisement from %s: %s", getattr(device, "address", "?"), e)
            return

        try:
            self._queue.put_nowait(adv)
        except queue.Full:
            self._stats.dropped += 1
            if self._stats.dropped % 100 == 1:
                logger.warning("[BLE] Queue full, dropping advertisements (%s)", self._stats)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._finished.is_set()

    @property
    def source_name(self) -> str:
        return "bleak"

    @property
    def stats(self) -> Dict[str, Any]:
        return {
            "running": self.is_running,
            "queued": self._queue.qsize(),
            **self._stats.to_dict(),
        }
