"""Pipeline de escaneo: filtro → decodificación → eventos → envío.

Flujo por anuncio (estrictamente secuencial, en orden de llegada):
  RawAdvertisement
  → filtro (payload no vacío + nombre/servicios exactos)
  → decode_record
  → evento temperatura, evento humedad (independientes)
  → POST /v1/iot/events por evento (independientes)

Ningún error de un anuncio o de un envío detiene el procesamiento de
los siguientes.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional

from .stats import PipelineStats
from ..core.decoding.record_decoder import decode_record
from ..core.domain.advertisement import DevicePattern, RawAdvertisement
from ..core.domain.credential import Credential
from ..core.domain.event import DEFAULT_TEMPERATURE_UNIT, SensorEvent
from ..core.domain.record import SensorRecord
from ..core.pipeline.event_builder import build_humidity_event, build_temperature_event
from ..errors import AddressFormatError, DecodeError, DeliveryError
from ..transports.http.client import DeliveryResult, IngressClient

logger = logging.getLogger(__name__)

STATS_LOG_EVERY = 100


class ScanPipeline:
    """Procesa anuncios BLE y envía las lecturas al Ingress API."""

    def __init__(
        self,
        pattern: DevicePattern,
        client: IngressClient,
        credential: Credential,
        temperature_unit: str = DEFAULT_TEMPERATURE_UNIT,
    ):
        self.pattern = pattern
        self.temperature_unit = temperature_unit
        self._client = client
        self._credential = credential
        self._stats = PipelineStats()

    @property
    def stats(self) -> PipelineStats:
        return self._stats

    def run(self, source: Iterable[RawAdvertisement]) -> None:
        """Consume la fuente hasta que se agote (stop del escáner)."""
        logger.info("[PIPELINE] Waiting for '%s' advertisements", self.pattern.name)
        for advertisement in source:
            try:
                self.handle(advertisement)
            except Exception as e:
                logger.exception("[PIPELINE] Processing error: %s", e)
        logger.info("[PIPELINE] Source exhausted. %s", self._stats)

    def matches(self, advertisement: RawAdvertisement) -> bool:
        if not advertisement.manufacturer_data:
            return False
        return self.pattern.matches(advertisement)

    def handle(self, advertisement: RawAdvertisement) -> List[DeliveryResult]:
        """Procesa un anuncio completo (decode → build → deliver)."""
        self._stats.received += 1

        if not self.matches(advertisement):
            return []

        self._stats.matched += 1
        self._stats.last_match_at = advertisement.received_at

        try:
            record = decode_record(advertisement.manufacturer_data)
        except DecodeError as e:
            self._stats.decode_failed += 1
            logger.warning(
                "[PIPELINE] Error reading mfg data from %s: %s",
                advertisement.address or "?",
                e,
            )
            return []

        results = []
        for build in (self._build_temperature, self._build_humidity):
            event = self._build(build, record, advertisement)
            if event is not None:
                results.append(self._deliver(event))

        if self._stats.matched % STATS_LOG_EVERY == 0:
            logger.info("[PIPELINE] %s", self._stats)

        return results

    def _build_temperature(self, record: SensorRecord, advertisement: RawAdvertisement) -> SensorEvent:
        return build_temperature_event(
            record,
            advertisement.rssi,
            units=self.temperature_unit,
            address=advertisement.address,
        )

    def _build_humidity(self, record: SensorRecord, advertisement: RawAdvertisement) -> SensorEvent:
        return build_humidity_event(record, advertisement.rssi, address=advertisement.address)

    def _build(
        self,
        build: Callable[[SensorRecord, RawAdvertisement], SensorEvent],
        record: SensorRecord,
        advertisement: RawAdvertisement,
    ) -> Optional[SensorEvent]:
        try:
            event = build(record, advertisement)
        except AddressFormatError as e:
            self._stats.build_failed += 1
            logger.warning("[PIPELINE] Skipping event: %s", e)
            return None
        self._stats.events_built += 1
        return event

    def _deliver(self, event: SensorEvent) -> DeliveryResult:
        result = self._client.post_event(self._credential.token, event)

        if result.error is None and result.status_code != 200:
            result.error = DeliveryError(
                f"ingress rejected event with status {result.status_code}",
                status_code=result.status_code,
            )

        if result.error is not None:
            self._stats.delivery_failed += 1
            logger.warning("[PIPELINE] Delivery failed: %s", result.error)
        else:
            self._stats.delivered += 1

        logger.info(
            "MSG: %s STATUSCODE: %d Duration: %.1fms",
            result.payload.decode("utf-8"),
            result.status_code,
            result.elapsed_ms,
        )
        return result
