"""Cliente HTTP del Sense Ingress API.

Dos intercambios síncronos, un solo intento, sin reintentos ni backoff:
- POST {endpoint}/v1/registration  → token
- POST {endpoint}/v1/iot/events    → status

El cliente NO interpreta los status codes: devuelve el resultado y el
llamador decide (CredentialManager / ScanPipeline).
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

import httpx

from .schemas import DeviceProperties, RegistrationRequest, RegistrationResponse
from ...core.domain.event import SensorEvent
from ...errors import DeliveryError

logger = logging.getLogger(__name__)

REGISTRATION_PATH = "/v1/registration"
EVENTS_PATH = "/v1/iot/events"

DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass
class RegistrationResult:
    """Resultado del registro."""

    status_code: int
    token: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code == 200 and bool(self.token)


@dataclass
class DeliveryResult:
    """Resultado del envío de un evento."""

    status_code: int
    elapsed: float
    payload: bytes = b""
    error: Optional[DeliveryError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code == 200

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed * 1000


class IngressClient:
    """Cliente del Sense Ingress API sobre un httpx.Client reutilizable."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = httpx.Client(
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    @property
    def registration_url(self) -> str:
        return self.base_url + REGISTRATION_PATH

    @property
    def events_url(self) -> str:
        return self.base_url + EVENTS_PATH

    def register(
        self,
        api_key: str,
        properties: Optional[DeviceProperties] = None,
    ) -> RegistrationResult:
        """Registra el gateway y obtiene el bearer token."""
        request = RegistrationRequest(
            api_key=api_key,
            properties=properties or DeviceProperties(),
        )

        try:
            resp = self._client.post(
                self.registration_url,
                content=request.model_dump_json().encode("utf-8"),
            )
        except httpx.HTTPError as e:
            logger.error("[HTTP] Registration request failed: %s", e)
            return RegistrationResult(status_code=0, error=f"{type(e).__name__}: {e}")

        logger.debug("[HTTP] Registration status=%d", resp.status_code)

        token = None
        error = None
        try:
            token = RegistrationResponse.model_validate(resp.json()).token
        except ValueError as e:
            # Con status != 200 el cuerpo suele no ser JSON; el status manda
            if resp.status_code == 200:
                error = f"invalid registration response: {e}"

        return RegistrationResult(status_code=resp.status_code, token=token, error=error)

    def post_event(self, token: str, event: SensorEvent) -> DeliveryResult:
        """Envía un evento con el token como Authorization Bearer.

        Nunca lanza por errores de transporte ni de armado del request
        (URL inválida, token no codificable): el error va en el resultado.
        """
        payload = event.to_payload()
        start = time.monotonic()

        try:
            resp = self._client.post(
                self.events_url,
                content=payload,
                headers={"Authorization": f"Bearer {token}"},
            )
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as e:
            return DeliveryResult(
                status_code=0,
                elapsed=time.monotonic() - start,
                payload=payload,
                error=DeliveryError(f"{type(e).__name__}: {e}"),
            )

        return DeliveryResult(
            status_code=resp.status_code,
            elapsed=time.monotonic() - start,
            payload=payload,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "IngressClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
