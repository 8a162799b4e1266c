"""Gestión del ciclo de vida del token del gateway.

FLUJO:
1. Sin --force-register: leer el token del archivo
2. Si no hay token (o error de lectura): registro en el Ingress API
3. Guardar el token para la próxima ejecución
4. El token queda en memoria el resto del proceso (nunca se refresca)

Con --force-register se registra siempre; el llamador termina el proceso
después de persistir (modo solo-registro).
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from .token_store import TokenStore
from ..core.domain.credential import Credential, CredentialSource, CredentialState
from ..errors import CredentialError, TokenStoreError
from ..transports.http.client import IngressClient
from ..transports.http.schemas import DeviceProperties

logger = logging.getLogger(__name__)


class CredentialManager:
    """Dueño de la credencial: carga, registro y persistencia."""

    def __init__(
        self,
        client: IngressClient,
        store: TokenStore,
        api_key: str,
        properties: Optional[DeviceProperties] = None,
    ):
        self._client = client
        self._store = store
        self._api_key = api_key
        self._properties = properties
        self._state = CredentialState.UNLOADED
        self._credential: Optional[Credential] = None

    @property
    def state(self) -> CredentialState:
        return self._state

    @property
    def credential(self) -> Optional[Credential]:
        return self._credential

    def load_or_register(self, force_register: bool = False) -> Credential:
        """Obtiene la credencial del almacén o mediante registro.

        Raises:
            CredentialError: si hay que registrar y el registro falla.
        """
        if not force_register:
            try:
                token = self._store.read()
            except TokenStoreError as e:
                logger.info("[AUTH] No usable jwt (%s), doing registration", e)
            else:
                logger.info("[AUTH] Got jwt from file")
                self._credential = Credential(token=token, source=CredentialSource.STORE)
                self._state = CredentialState.LOADED
                return self._credential
        else:
            logger.info("[AUTH] Doing registration (--force-register specified)")

        return self.register()

    def register(self) -> Credential:
        """Registro único contra el Ingress API + persistencia del token.

        Un error al guardar el token solo se registra en log: el token
        sigue siendo válido para este proceso.
        """
        self._state = CredentialState.REGISTERING

        base = self._properties or DeviceProperties()
        properties = base.model_copy(update={"timestamp": int(time.time())})
        result = self._client.register(self._api_key, properties)

        if result.error is not None and result.status_code == 0:
            self._state = CredentialState.FAILED
            raise CredentialError(f"unable to do registration (with error): {result.error}")

        if result.status_code != 200:
            self._state = CredentialState.FAILED
            raise CredentialError(
                f"unable to do registration (with status code): {result.status_code}"
            )

        if not result.token:
            self._state = CredentialState.FAILED
            raise CredentialError(
                f"registration response carried no token: {result.error or 'empty token'}"
            )

        logger.info("[AUTH] Registration OK")
        self._credential = Credential(token=result.token, source=CredentialSource.REGISTRATION)
        self._state = CredentialState.LOADED

        try:
            self._store.write(result.token)
        except TokenStoreError as e:
            logger.error("[AUTH] Unable to write jwt: %s", e)

        return self._credential
