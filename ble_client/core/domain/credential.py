"""Credencial (JWT) del gateway."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CredentialState(Enum):
    """Ciclo de vida de la credencial."""
    UNLOADED = "unloaded"
    REGISTERING = "registering"
    LOADED = "loaded"
    FAILED = "failed"


class CredentialSource(Enum):
    STORE = "store"
    REGISTRATION = "registration"


@dataclass(frozen=True)
class Credential:
    """Bearer token opaco. Solo lectura una vez cargado."""
    token: str
    source: CredentialSource

    def __repr__(self) -> str:
        # Nunca exponer el token completo en logs
        return f"Credential(token='{self.token[:6]}...', source={self.source.value})"

    __str__ = __repr__
