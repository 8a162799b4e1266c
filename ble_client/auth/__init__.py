"""Módulo de autenticación del gateway.

- token_store: persistencia del JWT en archivo
- credential_manager: carga / registro / persistencia
"""

from .credential_manager import CredentialManager
from .token_store import TokenStore

__all__ = ["CredentialManager", "TokenStore"]
