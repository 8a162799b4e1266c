"""Excepciones del gateway BLE.

Fatales (abortan el arranque): ConfigError, CredentialError, ScannerError.
Recuperables (se registran en log y se continúa): DecodeError,
AddressFormatError, DeliveryError.
"""

from __future__ import annotations

from typing import Optional


class GatewayError(Exception):
    """Base de todas las excepciones del gateway."""

    pass


class ConfigError(GatewayError):
    """Configuración ausente, ilegible o incompleta."""

    pass


class CredentialError(GatewayError):
    """No se pudo obtener un token (almacén vacío y registro fallido)."""

    pass


class TokenStoreError(CredentialError):
    """Error leyendo o escribiendo el archivo del token."""

    pass


class ScannerError(GatewayError):
    """No se pudo iniciar el escáner BLE."""

    pass


class DecodeError(GatewayError):
    """Payload de fabricante con formato inválido."""

    pass


class AddressFormatError(GatewayError):
    """Campo de dirección del registro con longitud distinta de 6 bytes."""

    pass


class DeliveryError(GatewayError):
    """Fallo de transporte o respuesta no-200 al enviar un evento."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
