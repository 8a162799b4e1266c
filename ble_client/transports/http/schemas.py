"""Esquemas Pydantic del Sense Ingress API.

Los nombres de campo replican el JSON que espera el servidor
(snake_case del contrato protobuf de registro).
"""

from __future__ import annotations

import time
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

SOFTWARE_VERSION = "sense-ble-client-v0.1"


class DeviceProperties(BaseModel):
    """Descriptor fijo del gateway enviado en el registro."""

    timestamp: int = Field(default_factory=lambda: int(time.time()))
    manufacturer: str = "Intel"
    model: str = "Advantech"
    os: str = "wrlinux"
    os_version: str = "7.0.0.13"
    software_version: str = SOFTWARE_VERSION
    type: str = "wrlinux"
    sensors: List[str] = Field(default_factory=lambda: ["temperature", "humidity"])


class RegistrationRequest(BaseModel):
    api_key: str
    properties: DeviceProperties = Field(default_factory=DeviceProperties)


class RegistrationResponse(BaseModel):
    """Respuesta del registro. Solo interesa el token."""

    model_config = ConfigDict(extra="ignore")

    token: Optional[str] = None
