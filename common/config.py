"""Configuración del gateway.

Fuente principal: ~/.sense/ble-client-conf.json
{
    "sense-ingress-address": "https://ingress.example.com",
    "sense-ingress-api-key": "...",
    "temperature-unit": "C",              (opcional)
    "request-timeout-seconds": 10         (opcional)
}

Las variables de entorno (o un .env) tienen prioridad sobre el JSON.
"""

from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ble_client.errors import ConfigError

ADDRESS_KEY = "sense-ingress-address"
API_KEY_KEY = "sense-ingress-api-key"
TEMPERATURE_UNIT_KEY = "temperature-unit"
TIMEOUT_KEY = "request-timeout-seconds"

DEFAULT_TEMPERATURE_UNIT = "C"
DEFAULT_REQUEST_TIMEOUT = 10.0


def _sense_home() -> Path:
    return Path(os.getenv("SENSE_HOME", "~/.sense")).expanduser()


def default_config_file() -> Path:
    return Path(os.getenv("SENSE_CONFIG_FILE", str(_sense_home() / "ble-client-conf.json"))).expanduser()


def default_jwt_file() -> Path:
    return Path(os.getenv("SENSE_JWT_FILE", str(_sense_home() / "ble-client-jwt"))).expanduser()


def _load_env_file() -> None:
    # Cargar .env (si existe) sin pisar variables reales del entorno
    env_file = os.getenv("SENSE_ENV_FILE", str(_sense_home() / "ble-client.env"))
    if env_file and Path(env_file).expanduser().exists():
        load_dotenv(Path(env_file).expanduser(), override=False)


@dataclass(frozen=True)
class Settings:
    ingress_address: str
    api_key: str
    jwt_file: Path
    config_file: Path
    temperature_unit: str = DEFAULT_TEMPERATURE_UNIT
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    def __repr__(self) -> str:
        return f"Settings({self.describe()})"

    def describe(self) -> Dict[str, Any]:
        """Vista para logs, con la API key enmascarada."""
        return {
            "ingress_address": self.ingress_address,
            "api_key": _mask(self.api_key),
            "jwt_file": str(self.jwt_file),
            "config_file": str(self.config_file),
            "temperature_unit": self.temperature_unit,
            "request_timeout": self.request_timeout,
        }


def _mask(secret: str) -> str:
    if len(secret) <= 4:
        return "****"
    return secret[:4] + "****"


def _read_config_file(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"unable to read configuration file `{path}`: file not found")
    except OSError as e:
        raise ConfigError(f"unable to read configuration file `{path}`: {e}")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"unable to parse configuration file `{path}`: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"configuration file `{path}` must contain a JSON object")
    return data


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def get_settings(
    config_file: Optional[Path] = None,
    jwt_file: Optional[Path] = None,
) -> Settings:
    """Carga y valida la configuración.

    Raises:
        ConfigError: archivo ausente/ilegible o campos obligatorios vacíos.
    """
    _load_env_file()

    config_path = Path(config_file).expanduser() if config_file else default_config_file()
    jwt_path = Path(jwt_file).expanduser() if jwt_file else default_jwt_file()

    data = _read_config_file(config_path)

    ingress_address = _as_str(os.getenv("SENSE_INGRESS_ADDRESS") or data.get(ADDRESS_KEY))
    api_key = _as_str(os.getenv("SENSE_INGRESS_API_KEY") or data.get(API_KEY_KEY))

    if not ingress_address:
        raise ConfigError(
            f"no Sixgill Sense Ingress API server address specified ({ADDRESS_KEY})"
        )
    if not api_key:
        raise ConfigError(f"no Sixgill Sense Ingress API key specified ({API_KEY_KEY})")

    temperature_unit = _as_str(
        os.getenv("SENSE_TEMPERATURE_UNIT") or data.get(TEMPERATURE_UNIT_KEY)
    ) or DEFAULT_TEMPERATURE_UNIT

    raw_timeout = os.getenv("SENSE_REQUEST_TIMEOUT") or data.get(TIMEOUT_KEY, DEFAULT_REQUEST_TIMEOUT)
    try:
        request_timeout = float(raw_timeout)
    except (TypeError, ValueError):
        raise ConfigError(f"{TIMEOUT_KEY} must be a number, got {raw_timeout!r}")
    if not math.isfinite(request_timeout):
        raise ConfigError(f"{TIMEOUT_KEY} must be a finite number, got {raw_timeout!r}")
    if request_timeout <= 0:
        raise ConfigError(f"{TIMEOUT_KEY} must be > 0, got {request_timeout}")

    return Settings(
        ingress_address=ingress_address.rstrip("/"),
        api_key=api_key,
        jwt_file=jwt_path,
        config_file=config_path,
        temperature_unit=temperature_unit[:1].upper(),
        request_timeout=request_timeout,
    )
