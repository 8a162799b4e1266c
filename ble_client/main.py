"""Entry point del gateway BLE → Sense Ingress API.

Modos:
- normal: carga (o registra) el token y escanea hasta SIGINT/SIGTERM
- --force-register: solo registro + persistencia del token, luego termina

Ejecutar:
    sense-ble-client
    sense-ble-client --force-register
"""

from __future__ import annotations

import argparse
import logging
import os
import signal
import sys
import threading
from typing import Callable, List, Optional

from common.config import Settings, get_settings

from .auth import CredentialManager, TokenStore
from .core.domain.advertisement import HUMITEMP_PATTERN
from .core.domain.credential import Credential
from .errors import ConfigError, CredentialError, ScannerError
from .pipeline import ScanPipeline
from .transports.base import AdvertisementSource
from .transports.ble import BleakAdvertisementSource
from .transports.http import IngressClient

logger = logging.getLogger(__name__)

SourceFactory = Callable[[], AdvertisementSource]

WORKER_JOIN_TIMEOUT = 15.0


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="HumiTemp BLE gateway for the Sense Ingress API")
    p.add_argument(
        "--force-register",
        action="store_true",
        help="force registration (to update a bad JWT, for instance), then quit",
    )
    p.add_argument("--config", default=None, help="configuration file (JSON)")
    p.add_argument("--jwt-file", default=None, help="file where the JWT is stored")
    p.add_argument(
        "--log-level",
        default=os.getenv("SENSE_LOG_LEVEL", "INFO"),
        help="DEBUG, INFO, WARNING, ERROR",
    )
    return p.parse_args(argv)


def run_scanner(
    pipeline: ScanPipeline,
    source: AdvertisementSource,
    stop_event: threading.Event,
) -> None:
    """Escanea hasta que stop_event se active.

    El pipeline consume la fuente en un thread de trabajo; el thread
    principal solo espera la señal de parada.
    """
    if not source.start():
        raise ScannerError(f"unable to start advertisement source '{source.source_name}'")

    worker = threading.Thread(target=pipeline.run, args=(source,), name="scan-pipeline", daemon=True)
    worker.start()

    try:
        stop_event.wait()
    finally:
        logger.info("Cleaning up")
        source.stop()
        worker.join(timeout=WORKER_JOIN_TIMEOUT)
        logger.info("[BLE] Source '%s' stopped: %s", source.source_name, source.stats)
        if worker.is_alive():
            logger.warning("[PIPELINE] Worker still busy after %.0fs, exiting anyway", WORKER_JOIN_TIMEOUT)


def _install_signal_handlers(stop_event: threading.Event) -> None:
    def _handle(signum, frame):
        logger.info("Received %s", signal.Signals(signum).name)
        stop_event.set()

    signal.signal(signal.SIGINT, _handle)
    signal.signal(signal.SIGTERM, _handle)


def run_gateway(
    settings: Settings,
    force_register: bool = False,
    *,
    client: Optional[IngressClient] = None,
    source_factory: Optional[SourceFactory] = None,
    stop_event: Optional[threading.Event] = None,
) -> int:
    """Ejecuta el gateway con la configuración dada. Devuelve el exit code."""
    own_client = client is None
    if client is None:
        client = IngressClient(settings.ingress_address, timeout=settings.request_timeout)

    try:
        manager = CredentialManager(client, TokenStore(settings.jwt_file), settings.api_key)

        try:
            credential: Credential = manager.load_or_register(force_register=force_register)
        except CredentialError as e:
            logger.error("[AUTH] %s", e)
            return 1

        if force_register:
            logger.info("[AUTH] Registration done, exiting")
            return 0

        logger.info("[BLE] Setting up ble listener")
        source = (source_factory or BleakAdvertisementSource)()
        pipeline = ScanPipeline(
            HUMITEMP_PATTERN,
            client,
            credential,
            temperature_unit=settings.temperature_unit,
        )

        if stop_event is None:
            stop_event = threading.Event()
            _install_signal_handlers(stop_event)

        try:
            run_scanner(pipeline, source, stop_event)
        except ScannerError as e:
            logger.error("[BLE] Error setting up ble listener: %s", e)
            return 1

        logger.info("Done scanning ble. %s", pipeline.stats.to_dict())
        return 0
    finally:
        if own_client:
            client.close()


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    try:
        settings = get_settings(config_file=args.config, jwt_file=args.jwt_file)
    except ConfigError as e:
        logger.error("[CONFIG] %s", e)
        return 1

    logger.info("[CONFIG] %s", settings.describe())

    exit_code = run_gateway(settings, force_register=args.force_register)
    if exit_code == 0 and not args.force_register:
        logger.info("Bye")
    return exit_code


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
