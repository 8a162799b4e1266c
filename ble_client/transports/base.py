"""AdvertisementSource - Interface base para fuentes de anuncios BLE.

El pipeline solo conoce esta interface: un iterable de RawAdvertisement
con start/stop. Permite alimentar el pipeline con secuencias sintéticas
en tests sin radio.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Iterator

from ..core.domain.advertisement import RawAdvertisement


class AdvertisementSource(ABC):
    """Interface común para escáneres de anuncios."""

    @abstractmethod
    def start(self) -> bool:
        """Inicia el escaneo.

        Returns:
            True si el inicio fue exitoso, False si falló
        """
        pass

    @abstractmethod
    def stop(self) -> None:
        """Detiene el escaneo. La iteración en curso termina."""
        pass

    @abstractmethod
    def __iter__(self) -> Iterator[RawAdvertisement]:
        """Produce anuncios en orden de llegada hasta que se llama stop()."""
        pass

    @property
    @abstractmethod
    def source_name(self) -> str:
        pass

    @property
    def stats(self) -> Dict[str, Any]:
        return {}


class StaticAdvertisementSource(AdvertisementSource):
    """Fuente finita sobre una secuencia en memoria (tests, replays)."""

    def __init__(self, advertisements: Iterable[RawAdvertisement]):
        self._advertisements = list(advertisements)
        self._running = False

    def start(self) -> bool:
        self._running = True
        return True

    def stop(self) -> None:
        self._running = False

    def __iter__(self) -> Iterator[RawAdvertisement]:
        for adv in self._advertisements:
            if not self._running:
                return
            yield adv

    @property
    def source_name(self) -> str:
        return "static"

    @property
    def stats(self) -> Dict[str, Any]:
        return {"advertisements": len(self._advertisements)}
