"""Registro decodificado del payload del sensor HumiTemp."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SensorRecord:
    """Contenido del payload de fabricante (layout fijo little-endian).

    Los campos *_sign son flags: 0 = positivo, distinto de 0 = negativo.
    `update_rate` no se usa aguas abajo.
    """
    temperature_sign: int
    temperature_whole: int
    temperature_fraction: int
    humidity_sign: int
    humidity_whole: int
    humidity_fraction: int
    update_rate: int
    address: bytes

    @property
    def temperature_negative(self) -> bool:
        return self.temperature_sign != 0

    @property
    def humidity_negative(self) -> bool:
        return self.humidity_sign != 0
