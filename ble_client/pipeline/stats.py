"""Estadísticas del pipeline de escaneo."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class PipelineStats:
    """Contadores por etapa del pipeline."""

    received: int = 0
    matched: int = 0
    decode_failed: int = 0
    events_built: int = 0
    build_failed: int = 0
    delivered: int = 0
    delivery_failed: int = 0
    last_match_at: float = 0
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __str__(self) -> str:
        return (
            f"Stats: received={self.received} matched={self.matched} "
            f"decode_failed={self.decode_failed} events={self.events_built} "
            f"delivered={self.delivered} delivery_failed={self.delivery_failed}"
        )

    def to_dict(self) -> dict:
        return {
            "received": self.received,
            "matched": self.matched,
            "decode_failed": self.decode_failed,
            "events_built": self.events_built,
            "build_failed": self.build_failed,
            "delivered": self.delivered,
            "delivery_failed": self.delivery_failed,
            "last_match_at": self.last_match_at,
            "started_at": self.started_at.isoformat(),
            "success_rate": self._success_rate(),
        }

    def _success_rate(self) -> float:
        total = self.delivered + self.delivery_failed
        if total == 0:
            return 1.0
        return self.delivered / total
