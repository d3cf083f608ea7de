from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Stylist:
    id: str
    name: str
    specialty: str | None = None
    rating: float | None = None
