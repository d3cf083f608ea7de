from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Service:
    id: str
    name: str
    price: float
    duration: int
    category: str | None = None
    description: str | None = None
