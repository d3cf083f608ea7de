from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthSession:
    token: str
    role: str = "customer"
