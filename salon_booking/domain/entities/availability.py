from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AvailabilityQuery:
    date: str  # YYYY-MM-DD
    time_slot: str  # HH:MM
    stylist_id: str

    def to_payload(self) -> dict[str, str]:
        return {"date": self.date, "timeSlot": self.time_slot, "stylistId": self.stylist_id}


@dataclass(frozen=True)
class AvailabilityResult:
    available: bool
    reason: str | None = None
