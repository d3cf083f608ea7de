from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TimeSlot:
    id: str
    day_of_week: str
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    duration: int
    available: bool = True


@dataclass(frozen=True)
class NewTimeSlot:
    """A weekly slot an admin wants to add; the backend assigns the id."""

    day_of_week: str
    start_time: str
    end_time: str
    duration: int = 60

    def to_payload(self) -> dict[str, object]:
        return {
            "dayOfWeek": self.day_of_week,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "duration": self.duration,
        }
