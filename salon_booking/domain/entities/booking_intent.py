from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class BookingType(str, Enum):
    service = "service"
    package = "package"
    appointment = "appointment"


@dataclass(frozen=True)
class BookingIntent:
    """What the customer chose to book before entering the wizard."""

    booking_type: BookingType
    name: str
    price: float = 0
    service_id: str | None = None
    package_id: str | None = None
    duration: int | None = None  # minutes, None for a general appointment
