from __future__ import annotations

from dataclasses import dataclass

from salon_booking.domain.entities.booking_intent import BookingIntent


@dataclass(frozen=True)
class ClientContext:
    """Everything a wizard needs from the client session, resolved up front."""

    client_id: str
    intent: BookingIntent
    token: str | None = None
