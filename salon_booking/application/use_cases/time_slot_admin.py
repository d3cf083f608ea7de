from __future__ import annotations

import logging
from datetime import datetime, timedelta

from salon_booking.application.exceptions import AdminRequiredError, AuthenticationRequiredError
from salon_booking.application.ports.client_storage import ClientStoragePort
from salon_booking.application.ports.salon_api import SalonApiPort
from salon_booking.application.utils.calendar_days import WEEKDAY_NAMES
from salon_booking.domain.entities.time_slot import NewTimeSlot, TimeSlot

ALLOWED_DURATIONS = (30, 45, 60, 90, 120)


def _parse_clock(value: str) -> datetime:
    try:
        return datetime.strptime(value, "%H:%M")
    except ValueError:
        raise ValueError(f"Invalid time {value!r}, expected HH:MM") from None


def group_by_day(slots: list[TimeSlot]) -> dict[str, list[TimeSlot]]:
    """Slots per weekday, Monday first, each day sorted by start time. Days without slots are kept empty."""
    grouped: dict[str, list[TimeSlot]] = {day: [] for day in WEEKDAY_NAMES}
    for slot in slots:
        grouped.setdefault(slot.day_of_week, []).append(slot)
    for day_slots in grouped.values():
        day_slots.sort(key=lambda s: s.start_time)
    return grouped


class TimeSlotAdminUseCase:
    """Weekly time slot management for admin clients."""

    def __init__(self, api: SalonApiPort, storage: ClientStoragePort) -> None:
        self._api = api
        self._storage = storage
        self._logger = logging.getLogger(__name__)

    def list_slots(self, client_id: str) -> dict[str, list[TimeSlot]]:
        return group_by_day(self._api.list_all_time_slots(self._admin_token(client_id)))

    def create_slot(
        self,
        client_id: str,
        day_of_week: str,
        start_time: str,
        end_time: str | None = None,
        duration: int = 60,
    ) -> list[TimeSlot]:
        if day_of_week not in WEEKDAY_NAMES:
            raise ValueError(f"Unknown day {day_of_week!r}")
        if duration not in ALLOWED_DURATIONS:
            raise ValueError(f"Duration must be one of {', '.join(map(str, ALLOWED_DURATIONS))} minutes")
        start = _parse_clock(start_time)
        end = _parse_clock(end_time) if end_time else start + timedelta(minutes=duration)
        if end <= start or end.date() != start.date():
            raise ValueError("End time must be after start time on the same day")

        token = self._admin_token(client_id)
        slot = NewTimeSlot(
            day_of_week=day_of_week,
            start_time=start.strftime("%H:%M"),
            end_time=end.strftime("%H:%M"),
            duration=duration,
        )
        created = self._api.create_time_slot(token, slot)
        self._logger.info(
            "Time slot created",
            extra={"client_id": client_id, "day": day_of_week, "slot_id": [s.id for s in created]},
        )
        return created

    def toggle(self, client_id: str, slot_id: str) -> bool:
        available = self._api.toggle_time_slot(self._admin_token(client_id), slot_id)
        self._logger.info("Time slot toggled", extra={"client_id": client_id, "slot_id": slot_id, "status": available})
        return available

    def delete(self, client_id: str, slot_id: str) -> None:
        self._api.delete_time_slot(self._admin_token(client_id), slot_id)
        self._logger.info("Time slot deleted", extra={"client_id": client_id, "slot_id": slot_id})

    def _admin_token(self, client_id: str) -> str:
        token = self._storage.get_token(client_id)
        if not token:
            raise AuthenticationRequiredError("Not authenticated. Please login.")
        if self._storage.get_role(client_id) != "admin":
            raise AdminRequiredError("Admin access required")
        return token
