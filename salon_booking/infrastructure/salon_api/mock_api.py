from __future__ import annotations

import logging
import secrets
import threading
from dataclasses import replace
from datetime import date

from salon_booking.application.exceptions import ApiStatusError, AuthenticationRequiredError
from salon_booking.application.ports.salon_api import SalonApiPort
from salon_booking.application.utils.calendar_days import WEEKDAY_NAMES, weekday_name
from salon_booking.domain.entities.auth_session import AuthSession
from salon_booking.domain.entities.availability import AvailabilityQuery, AvailabilityResult
from salon_booking.domain.entities.booking import BookingAcknowledgement, BookingRequest
from salon_booking.domain.entities.review import ReviewAcknowledgement, ReviewRequest
from salon_booking.domain.entities.service import Service
from salon_booking.domain.entities.stylist import Stylist
from salon_booking.domain.entities.time_slot import NewTimeSlot, TimeSlot

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "password"
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-password"


def default_stylists() -> list[Stylist]:
    return [
        Stylist(id="s1", name="Ava Martin", specialty="Color", rating=4.9),
        Stylist(id="s2", name="Noah Chen", specialty="Cuts", rating=4.7),
        Stylist(id="s3", name="Mia Lopez", specialty="Styling", rating=4.8),
    ]


def default_time_slots() -> dict[str, list[TimeSlot]]:
    """Hourly 60 minute slots from 09:00 to 16:00, Monday to Saturday."""
    slots: dict[str, list[TimeSlot]] = {}
    for day in WEEKDAY_NAMES[:6]:
        slots[day] = [
            TimeSlot(
                id=f"{day[:3].lower()}-{hour:02d}00",
                day_of_week=day,
                start_time=f"{hour:02d}:00",
                end_time=f"{hour + 1:02d}:00",
                duration=60,
            )
            for hour in range(9, 17)
        ]
    return slots


def default_services() -> list[Service]:
    return [
        Service(id="svc-cut", name="Signature Haircut", price=45, duration=45, category="hair"),
        Service(id="svc-color", name="Full Color", price=120, duration=120, category="hair"),
        Service(id="svc-mani", name="Classic Manicure", price=30, duration=30, category="nails"),
        Service(id="svc-facial", name="Hydrating Facial", price=80, duration=60, category="skin"),
    ]


class MockSalonApi(SalonApiPort):
    """In-memory backend. Booking creation re-checks the slot under the same lock as the insert."""

    def __init__(
        self,
        stylists: list[Stylist] | None = None,
        time_slots: dict[str, list[TimeSlot]] | None = None,
        services: list[Service] | None = None,
    ) -> None:
        self._stylists = list(stylists if stylists is not None else default_stylists())
        self._time_slots = dict(time_slots if time_slots is not None else default_time_slots())
        self._services = list(services if services is not None else default_services())
        self._users: dict[str, tuple[str, str]] = {
            DEMO_EMAIL: (DEMO_PASSWORD, "customer"),
            ADMIN_EMAIL: (ADMIN_PASSWORD, "admin"),
        }
        self._tokens: dict[str, str] = {}
        self._bookings: dict[str, BookingRequest] = {}
        self._booking_owners: dict[str, str] = {}
        self._reviews: dict[str, ReviewRequest] = {}
        self._slot_seq = 0
        self._taken: set[tuple[str, str, str]] = set()
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    @property
    def reviews(self) -> dict[str, ReviewRequest]:
        return dict(self._reviews)

    @property
    def bookings(self) -> dict[str, BookingRequest]:
        return dict(self._bookings)

    def issue_token(self, email: str = DEMO_EMAIL) -> str:
        token = f"mock_token_{secrets.token_hex(8)}"
        self._tokens[token] = email
        return token

    def list_stylists(self, token: str | None) -> list[Stylist]:
        self._authorize(token)
        return list(self._stylists)

    def list_time_slots(self, token: str | None, day: str) -> list[TimeSlot]:
        self._authorize(token)
        return list(self._time_slots.get(day, []))

    def check_availability(self, token: str | None, query: AvailabilityQuery) -> AvailabilityResult:
        self._authorize(token)
        with self._lock:
            return self._availability(query.date, query.time_slot, query.stylist_id)

    def create_booking(self, token: str | None, request: BookingRequest) -> BookingAcknowledgement:
        owner = self._authorize(token)
        if not request.stylist_ids:
            raise ApiStatusError(400, "At least one stylist is required")
        keys = [(request.date, request.time_slot, stylist_id) for stylist_id in request.stylist_ids]
        with self._lock:
            for key in keys:
                result = self._availability(*key)
                if not result.available:
                    raise ApiStatusError(409, result.reason)
            booking_id = f"mock_booking_{len(self._bookings) + 1}"
            self._bookings[booking_id] = request
            self._booking_owners[booking_id] = owner
            self._taken.update(keys)

        self._logger.info(
            "Mock booking created",
            extra={"booking_id": booking_id, "date": request.date, "time_slot": request.time_slot},
        )
        return BookingAcknowledgement(
            booking_id=booking_id,
            status="confirmed",
            raw={"_id": booking_id, "status": "confirmed", **request.to_payload()},
        )

    def login(self, email: str, password: str) -> AuthSession:
        user = self._users.get(email.strip().lower())
        if user is None or user[0] != password:
            raise ApiStatusError(401, "Invalid email or password")
        return AuthSession(token=self.issue_token(email.strip().lower()), role=user[1])

    def signup(
        self,
        first_name: str,
        last_name: str,
        email: str,
        phone: str,
        password: str,
        confirm_password: str,
    ) -> AuthSession:
        key = email.strip().lower()
        if not key or not password:
            raise ApiStatusError(400, "Email and password are required")
        if password != confirm_password:
            raise ApiStatusError(400, "Passwords do not match")
        if key in self._users:
            raise ApiStatusError(409, "User already exists")
        self._users[key] = (password, "customer")
        return AuthSession(token=self.issue_token(key), role="customer")

    def list_services(self, token: str | None, category: str | None = None) -> list[Service]:
        if not category or category.lower() == "all":
            return list(self._services)
        return [s for s in self._services if (s.category or "").lower() == category.lower()]

    def submit_review(self, token: str | None, review: ReviewRequest) -> ReviewAcknowledgement:
        email = self._authorize(token)
        if not 1 <= review.rating <= 5:
            raise ApiStatusError(400, "Rating must be between 1 and 5")
        with self._lock:
            owner = self._booking_owners.get(review.booking_id)
            if owner is None:
                raise ApiStatusError(404, "Booking not found")
            if owner != email:
                raise ApiStatusError(403, "You can only review your own bookings")
            if review.booking_id in self._reviews:
                raise ApiStatusError(409, "Booking already reviewed")
            self._reviews[review.booking_id] = review
            review_id = f"mock_review_{len(self._reviews)}"
        return ReviewAcknowledgement(review_id=review_id, raw={"_id": review_id, **review.to_payload()})

    def list_all_time_slots(self, token: str | None) -> list[TimeSlot]:
        self._authorize_admin(token)
        with self._lock:
            return [slot for day in WEEKDAY_NAMES for slot in self._time_slots.get(day, [])]

    def create_time_slot(self, token: str | None, slot: NewTimeSlot) -> list[TimeSlot]:
        self._authorize_admin(token)
        with self._lock:
            existing = self._time_slots.get(slot.day_of_week, [])
            if any(s.start_time == slot.start_time for s in existing):
                raise ApiStatusError(409, "Time slot already exists")
            self._slot_seq += 1
            created = TimeSlot(
                id=f"mock_slot_{self._slot_seq}",
                day_of_week=slot.day_of_week,
                start_time=slot.start_time,
                end_time=slot.end_time,
                duration=slot.duration,
            )
            self._time_slots[slot.day_of_week] = sorted([*existing, created], key=lambda s: s.start_time)
        return [created]

    def toggle_time_slot(self, token: str | None, slot_id: str) -> bool:
        self._authorize_admin(token)
        with self._lock:
            day, index = self._find_slot(slot_id)
            slots = list(self._time_slots[day])
            slots[index] = replace(slots[index], available=not slots[index].available)
            self._time_slots[day] = slots
            return slots[index].available

    def delete_time_slot(self, token: str | None, slot_id: str) -> None:
        self._authorize_admin(token)
        with self._lock:
            day, index = self._find_slot(slot_id)
            slots = list(self._time_slots[day])
            del slots[index]
            self._time_slots[day] = slots

    def _authorize(self, token: str | None) -> str:
        if not token:
            raise AuthenticationRequiredError("Not authenticated. Please login.")
        if token not in self._tokens:
            raise ApiStatusError(401, "Invalid or expired token")
        return self._tokens[token]

    def _authorize_admin(self, token: str | None) -> None:
        email = self._authorize(token)
        if self._users.get(email, ("", "customer"))[1] != "admin":
            raise ApiStatusError(403, "Admin access required")

    def _find_slot(self, slot_id: str) -> tuple[str, int]:
        for day, slots in self._time_slots.items():
            for index, slot in enumerate(slots):
                if slot.id == slot_id:
                    return day, index
        raise ApiStatusError(404, "Time slot not found")

    def _availability(self, day: str, time_slot: str, stylist_id: str) -> AvailabilityResult:
        if not any(s.id == stylist_id for s in self._stylists):
            return AvailabilityResult(available=False, reason="Stylist not found")
        try:
            weekday = weekday_name(date.fromisoformat(day))
        except ValueError:
            return AvailabilityResult(available=False, reason="Invalid date")
        slot = next((s for s in self._time_slots.get(weekday, []) if s.start_time == time_slot), None)
        if slot is None or not slot.available:
            return AvailabilityResult(available=False, reason="No such time slot on this day")
        if (day, time_slot, stylist_id) in self._taken:
            return AvailabilityResult(available=False, reason="Stylist is already booked for this slot")
        return AvailabilityResult(available=True)
