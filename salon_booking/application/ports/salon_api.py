from __future__ import annotations

from abc import ABC, abstractmethod

from salon_booking.domain.entities.auth_session import AuthSession
from salon_booking.domain.entities.availability import AvailabilityQuery, AvailabilityResult
from salon_booking.domain.entities.booking import BookingAcknowledgement, BookingRequest
from salon_booking.domain.entities.review import ReviewAcknowledgement, ReviewRequest
from salon_booking.domain.entities.service import Service
from salon_booking.domain.entities.stylist import Stylist
from salon_booking.domain.entities.time_slot import NewTimeSlot, TimeSlot


class SalonApiPort(ABC):
    @abstractmethod
    def list_stylists(self, token: str | None) -> list[Stylist]:
        """List stylists in backend order."""
        raise NotImplementedError

    @abstractmethod
    def list_time_slots(self, token: str | None, day: str) -> list[TimeSlot]:
        """List the time slots configured for a weekday name."""
        raise NotImplementedError

    @abstractmethod
    def check_availability(self, token: str | None, query: AvailabilityQuery) -> AvailabilityResult:
        """Check whether a (date, time, stylist) combination is bookable."""
        raise NotImplementedError

    @abstractmethod
    def create_booking(self, token: str | None, request: BookingRequest) -> BookingAcknowledgement:
        """Create a booking. Raises on any non-2xx answer."""
        raise NotImplementedError

    @abstractmethod
    def login(self, email: str, password: str) -> AuthSession:
        raise NotImplementedError

    @abstractmethod
    def signup(
        self,
        first_name: str,
        last_name: str,
        email: str,
        phone: str,
        password: str,
        confirm_password: str,
    ) -> AuthSession:
        raise NotImplementedError

    @abstractmethod
    def list_services(self, token: str | None, category: str | None = None) -> list[Service]:
        """List bookable services, optionally filtered by category."""
        raise NotImplementedError

    @abstractmethod
    def submit_review(self, token: str | None, review: ReviewRequest) -> ReviewAcknowledgement:
        """Review a completed booking."""
        raise NotImplementedError

    # Admin time slot management; the backend rejects non-admin tokens.

    @abstractmethod
    def list_all_time_slots(self, token: str | None) -> list[TimeSlot]:
        raise NotImplementedError

    @abstractmethod
    def create_time_slot(self, token: str | None, slot: NewTimeSlot) -> list[TimeSlot]:
        """Create a weekly slot. Returns the slots the backend reports as created."""
        raise NotImplementedError

    @abstractmethod
    def toggle_time_slot(self, token: str | None, slot_id: str) -> bool:
        """Flip a slot's availability. Returns the new value."""
        raise NotImplementedError

    @abstractmethod
    def delete_time_slot(self, token: str | None, slot_id: str) -> None:
        raise NotImplementedError
