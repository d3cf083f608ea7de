from __future__ import annotations

import logging

from pydantic import ValidationError

from salon_booking.application.dto.booking_intent import BookingIntentDTO
from salon_booking.application.exceptions import BookingIntentMissingError, MalformedBookingIntentError
from salon_booking.application.ports.client_storage import ClientStoragePort
from salon_booking.domain.entities.booking_intent import BookingIntent, BookingType
from salon_booking.domain.entities.client_context import ClientContext
from salon_booking.domain.entities.service import Service

GENERAL_APPOINTMENT_NAME = "General Appointment"


class BookingIntentUseCase:
    """Records what the customer wants to book and resolves it for the wizard."""

    def __init__(self, storage: ClientStoragePort) -> None:
        self._storage = storage
        self._logger = logging.getLogger(__name__)

    def choose_service(self, client_id: str, service: Service) -> str:
        intent = BookingIntent(
            booking_type=BookingType.service,
            service_id=service.id,
            name=service.name,
            price=service.price,
            duration=service.duration,
        )
        return self.choose(client_id, intent)

    def choose_package(
        self,
        client_id: str,
        package_id: str,
        name: str,
        price: float,
        duration: int | None = None,
    ) -> str:
        intent = BookingIntent(
            booking_type=BookingType.package,
            package_id=package_id,
            name=name,
            price=price,
            duration=duration,
        )
        return self.choose(client_id, intent)

    def choose_general_appointment(self, client_id: str) -> str:
        intent = BookingIntent(booking_type=BookingType.appointment, name=GENERAL_APPOINTMENT_NAME, price=0)
        return self.choose(client_id, intent)

    def choose(self, client_id: str, intent: BookingIntent) -> str:
        """Store the intent. Returns the next page: "booking" when logged in, otherwise "auth"."""
        try:
            raw = BookingIntentDTO.from_entity(intent).to_json()
        except ValidationError as e:
            raise MalformedBookingIntentError(str(e)) from e
        self._storage.set_booking_intent(client_id, raw)
        self._logger.info(
            "Booking intent stored",
            extra={"client_id": client_id, "booking_type": intent.booking_type.value},
        )
        return "booking" if self._storage.get_token(client_id) else "auth"

    def complete(self, client_id: str) -> None:
        """Discard the intent once its booking is confirmed."""
        self._storage.clear_booking_intent(client_id)
        self._logger.info("Booking intent cleared", extra={"client_id": client_id})

    def load_context(self, client_id: str) -> ClientContext:
        """Resolve token and intent for a wizard. Fails fast if the intent is absent or malformed."""
        raw = self._storage.get_booking_intent(client_id)
        if not raw:
            raise BookingIntentMissingError(f"No booking intent for client {client_id}")
        try:
            intent = BookingIntentDTO.model_validate_json(raw).to_entity()
        except ValidationError as e:
            self._logger.warning("Stored booking intent is malformed", extra={"client_id": client_id})
            raise MalformedBookingIntentError(str(e)) from e
        return ClientContext(client_id=client_id, intent=intent, token=self._storage.get_token(client_id))
