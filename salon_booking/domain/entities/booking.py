from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from salon_booking.domain.entities.booking_intent import BookingType
from salon_booking.domain.entities.customer_info import CustomerInfo


@dataclass(frozen=True)
class BookingRequest:
    booking_type: BookingType
    service_ids: list[str]
    package_id: str | None
    date: str
    time_slot: str
    stylist_ids: list[str]
    customer_info: CustomerInfo
    total_price: float

    def to_payload(self) -> dict[str, Any]:
        return {
            "bookingType": self.booking_type.value,
            "serviceIds": list(self.service_ids),
            "packageId": self.package_id,
            "date": self.date,
            "timeSlot": self.time_slot,
            "stylistIds": list(self.stylist_ids),
            "customerInfo": self.customer_info.to_payload(),
            "totalPrice": self.total_price,
        }


@dataclass(frozen=True)
class BookingAcknowledgement:
    booking_id: str | None = None
    status: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)
