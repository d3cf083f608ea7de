from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from salon_booking.domain.entities.booking_intent import BookingIntent, BookingType


class BookingIntentDTO(BaseModel):
    """Wire shape of the booking intent kept in session storage (camelCase keys)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    booking_type: BookingType = Field(alias="bookingType")
    service_id: str | None = Field(default=None, alias="serviceId")
    package_id: str | None = Field(default=None, alias="packageId")
    name: str
    price: float = Field(default=0, ge=0)
    duration: int | None = None

    @model_validator(mode="after")
    def _check_target(self) -> "BookingIntentDTO":
        if self.booking_type is BookingType.service and not self.service_id:
            raise ValueError("serviceId is required for a service booking")
        if self.booking_type is BookingType.package and not self.package_id:
            raise ValueError("packageId is required for a package booking")
        return self

    def to_entity(self) -> BookingIntent:
        return BookingIntent(
            booking_type=self.booking_type,
            name=self.name,
            price=self.price,
            service_id=self.service_id,
            package_id=self.package_id,
            duration=self.duration,
        )

    @classmethod
    def from_entity(cls, intent: BookingIntent) -> "BookingIntentDTO":
        return cls(
            booking_type=intent.booking_type,
            service_id=intent.service_id,
            package_id=intent.package_id,
            name=intent.name,
            price=intent.price,
            duration=intent.duration,
        )

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
