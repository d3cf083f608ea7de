from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from salon_booking.domain.entities.auth_session import AuthSession
from salon_booking.domain.entities.availability import AvailabilityResult
from salon_booking.domain.entities.booking import BookingAcknowledgement
from salon_booking.domain.entities.review import ReviewAcknowledgement
from salon_booking.domain.entities.service import Service
from salon_booking.domain.entities.stylist import Stylist
from salon_booking.domain.entities.time_slot import TimeSlot

# The backend is Mongo-backed and sends "_id"; "id" is accepted as well.
_ID = AliasChoices("_id", "id")


class StylistDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | int = Field(validation_alias=_ID)
    name: str
    specialty: str | None = None
    rating: float | None = None

    def to_entity(self) -> Stylist:
        return Stylist(id=str(self.id), name=self.name, specialty=self.specialty, rating=self.rating)


class TimeSlotDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | int = Field(validation_alias=_ID)
    day_of_week: str = Field(validation_alias=AliasChoices("dayOfWeek", "day_of_week"))
    start_time: str = Field(validation_alias=AliasChoices("startTime", "start_time"))
    end_time: str = Field(validation_alias=AliasChoices("endTime", "end_time"))
    duration: int = 0
    available: bool = True

    def to_entity(self) -> TimeSlot:
        return TimeSlot(
            id=str(self.id),
            day_of_week=self.day_of_week,
            start_time=self.start_time,
            end_time=self.end_time,
            duration=self.duration,
            available=self.available,
        )


class TimeSlotListDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    slots: list[TimeSlotDTO] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _normalize_shape(cls, value: Any) -> Any:
        # Admin endpoints answer with a bare list, {"slots": [...]} or {"slot": {...}}.
        if isinstance(value, list):
            return {"slots": value}
        if isinstance(value, dict) and "slots" not in value and isinstance(value.get("slot"), dict):
            return {"slots": [value["slot"]]}
        return value

    @field_validator("slots", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def to_entities(self) -> list[TimeSlot]:
        return [s.to_entity() for s in self.slots]


class AvailabilityDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    available: bool
    reason: str | None = None

    def to_entity(self) -> AvailabilityResult:
        return AvailabilityResult(available=self.available, reason=self.reason or None)


class BookingAckDTO(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | int | None = Field(default=None, validation_alias=_ID)
    status: str | None = None

    def to_entity(self, raw: dict[str, Any]) -> BookingAcknowledgement:
        return BookingAcknowledgement(
            booking_id=str(self.id) if self.id is not None else None,
            status=self.status,
            raw=dict(raw),
        )


class AuthResponseDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    token: str = Field(min_length=1)
    role: str | None = None

    def to_entity(self) -> AuthSession:
        return AuthSession(token=self.token, role=self.role or "customer")


class ServiceDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | int = Field(validation_alias=_ID)
    name: str
    price: float
    duration: int
    category: str | None = None
    description: str | None = None

    def to_entity(self) -> Service:
        return Service(
            id=str(self.id),
            name=self.name,
            price=self.price,
            duration=self.duration,
            category=self.category,
            description=self.description,
        )


class ReviewAckDTO(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | int | None = Field(default=None, validation_alias=_ID)
    review: dict[str, Any] | None = None

    def to_entity(self, raw: dict[str, Any]) -> ReviewAcknowledgement:
        review_id = self.id
        if review_id is None and self.review:
            review_id = self.review.get("_id", self.review.get("id"))
        return ReviewAcknowledgement(
            review_id=str(review_id) if review_id is not None else None,
            raw=dict(raw),
        )


class _SlotStateDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    available: bool


class AdminActionDTO(BaseModel):
    """Answer of the toggle and delete endpoints: {"success": bool, "slot"?: {...}}."""

    model_config = ConfigDict(extra="ignore")

    success: bool = False
    slot: _SlotStateDTO | None = None
    message: str | None = Field(default=None, validation_alias=AliasChoices("message", "error"))
