from __future__ import annotations

import logging
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from salon_booking.application.dto.salon_api_responses import (
    AdminActionDTO,
    AuthResponseDTO,
    AvailabilityDTO,
    BookingAckDTO,
    ReviewAckDTO,
    ServiceDTO,
    StylistDTO,
    TimeSlotListDTO,
)
from salon_booking.application.exceptions import (
    ApiStatusError,
    ApiTransportError,
    AuthenticationRequiredError,
    MalformedResponseError,
)
from salon_booking.application.ports.salon_api import SalonApiPort
from salon_booking.core.config import settings
from salon_booking.domain.entities.auth_session import AuthSession
from salon_booking.domain.entities.availability import AvailabilityQuery, AvailabilityResult
from salon_booking.domain.entities.booking import BookingAcknowledgement, BookingRequest
from salon_booking.domain.entities.review import ReviewAcknowledgement, ReviewRequest
from salon_booking.domain.entities.service import Service
from salon_booking.domain.entities.stylist import Stylist
from salon_booking.domain.entities.time_slot import NewTimeSlot, TimeSlot

_M = TypeVar("_M", bound=BaseModel)

_STYLISTS = TypeAdapter(list[StylistDTO])
_SERVICES = TypeAdapter(list[ServiceDTO])


class HttpSalonApi(SalonApiPort):
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = (base_url or settings.SALON_API_BASE_URL or "").rstrip("/")
        if not self._base_url:
            raise ValueError("SALON_API_BASE_URL is required for the salon API client")
        self._client = client or httpx.Client(timeout=timeout or settings.SALON_API_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

    def list_stylists(self, token: str | None) -> list[Stylist]:
        resp = self._request("GET", "/api/stylist", token)
        data = self._json(resp)
        try:
            return [s.to_entity() for s in _STYLISTS.validate_python(data)]
        except ValidationError as e:
            raise MalformedResponseError(f"Invalid stylist list: {e}") from e

    def list_time_slots(self, token: str | None, day: str) -> list[TimeSlot]:
        resp = self._request("GET", "/api/timeSlot/getTime", token, params={"day": day})
        return self._decode(resp, TimeSlotListDTO).to_entities()

    def check_availability(self, token: str | None, query: AvailabilityQuery) -> AvailabilityResult:
        resp = self._request("POST", "/api/bookings/check", token, json=query.to_payload())
        return self._decode(resp, AvailabilityDTO).to_entity()

    def create_booking(self, token: str | None, request: BookingRequest) -> BookingAcknowledgement:
        resp = self._request("POST", "/api/bookings/create", token, json=request.to_payload())
        data = self._json(resp)
        if not isinstance(data, dict):
            raise MalformedResponseError("Booking acknowledgement is not an object")
        try:
            ack = BookingAckDTO.model_validate(data).to_entity(data)
        except ValidationError as e:
            raise MalformedResponseError(f"Invalid booking acknowledgement: {e}") from e
        self._logger.info("Booking created", extra={"booking_id": ack.booking_id, "status": resp.status_code})
        return ack

    def login(self, email: str, password: str) -> AuthSession:
        payload = {"email": email, "password": password}
        resp = self._request("POST", "/api/auth/login", None, json=payload, require_auth=False)
        return self._decode(resp, AuthResponseDTO).to_entity()

    def signup(
        self,
        first_name: str,
        last_name: str,
        email: str,
        phone: str,
        password: str,
        confirm_password: str,
    ) -> AuthSession:
        payload = {
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "phone": phone,
            "password": password,
            "confirmPassword": confirm_password,
        }
        resp = self._request("POST", "/api/auth/signup", None, json=payload, require_auth=False)
        return self._decode(resp, AuthResponseDTO).to_entity()

    def list_services(self, token: str | None, category: str | None = None) -> list[Service]:
        params = {"category": category.lower()} if category and category.lower() != "all" else None
        resp = self._request("GET", "/api/services", token, params=params, require_auth=False)
        data = self._json(resp)
        try:
            return [s.to_entity() for s in _SERVICES.validate_python(data)]
        except ValidationError as e:
            raise MalformedResponseError(f"Invalid service list: {e}") from e

    def submit_review(self, token: str | None, review: ReviewRequest) -> ReviewAcknowledgement:
        resp = self._request("POST", "/api/reviews", token, json=review.to_payload())
        data = self._json(resp)
        if not isinstance(data, dict):
            raise MalformedResponseError("Review acknowledgement is not an object")
        try:
            ack = ReviewAckDTO.model_validate(data).to_entity(data)
        except ValidationError as e:
            raise MalformedResponseError(f"Invalid review acknowledgement: {e}") from e
        self._logger.info("Review submitted", extra={"booking_id": review.booking_id, "status": resp.status_code})
        return ack

    def list_all_time_slots(self, token: str | None) -> list[TimeSlot]:
        resp = self._request("GET", "/api/timeSlot/admin", token)
        return self._decode(resp, TimeSlotListDTO).to_entities()

    def create_time_slot(self, token: str | None, slot: NewTimeSlot) -> list[TimeSlot]:
        resp = self._request("POST", "/api/timeSlot/admin", token, json=slot.to_payload())
        return self._decode(resp, TimeSlotListDTO).to_entities()

    def toggle_time_slot(self, token: str | None, slot_id: str) -> bool:
        path = f"/api/timeSlot/admin/{quote(slot_id, safe='')}/toggle"
        result = self._admin_action(self._request("PATCH", path, token))
        if result.slot is None:
            raise MalformedResponseError("Toggle response has no slot")
        return result.slot.available

    def delete_time_slot(self, token: str | None, slot_id: str) -> None:
        path = f"/api/timeSlot/admin/{quote(slot_id, safe='')}"
        self._admin_action(self._request("DELETE", path, token))

    def _admin_action(self, resp: httpx.Response) -> AdminActionDTO:
        result = self._decode(resp, AdminActionDTO)
        if not result.success:
            raise ApiStatusError(resp.status_code, result.message or "Time slot update was not applied")
        return result

    def _request(
        self,
        method: str,
        path: str,
        token: str | None,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        require_auth: bool = True,
    ) -> httpx.Response:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        elif require_auth:
            raise AuthenticationRequiredError("Not authenticated. Please login.")

        url = f"{self._base_url}{path}"
        try:
            resp = self._client.request(method, url, params=params, json=json, headers=headers)
        except httpx.HTTPError as e:
            self._logger.error("Salon API request failed", extra={"path": path, "error": str(e)})
            raise ApiTransportError(f"{method} {path} failed: {e}") from e

        if resp.status_code >= 400:
            detail = _error_detail(resp)
            self._logger.error(
                "Salon API error response",
                extra={"path": path, "status": resp.status_code, "reason": detail},
            )
            raise ApiStatusError(resp.status_code, detail)
        return resp

    def _json(self, resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise MalformedResponseError(f"Response from {resp.request.url.path} is not JSON") from e

    def _decode(self, resp: httpx.Response, model: type[_M]) -> _M:
        data = self._json(resp)
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise MalformedResponseError(f"Invalid {model.__name__} payload: {e}") from e


def _error_detail(resp: httpx.Response) -> str | None:
    try:
        body = resp.json()
    except ValueError:
        return resp.text.strip() or None
    if isinstance(body, dict):
        for key in ("reason", "message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return None
