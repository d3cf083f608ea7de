"""
Tests for the httpx salon API adapter, using httpx.MockTransport as the backend.
"""

from __future__ import annotations

import json

import httpx
import pytest

from salon_booking.application.exceptions import (
    ApiStatusError,
    ApiTransportError,
    AuthenticationRequiredError,
    MalformedResponseError,
)
from salon_booking.domain.entities.availability import AvailabilityQuery
from salon_booking.domain.entities.booking import BookingRequest
from salon_booking.domain.entities.booking_intent import BookingType
from salon_booking.domain.entities.customer_info import CustomerInfo
from salon_booking.domain.entities.review import ReviewRequest
from salon_booking.domain.entities.time_slot import NewTimeSlot
from salon_booking.infrastructure.salon_api.http_client import HttpSalonApi


def make_api(handler) -> tuple[HttpSalonApi, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def recording(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    client = httpx.Client(transport=httpx.MockTransport(recording))
    return HttpSalonApi(base_url="http://salon.test/", client=client), seen


def test_list_stylists_sends_bearer_and_decodes_mongo_ids():
    api, seen = make_api(
        lambda request: httpx.Response(
            200,
            json=[
                {"_id": "s1", "name": "Ava", "specialty": "Color", "rating": 4.9, "image": "a.png"},
                {"_id": "s2", "name": "Noah"},
            ],
        )
    )

    stylists = api.list_stylists("tok")

    assert [s.id for s in stylists] == ["s1", "s2"]
    assert stylists[0].rating == 4.9
    assert stylists[1].specialty is None
    assert seen[0].url.path == "/api/stylist"
    assert seen[0].headers["Authorization"] == "Bearer tok"


def test_missing_token_sends_no_request():
    api, seen = make_api(lambda request: httpx.Response(200, json=[]))

    with pytest.raises(AuthenticationRequiredError):
        api.list_stylists(None)
    with pytest.raises(AuthenticationRequiredError):
        api.check_availability("", AvailabilityQuery(date="2024-06-10", time_slot="10:00", stylist_id="s1"))

    assert seen == []


def test_list_time_slots_queries_weekday():
    api, seen = make_api(
        lambda request: httpx.Response(
            200,
            json={
                "slots": [
                    {
                        "_id": "m1",
                        "dayOfWeek": "Monday",
                        "startTime": "10:00",
                        "endTime": "10:30",
                        "duration": 30,
                        "available": True,
                    }
                ]
            },
        )
    )

    slots = api.list_time_slots("tok", "Monday")

    assert seen[0].url.path == "/api/timeSlot/getTime"
    assert seen[0].url.params["day"] == "Monday"
    assert len(slots) == 1
    assert slots[0].start_time == "10:00"
    assert slots[0].end_time == "10:30"


def test_list_time_slots_treats_null_as_empty():
    api, _ = make_api(lambda request: httpx.Response(200, json={"slots": None}))
    assert api.list_time_slots("tok", "Sunday") == []


def test_check_availability_payload_and_result():
    api, seen = make_api(lambda request: httpx.Response(200, json={"available": False, "reason": "Taken"}))

    result = api.check_availability("tok", AvailabilityQuery(date="2024-06-10", time_slot="10:00", stylist_id="s1"))

    assert result.available is False
    assert result.reason == "Taken"
    assert seen[0].method == "POST"
    assert seen[0].url.path == "/api/bookings/check"
    assert json.loads(seen[0].content) == {"date": "2024-06-10", "timeSlot": "10:00", "stylistId": "s1"}


def test_error_status_carries_reason():
    api, _ = make_api(lambda request: httpx.Response(400, json={"available": False, "reason": "Closed that day"}))

    with pytest.raises(ApiStatusError) as excinfo:
        api.check_availability("tok", AvailabilityQuery(date="2024-06-16", time_slot="10:00", stylist_id="s1"))

    assert excinfo.value.status_code == 400
    assert excinfo.value.detail == "Closed that day"


def test_server_error_with_plain_text_body():
    api, _ = make_api(lambda request: httpx.Response(500, text="Internal Server Error"))

    with pytest.raises(ApiStatusError) as excinfo:
        api.list_stylists("tok")

    assert excinfo.value.status_code == 500
    assert excinfo.value.detail == "Internal Server Error"


def test_malformed_responses():
    api, _ = make_api(lambda request: httpx.Response(200, json={"reason": "no flag"}))
    with pytest.raises(MalformedResponseError):
        api.check_availability("tok", AvailabilityQuery(date="2024-06-10", time_slot="10:00", stylist_id="s1"))

    api, _ = make_api(lambda request: httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(MalformedResponseError):
        api.list_stylists("tok")

    api, _ = make_api(lambda request: httpx.Response(200, json=[{"name": "No id"}]))
    with pytest.raises(MalformedResponseError):
        api.list_stylists("tok")


def test_transport_failure():
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    api, _ = make_api(refuse)

    with pytest.raises(ApiTransportError):
        api.list_time_slots("tok", "Monday")


def test_create_booking_sends_camel_case_payload():
    api, seen = make_api(lambda request: httpx.Response(201, json={"_id": "b42", "status": "pending"}))
    request = BookingRequest(
        booking_type=BookingType.service,
        service_ids=["svc-1"],
        package_id=None,
        date="2024-06-10",
        time_slot="10:00",
        stylist_ids=["s1"],
        customer_info=CustomerInfo(first_name="Jane", last_name="Doe", email="jane@example.com", phone="555"),
        total_price=45,
    )

    ack = api.create_booking("tok", request)

    assert ack.booking_id == "b42"
    assert ack.status == "pending"
    assert seen[0].url.path == "/api/bookings/create"
    assert json.loads(seen[0].content) == {
        "bookingType": "service",
        "serviceIds": ["svc-1"],
        "packageId": None,
        "date": "2024-06-10",
        "timeSlot": "10:00",
        "stylistIds": ["s1"],
        "customerInfo": {"firstName": "Jane", "lastName": "Doe", "email": "jane@example.com", "phone": "555"},
        "totalPrice": 45,
    }


def test_login_is_unauthenticated_and_returns_session():
    api, seen = make_api(lambda request: httpx.Response(200, json={"token": "jwt", "role": "admin"}))

    session = api.login("a@b.c", "pw")

    assert session.token == "jwt"
    assert session.role == "admin"
    assert "Authorization" not in seen[0].headers
    assert json.loads(seen[0].content) == {"email": "a@b.c", "password": "pw"}


def test_list_services_lowercases_category():
    api, seen = make_api(
        lambda request: httpx.Response(200, json=[{"_id": "x", "name": "Cut", "price": 45, "duration": 45}])
    )

    services = api.list_services(None, category="Hair")
    api.list_services(None, category="all")

    assert services[0].id == "x"
    assert seen[0].url.params["category"] == "hair"
    assert "category" not in seen[1].url.params


def test_base_url_is_required(monkeypatch):
    from salon_booking.core.config import settings

    monkeypatch.setattr(settings, "SALON_API_BASE_URL", None)
    with pytest.raises(ValueError):
        HttpSalonApi()


SLOT_JSON = {"_id": "m1", "dayOfWeek": "Monday", "startTime": "10:00", "endTime": "11:00", "duration": 60}


def test_submit_review_payload_and_error_message():
    api, seen = make_api(lambda request: httpx.Response(201, json={"review": {"_id": "r1"}}))

    ack = api.submit_review("tok", ReviewRequest(booking_id="b1", rating=5, comment="Great", recommend=True))

    assert ack.review_id == "r1"
    assert seen[0].method == "POST"
    assert seen[0].url.path == "/api/reviews"
    assert json.loads(seen[0].content) == {"bookingId": "b1", "rating": 5, "comment": "Great", "recommend": True}

    api, _ = make_api(lambda request: httpx.Response(409, json={"error": "Booking already reviewed"}))
    with pytest.raises(ApiStatusError) as excinfo:
        api.submit_review("tok", ReviewRequest(booking_id="b1", rating=4))
    assert excinfo.value.detail == "Booking already reviewed"


def test_admin_slot_list_accepts_both_shapes():
    api, seen = make_api(lambda request: httpx.Response(200, json=[SLOT_JSON]))
    assert [s.id for s in api.list_all_time_slots("tok")] == ["m1"]
    assert seen[0].url.path == "/api/timeSlot/admin"

    api, _ = make_api(lambda request: httpx.Response(200, json={"slots": [SLOT_JSON]}))
    assert [s.day_of_week for s in api.list_all_time_slots("tok")] == ["Monday"]


def test_create_time_slot_accepts_single_slot_answer():
    api, seen = make_api(lambda request: httpx.Response(201, json={"slot": SLOT_JSON}))

    created = api.create_time_slot(
        "tok", NewTimeSlot(day_of_week="Monday", start_time="10:00", end_time="11:00", duration=60)
    )

    assert [s.start_time for s in created] == ["10:00"]
    assert json.loads(seen[0].content) == {
        "dayOfWeek": "Monday",
        "startTime": "10:00",
        "endTime": "11:00",
        "duration": 60,
    }


def test_toggle_and_delete_time_slot():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "PATCH":
            return httpx.Response(200, json={"success": True, "slot": {"available": False}})
        return httpx.Response(200, json={"success": False, "message": "Slot has bookings"})

    api, seen = make_api(handler)

    assert api.toggle_time_slot("tok", "m1") is False
    with pytest.raises(ApiStatusError) as excinfo:
        api.delete_time_slot("tok", "m1")

    assert excinfo.value.detail == "Slot has bookings"
    assert seen[0].url.path == "/api/timeSlot/admin/m1/toggle"
    assert seen[1].method == "DELETE"
    assert seen[1].url.path == "/api/timeSlot/admin/m1"


def test_admin_calls_need_a_token():
    api, seen = make_api(lambda request: httpx.Response(200, json=[]))

    with pytest.raises(AuthenticationRequiredError):
        api.list_all_time_slots(None)

    assert seen == []
