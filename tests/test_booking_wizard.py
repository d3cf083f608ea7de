"""
Tests for the booking wizard state machine.
"""

from __future__ import annotations

from datetime import date

import pytest

from salon_booking.application.exceptions import (
    ApiStatusError,
    ApiTransportError,
    InvalidSelectionError,
    SubmissionInProgressError,
    WizardTransitionError,
)
from salon_booking.application.ports.salon_api import SalonApiPort
from salon_booking.application.use_cases.booking_wizard import (
    BOOKING_FAILED_MESSAGE,
    NO_SLOTS_MESSAGE,
    NOT_AUTHENTICATED_MESSAGE,
    SLOT_UNAVAILABLE_MESSAGE,
    BookingWizard,
)
from salon_booking.domain.entities.auth_session import AuthSession
from salon_booking.domain.entities.availability import AvailabilityResult
from salon_booking.domain.entities.booking import BookingAcknowledgement
from salon_booking.domain.entities.booking_intent import BookingIntent, BookingType
from salon_booking.domain.entities.client_context import ClientContext
from salon_booking.domain.entities.stylist import Stylist
from salon_booking.domain.entities.time_slot import TimeSlot
from salon_booking.domain.entities.wizard_state import WizardStep

MONDAY = "2024-06-10"
TUESDAY = "2024-06-11"


def slot(day: str, start: str, end: str, available: bool = True) -> TimeSlot:
    return TimeSlot(id=f"{day}-{start}", day_of_week=day, start_time=start, end_time=end, duration=30, available=available)


class FakeSalonApi(SalonApiPort):
    def __init__(self) -> None:
        self.stylists = [Stylist(id="s1", name="Ava Martin"), Stylist(id="s2", name="Noah Chen")]
        self.slots_by_day = {
            "Monday": [slot("Monday", "10:00", "10:30")],
            "Tuesday": [slot("Tuesday", "14:00", "14:30")],
        }
        self.availability = AvailabilityResult(available=True)
        self.check_error: Exception | None = None
        self.create_error: Exception | None = None
        self.stylists_error: Exception | None = None
        self.on_slots = None
        self.on_check = None
        self.on_create = None
        self.calls: list[tuple] = []

    def list_stylists(self, token):
        self.calls.append(("list_stylists", token))
        if self.stylists_error:
            raise self.stylists_error
        return list(self.stylists)

    def list_time_slots(self, token, day):
        self.calls.append(("list_time_slots", day))
        if self.on_slots:
            self.on_slots(day)
        return list(self.slots_by_day.get(day, []))

    def check_availability(self, token, query):
        self.calls.append(("check_availability", query))
        if self.on_check:
            self.on_check()
        if self.check_error:
            raise self.check_error
        return self.availability

    def create_booking(self, token, request):
        self.calls.append(("create_booking", request))
        if self.on_create:
            self.on_create()
        if self.create_error:
            raise self.create_error
        return BookingAcknowledgement(booking_id="b1", status="confirmed", raw={"_id": "b1"})

    def login(self, email, password):
        return AuthSession(token="t")

    def signup(self, first_name, last_name, email, phone, password, confirm_password):
        return AuthSession(token="t")

    def list_services(self, token, category=None):
        return []

    def submit_review(self, token, review):
        raise NotImplementedError

    def list_all_time_slots(self, token):
        return [s for slots in self.slots_by_day.values() for s in slots]

    def create_time_slot(self, token, slot):
        raise NotImplementedError

    def toggle_time_slot(self, token, slot_id):
        raise NotImplementedError

    def delete_time_slot(self, token, slot_id):
        raise NotImplementedError

    def count(self, name: str) -> int:
        return sum(1 for c in self.calls if c[0] == name)

    def last(self, name: str):
        return [c for c in self.calls if c[0] == name][-1][1]


def make_wizard(api: FakeSalonApi, intent: BookingIntent | None = None, token: str | None = "token-1") -> BookingWizard:
    intent = intent or BookingIntent(booking_type=BookingType.service, service_id="svc-1", name="Haircut", price=45)
    wizard = BookingWizard(api=api, context=ClientContext(client_id="c1", intent=intent, token=token), today=date(2024, 6, 10))
    wizard.mount()
    return wizard


def fill_step_two(wizard: BookingWizard, stylist_id: str = "s1") -> None:
    wizard.select_stylist(stylist_id)
    wizard.update_customer_info(first_name="Jane", last_name="Doe", email="jane@example.com", phone="555-0100")


def reach_step_two(wizard: BookingWizard) -> None:
    wizard.select_date(MONDAY)
    wizard.select_time("10:00")
    wizard.next()


def test_step_one_requires_date_and_time():
    wizard = make_wizard(FakeSalonApi())
    assert wizard.can_proceed() is False

    wizard.select_date(MONDAY)
    assert wizard.can_proceed() is False
    with pytest.raises(WizardTransitionError):
        wizard.next()

    wizard.select_time("10:00")
    assert wizard.can_proceed() is True
    assert wizard.next().state.step is WizardStep.STYLIST_DETAILS


def test_step_two_requires_stylist_and_all_customer_fields():
    wizard = make_wizard(FakeSalonApi())
    reach_step_two(wizard)
    assert wizard.can_proceed() is False

    wizard.select_stylist("s1")
    wizard.update_customer_info(first_name="Jane", last_name="Doe", email="jane@example.com")
    assert wizard.can_proceed() is False

    wizard.update_customer_info(phone="   ")
    assert wizard.can_proceed() is False

    wizard.update_customer_info(phone="555-0100")
    assert wizard.can_proceed() is True


def test_unavailable_slot_keeps_step_two_and_shows_reason():
    api = FakeSalonApi()
    api.availability = AvailabilityResult(available=False, reason="X")
    wizard = make_wizard(api)
    reach_step_two(wizard)
    fill_step_two(wizard)

    snapshot = wizard.submit()

    assert snapshot.state.step is WizardStep.STYLIST_DETAILS
    assert snapshot.error_message == "X"
    assert api.count("create_booking") == 0
    assert snapshot.checking is False and snapshot.creating is False


def test_unavailable_slot_without_reason_uses_fallback():
    api = FakeSalonApi()
    api.availability = AvailabilityResult(available=False)
    wizard = make_wizard(api)
    reach_step_two(wizard)
    fill_step_two(wizard)

    snapshot = wizard.submit()

    assert snapshot.error_message == SLOT_UNAVAILABLE_MESSAGE
    assert api.count("create_booking") == 0


def test_available_slot_creates_booking_once_and_confirms():
    api = FakeSalonApi()
    wizard = make_wizard(api)
    reach_step_two(wizard)
    fill_step_two(wizard)

    snapshot = wizard.submit()

    assert snapshot.state.step is WizardStep.CONFIRMATION
    assert api.count("create_booking") == 1
    assert snapshot.checking is False
    assert snapshot.creating is False
    assert snapshot.error_message is None
    assert snapshot.confirmation.booking_id == "b1"
    assert snapshot.exit_pages == ("home", "profile")
    with pytest.raises(WizardTransitionError):
        wizard.advance()


def test_appointment_is_submitted_free():
    api = FakeSalonApi()
    intent = BookingIntent(booking_type=BookingType.appointment, name="General Appointment", price=99)
    wizard = make_wizard(api, intent=intent)
    reach_step_two(wizard)
    fill_step_two(wizard)

    wizard.submit()

    payload = api.last("create_booking").to_payload()
    assert payload["totalPrice"] == 0
    assert payload["serviceIds"] == []
    assert payload["packageId"] is None


def test_service_and_package_payload_targets():
    api = FakeSalonApi()
    wizard = make_wizard(api)
    reach_step_two(wizard)
    fill_step_two(wizard)
    wizard.submit()
    payload = api.last("create_booking").to_payload()
    assert payload["serviceIds"] == ["svc-1"]
    assert payload["packageId"] is None
    assert payload["totalPrice"] == 45

    api = FakeSalonApi()
    package = BookingIntent(booking_type=BookingType.package, package_id="pkg-9", name="Bridal", price=300)
    wizard = make_wizard(api, intent=package)
    reach_step_two(wizard)
    fill_step_two(wizard)
    wizard.submit()
    payload = api.last("create_booking").to_payload()
    assert payload["packageId"] == "pkg-9"
    assert payload["serviceIds"] == []
    assert payload["totalPrice"] == 300


def test_changing_date_clears_selected_time():
    wizard = make_wizard(FakeSalonApi())
    wizard.select_date(MONDAY)
    wizard.select_time("10:00")

    snapshot = wizard.select_date(TUESDAY)

    assert snapshot.state.selected_day == "Tuesday"
    assert snapshot.state.selected_time is None
    assert [s.start_time for s in snapshot.time_slots] == ["14:00"]
    assert snapshot.can_proceed is False
    with pytest.raises(InvalidSelectionError):
        wizard.select_time("10:00")


def test_stale_slot_fetch_is_discarded():
    api = FakeSalonApi()
    wizard = make_wizard(api)

    def switch_day_mid_fetch(day):
        if day == "Monday":
            api.on_slots = None
            wizard.select_date(TUESDAY)

    api.on_slots = switch_day_mid_fetch
    snapshot = wizard.select_date(MONDAY)

    assert snapshot.state.selected_day == "Tuesday"
    assert [s.day_of_week for s in snapshot.time_slots] == ["Tuesday"]
    assert snapshot.slots_loading is False


def test_time_cannot_be_chosen_while_new_day_is_loading():
    api = FakeSalonApi()
    wizard = make_wizard(api)
    wizard.select_date(MONDAY)
    wizard.select_time("10:00")
    rejected = []

    def choose_old_time_mid_fetch(day):
        if day == "Tuesday":
            with pytest.raises(InvalidSelectionError):
                wizard.select_time("10:00")
            rejected.append(day)

    api.on_slots = choose_old_time_mid_fetch
    snapshot = wizard.select_date(TUESDAY)

    assert rejected == ["Tuesday"]
    assert snapshot.state.selected_time is None
    assert snapshot.can_proceed is False


def test_refresh_drops_time_no_longer_offered():
    api = FakeSalonApi()
    wizard = make_wizard(api)
    wizard.select_date(MONDAY)
    wizard.select_time("10:00")

    api.slots_by_day["Monday"] = [slot("Monday", "11:00", "11:30")]
    assert wizard.refresh_time_slots("Monday") is True

    assert wizard.state.selected_time is None
    assert wizard.snapshot().can_proceed is False


def test_empty_slot_list_shows_notice():
    api = FakeSalonApi()
    wizard = make_wizard(api)

    snapshot = wizard.select_date("2024-06-16")  # Sunday

    assert snapshot.time_slots == []
    assert snapshot.slots_notice == NO_SLOTS_MESSAGE
    assert snapshot.error_message is None


def test_unavailable_slot_cannot_be_selected():
    api = FakeSalonApi()
    api.slots_by_day["Monday"] = [slot("Monday", "10:00", "10:30", available=False)]
    wizard = make_wizard(api)
    wizard.select_date(MONDAY)

    with pytest.raises(InvalidSelectionError):
        wizard.select_time("10:00")


def test_end_to_end_monday_booking():
    api = FakeSalonApi()
    wizard = make_wizard(api)

    wizard.select_date("2024-06-10")
    assert wizard.state.selected_day == "Monday"
    wizard.select_time("10:00")
    wizard.advance()
    fill_step_two(wizard, "s1")
    snapshot = wizard.advance()

    query = api.last("check_availability")
    assert query.to_payload() == {"date": "2024-06-10", "timeSlot": "10:00", "stylistId": "s1"}
    assert api.count("create_booking") == 1
    assert snapshot.state.step is WizardStep.CONFIRMATION
    assert snapshot.confirmation.date == "2024-06-10"
    assert snapshot.confirmation.time == "10:00"
    assert snapshot.confirmation.end_time == "10:30"
    assert snapshot.confirmation.stylist_name == "Ava Martin"


def test_missing_token_blocks_stylist_fetch_without_request():
    api = FakeSalonApi()
    wizard = make_wizard(api, token=None)

    snapshot = wizard.snapshot()

    assert snapshot.stylist_error == NOT_AUTHENTICATED_MESSAGE
    assert snapshot.stylists == []
    assert api.count("list_stylists") == 0


def test_missing_token_skips_slot_fetch():
    api = FakeSalonApi()
    wizard = make_wizard(api, token=None)

    snapshot = wizard.select_date(MONDAY)

    assert api.count("list_time_slots") == 0
    assert snapshot.time_slots == []
    assert snapshot.slots_notice == NO_SLOTS_MESSAGE


def test_stylist_fetch_failure_leaves_list_empty():
    api = FakeSalonApi()
    api.stylists_error = ApiTransportError("connection refused")
    wizard = make_wizard(api)
    reach_step_two(wizard)

    assert wizard.snapshot().stylists == []
    assert wizard.snapshot().stylist_error is not None
    with pytest.raises(InvalidSelectionError):
        wizard.select_stylist("s1")


def test_check_status_error_shows_server_detail():
    api = FakeSalonApi()
    api.check_error = ApiStatusError(400, "Date is in the past")
    wizard = make_wizard(api)
    reach_step_two(wizard)
    fill_step_two(wizard)

    snapshot = wizard.submit()

    assert snapshot.state.step is WizardStep.STYLIST_DETAILS
    assert snapshot.error_message == "Date is in the past"
    assert api.count("create_booking") == 0


def test_transport_error_shows_generic_message():
    api = FakeSalonApi()
    api.check_error = ApiTransportError("timeout")
    wizard = make_wizard(api)
    reach_step_two(wizard)
    fill_step_two(wizard)

    snapshot = wizard.submit()

    assert snapshot.error_message == BOOKING_FAILED_MESSAGE
    assert snapshot.state.step is WizardStep.STYLIST_DETAILS


def test_failed_creation_stays_on_step_two_and_allows_retry():
    api = FakeSalonApi()
    api.create_error = ApiStatusError(409, "Slot already booked")
    wizard = make_wizard(api)
    reach_step_two(wizard)
    fill_step_two(wizard)

    snapshot = wizard.submit()
    assert snapshot.state.step is WizardStep.STYLIST_DETAILS
    assert snapshot.error_message == "Slot already booked"
    assert snapshot.state.selected_stylist_id == "s1"

    api.create_error = None
    wizard.select_stylist("s2")
    assert wizard.submit().state.step is WizardStep.CONFIRMATION


def test_creation_error_without_detail_uses_generic_message():
    api = FakeSalonApi()
    api.create_error = ApiStatusError(500)
    wizard = make_wizard(api)
    reach_step_two(wizard)
    fill_step_two(wizard)

    snapshot = wizard.submit()

    assert snapshot.state.step is WizardStep.STYLIST_DETAILS
    assert snapshot.error_message == BOOKING_FAILED_MESSAGE
    assert snapshot.creating is False


def test_submission_in_progress_rejects_duplicates():
    api = FakeSalonApi()
    wizard = make_wizard(api)
    reach_step_two(wizard)
    fill_step_two(wizard)
    seen = {}

    def during_check():
        seen["checking"] = wizard.snapshot().checking
        with pytest.raises(SubmissionInProgressError):
            wizard.submit()
        with pytest.raises(SubmissionInProgressError):
            wizard.select_stylist("s2")

    def during_create():
        seen["creating"] = wizard.snapshot().creating

    api.on_check = during_check
    api.on_create = during_create
    snapshot = wizard.submit()

    assert seen == {"checking": True, "creating": True}
    assert api.count("check_availability") == 1
    assert api.count("create_booking") == 1
    assert snapshot.checking is False and snapshot.creating is False


def test_previous_keeps_selections():
    wizard = make_wizard(FakeSalonApi())
    assert wizard.previous() == "services"

    reach_step_two(wizard)
    fill_step_two(wizard)
    assert wizard.previous() == "booking"

    state = wizard.state
    assert state.step is WizardStep.DATE_TIME
    assert state.selected_time == "10:00"
    assert state.selected_stylist_id == "s1"
    assert state.customer_info.first_name == "Jane"

    wizard.next()
    assert wizard.can_proceed() is True


def test_selections_are_bound_to_their_step():
    wizard = make_wizard(FakeSalonApi())
    with pytest.raises(WizardTransitionError):
        wizard.select_stylist("s1")
    with pytest.raises(WizardTransitionError):
        wizard.submit()
    with pytest.raises(InvalidSelectionError):
        wizard.select_date("next monday")

    reach_step_two(wizard)
    with pytest.raises(WizardTransitionError):
        wizard.select_date(TUESDAY)
    with pytest.raises(InvalidSelectionError):
        wizard.update_customer_info(nickname="JD")


def test_calendar_window_starts_today():
    wizard = make_wizard(FakeSalonApi())
    calendar = wizard.snapshot().calendar

    assert len(calendar) == 14
    assert calendar[0].date_iso == "2024-06-10"
    assert calendar[0].is_today is True
    assert calendar[0].weekday == "Mon"
    assert calendar[-1].date_iso == "2024-06-23"
