from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from datetime import date

from salon_booking.application.exceptions import (
    ApiStatusError,
    AuthenticationRequiredError,
    InvalidSelectionError,
    SalonApiError,
    SubmissionInProgressError,
    WizardTransitionError,
)
from salon_booking.application.ports.salon_api import SalonApiPort
from salon_booking.application.utils.calendar_days import (
    CalendarDay,
    calendar_days,
    parse_iso_date,
    weekday_name,
)
from salon_booking.domain.entities.availability import AvailabilityQuery
from salon_booking.domain.entities.booking import BookingAcknowledgement, BookingRequest
from salon_booking.domain.entities.booking_intent import BookingIntent, BookingType
from salon_booking.domain.entities.client_context import ClientContext
from salon_booking.domain.entities.stylist import Stylist
from salon_booking.domain.entities.time_slot import TimeSlot
from salon_booking.domain.entities.wizard_state import WizardState, WizardStep

NOT_AUTHENTICATED_MESSAGE = "Not authenticated. Please login."
STYLISTS_FAILED_MESSAGE = "Something went wrong while fetching stylists."
NO_SLOTS_MESSAGE = "No slots available for this day"
INCOMPLETE_DATE_TIME_MESSAGE = "Please select a date and time before continuing."
INCOMPLETE_SELECTION_MESSAGE = "Please select date, time and stylist before continuing."
SLOT_UNAVAILABLE_MESSAGE = "Selected slot is unavailable. Please choose another."
BOOKING_FAILED_MESSAGE = "Error processing booking. Try again."

EXIT_PAGES = ("home", "profile")


@dataclass(frozen=True)
class BookingConfirmation:
    service_name: str
    date: str
    day: str
    time: str
    end_time: str | None
    stylist_name: str | None
    total_price: float
    booking_id: str | None


@dataclass(frozen=True)
class WizardSnapshot:
    state: WizardState
    intent: BookingIntent
    calendar: list[CalendarDay]
    stylists: list[Stylist]
    stylists_loading: bool
    stylist_error: str | None
    time_slots: list[TimeSlot]
    slots_loading: bool
    slots_notice: str | None
    error_message: str | None
    checking: bool
    creating: bool
    can_proceed: bool
    confirmation: BookingConfirmation | None
    exit_pages: tuple[str, ...]


def build_booking_request(intent: BookingIntent, state: WizardState) -> BookingRequest:
    """Map the booking intent and the wizard selections onto the create-booking payload."""
    if not (state.selected_date and state.selected_time and state.selected_stylist_id):
        raise WizardTransitionError(INCOMPLETE_SELECTION_MESSAGE)

    service_ids: list[str] = []
    if intent.booking_type is BookingType.service and intent.service_id:
        service_ids = [intent.service_id]
    package_id = intent.package_id if intent.booking_type is BookingType.package else None
    total_price = 0 if intent.booking_type is BookingType.appointment else intent.price

    return BookingRequest(
        booking_type=intent.booking_type,
        service_ids=service_ids,
        package_id=package_id,
        date=state.selected_date,
        time_slot=state.selected_time,
        stylist_ids=[state.selected_stylist_id],
        customer_info=state.customer_info,
        total_price=total_price,
    )


def can_proceed(state: WizardState) -> bool:
    if state.step is WizardStep.DATE_TIME:
        return bool(state.selected_date and state.selected_time)
    if state.step is WizardStep.STYLIST_DETAILS:
        return bool(state.selected_stylist_id) and state.customer_info.is_complete()
    return True


class BookingWizard:
    """Three-step booking flow: date & time, stylist & details, confirmation.

    Network calls run outside the state lock. Time slot fetches are tagged
    with a sequence number and only the latest one is applied. A submission
    holds the checking/creating flags for its whole duration and rejects
    overlapping submissions and edits.
    """

    def __init__(
        self,
        api: SalonApiPort,
        context: ClientContext,
        today: date | None = None,
        calendar_window_days: int = 14,
    ) -> None:
        self._api = api
        self._context = context
        self._calendar = calendar_days(today, calendar_window_days)
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

        self._state = WizardState()
        self._stylists: list[Stylist] = []
        self._stylists_loading = False
        self._stylist_error: str | None = None
        self._time_slots: list[TimeSlot] = []
        self._slots_loading = False
        self._slot_request_seq = 0
        self._error_message: str | None = None
        self._checking = False
        self._creating = False
        self._submitted: BookingRequest | None = None
        self._booking: BookingAcknowledgement | None = None

    @property
    def context(self) -> ClientContext:
        return self._context

    @property
    def state(self) -> WizardState:
        return self._state

    def mount(self) -> WizardSnapshot:
        self.load_stylists()
        return self.snapshot()

    def load_stylists(self) -> None:
        with self._lock:
            self._stylists_loading = True
            self._stylist_error = None

        stylists: list[Stylist] = []
        error: str | None = None
        if not self._context.token:
            error = NOT_AUTHENTICATED_MESSAGE
        else:
            try:
                stylists = self._api.list_stylists(self._context.token)
            except AuthenticationRequiredError:
                error = NOT_AUTHENTICATED_MESSAGE
            except SalonApiError as e:
                self._logger.warning(
                    "Fetching stylists failed",
                    extra={"client_id": self._context.client_id, "error": str(e)},
                )
                error = STYLISTS_FAILED_MESSAGE

        with self._lock:
            self._stylists = list(stylists)
            self._stylist_error = error
            self._stylists_loading = False

    # Step 1

    def select_date(self, value: str | date) -> WizardSnapshot:
        try:
            chosen = parse_iso_date(value)
        except ValueError as e:
            raise InvalidSelectionError(str(e)) from e
        day = weekday_name(chosen)

        with self._lock:
            self._require_step(WizardStep.DATE_TIME, "choose a date")
            self._state = replace(
                self._state,
                selected_date=chosen.isoformat(),
                selected_day=day,
                selected_time=None,
            )
            self._time_slots = []
            self._slots_loading = True
            self._error_message = None

        self.refresh_time_slots(day)
        return self.snapshot()

    def refresh_time_slots(self, day: str) -> bool:
        """Fetch the slots for a weekday. Returns False if a newer fetch superseded this one."""
        with self._lock:
            self._slot_request_seq += 1
            seq = self._slot_request_seq
            self._slots_loading = True

        slots: list[TimeSlot] = []
        if self._context.token:
            try:
                slots = self._api.list_time_slots(self._context.token, day)
            except SalonApiError as e:
                self._logger.error(
                    "Error fetching time slots",
                    extra={"client_id": self._context.client_id, "day": day, "error": str(e)},
                )
        else:
            self._logger.info("No token, skipping time slot fetch", extra={"client_id": self._context.client_id})

        with self._lock:
            if seq != self._slot_request_seq:
                self._logger.info("Discarding stale time slots", extra={"day": day})
                return False
            self._time_slots = list(slots)
            self._slots_loading = False
            selected = self._state.selected_time
            if selected and not any(s.start_time == selected for s in self._time_slots):
                self._state = replace(self._state, selected_time=None)
            return True

    def select_time(self, start_time: str) -> WizardSnapshot:
        with self._lock:
            self._require_step(WizardStep.DATE_TIME, "choose a time")
            if not self._state.selected_date:
                raise InvalidSelectionError("Choose a date before choosing a time")
            if self._slots_loading:
                raise InvalidSelectionError(f"Time slots for {self._state.selected_day} are still loading")
            slot = next((s for s in self._time_slots if s.start_time == start_time), None)
            if slot is None:
                raise InvalidSelectionError(f"{start_time} is not offered on {self._state.selected_day}")
            if not slot.available:
                raise InvalidSelectionError(f"{start_time} is not available on {self._state.selected_day}")
            self._state = replace(self._state, selected_time=slot.start_time)
        return self.snapshot()

    def next(self) -> WizardSnapshot:
        with self._lock:
            self._require_step(WizardStep.DATE_TIME, "continue to stylist selection")
            if not can_proceed(self._state):
                raise WizardTransitionError(INCOMPLETE_DATE_TIME_MESSAGE)
            self._state = replace(self._state, step=WizardStep.STYLIST_DETAILS)
            self._error_message = None
        return self.snapshot()

    def previous(self) -> str:
        """Go back one step. Returns the page to show: "booking", or "services" when leaving from step 1."""
        with self._lock:
            if self._state.step is WizardStep.CONFIRMATION:
                raise WizardTransitionError("The booking is already confirmed")
            if self._state.step is WizardStep.DATE_TIME:
                return "services"
            self._require_idle()
            self._state = replace(self._state, step=WizardStep.DATE_TIME)
            self._error_message = None
            return "booking"

    # Step 2

    def select_stylist(self, stylist_id: str) -> WizardSnapshot:
        with self._lock:
            self._require_step(WizardStep.STYLIST_DETAILS, "choose a stylist")
            self._require_idle()
            if not any(s.id == stylist_id for s in self._stylists):
                raise InvalidSelectionError(f"Unknown stylist: {stylist_id}")
            self._state = replace(self._state, selected_stylist_id=stylist_id)
        return self.snapshot()

    def update_customer_info(self, **fields: str | None) -> WizardSnapshot:
        with self._lock:
            self._require_step(WizardStep.STYLIST_DETAILS, "edit customer details")
            self._require_idle()
            try:
                info = self._state.customer_info.merged(**fields)
            except ValueError as e:
                raise InvalidSelectionError(str(e)) from e
            self._state = replace(self._state, customer_info=info)
        return self.snapshot()

    def submit(self) -> WizardSnapshot:
        """Check availability for the current selection, then create the booking."""
        with self._lock:
            self._require_step(WizardStep.STYLIST_DETAILS, "submit the booking")
            self._require_idle()
            if not can_proceed(self._state):
                raise WizardTransitionError(INCOMPLETE_SELECTION_MESSAGE)
            request = build_booking_request(self._context.intent, self._state)
            query = AvailabilityQuery(
                date=request.date,
                time_slot=request.time_slot,
                stylist_id=request.stylist_ids[0],
            )
            self._checking = True
            self._error_message = None

        token = self._context.token
        booking: BookingAcknowledgement | None = None
        error: str | None = None
        stage = "check"
        try:
            if not token:
                raise AuthenticationRequiredError(NOT_AUTHENTICATED_MESSAGE)
            result = self._api.check_availability(token, query)
            if not result.available:
                error = result.reason or SLOT_UNAVAILABLE_MESSAGE
                self._logger.info(
                    "Slot unavailable",
                    extra={"client_id": self._context.client_id, "reason": error},
                )
            else:
                stage = "create"
                with self._lock:
                    self._creating = True
                booking = self._api.create_booking(token, request)
        except AuthenticationRequiredError:
            error = NOT_AUTHENTICATED_MESSAGE
        except ApiStatusError as e:
            fallback = SLOT_UNAVAILABLE_MESSAGE if stage == "check" else BOOKING_FAILED_MESSAGE
            error = e.detail or fallback
            self._logger.warning(
                "Booking rejected by backend",
                extra={"client_id": self._context.client_id, "status": e.status_code, "reason": error},
            )
        except SalonApiError as e:
            error = BOOKING_FAILED_MESSAGE
            self._logger.error(
                "Error processing booking",
                extra={"client_id": self._context.client_id, "error": str(e)},
            )
        finally:
            with self._lock:
                self._checking = False
                self._creating = False
                self._error_message = error
                if booking is not None:
                    self._booking = booking
                    self._submitted = request
                    self._state = replace(self._state, step=WizardStep.CONFIRMATION)

        if booking is not None:
            self._logger.info(
                "Booking created",
                extra={"client_id": self._context.client_id, "booking_id": booking.booking_id},
            )
        return self.snapshot()

    def advance(self) -> WizardSnapshot:
        step = self._state.step
        if step is WizardStep.DATE_TIME:
            return self.next()
        if step is WizardStep.STYLIST_DETAILS:
            return self.submit()
        raise WizardTransitionError("The booking is already confirmed")

    def can_proceed(self) -> bool:
        with self._lock:
            return can_proceed(self._state)

    def snapshot(self) -> WizardSnapshot:
        with self._lock:
            state = self._state
            notice = None
            if state.selected_date and not self._slots_loading and not self._time_slots:
                notice = NO_SLOTS_MESSAGE
            return WizardSnapshot(
                state=state,
                intent=self._context.intent,
                calendar=list(self._calendar),
                stylists=list(self._stylists),
                stylists_loading=self._stylists_loading,
                stylist_error=self._stylist_error,
                time_slots=list(self._time_slots),
                slots_loading=self._slots_loading,
                slots_notice=notice,
                error_message=self._error_message,
                checking=self._checking,
                creating=self._creating,
                can_proceed=can_proceed(state),
                confirmation=self._build_confirmation(),
                exit_pages=EXIT_PAGES if state.step is WizardStep.CONFIRMATION else (),
            )

    def _build_confirmation(self) -> BookingConfirmation | None:
        if self._state.step is not WizardStep.CONFIRMATION or self._submitted is None:
            return None
        request = self._submitted
        stylist = next((s for s in self._stylists if s.id == request.stylist_ids[0]), None)
        slot = next((s for s in self._time_slots if s.start_time == request.time_slot), None)
        return BookingConfirmation(
            service_name=self._context.intent.name,
            date=request.date,
            day=self._state.selected_day or "",
            time=request.time_slot,
            end_time=slot.end_time if slot else None,
            stylist_name=stylist.name if stylist else None,
            total_price=request.total_price,
            booking_id=self._booking.booking_id if self._booking else None,
        )

    def _require_step(self, step: WizardStep, action: str) -> None:
        if self._state.step is not step:
            raise WizardTransitionError(f"Cannot {action} on step {int(self._state.step)}")

    def _require_idle(self) -> None:
        if self._checking or self._creating:
            raise SubmissionInProgressError("A booking submission is already in progress")
