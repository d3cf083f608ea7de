import logging
from typing import Any, Callable, TypeVar

from fastapi import APIRouter, Depends, HTTPException

from salon_booking.api.v1.schemas import (
    CalendarDaySchema,
    ConfirmationSchema,
    CustomerInfoRequestSchema,
    CustomerInfoSchema,
    DateRequestSchema,
    IntentSchema,
    PreviousResponseSchema,
    StylistRequestSchema,
    StylistSchema,
    TimeRequestSchema,
    TimeSlotSchema,
    WizardResponseSchema,
)
from salon_booking.application.exceptions import (
    BookingIntentMissingError,
    InvalidSelectionError,
    MalformedBookingIntentError,
    SubmissionInProgressError,
    WizardTransitionError,
)
from salon_booking.application.use_cases.booking_wizard import WizardSnapshot
from salon_booking.application.use_cases.wizard_sessions import WizardNotMountedError, WizardSessions
from salon_booking.wiring.dependencies import get_wizard_sessions

router = APIRouter()
logger = logging.getLogger(__name__)

T = TypeVar("T")


def _run(action: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    try:
        return action(*args, **kwargs)
    except WizardNotMountedError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BookingIntentMissingError as e:
        raise HTTPException(status_code=409, detail={"message": str(e), "redirect": "home"})
    except MalformedBookingIntentError as e:
        raise HTTPException(status_code=400, detail={"message": str(e), "redirect": "home"})
    except InvalidSelectionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (WizardTransitionError, SubmissionInProgressError) as e:
        raise HTTPException(status_code=409, detail=str(e))


def to_response(snapshot: WizardSnapshot) -> WizardResponseSchema:
    state = snapshot.state
    info = state.customer_info
    intent = snapshot.intent
    confirmation = snapshot.confirmation
    return WizardResponseSchema(
        step=int(state.step),
        selected_date=state.selected_date,
        selected_day=state.selected_day,
        selected_time=state.selected_time,
        selected_stylist_id=state.selected_stylist_id,
        customer_info=CustomerInfoSchema(
            first_name=info.first_name,
            last_name=info.last_name,
            email=info.email,
            phone=info.phone,
        ),
        intent=IntentSchema(
            booking_type=intent.booking_type,
            service_id=intent.service_id,
            package_id=intent.package_id,
            name=intent.name,
            price=intent.price,
            duration=intent.duration,
        ),
        calendar=[
            CalendarDaySchema(date=d.date_iso, day=d.day, weekday=d.weekday, is_today=d.is_today)
            for d in snapshot.calendar
        ],
        stylists=[
            StylistSchema(id=s.id, name=s.name, specialty=s.specialty, rating=s.rating)
            for s in snapshot.stylists
        ],
        stylists_loading=snapshot.stylists_loading,
        stylist_error=snapshot.stylist_error,
        time_slots=[
            TimeSlotSchema(
                id=s.id,
                day_of_week=s.day_of_week,
                start_time=s.start_time,
                end_time=s.end_time,
                duration=s.duration,
                available=s.available,
            )
            for s in snapshot.time_slots
        ],
        slots_loading=snapshot.slots_loading,
        slots_notice=snapshot.slots_notice,
        error_message=snapshot.error_message,
        checking=snapshot.checking,
        creating=snapshot.creating,
        can_proceed=snapshot.can_proceed,
        confirmation=(
            ConfirmationSchema(
                service_name=confirmation.service_name,
                date=confirmation.date,
                day=confirmation.day,
                time=confirmation.time,
                end_time=confirmation.end_time,
                stylist_name=confirmation.stylist_name,
                total_price=confirmation.total_price,
                booking_id=confirmation.booking_id,
            )
            if confirmation else None
        ),
        exit_pages=list(snapshot.exit_pages),
    )


@router.post("/{client_id}", response_model=WizardResponseSchema)
def mount_wizard(client_id: str, sessions: WizardSessions = Depends(get_wizard_sessions)):
    wizard = _run(sessions.mount, client_id)
    return to_response(wizard.snapshot())


@router.get("/{client_id}", response_model=WizardResponseSchema)
def get_wizard(client_id: str, sessions: WizardSessions = Depends(get_wizard_sessions)):
    wizard = _run(sessions.get, client_id)
    return to_response(wizard.snapshot())


@router.delete("/{client_id}")
def unmount_wizard(client_id: str, sessions: WizardSessions = Depends(get_wizard_sessions)) -> dict[str, bool]:
    return {"unmounted": sessions.unmount(client_id)}


@router.post("/{client_id}/date", response_model=WizardResponseSchema)
def select_date(client_id: str, req: DateRequestSchema, sessions: WizardSessions = Depends(get_wizard_sessions)):
    wizard = _run(sessions.get, client_id)
    return to_response(_run(wizard.select_date, req.date))


@router.post("/{client_id}/time", response_model=WizardResponseSchema)
def select_time(client_id: str, req: TimeRequestSchema, sessions: WizardSessions = Depends(get_wizard_sessions)):
    wizard = _run(sessions.get, client_id)
    return to_response(_run(wizard.select_time, req.time))


@router.post("/{client_id}/next", response_model=WizardResponseSchema)
def advance(client_id: str, sessions: WizardSessions = Depends(get_wizard_sessions)):
    wizard = _run(sessions.get, client_id)
    return to_response(_run(wizard.advance))


@router.post("/{client_id}/previous", response_model=PreviousResponseSchema)
def previous(client_id: str, sessions: WizardSessions = Depends(get_wizard_sessions)):
    wizard = _run(sessions.get, client_id)
    page = _run(wizard.previous)
    return PreviousResponseSchema(page=page, wizard=to_response(wizard.snapshot()))


@router.post("/{client_id}/stylist", response_model=WizardResponseSchema)
def select_stylist(
    client_id: str,
    req: StylistRequestSchema,
    sessions: WizardSessions = Depends(get_wizard_sessions),
):
    wizard = _run(sessions.get, client_id)
    return to_response(_run(wizard.select_stylist, req.stylist_id))


@router.post("/{client_id}/customer", response_model=WizardResponseSchema)
def update_customer(
    client_id: str,
    req: CustomerInfoRequestSchema,
    sessions: WizardSessions = Depends(get_wizard_sessions),
):
    wizard = _run(sessions.get, client_id)
    return to_response(_run(wizard.update_customer_info, **req.model_dump(exclude_none=True)))


@router.post("/{client_id}/submit", response_model=WizardResponseSchema)
def submit(client_id: str, sessions: WizardSessions = Depends(get_wizard_sessions)):
    wizard = _run(sessions.get, client_id)
    snapshot = _run(wizard.submit)
    if snapshot.error_message:
        logger.info("Submission blocked", extra={"client_id": client_id, "reason": snapshot.error_message})
    return to_response(snapshot)
