from typing import Any, Callable, TypeVar

from fastapi import APIRouter, Depends, HTTPException

from salon_booking.api.v1.auth import backend_error
from salon_booking.api.v1.schemas import (
    AdminTimeSlotsSchema,
    SuccessSchema,
    TimeSlotCreateSchema,
    TimeSlotSchema,
    TimeSlotToggleSchema,
)
from salon_booking.application.exceptions import AdminRequiredError, AuthenticationRequiredError, SalonApiError
from salon_booking.application.use_cases.time_slot_admin import TimeSlotAdminUseCase
from salon_booking.domain.entities.time_slot import TimeSlot
from salon_booking.wiring.dependencies import get_time_slot_admin_use_case

router = APIRouter()

T = TypeVar("T")


def _run(action: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    try:
        return action(*args, **kwargs)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AuthenticationRequiredError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except AdminRequiredError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except SalonApiError as e:
        raise backend_error(e)


def _slot(s: TimeSlot) -> TimeSlotSchema:
    return TimeSlotSchema(
        id=s.id,
        day_of_week=s.day_of_week,
        start_time=s.start_time,
        end_time=s.end_time,
        duration=s.duration,
        available=s.available,
    )


@router.get("/{client_id}/time-slots", response_model=AdminTimeSlotsSchema)
def list_time_slots(client_id: str, uc: TimeSlotAdminUseCase = Depends(get_time_slot_admin_use_case)):
    grouped = _run(uc.list_slots, client_id)
    return AdminTimeSlotsSchema(days={day: [_slot(s) for s in slots] for day, slots in grouped.items()})


@router.post("/{client_id}/time-slots", response_model=list[TimeSlotSchema])
def create_time_slot(
    client_id: str,
    req: TimeSlotCreateSchema,
    uc: TimeSlotAdminUseCase = Depends(get_time_slot_admin_use_case),
):
    created = _run(
        uc.create_slot,
        client_id,
        day_of_week=req.day_of_week,
        start_time=req.start_time,
        end_time=req.end_time,
        duration=req.duration,
    )
    return [_slot(s) for s in created]


@router.patch("/{client_id}/time-slots/{slot_id}/toggle", response_model=TimeSlotToggleSchema)
def toggle_time_slot(
    client_id: str,
    slot_id: str,
    uc: TimeSlotAdminUseCase = Depends(get_time_slot_admin_use_case),
):
    return TimeSlotToggleSchema(id=slot_id, available=_run(uc.toggle, client_id, slot_id))


@router.delete("/{client_id}/time-slots/{slot_id}", response_model=SuccessSchema)
def delete_time_slot(
    client_id: str,
    slot_id: str,
    uc: TimeSlotAdminUseCase = Depends(get_time_slot_admin_use_case),
):
    _run(uc.delete, client_id, slot_id)
    return SuccessSchema()
