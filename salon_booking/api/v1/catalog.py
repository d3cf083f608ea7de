from fastapi import APIRouter, Depends, HTTPException, Query

from salon_booking.api.v1.auth import backend_error
from salon_booking.api.v1.schemas import IntentRequestSchema, IntentResponseSchema, IntentSchema, ServiceSchema
from salon_booking.application.exceptions import MalformedBookingIntentError, SalonApiError
from salon_booking.application.ports.client_storage import ClientStoragePort
from salon_booking.application.ports.salon_api import SalonApiPort
from salon_booking.application.use_cases.booking_intent import BookingIntentUseCase
from salon_booking.domain.entities.booking_intent import BookingType
from salon_booking.domain.entities.service import Service
from salon_booking.wiring.dependencies import get_booking_intent_use_case, get_client_storage, get_salon_api

router = APIRouter()


@router.get("/services", response_model=list[ServiceSchema])
def list_services(
    category: str | None = Query(None),
    client_id: str | None = Query(None),
    api: SalonApiPort = Depends(get_salon_api),
    storage: ClientStoragePort = Depends(get_client_storage),
):
    token = storage.get_token(client_id) if client_id else None
    try:
        services = api.list_services(token, category=category)
    except SalonApiError as e:
        raise backend_error(e)
    return [
        ServiceSchema(
            id=s.id,
            name=s.name,
            price=s.price,
            duration=s.duration,
            category=s.category,
            description=s.description,
        )
        for s in services
    ]


@router.post("/intents/{client_id}", response_model=IntentResponseSchema)
def choose_intent(
    client_id: str,
    req: IntentRequestSchema,
    uc: BookingIntentUseCase = Depends(get_booking_intent_use_case),
    api: SalonApiPort = Depends(get_salon_api),
    storage: ClientStoragePort = Depends(get_client_storage),
):
    try:
        if req.booking_type is BookingType.appointment:
            next_page = uc.choose_general_appointment(client_id)
        elif req.booking_type is BookingType.service:
            if not req.service_id:
                raise HTTPException(status_code=400, detail="service_id is required")
            service = _find_service(api, storage.get_token(client_id), req.service_id)
            next_page = uc.choose_service(client_id, service)
        else:
            if not (req.package_id and req.name):
                raise HTTPException(status_code=400, detail="package_id and name are required")
            next_page = uc.choose_package(
                client_id,
                package_id=req.package_id,
                name=req.name,
                price=req.price,
                duration=req.duration,
            )
        intent = uc.load_context(client_id).intent
    except MalformedBookingIntentError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return IntentResponseSchema(
        intent=IntentSchema(
            booking_type=intent.booking_type,
            service_id=intent.service_id,
            package_id=intent.package_id,
            name=intent.name,
            price=intent.price,
            duration=intent.duration,
        ),
        next_page=next_page,
    )


def _find_service(api: SalonApiPort, token: str | None, service_id: str) -> Service:
    try:
        services = api.list_services(token)
    except SalonApiError as e:
        raise backend_error(e)
    service = next((s for s in services if s.id == service_id), None)
    if service is None:
        raise HTTPException(status_code=404, detail=f"Unknown service {service_id}")
    return service
