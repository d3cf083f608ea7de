from fastapi import APIRouter, Depends, HTTPException

from salon_booking.api.v1.schemas import AuthResponseSchema, LoginRequestSchema, SignupRequestSchema
from salon_booking.application.exceptions import ApiStatusError, SalonApiError
from salon_booking.application.use_cases.auth import AuthUseCase
from salon_booking.wiring.dependencies import get_auth_use_case

router = APIRouter()


def backend_error(e: SalonApiError) -> HTTPException:
    if isinstance(e, ApiStatusError) and 400 <= e.status_code < 500:
        return HTTPException(status_code=e.status_code, detail=e.detail or str(e))
    return HTTPException(status_code=502, detail=str(e))


@router.post("/{client_id}/login", response_model=AuthResponseSchema)
def login(
    client_id: str,
    req: LoginRequestSchema,
    uc: AuthUseCase = Depends(get_auth_use_case),
):
    try:
        session = uc.login(client_id, email=req.email, password=req.password)
    except SalonApiError as e:
        raise backend_error(e)
    return AuthResponseSchema(authenticated=True, role=session.role, next_page=uc.landing_page(client_id, session))


@router.post("/{client_id}/signup", response_model=AuthResponseSchema)
def signup(
    client_id: str,
    req: SignupRequestSchema,
    uc: AuthUseCase = Depends(get_auth_use_case),
):
    try:
        session = uc.signup(
            client_id,
            first_name=req.first_name,
            last_name=req.last_name,
            email=req.email,
            phone=req.phone,
            password=req.password,
            confirm_password=req.confirm_password,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SalonApiError as e:
        raise backend_error(e)
    return AuthResponseSchema(authenticated=True, role=session.role, next_page=uc.landing_page(client_id, session))


@router.post("/{client_id}/logout", response_model=AuthResponseSchema)
def logout(client_id: str, uc: AuthUseCase = Depends(get_auth_use_case)):
    uc.logout(client_id)
    return AuthResponseSchema(authenticated=False, next_page="home")
