from fastapi import APIRouter, Depends, HTTPException

from salon_booking.api.v1.auth import backend_error
from salon_booking.api.v1.schemas import ReviewRequestSchema, ReviewResponseSchema
from salon_booking.application.exceptions import AuthenticationRequiredError, SalonApiError
from salon_booking.application.use_cases.reviews import ReviewUseCase
from salon_booking.wiring.dependencies import get_review_use_case

router = APIRouter()


@router.post("/{client_id}", response_model=ReviewResponseSchema)
def submit_review(
    client_id: str,
    req: ReviewRequestSchema,
    uc: ReviewUseCase = Depends(get_review_use_case),
):
    try:
        ack = uc.submit(
            client_id,
            booking_id=req.booking_id,
            rating=req.rating,
            comment=req.comment,
            recommend=req.recommend,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AuthenticationRequiredError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except SalonApiError as e:
        raise backend_error(e)
    return ReviewResponseSchema(review_id=ack.review_id)
