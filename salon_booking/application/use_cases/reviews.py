from __future__ import annotations

import logging

from salon_booking.application.exceptions import AuthenticationRequiredError
from salon_booking.application.ports.client_storage import ClientStoragePort
from salon_booking.application.ports.salon_api import SalonApiPort
from salon_booking.domain.entities.review import ReviewAcknowledgement, ReviewRequest

LOGIN_AGAIN_MESSAGE = "Please login again"


class ReviewUseCase:
    def __init__(self, api: SalonApiPort, storage: ClientStoragePort) -> None:
        self._api = api
        self._storage = storage
        self._logger = logging.getLogger(__name__)

    def submit(
        self,
        client_id: str,
        booking_id: str,
        rating: int,
        comment: str = "",
        recommend: bool = True,
    ) -> ReviewAcknowledgement:
        if not booking_id.strip():
            raise ValueError("booking_id is required")
        if not 1 <= rating <= 5:
            raise ValueError("Rating must be between 1 and 5")

        token = self._storage.get_token(client_id)
        if not token:
            raise AuthenticationRequiredError(LOGIN_AGAIN_MESSAGE)

        review = ReviewRequest(
            booking_id=booking_id.strip(),
            rating=rating,
            comment=comment.strip(),
            recommend=recommend,
        )
        ack = self._api.submit_review(token, review)
        self._logger.info("Review submitted", extra={"client_id": client_id, "booking_id": review.booking_id})
        return ack
