from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ReviewRequest:
    booking_id: str
    rating: int  # 1..5
    comment: str = ""
    recommend: bool = True

    def to_payload(self) -> dict[str, Any]:
        return {
            "bookingId": self.booking_id,
            "rating": self.rating,
            "comment": self.comment,
            "recommend": self.recommend,
        }


@dataclass(frozen=True)
class ReviewAcknowledgement:
    review_id: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)
