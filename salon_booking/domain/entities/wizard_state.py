from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from salon_booking.domain.entities.customer_info import CustomerInfo


class WizardStep(IntEnum):
    DATE_TIME = 1
    STYLIST_DETAILS = 2
    CONFIRMATION = 3


@dataclass(frozen=True)
class WizardState:
    step: WizardStep = WizardStep.DATE_TIME
    selected_date: str | None = None  # YYYY-MM-DD
    selected_day: str | None = None  # weekday name, e.g. "Monday"
    selected_time: str | None = None  # slot start time, HH:MM
    selected_stylist_id: str | None = None
    customer_info: CustomerInfo = CustomerInfo()
