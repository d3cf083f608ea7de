from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Callable

from salon_booking.application.ports.salon_api import SalonApiPort
from salon_booking.application.use_cases.booking_intent import BookingIntentUseCase
from salon_booking.application.use_cases.booking_wizard import BookingWizard
from salon_booking.domain.entities.wizard_state import WizardStep


class WizardNotMountedError(LookupError):
    pass


class WizardSessions:
    """Mounted wizards by client id. Mounting again replaces (and discards) the previous wizard."""

    def __init__(
        self,
        api: SalonApiPort,
        intents: BookingIntentUseCase,
        calendar_window_days: int = 14,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._api = api
        self._intents = intents
        self._calendar_window_days = calendar_window_days
        self._today = today
        self._wizards: dict[str, BookingWizard] = {}
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def mount(self, client_id: str) -> BookingWizard:
        context = self._intents.load_context(client_id)
        wizard = BookingWizard(
            api=self._api,
            context=context,
            today=self._today(),
            calendar_window_days=self._calendar_window_days,
        )
        with self._lock:
            self._wizards[client_id] = wizard
        self._logger.info(
            "Wizard mounted",
            extra={"client_id": client_id, "booking_type": context.intent.booking_type.value},
        )
        wizard.mount()
        return wizard

    def get(self, client_id: str) -> BookingWizard:
        with self._lock:
            wizard = self._wizards.get(client_id)
        if wizard is None:
            raise WizardNotMountedError(f"No booking wizard for client {client_id}")
        return wizard

    def unmount(self, client_id: str) -> bool:
        """Drop the wizard. Leaving a confirmed booking also clears the stored intent."""
        with self._lock:
            removed = self._wizards.pop(client_id, None)
        if removed is not None:
            if removed.state.step is WizardStep.CONFIRMATION:
                self._intents.complete(client_id)
            self._logger.info("Wizard unmounted", extra={"client_id": client_id})
        return removed is not None
