from functools import lru_cache
import logging

from salon_booking.core.config import settings
from salon_booking.application.ports.client_storage import ClientStoragePort
from salon_booking.application.ports.salon_api import SalonApiPort
from salon_booking.application.use_cases.auth import AuthUseCase
from salon_booking.application.use_cases.booking_intent import BookingIntentUseCase
from salon_booking.application.use_cases.reviews import ReviewUseCase
from salon_booking.application.use_cases.time_slot_admin import TimeSlotAdminUseCase
from salon_booking.application.use_cases.wizard_sessions import WizardSessions
from salon_booking.infrastructure.salon_api.http_client import HttpSalonApi
from salon_booking.infrastructure.salon_api.mock_api import MockSalonApi
from salon_booking.infrastructure.store.json_store import JsonClientStorage
from salon_booking.infrastructure.store.memory_store import MemoryClientStorage


_client_storage: ClientStoragePort | None = None
_wizard_sessions: WizardSessions | None = None


@lru_cache
def get_salon_api() -> SalonApiPort:
    logger = logging.getLogger(__name__)
    if not settings.SALON_API_BASE_URL:
        if settings.ENV.lower() in {"dev", "local"}:
            logger.info("Using MockSalonApi (SALON_API_BASE_URL missing, ENV=dev/local)")
            return MockSalonApi()
        raise ValueError("SALON_API_BASE_URL is required outside dev/local.")
    logger.info("Using HttpSalonApi", extra={"base_url": settings.SALON_API_BASE_URL})
    return HttpSalonApi()


def get_client_storage() -> ClientStoragePort:
    global _client_storage
    if _client_storage is None:
        if settings.STORE_PROVIDER.lower() == "json":
            _client_storage = JsonClientStorage(data_dir=settings.CLIENT_DATA_DIR)
        else:
            _client_storage = MemoryClientStorage()
    return _client_storage


def get_booking_intent_use_case() -> BookingIntentUseCase:
    return BookingIntentUseCase(storage=get_client_storage())


def get_auth_use_case() -> AuthUseCase:
    return AuthUseCase(api=get_salon_api(), storage=get_client_storage())


def get_review_use_case() -> ReviewUseCase:
    return ReviewUseCase(api=get_salon_api(), storage=get_client_storage())


def get_time_slot_admin_use_case() -> TimeSlotAdminUseCase:
    return TimeSlotAdminUseCase(api=get_salon_api(), storage=get_client_storage())


def get_wizard_sessions() -> WizardSessions:
    global _wizard_sessions
    if _wizard_sessions is None:
        _wizard_sessions = WizardSessions(
            api=get_salon_api(),
            intents=get_booking_intent_use_case(),
            calendar_window_days=settings.CALENDAR_WINDOW_DAYS,
        )
    return _wizard_sessions
