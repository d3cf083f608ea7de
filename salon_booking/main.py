import logging

from fastapi import FastAPI

from salon_booking.api.v1.admin_time_slots import router as admin_time_slots_router
from salon_booking.api.v1.auth import router as auth_router
from salon_booking.api.v1.catalog import router as catalog_router
from salon_booking.api.v1.reviews import router as reviews_router
from salon_booking.api.v1.wizard import router as wizard_router
from salon_booking.core.config import settings

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("client_id", "booking_type", "day", "slot_id", "status", "booking_id", "reason", "error"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title="Salon Booking Client", version="1.0.0")

app.include_router(auth_router, prefix="/api/v1/auth", tags=["auth"])
app.include_router(catalog_router, prefix="/api/v1", tags=["catalog"])
app.include_router(wizard_router, prefix="/api/v1/wizard", tags=["wizard"])
app.include_router(reviews_router, prefix="/api/v1/reviews", tags=["reviews"])
app.include_router(admin_time_slots_router, prefix="/api/v1/admin", tags=["admin"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
