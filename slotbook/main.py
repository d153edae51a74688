import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from slotbook.api.v1.bookings import router as bookings_router
from slotbook.core.config import settings
from slotbook.wiring.dependencies import shutdown_sessions


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("client_id", "appointment_id", "date", "time", "status", "reason", "error", "reminder"):
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


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await shutdown_sessions()


app = FastAPI(title="Slot Booking", version="1.0.0", lifespan=lifespan)

app.include_router(bookings_router, prefix="/api/v1", tags=["bookings"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
