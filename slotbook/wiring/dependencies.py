from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from functools import lru_cache
from zoneinfo import ZoneInfo

from slotbook.application.ports.appointment_store import AppointmentStorePort
from slotbook.application.ports.notification import NotificationPort
from slotbook.application.ports.payment import PaymentGatePort
from slotbook.application.ports.profile_store import ProfileStorePort
from slotbook.application.use_cases.booking import BookingCoordinator
from slotbook.application.use_cases.realtime_sync import RealtimeSyncSubscriber
from slotbook.core.config import settings
from slotbook.domain.entities.business_rules import BusinessRules
from slotbook.infrastructure.notifications.mock_notifier import MockReminderNotifier
from slotbook.infrastructure.payment.mock_payment import MockPaymentGate
from slotbook.infrastructure.profile.memory_profile_store import MemoryProfileStore
from slotbook.infrastructure.store.json_store import JsonAppointmentStore
from slotbook.infrastructure.store.memory_store import MemoryAppointmentStore


logger = logging.getLogger(__name__)


@dataclass
class ClientSession:
    client_id: str
    sync: RealtimeSyncSubscriber
    coordinator: BookingCoordinator
    last_used: float = field(default_factory=time.monotonic)


_appointment_store: AppointmentStorePort | None = None
_sessions: dict[str, ClientSession] = {}


@lru_cache
def get_business_rules() -> BusinessRules:
    return BusinessRules.from_settings(settings)


@lru_cache
def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


def now() -> datetime:
    """Wall clock in the business timezone."""
    return datetime.now(get_timezone())


def get_appointment_store() -> AppointmentStorePort:
    global _appointment_store
    if _appointment_store is None:
        provider = (settings.STORE_PROVIDER or "").lower()
        if not provider:
            provider = "json" if settings.ENV.lower() in {"dev", "local"} else "memory"
        if provider == "json":
            _appointment_store = JsonAppointmentStore(data_dir=settings.DATA_DIR, app_id=settings.APP_ID)
        else:
            _appointment_store = MemoryAppointmentStore(
                app_id=settings.APP_ID,
                latency_seconds=settings.STORE_LATENCY_SECONDS,
            )
        logger.info("Appointment store ready", extra={"status": provider})
    return _appointment_store


@lru_cache
def get_profile_store() -> ProfileStorePort:
    return MemoryProfileStore(app_id=settings.APP_ID)


@lru_cache
def get_payment_gate() -> PaymentGatePort:
    return MockPaymentGate(approve=settings.PAYMENT_AUTO_APPROVE)


@lru_cache
def get_notifier() -> NotificationPort:
    return MockReminderNotifier(business_name=settings.BUSINESS_NAME)


async def get_client_session(client_id: str) -> ClientSession:
    """Per-client sync + coordinator, started on first use."""
    await evict_idle_sessions()
    session = _sessions.get(client_id)
    if session is None:
        store = get_appointment_store()
        sync = RealtimeSyncSubscriber(store=store, client_id=client_id)
        profile = await get_profile_store().get_profile(client_id)
        coordinator = BookingCoordinator(
            store=store,
            sync=sync,
            payment=get_payment_gate(),
            notifier=get_notifier(),
            rules=get_business_rules(),
            client_id=client_id,
            profile=profile,
            clock=now,
        )
        session = _sessions.setdefault(
            client_id,
            ClientSession(client_id=client_id, sync=sync, coordinator=coordinator),
        )
    session.last_used = time.monotonic()
    if not session.sync.running:
        await session.sync.start()
    return session


async def evict_idle_sessions(max_idle_seconds: float | None = None) -> list[str]:
    """Stop and drop sessions unused for longer than the idle limit. Returns evicted client ids."""
    limit = settings.SESSION_IDLE_SECONDS if max_idle_seconds is None else max_idle_seconds
    cutoff = time.monotonic() - limit
    evicted: list[str] = []
    for client_id, session in list(_sessions.items()):
        if session.last_used > cutoff or session.coordinator.attempt.in_flight:
            continue
        if _sessions.get(client_id) is session:
            del _sessions[client_id]
        await session.sync.stop()
        evicted.append(client_id)
    if evicted:
        logger.info("Evicted idle sessions", extra={"status": f"count={len(evicted)}"})
    return evicted


async def shutdown_sessions() -> None:
    global _appointment_store
    for session in list(_sessions.values()):
        await session.sync.stop()
    _sessions.clear()
    _appointment_store = None
