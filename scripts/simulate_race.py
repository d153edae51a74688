#!/usr/bin/env python3
"""
Local race harness (no HTTP).

Usage:
  python3 scripts/simulate_race.py [--clients 5] [--time 14:00] [--latency 0.02]

What it does:
- Starts one sync subscriber + booking coordinator per simulated client
- Has every client select the same slot on the same day
- Confirms all of them at once and prints who won and who got a conflict
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timedelta
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from slotbook.application.use_cases.booking import BookingCoordinator  # noqa: E402
from slotbook.application.use_cases.realtime_sync import RealtimeSyncSubscriber  # noqa: E402
from slotbook.domain.entities.business_rules import DEFAULT_RULES  # noqa: E402
from slotbook.domain.entities.profile import ClientProfile  # noqa: E402
from slotbook.infrastructure.notifications.mock_notifier import MockReminderNotifier  # noqa: E402
from slotbook.infrastructure.payment.mock_payment import MockPaymentGate  # noqa: E402
from slotbook.infrastructure.store.memory_store import MemoryAppointmentStore  # noqa: E402


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Race several clients for one slot")
    parser.add_argument("--clients", type=int, default=5)
    parser.add_argument("--time", default="14:00")
    parser.add_argument("--latency", type=float, default=0.02, help="simulated store round trip in seconds")
    return parser.parse_args()


async def _run(clients: int, label: str, latency: float) -> int:
    store = MemoryAppointmentStore(app_id="race-sim", latency_seconds=latency)
    tomorrow = datetime.now() + timedelta(days=1)

    def clock() -> datetime:
        return datetime.now()

    syncs: list[RealtimeSyncSubscriber] = []
    coordinators: list[BookingCoordinator] = []
    for i in range(clients):
        client_id = f"client-{i + 1}"
        sync = RealtimeSyncSubscriber(store, client_id=client_id)
        await sync.start()
        coordinator = BookingCoordinator(
            store=store,
            sync=sync,
            payment=MockPaymentGate(),
            notifier=MockReminderNotifier(),
            rules=DEFAULT_RULES,
            client_id=client_id,
            profile=ClientProfile(name=f"Client Number{i + 1}", contact_number=f"119{i + 1:08d}"),
            clock=clock,
        )
        coordinator.select_date(tomorrow.date())
        coordinator.select_slot(label)
        syncs.append(sync)
        coordinators.append(coordinator)

    results = await asyncio.gather(*(c.confirm() for c in coordinators))

    print(f"\nRace for {tomorrow.date().isoformat()} {label} with {clients} clients")
    print("-" * 60)
    for coordinator, result in zip(coordinators, results):
        status = coordinator.attempt.status.value
        detail = result.record.id if result.record else result.message
        print(f"{coordinator.client_id:<10} {status:<10} {detail}")

    stored = await store.query_all()
    print("-" * 60)
    print(f"records stored for the slot: {len(stored)}")

    for sync in syncs:
        await sync.stop()
    return 0 if len(stored) == 1 else 1


def main() -> int:
    logging.basicConfig(level=logging.WARNING)
    args = _parse_args()
    return asyncio.run(_run(args.clients, args.time, args.latency))


if __name__ == "__main__":
    raise SystemExit(main())
