#!/usr/bin/env python3
"""Smoke test for a running booking API (uvicorn slotbook.main:app --port 8001)."""

import sys
from datetime import date, timedelta

import httpx


BASE_URL = "http://127.0.0.1:8001"


def _headers(client_id: str) -> dict[str, str]:
    return {"X-Client-Id": client_id}


def save_profile(client_id: str, name: str, number: str) -> bool:
    print("=" * 60)
    print(f"PUT /api/v1/clients/me/profile ({client_id})")
    print("=" * 60)
    try:
        response = httpx.put(
            f"{BASE_URL}/api/v1/clients/me/profile",
            json={"name": name, "contact_number": number},
            headers=_headers(client_id),
            timeout=10.0,
        )
        response.raise_for_status()
        print(f"✅ Profile saved: {response.json()['contact_display']}")
        return True
    except httpx.HTTPStatusError as e:
        print(f"❌ HTTP Error: {e.response.status_code}")
        print(f"Response: {e.response.text}")
        return False
    except httpx.HTTPError as e:
        print(f"❌ Error: {e}")
        return False


def show_availability(client_id: str, day: str) -> list[str]:
    print("\n" + "=" * 60)
    print(f"GET /api/v1/availability?date={day}")
    print("=" * 60)
    response = httpx.get(
        f"{BASE_URL}/api/v1/availability",
        params={"date": day},
        headers=_headers(client_id),
        timeout=10.0,
    )
    response.raise_for_status()
    slots = response.json()["slots"]
    print(f"Free slots: {', '.join(slots) or 'none'}")
    return slots


def book(client_id: str, day: str, time: str) -> int:
    print("\n" + "=" * 60)
    print(f"POST /api/v1/bookings {day} {time} ({client_id})")
    print("=" * 60)
    response = httpx.post(
        f"{BASE_URL}/api/v1/bookings",
        json={"date": day, "time": time},
        headers=_headers(client_id),
        timeout=10.0,
    )
    if response.status_code == 201:
        print(f"✅ Booked: {response.json()['id']}")
    else:
        print(f"⚠️  {response.status_code}: {response.text}")
    return response.status_code


def main() -> int:
    day = (date.today() + timedelta(days=1)).isoformat()
    if not save_profile("smoke-a", "Ana Souza", "11987654321"):
        return 1
    if not save_profile("smoke-b", "Bruno Lima", "21998765432"):
        return 1

    slots = show_availability("smoke-a", day)
    if not slots:
        print("No free slots tomorrow, nothing to test.")
        return 1

    target = slots[-1]
    first = book("smoke-a", day, target)
    second = book("smoke-b", day, target)

    ok = first == 201 and second == 409
    print("\n" + ("✅ Conflict handling works" if ok else "❌ Unexpected results"))
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
