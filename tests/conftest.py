from __future__ import annotations

from datetime import datetime

import pytest

from slotbook.domain.entities.profile import ClientProfile

from tests.helpers import FrozenClock


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2026, 3, 10, 8, 0))


@pytest.fixture
def profile() -> ClientProfile:
    return ClientProfile(name="Ana Souza", contact_number="11987654321")


@pytest.fixture
def other_profile() -> ClientProfile:
    return ClientProfile(name="Bruno Lima", contact_number="21998765432")
