from __future__ import annotations

import logging
from decimal import Decimal

from slotbook.application.ports.payment import PaymentGatePort


class MockPaymentGate(PaymentGatePort):
    """Simulated checkout: approves or declines every charge based on `approve`."""

    def __init__(self, approve: bool = True) -> None:
        self._approve = approve
        self._logger = logging.getLogger(__name__)

    def confirm_payment(self, amount: Decimal, currency: str, description: str) -> bool:
        self._logger.info(
            "Simulated payment",
            extra={"reason": description, "status": "approved" if self._approve else "declined"},
        )
        return self._approve
