from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal


class PaymentGatePort(ABC):
    @abstractmethod
    def confirm_payment(self, amount: Decimal, currency: str, description: str) -> bool:
        """Ask the payer to confirm. Returns True only if the payment went through."""
        raise NotImplementedError
