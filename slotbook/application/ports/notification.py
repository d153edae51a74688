from abc import ABC, abstractmethod

from slotbook.domain.entities.appointment import AppointmentRecord


class NotificationPort(ABC):
    @abstractmethod
    def notify(self, record: AppointmentRecord) -> None:
        """Hand over a committed appointment for reminder delivery."""
        raise NotImplementedError
