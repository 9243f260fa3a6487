from datetime import date
from typing import Protocol

from lending_library.core.config import logger


class Notifier(Protocol):
    def notify(self, recipient: str, due_date: date) -> None:
        ...


class LogNotifier:
    """Writes due-date reminders to the application log instead of sending them."""

    def notify(self, recipient: str, due_date: date) -> None:
        logger.info(f"Reminder to {recipient}: loan due {due_date.isoformat()}")
