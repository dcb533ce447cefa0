"""Notification surface for stock reconciliation messages."""

import logging
from abc import ABC, abstractmethod

from storefront_core.models.cart import Notification, Severity

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


class Notifier(ABC):
    """Fire-and-forget sink for user-facing messages."""

    @abstractmethod
    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        """Show ``message`` to the user. Must not raise."""
        ...


class LoggingNotifier(Notifier):
    """Writes notifications to the log."""

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        logger.log(_LOG_LEVELS.get(severity, logging.INFO), message)


class CollectingNotifier(Notifier):
    """Keeps notifications in memory until drained by the UI layer."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        self.notifications.append(Notification(message=message, severity=severity))

    def drain(self) -> list[Notification]:
        pending, self.notifications = self.notifications, []
        return pending
