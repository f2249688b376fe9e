"""User-facing transient notifications."""

import logging
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Interface for non-blocking user notifications."""

    def success(self, text: str) -> None:
        """Show a success notification."""

    def error(self, text: str) -> None:
        """Show an error notification."""


@dataclass
class LoggingNotifier(Notifier):
    """Notifier that writes notifications to the application log."""

    def success(self, text: str) -> None:
        """Log a success notification."""
        logger.info("Notification: %s", text)

    def error(self, text: str) -> None:
        """Log an error notification."""
        logger.warning("Notification: %s", text)
