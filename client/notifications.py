"""
Notification sinks for user-facing favorites messages.
"""

from typing import Protocol

import structlog

logger = structlog.get_logger(__name__)

ADDED_MESSAGE = "Added to favorites"
REMOVED_MESSAGE = "Removed from favorites"
FAILED_MESSAGE = "Something went wrong while updating favorites"


class Notifier(Protocol):
    """Transient user-facing messages, one method per severity."""

    def success(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class LogNotifier:
    """Notifier that writes each message to the structured log."""

    def __init__(self):
        self.logger = logger.bind(component="notifier")

    def success(self, message: str) -> None:
        self.logger.info("Notification", kind="success", message=message)

    def info(self, message: str) -> None:
        self.logger.info("Notification", kind="info", message=message)

    def error(self, message: str) -> None:
        self.logger.warning("Notification", kind="error", message=message)
