import logging
from typing import Protocol

logger = logging.getLogger(__name__)

OUT_OF_STOCK = "Requested quantity is out of stock"
ADD_FAILED = "Failed to add product"
REMOVE_FAILED = "Failed to remove product"
UPDATE_FAILED = "Failed to update product quantity"


class Notifier(Protocol):
    def notify_error(self, message: str) -> None:
        ...


class LoggingNotifier:
    """Notification sink that writes user-facing messages to the log."""

    def notify_error(self, message: str) -> None:
        logger.warning(f"User notification: {message}")
