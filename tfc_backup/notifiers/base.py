"""Abstract base class for alert sinks."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any


class NotificationLevel(str, Enum):
    """Notification levels."""

    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass
class NotificationResult:
    """Result of a notification operation."""

    success: bool
    message: str
    sent_count: int = 0


class AbstractNotifier(ABC):
    """Abstract base class for alert sinks."""

    name = "notifier"

    def __init__(self, config: dict[str, Any], logger: Any = None) -> None:
        """
        Initialize notifier with configuration.

        Args:
            config: Notifier configuration dictionary
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger
        self.enabled = config.get("enabled", False)

    @abstractmethod
    async def send_notification(
        self,
        title: str,
        message: str,
        level: NotificationLevel = NotificationLevel.INFO,
    ) -> NotificationResult:
        """
        Send a notification.

        Args:
            title: Notification title
            message: Notification message
            level: Notification level/severity

        Returns
        -------
            NotificationResult with operation details
        """

    async def send_success(self, title: str, message: str) -> NotificationResult:
        """Send a success notification."""
        if not self.enabled:
            return NotificationResult(success=True, message="Notifications disabled")
        return await self.send_notification(title, message, NotificationLevel.SUCCESS)

    def log(self, level: str, message: str) -> None:
        """Log a message if logger is available."""
        if self.logger:
            getattr(self.logger, level.lower(), self.logger.info)(message)
