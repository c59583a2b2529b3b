"""sentry-cli alert sink."""

from typing import Any

from tfc_backup.utils.process import run_command

from .base import AbstractNotifier, NotificationLevel, NotificationResult


class SentryCliNotifier(AbstractNotifier):
    """
    Sends events with ``sentry-cli send-event``.

    Enabled only when a Sentry DSN is configured. The DSN is handed to
    sentry-cli through ``SENTRY_DSN`` in its environment.
    """

    name = "sentry"

    LEVELS = {
        NotificationLevel.ERROR: "error",
        NotificationLevel.WARNING: "warning",
        NotificationLevel.INFO: "info",
        NotificationLevel.SUCCESS: "info",
    }

    def __init__(self, config: dict[str, Any], logger: Any = None) -> None:
        super().__init__(config, logger)
        self.executable = config.get("executable", "sentry-cli")
        self.timeout = config.get("timeout", 30.0)
        self.dsn = config.get("dsn")

    def build_command(self, message: str, level: NotificationLevel) -> list[str]:
        return [self.executable, "send-event", "--level", self.LEVELS[level], "-m", message]

    async def send_notification(
        self,
        title: str,
        message: str,
        level: NotificationLevel = NotificationLevel.ERROR,
    ) -> NotificationResult:
        """Send one event; the title is not part of a sentry event message."""
        if not self.enabled:
            return NotificationResult(success=True, message="Sentry alerts disabled")

        env = {"SENTRY_DSN": self.dsn} if self.dsn else None
        result = await run_command(self.build_command(message, level), timeout=self.timeout, env=env)
        if result.success:
            return NotificationResult(success=True, message="Event sent to Sentry", sent_count=1)

        error_msg = f"sentry-cli failed: {result.describe_failure()}"
        self.log("warning", error_msg)
        return NotificationResult(success=False, message=error_msg)
