"""Funnels export failures to alert sinks and the operator's error stream."""

import logging
from collections.abc import Sequence
from typing import TextIO

import click

from tfc_backup.config import Settings
from tfc_backup.notifiers import AbstractNotifier, AppriseNotifier, NotificationLevel, SentryCliNotifier

logger = logging.getLogger(__name__)


class FailureReporter:
    """
    Best-effort failure reporting.

    Each message goes to every enabled sink and then to stderr. A sink that
    fails or raises is logged and skipped; reporting never raises. Sinks add
    the configured notification title themselves, so only a subject is passed.
    """

    def __init__(
        self,
        notifiers: Sequence[AbstractNotifier],
        subject: str = "Export",
        stream: TextIO | None = None,
    ) -> None:
        self.notifiers = list(notifiers)
        self.subject = subject
        self.stream = stream
        self.reported: list[str] = []

    @classmethod
    def from_settings(cls, settings: Settings) -> "FailureReporter":
        notifiers: list[AbstractNotifier] = [
            SentryCliNotifier(settings.get_sentry_config(), logger),
            AppriseNotifier(settings.get_notification_config(), logger),
        ]
        return cls(notifiers)

    async def report(self, message: str, level: NotificationLevel = NotificationLevel.ERROR) -> None:
        """Send ``message`` to all enabled sinks, then print it to stderr."""
        self.reported.append(message)
        for notifier in self.notifiers:
            if not notifier.enabled:
                continue
            try:
                result = await notifier.send_notification(self.subject, message, level)
            except Exception as e:  # noqa: BLE001
                logger.warning("Alert sink %s raised: %s", notifier.name, e)
                continue
            if not result.success:
                logger.warning("Alert sink %s failed: %s", notifier.name, result.message)

        click.echo(message, err=True, file=self.stream)

    async def notify_success(self, title: str, message: str) -> None:
        """Send a success notice to sinks that accept one."""
        for notifier in self.notifiers:
            if not isinstance(notifier, AppriseNotifier):
                continue
            try:
                await notifier.send_success(title, message)
            except Exception as e:  # noqa: BLE001
                logger.warning("Failed to send success notification: %s", e)
