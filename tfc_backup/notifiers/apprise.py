"""Apprise notification backend."""

from __future__ import annotations

import re
from typing import Any

import apprise

from .base import AbstractNotifier, NotificationLevel, NotificationResult


class AppriseNotifier(AbstractNotifier):
    """Apprise notification backend."""

    name = "apprise"

    def __init__(self, config: dict[str, Any], logger: Any = None) -> None:
        """Initialize Apprise notifier."""
        super().__init__(config, logger)
        self.urls = list(config.get("urls", []))
        self.title = config.get("title", "TFC Backup")
        self.apprise = apprise.Apprise()
        for url in self.urls:
            if url.strip():
                self.apprise.add(url.strip())

        if self.enabled:
            self.log("debug", f"Apprise notifier initialized with {len(self.urls)} URLs")
            if self.urls:
                masked_urls = [self._mask_url(url) for url in self.urls]
                self.log("debug", f"Notification URLs (masked): {masked_urls}")

    def _mask_url(self, url: str) -> str:
        """Mask sensitive parts of notification URLs for logging."""
        patterns = [
            (r"(tgram://)[^/]{8,}(/)", r"\g<1>****\g<2>"),
            (r"(discord://[^/]+/)[^/]{8,}", r"\g<1>****"),
            (r"(mailto://[^:]+:)[^@]{4,}(@)", r"\g<1>****\g<2>"),
            (r"(://[^:/]{4})[^:/]{4,}([^:/]{4})", r"\g<1>****\g<2>"),
        ]

        masked_url = url
        for pattern, replacement in patterns:
            masked_url = re.sub(pattern, replacement, masked_url)

        return masked_url

    def _get_notification_type(self, level: NotificationLevel) -> apprise.NotifyType:
        """Map notification level to Apprise type."""
        mapping = {
            NotificationLevel.SUCCESS: apprise.NotifyType.SUCCESS,
            NotificationLevel.ERROR: apprise.NotifyType.FAILURE,
            NotificationLevel.WARNING: apprise.NotifyType.WARNING,
            NotificationLevel.INFO: apprise.NotifyType.INFO,
        }
        return mapping.get(level, apprise.NotifyType.INFO)

    async def send_notification(
        self,
        title: str,
        message: str,
        level: NotificationLevel = NotificationLevel.INFO,
    ) -> NotificationResult:
        """Send notification via Apprise."""
        if not self.enabled:
            return NotificationResult(success=True, message="Notifications disabled")

        if not self.urls:
            return NotificationResult(success=False, message="No notification URLs configured")

        full_title = f"{self.title}: {title}" if title else self.title
        result = await self.apprise.async_notify(
            body=message,
            title=full_title,
            notify_type=self._get_notification_type(level),
        )

        if result:
            success_msg = f"Notification sent successfully via {len(self.urls)} service(s)"
            self.log("debug", success_msg)
            return NotificationResult(success=True, message=success_msg, sent_count=len(self.urls))

        error_msg = "Failed to send notifications"
        self.log("warning", error_msg)
        return NotificationResult(success=False, message=error_msg)
