"""Alert sinks for TFC Backup."""

from .apprise import AppriseNotifier
from .base import AbstractNotifier, NotificationLevel, NotificationResult
from .sentry import SentryCliNotifier

__all__ = ["AbstractNotifier", "AppriseNotifier", "NotificationLevel", "NotificationResult", "SentryCliNotifier"]
