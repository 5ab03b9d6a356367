"""
Notification port and adapters.
"""

from onboarding.kernel.notifications.mailer import (
    LoggingNotifier,
    Notification,
    Notifier,
    SmtpNotifier,
    build_notifier,
)

__all__ = [
    "LoggingNotifier",
    "Notification",
    "Notifier",
    "SmtpNotifier",
    "build_notifier",
]
