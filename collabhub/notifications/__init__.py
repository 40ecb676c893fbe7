from collabhub.notifications.resolver import (
    LoggingNotificationSink, NotificationKind, NotificationRecord,
    NotificationResolver, NotificationSink
)

__all__ = [
    "LoggingNotificationSink", "NotificationKind", "NotificationRecord",
    "NotificationResolver", "NotificationSink"
]
