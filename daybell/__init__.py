"""Daybell — calendar alert scheduler for a personal assistant."""

__version__ = "0.1.0"

from daybell.config import AppConfig
from daybell.domain import AlertKind, CalendarEvent, NotificationScheduler
from daybell.adapters.storage import CalendarStoreError, JsonCalendarStore

__all__ = [
    "AppConfig",
    "AlertKind",
    "CalendarEvent",
    "CalendarStoreError",
    "JsonCalendarStore",
    "NotificationScheduler",
]
