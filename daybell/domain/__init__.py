"""Domain layer — alert computation and scheduling, no framework dependencies."""

from daybell.domain.alert_points import classify, compute_alert_points, parse_event_datetime
from daybell.domain.models import (
    AlertKind,
    AlertPoint,
    CalendarEvent,
    alert_key,
    alert_payload,
    event_id_of,
    format_alert,
)
from daybell.domain.scheduler import NotificationScheduler

__all__ = [
    "AlertKind",
    "AlertPoint",
    "CalendarEvent",
    "NotificationScheduler",
    "alert_key",
    "alert_payload",
    "classify",
    "compute_alert_points",
    "event_id_of",
    "format_alert",
    "parse_event_datetime",
]
