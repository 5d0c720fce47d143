"""Alert-point derivation: parsing event times and computing fire instants.

Pure functions over a single snapshot; no timers, no I/O.
"""

import sys
from datetime import datetime, timedelta
from typing import List, Optional

from daybell.domain.models import AlertKind, AlertPoint, CalendarEvent


def _log(msg: str):
    print(msg, file=sys.stderr)


ALERT_KINDS = (AlertKind.THIRTY_MINUTES, AlertKind.FIFTEEN_MINUTES, AlertKind.AT_START)


def today_string(now: datetime) -> str:
    return now.strftime("%Y-%m-%d")


def parse_event_datetime(date_str: str, time_str: str) -> Optional[datetime]:
    """Combine `YYYY-MM-DD` and `HH:MM` into a naive local datetime.

    Returns None for missing or malformed input.
    """
    if not date_str or not time_str:
        return None
    try:
        year, month, day = (int(p) for p in date_str.strip().split("-"))
        hour, minute = (int(p) for p in time_str.strip().split(":")[:2])
        return datetime(year, month, day, hour, minute)
    except (ValueError, TypeError) as e:
        _log(f"[alert_points] invalid date/time {date_str!r} {time_str!r}: {e}")
        return None


def event_start(event: CalendarEvent) -> Optional[datetime]:
    return parse_event_datetime(event.date, event.start)


def compute_alert_points(event: CalendarEvent, start: datetime) -> List[AlertPoint]:
    return [
        AlertPoint(
            event_id=event.id,
            kind=kind,
            fire_at=start - timedelta(minutes=kind.minutes_before),
        )
        for kind in ALERT_KINDS
    ]


# Decisions for a single alert point relative to `now`.
ARM = "arm"
FIRE_NOW = "fire_now"
MISSED = "missed"


def classify(fire_at: datetime, now: datetime, grace: float) -> str:
    """Whether an alert point should be armed, fired immediately, or dropped.

    Fire times strictly inside (-grace, +grace) seconds of `now` fire now.
    """
    delta = (fire_at - now).total_seconds()
    if delta >= grace:
        return ARM
    if delta > -grace:
        return FIRE_NOW
    return MISSED
