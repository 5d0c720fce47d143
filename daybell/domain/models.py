"""Calendar and alert value types."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class AlertKind(str, Enum):
    """Offset of an alert relative to the event start."""

    THIRTY_MINUTES = "30min"
    FIFTEEN_MINUTES = "15min"
    AT_START = "now"

    @property
    def minutes_before(self) -> int:
        return _MINUTES_BEFORE[self]

    @property
    def label(self) -> str:
        return _LABELS[self]


_MINUTES_BEFORE = {
    AlertKind.THIRTY_MINUTES: 30,
    AlertKind.FIFTEEN_MINUTES: 15,
    AlertKind.AT_START: 0,
}

_LABELS = {
    AlertKind.THIRTY_MINUTES: "30 minutes",
    AlertKind.FIFTEEN_MINUTES: "15 minutes",
    AlertKind.AT_START: "Event starting now",
}


@dataclass
class CalendarEvent:
    """Snapshot of one calendar entry as read from the store."""

    id: str
    date: str  # YYYY-MM-DD, local
    start: str  # HH:MM, local
    end: Optional[str] = None
    title: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "CalendarEvent":
        """Build from a store record. Accepts `_id`/`id` and `start`/`startTime`."""
        event_id = raw.get("_id") or raw.get("id") or ""
        return cls(
            id=str(event_id),
            date=str(raw.get("date") or ""),
            start=str(raw.get("start") or raw.get("startTime") or ""),
            end=raw.get("end") or raw.get("endTime") or None,
            title=str(raw.get("title") or ""),
            description=str(raw.get("description") or ""),
        )


@dataclass(frozen=True)
class AlertPoint:
    event_id: str
    kind: AlertKind
    fire_at: datetime

    @property
    def key(self) -> str:
        return alert_key(self.event_id, self.kind)


def alert_key(event_id: str, kind: AlertKind) -> str:
    """Stable identity for an (event, offset) pair."""
    return f"{event_id}_{AlertKind(kind).value}"


def event_id_of(key: str) -> str:
    """Event component of an alert key (kind values never contain '_')."""
    return key.rsplit("_", 1)[0]


def alert_payload(event: CalendarEvent, kind: AlertKind, label: Optional[str] = None) -> Dict[str, str]:
    """Fields handed to an alert UI for one firing. `label` overrides the kind's default."""
    kind = AlertKind(kind)
    return {
        "eventId": event.id,
        "title": event.title or "Event",
        "description": event.description or "",
        "startTime": event.start or "",
        "endTime": event.end or "",
        "date": event.date or "",
        "notificationType": kind.value,
        "notificationLabel": label or kind.label,
    }


def format_alert(event: CalendarEvent, kind: AlertKind, label: Optional[str] = None) -> str:
    """One-line human-readable alert text."""
    kind = AlertKind(kind)
    title = event.title or "Event"
    when = event.start
    if event.end:
        when = f"{event.start}-{event.end}"
    return f"⏰ {title} — {label or kind.label} ({when})"
