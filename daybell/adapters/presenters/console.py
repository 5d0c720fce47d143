"""Stderr presenter — the default when no chat or webhook target is configured."""

import sys

from daybell.domain.models import AlertKind, CalendarEvent, format_alert


def _log(msg: str):
    print(msg, file=sys.stderr)


class ConsolePresenter:
    def present(self, event: CalendarEvent, kind: AlertKind, label: str) -> None:
        _log(f"[ALERT] {format_alert(event, kind, label)}")
