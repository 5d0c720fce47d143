"""Outbound ports — interfaces the scheduler calls into."""

from typing import Any, Awaitable, Dict, List, Optional, Protocol, Union, runtime_checkable

from daybell.domain.models import AlertKind, CalendarEvent


@runtime_checkable
class CalendarStorePort(Protocol):
    """Read side of the calendar store.

    Implementations may be synchronous or return an awaitable.
    """

    def get_events_for_date(
        self, date_string: str
    ) -> Union[List[Dict[str, Any]], Awaitable[List[Dict[str, Any]]]]: ...


@runtime_checkable
class AlertPresenterPort(Protocol):
    """Displays one alert. Fire-and-forget; an awaitable result is scheduled."""

    def present(
        self, event: CalendarEvent, kind: AlertKind, label: str
    ) -> Optional[Awaitable[None]]: ...
