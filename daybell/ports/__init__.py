"""Port interfaces (Hexagonal Architecture)."""

from daybell.ports.outbound import AlertPresenterPort, CalendarStorePort

__all__ = [
    "AlertPresenterPort",
    "CalendarStorePort",
]
