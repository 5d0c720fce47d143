"""Notification scheduler — polls today's calendar and arms one timer per alert point.

The pending-timer registry and the fired set are private to each instance.
All mutation happens on the event loop between awaits, so a pass that has
fetched its snapshot runs to completion without interleaving.
"""

import asyncio
import functools
import inspect
import sys
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, FrozenSet, Optional, Set

from daybell.config import DEFAULT_GRACE_SECONDS, DEFAULT_POLL_INTERVAL_SECONDS
from daybell.domain.alert_points import (
    FIRE_NOW,
    MISSED,
    classify,
    compute_alert_points,
    event_start,
    today_string,
)
from daybell.domain.models import AlertKind, AlertPoint, CalendarEvent, event_id_of
from daybell.ports.outbound import AlertPresenterPort, CalendarStorePort


def _log(msg: str):
    print(msg, file=sys.stderr)


@dataclass
class _ArmedAlert:
    handle: asyncio.TimerHandle
    fire_at: datetime
    kind: AlertKind
    event: CalendarEvent


class NotificationScheduler:
    """Keeps exactly one timer per (event, alert kind) for today's events."""

    def __init__(
        self,
        store: CalendarStorePort,
        presenter: AlertPresenterPort,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        grace: float = DEFAULT_GRACE_SECONDS,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._store = store
        self._presenter = presenter
        self._poll_interval = poll_interval
        self._grace = grace
        self._clock = clock
        self._running = False
        self._poll_task: Optional[asyncio.Task] = None
        self._pass_tasks: Set[asyncio.Task] = set()  # passes spawned by refresh/reset
        self._present_tasks: Set[asyncio.Task] = set()  # async presenter calls in flight
        self._registry: Dict[str, _ArmedAlert] = {}
        self._fired: Set[str] = set()
        self._day: Optional[str] = None  # date of the last successful fetch

    # -- Introspection --

    @property
    def running(self) -> bool:
        return self._running

    def pending(self) -> Dict[str, datetime]:
        """Armed alert keys and their fire times."""
        return {key: armed.fire_at for key, armed in self._registry.items()}

    def fired(self) -> FrozenSet[str]:
        return frozenset(self._fired)

    # -- Lifecycle --

    def start(self):
        """Begin polling: one pass now, then every poll interval."""
        if self._running:
            _log("[NotificationScheduler] already running")
            return
        _log(f"[NotificationScheduler] starting (poll every {self._poll_interval:g}s)")
        self._running = True
        self._poll_task = asyncio.get_running_loop().create_task(self._poll_loop())

    def stop(self):
        """Cancel polling and every armed timer. The fired set is kept."""
        if not self._running:
            return
        _log("[NotificationScheduler] stopping")
        self._running = False
        if self._poll_task:
            self._poll_task.cancel()
            self._poll_task = None
        for task in list(self._pass_tasks):
            task.cancel()
        self._cancel_all()

    def refresh(self):
        """Run a pass now instead of waiting for the next tick."""
        if not self._running:
            return
        if reset_first:
            self._clear()

        now = now or self._clock()
        raw_events = raw_events or []
        _log(f"[NotificationScheduler] found {len(raw_events)} event(s) for {today}")

        events = []
        for raw in raw_events:
            try:
                events.append(CalendarEvent.from_dict(raw))
            except (AttributeError, TypeError) as e:
                _log(f"[NotificationScheduler] skipping malformed event {raw!r}: {e}")
        present = {event.id for event in events if event.id}

        if self._day != today:
            self._roll_over(today, present)
        if reset_first and not raw_events:
            return

        for event in events:
            self._schedule_event(event, now)

        # Events deleted from the store since the last pass. An empty snapshot
        # without a reset leaves timers alone.
        if raw_events:
            for key in [k for k in self._registry if event_id_of(k) not in present]:
                self._registry.pop(key).handle.cancel()
                _log(f"[NotificationScheduler] {key} no longer in calendar, cancelled")

    def _roll_over(self, today: str, present: Set[str]):
        """First pass of a new day: forget fired keys of events not on today's calendar."""
        if self._day is not None:
            stale = [k for k in self._fired if event_id_of(k) not in present]
            self._fired.difference_update(stale)
            if stale:
                _log(f"[NotificationScheduler] new day {today}, pruned {len(stale)} fired alert(s)")
        self._day = today

    def _schedule_event(self, event: CalendarEvent, now: datetime):
        title = event.title or "Untitled"
        if not event.id:
            _log(f"[NotificationScheduler] event {title!r} has no id, skipping")
            return
        start = event_start(event)
        if start is None:
            _log(f"[NotificationScheduler] event {title!r} missing or invalid date/start "
                 f"(date={event.date!r}, start={event.start!r}), skipping")
            return
        if start < now:
            # Timers already armed for this start still fire; only a moved start drops them
            self._drop_moved(event, start)
            _log(f"[NotificationScheduler] event {title!r} at {event.start} is in the past, skipping")
            return

        for point in compute_alert_points(event, start):
            self._schedule_point(event, point, now)

    def _drop_moved(self, event: CalendarEvent, start: datetime):
        for point in compute_alert_points(event, start):
            armed = self._registry.get(point.key)
            if armed is None:
                continue
            if armed.fire_at == point.fire_at:
                armed.event = event
                continue
            self._registry.pop(point.key).handle.cancel()
            _log(f"[NotificationScheduler] {point.key} moved into the past, cancelled")

    def _schedule_point(self, event: CalendarEvent, point: AlertPoint, now: datetime):
        key = point.key
        if key in self._fired:
            return

        armed = self._registry.get(key)
        if armed is not None:
            if armed.fire_at == point.fire_at:
                armed.event = event
                return
            armed.handle.cancel()
            del self._registry[key]
            _log(f"[NotificationScheduler] {key} moved {armed.fire_at:%H:%M} -> {point.fire_at:%H:%M}")

        decision = classify(point.fire_at, now, self._grace)
        if decision == MISSED:
            _log(f"[NotificationScheduler] {key} fire time {point.fire_at:%H:%M:%S} already passed, skipping")
            return
        if decision == FIRE_NOW:
            _log(f"[NotificationScheduler] {key} is due, showing immediately")
            self._fire(key, event, point.kind)
            return

        delay = (point.fire_at - now).total_seconds()
        handle = asyncio.get_running_loop().call_later(delay, self._on_timer, key)
        self._registry[key] = _ArmedAlert(handle=handle, fire_at=point.fire_at, kind=point.kind, event=event)
        _log(f"[NotificationScheduler] armed {key} in {int(delay // 60)}m{int(delay % 60):02d}s")

    # -- Firing --

    def _on_timer(self, key: str):
        armed = self._registry.pop(key, None)
        if armed is None:
            return
        self._fire(key, armed.event, armed.kind)

    def _fire(self, key: str, event: CalendarEvent, kind: AlertKind):
        # Marked before presenting: a failing presenter is never retried.
        self._fired.add(key)
        _log(f"[NotificationScheduler] showing alert: {event.title or 'Event'} - {kind.label}")
        try:
            result = self._presenter.present(event, kind, kind.label)
        except Exception as e:
            _log(f"[NotificationScheduler] presenter failed for {key}: {e}")
            return
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._present_tasks.add(task)
            task.add_done_callback(functools.partial(self._present_done, key))

    def _present_done(self, key: str, task: asyncio.Future):
        self._present_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _log(f"[NotificationScheduler] presenter failed for {key}: {exc}")

    # -- Internals --

    async def _poll_loop(self):
        while self._running:
            try:
                await self.reconcile()
            except Exception as e:
                _log(f"[NotificationScheduler] poll error: {e}")
            await asyncio.sleep(self._poll_interval)

    def _spawn_pass(self):
        task = asyncio.get_running_loop().create_task(self.reconcile())
        self._pass_tasks.add(task)
        task.add_done_callback(self._pass_tasks.discard)

    def _cancel_all(self):
        for armed in self._registry.values():
            armed.handle.cancel()
        self._registry.clear()

    def _clear(self):
        self._cancel_all()
        self._fired.clear()
