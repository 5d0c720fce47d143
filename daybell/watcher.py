"""File system watcher: re-runs the scheduler when the calendar file changes on disk."""

import sys
from pathlib import Path

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer


def _log(msg: str):
    print(msg, file=sys.stderr)


class CalendarFileHandler(FileSystemEventHandler):
    """Pushes a scheduler refresh onto the loop when the calendar file is written."""

    def __init__(self, loop, scheduler, calendar_path, debounce_seconds=1.0):
        self._loop = loop
        self._scheduler = scheduler
        self._calendar_path = Path(calendar_path).resolve()
        self._debounce_seconds = debounce_seconds
        self._pending = None  # trailing refresh handle, touched only on the loop

    def _is_calendar(self, path: str) -> bool:
        return Path(path).resolve() == self._calendar_path

    def _emit(self):
        self._loop.call_soon_threadsafe(self._schedule_refresh)

    def _schedule_refresh(self):
        # Trailing debounce: each write restarts the window
        if self._pending is not None:
            self._pending.cancel()
        self._pending = self._loop.call_later(self._debounce_seconds, self._refresh)

    def _refresh(self):
        self._pending = None
        self._scheduler.refresh()

    def on_modified(self, event):
        if event.is_directory or not self._is_calendar(event.src_path):
            return
        self._emit()

    def on_created(self, event):
        if event.is_directory or not self._is_calendar(event.src_path):
            return
        self._emit()

    def on_moved(self, event):
        # Atomic writes land as tmp -> calendar.json renames
        if event.is_directory or not self._is_calendar(event.dest_path):
            return
        self._emit()


def start_calendar_watcher(loop, scheduler, calendar_path):
    """Start a daemon observer on the calendar file's directory."""
    path = Path(calendar_path)
    handler = CalendarFileHandler(loop, scheduler, path)
    observer = Observer()
    observer.schedule(handler, str(path.parent), recursive=False)
    observer.daemon = True
    observer.start()
    _log(f"Calendar watcher started: {path}")
    return observer
