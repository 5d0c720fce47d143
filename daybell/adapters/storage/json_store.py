"""JSON file-based calendar store — implements CalendarStorePort."""

import json
import os
import tempfile
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


class CalendarStoreError(Exception):
    """Raised when the calendar file cannot be read or written."""


class JsonCalendarStore:
    """Daily-plan events persisted to a single JSON file."""

    def __init__(self, storage_dir: str = "memory", filename: str = "calendar.json"):
        self._storage_dir = Path(storage_dir)
        self._storage_dir.mkdir(parents=True, exist_ok=True)
        self._path = self._storage_dir / filename

    @property
    def path(self) -> Path:
        return self._path

    def create_event(self, data: Dict[str, Any]) -> Dict[str, Any]:
        events = self._load()
        now = datetime.now().isoformat()
        event = {
            **data,
            "id": uuid.uuid4().hex,
            "createdAt": now,
            "updatedAt": now,
        }
        events.append(event)
        self._save(events)
        return event

    def get_events_for_date(self, date_string: str) -> List[Dict[str, Any]]:
        events = [e for e in self._load() if e.get("date") == date_string]
        return sorted(events, key=lambda e: str(e.get("start") or e.get("startTime") or ""))

    def get_event(self, event_id: str) -> Optional[Dict[str, Any]]:
        for event in self._load():
            if event.get("id") == event_id:
                return event
        return None

    def update_event(self, event_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Apply updates in place. Returns the updated event, or None if unknown."""
        events = self._load()
        for i, event in enumerate(events):
            if event.get("id") == event_id:
                updated = {**event, **updates, "id": event_id, "updatedAt": datetime.now().isoformat()}
                events[i] = updated
                self._save(events)
                return updated
        return None

    def delete_event(self, event_id: str) -> bool:
        """Remove event by ID. Returns True if found and removed."""
        events = self._load()
        remaining = [e for e in events if e.get("id") != event_id]
        if len(remaining) == len(events):
            return False
        self._save(remaining)
        return True

    def replace_day(self, date_string: str, new_events: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Drop every event on `date_string` and store `new_events` in their place."""
        kept = [e for e in self._load() if e.get("date") != date_string]
        now = datetime.now().isoformat()
        created = [
            {**data, "date": date_string, "id": uuid.uuid4().hex, "createdAt": now, "updatedAt": now}
            for data in new_events
        ]
        self._save(kept + created)
        return created

    def _load(self) -> List[Dict[str, Any]]:
        if not self._path.exists():
            return []
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise CalendarStoreError(f"cannot read {self._path}: {e}") from e
        if not isinstance(raw, list):
            raise CalendarStoreError(f"{self._path} does not hold a list of events")
        return [item for item in raw if isinstance(item, dict)]

    def _save(self, data: List[Dict[str, Any]]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps(data, ensure_ascii=False, indent=2)
        # Atomic write
        fd, tmp_path = tempfile.mkstemp(
            dir=str(self._path.parent), suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_path, str(self._path))
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise
