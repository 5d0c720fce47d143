"""Tests for the daily plan routes and their scheduler signals."""

import os
from datetime import datetime
from unittest.mock import MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from daybell.adapters.storage import JsonCalendarStore
from daybell.app import create_app
from daybell.config import AppConfig


@pytest.fixture
def store(tmp_path):
    return JsonCalendarStore(storage_dir=str(tmp_path))


@pytest.fixture
def app(store, tmp_path):
    config = AppConfig(storage_dir=str(tmp_path), watch_calendar=False)
    app = create_app(config, store=store, presenter=MagicMock())
    app.state.scheduler = MagicMock()
    app.state.scheduler.running = True
    app.state.scheduler.pending.return_value = {"e1_now": datetime(2025, 1, 15, 14, 0)}
    app.state.scheduler.fired.return_value = frozenset({"e1_30min"})
    return app


@pytest.fixture
def transport(app):
    return ASGITransport(app=app)


def _today():
    return datetime.now().strftime("%Y-%m-%d")


class TestEvents:
    @pytest.mark.asyncio
    async def test_create_defaults_to_today_and_refreshes(self, app, transport):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/plan/events", json={"title": "Standup", "start": "09:00"})
        assert resp.status_code == 201
        data = resp.json()
        assert data["date"] == _today()
        assert data["title"] == "Standup"
        app.state.scheduler.refresh.assert_called_once()

    @pytest.mark.asyncio
    async def test_create_rejects_bad_time(self, app, transport):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/plan/events", json={"title": "x", "start": "nine"})
        assert resp.status_code == 422
        app.state.scheduler.refresh.assert_not_called()

    @pytest.mark.asyncio
    async def test_list_by_date(self, store, transport):
        store.create_event({"title": "a", "date": "2025-01-15", "start": "10:00"})
        store.create_event({"title": "b", "date": "2025-01-16", "start": "10:00"})
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.get("/plan/events", params={"date": "2025-01-15"})
        assert resp.status_code == 200
        assert [e["title"] for e in resp.json()] == ["a"]

    @pytest.mark.asyncio
    async def test_update_refreshes(self, app, store, transport):
        event = store.create_event({"title": "a", "date": _today(), "start": "10:00"})
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.patch(f"/plan/events/{event['id']}", json={"start": "11:00"})
        assert resp.status_code == 200
        assert resp.json()["start"] == "11:00"
        app.state.scheduler.refresh.assert_called_once()

    @pytest.mark.asyncio
    async def test_update_unknown_404(self, app, transport):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.patch("/plan/events/nope", json={"start": "11:00"})
        assert resp.status_code == 404
        app.state.scheduler.refresh.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_cancels_event_alerts(self, app, store, transport):
        event = store.create_event({"title": "a", "date": _today(), "start": "10:00"})
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.delete(f"/plan/events/{event['id']}")
        assert resp.status_code == 200
        app.state.scheduler.cancel_for_event.assert_called_once_with(event["id"])
        assert store.get_event(event["id"]) is None

    @pytest.mark.asyncio
    async def test_delete_unknown_404(self, app, transport):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.delete("/plan/events/nope")
        assert resp.status_code == 404
        app.state.scheduler.cancel_for_event.assert_not_called()


class TestPlan:
    @pytest.mark.asyncio
    async def test_replace_today_resets_scheduler(self, app, store, transport):
        store.create_event({"title": "old", "date": _today(), "start": "08:00"})
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.put("/plan/today", json=[
                {"title": "Focus", "start": "10:00", "end": "12:00"},
                {"title": "Lunch", "start": "12:30"},
            ])
        assert resp.status_code == 200
        assert [e["title"] for e in resp.json()] == ["Focus", "Lunch"]
        assert [e["title"] for e in store.get_events_for_date(_today())] == ["Focus", "Lunch"]
        app.state.scheduler.reset.assert_called_once()

    @pytest.mark.asyncio
    async def test_corrupt_store_returns_503(self, store, transport):
        with open(store.path, "w") as f:
            f.write("{broken")
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.get("/plan/events")
        assert resp.status_code == 503


class TestSchedulerRoutes:
    @pytest.mark.asyncio
    async def test_status(self, transport):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.get("/plan/scheduler")
        assert resp.status_code == 200
        assert resp.json() == {
            "running": True,
            "pending": {"e1_now": "2025-01-15T14:00:00"},
            "fired": ["e1_30min"],
        }

    @pytest.mark.asyncio
    async def test_refresh(self, app, transport):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/plan/scheduler/refresh")
        assert resp.status_code == 200
        app.state.scheduler.refresh.assert_called_once()
