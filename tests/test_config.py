"""Tests for the typed AppConfig dataclass."""

from daybell.config import AppConfig, PresenterConfig, SchedulerConfig


class TestSchedulerConfig:
    def test_defaults(self):
        c = SchedulerConfig()
        assert c.poll_interval == 30
        assert c.grace == 5


class TestAppConfig:
    def test_defaults(self):
        c = AppConfig()
        assert c.port == 3000
        assert c.storage_dir == "memory"
        assert c.watch_calendar is True
        assert isinstance(c.scheduler, SchedulerConfig)
        assert isinstance(c.presenter, PresenterConfig)
        assert c.presenter.kind == "console"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("DAYBELL_POLL_INTERVAL_SECONDS", "10")
        monkeypatch.setenv("DAYBELL_GRACE_SECONDS", "2.5")
        monkeypatch.setenv("DAYBELL_PRESENTER", "Webhook")
        monkeypatch.setenv("DAYBELL_WEBHOOK_URL", "https://hooks.example/alert")
        monkeypatch.setenv("DAYBELL_WATCH_CALENDAR", "off")
        c = AppConfig.from_env()
        assert c.scheduler.poll_interval == 10
        assert c.scheduler.grace == 2.5
        assert c.presenter.kind == "webhook"
        assert c.presenter.webhook_url == "https://hooks.example/alert"
        assert c.watch_calendar is False

    def test_unknown_presenter_falls_back(self, monkeypatch):
        monkeypatch.setenv("DAYBELL_PRESENTER", "pager")
        assert AppConfig.from_env().presenter.kind == "console"

    def test_invalid_interval_falls_back(self, monkeypatch):
        monkeypatch.setenv("DAYBELL_POLL_INTERVAL_SECONDS", "soon")
        monkeypatch.setenv("DAYBELL_GRACE_SECONDS", "-1")
        c = AppConfig.from_env()
        assert c.scheduler.poll_interval == 30
        assert c.scheduler.grace == 5
