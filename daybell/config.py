"""Configuration loaded from the environment (.env supported)."""

import os
import sys
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

_stderr_print = lambda *a, **kw: print(*a, **kw, file=sys.stderr)

SUPPORTED_PRESENTERS = ("console", "discord", "webhook")

DEFAULT_POLL_INTERVAL_SECONDS = 30.0
DEFAULT_GRACE_SECONDS = 5.0


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        _stderr_print(f"Invalid {name}={raw!r}, falling back to {default}")
        return default
    if value <= 0:
        _stderr_print(f"Non-positive {name}={raw!r}, falling back to {default}")
        return default
    return value


@dataclass
class SchedulerConfig:
    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS
    grace: float = DEFAULT_GRACE_SECONDS


@dataclass
class PresenterConfig:
    kind: str = "console"
    discord_token: str = ""
    discord_channel_id: int = 0
    webhook_url: str = ""


@dataclass
class AppConfig:
    """Typed application configuration."""

    port: int = 3000
    storage_dir: str = "memory"
    watch_calendar: bool = True
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    presenter: PresenterConfig = field(default_factory=PresenterConfig)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create AppConfig from environment variables."""
        kind = os.getenv("DAYBELL_PRESENTER", "console").strip().lower()
        if kind not in SUPPORTED_PRESENTERS:
            _stderr_print(f"Unsupported DAYBELL_PRESENTER={kind!r}, falling back to 'console'")
            kind = "console"

        return cls(
            port=int(os.getenv("PORT", "3000")),
            storage_dir=os.getenv("DAYBELL_STORAGE_DIR", "memory"),
            watch_calendar=_env_bool("DAYBELL_WATCH_CALENDAR", "true"),
            scheduler=SchedulerConfig(
                poll_interval=_env_float("DAYBELL_POLL_INTERVAL_SECONDS", DEFAULT_POLL_INTERVAL_SECONDS),
                grace=_env_float("DAYBELL_GRACE_SECONDS", DEFAULT_GRACE_SECONDS),
            ),
            presenter=PresenterConfig(
                kind=kind,
                discord_token=os.getenv("DAYBELL_DISCORD_TOKEN", ""),
                discord_channel_id=int(os.getenv("DAYBELL_DISCORD_CHANNEL_ID", "0")),
                webhook_url=os.getenv("DAYBELL_WEBHOOK_URL", ""),
            ),
        )
