"""FastAPI application wiring: store, presenter, scheduler, watcher."""

import asyncio
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from daybell.adapters.presenters import (
    ConsolePresenter,
    DiscordPresenter,
    WebhookPresenter,
    create_discord_client,
)
from daybell.adapters.storage import CalendarStoreError, JsonCalendarStore
from daybell.adapters.web.plan_routes import plan_router
from daybell.config import AppConfig
from daybell.domain.scheduler import NotificationScheduler
from daybell.watcher import start_calendar_watcher


def _log(msg: str):
    print(msg, file=sys.stderr)


def build_presenter(config: AppConfig):
    """Pick the alert presenter named in config, falling back to the console."""
    settings = config.presenter
    if settings.kind == "discord":
        if settings.discord_token and settings.discord_channel_id:
            return DiscordPresenter(create_discord_client(), settings.discord_channel_id)
        _log("Discord presenter not configured — using console")
    elif settings.kind == "webhook":
        presenter = WebhookPresenter(settings.webhook_url)
        if presenter.is_configured:
            return presenter
        _log("Webhook presenter not configured — using console")
    return ConsolePresenter()


def create_app(
    config: Optional[AppConfig] = None,
    store: Optional[JsonCalendarStore] = None,
    presenter=None,
) -> FastAPI:
    config = config or AppConfig.from_env()
    store = store or JsonCalendarStore(config.storage_dir)
    presenter = presenter or build_presenter(config)
    scheduler = NotificationScheduler(
        store,
        presenter,
        poll_interval=config.scheduler.poll_interval,
        grace=config.scheduler.grace,
    )

    app = FastAPI(title="Daybell")
    app.state.config = config
    app.state.store = store
    app.state.presenter = presenter
    app.state.scheduler = scheduler
    app.state.observer = None
    app.state.discord_task = None
    app.include_router(plan_router)

    @app.exception_handler(CalendarStoreError)
    async def calendar_store_error(request: Request, exc: CalendarStoreError):
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.on_event("startup")
    async def startup_event():
        _log(f"Daybell starting (presenter={type(presenter).__name__})")
        loop = asyncio.get_running_loop()
        if isinstance(presenter, DiscordPresenter):
            app.state.discord_task = asyncio.create_task(
                presenter.client.start(config.presenter.discord_token)
            )
        if config.watch_calendar:
            app.state.observer = start_calendar_watcher(loop, scheduler, store.path)
        scheduler.start()

    @app.on_event("shutdown")
    async def shutdown_event():
        scheduler.stop()
        if app.state.observer is not None:
            app.state.observer.stop()
        if isinstance(presenter, DiscordPresenter):
            await presenter.client.close()

    return app


def main():
    config = AppConfig.from_env()
    uvicorn.run(create_app(config), host="0.0.0.0", port=config.port, log_level="info")


if __name__ == "__main__":
    main()
