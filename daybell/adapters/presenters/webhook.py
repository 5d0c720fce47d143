"""Webhook presenter — POSTs the alert payload as JSON using aiohttp."""

import aiohttp

from daybell.domain.models import AlertKind, CalendarEvent, alert_payload


class WebhookError(RuntimeError):
    pass


class WebhookPresenter:
    def __init__(self, url: str, timeout: float = 10.0):
        self._url = url
        self._timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self._url)

    async def present(self, event: CalendarEvent, kind: AlertKind, label: str) -> None:
        payload = alert_payload(event, kind, label)
        timeout = aiohttp.ClientTimeout(total=self._timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(self._url, json=payload) as resp:
                if resp.status >= 300:
                    body = await resp.text()
                    raise WebhookError(f"webhook returned {resp.status}: {body[:200]}")
