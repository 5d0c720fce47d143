"""Discord presenter — posts alerts to a channel through a discord.Client."""

import sys

import discord

from daybell.domain.models import AlertKind, CalendarEvent, format_alert


def _log(msg: str):
    print(msg, file=sys.stderr)


class DiscordPresenter:
    """AlertPresenterPort implementation using discord.Client."""

    def __init__(self, client: discord.Client, channel_id: int):
        self._client = client
        self._channel_id = channel_id

    @property
    def client(self) -> discord.Client:
        return self._client

    async def present(self, event: CalendarEvent, kind: AlertKind, label: str) -> None:
        channel = self._client.get_channel(self._channel_id)
        if not channel:
            _log(f"[DiscordPresenter] channel {self._channel_id} not found, alert dropped")
            return
        text = format_alert(event, kind, label)
        if event.description:
            text += f"\n{event.description}"
        # Discord message limit
        while text:
            await channel.send(text[:2000])
            text = text[2000:]


def create_discord_client() -> discord.Client:
    intents = discord.Intents.default()
    return discord.Client(intents=intents)
