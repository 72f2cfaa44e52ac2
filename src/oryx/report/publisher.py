from __future__ import annotations

import asyncio
from typing import Protocol

import requests
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ..constants import TELEGRAM_API_URL
from ..domain import StargateReport
from ..errors import PublishError
from ..logger import get_logger
from ..settings import OryxSettings
from .formatter import format_report

logger = get_logger(__name__)


class Publisher(Protocol):
    """Outbound channel for a rendered report."""

    async def send(self, text: str) -> None:
        """Deliver ``text``; raise ``PublishError`` if it cannot be delivered."""
        ...


class TelegramPublisher:
    """Sends the message to a single Telegram chat through the Bot API."""

    def __init__(self, token: str, chat_id: int):
        self._token = token
        self.chat_id = chat_id

    @property
    def url(self) -> str:
        return f"{TELEGRAM_API_URL}/bot{self._token}/sendMessage"

    async def send(self, text: str) -> None:
        """Send ``text`` with one GET request; the text is URL-encoded as a query parameter.

        Raises:
            PublishError: On transport errors or a non-2xx response. The bot
                token is never included in the error message.
        """
        params: dict[str, str | int] = {"chat_id": self.chat_id, "text": text}
        try:
            response = await asyncio.to_thread(requests.get, self.url, params=params)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "unknown"
            raise PublishError(
                f"Telegram rejected message to chat {self.chat_id} (HTTP {status})"
            ) from e
        except requests.exceptions.RequestException as e:
            raise PublishError(
                f"Failed to reach Telegram for chat {self.chat_id}: "
                f"{type(e).__name__}"
            ) from e

        logger.info("Report sent to Telegram chat %s", self.chat_id)


class ConsolePublisher:
    """Dry-run publisher printing the message to stdout instead of sending it."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    async def send(self, text: str) -> None:
        self.console.print(
            Panel(Text(text), title="[bold]Message[/]", border_style="dim")
        )


def build_publisher(settings: OryxSettings) -> Publisher:
    """Pick the publisher for the configured mode."""
    if settings.dry_run:
        return ConsolePublisher()
    return TelegramPublisher(settings.telegram_token_required, settings.telegram_chat_id)


async def publish_report(publisher: Publisher, report: StargateReport) -> str:
    """Format the report and hand it to ``publisher``.

    Args:
        publisher: Destination for the rendered message
        report: The assembled Stargate report

    Returns:
        The message text that was published

    Raises:
        PublishError: If the publisher fails; nothing is retried.
    """
    message = format_report(report)

    logger.info("Report: %r", message)

    await publisher.send(message)
    return message
