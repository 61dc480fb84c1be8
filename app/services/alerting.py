"""
Outbound alerting.

Sends formatted log records to an outward channel. The Telegram notifier
posts to the Bot API sendMessage endpoint and needs both a bot token and
a destination chat id; without them it refuses before any network I/O.
"""

import logging
from abc import ABC, abstractmethod

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org"

# Telegram rejects messages longer than this
TELEGRAM_MAX_MESSAGE_LENGTH = 4096


class NotifierError(Exception):
    """Raised when an alert could not be delivered."""


class NotifierNotConfiguredError(NotifierError):
    """Raised when the notifier is missing the configuration it needs."""


class Notifier(ABC):
    """Outward alert channel."""

    @abstractmethod
    async def notify(self, text: str) -> None:
        """Deliver `text`. Raises NotifierError on failure."""


class TelegramNotifier(Notifier):
    """Notifier that posts alerts to a Telegram chat through a bot."""

    def __init__(
        self,
        token: str | None = None,
        chat_id: str | None = None,
        timeout: float = 10.0,
        api_url: str = TELEGRAM_API_URL,
    ):
        self.token = token
        self.chat_id = chat_id
        self.timeout = timeout
        self.api_url = api_url.rstrip("/")

    @classmethod
    def from_settings(cls) -> "TelegramNotifier":
        return cls(
            token=settings.TELEGRAM_BOT_TOKEN,
            chat_id=settings.TELEGRAM_CHAT_ID,
            timeout=settings.ALERT_TIMEOUT_SECONDS,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.token and self.chat_id)

    async def notify(self, text: str) -> None:
        if not self.is_configured:
            raise NotifierNotConfiguredError(
                "Telegram alerting is not configured (TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID are required)"
            )

        payload = {
            "chat_id": self.chat_id,
            "text": text[:TELEGRAM_MAX_MESSAGE_LENGTH],
        }

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    f"{self.api_url}/bot{self.token}/sendMessage",
                    json=payload,
                    timeout=self.timeout,
                )
        except httpx.HTTPError as e:
            raise NotifierError(f"Telegram request failed: {type(e).__name__}: {e}") from e

        if not response.is_success:
            # Never echo the URL here, it contains the bot token
            raise NotifierError(f"Telegram returned HTTP {response.status_code}: {response.text[:200]}")

        logger.debug("Telegram alert delivered to chat %s", self.chat_id)
