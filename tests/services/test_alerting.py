"""Tests for the Telegram notifier."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from app.services.alerting import (
    TELEGRAM_MAX_MESSAGE_LENGTH,
    NotifierError,
    NotifierNotConfiguredError,
    TelegramNotifier,
)

SEND_URL = "https://api.telegram.org/bot123:abc/sendMessage"


def _mock_client(response: httpx.Response | None = None, error: Exception | None = None) -> MagicMock:
    client = MagicMock()
    client.__aenter__.return_value = client
    client.__aexit__.return_value = False
    client.post = AsyncMock(return_value=response, side_effect=error)
    return client


def _response(status_code: int, **kwargs) -> httpx.Response:
    return httpx.Response(status_code, request=httpx.Request("POST", SEND_URL), **kwargs)


@pytest.fixture
def telegram() -> TelegramNotifier:
    return TelegramNotifier(token="123:abc", chat_id="-10042", timeout=3.0)


class TestTelegramNotifier:
    @pytest.mark.asyncio
    async def test_sends_message(self, telegram):
        client = _mock_client(_response(200, json={"ok": True}))

        with patch("app.services.alerting.httpx.AsyncClient", return_value=client):
            await telegram.notify("🚨 [FATAL ALERT] Billing\n📝 Database down")

        client.post.assert_awaited_once_with(
            SEND_URL,
            json={"chat_id": "-10042", "text": "🚨 [FATAL ALERT] Billing\n📝 Database down"},
            timeout=3.0,
        )

    @pytest.mark.asyncio
    async def test_truncates_long_messages(self, telegram):
        client = _mock_client(_response(200, json={"ok": True}))

        with patch("app.services.alerting.httpx.AsyncClient", return_value=client):
            await telegram.notify("x" * (TELEGRAM_MAX_MESSAGE_LENGTH + 100))

        sent = client.post.call_args.kwargs["json"]["text"]
        assert len(sent) == TELEGRAM_MAX_MESSAGE_LENGTH

    @pytest.mark.asyncio
    async def test_not_configured_fails_before_network(self):
        notifier = TelegramNotifier(token="123:abc", chat_id=None)

        with patch("app.services.alerting.httpx.AsyncClient") as client_cls:
            with pytest.raises(NotifierNotConfiguredError):
                await notifier.notify("hello")

        client_cls.assert_not_called()

    def test_is_configured(self):
        assert TelegramNotifier(token="t", chat_id="c").is_configured
        assert not TelegramNotifier(token="t").is_configured
        assert not TelegramNotifier(chat_id="c").is_configured

    @pytest.mark.asyncio
    async def test_transport_error(self, telegram):
        client = _mock_client(error=httpx.ConnectError("network unreachable"))

        with patch("app.services.alerting.httpx.AsyncClient", return_value=client):
            with pytest.raises(NotifierError, match="ConnectError"):
                await telegram.notify("hello")

    @pytest.mark.asyncio
    async def test_error_status(self, telegram):
        client = _mock_client(_response(400, text="Bad Request: chat not found"))

        with patch("app.services.alerting.httpx.AsyncClient", return_value=client):
            with pytest.raises(NotifierError) as exc_info:
                await telegram.notify("hello")

        assert "HTTP 400" in str(exc_info.value)
        assert "chat not found" in str(exc_info.value)
        assert "123:abc" not in str(exc_info.value)

    def test_from_settings(self, monkeypatch):
        from app.core.config import settings

        monkeypatch.setattr(settings, "TELEGRAM_BOT_TOKEN", "999:zzz")
        monkeypatch.setattr(settings, "TELEGRAM_CHAT_ID", "12345")
        monkeypatch.setattr(settings, "ALERT_TIMEOUT_SECONDS", 2.5)

        notifier = TelegramNotifier.from_settings()

        assert notifier.token == "999:zzz"
        assert notifier.chat_id == "12345"
        assert notifier.timeout == 2.5
        assert notifier.is_configured
