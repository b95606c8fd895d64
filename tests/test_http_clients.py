"""Tests for HTTP-based adapters."""

import asyncio
import json

import httpx
import pytest

from nutrition_goals.adapters.telegram_client import HttpxTelegramClient


def test_telegram_client_send_message() -> None:
    seen: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/bottoken/sendMessage"
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"ok": True, "result": {}})

    transport = httpx.MockTransport(handler)
    async_client = httpx.AsyncClient(transport=transport)
    client = HttpxTelegramClient(bot_token="token", http_client=async_client)

    asyncio.run(client.send_message(chat_id=1, text="Hi"))
    asyncio.run(client.send_message(chat_id=2, text="*Bold*"))

    assert seen == [
        {"chat_id": 1, "text": "Hi"},
        {"chat_id": 2, "text": "*Bold*"},
    ]


def test_telegram_client_raises_on_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"ok": False})

    transport = httpx.MockTransport(handler)
    client = HttpxTelegramClient(
        bot_token="token", http_client=httpx.AsyncClient(transport=transport)
    )

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.send_message(chat_id=1, text="Hi"))


def test_telegram_client_close() -> None:
    client = HttpxTelegramClient.create("token")

    asyncio.run(client.close())

    assert client.http_client.is_closed
