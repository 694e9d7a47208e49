"""
Telegram channel — one plain-text message via the Bot API ``sendMessage``.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from notify_mcp.config.models import ChannelConfig, TelegramConfig
from notify_mcp.errors import ChannelError
from notify_mcp.notifications.channel import ChannelSender

logger = logging.getLogger(__name__)


class TelegramSender(ChannelSender):
    """Posts messages to a Telegram chat through a bot."""

    kind: str = "telegram"

    def __init__(
        self,
        *,
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.timeout = timeout
        self._client = client

    async def send(self, config: ChannelConfig, message: str) -> None:
        if not isinstance(config, TelegramConfig):
            raise ChannelError(self.kind, f"expected TelegramConfig, got {type(config).__name__}")

        url = f"{config.api_base_url.rstrip('/')}/bot{config.token}/sendMessage"
        payload: dict[str, Any] = {
            "chat_id": config.chat_id,
            "text": message,
        }

        client = self._client or httpx.AsyncClient(timeout=self.timeout)
        try:
            resp = await client.post(url, json=payload)
        except httpx.HTTPError as exc:
            raise ChannelError(self.kind, f"call telegram: {exc.__class__.__name__}: {exc}") from exc
        finally:
            if not self._client:
                await client.aclose()

        if resp.status_code >= 300:
            raise ChannelError(
                self.kind,
                f"telegram responded with {resp.status_code} {resp.reason_phrase}".rstrip(),
            )
        logger.debug("Telegram accepted message for chat %s", config.chat_id)
