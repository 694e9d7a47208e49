"""
ChannelSender — abstract base class for all delivery channels.

Each implementation (Telegram, desktop, ...) handles exactly one method
type and raises ``ChannelError`` when its single delivery attempt fails.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from notify_mcp.config.models import ChannelConfig


class ChannelSender(ABC):
    """Base class for channel senders."""

    kind: str = "unnamed"

    @abstractmethod
    async def send(self, config: ChannelConfig, message: str) -> None:
        """Deliver ``message`` using the channel payload ``config``."""
        ...
