"""Concrete channel senders and the default set wired into the server."""

from __future__ import annotations

from notify_mcp.notifications.channel import ChannelSender
from notify_mcp.notifications.channels.desktop import DesktopSender
from notify_mcp.notifications.channels.telegram import TelegramSender


def default_senders(timeout: float = 15.0) -> list[ChannelSender]:
    """One sender per supported method type for the running platform."""
    return [
        TelegramSender(timeout=timeout),
        DesktopSender(),
    ]


__all__ = ["DesktopSender", "TelegramSender", "default_senders"]
