"""
Notification delivery for notify-mcp.

Composes the task message and fans it out to every configured method,
aggregating per-channel successes and failures.
"""

from notify_mcp.notifications.channel import ChannelSender
from notify_mcp.notifications.dispatcher import ChannelFailure, DispatchOutcome, Dispatcher
from notify_mcp.notifications.icon import IconResource
from notify_mcp.notifications.message import DEFAULT_TASK_NAME, compose_message

__all__ = [
    "ChannelFailure",
    "ChannelSender",
    "DEFAULT_TASK_NAME",
    "DispatchOutcome",
    "Dispatcher",
    "IconResource",
    "compose_message",
]
