"""
NotifyHandler — the body of the ``notify`` tool.

Reloads settings on every call so edits made with ``notify-mcp config``
apply to the very next notification.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from notify_mcp.config.models import Settings
from notify_mcp.config.store import load_settings
from notify_mcp.errors import NotifyError
from notify_mcp.notifications.dispatcher import Dispatcher
from notify_mcp.notifications.message import compose_message

logger = logging.getLogger(__name__)

LOAD_FAILED_TEXT = "读取通知配置失败"
NO_METHODS_TEXT = "未配置任何通知方式"
ALL_FAILED_TEXT = "所有通知方式均发送失败"


@dataclass
class ToolResult:
    text: str
    is_error: bool = False

    def to_content(self) -> dict[str, Any]:
        return {
            "content": [{"type": "text", "text": self.text}],
            "isError": self.is_error,
        }


class NotifyHandler:
    def __init__(
        self,
        dispatcher: Dispatcher,
        *,
        loader: Callable[[], Settings] = load_settings,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.dispatcher = dispatcher
        self.loader = loader
        self.clock = clock

    async def __call__(self, task_name: Optional[str] = None) -> ToolResult:
        try:
            settings = self.loader()
        except NotifyError as exc:
            logger.error("Failed to reload notification config: %s", exc)
            return ToolResult(LOAD_FAILED_TEXT, is_error=True)

        if not settings.methods:
            logger.error("Config contains no notification methods")
            return ToolResult(NO_METHODS_TEXT, is_error=True)

        message = compose_message(
            task_name,
            settings.effective_notification_message,
            self.clock(),
        )
        outcome = await self.dispatcher.dispatch(settings, message)

        if not outcome.ok:
            for failure in outcome.failed:
                logger.error("Channel %s failed: %s", failure.channel, failure.error)
            return ToolResult(ALL_FAILED_TEXT, is_error=True)
        return ToolResult(outcome.summary())
