"""
Desktop channel — native OS notifications through the platform's notifier.

- macOS: terminal-notifier (with app icon), falling back to osascript
- Linux: notify-send
- Windows: PowerShell toast
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import shutil
import sys
from typing import Optional

from notify_mcp.config.models import ChannelConfig, OSConfig
from notify_mcp.errors import ChannelError
from notify_mcp.notifications.channel import ChannelSender
from notify_mcp.notifications.icon import IconResource

logger = logging.getLogger(__name__)

NOTIFICATION_TITLE = "AI通知助手"
APP_ID = "notify-mcp"

_TOAST_SCRIPT = """
[Windows.UI.Notifications.ToastNotificationManager, Windows.UI.Notifications, ContentType = WindowsRuntime] | Out-Null
$template = [Windows.UI.Notifications.ToastNotificationManager]::GetTemplateContent([Windows.UI.Notifications.ToastTemplateType]::ToastImageAndText02)
$text = $template.GetElementsByTagName('text')
$text.Item(0).AppendChild($template.CreateTextNode($env:NOTIFY_MCP_TITLE)) | Out-Null
$text.Item(1).AppendChild($template.CreateTextNode($env:NOTIFY_MCP_BODY)) | Out-Null
$image = $template.GetElementsByTagName('image')
$image.Item(0).Attributes.GetNamedItem('src').NodeValue = $env:NOTIFY_MCP_ICON
$toast = [Windows.UI.Notifications.ToastNotification]::new($template)
[Windows.UI.Notifications.ToastNotificationManager]::CreateToastNotifier($env:NOTIFY_MCP_APP_ID).Show($toast)
"""


def _applescript_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class DesktopSender(ChannelSender):
    """Shows a native notification on the machine running the server."""

    kind: str = "os"

    def __init__(
        self,
        *,
        icon: Optional[IconResource] = None,
        platform: Optional[str] = None,
        title: str = NOTIFICATION_TITLE,
    ) -> None:
        self.icon = icon or IconResource()
        self.platform = platform or sys.platform
        self.title = title

    async def send(self, config: ChannelConfig, message: str) -> None:
        if not isinstance(config, OSConfig):
            raise ChannelError(self.kind, f"expected OSConfig, got {type(config).__name__}")
        argv, env = self.build_command(message)
        await self._run(argv, env)

    def build_command(self, message: str) -> tuple[list[str], dict[str, str]]:
        """Command line and extra environment for the current platform."""
        if self.platform == "darwin":
            return self._macos_command(message), {}
        if self.platform.startswith("win"):
            return self._windows_command(message)
        return self._freedesktop_command(message), {}

    def _macos_command(self, message: str) -> list[str]:
        notifier = shutil.which("terminal-notifier")
        if notifier:
            return [
                notifier,
                "-title", self.title,
                "-message", message,
                "-appIcon", str(self._icon_path()),
                "-group", APP_ID,
            ]
        osascript = shutil.which("osascript")
        if osascript:
            script = (
                f"display notification {_applescript_string(message)} "
                f"with title {_applescript_string(self.title)}"
            )
            return [osascript, "-e", script]
        raise ChannelError(self.kind, "neither terminal-notifier nor osascript is available")

    def _freedesktop_command(self, message: str) -> list[str]:
        notify_send = shutil.which("notify-send")
        if not notify_send:
            raise ChannelError(self.kind, "notify-send is not installed")
        return [
            notify_send,
            f"--app-name={APP_ID}",
            f"--icon={self._icon_path()}",
            self.title,
            message,
        ]

    def _windows_command(self, message: str) -> tuple[list[str], dict[str, str]]:
        shell = shutil.which("powershell") or shutil.which("pwsh")
        if not shell:
            raise ChannelError(self.kind, "PowerShell is not available")
        env = {
            "NOTIFY_MCP_TITLE": self.title,
            "NOTIFY_MCP_BODY": message,
            "NOTIFY_MCP_ICON": str(self._icon_path()),
            "NOTIFY_MCP_APP_ID": APP_ID,
        }
        return [shell, "-NoProfile", "-NonInteractive", "-Command", _TOAST_SCRIPT], env

    def _icon_path(self):
        try:
            return self.icon.path()
        except OSError as exc:
            raise ChannelError(self.kind, f"prepare icon: {exc}") from exc

    async def _run(self, argv: list[str], env: dict[str, str]) -> None:
        logger.debug("Running desktop notifier %s", argv[0])
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
                env={**os.environ, **env} if env else None,
            )
        except OSError as exc:
            raise ChannelError(self.kind, f"start {argv[0]}: {exc}") from exc

        try:
            _, stderr = await proc.communicate()
        except asyncio.CancelledError:
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
            await proc.wait()
            raise

        if proc.returncode != 0:
            detail = stderr.decode(errors="replace").strip() if stderr else ""
            raise ChannelError(
                self.kind,
                f"{os.path.basename(argv[0])} exited with {proc.returncode}"
                + (f": {detail}" if detail else ""),
            )
