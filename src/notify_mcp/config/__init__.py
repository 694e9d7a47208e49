"""
Notification settings: typed models plus the on-disk store.
"""

from notify_mcp.config.models import (
    DEFAULT_NOTIFICATION_MESSAGE,
    DEFAULT_TELEGRAM_API_BASE_URL,
    ChannelConfig,
    Method,
    MethodType,
    OSConfig,
    OSMethod,
    Settings,
    TelegramConfig,
    TelegramMethod,
    new_os_method,
    new_telegram_method,
    remove_method,
    upsert_method,
)
from notify_mcp.config.store import config_path, decode_settings, load_settings, save_settings

__all__ = [
    "DEFAULT_NOTIFICATION_MESSAGE",
    "DEFAULT_TELEGRAM_API_BASE_URL",
    "ChannelConfig",
    "Method",
    "MethodType",
    "OSConfig",
    "OSMethod",
    "Settings",
    "TelegramConfig",
    "TelegramMethod",
    "config_path",
    "decode_settings",
    "load_settings",
    "new_os_method",
    "new_telegram_method",
    "remove_method",
    "save_settings",
    "upsert_method",
]
