"""
On-disk persistence for notification settings.

The document lives at ``<user-config-dir>/notify-mcp/config.json``. Older
releases stored a single Telegram channel as flat ``apiBaseUrl``/``chatId``/
``token`` keys at the root; those files are upgraded on read and only
rewritten in the current shape on the next save.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, TypeVar

import click
from pydantic import BaseModel, ValidationError

from notify_mcp.config.models import (
    Settings,
    TelegramConfig,
    TelegramMethod,
    format_validation_error,
)
from notify_mcp.errors import (
    ConfigDecodeError,
    ConfigIOError,
    ConfigPathError,
    ConfigValidationError,
    NotConfiguredError,
)

logger = logging.getLogger(__name__)

APP_NAME = "notify-mcp"
CONFIG_FILENAME = "config.json"

_M = TypeVar("_M", bound=BaseModel)


def config_path() -> Path:
    """Absolute path of the settings file for the current user."""
    app_dir = Path(click.get_app_dir(APP_NAME))
    if not app_dir.is_absolute():
        raise ConfigPathError(f"resolve user config dir: {str(app_dir)!r} is not absolute")
    return app_dir / CONFIG_FILENAME


def load_settings() -> Settings:
    """Read, migrate and validate the settings file."""
    path = config_path()
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise NotConfiguredError() from exc
    except UnicodeDecodeError as exc:
        raise ConfigDecodeError(f"decode config {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigIOError(f"read config {path}: {exc}") from exc
    return decode_settings(raw)


def decode_settings(raw: str) -> Settings:
    """Decode either the current ``methods`` document or the legacy flat shape."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigDecodeError(f"decode config: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigDecodeError("decode config: expected a JSON object at the document root")

    if "methods" in data:
        return _validate(Settings, data)

    logger.debug("Legacy config shape detected, upgrading to a single telegram method")
    legacy = _validate(TelegramConfig, data)
    return Settings(methods=[TelegramMethod(config=legacy)])


def save_settings(settings: Settings) -> Path:
    """Validate and atomically replace the settings file. Returns its path."""
    checked = _validate(Settings, settings.to_document())
    if not checked.methods:
        raise ConfigValidationError("at least one notification method is required")

    path = config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        _write_private(path, checked.to_json() + "\n")
    except OSError as exc:
        raise ConfigIOError(f"write config {path}: {exc}") from exc

    logger.info("Saved notification config to %s", path)
    return path


def _validate(model: type[_M], data: Any) -> _M:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ConfigValidationError(format_validation_error(exc)) from exc


def _write_private(path: Path, text: str) -> None:
    """Write ``text`` to a 0600 temp file beside ``path`` and rename it into place."""
    fd, tmp_name = tempfile.mkstemp(prefix=".config-", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
        os.chmod(tmp_name, 0o600)
        os.replace(tmp_name, path)
    except OSError:
        Path(tmp_name).unlink(missing_ok=True)
        raise
