"""
Configuration models for notification methods.

A ``Settings`` document holds an ordered list of methods. Each method is a
variant of a tagged union keyed on ``type`` and carries its decoded payload,
so senders never re-parse raw JSON.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from notify_mcp.errors import ConfigValidationError

DEFAULT_TELEGRAM_API_BASE_URL = "https://api.telegram.org"
DEFAULT_NOTIFICATION_MESSAGE = "即将进行汇报，请注意查看..."


class MethodType(str, Enum):
    TELEGRAM = "telegram"
    OS = "os"


KNOWN_METHOD_TYPES = tuple(t.value for t in MethodType)


# ---------------------------------------------------------------------------
# Channel payloads
# ---------------------------------------------------------------------------


class TelegramConfig(BaseModel):
    """Bot API endpoint, chat and token for the Telegram channel."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    api_base_url: str = Field("", alias="apiBaseUrl")
    chat_id: str = Field("", alias="chatId")
    token: str = Field("", alias="token")

    @model_validator(mode="after")
    def _check_required(self) -> "TelegramConfig":
        if not self.api_base_url:
            raise ValueError("missing telegram api base url")
        if not self.chat_id:
            raise ValueError("missing telegram chat id")
        if not self.token:
            raise ValueError("missing telegram token")
        return self


class OSConfig(BaseModel):
    """Desktop notifications need no settings; the type tag is the whole config."""

    model_config = ConfigDict(frozen=True, extra="ignore")


ChannelConfig = Union[TelegramConfig, OSConfig]


# ---------------------------------------------------------------------------
# Methods (tagged union on ``type``)
# ---------------------------------------------------------------------------


class TelegramMethod(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["telegram"] = "telegram"
    config: TelegramConfig


class OSMethod(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["os"] = "os"
    config: OSConfig = Field(default_factory=OSConfig)

    @field_validator("config", mode="before")
    @classmethod
    def _ignore_payload(cls, value: Any) -> Any:
        return value if isinstance(value, (dict, OSConfig)) else {}


Method = Annotated[Union[TelegramMethod, OSMethod], Field(discriminator="type")]


class Settings(BaseModel):
    """Root configuration document."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    methods: list[Method] = Field(default_factory=list)
    notification_message: str = Field("", alias="notificationMessage")

    @field_validator("methods", mode="before")
    @classmethod
    def _check_types(cls, value: Any) -> Any:
        if value is None:
            return []
        if not isinstance(value, list):
            return value
        for index, item in enumerate(value):
            if not isinstance(item, dict):
                continue
            kind = item.get("type")
            if not kind:
                raise ValueError(f"method[{index}]: missing method type")
            if kind not in KNOWN_METHOD_TYPES:
                raise ValueError(f"method[{index}]: unsupported method type {kind!r}")
        return value

    @field_validator("notification_message", mode="before")
    @classmethod
    def _null_message(cls, value: Any) -> Any:
        return "" if value is None else value

    @model_validator(mode="after")
    def _unique_types(self) -> "Settings":
        seen: set[str] = set()
        for method in self.methods:
            if method.type in seen:
                raise ValueError(f"duplicate method type {method.type!r}")
            seen.add(method.type)
        return self

    @property
    def effective_notification_message(self) -> str:
        """Stored message, or the default body when it is blank."""
        if not self.notification_message.strip():
            return DEFAULT_NOTIFICATION_MESSAGE
        return self.notification_message

    @property
    def method_types(self) -> list[str]:
        return [m.type for m in self.methods]

    def get_method(self, method_type: str) -> TelegramMethod | OSMethod | None:
        for method in self.methods:
            if method.type == method_type:
                return method
        return None

    def to_document(self) -> dict[str, Any]:
        """Current-schema JSON document; an empty message is omitted."""
        document: dict[str, Any] = {
            "methods": [m.model_dump(mode="json", by_alias=True) for m in self.methods],
        }
        if self.notification_message:
            document["notificationMessage"] = self.notification_message
        return document

    def to_json(self) -> str:
        return json.dumps(self.to_document(), indent=2, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Construction and update helpers
# ---------------------------------------------------------------------------


def format_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic error into a single readable line."""
    parts = []
    for err in exc.errors():
        msg = err.get("msg", "invalid value")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts)


def new_telegram_method(
    chat_id: str,
    token: str,
    api_base_url: str | None = None,
) -> TelegramMethod:
    """Build a validated Telegram method, defaulting the API endpoint."""
    try:
        config = TelegramConfig(
            api_base_url=api_base_url or DEFAULT_TELEGRAM_API_BASE_URL,
            chat_id=chat_id,
            token=token,
        )
    except ValidationError as exc:
        raise ConfigValidationError(format_validation_error(exc)) from exc
    return TelegramMethod(config=config)


def new_os_method() -> OSMethod:
    return OSMethod()


def upsert_method(settings: Settings, method: TelegramMethod | OSMethod) -> Settings:
    """Replace the method of the same type in place, or append it."""
    methods = list(settings.methods)
    for index, existing in enumerate(methods):
        if existing.type == method.type:
            methods[index] = method
            break
    else:
        methods.append(method)
    return settings.model_copy(update={"methods": methods})


def remove_method(settings: Settings, method_type: str) -> tuple[Settings, bool]:
    """Drop the method of ``method_type``; the flag reports whether one existed."""
    methods = [m for m in settings.methods if m.type != method_type]
    if len(methods) == len(settings.methods):
        return settings, False
    return settings.model_copy(update={"methods": methods}), True
