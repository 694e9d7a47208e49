"""
Dispatcher — fans a composed message out to every configured method.

All methods are attempted concurrently, each under its own timeout. A
failing channel never stops the others; results are aggregated into a
``DispatchOutcome`` that succeeds when at least one channel delivered.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from notify_mcp.config.models import Settings
from notify_mcp.notifications.channel import ChannelSender

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0

_PENDING = object()


@dataclass
class ChannelFailure:
    channel: str
    error: str


@dataclass
class DispatchOutcome:
    """Per-channel results of one dispatch, in configured method order."""

    succeeded: list[str] = field(default_factory=list)
    failed: list[ChannelFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return bool(self.succeeded)

    @property
    def failed_channels(self) -> list[str]:
        return [f.channel for f in self.failed]

    def summary(self) -> str:
        text = f"通知成功，成功渠道: {', '.join(self.succeeded)}"
        if self.failed:
            text += f"；失败渠道: {', '.join(self.failed_channels)}"
        return text


class Dispatcher:
    """Sends one message through every method of a ``Settings`` document."""

    def __init__(
        self,
        senders: Iterable[ChannelSender],
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.senders: dict[str, ChannelSender] = {s.kind: s for s in senders}
        self.timeout = timeout

    async def dispatch(self, settings: Settings, message: str) -> DispatchOutcome:
        methods = list(settings.methods)
        if not methods:
            logger.warning("No notification methods configured, nothing dispatched")
            return DispatchOutcome()

        slots: list[object] = [_PENDING] * len(methods)

        async def attempt(index: int) -> None:
            slots[index] = await self._attempt(methods[index].type, methods[index].config, message)

        try:
            await asyncio.gather(*(attempt(i) for i in range(len(methods))))
        except asyncio.CancelledError:
            partial = self._collect(methods, slots)
            logger.warning(
                "Dispatch cancelled; completed: succeeded=%s failed=%s",
                partial.succeeded,
                partial.failed_channels,
            )
            raise

        outcome = self._collect(methods, slots)
        logger.info(
            "Dispatch finished: succeeded=%s failed=%s",
            outcome.succeeded,
            outcome.failed_channels,
        )
        return outcome

    async def _attempt(self, kind: str, config, message: str) -> Optional[str]:
        """Run one sender. Returns None on success, else the failure reason."""
        sender = self.senders.get(kind)
        if sender is None:
            reason = f"unknown notification method: {kind}"
        else:
            try:
                await asyncio.wait_for(sender.send(config, message), timeout=self.timeout)
            except asyncio.TimeoutError:
                reason = f"timed out after {self.timeout:g}s"
            except Exception as exc:
                reason = str(exc) or exc.__class__.__name__
            else:
                logger.info("Notification via %s sent: %s", kind, message)
                return None

        logger.warning("Notification via %s failed: %s", kind, reason)
        return reason

    @staticmethod
    def _collect(methods: list, slots: list[object]) -> DispatchOutcome:
        outcome = DispatchOutcome()
        for method, result in zip(methods, slots):
            if result is _PENDING:
                continue
            if result is None:
                outcome.succeeded.append(method.type)
            else:
                outcome.failed.append(ChannelFailure(channel=method.type, error=str(result)))
        return outcome
