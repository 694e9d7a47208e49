"""
MCP stdio server exposing the ``notify`` tool.

Wire format: newline-delimited JSON-RPC 2.0 over stdin/stdout. stdout
carries protocol messages only; all logging goes to stderr.

Tool calls run as tasks so a ``notifications/cancelled`` message from the
host can cancel an in-flight notify call.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import IO, Any, Optional

from notify_mcp import __version__
from notify_mcp.mcp.handler import NotifyHandler
from notify_mcp.notifications.message import DEFAULT_TASK_NAME

logger = logging.getLogger(__name__)

SERVER_NAME = "notify-mcp"
PROTOCOL_VERSION = "2025-06-18"
SUPPORTED_PROTOCOL_VERSIONS = ("2024-11-05", "2025-03-26", "2025-06-18")

TOOL_NAME = "notify"
TASK_NAME_PARAM = "taskName"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

NOTIFY_TOOL: dict[str, Any] = {
    "name": TOOL_NAME,
    "title": "notify",
    "description": "向已配置的渠道发送通知",
    "inputSchema": {
        "type": "object",
        "properties": {
            TASK_NAME_PARAM: {
                "type": "string",
                "description": "当前执行任务的缩略标题",
                "default": DEFAULT_TASK_NAME,
            },
        },
    },
    "annotations": {
        "title": "notify",
        "destructiveHint": False,
    },
}


def _response(req_id: Any, result: dict[str, Any]) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": req_id, "result": result}


def _error(req_id: Any, code: int, message: str) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": req_id, "error": {"code": code, "message": message}}


def _valid_id(req_id: Any) -> bool:
    return isinstance(req_id, (str, int)) and not isinstance(req_id, bool)


class MCPServer:
    """Serves the notify tool to a single MCP host."""

    def __init__(self, handler: NotifyHandler) -> None:
        self.handler = handler
        self._inflight: dict[Any, asyncio.Task] = {}

    # ------------------------------------------------------------------
    # Message handling
    # ------------------------------------------------------------------

    async def handle_message(self, msg: Any) -> Optional[dict[str, Any]]:
        """Handle one JSON-RPC message. Returns a response, or None for notifications."""
        if not isinstance(msg, dict):
            return _error(None, INVALID_REQUEST, "Invalid Request")

        method = msg.get("method", "")
        req_id = msg.get("id")
        params = msg.get("params") or {}

        if req_id is None:
            if method == "notifications/cancelled" and isinstance(params, dict):
                self.cancel(params.get("requestId"))
            return None

        if not _valid_id(req_id):
            return _error(None, INVALID_REQUEST, "Invalid Request: id must be a string or integer")
        if not isinstance(params, dict):
            return _error(req_id, INVALID_REQUEST, "Invalid Request: params must be an object")

        if method == "initialize":
            requested = params.get("protocolVersion")
            version = requested if requested in SUPPORTED_PROTOCOL_VERSIONS else PROTOCOL_VERSION
            return _response(req_id, {
                "protocolVersion": version,
                "capabilities": {"tools": {"listChanged": False}},
                "serverInfo": {"name": SERVER_NAME, "version": __version__},
            })

        if method == "ping":
            return _response(req_id, {})

        if method == "tools/list":
            return _response(req_id, {"tools": [NOTIFY_TOOL]})

        if method == "tools/call":
            return await self._call_tool(req_id, params)

        return _error(req_id, METHOD_NOT_FOUND, f"Method not found: {method}")

    async def _call_tool(self, req_id: Any, params: dict[str, Any]) -> dict[str, Any]:
        name = params.get("name", "")
        if name != TOOL_NAME:
            return _error(req_id, INVALID_PARAMS, f"Unknown tool: {name}")

        arguments = params.get("arguments") or {}
        if not isinstance(arguments, dict):
            return _error(req_id, INVALID_PARAMS, "arguments must be an object")
        task_name = arguments.get(TASK_NAME_PARAM, DEFAULT_TASK_NAME)
        if not isinstance(task_name, str):
            return _error(req_id, INVALID_PARAMS, f"{TASK_NAME_PARAM} must be a string")

        try:
            result = await self.handler(task_name)
        except Exception as exc:
            logger.exception("notify tool crashed")
            return _response(req_id, {
                "content": [{"type": "text", "text": f"内部错误: {exc}"}],
                "isError": True,
            })
        return _response(req_id, result.to_content())

    async def safe_handle(self, msg: Any) -> Optional[dict[str, Any]]:
        """handle_message, with unexpected exceptions turned into an error response."""
        try:
            return await self.handle_message(msg)
        except Exception as exc:
            logger.exception("Failed to handle message")
            req_id = msg.get("id") if isinstance(msg, dict) else None
            if req_id is None:
                return None
            return _error(req_id if _valid_id(req_id) else None, INTERNAL_ERROR, f"Internal error: {exc}")

    def cancel(self, req_id: Any) -> bool:
        if not _valid_id(req_id):
            return False
        task = self._inflight.get(req_id)
        if task is None or task.done():
            return False
        logger.info("Host cancelled request %s", req_id)
        task.cancel()
        return True

    # ------------------------------------------------------------------
    # stdio loop
    # ------------------------------------------------------------------

    async def serve(
        self,
        reader: Optional[IO[str]] = None,
        writer: Optional[IO[str]] = None,
    ) -> None:
        """Read requests until EOF, then wait for in-flight tool calls."""
        reader = reader or sys.stdin
        writer = writer or sys.stdout
        loop = asyncio.get_running_loop()
        logger.info("%s %s waiting for host on stdio", SERVER_NAME, __version__)

        while True:
            line = await loop.run_in_executor(None, reader.readline)
            if not line:
                break
            line = line.strip()
            if not line:
                continue

            try:
                msg = json.loads(line)
            except json.JSONDecodeError:
                self._write(writer, _error(None, PARSE_ERROR, "Parse error"))
                continue

            if (
                isinstance(msg, dict)
                and msg.get("method") == "tools/call"
                and _valid_id(msg.get("id"))
                and msg.get("id") not in self._inflight
            ):
                self._spawn(msg, writer)
                continue

            resp = await self.safe_handle(msg)
            if resp is not None:
                self._write(writer, resp)

        if self._inflight:
            await asyncio.gather(*self._inflight.values(), return_exceptions=True)
        logger.info("stdin closed, shutting down")

    def _spawn(self, msg: dict[str, Any], writer: IO[str]) -> None:
        req_id = msg["id"]

        async def run() -> None:
            try:
                resp = await self.safe_handle(msg)
            except asyncio.CancelledError:
                logger.info("Request %s cancelled, no response sent", req_id)
                return
            finally:
                self._inflight.pop(req_id, None)
            if resp is not None:
                self._write(writer, resp)

        self._inflight[req_id] = asyncio.create_task(run())

    @staticmethod
    def _write(writer: IO[str], msg: dict[str, Any]) -> None:
        writer.write(json.dumps(msg, ensure_ascii=False, separators=(",", ":")) + "\n")
        writer.flush()
