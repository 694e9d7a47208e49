"""
CLI — entry point for notify-mcp.

Commands:
    notify-mcp               — Start the MCP stdio server (same as ``serve``)
    notify-mcp serve         — Start the MCP stdio server
    notify-mcp config        — Show or update notification methods
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import NoReturn, Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from notify_mcp import __version__
from notify_mcp.config import (
    MethodType,
    Settings,
    config_path,
    load_settings,
    new_os_method,
    new_telegram_method,
    remove_method,
    save_settings,
    upsert_method,
)
from notify_mcp.errors import NotConfiguredError, NotifyError

# stdout carries JSON-RPC while serving
err_console = Console(stderr=True)

logger = logging.getLogger("notify_mcp")


def _configure_logging(verbose: bool) -> None:
    if logger.handlers:
        return
    handler = RichHandler(console=err_console, show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False


def _fail(message: str) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {escape(message)}", soft_wrap=True)
    sys.exit(1)


def _setup_hint() -> str:
    return (
        "no notification methods configured yet; run "
        "`notify-mcp config --method telegram --chat-id ... --token ... [--api-url ...]` "
        "or `notify-mcp config --method os`"
    )


@click.group(invoke_without_command=True)
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging on stderr")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """notify-mcp — task notifications for AI agents over MCP."""
    _configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        _serve()


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------


@main.command()
def serve() -> None:
    """Start the MCP stdio server (requires a saved configuration)."""
    _serve()


def _serve() -> None:
    from notify_mcp.mcp import MCPServer, NotifyHandler
    from notify_mcp.notifications import Dispatcher
    from notify_mcp.notifications.channels import default_senders

    try:
        settings = load_settings()
    except NotConfiguredError:
        _fail(_setup_hint())
    except NotifyError as exc:
        _fail(str(exc))

    if not settings.methods:
        _fail("notification config is empty; add at least one method with `notify-mcp config --method ...`")

    logger.info("Loaded config from %s", config_path())
    logger.info("Enabled notification methods: %s", ", ".join(settings.method_types))

    server = MCPServer(NotifyHandler(Dispatcher(default_senders())))
    asyncio.run(server.serve())


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@main.command(name="config")
@click.option("--method", "method", default="", help="Notification method to configure (telegram / os)")
@click.option("--api-url", "api_url", default="", help="Telegram API base URL (default https://api.telegram.org)")
@click.option("--chat-id", "chat_id", default="", help="Telegram chat ID")
@click.option("--token", default="", help="Telegram bot token")
@click.option("--message", default=None, help="Notification body text")
@click.option("--remove", is_flag=True, help="Remove the given notification method")
def config_cmd(
    method: str,
    api_url: str,
    chat_id: str,
    token: str,
    message: Optional[str],
    remove: bool,
) -> None:
    """Show the current configuration, or update it with the options below."""
    try:
        _run_config(method, api_url, chat_id, token, message, remove)
    except NotifyError as exc:
        _fail(str(exc))


def _run_config(
    method: str,
    api_url: str,
    chat_id: str,
    token: str,
    message: Optional[str],
    remove: bool,
) -> None:
    telegram_flags = bool(api_url or chat_id or token)
    method_change = bool(method) or telegram_flags or remove

    if not method_change and message is None:
        _show_config()
        return

    if method_change and not method:
        _fail("--method is required when changing notification methods")

    try:
        settings = load_settings()
    except NotConfiguredError:
        if remove:
            _fail("no notification methods configured yet, nothing to remove")
        settings = Settings()

    if method_change:
        if remove:
            if telegram_flags:
                _fail("--api-url/--chat-id/--token are not used with --remove")
            settings, removed = remove_method(settings, method)
            if not removed:
                _fail(f"notification method {method} is not configured")
        elif method == MethodType.TELEGRAM.value:
            if not chat_id or not token:
                _fail("telegram requires --chat-id and --token (optional --api-url)")
            settings = upsert_method(settings, new_telegram_method(chat_id, token, api_url or None))
        elif method == MethodType.OS.value:
            if telegram_flags:
                _fail("os notifications do not take --api-url/--chat-id/--token")
            settings = upsert_method(settings, new_os_method())
        else:
            _fail(f"unsupported notification method: {method}")

    if message is not None:
        settings = settings.model_copy(update={"notification_message": message})

    if not settings.methods:
        _fail("configure at least one notification method (e.g. telegram or os)")

    save_settings(settings)
    err_console.print("[green]>[/green] 配置已保存。")


def _show_config() -> None:
    try:
        settings = load_settings()
    except NotConfiguredError:
        _fail(_setup_hint())
    click.echo(settings.to_json())


if __name__ == "__main__":
    main()
