"""
Exception hierarchy for notify-mcp.
"""


class NotifyError(Exception):
    """Base exception for all notify-mcp errors."""

    pass


class NotConfiguredError(NotifyError):
    """Raised when no configuration file exists yet."""

    def __init__(self, message: str = "notification configuration not found"):
        super().__init__(message)


class ConfigValidationError(NotifyError):
    """Raised when a stored or supplied configuration is incomplete or malformed."""

    pass


class ConfigDecodeError(NotifyError):
    """Raised when the configuration document cannot be parsed."""

    pass


class ConfigIOError(NotifyError):
    """Raised when the configuration file cannot be read or written."""

    pass


class ConfigPathError(NotifyError):
    """Raised when no per-user configuration directory can be resolved."""

    pass


class ChannelError(NotifyError):
    """Raised by a channel sender when a single delivery attempt fails."""

    def __init__(self, channel: str, message: str):
        super().__init__(f"{channel}: {message}")
        self.channel = channel
        self.reason = message
