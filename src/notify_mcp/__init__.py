"""notify-mcp — send task notifications to configured channels from an AI agent."""

__version__ = "0.1.0"
