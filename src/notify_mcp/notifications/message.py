"""
Message composition for the notify tool.
"""

from __future__ import annotations

from datetime import datetime

DEFAULT_TASK_NAME = "当前任务"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def compose_message(task_name: str | None, body: str, now: datetime) -> str:
    """Timestamp, task label and body, one per line."""
    label = (task_name or "").strip() or DEFAULT_TASK_NAME
    return f"时间：{now.strftime(TIMESTAMP_FORMAT)}\n任务：{label}\n{body}"
