"""
IconResource — the bundled notification icon as a real file on disk.

Native notifiers want a filesystem path, so the packaged PNG is written to a
temp file on first use. The temp file may be cleaned up by the OS while the
server is running; every lookup probes for it and rewrites it when missing.
"""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from importlib import resources
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def _bundled_icon() -> bytes:
    return (resources.files("notify_mcp") / "assets" / "icon.png").read_bytes()


class IconResource:
    """Thread-safe, self-healing temp file holding the icon bytes."""

    def __init__(self, data: Optional[bytes] = None, prefix: str = "notify-mcp-icon-") -> None:
        self._data = data
        self._prefix = prefix
        self._path: Optional[Path] = None
        self._lock = threading.Lock()

    def path(self) -> Path:
        current = self._path
        if current is not None and current.exists():
            return current

        with self._lock:
            # another thread may have written it while we waited
            if self._path is not None and self._path.exists():
                return self._path
            if self._path is not None:
                logger.debug("Icon file %s disappeared, rewriting", self._path)
            self._path = self._materialize()
            return self._path

    def _materialize(self) -> Path:
        if self._data is None:
            self._data = _bundled_icon()
        fd, name = tempfile.mkstemp(prefix=self._prefix, suffix=".png")
        with os.fdopen(fd, "wb") as fh:
            fh.write(self._data)
        return Path(name).resolve()
