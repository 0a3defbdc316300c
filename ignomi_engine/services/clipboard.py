"""
Clipboard Service - History buffer and system clipboard access.

The history is append-only: a new entry is added only when its content
differs from the most recent one, and the oldest entries are dropped once
the buffer exceeds its capacity.

System clipboard access goes through wl-paste / wl-copy (wl-clipboard).
"""

import subprocess
import time
from collections import deque
from dataclasses import dataclass
from typing import Iterator, Optional, Protocol

from loguru import logger

from ..errors import ClipboardError


def format_time_ago(captured_at: float, now: Optional[float] = None) -> str:
    """Coarse age of a capture: "just now", "5m ago", "2h ago", "3d ago"."""
    elapsed = max(0, int((now if now is not None else time.time()) - captured_at))
    if elapsed < 60:
        return "just now"
    if elapsed < 3600:
        return f"{elapsed // 60}m ago"
    if elapsed < 86400:
        return f"{elapsed // 3600}h ago"
    return f"{elapsed // 86400}d ago"


@dataclass(frozen=True)
class ClipboardEntry:
    """One captured clipboard value."""
    content: str
    captured_at: float

    def preview(self, max_chars: int = 60) -> str:
        """First line of the content, cut to max_chars."""
        lines = self.content.strip().splitlines()
        first_line = lines[0] if lines else ""
        if len(first_line) > max_chars:
            return first_line[:max_chars] + "..."
        return first_line

    def time_ago(self, now: Optional[float] = None) -> str:
        return format_time_ago(self.captured_at, now)


class ClipboardHistory:
    """Bounded, append-only clipboard history (oldest first)."""

    def __init__(self, capacity: int = 50):
        if capacity < 1:
            raise ValueError("Clipboard history capacity must be at least 1")
        self.capacity = capacity
        self._items: deque[ClipboardEntry] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[ClipboardEntry]:
        return iter(self._items)

    @property
    def latest(self) -> Optional[ClipboardEntry]:
        return self._items[-1] if self._items else None

    def check_and_add(self, content: Optional[str], now: Optional[float] = None) -> bool:
        """
        Append content if it is non-blank and differs from the latest entry.

        Returns:
            True if a new entry was added
        """
        if content is None or not content.strip():
            return False
        latest = self.latest
        if latest is not None and latest.content == content:
            return False

        self._items.append(ClipboardEntry(content=content, captured_at=now if now is not None else time.time()))
        return True

    def newest_first(self) -> list[ClipboardEntry]:
        return list(reversed(self._items))

    def search(self, query: str) -> list[ClipboardEntry]:
        """Case-insensitive substring search, newest first."""
        q = query.lower()
        return [entry for entry in self.newest_first() if q in entry.content.lower()]

    def contains(self, content: str, captured_at: float) -> bool:
        return any(
            entry.content == content and entry.captured_at == captured_at
            for entry in self._items
        )


class SystemClipboard(Protocol):
    """Read/write access to the platform clipboard."""

    def read(self) -> Optional[str]:
        ...

    def write(self, text: str) -> None:
        ...


class WaylandClipboard:
    """System clipboard via wl-clipboard (wl-paste / wl-copy)."""

    def __init__(self, timeout: float = 1.0):
        self.timeout = timeout

    def read(self) -> Optional[str]:
        """
        Return the current clipboard text.

        Raises:
            ClipboardError: wl-paste missing or timed out
        """
        try:
            result = subprocess.run(
                ["wl-paste", "--no-newline", "--type", "text"],
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise ClipboardError("wl-paste not found") from e
        except subprocess.TimeoutExpired as e:
            raise ClipboardError("wl-paste timed out") from e

        if result.returncode != 0:
            # Empty clipboard or no text offer
            return None
        return result.stdout

    def write(self, text: str) -> None:
        """
        Set the clipboard text.

        The text goes to wl-copy on stdin so content that looks like an
        option, or is longer than an argv entry allows, is copied verbatim.

        Raises:
            ClipboardError: wl-copy missing, timed out or exited non-zero
        """
        try:
            result = subprocess.run(
                ["wl-copy"],
                input=text,
                text=True,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise ClipboardError("wl-copy not found, cannot copy to clipboard") from e
        except subprocess.TimeoutExpired as e:
            raise ClipboardError("wl-copy timed out") from e
        except OSError as e:
            raise ClipboardError(f"wl-copy failed: {e}") from e

        if result.returncode != 0:
            raise ClipboardError(f"wl-copy exited with status {result.returncode}")
        logger.debug(f"Copied {len(text)} characters to clipboard")
