# Ignomi Engine Services Package
"""
Backend services for the Ignomi engine.

Services own platform-facing state: the application index and process
launching, the clipboard history and system clipboard access.
"""

from .app_index import AppEntry, AppIndex
from .clipboard import ClipboardHistory, WaylandClipboard

__all__ = ["AppEntry", "AppIndex", "ClipboardHistory", "WaylandClipboard"]
