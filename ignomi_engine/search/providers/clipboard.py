"""
Clipboard Provider - Search and re-apply clipboard history.

Two ways to match:
  clip / clipboard / paste / history [filter]  → history listing (0.8)
  anything else                                → substring match (0.4)

Results are newest first. poll() is the only way new content enters the
history; it is driven by the caller, never by a timer.
"""

from typing import Optional

from loguru import logger

from ...errors import ClipboardError
from ...services.clipboard import ClipboardEntry, ClipboardHistory, SystemClipboard, WaylandClipboard
from ..candidate import Candidate, CandidateKind, ClipboardPayload, Outcome
from ..provider import Match, Provider

KEYWORDS = {"clip", "clipboard", "paste", "history"}
KEYWORD_RELEVANCE = 0.8
SUBSTRING_RELEVANCE = 0.4


class ClipboardProvider(Provider):
    """Clipboard history as search results."""

    name = "clipboard"
    kind = CandidateKind.CLIPBOARD_ITEM
    priority = 400

    def __init__(
        self,
        system_clipboard: Optional[SystemClipboard] = None,
        history_size: int = 50,
        max_results: int = 10,
        preview_chars: int = 60,
    ):
        self.system_clipboard = system_clipboard or WaylandClipboard()
        self.history = ClipboardHistory(history_size)
        self.max_results = max_results
        self.preview_chars = preview_chars

    def match(self, query: str) -> list[Match]:
        q = query.strip()
        if not q:
            return []

        keyword, _, rest = q.partition(" ")
        if keyword.lower() in KEYWORDS:
            rest = rest.strip()
            entries = self.history.search(rest) if rest else self.history.newest_first()
            hint = KEYWORD_RELEVANCE
        else:
            entries = self.history.search(q)
            hint = SUBSTRING_RELEVANCE

        return [(self._to_candidate(entry), hint) for entry in entries[:self.max_results]]

    def execute(self, candidate: Candidate) -> Outcome:
        item = candidate.payload
        if not self.history.contains(item.content, item.captured_at):
            return Outcome.error("Clipboard entry no longer exists")

        try:
            self.system_clipboard.write(item.content)
        except ClipboardError as e:
            logger.warning(f"Could not restore clipboard entry: {e}")
            return Outcome.error(str(e))
        return Outcome.success()

    def poll(self) -> bool:
        """
        Capture the current system clipboard into history.

        Returns:
            True if a new entry was added
        """
        try:
            content = self.system_clipboard.read()
        except ClipboardError as e:
            logger.debug(f"Clipboard poll skipped: {e}")
            return False

        added = self.history.check_and_add(content)
        if added:
            logger.debug(f"Clipboard history now holds {len(self.history)} entries")
        return added

    def _to_candidate(self, entry: ClipboardEntry) -> Candidate:
        return Candidate(
            kind=CandidateKind.CLIPBOARD_ITEM,
            payload=ClipboardPayload(
                content=entry.content,
                captured_at=entry.captured_at,
                preview=entry.preview(self.preview_chars),
            ),
        )
