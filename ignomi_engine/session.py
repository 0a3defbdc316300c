"""
Session - The engine's single point of mutation.

A Session owns the provider registry and the last ranked result list.
Every public operation takes the session lock for its whole duration,
so a search never observes a half-finished reload and execute() always
resolves against the list the latest search stored.
"""

import threading
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from loguru import logger

from .config import commands_path, load_settings
from .errors import SessionClosedError
from .executor import Executor
from .search.candidate import Candidate, Outcome
from .search.provider import Provider
from .search.providers import (
    AppProvider,
    CalculatorProvider,
    ClipboardProvider,
    CommandProvider,
    QuicklinkProvider,
)
from .search.ranker import Ranker
from .services.app_index import AppLoader, scan_desktop_entries
from .services.clipboard import SystemClipboard

DEFAULT_MAX_QUERY_LENGTH = 256


class Session:
    """
    Query engine state for one launcher instance.

    Args:
        providers: Providers in registration order. Fixed for the session's
            lifetime; reload() rebuilds their indexes, not the set.
        max_query_length: Queries are cut to this many characters
    """

    def __init__(self, providers: Iterable[Provider], max_query_length: int = DEFAULT_MAX_QUERY_LENGTH):
        self._providers: tuple[Provider, ...] = tuple(providers)
        self._executor = Executor(self._providers)
        self._ranker = Ranker()
        self._lock = threading.Lock()
        self._last_results: tuple[Candidate, ...] = ()
        self._closed = False
        self.max_query_length = max_query_length

    @classmethod
    def create_default(
        cls,
        settings: Optional[Dict[str, Any]] = None,
        app_loader: Optional[AppLoader] = None,
        system_clipboard: Optional[SystemClipboard] = None,
        commands_file: Optional[Path] = None,
    ) -> "Session":
        """Build a session with the calculator, app, command, quicklink and clipboard providers."""
        settings = settings if settings is not None else load_settings()
        search = settings["search"]
        clipboard = settings["clipboard"]

        if app_loader is None:
            app_dirs = [Path(d) for d in settings["apps"].get("dirs", [])]
            app_loader = (lambda: scan_desktop_entries(app_dirs)) if app_dirs else scan_desktop_entries

        providers = [
            CalculatorProvider(),
            AppProvider(
                loader=app_loader,
                max_results=search["max_app_results"],
                fuzzy_threshold=search["fuzzy_threshold"],
            ),
            CommandProvider(commands_file or commands_path(settings)),
            QuicklinkProvider(settings.get("quicklinks") or None),
            ClipboardProvider(
                system_clipboard=system_clipboard,
                history_size=clipboard["history_size"],
                max_results=clipboard["max_results"],
                preview_chars=clipboard["preview_chars"],
            ),
        ]
        return cls(providers, max_query_length=search["max_query_length"])

    @property
    def providers(self) -> tuple[Provider, ...]:
        return self._providers

    @property
    def last_results(self) -> tuple[Candidate, ...]:
        with self._lock:
            return self._last_results

    @property
    def clipboard_history_size(self) -> int:
        with self._lock:
            provider = self._clipboard_provider()
            return len(provider.history) if provider else 0

    def search(self, query: str, max_results: int) -> tuple[Candidate, ...]:
        """
        Run a query through every provider and store the ranked results.

        An empty or whitespace-only query, or max_results <= 0, yields an
        empty result list without consulting any provider. The previous
        results are replaced in every case.
        """
        with self._lock:
            self._check_open()
            query = (query or "")[:self.max_query_length]

            if not query.strip() or max_results <= 0:
                self._last_results = ()
                return self._last_results

            matches = []
            for provider in self._providers:
                try:
                    provider_matches = provider.match(query)
                except Exception:
                    logger.exception(f"Provider '{provider.name}' failed matching {query!r}")
                    continue
                matches.extend(
                    (provider.priority, candidate, hint)
                    for candidate, hint in provider_matches
                )

            self._last_results = self._ranker.rank(matches, max_results)
            return self._last_results

    def result_count(self) -> int:
        with self._lock:
            self._check_open()
            return len(self._last_results)

    def execute(self, index: int) -> Outcome:
        """Execute the candidate at index in the most recent results."""
        with self._lock:
            if self._closed:
                return Outcome.error("Session is closed")
            return self._executor.execute(self._last_results, index)

    def reload(self) -> None:
        """Rebuild provider indexes. Clipboard history survives; results are cleared."""
        with self._lock:
            self._check_open()
            for provider in self._providers:
                try:
                    provider.reload()
                except Exception:
                    logger.exception(f"Provider '{provider.name}' failed to reload")
            self._last_results = ()

    def poll_clipboard(self) -> None:
        """Capture new system clipboard content into history."""
        with self._lock:
            self._check_open()
            provider = self._clipboard_provider()
            if provider is not None:
                provider.poll()

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._last_results = ()

    def _clipboard_provider(self) -> Optional[ClipboardProvider]:
        for provider in self._providers:
            if isinstance(provider, ClipboardProvider):
                return provider
        return None

    def _check_open(self) -> None:
        if self._closed:
            raise SessionClosedError("Session is closed")
