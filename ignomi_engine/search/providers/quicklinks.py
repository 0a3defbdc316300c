"""
Quicklink Provider - Keyword-triggered URLs and web searches.

A quicklink is a keyword, a display name and a URL. URLs containing
{query} are search templates: "g rust lifetimes" resolves the "g" link
with the rest of the query URL-encoded into the placeholder.

Quicklinks are configurable via settings.toml:

    [quicklinks.g]
    name = "Google"
    url = "https://www.google.com/search?q={query}"

    [quicklinks.nix]
    name = "NixOS Search"
    url = "https://search.nixos.org/packages?query={query}"

Resolved URLs are opened with xdg-open.
"""

import subprocess
import urllib.parse
from typing import Optional

from loguru import logger

from ..candidate import Candidate, CandidateKind, Outcome, QuicklinkPayload
from ..provider import Match, Provider

KEYWORD_RELEVANCE = 0.95
PENDING_RELEVANCE = 0.9
PARTIAL_RELEVANCE = 0.5

# Used when settings.toml defines no [quicklinks]
DEFAULT_QUICKLINKS = {
    "g": {"name": "Google", "url": "https://www.google.com/search?q={query}"},
    "w": {"name": "Wikipedia", "url": "https://en.wikipedia.org/w/index.php?search={query}"},
    "gh": {"name": "GitHub", "url": "https://github.com/search?q={query}"},
    "yt": {"name": "YouTube", "url": "https://www.youtube.com/results?search_query={query}"},
}


def resolve_url(url: str, query: str) -> str:
    return url.replace("{query}", urllib.parse.quote_plus(query))


def parse_quicklinks(table: dict) -> tuple[QuicklinkPayload, ...]:
    """Build quicklinks from a {keyword: {name, url}} table, skipping malformed entries."""
    links = []
    for keyword, link in sorted(table.items()):
        keyword = str(keyword).strip()
        if not keyword or " " in keyword:
            logger.warning(f"Skipping quicklink with invalid keyword {keyword!r}")
            continue
        if not isinstance(link, dict) or not isinstance(link.get("url"), str) or not link["url"].strip():
            logger.warning(f"Skipping malformed quicklink '{keyword}': missing 'url' field")
            continue
        links.append(QuicklinkPayload(
            keyword=keyword,
            name=str(link.get("name") or keyword),
            url=link["url"].strip(),
        ))
    return tuple(links)


class QuicklinkProvider(Provider):
    """Open configured URLs and search templates by keyword."""

    name = "quicklinks"
    kind = CandidateKind.QUICKLINK
    priority = 350

    def __init__(self, links: Optional[dict] = None):
        self.links = parse_quicklinks(DEFAULT_QUICKLINKS if links is None else links)

    def match(self, query: str) -> list[Match]:
        q = query.strip()
        if not q:
            return []

        parts = q.split(None, 1)
        keyword = parts[0].lower()
        rest = parts[1].strip() if len(parts) > 1 else ""
        q_lower = q.lower()

        results = []
        for link in self.links:
            link_keyword = link.keyword.lower()
            if link_keyword == keyword:
                if link.has_query and rest:
                    results.append((self._to_candidate(
                        link, name=f"{link.name}: {rest}", query=rest,
                        resolved_url=resolve_url(link.url, rest),
                    ), KEYWORD_RELEVANCE))
                elif link.has_query:
                    results.append((self._to_candidate(
                        link, name=f"{link.name} (type to search)",
                    ), PENDING_RELEVANCE))
                else:
                    results.append((self._to_candidate(link), KEYWORD_RELEVANCE))
            elif link_keyword.startswith(keyword) or q_lower in link.name.lower():
                results.append((self._to_candidate(link), PARTIAL_RELEVANCE))
        return results

    def execute(self, candidate: Candidate) -> Outcome:
        link = candidate.payload
        if link.resolved_url:
            return self._open_url(link.resolved_url)
        if link.has_query:
            return Outcome.needs_input()
        return self._open_url(link.url)

    def _open_url(self, url: str) -> Outcome:
        """Open URL in the default browser via xdg-open."""
        try:
            subprocess.Popen(
                ["xdg-open", url],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except FileNotFoundError:
            logger.warning("xdg-open not found, cannot open URL")
            return Outcome.error("xdg-open not found, cannot open URL")
        except OSError as e:
            logger.exception(f"Failed to open {url}")
            return Outcome.error(f"Failed to open {url}: {e}")
        logger.debug(f"Opened {url}")
        return Outcome.success()

    def _to_candidate(self, link: QuicklinkPayload, **changes) -> Candidate:
        payload = QuicklinkPayload(
            keyword=link.keyword,
            name=changes.get("name", link.name),
            url=link.url,
            query=changes.get("query"),
            resolved_url=changes.get("resolved_url"),
        )
        return Candidate(kind=CandidateKind.QUICKLINK, payload=payload)
