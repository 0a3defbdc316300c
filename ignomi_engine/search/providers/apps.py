"""
App Provider - Application search with prefix, substring and fuzzy tiers.

Relevance tiers (a stronger tier always outranks a weaker one):
  name prefix     0.90
  name substring  0.75
  alias/keyword   0.60
  fuzzy name      0.50 * WRatio / 100  (rapidfuzz, below 0.60 by construction)

Within a tier, candidates keep index order (name-sorted).
"""

from typing import Optional

from loguru import logger
from rapidfuzz import fuzz

from ...errors import LaunchError
from ...services.app_index import AppEntry, AppIndex, AppLoader, launch
from ..candidate import AppPayload, Candidate, CandidateKind, Outcome
from ..provider import Match, Provider

PREFIX_RELEVANCE = 0.9
SUBSTRING_RELEVANCE = 0.75
ALIAS_RELEVANCE = 0.6
FUZZY_RELEVANCE = 0.5


class AppProvider(Provider):
    """Search installed applications."""

    name = "apps"
    kind = CandidateKind.APP
    priority = 200

    def __init__(
        self,
        loader: Optional[AppLoader] = None,
        max_results: int = 30,
        fuzzy_threshold: int = 60,
    ):
        self.index = AppIndex(loader)
        self.max_results = max_results
        self.fuzzy_threshold = fuzzy_threshold

    def match(self, query: str) -> list[Match]:
        q = query.strip().lower()
        if not q:
            return []

        # One snapshot per query; reload() may swap the index afterwards
        entries = self.index.entries
        tiers: dict[float, list[AppEntry]] = {
            PREFIX_RELEVANCE: [],
            SUBSTRING_RELEVANCE: [],
            ALIAS_RELEVANCE: [],
        }
        fuzzy: list[tuple[AppEntry, float]] = []

        for entry in entries:
            name = entry.name.lower()
            if name.startswith(q):
                tiers[PREFIX_RELEVANCE].append(entry)
            elif q in name:
                tiers[SUBSTRING_RELEVANCE].append(entry)
            elif any(q in keyword for keyword in entry.keywords):
                tiers[ALIAS_RELEVANCE].append(entry)
            else:
                ratio = fuzz.WRatio(q, name, score_cutoff=self.fuzzy_threshold)
                if ratio:
                    fuzzy.append((entry, FUZZY_RELEVANCE * ratio / 100))

        results = [
            (self._to_candidate(entry), hint)
            for hint, tier_entries in tiers.items()
            for entry in tier_entries
        ]
        # sorted() is stable: equal fuzzy scores keep index order
        fuzzy.sort(key=lambda item: -item[1])
        results.extend((self._to_candidate(entry), hint) for entry, hint in fuzzy)

        return results[:self.max_results]

    def execute(self, candidate: Candidate) -> Outcome:
        app = candidate.payload
        try:
            launch(app.name, app.exec)
        except LaunchError as e:
            logger.warning(f"Launch failed for {app.id}: {e}")
            return Outcome.error(str(e))
        return Outcome.success()

    def reload(self) -> None:
        self.index.reload()

    def _to_candidate(self, entry: AppEntry) -> Candidate:
        return Candidate(
            kind=CandidateKind.APP,
            payload=AppPayload(
                id=entry.id,
                name=entry.name,
                exec=entry.exec,
                icon=entry.icon,
                description=entry.description,
            ),
        )
