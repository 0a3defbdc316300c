"""
Ranker - Merges candidates from every provider into one ordered list.

Ordering:
  1. relevance hint, descending
  2. provider priority, ascending (Calculator > App > Command > Clipboard)
  3. original match order (stable sort)

The hint becomes the candidate's score. Empty queries never reach the
ranker; Session.search short-circuits them before any provider runs.
"""

import dataclasses
from typing import Iterable

from .candidate import Candidate
from .provider import MAX_RELEVANCE, MIN_RELEVANCE


class Ranker:
    """Scores and orders candidates from all providers."""

    def rank(
        self,
        matches: Iterable[tuple[int, Candidate, float]],
        max_results: int,
    ) -> tuple[Candidate, ...]:
        """
        Order candidates and truncate to max_results.

        Args:
            matches: (provider_priority, candidate, hint) triples, in provider
                registration order then match order
            max_results: Maximum number of candidates to return

        Returns:
            Tuple of candidates with score set, best first
        """
        if max_results <= 0:
            return ()

        scored = [
            (priority, dataclasses.replace(candidate, score=_clamp(hint)))
            for priority, candidate, hint in matches
        ]
        # list.sort is stable, so match order survives within a provider
        scored.sort(key=lambda item: (-item[1].score, item[0]))

        return tuple(candidate for _priority, candidate in scored[:max_results])


def _clamp(hint: float) -> float:
    return max(MIN_RELEVANCE, min(MAX_RELEVANCE, float(hint)))
