"""
Executor - Runs the candidate at an index of the current results.

Index and ownership checks happen before any provider is touched. Provider
failures come back as Outcome.error(...), never as exceptions.
"""

from typing import Iterable, Sequence

from loguru import logger

from .search.candidate import Candidate, CandidateKind, Outcome
from .search.provider import Provider


class Executor:
    """Dispatch execution to the provider that owns a candidate's kind."""

    def __init__(self, providers: Iterable[Provider]):
        self._owners: dict[CandidateKind, Provider] = {}
        for provider in providers:
            # First registered provider of a kind owns it
            self._owners.setdefault(provider.kind, provider)

    def owner_of(self, kind: CandidateKind) -> Provider | None:
        return self._owners.get(kind)

    def execute(self, results: Sequence[Candidate], index: int) -> Outcome:
        """
        Execute results[index].

        Args:
            results: The session's current result list
            index: 0-based position in results

        Returns:
            The provider's Outcome, or an Error outcome for a bad index,
            an unowned kind, or a provider failure
        """
        if isinstance(index, bool) or not isinstance(index, int):
            return Outcome.error(f"Invalid result index: {index!r}")
        if not 0 <= index < len(results):
            return Outcome.error(
                f"Invalid result index: {index} (have {len(results)} results)"
            )

        candidate = results[index]
        provider = self.owner_of(candidate.kind)
        if provider is None:
            return Outcome.error(f"No provider can run {candidate.kind.value} results")

        try:
            outcome = provider.execute(candidate)
        except Exception as e:
            logger.exception(f"Provider '{provider.name}' failed executing {candidate.title!r}")
            return Outcome.error(f"{candidate.title}: {e}" if str(e) else f"{candidate.title} failed")

        if not isinstance(outcome, Outcome):
            logger.warning(f"Provider '{provider.name}' returned {outcome!r} instead of an Outcome")
            return Outcome.error(f"{candidate.title}: no result from {provider.name}")
        return outcome
