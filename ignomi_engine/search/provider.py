"""
Provider - Base class for all candidate sources.

Each provider declares a kind, a tie-break priority (lower = wins ties)
and two capabilities: match() produces candidates with relevance hints
for a query, execute() performs the action for one of its candidates.
match() must never mutate provider state.
"""

from abc import ABC, abstractmethod

from .candidate import Candidate, CandidateKind, Outcome

MAX_RELEVANCE = 1.0
MIN_RELEVANCE = 0.0

Match = tuple[Candidate, float]


class Provider(ABC):
    """Base class for all search providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider identifier."""
        ...

    @property
    @abstractmethod
    def kind(self) -> CandidateKind:
        """The candidate kind this provider produces and executes."""
        ...

    @property
    @abstractmethod
    def priority(self) -> int:
        """Tie-break order between equal relevance hints. Lower wins."""
        ...

    @abstractmethod
    def match(self, query: str) -> list[Match]:
        """Return (candidate, relevance_hint) pairs for the query."""
        ...

    @abstractmethod
    def execute(self, candidate: Candidate) -> Outcome:
        """Perform the candidate's action."""
        ...

    def reload(self) -> None:
        """Rebuild internal indexes. Most providers have none."""
