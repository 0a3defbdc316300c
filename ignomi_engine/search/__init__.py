"""
Search package - Candidate model, provider contract and ranking.

Queries fan out to every registered provider; the Ranker merges their
candidates into one deterministic, priority-tie-broken list.
"""

from .candidate import Candidate, CandidateKind, Outcome, OutcomeKind
from .provider import MAX_RELEVANCE, Provider
from .ranker import Ranker

__all__ = [
    "Candidate",
    "CandidateKind",
    "Outcome",
    "OutcomeKind",
    "Provider",
    "Ranker",
    "MAX_RELEVANCE",
]
