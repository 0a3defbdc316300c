# Ignomi Engine Package
"""
Query engine for the Ignomi launcher.

Aggregates candidates from providers (applications, calculator, launcher
commands, clipboard history), ranks them into one list and executes the
candidate at a chosen position.
"""

from .search.candidate import Candidate, CandidateKind, Outcome, OutcomeKind
from .session import Session

__version__ = "0.1.0.dev0"

__all__ = ["Session", "Candidate", "CandidateKind", "Outcome", "OutcomeKind"]
