"""
Candidate Model - Normalized search results and execution outcomes.

Every provider emits Candidates. A Candidate is a kind tag plus the one
payload type that kind requires; the Ranker fills in the score. Outcomes
are the uniform result of executing a Candidate.
"""

import urllib.parse
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Optional, Union

from ..services.clipboard import format_time_ago

QUERY_PLACEHOLDER = "{query}"


class CandidateKind(Enum):
    """Which provider variant produced a candidate."""
    APP = "App"
    CALCULATION = "Calculation"
    CLIPBOARD_ITEM = "ClipboardItem"
    COMMAND = "Command"
    QUICKLINK = "Quicklink"


@dataclass(frozen=True)
class AppPayload:
    id: str
    name: str
    exec: str
    icon: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class CalculationPayload:
    expression: str
    result: Optional[str]  # None while the expression is incomplete


@dataclass(frozen=True)
class ClipboardPayload:
    content: str
    captured_at: float
    preview: str


@dataclass(frozen=True)
class CommandPayload:
    id: str
    name: str
    description: str = ""
    exec: Optional[str] = None
    keyword: Optional[str] = None  # set for aliases


@dataclass(frozen=True)
class QuicklinkPayload:
    keyword: str
    name: str
    url: str
    query: Optional[str] = None
    resolved_url: Optional[str] = None  # url with {query} filled in

    @property
    def has_query(self) -> bool:
        return QUERY_PLACEHOLDER in self.url


Payload = Union[AppPayload, CalculationPayload, ClipboardPayload, CommandPayload, QuicklinkPayload]

PAYLOAD_TYPES = {
    CandidateKind.APP: AppPayload,
    CandidateKind.CALCULATION: CalculationPayload,
    CandidateKind.CLIPBOARD_ITEM: ClipboardPayload,
    CandidateKind.COMMAND: CommandPayload,
    CandidateKind.QUICKLINK: QuicklinkPayload,
}


@dataclass(frozen=True)
class Candidate:
    """A single rankable search result from any provider."""
    kind: CandidateKind
    payload: Payload
    score: float = 0.0

    def __post_init__(self):
        if not isinstance(self.kind, CandidateKind):
            raise TypeError(f"Candidate kind must be a CandidateKind, got {self.kind!r}")
        expected = PAYLOAD_TYPES[self.kind]
        if type(self.payload) is not expected:
            raise TypeError(
                f"{self.kind.value} candidate needs {expected.__name__}, "
                f"got {type(self.payload).__name__}"
            )

    @property
    def title(self) -> str:
        """Primary display line."""
        p = self.payload
        if self.kind is CandidateKind.CALCULATION:
            return f"= {p.result}" if p.result is not None else "Keep typing..."
        if self.kind is CandidateKind.CLIPBOARD_ITEM:
            return p.preview
        return p.name

    @property
    def subtitle(self) -> str:
        """Secondary display line."""
        p = self.payload
        if self.kind is CandidateKind.CALCULATION:
            return p.expression
        if self.kind is CandidateKind.CLIPBOARD_ITEM:
            return format_time_ago(p.captured_at)
        if self.kind is CandidateKind.QUICKLINK:
            return urllib.parse.urlsplit(p.resolved_url or p.url).netloc or p.url
        return p.description or ""

    def to_dict(self) -> dict:
        """Caller-visible shape: {"type": <kind tag>, "data": {...}}."""
        return {"type": self.kind.value, "data": asdict(self.payload)}


class OutcomeKind(Enum):
    SUCCESS = "Success"
    ERROR = "Error"
    NEEDS_INPUT = "NeedsInput"
    OPEN_SETTINGS = "OpenSettings"
    QUIT = "Quit"


@dataclass(frozen=True)
class Outcome:
    """Result of executing a candidate. Only ERROR carries a message."""
    kind: OutcomeKind
    message: Optional[str] = None

    def __post_init__(self):
        if self.kind is OutcomeKind.ERROR:
            if not self.message:
                raise ValueError("Error outcomes need a message")
        elif self.message is not None:
            raise ValueError(f"{self.kind.value} outcomes carry no message")

    @classmethod
    def success(cls) -> "Outcome":
        return cls(OutcomeKind.SUCCESS)

    @classmethod
    def error(cls, message: str) -> "Outcome":
        return cls(OutcomeKind.ERROR, message or "Unknown error")

    @classmethod
    def needs_input(cls) -> "Outcome":
        return cls(OutcomeKind.NEEDS_INPUT)

    @classmethod
    def open_settings(cls) -> "Outcome":
        return cls(OutcomeKind.OPEN_SETTINGS)

    @classmethod
    def quit(cls) -> "Outcome":
        return cls(OutcomeKind.QUIT)

    @property
    def is_error(self) -> bool:
        return self.kind is OutcomeKind.ERROR

    def to_dict(self) -> dict:
        data = {"result": self.kind.value}
        if self.message is not None:
            data["message"] = self.message
        return data
