"""
Calculator Provider - Inline math evaluation in search.

Any query that looks like arithmetic is evaluated; a leading "=" forces
evaluation even without digits (e.g. "= pi"). Uses simpleeval for safe
expression evaluation (no access to builtins, filesystem, or imports).
"^" is treated as exponentiation.

Incomplete input such as "2+" or "(3*4" still yields a candidate, with no
result; executing it asks the caller for more input.
"""

import math
import re
from typing import Optional

from loguru import logger
from simpleeval import InvalidExpression, simple_eval

from ..candidate import CalculationPayload, Candidate, CandidateKind, Outcome
from ..provider import MAX_RELEVANCE, Match, Provider

FUNCTIONS = {
    "sqrt": math.sqrt,
    "abs": abs,
    "round": round,
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "log": math.log,
    "log10": math.log10,
    "pow": pow,
    "min": min,
    "max": max,
}

NAMES = {
    "pi": math.pi,
    "e": math.e,
}

_TOKEN = re.compile(r"\s*(?:(\d+\.?\d*|\.\d+)|([a-z_][a-z0-9_]*)|(\*\*|[-+*/%^(),]))", re.IGNORECASE)
_TRAILING_OPERATOR = re.compile(r"(\*\*|[-+*/%^(,])\s*$")


def format_number(value: float) -> str:
    """Whole values as integers, otherwise up to 10 decimals without trailing zeros."""
    if isinstance(value, int):
        return str(value)
    if float(value).is_integer() and abs(value) < 1e12:
        return str(int(value))
    formatted = f"{value:.10f}".rstrip("0").rstrip(".")
    return formatted if formatted not in ("", "-0") else "0"


def looks_like_math(expr: str) -> bool:
    """True if expr is made only of numbers, operators and known names."""
    pos = 0
    expr = expr.rstrip()
    while pos < len(expr):
        token = _TOKEN.match(expr, pos)
        if not token:
            return False
        name = token.group(2)
        if name and name.lower() not in FUNCTIONS and name.lower() not in NAMES:
            return False
        pos = token.end()
    return bool(expr)


def is_incomplete(expr: str) -> bool:
    """Trailing operator or an unclosed parenthesis."""
    return bool(_TRAILING_OPERATOR.search(expr)) or expr.count("(") > expr.count(")")


class CalculatorProvider(Provider):
    """Evaluate arithmetic expressions."""

    name = "calculator"
    kind = CandidateKind.CALCULATION
    priority = 100

    def match(self, query: str) -> list[Match]:
        stripped = query.strip()
        forced = stripped.startswith("=")
        expr = stripped.lstrip("=").strip()

        if not expr or not looks_like_math(expr):
            return []
        if not forced and not any(c.isdigit() for c in expr):
            return []

        if is_incomplete(expr):
            return [(self._candidate(expr, None), MAX_RELEVANCE)]

        result = self.evaluate(expr)
        if result is None:
            return []
        return [(self._candidate(expr, result), MAX_RELEVANCE)]

    def evaluate(self, expr: str) -> Optional[str]:
        """Evaluate expr, returning the formatted result or None."""
        try:
            value = simple_eval(
                expr.replace("^", "**"),
                functions=FUNCTIONS,
                names=NAMES,
            )
        except (SyntaxError, InvalidExpression):
            return None
        except (TypeError, ValueError, ZeroDivisionError, OverflowError) as e:
            logger.debug(f"Math error for '{expr}': {e}")
            return None
        except Exception as e:
            logger.warning(f"Unexpected calculator error for '{expr}': {e}")
            return None

        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        try:
            if not math.isfinite(value):
                return None
        except OverflowError:
            # int too large for float conversion
            return None
        return format_number(value)

    def execute(self, candidate: Candidate) -> Outcome:
        if candidate.payload.result is None:
            return Outcome.needs_input()
        return Outcome.success()

    def _candidate(self, expr: str, result: Optional[str]) -> Candidate:
        return Candidate(
            kind=CandidateKind.CALCULATION,
            payload=CalculationPayload(expression=expr, result=result),
        )
