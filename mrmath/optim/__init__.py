"""One-dimensional optimisers used as building blocks for model fitting."""

from __future__ import annotations

from .cost_functions import CountingCost, PolynomialCost
from .quadratic_line_search import (
    Bracket,
    LineSearchResult,
    LoggingTracer,
    QuadraticLineSearch,
    SearchStatus,
    StreamTracer,
)

__all__ = [
    "Bracket",
    "CountingCost",
    "LineSearchResult",
    "LoggingTracer",
    "PolynomialCost",
    "QuadraticLineSearch",
    "SearchStatus",
    "StreamTracer",
]
