"""
Quadratic line search
-------------------------------------------------------------------

Computes the minimum of a 1-D cost function by successive quadratic
interpolation inside a bracket ``lower < estimate < upper``.

The search is fast for functions that are smooth and convex. Functions that
do not obey these criteria may not converge. If the bounds do not bracket the
minimum, the search returns NaN with status ``OUTSIDE_BOUNDS``; if the sampled
cost is not convex and the bracket is still wide, it returns NaN with status
``NONCONVEX``.

Calling ``set_exit_if_outside_bounds(False)`` lets the search widen the
bracket whenever the interpolated minimum falls outside it. There is no
guarantee that the search converges in that case, so be conscious of the
nature of your data.

Typical usage::

    line_search = QuadraticLineSearch(-1.0, 1.0)
    line_search.set_value_tolerance(0.01).set_message("optimising...")
    result = line_search(cost_function)
    if result.success:
        optimal_value = result.value
"""

from __future__ import annotations

import enum
import logging
import sys
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, Protocol, TextIO, TypeVar

import numpy as np

from mrmath.core.logfmt import VERBOSE, ensure_custom_levels_registered
from mrmath.core.progress import make_progress_bar
from mrmath.core.validation import OptimizationError


ValueType = TypeVar("ValueType", float, np.floating)

CostFunction = Callable[[Any], Any]


class SearchStatus(enum.Enum):
    SUCCESS = 'success'
    # reserved for a search in flight; results never carry it
    EXECUTING = 'executing'
    OUTSIDE_BOUNDS = 'outside_bounds'
    NONCONVEX = 'nonconvex'
    NONCONVERGING = 'nonconverging'
    NONFINITE = 'nonfinite'

    @property
    def failed(self) -> bool:
        """True for OUTSIDE_BOUNDS, NONCONVEX and NONCONVERGING, which always return NaN.

        NONFINITE is not counted as failed: it returns the best estimate so far,
        or NaN when the initial bracket could not be evaluated. Check
        `LineSearchResult.converged` to tell the two apart.
        """
        return self in (SearchStatus.OUTSIDE_BOUNDS, SearchStatus.NONCONVEX, SearchStatus.NONCONVERGING)


@dataclass(frozen=True)
class Bracket:
    lower: Any
    mid: Any
    upper: Any
    f_lower: Any
    f_mid: Any
    f_upper: Any

    @property
    def width(self):
        return self.upper - self.lower


@dataclass(frozen=True)
class LineSearchResult:
    """Outcome of a single line search.

    Attributes
    ----------
    value : float
        Estimated minimiser, or NaN when no estimate could be produced.
    status : SearchStatus
        Why the search returned. Never ``EXECUTING``.
    iterations : int
        Number of interpolation steps performed.
    evaluations : int
        Number of cost-function calls.
    bracket : Bracket or None
        Bracket state at exit; None if the initial evaluation failed.
    """

    value: Any
    status: SearchStatus
    iterations: int
    evaluations: int
    bracket: Optional[Bracket] = None

    @property
    def success(self) -> bool:
        return self.status is SearchStatus.SUCCESS

    @property
    def converged(self) -> bool:
        return self.success and bool(np.isfinite(self.value))

    def raise_for_status(self) -> "LineSearchResult":
        if not self.success:
            raise OptimizationError(
                f"Quadratic line search did not converge: {self.status.name} "
                f"after {self.iterations} iteration(s), value={self.value}",
                result=self,
            )
        return self


class SearchTracer(Protocol):
    def initialised(self, bracket: Bracket) -> None: ...

    def candidate(self, point, value) -> None: ...

    def updated(self, bracket: Bracket) -> None: ...

    def finished(self, result: LineSearchResult, reason: str) -> None: ...


class Progress(Protocol):
    def update(self, n: int = 1) -> Any: ...


def _format_bracket(bracket: Bracket) -> list[str]:
    return [
        f"Pos     {bracket.lower!s:>16} {bracket.mid!s:>16} {bracket.upper!s:>16}",
        f"Value   {bracket.f_lower!s:>16} {bracket.f_mid!s:>16} {bracket.f_upper!s:>16}",
    ]


class _TraceFormatter:
    """Formats search events as lines of text; subclasses decide where they go."""

    def _write(self, line: str) -> None:
        raise NotImplementedError

    def initialised(self, bracket: Bracket) -> None:
        self._write("Initialising quadratic line search")
        self._write(f"        {'Lower':>16} {'Mid':>16} {'Upper':>16}")
        for line in _format_bracket(bracket):
            self._write(line)

    def candidate(self, point, value) -> None:
        self._write(f"  New point {point}, value {value}")

    def updated(self, bracket: Bracket) -> None:
        self._write("")
        for line in _format_bracket(bracket):
            self._write(line)

    def finished(self, result: LineSearchResult, reason: str) -> None:
        self._write(reason)


class StreamTracer(_TraceFormatter):
    """Writes a human-readable trace of the search to a text stream."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream if stream is not None else sys.stderr

    def _write(self, line: str) -> None:
        self.stream.write(line + "\n")


class LoggingTracer(_TraceFormatter):
    """Same trace as `StreamTracer`, routed through logging at VERBOSE level."""

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = VERBOSE) -> None:
        ensure_custom_levels_registered()
        self.logger = logger or logging.getLogger(__name__)
        self.level = level

    def _write(self, line: str) -> None:
        if line:
            self.logger.log(self.level, line)


def _value_caster(example) -> Callable[[Any], Any]:
    # Work in numpy scalars so that degenerate brackets yield inf/nan
    # instead of ZeroDivisionError.
    if isinstance(example, np.floating):
        return type(example)
    return np.float64


class QuadraticLineSearch(Generic[ValueType]):
    """Bracketed 1-D minimiser using successive quadratic interpolation.

    The optimiser holds configuration only. Every call to `search` is
    independent and reports its outcome in the returned `LineSearchResult`,
    so one instance may be shared between callers.
    """

    def __init__(self, lower_bound: ValueType, upper_bound: ValueType) -> None:
        self._cast = _value_caster(lower_bound)
        self._lower = self._cast(lower_bound)
        self._upper = self._cast(upper_bound)
        self._init_estimate = self._cast(0.5 * (self._lower + self._upper))
        self._value_tolerance = self._cast(0.001 * (self._upper - self._lower))
        self._function_tolerance = self._cast(0.0)
        self._exit_if_outside_bounds = True
        self._max_iterations = 50
        self._message = ''

    @classmethod
    def from_settings(cls, settings) -> "QuadraticLineSearch":
        """Build an optimiser from `mrmath.core.configuration.LineSearchSettings`."""
        line_search = cls(settings.lower_bound, settings.upper_bound)
        if settings.init_estimate is not None:
            line_search.set_init_estimate(settings.init_estimate)
        if settings.value_tolerance is not None:
            line_search.set_value_tolerance(settings.value_tolerance)
        return (
            line_search.set_function_tolerance(settings.function_tolerance)
            .set_exit_if_outside_bounds(settings.exit_if_outside_bounds)
            .set_max_iterations(settings.max_iterations)
            .set_message(settings.message)
        )

    def set_lower_bound(self, value: ValueType) -> "QuadraticLineSearch":
        self._lower = self._cast(value)
        return self

    def set_init_estimate(self, value: ValueType) -> "QuadraticLineSearch":
        self._init_estimate = self._cast(value)
        return self

    def set_upper_bound(self, value: ValueType) -> "QuadraticLineSearch":
        self._upper = self._cast(value)
        return self

    def set_value_tolerance(self, value: ValueType) -> "QuadraticLineSearch":
        self._value_tolerance = self._cast(value)
        return self

    def set_function_tolerance(self, value: ValueType) -> "QuadraticLineSearch":
        self._function_tolerance = self._cast(value)
        return self

    def set_exit_if_outside_bounds(self, value: bool) -> "QuadraticLineSearch":
        self._exit_if_outside_bounds = bool(value)
        return self

    def set_max_iterations(self, value: int) -> "QuadraticLineSearch":
        if int(value) < 1:
            raise ValueError(f"max_iterations must be a positive integer, got {value!r}")
        self._max_iterations = int(value)
        return self

    def set_message(self, value: str) -> "QuadraticLineSearch":
        self._message = str(value)
        return self

    @property
    def lower_bound(self):
        return self._lower

    @property
    def init_estimate(self):
        return self._init_estimate

    @property
    def upper_bound(self):
        return self._upper

    @property
    def value_tolerance(self):
        return self._value_tolerance

    @property
    def function_tolerance(self):
        return self._function_tolerance

    @property
    def exit_if_outside_bounds(self) -> bool:
        return self._exit_if_outside_bounds

    @property
    def max_iterations(self) -> int:
        return self._max_iterations

    @property
    def message(self) -> str:
        return self._message

    def __call__(self, cost: CostFunction, **kwargs) -> LineSearchResult:
        return self.search(cost, **kwargs)

    def search(
        self,
        cost: CostFunction,
        *,
        progress: Optional[Progress] = None,
        tracer: Optional[SearchTracer] = None,
    ) -> LineSearchResult:
        """Minimise `cost` within the configured bracket.

        A progress bar is opened for the duration of the call when a message
        has been set and no `progress` collaborator is given.
        """
        if progress is None and self._message:
            with make_progress_bar(total=self._max_iterations, desc=self._message) as bar:
                return self._run(cost, bar, tracer)
        return self._run(cost, progress, tracer)

    def verbose(self, cost: CostFunction, stream: Optional[TextIO] = None) -> LineSearchResult:
        """Run the search while writing a trace of every bracket to `stream` (stderr by default)."""
        return self._run(cost, None, StreamTracer(stream))

    def _run(self, cost: CostFunction, progress: Optional[Progress], tracer: Optional[SearchTracer]) -> LineSearchResult:
        cast = self._cast
        nan = cast(np.nan)
        iterations = 0
        evaluations = 0

        def finish(value, new_status: SearchStatus, reason: str, bracket: Optional[Bracket]) -> LineSearchResult:
            result = LineSearchResult(
                value=value,
                status=new_status,
                iterations=iterations,
                evaluations=evaluations,
                bracket=bracket,
            )
            logging.debug(f"Quadratic line search: {reason} (status={new_status.name}, "
                          f"iterations={iterations}, value={value})")
            if tracer is not None:
                tracer.finished(result, reason)
            return result

        with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
            l, m, u = self._lower, self._init_estimate, self._upper
            fl, fm, fu = cast(cost(l)), cast(cost(m)), cast(cost(u))
            evaluations = 3

            if not (np.isfinite(fl) and np.isfinite(fm) and np.isfinite(fu)):
                return finish(nan, SearchStatus.NONFINITE,
                              "Returning due to non-finite cost at the initial bracket", None)

            if tracer is not None:
                tracer.initialised(Bracket(l, m, u, fl, fm, fu))

            while iterations < self._max_iterations:

                # Chord test: the midpoint must lie below the line joining the
                # outer points for the interpolated parabola to open upwards.
                if fm > fl + (fu - fl) * (m - l) / (u - l):
                    bracket = Bracket(l, m, u, fl, fm, fu)
                    if (min(m - l, u - m) < self._value_tolerance
                            or abs((fu - fl) / (0.5 * (fu + fl))) < self._function_tolerance):
                        return finish(m, SearchStatus.SUCCESS,
                                      "Returning due to nonconvexity, though successfully", bracket)
                    return finish(nan, SearchStatus.NONCONVEX,
                                  "Returning due to nonconvexity, unsuccessfully", bracket)

                sl = (fm - fl) / (m - l)
                su = (fu - fm) / (u - m)
                n = cast(0.5 * (l + m) - (sl * (u - l)) / (2.0 * (su - sl)))
                iterations += 1

                if not np.isfinite(n):
                    return finish(m, SearchStatus.NONFINITE,
                                  "Returning due to non-finite interpolated point",
                                  Bracket(l, m, u, fl, fm, fu))

                fn = cast(cost(n))
                evaluations += 1
                if tracer is not None:
                    tracer.candidate(n, fn)

                if not np.isfinite(fn):
                    return finish(m, SearchStatus.NONFINITE,
                                  "Returning due to non-finite cost at new point",
                                  Bracket(l, m, u, fl, fm, fu))

                if n < l:
                    if self._exit_if_outside_bounds:
                        return finish(nan, SearchStatus.OUTSIDE_BOUNDS,
                                      "Returning due to new point below lower bound",
                                      Bracket(l, m, u, fl, fm, fu))
                    u, fu = m, fm
                    m, fm = l, fl
                    l, fl = n, fn
                elif n < m:
                    if fn > fm:
                        l, fl = n, fn
                    else:
                        u, fu = m, fm
                        m, fm = n, fn
                elif n == m:
                    return finish(n, SearchStatus.SUCCESS,
                                  "Returning successfully, new point coincides with current estimate",
                                  Bracket(l, m, u, fl, fm, fu))
                elif n < u:
                    if fn > fm:
                        u, fu = n, fn
                    else:
                        l, fl = m, fm
                        m, fm = n, fn
                else:
                    if self._exit_if_outside_bounds:
                        return finish(nan, SearchStatus.OUTSIDE_BOUNDS,
                                      "Returning due to new point above upper bound",
                                      Bracket(l, m, u, fl, fm, fu))
                    l, fl = m, fm
                    m, fm = u, fu
                    u, fu = n, fn

                if progress is not None:
                    progress.update(1)

                bracket = Bracket(l, m, u, fl, fm, fu)
                if tracer is not None:
                    tracer.updated(bracket)

                # The new point landed on a bracket endpoint: the
                # interpolation has reached a fixed point at m.
                if not l < m < u:
                    return finish(m, SearchStatus.SUCCESS,
                                  "Returning successfully, new point coincides with a bracket endpoint",
                                  bracket)

                if (u - l) < self._value_tolerance:
                    return finish(m, SearchStatus.SUCCESS, "Returning successfully", bracket)

            return finish(nan, SearchStatus.NONCONVERGING, "Returning due to too many iterations",
                          Bracket(l, m, u, fl, fm, fu))


def quadratic_line_search(
    cost: CostFunction,
    lower: float,
    upper: float,
    *,
    init_estimate: Optional[float] = None,
    value_tolerance: Optional[float] = None,
    function_tolerance: Optional[float] = None,
    exit_if_outside_bounds: bool = True,
    max_iterations: int = 50,
    message: str = '',
    progress: Optional[Progress] = None,
    tracer: Optional[SearchTracer] = None,
) -> LineSearchResult:
    """Configure a `QuadraticLineSearch` and run it once."""
    line_search = QuadraticLineSearch(lower, upper)
    if init_estimate is not None:
        line_search.set_init_estimate(init_estimate)
    if value_tolerance is not None:
        line_search.set_value_tolerance(value_tolerance)
    if function_tolerance is not None:
        line_search.set_function_tolerance(function_tolerance)
    line_search.set_exit_if_outside_bounds(exit_if_outside_bounds)
    line_search.set_max_iterations(max_iterations)
    line_search.set_message(message)
    return line_search.search(cost, progress=progress, tracer=tracer)
