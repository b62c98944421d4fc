"""Scalar cost functions for the 1-D optimisers."""

from __future__ import annotations

from typing import Any, Callable, Optional, Sequence

import numpy as np
from numpy.polynomial import Polynomial


class CountingCost:
    """Wrap a scalar callable and count how often it is evaluated."""

    def __init__(self, fn: Callable[[Any], Any]) -> None:
        self.fn = fn
        self.n_evaluations = 0

    def __call__(self, x):
        self.n_evaluations += 1
        return self.fn(x)

    def reset(self) -> None:
        self.n_evaluations = 0


class PolynomialCost(CountingCost):
    """Polynomial cost ``c0 + c1*x + c2*x**2 + ...``.

    Parameters
    ----------
    coefficients : sequence of float
        Coefficients in order of increasing power.
    """

    def __init__(self, coefficients: Sequence[float]) -> None:
        if len(coefficients) == 0:
            raise ValueError("PolynomialCost requires at least one coefficient")
        self.polynomial = Polynomial(np.asarray(coefficients, dtype=np.float64))
        super().__init__(self.polynomial)

    def __repr__(self) -> str:
        return f"PolynomialCost({self.polynomial.coef.tolist()})"

    def analytic_minimum(self, lower: float = -np.inf, upper: float = np.inf) -> Optional[float]:
        """Return the lowest-cost local minimum in [lower, upper], if any.

        Candidates are real roots of the derivative with positive curvature.
        """
        first = self.polynomial.deriv(1)
        second = self.polynomial.deriv(2)
        if first.degree() < 1:
            return None

        roots = first.roots()
        candidates = [
            float(r.real) for r in roots
            if abs(r.imag) < 1e-12 and lower <= r.real <= upper and second(r.real) > 0
        ]
        if not candidates:
            return None
        return min(candidates, key=lambda x: float(self.polynomial(x)))
