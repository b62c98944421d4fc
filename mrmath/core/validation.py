"""Validation helpers and shared exceptions."""

from __future__ import annotations

import math


class ConfigurationError(Exception):
    """Custom exception for configuration validation errors."""


class OptimizationError(Exception):
    """Raised when optimization fails to converge or produces invalid results."""

    def __init__(self, message: str, result=None) -> None:
        super().__init__(message)
        self.result = result


def validate_bracket(lower: float, mid: float | None, upper: float, name: str = 'LINE_SEARCH') -> None:
    """Check that a search bracket is finite and ordered as lower < mid < upper."""

    for label, value in (('lower_bound', lower), ('upper_bound', upper), ('init_estimate', mid)):
        if value is None:
            continue
        if not math.isfinite(value):
            raise ConfigurationError(
                f"Invalid {label} in [{name}]: {value}\n"
                f"Bracket values must be finite numbers."
            )

    if not lower < upper:
        raise ConfigurationError(
            f"Invalid bracket in [{name}]: lower_bound={lower}, upper_bound={upper}\n"
            f"lower_bound must be strictly less than upper_bound."
        )

    if mid is not None and not lower < mid < upper:
        raise ConfigurationError(
            f"Invalid init_estimate in [{name}]: {mid}\n"
            f"The initial estimate must lie strictly inside ({lower}, {upper})."
        )
