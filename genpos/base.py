from __future__ import annotations

import math
from numbers import Real

from genpos.exceptions import ConfigurationError

EQ_TOL_REL = 1e-9
EQ_TOL_ABS = 1e-12
MAX_TOL = 1e-1
MAX_COORDINATE = 1e150


def validate_tolerance(rtol: float, atol: float) -> tuple[float, float]:
    """Checks that a pair of tolerance parameters can be used for comparisons.

    Args:
        rtol: The relative tolerance parameter.
        atol: The absolute tolerance parameter.

    Returns:
        The tolerance parameters as floats.

    Raises:
        ConfigurationError: If a tolerance is not a finite real number, not positive or larger than `MAX_TOL`.

    """
    for name, value in (("rtol", rtol), ("atol", atol)):
        if isinstance(value, bool) or not isinstance(value, Real):
            raise ConfigurationError(f"{name} must be a real number, not {type(value).__name__}")
        if not math.isfinite(value):
            raise ConfigurationError(f"{name} must be finite, got {value}")
        if value <= 0:
            raise ConfigurationError(f"{name} must be positive, got {value}")
        if value > MAX_TOL:
            raise ConfigurationError(f"{name} must not exceed {MAX_TOL}, got {value}")

    return float(rtol), float(atol)
