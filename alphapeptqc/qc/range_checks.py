"""
Inclusive range kernels used by every QC criterion.

Both kernels are numba-compiled and specialise on the argument types, so the
same predicate serves integer (label/transition counts) and floating point
(retention time, intensity, ratios) criteria.
"""

from numba import njit


@njit
def check_range(value, lower, upper) -> bool:
    """Return True if lower <= value <= upper (numba-optimized).

    An inverted range (lower > upper) rejects every value; NaN never passes.

    Args:
        value: Value to test
        lower: Inclusive lower bound
        upper: Inclusive upper bound

    Returns:
        True if value lies inside the closed interval
    """
    return value >= lower and value <= upper


@njit
def update_range(value, lower, upper):
    """Widen (lower, upper) so that it contains value (numba-optimized).

    Used for estimating bounds from training data. Starting from an empty
    envelope such as (inf, -inf) or (100, -100), the first value collapses
    the range onto itself.

    Args:
        value: Observed value
        lower: Current lower bound
        upper: Current upper bound

    Returns:
        Tuple of (new_lower, new_upper)
    """
    if value < lower:
        lower = value
    if value > upper:
        upper = value
    return lower, upper
