"""
Hu and Garcia (2010) white spruce height model.

The model is parameterized by a single site productivity parameter ``q``.
Site index is the height at breast-height age 50, so the site index of a
stand is found by solving for the ``q`` whose curve passes through it.
"""
import math

from .exceptions import ComputationError, ErrorKind

Q_SEED = 0.02
Q_STEP = 0.01
Q_TOLERANCE = 0.0000001


def hu_garcia_height(q: float, bhage: float) -> float:
    """Height (m) at breast-height age ``bhage`` for parameter ``q``."""
    a = 283.9 * math.pow(q, 0.5137)
    return a * math.pow(1 - (1 - math.pow(1.3 / a, 0.5829)) * math.exp(-q * (bhage - 0.5)), 1.71556)


def hu_garcia_bhage(q: float, height: float) -> float:
    """Breast-height age at which the ``q`` curve reaches ``height``.

    Raises:
        ComputationError: NO_CONVERGENCE if the height is at or above the
            curve's asymptote
    """
    a = 283.9 * math.pow(q, 0.5137)
    ratio = (1 - math.pow(height / a, 0.5829)) / (1 - math.pow(1.3 / a, 0.5829))
    if ratio <= 0.0:
        raise ComputationError(ErrorKind.NO_CONVERGENCE,
                               f"height {height:g} is above the asymptote {a:g}")
    return 0.5 - 1 / q * math.log(ratio)


def solve_q(site_index: float, bhage: float) -> float:
    """Find ``q`` such that ``hu_garcia_height(q, bhage) == site_index``.

    Height increases with ``q``. The search walks from ``Q_SEED`` by
    ``Q_STEP`` and halves the step each time the residual changes sign,
    stopping once the step falls below ``Q_TOLERANCE``.

    Args:
        site_index: Height (m) the curve must pass through
        bhage: Breast-height age of that height; 50 for site index

    Returns:
        The parameter ``q``
    """
    q = Q_SEED
    step = Q_STEP
    diff = 0.0
    while True:
        last_diff = diff
        diff = site_index - hu_garcia_height(q, bhage)
        if diff > Q_TOLERANCE:
            if last_diff < 0:
                step /= 2.0
            q += step
        elif diff < -Q_TOLERANCE:
            if last_diff > 0:
                step /= 2.0
            q -= step
            if q <= 0:
                q = Q_TOLERANCE
        else:
            break
        if step < Q_TOLERANCE:
            break
    return q
