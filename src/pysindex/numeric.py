"""
Numeric guards and the shared halving search.

The fitted equations raise ``site_index - breast_height`` and similar
quantities to fractional powers and take their logarithms. Near the domain
boundary those bases can reach zero or go negative, so every such call goes
through ``safe_pow`` / ``safe_log``. The log floor of ``log(0.00001)`` is a
historical constant and must not change.
"""
import math
import sys
from typing import Callable, Optional, Tuple

from .exceptions import ComputationError, ErrorKind

__all__ = [
    'LOG_FLOOR',
    'safe_pow',
    'safe_log',
    'safe_exp',
    'bisect_until',
]

LOG_FLOOR = 0.00001
MAX_EXPONENT = math.log(sys.float_info.max)


def safe_pow(x: float, y: float) -> float:
    """Return ``x ** y``, or 0.0 when ``x <= 0``."""
    if x <= 0.0:
        return 0.0
    return math.pow(x, y)


def safe_log(x: float) -> float:
    """Return ``log(x)``, or ``log(0.00001)`` when ``x <= 0``."""
    if x <= 0.0:
        return math.log(LOG_FLOOR)
    return math.log(x)


def safe_exp(x: float) -> float:
    """Return ``exp(x)``, or infinity where ``math.exp`` would overflow."""
    if x > MAX_EXPONENT:
        return math.inf
    return math.exp(x)


def bisect_until(objective: Callable[[float], float],
                 target: float,
                 seed: float,
                 step: float,
                 tolerance: float,
                 step_floor: float = 0.00001,
                 upper_bound: Optional[float] = None,
                 repair: Optional[Callable[[float, float], Tuple[float, float]]] = None) -> float:
    """Search for ``x`` with ``objective(x)`` within ``tolerance`` of ``target``.

    The search walks from ``seed`` in increments of ``step``. Whenever the
    objective crosses the target the step is reversed and halved, so the
    objective is assumed to increase with ``x``. Each pass:

    1. evaluates the objective (exceptions propagate unchanged);
    2. stops if the result is within tolerance;
    3. reverses and halves the step on overshoot, then moves;
    4. stops, keeping the current candidate, once ``|step| < step_floor``;
    5. fails if the candidate exceeds ``upper_bound``;
    6. lets ``repair(x, step)`` pull the candidate back into its domain.

    Args:
        objective: Function of the candidate value
        target: Value the objective should reach
        seed: Initial candidate
        step: Initial step, signed
        tolerance: Accepted absolute difference from the target
        step_floor: Smallest step magnitude before giving up refining
        upper_bound: Candidates above this raise NO_CONVERGENCE
        repair: Optional hook returning an adjusted ``(x, step)``

    Returns:
        The converged candidate

    Raises:
        ComputationError: NO_CONVERGENCE when the candidate leaves the bound
    """
    x = seed
    while True:
        value = objective(x)
        if abs(value - target) <= tolerance:
            break

        if value > target:
            if step > 0:
                step = -step / 2.0
        elif step < 0:
            step = -step / 2.0
        x += step

        if abs(step) < step_floor:
            break
        if upper_bound is not None and x > upper_bound:
            raise ComputationError(ErrorKind.NO_CONVERGENCE,
                                   f"candidate passed {upper_bound:g}")
        if repair is not None:
            x, step = repair(x, step)
    return x
