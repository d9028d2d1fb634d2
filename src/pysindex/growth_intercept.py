"""
Growth intercept curves.

A growth intercept equation predicts site index directly from a young
stand's breast-height age and height, over a limited range of ages. The
equations are supplied by the catalog (cfg/growth_intercept.yaml); a
growth intercept curve without one reports UNKNOWN_CURVE.

Height from site index has no closed form, so it is found by searching
for the height whose predicted site index matches.
"""
from typing import Tuple

from .curves import CurveLike
from .exceptions import ComputationError, ErrorKind
from .logging_config import get_logger, log_solver_failure
from .numeric import bisect_until, safe_pow

logger = get_logger(__name__)

MIN_GI_AGE = 0.5
HEIGHT_TOLERANCE = 0.01
MAX_HEIGHT = 999.0


def _power(equation, bhage: float, height: float) -> float:
    return 1.3 + equation.a * safe_pow(height - 1.3, equation.b) * safe_pow(bhage, equation.c)


GI_FORMS = {
    'power': _power,
}


def gi_site_index(catalog, curve: CurveLike, bhage: float, height: float) -> float:
    """Site index predicted by a growth intercept equation.

    Args:
        catalog: Curve catalog
        curve: Growth intercept curve
        bhage: Breast-height age
        height: Height (m)

    Raises:
        ComputationError: UNKNOWN_CURVE when no equation is loaded,
            HEIGHT_TOO_LOW, BELOW_MINIMUM_GI_AGE or ABOVE_MAXIMUM_GI_AGE
    """
    equation = catalog.growth_intercept_equation(curve)
    if height < 1.3:
        raise ComputationError(ErrorKind.HEIGHT_TOO_LOW, f"height {height:g}")
    if bhage < equation.min_age:
        raise ComputationError(ErrorKind.BELOW_MINIMUM_GI_AGE, f"age {bhage:g}")
    if bhage > equation.max_age:
        raise ComputationError(ErrorKind.ABOVE_MAXIMUM_GI_AGE, f"age {bhage:g}")
    try:
        form = GI_FORMS[equation.form]
    except KeyError:
        raise ComputationError(ErrorKind.UNKNOWN_CURVE,
                               f"unknown growth intercept form {equation.form!r}") from None
    return form(equation, bhage, height)


def _stay_above_breast_height(height: float, step: float) -> Tuple[float, float]:
    if height < 1.3:
        height += abs(step)
        step = step / 2.0
    return height, step


def gi_height_from_site_index(catalog, curve: CurveLike, bhage: float, site_index: float) -> float:
    """Height at ``bhage`` on a growth intercept curve of the given site index.

    Raises:
        ComputationError: BELOW_MINIMUM_GI_AGE below half a year, any
            failure of the equation itself, or NO_CONVERGENCE above 999 m
    """
    definition = catalog.get_curve(curve)
    if bhage < MIN_GI_AGE:
        raise ComputationError(ErrorKind.BELOW_MINIMUM_GI_AGE, f"age {bhage:g}")

    seed = max(site_index, 1.3)
    try:
        return bisect_until(
            lambda height: gi_site_index(catalog, definition.id, bhage, height),
            site_index,
            seed=seed,
            step=seed / 2,
            tolerance=HEIGHT_TOLERANCE,
            upper_bound=MAX_HEIGHT,
            repair=_stay_above_breast_height,
        )
    except ComputationError as e:
        log_solver_failure(logger, 'growth intercept height iterator', definition.id,
                           e.kind.name, bhage=bhage, site_index=site_index)
        raise
