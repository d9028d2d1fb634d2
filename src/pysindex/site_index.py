"""
Site index from height and age.

Most curves are only published in the height direction, so site index is
found by searching for the site index whose curve passes through the
measured height. A few families are linear in site index, or can be solved
through their own parameter, and are inverted in closed form when the
caller asks for ``EstimationMode.DIRECT``.
"""
import math
from typing import Optional, Tuple

from .curves import AgeType, CurveLike, EstimationMode
from .equations import DIRECT_SITE_INDEX, FEET, direct_site_index
from .exceptions import ComputationError, ErrorKind
from .growth_intercept import gi_site_index
from .height import index_to_height
from .hu_garcia import hu_garcia_height, solve_q
from .logging_config import get_logger, log_solver_failure
from .numeric import bisect_until
from .years_to_breast_height import si_y2bh

logger = get_logger(__name__)

SITE_INDEX_TOLERANCE = 0.001
MIN_SEED = 2.0
MAX_SITE_INDEX = 999.0
ITERATION_PI = 0.5


def _origin(definition) -> float:
    if definition.origin_pi:
        return ITERATION_PI
    return definition.origin


# ============================================================================
# Closed-form inverses (breast-height age only)
# ============================================================================
# Each returns site index in metres, or None when the age is outside the
# region where the closed form applies.

@direct_site_index('milner')
def _milner(definition, bhage: float, height: float) -> Optional[float]:
    if bhage <= 0 or bhage <= _origin(definition):
        return None
    k = definition.coefficients
    x1 = k['a1'] * math.pow(1 - math.exp(-k['k1'] * bhage), k['p1'])
    x2 = k['a2'] * math.pow(1 - math.exp(-k['k2'] * bhage), k['p2'])
    if x2 == 0.0:
        return None
    si_ft = (height / FEET - 4.5 - x1) / x2 + k['reference']
    return si_ft * FEET


@direct_site_index('vander_ploeg')
def _vander_ploeg(definition, bhage: float, height: float) -> Optional[float]:
    if bhage <= 0 or bhage <= _origin(definition):
        return None
    k = definition.coefficients
    si_ft = 4.5 + (height / FEET - 4.5) * (1 + math.exp(k['b0'] - k['b1'] * math.log(bhage))) / k['scale']
    return si_ft * FEET


@direct_site_index('nigh_dr')
def _nigh_dr(definition, bhage: float, height: float) -> Optional[float]:
    if bhage <= 0.5:
        return None
    si25 = 1.3 + (height - 1.3) * (1 + math.exp(3.6 - 1.24 * math.log(bhage - 0.5))) / 1.693
    return (si25 - 0.3094) / 0.7616


@direct_site_index('hu_garcia')
def _hu_garcia(definition, bhage: float, height: float) -> Optional[float]:
    if bhage <= 0.5:
        return None
    q = solve_q(height, bhage)
    return hu_garcia_height(q, 50.0)


# ============================================================================
# Iterative solver
# ============================================================================

def _iterate(catalog, definition, age: float, age_type: AgeType, height: float) -> float:
    breast_height = definition.breast_height

    def objective(si: float) -> float:
        return index_to_height(catalog, definition.id, age, age_type, si,
                               si_y2bh(catalog, definition.id, si), ITERATION_PI)

    def repair(si: float, step: float) -> Tuple[float, float]:
        if si <= breast_height:
            si += abs(step)
            step = step / 2.0
        return si, step

    seed = max(height, MIN_SEED)
    try:
        return bisect_until(objective, height, seed=seed, step=seed / 2,
                            tolerance=SITE_INDEX_TOLERANCE,
                            upper_bound=MAX_SITE_INDEX, repair=repair)
    except ComputationError as e:
        log_solver_failure(logger, 'site index iterator', definition.id, e.kind.name,
                           age=age, age_type=int(age_type), height=height)
        raise


def height_to_index(catalog, curve: CurveLike, age: float, age_type: AgeType,
                    height: float, estimation_mode: EstimationMode = EstimationMode.ITERATE) -> float:
    """Site index (m) of a stand from its height and age.

    Args:
        catalog: Curve catalog
        curve: Curve index
        age: Total or breast-height age
        age_type: How ``age`` is counted
        height: Measured height (m)
        estimation_mode: ``DIRECT`` uses a closed form where the curve has
            one and falls back to iteration otherwise

    Returns:
        Site index in metres

    Raises:
        ComputationError: UNKNOWN_CURVE, HEIGHT_TOO_LOW, NO_CONVERGENCE,
            TOTAL_AGE_UNSUPPORTED_FOR_GROWTH_INTERCEPT, the growth intercept
            age range errors, or any failure of the height evaluator
    """
    definition = catalog.get_curve(curve)
    if height < 1.3:
        raise ComputationError(ErrorKind.HEIGHT_TOO_LOW, f"height {height:g}")
    if age <= 0.0:
        raise ComputationError(ErrorKind.NO_CONVERGENCE, f"age {age:g}")

    if definition.is_growth_intercept:
        if age_type == AgeType.TOTAL:
            raise ComputationError(ErrorKind.TOTAL_AGE_UNSUPPORTED_FOR_GROWTH_INTERCEPT,
                                   definition.key)
        return gi_site_index(catalog, definition.id, age, height)

    solve = DIRECT_SITE_INDEX.get(definition.direct_site_index)
    if estimation_mode == EstimationMode.DIRECT and age_type == AgeType.BREAST and solve:
        site_index = solve(definition, age, height)
        if site_index is not None:
            return site_index
        logger.debug("closed form for %s does not apply at age %g, iterating",
                     definition.key, age)

    return _iterate(catalog, definition, age, age_type, height)
