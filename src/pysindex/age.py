"""
Age from site index and height.

A handful of families have a closed-form inverse, registered here with
``@age_inverse``. Growth intercept curves are scanned over integer
breast-height ages. Everything else is solved by searching total age
with the height evaluator as the objective.
"""
import math

from .age_conversion import age_to_age
from .curves import AgeType, CurveLike, EstimationMode
from .equations import AGE_INVERSES, age_inverse
from .exceptions import ComputationError, ErrorKind
from .height import index_to_height
from .hu_garcia import hu_garcia_bhage, solve_q
from .logging_config import get_logger, log_solver_failure
from .numeric import bisect_until, safe_log, safe_pow
from .site_index import height_to_index

logger = get_logger(__name__)

MAX_AGE = 999.0
AGE_SEED = 25.0
AGE_TOLERANCE = 0.005
ITERATION_PI = 0.5
TOO_TALL = 1000.0
MAX_TOO_TALL = 100
GI_SCAN_AGES = range(1, 100)
GI_RESIDUAL_LIMIT = 1.0


def _no_answer(reason: str) -> ComputationError:
    return ComputationError(ErrorKind.NO_CONVERGENCE, reason)


# ============================================================================
# Closed-form inverses
# ============================================================================

@age_inverse('bruce')
def _bruce(catalog, definition, height, age_type, site_index, y2bh):
    # Bruce carries its own unrounded years to breast height
    y2bh = 13.25 - site_index / 6.096
    x1 = site_index / 30.48
    x2 = -0.477762 + x1 * (-0.894427 + x1 * (0.793548 - x1 * 0.171666))
    x3 = safe_pow(50.0 + y2bh, x2)
    x4 = safe_log(1.372 / site_index) / (safe_pow(y2bh, x2) - x3)

    x1 = safe_log(height / site_index) / x4 + x3
    if x1 < 0:
        raise _no_answer(f"height {height:g} is outside the Bruce curve")
    age = safe_pow(x1, 1 / x2)
    if age_type == AgeType.BREAST:
        age -= y2bh
    if age < 0.0:
        return 0.0
    if age > MAX_AGE:
        raise _no_answer(f"age {age:g}")
    return age


def _wiley_closed_form(height, age_type, site_index, y2bh):
    if height / 0.3048 < 4.5:
        age = y2bh * safe_pow(height / 1.37, 0.5)
        if age_type == AgeType.BREAST:
            age -= y2bh
        return max(age, 0.0)

    x1 = 2500 / (site_index / 0.3048 - 4.5)
    x2 = -1.7307 + 0.1394 * x1
    x3 = -0.0616 + 0.0137 * x1
    x4 = 0.00192428 + 0.00007024 * x1

    d = 4.5 - height / 0.3048
    a = 1 + d * x4
    b = d * x3
    c = d * x2
    root = safe_pow(b * b - 4 * a * c, 0.5)
    if root == 0.0:
        raise _no_answer("Wiley quadratic has no root")

    age = (-b + root) / (2 * a)
    if age_type == AgeType.TOTAL:
        age += y2bh
    if age < 0 or age > MAX_AGE:
        raise _no_answer(f"age {age:g}")
    return age


@age_inverse('wiley')
def _wiley(catalog, definition, height, age_type, site_index, y2bh):
    """Wiley western hemlock; young ages are refined by iteration."""
    age = _wiley_closed_form(height, age_type, site_index, y2bh)
    if 0 < age < 10:
        return iterate(catalog, definition, height, age_type, site_index, y2bh)
    return age


@age_inverse('goudie')
def _goudie(catalog, definition, height, age_type, site_index, y2bh):
    # at exactly breast height both branches agree on breast-height age 0
    if height <= 1.3:
        age = y2bh * safe_pow(height / 1.3, 0.5)
        if age_type == AgeType.BREAST:
            age -= y2bh
        return max(age, 0.0)

    k = definition.coefficients
    b = k['b0'] + k['b_si'] * safe_log(site_index - 1.3)
    a = (site_index - 1.3) * (1 + math.exp(b + k['b_age'] * math.log(50.0)))
    age = math.exp((safe_log(a / (height - 1.3) - 1) - b) / k['b_age'])
    if age_type == AgeType.TOTAL:
        age += y2bh
    if age < 0:
        return 0.0
    if age > MAX_AGE:
        raise _no_answer(f"age {age:g}")
    return age


@age_inverse('hu_garcia')
def _hu_garcia(catalog, definition, height, age_type, site_index, y2bh):
    age = hu_garcia_bhage(solve_q(site_index, 50.0), height)
    if age_type == AgeType.TOTAL:
        age += y2bh
    return age


# ============================================================================
# Iterative solvers
# ============================================================================

def iterate(catalog, definition, height: float, age_type: AgeType,
            site_index: float, y2bh: float) -> float:
    """Search total age for the given height, then convert if needed.

    Heights the curve cannot produce count as 1000 m so the search turns
    back; the hundredth such evaluation ends the search.
    """
    curve = definition.id
    try:
        index_to_height(catalog, curve, AGE_SEED, AgeType.TOTAL, site_index, y2bh, ITERATION_PI)
    except ComputationError as e:
        if e.kind != ErrorKind.NO_CONVERGENCE:
            raise

    too_tall = 0

    def objective(tage: float) -> float:
        nonlocal too_tall
        try:
            # an overflowed curve is infinitely tall or short, like IEEE arithmetic
            return index_to_height(catalog, curve, tage, AgeType.TOTAL, site_index, y2bh,
                                   ITERATION_PI, finite=False)
        except ComputationError as e:
            if e.kind != ErrorKind.NO_CONVERGENCE:
                raise
            too_tall += 1
            if too_tall == MAX_TOO_TALL:
                raise _no_answer(f"{MAX_TOO_TALL} evaluations without an answer") from e
            return TOO_TALL

    try:
        tage = bisect_until(objective, height, seed=AGE_SEED, step=AGE_SEED / 2,
                            tolerance=AGE_TOLERANCE, upper_bound=MAX_AGE)
    except ComputationError as e:
        log_solver_failure(logger, 'age iterator', curve, e.kind.name, height=height,
                           site_index=site_index, y2bh=y2bh)
        raise

    if age_type == AgeType.BREAST:
        return age_to_age(catalog, curve, tage, AgeType.TOTAL, AgeType.BREAST, y2bh)
    return tage


def gi_age_from_height(catalog, curve: CurveLike, height: float, age_type: AgeType,
                       site_index: float) -> float:
    """Breast-height age at which a growth intercept curve gives ``site_index``.

    Integer ages are scanned and the one whose predicted site index is
    closest wins. A best age at either end of the scanned range that misses
    by more than a metre means the answer lies outside the range.

    Raises:
        ComputationError: TOTAL_AGE_UNSUPPORTED_FOR_GROWTH_INTERCEPT, or
            NO_CONVERGENCE when no scanned age is close enough
    """
    definition = catalog.get_curve(curve)
    if age_type == AgeType.TOTAL:
        raise ComputationError(ErrorKind.TOTAL_AGE_UNSUPPORTED_FOR_GROWTH_INTERCEPT,
                               definition.key)

    best_age = None
    best_residual = math.inf
    first_age = last_age = None
    for bhage in GI_SCAN_AGES:
        try:
            predicted = height_to_index(catalog, definition.id, float(bhage), AgeType.BREAST,
                                        height, EstimationMode.DIRECT)
        except ComputationError as e:
            if e.kind == ErrorKind.ABOVE_MAXIMUM_GI_AGE:
                break
            if e.kind == ErrorKind.BELOW_MINIMUM_GI_AGE:
                continue
            raise

        if first_age is None:
            first_age = bhage
        last_age = bhage
        residual = abs(predicted - site_index)
        if residual < best_residual:
            best_residual = residual
            best_age = bhage

    if best_age is None:
        raise _no_answer("no age in the growth intercept range")
    if best_age in (first_age, last_age) and best_residual > GI_RESIDUAL_LIMIT:
        log_solver_failure(logger, 'growth intercept age scan', definition.id,
                           f"best residual {best_residual:.3f} at age {best_age}",
                           height=height, site_index=site_index)
        raise _no_answer(f"closest age {best_age} misses by {best_residual:.3f} m")
    return float(best_age)


# ============================================================================
# Age evaluator
# ============================================================================

def index_to_age(catalog, curve: CurveLike, site_height: float, age_type: AgeType,
                 site_index: float, y2bh: float) -> float:
    """Age at which a stand of the given site index reaches ``site_height``.

    Args:
        catalog: Curve catalog
        curve: Curve index
        site_height: Height (m)
        age_type: Age type wanted
        site_index: Site index (m)
        y2bh: Years to breast height

    Returns:
        Age of the requested type

    Raises:
        ComputationError: UNKNOWN_CURVE, HEIGHT_TOO_LOW, SITE_INDEX_TOO_LOW,
            NO_CONVERGENCE, or a growth intercept error
    """
    definition = catalog.get_curve(curve)
    if site_height < 1.3 and age_type == AgeType.BREAST:
        raise ComputationError(ErrorKind.HEIGHT_TOO_LOW, f"height {site_height:g}")
    if site_height <= 0.0001:
        return 0.0
    if site_index <= definition.breast_height:
        raise ComputationError(ErrorKind.SITE_INDEX_TOO_LOW, f"site index {site_index:g}")

    inverse = AGE_INVERSES.get(definition.age_inverse)
    if inverse is not None:
        return inverse(catalog, definition, site_height, age_type, site_index, y2bh)
    if definition.is_growth_intercept:
        return gi_age_from_height(catalog, definition.id, site_height, age_type, site_index)
    return iterate(catalog, definition, site_height, age_type, site_index, y2bh)
