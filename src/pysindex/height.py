"""
Height from site index and age.
"""
import math

from .age_conversion import age_to_age
from .curves import AgeType, CurveLike
from .equations import HeightContext, evaluate_height
from .exceptions import ComputationError, ErrorKind
from .years_to_breast_height import round_y2bh

MIN_TOTAL_AGE = 0.00001


def index_to_height(catalog, curve: CurveLike, age: float, age_type: AgeType,
                    site_index: float, y2bh: float, pi: float, finite: bool = True) -> float:
    """Height (m) of a stand of the given site index at the given age.

    Args:
        catalog: Curve catalog
        curve: Curve index
        age: Total or breast-height age
        age_type: How ``age`` is counted
        site_index: Height (m) at breast-height age 50
        y2bh: Years to breast height; snapped to the half year
        pi: Proportion of the growing season before breast height, used by
            curves whose origin moves with it
        finite: Raise for heights that overflowed to infinity

    Returns:
        Height in metres

    Raises:
        ComputationError: UNKNOWN_CURVE, SITE_INDEX_TOO_LOW, NO_CONVERGENCE
            for a negative total age or an overflowed height, or any failure
            of the curve's family
    """
    definition = catalog.get_curve(curve)
    if site_index <= definition.breast_height:
        raise ComputationError(ErrorKind.SITE_INDEX_TOO_LOW, f"site index {site_index:g}")

    y2bh = round_y2bh(y2bh)
    if age_type == AgeType.BREAST:
        bhage = age
        tage = age_to_age(catalog, definition.id, age, AgeType.BREAST, AgeType.TOTAL, y2bh)
    else:
        tage = age
        bhage = age_to_age(catalog, definition.id, age, AgeType.TOTAL, AgeType.BREAST, y2bh)

    if tage < 0.0:
        raise ComputationError(ErrorKind.NO_CONVERGENCE, f"total age {tage:g}")
    if tage < MIN_TOTAL_AGE:
        return 0.0

    ctx = HeightContext(definition=definition, site_index=site_index, tage=tage,
                        bhage=bhage, y2bh=y2bh, pi=pi, age_type=age_type,
                        catalog=catalog)
    height = evaluate_height(ctx)
    if finite and not math.isfinite(height):
        raise ComputationError(ErrorKind.NO_CONVERGENCE,
                               f"{definition.key} overflows at total age {tage:g}")
    return height
