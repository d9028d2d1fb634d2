"""
Conversion between total age and breast-height age.
"""
from .curves import AgeType, CurveLike
from .exceptions import ComputationError, ErrorKind


def age_to_age(catalog, curve: CurveLike, age1: float, age1_type: AgeType,
               age2_type: AgeType, y2bh: float) -> float:
    """Convert an age from one age type to the other.

    Curves whose fitted origin sits half a year past breast height shift
    the conversion by 0.5. Negative results are clamped to 0.

    Args:
        catalog: Curve catalog
        curve: Curve index
        age1: Age to convert
        age1_type: How ``age1`` is counted
        age2_type: Age type wanted
        y2bh: Years to breast height

    Returns:
        The converted age

    Raises:
        ComputationError: UNKNOWN_CURVE, or UNSUPPORTED_AGE_TYPE_COMBINATION
            for anything other than total to breast or breast to total
    """
    definition = catalog.get_curve(curve)
    offset = 0.5 if definition.half_year_origin else 0.0

    if age1_type == AgeType.BREAST and age2_type == AgeType.TOTAL:
        age2 = age1 + y2bh - offset
    elif age1_type == AgeType.TOTAL and age2_type == AgeType.BREAST:
        age2 = age1 - y2bh + offset
    else:
        raise ComputationError(ErrorKind.UNSUPPORTED_AGE_TYPE_COMBINATION,
                               f"{age1_type!r} to {age2_type!r}")

    if age2 < 0.0:
        age2 = 0.0
    return age2
