"""
Years for a seedling to reach breast height, as a function of site index.

Each curve in the catalog carries a ``y2bh`` form. The forms are registered
here under the names used in cfg/curves.yaml:

    reciprocal    offset + a + b / si
    linear        a + b * si, or a + si / divisor
    log           a + b * log(si)
    power         a * (si - shift) ** b
    exponential   a * b ** si
    constant      value
    spliced       one form below ``threshold``, another above
    harrington    1 or 2 years depending on Harrington's site index
    nigh_dr       Nigh and Courtin red alder

Any form may set ``min``, a lower clamp on the result.
"""
import math
from typing import Any, Dict

from .curves import CurveLike
from .equations import Y2BH_FORMS, y2bh_form
from .exceptions import ComputationError, ErrorKind
from .numeric import safe_log, safe_pow


def _evaluate(form: Dict[str, Any], site_index: float) -> float:
    try:
        func = Y2BH_FORMS[form['form']]
    except KeyError:
        raise ComputationError(ErrorKind.UNKNOWN_CURVE,
                               f"unknown years to breast height form {form.get('form')!r}") from None
    y2bh = func(form, site_index)
    if 'min' in form and y2bh < form['min']:
        y2bh = float(form['min'])
    return y2bh


@y2bh_form('reciprocal')
def _reciprocal(form, si):
    return form.get('offset', 0) + form['a'] + form['b'] / si


@y2bh_form('linear')
def _linear(form, si):
    if 'divisor' in form:
        return form['a'] + si / form['divisor']
    return form['a'] + form['b'] * si


@y2bh_form('log')
def _log(form, si):
    return form['a'] + form['b'] * safe_log(si)


@y2bh_form('power')
def _power(form, si):
    if si < form.get('no_answer_below', -math.inf) or si <= form.get('no_answer_at_or_below', -math.inf):
        raise ComputationError(ErrorKind.NO_CONVERGENCE,
                               f"site index {si:g} is below the fitted range")
    return form['a'] * safe_pow(si - form.get('shift', 0.0), form['b'])


@y2bh_form('exponential')
def _exponential(form, si):
    return form['a'] * math.pow(form['b'], si)


@y2bh_form('constant')
def _constant(form, si):
    return float(form['value'])


@y2bh_form('spliced')
def _spliced(form, si):
    if form.get('inclusive', False):
        below = si <= form['threshold']
    else:
        below = si < form['threshold']
    return _evaluate(form['below'] if below else form['above'], si)


@y2bh_form('harrington')
def _harrington(form, si):
    si20 = safe_pow(si, 1.5) / 8.0
    return 1.0 if si20 >= 15 else 2.0


@y2bh_form('nigh_dr')
def _nigh_dr(form, si):
    si25 = 0.3094 + 0.7616 * si
    if si25 <= 25:
        return 5.494 - 0.1789 * si25
    return 1.0


def si_y2bh(catalog, curve: CurveLike, site_index: float) -> float:
    """Years to breast height for a curve and site index, unrounded.

    Raises:
        ComputationError: UNKNOWN_CURVE, SITE_INDEX_TOO_LOW,
            NOT_APPLICABLE_TO_GROWTH_INTERCEPT, or NO_CONVERGENCE for site
            indices below a form's fitted range
    """
    definition = catalog.get_curve(curve)
    if site_index <= definition.breast_height:
        raise ComputationError(ErrorKind.SITE_INDEX_TOO_LOW, f"site index {site_index:g}")
    if definition.is_growth_intercept:
        raise ComputationError(ErrorKind.NOT_APPLICABLE_TO_GROWTH_INTERCEPT, definition.key)
    if definition.y2bh is None:
        raise ComputationError(ErrorKind.UNKNOWN_CURVE,
                               f"{definition.key} has no years to breast height form")
    return _evaluate(definition.y2bh, site_index)


def round_y2bh(y2bh: float) -> float:
    """Snap years to breast height onto the half year: 0.5, 1.5, 2.5, ..."""
    return int(y2bh) + 0.5


def si_y2bh_rounded(catalog, curve: CurveLike, site_index: float) -> float:
    """Years to breast height snapped onto the half year."""
    return round_y2bh(si_y2bh(catalog, curve, site_index))
