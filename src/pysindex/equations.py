"""
Equation families and the registries that dispatch on them.

Every curve in the catalog names a height ``family``. A family is a plain
function of a ``HeightContext`` that returns height in metres; the
coefficients come from the curve definition, so one family serves every
curve fitted with the same functional form.

Four registries are kept here, one per operation:

- ``HEIGHT_FAMILIES``: height from site index and age (filled below)
- ``AGE_INVERSES``: closed-form age from height (filled by ``age``)
- ``DIRECT_SITE_INDEX``: closed-form site index from height (filled by ``site_index``)
- ``Y2BH_FORMS``: years to breast height (filled by ``years_to_breast_height``)

Families fitted in imperial units convert site index to feet, evaluate,
and convert back. The round trip is kept exactly as published so results
match the historical tables to the last digit.
"""
import dataclasses
import math
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .curves import AgeType
from .exceptions import ComputationError, ErrorKind
from .numeric import safe_exp, safe_log, safe_pow

__all__ = [
    'HeightContext',
    'HEIGHT_FAMILIES',
    'AGE_INVERSES',
    'DIRECT_SITE_INDEX',
    'Y2BH_FORMS',
    'height_family',
    'age_inverse',
    'direct_site_index',
    'y2bh_form',
    'FEET',
]

FEET = 0.3048

HEIGHT_FAMILIES: Dict[str, Callable] = {}
AGE_INVERSES: Dict[str, Callable] = {}
DIRECT_SITE_INDEX: Dict[str, Callable] = {}
Y2BH_FORMS: Dict[str, Callable] = {}


def _registrar(registry: Dict[str, Callable], name: str):
    def register(func):
        registry[name] = func
        return func
    return register


def height_family(name: str):
    """Register a height family under ``name``."""
    return _registrar(HEIGHT_FAMILIES, name)


def age_inverse(name: str):
    """Register a closed-form age solver under ``name``."""
    return _registrar(AGE_INVERSES, name)


def direct_site_index(name: str):
    """Register a closed-form site index solver under ``name``."""
    return _registrar(DIRECT_SITE_INDEX, name)


def y2bh_form(name: str):
    """Register a years-to-breast-height form under ``name``."""
    return _registrar(Y2BH_FORMS, name)


@dataclass(frozen=True)
class HeightContext:
    """Inputs of one height evaluation, with both ages already derived.

    Attributes:
        definition: Catalog entry of the curve
        site_index: Site index (m) at breast-height age 50
        tage: Total age
        bhage: Breast-height age
        y2bh: Years to breast height, rounded to the half year
        pi: Proportion of the first year of height growth below breast height
        age_type: How the caller counted the age
        catalog: Catalog, used by families that look up other tables
    """
    definition: object
    site_index: float
    tage: float
    bhage: float
    y2bh: float
    pi: float
    age_type: AgeType = AgeType.BREAST
    catalog: Optional[object] = None

    @property
    def coefficients(self) -> dict:
        return self.definition.coefficients

    @property
    def breast_height(self) -> float:
        return self.definition.breast_height

    @property
    def origin(self) -> float:
        """Breast-height age at which the fitted curve starts."""
        if self.definition.origin_pi:
            return self.pi
        return self.definition.origin

    def past_origin(self) -> bool:
        if self.definition.origin_inclusive:
            return self.bhage >= self.origin
        return self.bhage > self.origin

    def juvenile(self) -> float:
        """Height below the fitted curve's origin.

        Most curves ramp quadratically from the ground to breast height at
        ``y2bh``; a few carry their own juvenile form.
        """
        form = self.definition.juvenile
        if form is None:
            return self.tage * self.tage * self.breast_height / self.y2bh / self.y2bh
        return (1.3 * math.pow(self.tage / self.y2bh, form['a'] - form['b'] * self.y2bh)
                * math.pow(form['c'], self.tage - self.y2bh))

    def at_breast_age(self, bhage: float) -> 'HeightContext':
        return dataclasses.replace(self, bhage=bhage, age_type=AgeType.BREAST)

    def at_total_age(self, tage: float) -> 'HeightContext':
        return dataclasses.replace(self, tage=tage, age_type=AgeType.TOTAL)


def evaluate_height(ctx: HeightContext) -> float:
    """Dispatch to the curve's height family.

    Raises:
        ComputationError: UNKNOWN_CURVE if the family is not registered
    """
    try:
        family = HEIGHT_FAMILIES[ctx.definition.family]
    except KeyError:
        raise ComputationError(ErrorKind.UNKNOWN_CURVE,
                               f"no height family '{ctx.definition.family}'") from None
    return family(ctx)


# ============================================================================
# Logistic and Chapman-Richards families (metric)
# ============================================================================

def _logistic_ratio(k: dict, si: float, log_ref: float, log_age: float) -> float:
    x = k['b0'] + k['b_si'] * safe_log(si - k.get('si_shift', 1.3))
    ratio = (1.0 + math.exp(x + k['b_age'] * log_ref)) / (1.0 + math.exp(x + k['b_age'] * log_age))
    return 1.3 + (si - 1.3) * ratio


@height_family('logistic_ratio')
def logistic_ratio(ctx: HeightContext) -> float:
    """Goudie, Nigh, Chen and Thrower logistic curves."""
    if not ctx.past_origin():
        return ctx.juvenile()
    origin = ctx.origin
    return _logistic_ratio(ctx.coefficients, ctx.site_index,
                           math.log(50.0 - origin), math.log(ctx.bhage - origin))


@height_family('huang')
def huang(ctx: HeightContext) -> float:
    if not ctx.past_origin():
        return ctx.juvenile()
    k = ctx.coefficients
    si = ctx.site_index
    ref = 50.0 - ctx.origin

    x0 = -k['x0'] * safe_pow(si - 1.3, k['x1']) * math.pow(k['x2'], (si - 1.3) / k['scale'])
    ratio = (1.0 - math.exp(x0 * (ctx.bhage - ctx.origin))) / (1.0 - math.exp(x0 * ref))
    shape = k['x3'] * safe_pow(si - 1.3, k['x4']) * math.pow(ref, k['x5'])
    return 1.3 + (si - 1.3) * safe_pow(ratio, shape)


@height_family('huang_pj')
def huang_pj(ctx: HeightContext) -> float:
    if not ctx.past_origin():
        return ctx.juvenile()
    k = ctx.coefficients
    si = ctx.site_index
    base = 1.0 + k['a'] * (si - 1.3)
    top = base + math.exp(k['b0'] + k['b_age'] * math.log(50.0 - ctx.origin + k['age_shift'])
                          - math.log(si - 1.3))
    bottom = base + math.exp(k['b0'] + k['b_age'] * math.log(ctx.bhage - ctx.origin + k['age_shift'])
                             - math.log(si - 1.3))
    return 1.3 + (si - 1.3) * top / bottom


@height_family('cieszewski')
def cieszewski(ctx: HeightContext) -> float:
    if not ctx.past_origin():
        return ctx.juvenile()
    a = ctx.coefficients['a']
    b = ctx.coefficients['b']
    si = ctx.site_index

    x3 = 20 * b / safe_pow(50.0, 1 + a)
    x4 = (si - 1.3 + math.sqrt((si - 1.3 - x3) * (si - 1.3 - x3)
                               + 80 * b * (si - 1.3) * safe_pow(50.0, -(1 + a))))
    return 1.3 + (x4 + x3) / (2 + 80 * b * safe_pow(ctx.bhage, -(1 + a)) / (x4 - x3))


@height_family('ker')
def ker(ctx: HeightContext) -> float:
    if not ctx.past_origin():
        return ctx.juvenile()
    k = ctx.coefficients
    si = ctx.site_index
    shape = k['scale'] * safe_pow(si, k['exponent'])
    x1 = safe_pow(1 - math.exp(-k['rate'] * ctx.bhage), shape)
    x2 = safe_pow(1 - math.exp(-k['rate'] * 50), shape)
    return 1.3 + (si - 1.3) * x1 / x2


@height_family('nigh_chapman_richards')
def nigh_chapman_richards(ctx: HeightContext) -> float:
    """Chapman-Richards curve whose asymptote is a cubic in site index."""
    if not ctx.past_origin():
        return ctx.juvenile()
    k = ctx.coefficients
    si = ctx.site_index
    c = k['asymptote']
    x1 = c[0] + c[1] * si + c[2] * si * si + c[3] * math.pow(si, 3.0)
    rate = k['rate'][0] + k['rate'][1] * x1
    shape = k['shape'][0] + k['shape'][1] * x1
    return 1.3 + x1 * math.pow(1 - math.exp(rate * (ctx.bhage - ctx.origin)), shape)


@height_family('chen_at')
def chen_at(ctx: HeightContext) -> float:
    if not ctx.past_origin():
        return ctx.juvenile()
    si = ctx.site_index
    x1 = safe_log(safe_pow(si - 1.3, -0.076) / 1.418) / safe_log(1 - math.exp(-0.017 * 50))
    return 1.3 + 1.418 * safe_pow(si - 1.3, 1.076) * safe_pow(1 - math.exp(-0.017 * ctx.bhage), x1)


@height_family('nigh_dr')
def nigh_dr(ctx: HeightContext) -> float:
    if not ctx.past_origin():
        return ctx.juvenile()
    si25 = 0.3094 + 0.7616 * ctx.site_index
    return 1.3 + (1.693 * (si25 - 1.3)) / (1 + math.exp(3.6 - 1.24 * math.log(ctx.bhage - 0.5)))


@height_family('nigh_ba')
def nigh_ba(ctx: HeightContext) -> float:
    if not ctx.past_origin():
        return ctx.juvenile()
    si = ctx.site_index
    age = ctx.bhage - 0.5
    x5 = (si - 1.3) * (si - 1.3) * (si - 1.3) / 49.5
    x4 = x5 + math.pow(x5 * x5 + 16692000 * (si - 1.3) * (si - 1.3) * (si - 1.3) / 299891, 0.5)
    x2 = (8346000 + 6058.412 * x4) * math.pow(age, 3.232)
    x3 = (8346000 + x4 * math.pow(age, 2.232)) * 299891
    return 1.3 + (si - 1.3) * math.pow(x2 / x3, 1.0 / 3)


@height_family('nigh_lw')
def nigh_lw(ctx: HeightContext) -> float:
    if not ctx.past_origin():
        return ctx.juvenile()
    si = ctx.site_index
    x1 = math.log(math.pow(si - 1.3, 0.1434) / 3.027) / math.log(1 - math.exp(-0.01588 * 49.5))
    return (1.3 + 3.027 * math.pow(si - 1.3, 0.8566)
            * math.pow(1 - math.exp(-0.01588 * (ctx.bhage - 0.5)), x1))


@height_family('nigh_se')
def nigh_se(ctx: HeightContext) -> float:
    if not ctx.past_origin():
        return ctx.juvenile()
    shifted = math.log(ctx.site_index - 1.3) - 1.71635
    x1 = 0.5 * (shifted + math.sqrt(shifted * shifted + 45.3824))
    return 1.3 + math.exp(x1) * math.pow(1 - math.exp(-0.00955 * (ctx.bhage - 0.5)),
                                         -1.758 + 11.6209 / x1)


@height_family('kurucz_86')
def kurucz_86(ctx: HeightContext) -> float:
    if not ctx.past_origin():
        return ctx.juvenile()
    bhage = ctx.bhage
    x1 = (ctx.site_index - 1.3) * safe_pow(1.0 - math.exp(-0.01303 * bhage), 1.024971)
    height = 1.3 + x1 / 0.470011
    if bhage <= 50.0:
        height -= 4 * 0.4 * bhage * (50 - bhage) / 2500
    return height


@height_family('means')
def means(ctx: HeightContext) -> float:
    if not ctx.past_origin():
        return ctx.juvenile()
    si100 = -1.73 + 3.149 * safe_pow(ctx.site_index, 0.8279)
    age = ctx.bhage - ctx.origin
    return 1.37 + (22.87 + 0.9502 * (si100 - 1.37)) * safe_pow(
        1 - math.exp(-0.0020647 * safe_pow(si100 - 1.37, 0.5) * age),
        1.3656 + 2.046 / (si100 - 1.37))


@height_family('barker')
def barker(ctx: HeightContext) -> float:
    """Barker curves are defined on total age and need no juvenile branch."""
    k = ctx.coefficients
    si = ctx.site_index
    c0, c1, c2 = k['conversion']
    si50t = c0 + c1 * si + c2 * si * si
    scale = math.exp(k['a'])
    return scale * safe_pow(si50t / scale, safe_pow(50.0 / ctx.tage, k['b']))


# ============================================================================
# Guarded polynomial families
# ============================================================================

def _guarded(ctx: HeightContext, threshold: float, base: float) -> Optional[float]:
    """Interpolate from a safe age when site is too high for the current age.

    The polynomial forms bend the wrong way for high sites at low ages, so
    they are evaluated at the youngest safe age and scaled linearly back.
    """
    origin = ctx.origin
    si = ctx.site_index
    if si <= threshold + 1.667 * (ctx.bhage - origin):
        return None
    safe_age = (si - threshold) / 1.667 + 0.1 + origin
    safe_height = HEIGHT_FAMILIES[ctx.definition.family](ctx.at_breast_age(safe_age))
    return base + (safe_height - base) * (ctx.bhage - origin) / safe_age


@height_family('kurucz_cw')
def kurucz_cw(ctx: HeightContext) -> float:
    if not ctx.past_origin():
        return ctx.juvenile()
    guarded = _guarded(ctx, 43, 1.3)
    if guarded is not None:
        return guarded

    k = ctx.coefficients
    si = ctx.site_index
    ref = 50.0 - ctx.origin
    x1 = 99999.0 if si <= 1.3 else ref * ref / (si - 1.3)
    x2 = k['c2'][0] + k['c2'][1] * x1
    x3 = k['c3'][0] + k['c3'][1] * x1
    x4 = k['c4'][0] + k['c4'][1] * x1
    age = ctx.bhage - ctx.origin
    height = 1.3 + age * age / (x2 + x3 * age + x4 * age * age)

    if ctx.bhage > 50.0:
        # correction ratio is held at its age 200 value beyond that
        bhage = min(ctx.bhage, 200.0)
        height = height - (-0.02379545 * height + 0.000475909 * bhage * height)
    return height


@height_family('kurucz_82')
def kurucz_82(ctx: HeightContext) -> float:
    if not ctx.past_origin():
        height = ctx.juvenile()
        x1 = 0.45773 - 0.00027 * ctx.tage * height
        if x1 > 0.0:
            height -= x1
        return height
    guarded = _guarded(ctx, 60, 1.3)
    if guarded is not None:
        return guarded

    k = ctx.coefficients
    si = ctx.site_index
    ref = 50.0 - ctx.origin
    x1 = 99999.0 if si <= 1.3 else ref * ref / (si - 1.3)
    x2 = k['c2'][0] + k['c2'][1] * x1
    x3 = k['c3'][0] + k['c3'][1] * x1
    x4 = k['c4'][0] + k['c4'][1] * x1
    age = ctx.bhage - ctx.origin
    height = 1.3 + age * age / (x2 + x3 * age + x4 * age * age)

    if ctx.bhage < 50.0 and ctx.bhage * height < 1695.3:
        x1 = 0.45773 - 0.00027 * ctx.bhage * height
        if x1 > 0.0:
            height -= x1
    return height


@height_family('wiley')
def wiley(ctx: HeightContext) -> float:
    """Wiley western hemlock, fitted in feet."""
    if not ctx.past_origin():
        return ctx.juvenile()
    guarded = _guarded(ctx, 60, 1.37)
    if guarded is not None:
        return guarded

    k = ctx.coefficients
    si_ft = ctx.site_index / FEET
    origin = ctx.origin
    x1 = math.pow(49 + (1 - origin), 2.0) / (si_ft - 4.5)
    x2 = k['c2'][0] + k['c2'][1] * x1
    x3 = k['c3'][0] + k['c3'][1] * x1
    x4 = k['c4'][0] + k['c4'][1] * x1
    age = ctx.bhage - origin
    height = 4.5 + age * age / (x2 + x3 * age + x4 * age * age)

    if age < 5:
        height += 0.3 * age
    elif age < 10:
        height += 3.0 - 0.3 * age
    height *= FEET

    adjustment = k.get('adjustment')
    if adjustment is not None:
        x1 = adjustment[0] + adjustment[1] * ctx.bhage * height
        if x1 > 0.0 or not k.get('adjust_positive_only', False):
            height -= x1
    return height


@height_family('harrington')
def harrington(ctx: HeightContext) -> float:
    """Harrington and Curtis red alder, on total age."""
    si = ctx.site_index
    tage = ctx.tage
    if si > 45 + 2.5 * tage:
        safe_age = (si - 45) / 2.5 + 0.1
        safe_height = harrington(ctx.at_total_age(safe_age))
        return safe_height * tage / safe_age

    si20 = safe_pow(si, 1.5) / 8.0
    x1 = 18.1622 + 0.7953 * si20
    x2 = 0.00194 - 0.002441 * si20
    return (si20 + x1 * safe_pow(1.0 - math.exp(x2 * tage), 0.9198)
            - x1 * safe_pow(1.0 - math.exp(x2 * 20), 0.9198))


# ============================================================================
# Imperial families
# ============================================================================

@height_family('milner')
def milner(ctx: HeightContext) -> float:
    if not ctx.past_origin():
        return ctx.juvenile()
    k = ctx.coefficients
    si_ft = ctx.site_index / FEET
    x1 = k['a1'] * safe_pow(1 - math.exp(-k['k1'] * ctx.bhage), k['p1'])
    x2 = k['a2'] * safe_pow(1 - math.exp(-k['k2'] * ctx.bhage), k['p2'])
    return (4.5 + x1 + x2 * (si_ft - k['reference'])) * FEET


@height_family('vander_ploeg')
def vander_ploeg(ctx: HeightContext) -> float:
    if not ctx.past_origin():
        return ctx.juvenile()
    k = ctx.coefficients
    si_ft = ctx.site_index / FEET
    height = 4.5 + (k['scale'] * (si_ft - 4.5) / (1 + math.exp(k['b0'] - k['b1'] * math.log(ctx.bhage))))
    return height * FEET


@height_family('monserud')
def monserud(ctx: HeightContext) -> float:
    if not ctx.past_origin():
        return ctx.juvenile()
    k = ctx.coefficients
    si_ft = ctx.site_index / FEET
    x3 = 1 + math.exp(9.7278 - 1.2934 * math.log(ctx.bhage) - k['site'] * safe_log(si_ft - 4.5))
    return (4.5 + 42.397 * safe_pow(si_ft - 4.5, k['power']) / x3) * FEET


@height_family('curtis_pw')
def curtis_pw(ctx: HeightContext) -> float:
    if not ctx.past_origin():
        return ctx.juvenile()
    k = ctx.coefficients
    si_ft = ctx.site_index / FEET
    log_age = math.log(ctx.bhage - ctx.origin)
    log_si = math.log(si_ft)
    x1 = 1.0 - math.exp(-math.exp(k['b0'] + (k['b_ref'] + k['b_age']) * log_age + k['b_si'] * log_si))
    x2 = 1.0 - math.exp(-math.exp(k['b0'] + k['b_ref'] * math.log(50.0 - ctx.origin)
                                  + k['b_age'] * log_age + k['b_si'] * log_si))
    return (4.5 + (si_ft - 4.5) * x1 / x2) * FEET


@height_family('curtis_bp')
def curtis_bp(ctx: HeightContext) -> float:
    if not ctx.past_origin():
        return ctx.juvenile()
    k = ctx.coefficients
    si_ft = ctx.site_index / FEET
    d = math.log(ctx.bhage - ctx.origin) - math.log(50.0 - ctx.origin)
    x1 = safe_log(si_ft - 4.5) + k['a1'] * d + k['a2'] * d * d
    x2 = 1 + k['b1'] * d + k['b2'] * d * d
    return (4.5 + math.exp(x1 / x2)) * FEET


@height_family('hann')
def hann(ctx: HeightContext) -> float:
    if not ctx.past_origin():
        return ctx.juvenile()
    k = ctx.coefficients
    si_ft = ctx.site_index / FEET
    site_term = k['b0'] + k['b_si'] * safe_log(si_ft - 4.5)
    x1 = 1 - math.exp(-math.exp(site_term + k['b_age'] * math.log(ctx.bhage - ctx.origin)))
    x2 = 1 - math.exp(-math.exp(site_term + k['b_age'] * math.log(50.0 - ctx.origin)))
    return (4.5 + (si_ft - 4.5) * x1 / x2) * FEET


@height_family('farr')
def farr(ctx: HeightContext) -> float:
    """Farr polynomial-in-log-age curves.

    ``growth`` and ``slope`` are lists of ``[coefficient, power]`` terms in
    ``log(bhage)``.
    """
    if not ctx.past_origin():
        return ctx.juvenile()
    k = ctx.coefficients
    si_ft = ctx.site_index / FEET
    log_age = math.log(ctx.bhage)

    def polynomial(terms):
        total = 0.0
        for coefficient, power in terms:
            if power == 0:
                total += coefficient
            elif power == 1:
                total += coefficient * log_age
            else:
                total += coefficient * safe_pow(log_age, power)
        return total

    height = 4.5 + safe_exp(polynomial(k['growth'])) - safe_exp(polynomial(k['slope'])) * (
        k['reference'] - (si_ft - 4.5))
    return height * FEET


@height_family('cochran')
def cochran(ctx: HeightContext) -> float:
    if not ctx.past_origin():
        return ctx.juvenile()
    si_ft = ctx.site_index / FEET
    bhage = ctx.bhage
    log_age = math.log(bhage)
    x1 = math.exp(-0.37496 + 1.36164 * log_age - 0.00243434 * safe_pow(log_age, 4))
    x2 = -0.2828 + 1.87947 * safe_pow(1 - math.exp(-0.022399 * bhage), 0.966998)
    return (4.5 + x1 - x2 * (79.97 - (si_ft - 4.5))) * FEET


@height_family('king')
def king(ctx: HeightContext) -> float:
    if not ctx.past_origin():
        return ctx.juvenile()
    si_ft = ctx.site_index / FEET
    bhage = ctx.bhage
    x1 = 2500 / (si_ft - 4.5)
    x2 = -0.954038 + 0.109757 * x1
    x3 = 0.0558178 + 0.00792236 * x1
    x4 = -0.000733819 + 0.000197693 * x1
    height = 4.5 + bhage * bhage / (x2 + x3 * bhage + x4 * bhage * bhage)
    if bhage < 5:
        height += 0.22 * bhage
    elif bhage < 10:
        height += 2.2 - 0.22 * bhage
    return height * FEET


# ============================================================================
# Bruce Douglas-fir
# ============================================================================

def _bruce_exponent(si: float) -> float:
    x1 = si / 30.48
    return -0.477762 + x1 * (-0.894427 + x1 * (0.793548 - x1 * 0.171666))


@height_family('bruce')
def bruce(ctx: HeightContext) -> float:
    """Bruce coastal Douglas-fir, with its own unrounded years to breast height."""
    si = ctx.site_index
    origin = ctx.origin
    y2bh = 13.25 - si / 6.096
    x2 = _bruce_exponent(si)
    x3 = safe_pow(49 + (1 - origin) + y2bh, x2)
    x4 = math.log(1.372 / si) / (safe_pow(y2bh, x2) - x3)
    if ctx.age_type == AgeType.TOTAL:
        return si * math.exp(x4 * (safe_pow(ctx.tage, x2) - x3))
    return si * math.exp(x4 * (safe_pow(ctx.bhage + y2bh - origin, x2) - x3))


@height_family('bruce_nigh')
def bruce_nigh(ctx: HeightContext) -> float:
    """Nigh and Mitchell juvenile curve smoothed into Bruce at total age 50."""
    si = ctx.site_index
    y2bh = 13.25 - si / 6.096
    x2 = _bruce_exponent(si)
    x3 = safe_pow(50.0 + y2bh - 0.5, x2)
    x4 = math.log(1.372 / si) / (safe_pow(y2bh - 0.5, x2) - x3)
    if ctx.tage >= 50:
        return si * math.exp(x4 * (safe_pow(ctx.tage, x2) - x3))

    height_50 = si * math.exp(x4 * (safe_pow(50, x2) - x3))
    scale = -0.0123 + 0.00158 * si
    rate = safe_pow(height_50 * safe_pow(50, -2.037) / scale, 1.0 / 50)
    return scale * safe_pow(ctx.tage, 2.037) * safe_pow(rate, ctx.tage)


# ============================================================================
# Total-age curves and splices
# ============================================================================

def _nigh_total(k: dict, si: float, tage: float) -> float:
    return (k['c0'] + k['c1'] * si) * safe_pow(tage, k['power']) * safe_pow(k['rate'], tage)


@height_family('nigh_total_age')
def nigh_total_age(ctx: HeightContext) -> float:
    """Nigh total-age curves, defined only for young stands."""
    k = ctx.coefficients
    if ctx.tage > k['max_age'] or ctx.site_index < k.get('min_site_index', 0.0):
        raise ComputationError(ErrorKind.NO_CONVERGENCE,
                               f"{ctx.definition.key} is fitted to total age {k['max_age']:g}")
    return _nigh_total(k, ctx.site_index, ctx.tage)


@height_family('nigh_juvenile_total_age')
def nigh_juvenile_total_age(ctx: HeightContext) -> float:
    if ctx.tage > ctx.coefficients['max_age']:
        raise ComputationError(ErrorKind.NO_CONVERGENCE,
                               f"{ctx.definition.key} is fitted to total age "
                               f"{ctx.coefficients['max_age']:g}")
    return ctx.juvenile()


@height_family('logistic_nigh_splice')
def logistic_nigh_splice(ctx: HeightContext) -> float:
    """Logistic breast-height curve joined to Nigh's total-age curve.

    Low sites use the logistic curve alone. High sites use the total-age
    curve until breast height, the logistic curve from two years later,
    and a straight line between the two in the gap.
    """
    k = ctx.coefficients
    si = ctx.site_index
    logistic = k['logistic']
    log_ref = math.log(49.5)

    if si < k['site_threshold']:
        if ctx.bhage > 0.5:
            return _logistic_ratio(logistic, si, log_ref, math.log(ctx.bhage - 0.5))
        return ctx.juvenile()

    y2bh = ctx.y2bh
    if ctx.tage < y2bh - 0.5:
        return _nigh_total(k['total_age'], si, ctx.tage)
    if ctx.tage > y2bh + 2 - 0.5:
        return _logistic_ratio(logistic, si, log_ref, math.log(ctx.bhage - 0.5))

    start = _nigh_total(k['total_age'], si, y2bh - 0.5)
    end = _logistic_ratio(logistic, si, log_ref, math.log(2 - 0.5))
    return start + (end - start) * ctx.bhage / 2.0


# ============================================================================
# Delegating families
# ============================================================================

@height_family('hu_garcia')
def hu_garcia(ctx: HeightContext) -> float:
    from .hu_garcia import hu_garcia_height, solve_q

    if not ctx.past_origin():
        return ctx.juvenile()
    q = solve_q(ctx.site_index, 50.0)
    return hu_garcia_height(q, ctx.bhage)


@height_family('growth_intercept')
def growth_intercept(ctx: HeightContext) -> float:
    from .growth_intercept import gi_height_from_site_index

    return gi_height_from_site_index(ctx.catalog, ctx.definition.id, ctx.bhage, ctx.site_index)
