"""Tests for age-type conversion and the height evaluator."""
import math

import pytest

from pysindex.curves import AgeType, Curve
from pysindex.exceptions import ComputationError, ErrorKind

TOTAL_AGE_FAMILIES = {'nigh_total_age', 'nigh_juvenile_total_age'}


def _kind(call, *args):
    with pytest.raises(ComputationError) as exc_info:
        call(*args)
    return exc_info.value.kind


# ============================================================================
# Age Type Conversion
# ============================================================================

class TestAgeToAge:
    """Total and breast-height age conversion."""

    def test_breast_to_total(self, engine):
        assert engine.age_to_age(Curve.SW_GOUDIE_PLA, 10.0, AgeType.BREAST, AgeType.TOTAL, 5.5) == 15.5

    def test_total_to_breast(self, engine):
        assert engine.age_to_age(Curve.SW_GOUDIE_PLA, 15.5, AgeType.TOTAL, AgeType.BREAST, 5.5) == 10.0

    def test_half_year_origin(self, engine):
        assert engine.age_to_age(Curve.PLI_THROWER, 10.0, AgeType.BREAST, AgeType.TOTAL, 5.5) == 15.0
        assert engine.age_to_age(Curve.PLI_THROWER, 15.0, AgeType.TOTAL, AgeType.BREAST, 5.5) == 10.0

    def test_negative_clamped(self, engine):
        assert engine.age_to_age(Curve.SW_GOUDIE_PLA, 2.0, AgeType.TOTAL, AgeType.BREAST, 5.5) == 0.0

    @pytest.mark.parametrize("curve", [Curve.SW_GOUDIE_PLA, Curve.PLI_THROWER, Curve.FDC_BRUCE])
    @pytest.mark.parametrize("age", [0.0, 1.0, 10.5, 99.0])
    def test_involution(self, engine, curve, age):
        total = engine.age_to_age(curve, age, AgeType.BREAST, AgeType.TOTAL, 5.5)
        assert engine.age_to_age(curve, total, AgeType.TOTAL, AgeType.BREAST, 5.5) == pytest.approx(age)

    @pytest.mark.parametrize("age_type", [AgeType.TOTAL, AgeType.BREAST])
    def test_identity_unsupported(self, engine, age_type):
        kind = _kind(engine.age_to_age, Curve.SW_GOUDIE_PLA, 10.0, age_type, age_type, 5.5)
        assert kind == ErrorKind.UNSUPPORTED_AGE_TYPE_COMBINATION

    def test_unknown_curve_checked_first(self, engine):
        kind = _kind(engine.age_to_age, 9999, 10.0, AgeType.TOTAL, AgeType.TOTAL, 5.5)
        assert kind == ErrorKind.UNKNOWN_CURVE


# ============================================================================
# Height Evaluator
# ============================================================================

class TestIndexToHeight:
    """Height from site index and age."""

    def test_bruce_at_reference_age(self, engine):
        height = engine.index_to_height(Curve.FDC_BRUCE, 50, AgeType.BREAST, 30.0, 8.5, 0.5)
        assert height == pytest.approx(30.0, rel=0.02)

    def test_bruce_total_age(self, engine):
        y2bh = engine.si_y2bh(Curve.FDC_BRUCE, 30.0)
        height = engine.index_to_height(Curve.FDC_BRUCE, 50 + y2bh, AgeType.TOTAL, 30.0, y2bh, 0.5)
        assert height == pytest.approx(30.0, rel=1e-6)

    def test_bruce_young_total_age_is_shorter(self, engine):
        y2bh = engine.si_y2bh(Curve.FDC_BRUCE, 30.0)
        height = engine.index_to_height(Curve.FDC_BRUCE, 50, AgeType.TOTAL, 30.0, y2bh, 0.5)
        assert 0.0 < height < 30.0

    @pytest.mark.parametrize("curve", [
        Curve.SW_GOUDIE_PLA, Curve.PLI_THROWER, Curve.SW_THROWER, Curve.FDI_THROWERAC,
        Curve.SW_HUANG_PLA, Curve.PLI_HUANG_NAT,
    ])
    def test_reference_age_returns_site_index(self, engine, curve):
        y2bh = engine.si_y2bh_rounded(curve, 20.0)
        height = engine.index_to_height(curve, 50, AgeType.BREAST, 20.0, y2bh, 0.5)
        assert height == pytest.approx(20.0, abs=1e-9)

    def test_every_curve_evaluates(self, engine, catalog):
        for definition in catalog.curves():
            if definition.is_growth_intercept or definition.family in TOTAL_AGE_FAMILIES:
                continue
            y2bh = engine.si_y2bh_rounded(definition.id, 20.0)
            height = engine.index_to_height(definition.id, 50, AgeType.BREAST, 20.0, y2bh, 0.5)
            assert math.isfinite(height) and height > 0.0, definition.key

    @pytest.mark.parametrize("curve", [Curve.SW_GOUDIE_PLA, Curve.PLI_THROWER, Curve.FDC_BRUCE,
                                       Curve.SW_HU_GARCIA, Curve.FDI_MILNER])
    def test_monotone_in_age(self, engine, curve):
        y2bh = engine.si_y2bh_rounded(curve, 25.0)
        heights = [engine.index_to_height(curve, age, AgeType.BREAST, 25.0, y2bh, 0.5)
                   for age in range(1, 151)]
        assert all(b >= a for a, b in zip(heights, heights[1:]))

    @pytest.mark.parametrize("curve", [Curve.SW_GOUDIE_PLA, Curve.PLI_THROWER])
    def test_monotone_in_site_index(self, engine, curve):
        heights = [engine.index_to_height(curve, 30, AgeType.BREAST, si, 6.5, 0.5)
                   for si in range(5, 41)]
        assert all(b > a for a, b in zip(heights, heights[1:]))

    def test_below_breast_height_juvenile(self, engine):
        # total age 3 with 6.5 years to breast height is below the fitted curve
        height = engine.index_to_height(Curve.SW_GOUDIE_PLA, 3, AgeType.TOTAL, 20.0, 6.5, 0.5)
        assert height == pytest.approx(3 * 3 * 1.3 / 6.5 / 6.5)

    def test_zero_total_age(self, engine):
        assert engine.index_to_height(Curve.SW_GOUDIE_PLA, 0, AgeType.TOTAL, 20.0, 6.5, 0.5) == 0.0

    def test_negative_total_age(self, engine):
        kind = _kind(engine.index_to_height, Curve.SW_GOUDIE_PLA, -1, AgeType.TOTAL, 20.0, 6.5, 0.5)
        assert kind == ErrorKind.NO_CONVERGENCE

    def test_y2bh_snapped_to_half_year(self, engine):
        a = engine.index_to_height(Curve.SW_GOUDIE_PLA, 3, AgeType.TOTAL, 20.0, 6.1, 0.5)
        b = engine.index_to_height(Curve.SW_GOUDIE_PLA, 3, AgeType.TOTAL, 20.0, 6.9, 0.5)
        assert a == b

    def test_growth_proportion_moves_origin(self, engine):
        early = engine.index_to_height(Curve.PLI_THROWER, 2, AgeType.BREAST, 20.0, 6.5, 0.2)
        late = engine.index_to_height(Curve.PLI_THROWER, 2, AgeType.BREAST, 20.0, 6.5, 0.8)
        assert early != late

    def test_high_site_guard_stays_monotone(self, engine):
        # site index 50 is above 43 + 1.667 * age until breast-height age 4.2
        heights = [engine.index_to_height(Curve.CWC_KURUCZ, age, AgeType.BREAST, 50.0, 5.5, 0.5)
                   for age in range(1, 30)]
        assert all(h > 0.0 for h in heights)
        assert all(b >= a for a, b in zip(heights, heights[1:]))

    def test_wiley_high_site_guard(self, engine):
        # site index 70 is above 60 + 1.667 * age until breast-height age 6
        heights = [engine.index_to_height(Curve.HWC_WILEY, age, AgeType.BREAST, 70.0, 1.5, 0.5)
                   for age in (1, 2, 3, 4)]
        steps = [b - a for a, b in zip(heights, heights[1:])]
        assert heights[0] > 1.37
        assert steps == pytest.approx([steps[0]] * 3)
        safe = engine.index_to_height(Curve.HWC_WILEY, 10 / 1.667 + 0.1, AgeType.BREAST, 70.0,
                                      1.5, 0.5)
        assert heights[-1] < safe


# ============================================================================
# Spliced Curves
# ============================================================================

SPLICES = [(Curve.SW_GOUDNIGH, 19.5), (Curve.PLI_THROWNIGH, 18.5)]


def _logistic(k, si, bhage):
    x = k['b0'] + k['b_si'] * math.log(si - 1.3)
    return 1.3 + (si - 1.3) * (1 + math.exp(x + k['b_age'] * math.log(49.5))) / (
        1 + math.exp(x + k['b_age'] * math.log(bhage - 0.5)))


def _nigh_total(k, si, tage):
    return (k['c0'] + k['c1'] * si) * tage ** k['power'] * k['rate'] ** tage


class TestLogisticNighSplice:
    """Nigh's total-age curve below breast height, the logistic curve above."""

    @pytest.mark.parametrize("curve,threshold", SPLICES)
    def test_low_site_uses_logistic(self, engine, catalog, curve, threshold):
        k = catalog.get_curve(curve).coefficients
        si = threshold - 2.0
        y2bh = engine.si_y2bh_rounded(curve, si)
        height = engine.index_to_height(curve, 20, AgeType.BREAST, si, y2bh, 0.5)
        assert height == pytest.approx(_logistic(k['logistic'], si, 20))

    @pytest.mark.parametrize("curve,threshold", SPLICES)
    @pytest.mark.parametrize("offset", [0.0, 3.0])
    def test_high_site_young_uses_total_age(self, engine, catalog, curve, threshold, offset):
        k = catalog.get_curve(curve).coefficients
        si = threshold + offset
        y2bh = engine.si_y2bh_rounded(curve, si)
        tage = (y2bh - 0.5) / 2
        height = engine.index_to_height(curve, tage, AgeType.TOTAL, si, y2bh, 0.5)
        assert height == pytest.approx(_nigh_total(k['total_age'], si, tage))

    @pytest.mark.parametrize("curve,threshold", SPLICES)
    def test_high_site_old_uses_logistic(self, engine, catalog, curve, threshold):
        k = catalog.get_curve(curve).coefficients
        si = threshold + 3.0
        y2bh = engine.si_y2bh_rounded(curve, si)
        height = engine.index_to_height(curve, 20, AgeType.BREAST, si, y2bh, 0.5)
        assert height == pytest.approx(_logistic(k['logistic'], si, 20))

    @pytest.mark.parametrize("curve,threshold", SPLICES)
    def test_joins_are_continuous(self, engine, catalog, curve, threshold):
        k = catalog.get_curve(curve).coefficients
        si = threshold + 3.0
        y2bh = engine.si_y2bh_rounded(curve, si)

        def height(tage):
            return engine.index_to_height(curve, tage, AgeType.TOTAL, si, y2bh, 0.5)

        start = _nigh_total(k['total_age'], si, y2bh - 0.5)
        end = _logistic(k['logistic'], si, 2.0)
        assert height(y2bh - 0.5) == pytest.approx(start)
        assert height(y2bh - 0.5 - 1e-6) == pytest.approx(start, abs=1e-4)
        assert height(y2bh + 0.5) == pytest.approx((start + end) / 2)
        assert height(y2bh + 1.5) == pytest.approx(end)
        assert height(y2bh + 1.5 + 1e-6) == pytest.approx(end, abs=1e-4)


class TestBruceNighSplice:
    """Nigh and Mitchell below total age 50, Bruce from there on."""

    def test_continuous_at_total_age_50(self, engine):
        at_join = engine.index_to_height(Curve.FDC_BRUCENIGH, 50, AgeType.TOTAL, 30.0, 8.5, 0.5)
        below = engine.index_to_height(Curve.FDC_BRUCENIGH, 50 - 1e-6, AgeType.TOTAL, 30.0,
                                       8.5, 0.5)
        assert below == pytest.approx(at_join, rel=1e-6)

    def test_bruce_passes_through_site_index(self, engine):
        # Bruce reaches site index at total age 49.5 plus its unrounded y2bh
        tage = 49.5 + 13.25 - 30.0 / 6.096
        height = engine.index_to_height(Curve.FDC_BRUCENIGH, tage, AgeType.TOTAL, 30.0, 8.5, 0.5)
        assert height == pytest.approx(30.0)

    def test_monotone_across_join(self, engine):
        heights = [engine.index_to_height(Curve.FDC_BRUCENIGH, tage, AgeType.TOTAL, 30.0, 8.5, 0.5)
                   for tage in range(1, 121)]
        assert all(b > a for a, b in zip(heights, heights[1:]))


# ============================================================================
# Total-Age Curves
# ============================================================================

TOTAL_AGE_CURVES = [Curve.PLI_NIGHTA98, Curve.SW_NIGHTA, Curve.FDC_NIGHTA,
                    Curve.PLI_NIGHTA2004, Curve.SE_NIGHTA, Curve.SW_NIGHTA2004]


class TestTotalAgeCurves:
    """Curves fitted to young stands only."""

    @pytest.mark.parametrize("curve", TOTAL_AGE_CURVES)
    def test_cutoff(self, engine, catalog, curve):
        max_age = catalog.get_curve(curve).coefficients['max_age']
        height = engine.index_to_height(curve, max_age, AgeType.TOTAL, 20.0, 5.5, 0.5)
        assert math.isfinite(height) and height > 0.0
        kind = _kind(engine.index_to_height, curve, max_age + 0.5, AgeType.TOTAL, 20.0, 5.5, 0.5)
        assert kind == ErrorKind.NO_CONVERGENCE

    def test_total_age_families_cover_list(self, catalog):
        keys = {d.key for d in catalog.curves() if d.family in TOTAL_AGE_FAMILIES}
        assert keys == {curve.name for curve in TOTAL_AGE_CURVES}

    def test_minimum_site_index(self, engine):
        assert engine.index_to_height(Curve.SW_NIGHTA, 10, AgeType.TOTAL, 14.2, 5.5, 0.5) > 0.0
        kind = _kind(engine.index_to_height, Curve.SW_NIGHTA, 10, AgeType.TOTAL, 14.0, 5.5, 0.5)
        assert kind == ErrorKind.NO_CONVERGENCE

    @pytest.mark.parametrize("si,tage", [(20.0, 10.0), (25.0, 15.0), (12.0, 4.0)])
    def test_pli_nigh_love_values(self, engine, si, tage):
        expected = (-0.03993 + 0.004828 * si) * tage ** 1.902 * 0.9645 ** tage
        height = engine.index_to_height(Curve.PLI_NIGHTA98, tage, AgeType.TOTAL, si, 5.5, 0.5)
        assert height == pytest.approx(expected)

    def test_pli_nigh_love_low_site_is_negative(self, engine):
        height = engine.index_to_height(Curve.PLI_NIGHTA98, 0.3, AgeType.TOTAL, 5.0, 1.2, 0.5)
        assert height == pytest.approx(-0.00158, abs=1e-5)

    def test_pli_nigh_love_ignores_y2bh(self, engine):
        a = engine.index_to_height(Curve.PLI_NIGHTA98, 8, AgeType.TOTAL, 20.0, 3.5, 0.5)
        b = engine.index_to_height(Curve.PLI_NIGHTA98, 8, AgeType.TOTAL, 20.0, 9.5, 0.5)
        assert a == b


# ============================================================================
# Overflow at Old Ages
# ============================================================================

class TestFarrOldAges:
    """Farr's log-age polynomials overflow centuries past their data."""

    @pytest.mark.parametrize("curve", [Curve.HWC_FARR, Curve.SS_FARR])
    @pytest.mark.parametrize("age", [700, 999])
    def test_overflow_is_no_answer(self, engine, curve, age):
        kind = _kind(engine.index_to_height, curve, age, AgeType.BREAST, 30.0, 5.5, 0.5)
        assert kind == ErrorKind.NO_CONVERGENCE

    @pytest.mark.parametrize("curve", [Curve.HWC_FARR, Curve.SS_FARR])
    def test_fitted_range_is_finite(self, engine, curve):
        height = engine.index_to_height(curve, 50, AgeType.BREAST, 30.0, 5.5, 0.5)
        assert height == pytest.approx(30.0, abs=0.5)


# ============================================================================
# Boundaries
# ============================================================================

class TestHeightBoundaries:
    """Site index at and just above breast height."""

    def test_site_index_at_breast_height(self, engine):
        kind = _kind(engine.index_to_height, Curve.SW_GOUDIE_PLA, 50, AgeType.BREAST, 1.3, 5.0, 0.5)
        assert kind == ErrorKind.SITE_INDEX_TOO_LOW

    def test_site_index_just_above_breast_height(self, engine):
        height = engine.index_to_height(Curve.SW_GOUDIE_PLA, 50, AgeType.BREAST, 1.30001, 5.0, 0.5)
        assert math.isfinite(height)

    def test_imperial_breast_height(self, engine):
        kind = _kind(engine.index_to_height, Curve.FDC_BRUCE, 50, AgeType.BREAST, 1.37, 5.0, 0.5)
        assert kind == ErrorKind.SITE_INDEX_TOO_LOW

    @pytest.mark.parametrize("curve", [-1, 9999])
    def test_unknown_curve(self, engine, curve):
        kind = _kind(engine.index_to_height, curve, 50, AgeType.BREAST, 1.0, 5.0, 0.5)
        assert kind == ErrorKind.UNKNOWN_CURVE

    def test_growth_intercept_without_equation(self, engine):
        kind = _kind(engine.index_to_height, Curve.SW_NIGHGI, 20, AgeType.BREAST, 20.0, 0.5, 0.5)
        assert kind == ErrorKind.UNKNOWN_CURVE
