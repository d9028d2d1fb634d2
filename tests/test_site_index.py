"""Tests for site index from height and age, growth intercept curves and Hu-Garcia."""
import logging

import pytest

from pysindex.curves import AgeType, Curve, EstimationMode
from pysindex.exceptions import ComputationError, ErrorKind
from pysindex.hu_garcia import hu_garcia_bhage, hu_garcia_height, solve_q

GI_CURVE = Curve.SW_NIGHGI


def _kind(call, *args):
    with pytest.raises(ComputationError) as exc_info:
        call(*args)
    return exc_info.value.kind


# ============================================================================
# Iteration
# ============================================================================

class TestSiteIndexIteration:
    """Site index found by searching the height evaluator."""

    def test_reference_age(self, engine):
        site_index = engine.height_to_index(Curve.SW_GOUDIE_PLA, 50, AgeType.BREAST, 20.0)
        assert site_index == pytest.approx(20.0, abs=0.01)

    @pytest.mark.parametrize("curve", [Curve.SW_GOUDIE_PLA, Curve.PLI_THROWER, Curve.FDC_BRUCE])
    def test_round_trip_breast_age(self, engine, curve):
        y2bh = engine.si_y2bh_rounded(curve, 22.0)
        height = engine.index_to_height(curve, 30, AgeType.BREAST, 22.0, y2bh, 0.5)
        site_index = engine.height_to_index(curve, 30, AgeType.BREAST, height)
        assert site_index == pytest.approx(22.0, abs=0.01)

    def test_round_trip_total_age(self, engine):
        height = engine.index_to_height(Curve.SW_GOUDIE_PLA, 40, AgeType.TOTAL, 20.0, 9.5, 0.5)
        site_index = engine.height_to_index(Curve.SW_GOUDIE_PLA, 40, AgeType.TOTAL, height)
        assert site_index == pytest.approx(20.0, abs=0.05)

    def test_taller_stands_have_higher_site_index(self, engine):
        indices = [engine.height_to_index(Curve.SW_GOUDIE_PLA, 30, AgeType.BREAST, h)
                   for h in (5.0, 10.0, 15.0, 20.0)]
        assert indices == sorted(indices)

    def test_stays_above_breast_height(self, engine):
        site_index = engine.height_to_index(Curve.SW_GOUDIE_PLA, 10, AgeType.BREAST, 1.30001)
        assert 1.3 < site_index < 2.0


# ============================================================================
# Closed Forms
# ============================================================================

class TestDirectEstimation:
    """Closed-form site index where the curve has one."""

    @pytest.mark.parametrize("curve", [Curve.FDI_MILNER, Curve.FDI_VDP_MONT, Curve.DR_NIGH])
    def test_direct_inverts_height(self, engine, curve):
        height = engine.index_to_height(curve, 30, AgeType.BREAST, 25.0, 5.5, 0.5)
        site_index = engine.height_to_index(curve, 30, AgeType.BREAST, height, EstimationMode.DIRECT)
        assert site_index == pytest.approx(25.0, rel=1e-9)

    @pytest.mark.parametrize("curve", [Curve.FDI_MILNER, Curve.FDI_VDP_MONT, Curve.DR_NIGH,
                                       Curve.SW_HU_GARCIA])
    def test_direct_agrees_with_iteration(self, engine, curve):
        direct = engine.height_to_index(curve, 50, AgeType.BREAST, 20.0, EstimationMode.DIRECT)
        iterated = engine.height_to_index(curve, 50, AgeType.BREAST, 20.0, EstimationMode.ITERATE)
        assert direct == pytest.approx(iterated, abs=0.01)

    def test_curve_without_closed_form_iterates(self, engine):
        direct = engine.height_to_index(Curve.SW_GOUDIE_PLA, 30, AgeType.BREAST, 12.0,
                                        EstimationMode.DIRECT)
        iterated = engine.height_to_index(Curve.SW_GOUDIE_PLA, 30, AgeType.BREAST, 12.0)
        assert direct == iterated

    def test_total_age_iterates(self, engine):
        direct = engine.height_to_index(Curve.FDI_MILNER, 40, AgeType.TOTAL, 15.0,
                                        EstimationMode.DIRECT)
        iterated = engine.height_to_index(Curve.FDI_MILNER, 40, AgeType.TOTAL, 15.0)
        assert direct == iterated

    def test_falls_back_before_origin(self, engine, caplog):
        with caplog.at_level(logging.DEBUG, logger='pysindex'):
            engine.height_to_index(Curve.DR_NIGH, 0.5, AgeType.BREAST, 1.3, EstimationMode.DIRECT)
        assert "closed form for DR_NIGH does not apply" in caplog.text


# ============================================================================
# Guards
# ============================================================================

class TestSiteIndexGuards:
    """Input checks of the site index evaluator."""

    def test_height_below_breast_height(self, engine):
        kind = _kind(engine.height_to_index, Curve.SW_GOUDIE_PLA, 30, AgeType.BREAST, 1.29999)
        assert kind == ErrorKind.HEIGHT_TOO_LOW

    @pytest.mark.parametrize("age", [0.0, -3.0])
    def test_age_must_be_positive(self, engine, age):
        kind = _kind(engine.height_to_index, Curve.SW_GOUDIE_PLA, age, AgeType.BREAST, 10.0)
        assert kind == ErrorKind.NO_CONVERGENCE

    @pytest.mark.parametrize("curve", [-1, 9999])
    def test_unknown_curve_checked_first(self, engine, curve):
        kind = _kind(engine.height_to_index, curve, 0.0, AgeType.BREAST, 0.5)
        assert kind == ErrorKind.UNKNOWN_CURVE


# ============================================================================
# Growth Intercept
# ============================================================================

class TestGrowthIntercept:
    """Growth intercept curves with a loaded equation."""

    def test_site_index_at_reference_age(self, gi_engine):
        assert gi_engine.height_to_index(GI_CURVE, 50, AgeType.BREAST, 20.0) == pytest.approx(20.0)

    def test_younger_stand_of_same_height_is_better_site(self, gi_engine):
        young = gi_engine.height_to_index(GI_CURVE, 20, AgeType.BREAST, 10.0)
        old = gi_engine.height_to_index(GI_CURVE, 40, AgeType.BREAST, 10.0)
        assert young > old

    def test_estimation_mode_ignored(self, gi_engine):
        direct = gi_engine.height_to_index(GI_CURVE, 20, AgeType.BREAST, 10.0, EstimationMode.DIRECT)
        iterated = gi_engine.height_to_index(GI_CURVE, 20, AgeType.BREAST, 10.0)
        assert direct == iterated

    def test_below_minimum_age(self, gi_engine):
        kind = _kind(gi_engine.height_to_index, GI_CURVE, 0.5, AgeType.BREAST, 10.0)
        assert kind == ErrorKind.BELOW_MINIMUM_GI_AGE

    def test_above_maximum_age(self, gi_engine):
        kind = _kind(gi_engine.height_to_index, GI_CURVE, 60, AgeType.BREAST, 10.0)
        assert kind == ErrorKind.ABOVE_MAXIMUM_GI_AGE

    def test_total_age_unsupported(self, gi_engine):
        kind = _kind(gi_engine.height_to_index, GI_CURVE, 20, AgeType.TOTAL, 10.0)
        assert kind == ErrorKind.TOTAL_AGE_UNSUPPORTED_FOR_GROWTH_INTERCEPT

    def test_height_from_site_index(self, gi_engine):
        site_index = gi_engine.height_to_index(GI_CURVE, 20, AgeType.BREAST, 10.0)
        height = gi_engine.index_to_height(GI_CURVE, 20, AgeType.BREAST, site_index, 0.5, 0.5)
        assert height == pytest.approx(10.0, abs=0.02)

    @pytest.mark.parametrize("bhage", [0.4, 0.7])
    def test_height_below_minimum_age(self, gi_engine, bhage):
        kind = _kind(gi_engine.index_to_height, GI_CURVE, bhage, AgeType.BREAST, 20.0, 0.5, 0.5)
        assert kind == ErrorKind.BELOW_MINIMUM_GI_AGE

    def test_height_above_maximum_age(self, gi_engine):
        kind = _kind(gi_engine.index_to_height, GI_CURVE, 60, AgeType.BREAST, 20.0, 0.5, 0.5)
        assert kind == ErrorKind.ABOVE_MAXIMUM_GI_AGE

    def test_packaged_catalog_has_no_equation(self, engine):
        kind = _kind(engine.height_to_index, GI_CURVE, 20, AgeType.BREAST, 10.0)
        assert kind == ErrorKind.UNKNOWN_CURVE


# ============================================================================
# Hu and Garcia
# ============================================================================

class TestHuGarcia:
    """The single-parameter white spruce model."""

    def test_solve_q_passes_through_site_index(self):
        # the search stops on a q step below 1e-7, about 1e-4 m of height here
        q = solve_q(20.0, 50.0)
        assert hu_garcia_height(q, 50.0) == pytest.approx(20.0, abs=1e-3)

    @pytest.mark.parametrize("q", [0.012, 0.025, 0.04])
    def test_solve_q_recovers_parameter(self, q):
        assert solve_q(hu_garcia_height(q, 50.0), 50.0) == pytest.approx(q, abs=1e-6)

    def test_solve_q_below_seed_height(self):
        # a site index under the seed curve walks q downward first
        q = solve_q(12.0, 50.0)
        assert q < 0.02
        assert hu_garcia_height(q, 50.0) == pytest.approx(12.0, abs=1e-3)

    def test_height_increases_with_q(self):
        assert hu_garcia_height(0.03, 40.0) > hu_garcia_height(0.02, 40.0)

    def test_bhage_inverts_height(self):
        q = solve_q(25.0, 50.0)
        assert hu_garcia_bhage(q, hu_garcia_height(q, 30.0)) == pytest.approx(30.0)

    def test_height_above_asymptote(self):
        with pytest.raises(ComputationError) as exc_info:
            hu_garcia_bhage(0.02, 1000.0)
        assert exc_info.value.kind == ErrorKind.NO_CONVERGENCE

    def test_curve_passes_through_site_index(self, engine):
        height = engine.index_to_height(Curve.SW_HU_GARCIA, 50, AgeType.BREAST, 18.0, 9.5, 0.5)
        assert height == pytest.approx(18.0, abs=1e-3)
