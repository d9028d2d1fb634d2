"""
Site index engine.

``SiteIndexEngine`` holds one immutable catalog and exposes the five
conversions between age, height, site index and years to breast height.
Failures are raised as ``ComputationError``; use ``pysindex.legacy`` for
the sentinel-returning interface.

Usage:
    from pysindex import SiteIndexEngine, Curve, AgeType

    engine = SiteIndexEngine()
    height = engine.index_to_height(Curve.FDC_BRUCE, 50, AgeType.BREAST, 30.0, 7.5, 0.5)
"""
from typing import List, Optional

from . import age as _age
from . import site_index as _site_index
from .age_conversion import age_to_age as _age_to_age
from .catalog import Catalog, CurveDefinition, get_catalog
from .curves import AgeType, CurveLike, CurveUse, EstimationMode
from .height import index_to_height as _index_to_height
from .logging_config import get_logger
from .years_to_breast_height import si_y2bh as _si_y2bh
from .years_to_breast_height import si_y2bh_rounded as _si_y2bh_rounded

logger = get_logger(__name__)

__all__ = [
    'SiteIndexEngine',
    'get_engine',
    'age_to_age',
    'index_to_height',
    'index_to_age',
    'height_to_index',
    'si_y2bh',
    'si_y2bh_rounded',
]


class SiteIndexEngine:
    """Conversions between age, height and site index over a curve catalog.

    Attributes:
        catalog: The catalog every call reads from
    """

    def __init__(self, catalog: Optional[Catalog] = None):
        """Initialize the engine.

        Args:
            catalog: Catalog to use. Defaults to the packaged catalog.
        """
        self.catalog = catalog if catalog is not None else get_catalog()
        logger.debug("SiteIndexEngine using a catalog of %d curves", len(self.catalog))

    def __repr__(self) -> str:
        return f"SiteIndexEngine(curves={len(self.catalog)})"

    # ------------------------------------------------------------------
    # Conversions
    # ------------------------------------------------------------------

    def age_to_age(self, curve: CurveLike, age1: float, age1_type: AgeType,
                   age2_type: AgeType, y2bh: float) -> float:
        """Convert between total and breast-height age."""
        return _age_to_age(self.catalog, curve, age1, age1_type, age2_type, y2bh)

    def index_to_height(self, curve: CurveLike, age: float, age_type: AgeType,
                        site_index: float, y2bh: float, pi: float = 0.5) -> float:
        """Height (m) from site index and age."""
        return _index_to_height(self.catalog, curve, age, age_type, site_index, y2bh, pi)

    def index_to_age(self, curve: CurveLike, site_height: float, age_type: AgeType,
                     site_index: float, y2bh: float) -> float:
        """Age from site index and height."""
        return _age.index_to_age(self.catalog, curve, site_height, age_type, site_index, y2bh)

    def height_to_index(self, curve: CurveLike, age: float, age_type: AgeType, height: float,
                        estimation_mode: EstimationMode = EstimationMode.ITERATE) -> float:
        """Site index (m) from height and age."""
        return _site_index.height_to_index(self.catalog, curve, age, age_type, height,
                                           estimation_mode)

    def si_y2bh(self, curve: CurveLike, site_index: float) -> float:
        """Years to breast height for a site index."""
        return _si_y2bh(self.catalog, curve, site_index)

    def si_y2bh_rounded(self, curve: CurveLike, site_index: float) -> float:
        """Years to breast height snapped onto the half year."""
        return _si_y2bh_rounded(self.catalog, curve, site_index)

    # ------------------------------------------------------------------
    # Catalog lookups
    # ------------------------------------------------------------------

    def curve(self, curve: CurveLike) -> CurveDefinition:
        return self.catalog.get_curve(curve)

    def curve_name(self, curve: CurveLike) -> str:
        return self.catalog.curve_name(curve)

    def curve_use(self, curve: CurveLike) -> CurveUse:
        return self.catalog.curve_use(curve)

    def curves_for_species(self, species: str) -> List[CurveLike]:
        return self.catalog.curves_for_species(species)

    def default_curve(self, species: str, establishment=None) -> CurveLike:
        return self.catalog.default_curve(species, establishment)


_default_engine: Optional[SiteIndexEngine] = None


def get_engine() -> SiteIndexEngine:
    """Engine over the packaged catalog, created on first use."""
    global _default_engine
    if _default_engine is None:
        _default_engine = SiteIndexEngine()
    return _default_engine


# ============================================================================
# Module-level shortcuts over the default engine
# ============================================================================

def age_to_age(curve: CurveLike, age1: float, age1_type: AgeType,
               age2_type: AgeType, y2bh: float) -> float:
    return get_engine().age_to_age(curve, age1, age1_type, age2_type, y2bh)


def index_to_height(curve: CurveLike, age: float, age_type: AgeType,
                    site_index: float, y2bh: float, pi: float = 0.5) -> float:
    return get_engine().index_to_height(curve, age, age_type, site_index, y2bh, pi)


def index_to_age(curve: CurveLike, site_height: float, age_type: AgeType,
                 site_index: float, y2bh: float) -> float:
    return get_engine().index_to_age(curve, site_height, age_type, site_index, y2bh)


def height_to_index(curve: CurveLike, age: float, age_type: AgeType, height: float,
                    estimation_mode: EstimationMode = EstimationMode.ITERATE) -> float:
    return get_engine().height_to_index(curve, age, age_type, height, estimation_mode)


def si_y2bh(curve: CurveLike, site_index: float) -> float:
    return get_engine().si_y2bh(curve, site_index)


def si_y2bh_rounded(curve: CurveLike, site_index: float) -> float:
    return get_engine().si_y2bh_rounded(curve, site_index)
