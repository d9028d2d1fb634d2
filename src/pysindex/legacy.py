"""
Sentinel-returning interface.

Older callers expect the conversions to return a negative number instead of
raising. Every function here has the engine's signature, plus an optional
``engine`` keyword, and returns ``float(kind.sentinel)`` for any
``ComputationError``:

    -1  site index or height too low
    -2  breast-height age below the growth intercept range
    -3  breast-height age above the growth intercept range
    -4  no answer
    -5  unknown curve
    -6  unknown site class
    -7  unknown forest inventory zone
    -8  unknown species code
    -9  not available for growth intercept curves
    -10 unknown species
    -11 unsupported age type combination
    -12 unknown establishment type
"""
from functools import wraps
from typing import Optional

from .curves import AgeType, CurveLike, EstimationMode
from .engine import SiteIndexEngine, get_engine
from .exceptions import ComputationError

__all__ = [
    'age_to_age',
    'index_to_height',
    'index_to_age',
    'height_to_index',
    'si_y2bh',
    'si_y2bh_rounded',
    'class_to_index',
    'species_map',
    'species_remap',
    'default_curve',
    'convert_site_index',
]


def _sentinel_on_error(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ComputationError as e:
            return float(e.kind.sentinel)
    return wrapper


def _engine(engine: Optional[SiteIndexEngine]) -> SiteIndexEngine:
    return engine if engine is not None else get_engine()


@_sentinel_on_error
def age_to_age(curve: CurveLike, age1: float, age1_type: AgeType, age2_type: AgeType,
               y2bh: float, *, engine: Optional[SiteIndexEngine] = None) -> float:
    return _engine(engine).age_to_age(curve, age1, age1_type, age2_type, y2bh)


@_sentinel_on_error
def index_to_height(curve: CurveLike, age: float, age_type: AgeType, site_index: float,
                    y2bh: float, pi: float, *, engine: Optional[SiteIndexEngine] = None) -> float:
    return _engine(engine).index_to_height(curve, age, age_type, site_index, y2bh, pi)


@_sentinel_on_error
def index_to_age(curve: CurveLike, site_height: float, age_type: AgeType, site_index: float,
                 y2bh: float, *, engine: Optional[SiteIndexEngine] = None) -> float:
    return _engine(engine).index_to_age(curve, site_height, age_type, site_index, y2bh)


@_sentinel_on_error
def height_to_index(curve: CurveLike, age: float, age_type: AgeType, height: float,
                    estimation_mode: EstimationMode, *,
                    engine: Optional[SiteIndexEngine] = None) -> float:
    return _engine(engine).height_to_index(curve, age, age_type, height, estimation_mode)


@_sentinel_on_error
def si_y2bh(curve: CurveLike, site_index: float, *,
            engine: Optional[SiteIndexEngine] = None) -> float:
    return _engine(engine).si_y2bh(curve, site_index)


@_sentinel_on_error
def si_y2bh_rounded(curve: CurveLike, site_index: float, *,
                    engine: Optional[SiteIndexEngine] = None) -> float:
    return _engine(engine).si_y2bh_rounded(curve, site_index)


# ============================================================================
# Catalog lookups
# ============================================================================
# Lookups that return codes report failure as the sentinel number too, so
# their return type is a string or a float.

@_sentinel_on_error
def class_to_index(species: str, site_class: str, fiz=None, *,
                   engine: Optional[SiteIndexEngine] = None) -> float:
    return _engine(engine).catalog.class_to_index(species, site_class, fiz)


@_sentinel_on_error
def species_map(code: str, *, engine: Optional[SiteIndexEngine] = None):
    return _engine(engine).catalog.species_map(code)


@_sentinel_on_error
def species_remap(code: str, fiz=None, *, engine: Optional[SiteIndexEngine] = None):
    return _engine(engine).catalog.species_remap(code, fiz)


@_sentinel_on_error
def default_curve(species: str, establishment=None, *,
                  engine: Optional[SiteIndexEngine] = None):
    return _engine(engine).catalog.default_curve(species, establishment)


@_sentinel_on_error
def convert_site_index(species_from: str, site_index: float, species_to: str, *,
                       engine: Optional[SiteIndexEngine] = None) -> float:
    return _engine(engine).catalog.convert_site_index(species_from, site_index, species_to)
