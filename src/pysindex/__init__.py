"""
pysindex: site index curves for British Columbia tree species

Converts between stand age, height, site index and years to breast height
over the published height-age and growth intercept curves, with the
species, site class and site index conversion tables that go with them.

Quick Start:
    >>> from pysindex import SiteIndexEngine, Curve, AgeType
    >>> engine = SiteIndexEngine()
    >>> engine.index_to_height(Curve.FDC_BRUCE, 50, AgeType.BREAST, 30.0, 7.5, 0.5)
    >>> engine.height_to_index(Curve.FDC_BRUCE, 50, AgeType.BREAST, 30.0)
"""

# =============================================================================
# Package Metadata
# =============================================================================
__version__ = "0.1.0"
__author__ = "pysindex Development Team"

# =============================================================================
# Curves and enumerations
# =============================================================================
from .curves import Curve, CurveUse, AgeType, EstimationMode, MAX_CURVES
from .species import Fiz, Establishment, CurveSpecies, fiz_check

# =============================================================================
# Catalog and Configuration
# =============================================================================
from .config_loader import ConfigLoader, get_config_loader
from .catalog import Catalog, CurveDefinition, GrowthInterceptEquation, get_catalog

# =============================================================================
# Engine
# =============================================================================
# age and site_index register their closed-form solvers on import
from . import age, site_index  # noqa: F401
from .engine import (
    SiteIndexEngine,
    get_engine,
    age_to_age,
    index_to_height,
    index_to_age,
    height_to_index,
    si_y2bh,
    si_y2bh_rounded,
)

# =============================================================================
# Exceptions
# =============================================================================
from .exceptions import (
    ErrorKind,
    SindexError,
    ConfigurationError,
    CurveNotFoundError,
    ParameterError,
    InvalidParameterError,
    ComputationError,
    DataError,
    CatalogFileNotFoundError,
    InvalidDataError,
)

# =============================================================================
# Logging
# =============================================================================
from .logging_config import setup_logging, get_logger

# =============================================================================
# Tables
# =============================================================================
from .tables import height_age_table, site_index_table, curve_summary

# =============================================================================
# Public API
# =============================================================================
__all__ = [
    # Metadata
    "__version__",
    # Curves
    "Curve",
    "CurveUse",
    "AgeType",
    "EstimationMode",
    "MAX_CURVES",
    "Fiz",
    "Establishment",
    "CurveSpecies",
    "fiz_check",
    # Catalog
    "ConfigLoader",
    "get_config_loader",
    "Catalog",
    "CurveDefinition",
    "GrowthInterceptEquation",
    "get_catalog",
    # Engine
    "SiteIndexEngine",
    "get_engine",
    "age_to_age",
    "index_to_height",
    "index_to_age",
    "height_to_index",
    "si_y2bh",
    "si_y2bh_rounded",
    # Exceptions
    "ErrorKind",
    "SindexError",
    "ConfigurationError",
    "CurveNotFoundError",
    "ParameterError",
    "InvalidParameterError",
    "ComputationError",
    "DataError",
    "CatalogFileNotFoundError",
    "InvalidDataError",
    # Logging
    "setup_logging",
    "get_logger",
    # Tables
    "height_age_table",
    "site_index_table",
    "curve_summary",
]
