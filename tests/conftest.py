"""
Shared pytest fixtures for pysindex tests.

This module provides the packaged catalog, an engine over it, and a catalog
extended with a growth intercept equation so the growth intercept paths can
be exercised without published coefficients.
"""
import pytest

from pysindex.catalog import Catalog, GrowthInterceptEquation, get_catalog
from pysindex.curves import Curve
from pysindex.engine import SiteIndexEngine


# =============================================================================
# Growth Intercept Test Equation
# =============================================================================
# si = 1.3 + 50**0.8 * (height - 1.3) * bhage**-0.8, so site index equals
# height at breast-height age 50 and falls with age for a fixed height.

GI_CURVE = Curve.SW_NIGHGI
GI_EQUATION = GrowthInterceptEquation(
    form='power',
    a=50 ** 0.8,
    b=1.0,
    c=-0.8,
    min_age=1,
    max_age=50,
)


# =============================================================================
# Catalog Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def catalog():
    """The packaged catalog with every curve loaded."""
    return get_catalog()


@pytest.fixture(scope="session")
def engine(catalog):
    """Engine over the packaged catalog."""
    return SiteIndexEngine(catalog)


@pytest.fixture(scope="session")
def gi_catalog(catalog):
    """Packaged catalog plus the test growth intercept equation."""
    return catalog.with_growth_intercept_equations({GI_CURVE: GI_EQUATION})


@pytest.fixture(scope="session")
def gi_engine(gi_catalog):
    """Engine that can evaluate the test growth intercept curve."""
    return SiteIndexEngine(gi_catalog)


# =============================================================================
# Minimal Configuration Directory
# =============================================================================

MINIMAL_CURVES = """\
curves:
  SW_GOUDIE_PLA:
    id: 70
    name: "Goudie (1984) (plantation)"
    species: SW
    uses: 5
    family: logistic_ratio
    coefficients: {b0: 9.7936, b_si: -1.2866, b_age: -1.4661}
    age_inverse: goudie
    y2bh: {form: constant, value: 5}
"""

MINIMAL_SPECIES = """\
species:
  SW: {name: "White spruce", default_curve: SW_GOUDIE_PLA}
remap:
  S: SW
"""


@pytest.fixture
def minimal_cfg_dir(tmp_path):
    """A configuration directory holding a single curve and species."""
    (tmp_path / 'curves.yaml').write_text(MINIMAL_CURVES, encoding='utf-8')
    (tmp_path / 'species.yaml').write_text(MINIMAL_SPECIES, encoding='utf-8')
    (tmp_path / 'site_class_coefficients.json').write_text(
        '{"species": {"SW": [19, 15, 10, 5]}}', encoding='utf-8')
    (tmp_path / 'site_index_conversions.json').write_text(
        '{"conversions": []}', encoding='utf-8')
    return tmp_path
