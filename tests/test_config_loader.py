"""Tests for configuration loading and catalog construction from files."""
import pytest

from pysindex.catalog import Catalog
from pysindex.config_loader import ConfigLoader, get_config_loader, load_coefficient_file
from pysindex.curves import AgeType, Curve
from pysindex.engine import SiteIndexEngine
from pysindex.exceptions import (
    CatalogFileNotFoundError,
    ComputationError,
    ConfigurationError,
    ErrorKind,
    InvalidDataError,
)


# ============================================================================
# ConfigLoader
# ============================================================================

class TestConfigLoader:
    """Reading the packaged cfg/ directory."""

    def test_default_directory(self):
        loader = ConfigLoader()
        assert loader.cfg_dir.name == 'cfg'
        assert (loader.cfg_dir / 'curves.yaml').exists()

    def test_missing_directory(self, tmp_path):
        with pytest.raises(CatalogFileNotFoundError):
            ConfigLoader(tmp_path / 'missing')

    def test_curve_definitions(self):
        curves = ConfigLoader().load_curve_definitions()
        assert len(curves) == 124
        assert curves['FDC_BRUCE']['id'] == 16

    def test_coefficient_file_is_cached(self):
        loader = ConfigLoader()
        first = loader.load_coefficient_file('site_class_coefficients.json')
        assert loader.load_coefficient_file('site_class_coefficients.json') is first
        loader.clear_coefficient_cache()
        assert loader.load_coefficient_file('site_class_coefficients.json') is not first

    def test_global_loader_is_shared(self):
        assert get_config_loader() is get_config_loader()

    def test_module_level_loading(self):
        data = load_coefficient_file('site_index_conversions.json')
        assert len(data['conversions']) == 28

    def test_packaged_growth_intercept_file_is_empty(self):
        assert ConfigLoader().load_growth_intercept_equations() == {}

    def test_unsupported_format(self, tmp_path):
        (tmp_path / 'table.csv').write_text("a,b\n", encoding='utf-8')
        with pytest.raises(ConfigurationError):
            ConfigLoader(tmp_path).load_coefficient_file('table.csv')

    def test_empty_yaml(self, tmp_path):
        (tmp_path / 'curves.yaml').write_text("# nothing here\n", encoding='utf-8')
        with pytest.raises(InvalidDataError):
            ConfigLoader(tmp_path).load_curve_definitions()

    def test_malformed_yaml(self, tmp_path):
        (tmp_path / 'curves.yaml').write_text("curves: [unclosed\n", encoding='utf-8')
        with pytest.raises(InvalidDataError):
            ConfigLoader(tmp_path).load_curve_definitions()

    def test_toml_preferred_over_yaml(self, tmp_path):
        (tmp_path / 'species.yaml').write_text("species: {SW: {name: yaml}}\n", encoding='utf-8')
        (tmp_path / 'species.toml').write_text('[species.SW]\nname = "toml"\n', encoding='utf-8')
        data = ConfigLoader(tmp_path).load_species_definitions()
        assert data['species']['SW']['name'] == 'toml'


# ============================================================================
# Catalog From Files
# ============================================================================

class TestCatalogFromFiles:
    """Catalogs built from a caller-supplied directory."""

    def test_minimal_catalog(self, minimal_cfg_dir):
        catalog = Catalog.from_loader(ConfigLoader(minimal_cfg_dir))
        assert len(catalog) == 1
        assert catalog.default_curve('SW') == Curve.SW_GOUDIE_PLA
        assert catalog.species_remap('S') == 'SW'
        assert catalog.class_to_index('SW', 'M') == 15.0

    def test_minimal_catalog_drives_engine(self, minimal_cfg_dir):
        engine = SiteIndexEngine(Catalog.from_loader(ConfigLoader(minimal_cfg_dir)))
        assert engine.si_y2bh(Curve.SW_GOUDIE_PLA, 20.0) == 5.0
        height = engine.index_to_height(Curve.SW_GOUDIE_PLA, 50, AgeType.BREAST, 20.0, 5.0, 0.5)
        assert height == pytest.approx(20.0)
        with pytest.raises(ComputationError) as exc_info:
            engine.index_to_height(Curve.FDC_BRUCE, 50, AgeType.BREAST, 20.0, 5.0, 0.5)
        assert exc_info.value.kind == ErrorKind.UNKNOWN_CURVE

    def test_growth_intercept_equations_from_file(self, minimal_cfg_dir):
        curves = (minimal_cfg_dir / 'curves.yaml').read_text(encoding='utf-8')
        curves += (
            "  SW_NIGHGI:\n"
            "    id: 63\n"
            "    species: SW\n"
            "    uses: 8\n"
            "    family: growth_intercept\n"
        )
        (minimal_cfg_dir / 'curves.yaml').write_text(curves, encoding='utf-8')
        (minimal_cfg_dir / 'growth_intercept.yaml').write_text(
            "equations:\n  SW_NIGHGI: {form: power, a: 10.0, b: 1.0, c: -0.5, max_age: 50}\n",
            encoding='utf-8')

        catalog = Catalog.from_loader(ConfigLoader(minimal_cfg_dir))
        equation = catalog.growth_intercept_equation(Curve.SW_NIGHGI)
        assert equation.a == 10.0
        assert equation.min_age == 1.0

    def test_growth_intercept_age_range_checked(self, minimal_cfg_dir):
        (minimal_cfg_dir / 'growth_intercept.yaml').write_text(
            "equations:\n  SW_GOUDIE_PLA: {a: 1, b: 1, c: -1, min_age: 60, max_age: 50}\n",
            encoding='utf-8')
        with pytest.raises(InvalidDataError):
            Catalog.from_loader(ConfigLoader(minimal_cfg_dir))

    def test_curve_without_family(self, minimal_cfg_dir):
        (minimal_cfg_dir / 'curves.yaml').write_text(
            "curves:\n  SW_GOUDIE_PLA: {id: 70, species: SW}\n", encoding='utf-8')
        with pytest.raises(InvalidDataError):
            Catalog.from_loader(ConfigLoader(minimal_cfg_dir))

    def test_curve_id_must_match_enum(self, minimal_cfg_dir):
        (minimal_cfg_dir / 'curves.yaml').write_text(
            "curves:\n  SW_GOUDIE_PLA: {id: 71, species: SW, family: logistic_ratio}\n",
            encoding='utf-8')
        with pytest.raises(InvalidDataError):
            Catalog.from_loader(ConfigLoader(minimal_cfg_dir))

    def test_unknown_species_on_curve(self, minimal_cfg_dir):
        (minimal_cfg_dir / 'curves.yaml').write_text(
            "curves:\n  FDC_BRUCE: {id: 16, species: FDC, family: bruce}\n", encoding='utf-8')
        with pytest.raises(InvalidDataError):
            Catalog.from_loader(ConfigLoader(minimal_cfg_dir))
