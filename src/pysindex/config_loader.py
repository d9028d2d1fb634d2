"""
Configuration loader for pysindex.
Provides unified access to the YAML, TOML, and JSON files behind the curve catalog.

Supports:
- YAML (.yaml, .yml) - curve definitions, species tables, growth intercept equations
- TOML (.toml) - same content as YAML, preferred when both exist
- JSON (.json) - coefficient tables (site class, site index conversion)

Features:
- Optional subset of active curves (inactive curves behave as unknown)
- Coefficient file caching for performance
- Unified API for all configuration types
"""
import json
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

import yaml

from .exceptions import CatalogFileNotFoundError, ConfigurationError, InvalidDataError
from .logging_config import get_logger

# Handle TOML imports for different Python versions
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = get_logger(__name__)

CURVES_FILE = 'curves'
SPECIES_FILE = 'species'
GROWTH_INTERCEPT_FILE = 'growth_intercept'
SITE_CLASS_FILE = 'site_class_coefficients.json'
SITE_INDEX_CONVERSION_FILE = 'site_index_conversions.json'


class ConfigLoader:
    """Loads and manages the site index catalog files from the cfg/ directory.

    Provides unified access to:
    - Curve definitions (YAML or TOML)
    - Species codes, names and default curves (YAML or TOML)
    - Growth intercept equations (YAML or TOML, may be empty)
    - Coefficient files (JSON) with caching

    Attributes:
        cfg_dir: Path to the configuration directory
        active_curves: Curve keys to keep, or None for every curve in the file
    """

    def __init__(self, cfg_dir: Optional[Union[str, Path]] = None,
                 active_curves: Optional[Iterable[str]] = None):
        """Initialize the configuration loader.

        Args:
            cfg_dir: Path to the configuration directory. Defaults to cfg/ inside the package.
            active_curves: Optional curve keys to load. Overrides ``active_curves``
                in the curves file.
        """
        if cfg_dir is None:
            cfg_dir = Path(__file__).parent / 'cfg'
        self.cfg_dir = Path(cfg_dir)
        if not self.cfg_dir.is_dir():
            raise CatalogFileNotFoundError(str(self.cfg_dir), "configuration directory")

        self.active_curves = (
            frozenset(key.strip().upper() for key in active_curves)
            if active_curves is not None else None
        )

        # Cache for coefficient files (loaded once, reused)
        self._coefficient_cache: Dict[str, Dict[str, Any]] = {}

    def _load_config_file(self, file_path: Path) -> Dict[str, Any]:
        """Load configuration from a YAML, TOML or JSON file.

        Args:
            file_path: Path to the configuration file

        Returns:
            Dictionary containing configuration data

        Raises:
            CatalogFileNotFoundError: If file doesn't exist
            ConfigurationError: If file format is not supported
            InvalidDataError: If parsing fails or the file is empty
        """
        if not file_path.exists():
            raise CatalogFileNotFoundError(str(file_path), "configuration file")

        suffix = file_path.suffix.lower()
        logger.debug("Loading configuration file %s", file_path)

        try:
            if suffix in ['.yaml', '.yml']:
                with open(file_path, 'r', encoding='utf-8') as f:
                    data = yaml.safe_load(f)
                    if data is None:
                        raise InvalidDataError("YAML file", "file is empty or contains only comments")
                    return data
            elif suffix == '.toml':
                with open(file_path, 'rb') as f:
                    return tomllib.load(f)
            elif suffix == '.json':
                with open(file_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
                    if data is None:
                        raise InvalidDataError("JSON file", "file is empty or contains null")
                    return data
            else:
                raise ConfigurationError(f"Unsupported configuration file format: {suffix}. "
                                         f"Supported formats: .yaml, .yml, .toml, .json")
        except yaml.YAMLError as e:
            raise InvalidDataError("YAML configuration", f"parsing error: {str(e)}") from e
        except json.JSONDecodeError as e:
            raise InvalidDataError("JSON configuration", f"parsing error: {str(e)}") from e
        except tomllib.TOMLDecodeError as e:
            raise InvalidDataError("TOML configuration", f"parsing error: {str(e)}") from e

    def _find_config_file(self, stem: str) -> Path:
        """Locate ``stem`` in the cfg directory, preferring TOML over YAML."""
        for suffix in ('.toml', '.yaml', '.yml'):
            candidate = self.cfg_dir / f"{stem}{suffix}"
            if candidate.exists():
                return candidate
        raise CatalogFileNotFoundError(
            str(self.cfg_dir / f"{stem}.yaml"), "configuration file"
        )

    def load_coefficient_file(self, filename: str) -> Dict[str, Any]:
        """Load a configuration file with caching.

        Files are loaded once per loader and cached. ``filename`` may omit its
        suffix, in which case TOML is preferred over YAML.

        Args:
            filename: Name of the file (e.g., 'site_class_coefficients.json')

        Returns:
            Dictionary containing the file data
        """
        if filename not in self._coefficient_cache:
            if Path(filename).suffix:
                file_path = self.cfg_dir / filename
            else:
                file_path = self._find_config_file(filename)
            self._coefficient_cache[filename] = self._load_config_file(file_path)
        return self._coefficient_cache[filename]

    def load_curve_definitions(self) -> Dict[str, Dict[str, Any]]:
        """Load the curve definitions, restricted to the active curve set.

        Returns:
            Mapping of curve key to its raw definition

        Raises:
            InvalidDataError: If the file has no ``curves`` table or names an
                active curve it does not define
        """
        data = self.load_coefficient_file(CURVES_FILE)
        curves = data.get('curves')
        if not isinstance(curves, dict) or not curves:
            raise InvalidDataError("curve configuration", "missing 'curves' table")

        active = self.active_curves
        if active is None and data.get('active_curves'):
            active = frozenset(key.upper() for key in data['active_curves'])
        if active is None:
            return dict(curves)

        unknown = sorted(active - set(curves))
        if unknown:
            raise InvalidDataError("active curve list", f"undefined curves {unknown}")
        logger.info("Loading %d of %d curves", len(active), len(curves))
        return {key: value for key, value in curves.items() if key in active}

    def load_species_definitions(self) -> Dict[str, Any]:
        """Load species codes, names, default curves and the remap table."""
        data = self.load_coefficient_file(SPECIES_FILE)
        if 'species' not in data:
            raise InvalidDataError("species configuration", "missing 'species' table")
        return data

    def load_site_class_table(self) -> Dict[str, Any]:
        """Load the site class to site index table."""
        return self.load_coefficient_file(SITE_CLASS_FILE)

    def load_site_index_conversions(self) -> Dict[str, Any]:
        """Load the linear site index conversions between species."""
        return self.load_coefficient_file(SITE_INDEX_CONVERSION_FILE)

    def load_growth_intercept_equations(self) -> Dict[str, Dict[str, Any]]:
        """Load growth intercept equations keyed by curve.

        Returns an empty mapping when the file is absent or has no equations.
        """
        try:
            data = self.load_coefficient_file(GROWTH_INTERCEPT_FILE)
        except CatalogFileNotFoundError:
            logger.debug("No growth intercept file in %s", self.cfg_dir)
            return {}
        return dict(data.get('equations') or {})

    def clear_coefficient_cache(self) -> None:
        """Clear the coefficient file cache.

        Useful for testing or when configuration files may have changed.
        """
        self._coefficient_cache.clear()


# Global configuration loader instances (one per configuration directory)
_config_loaders: Dict[str, ConfigLoader] = {}


def get_config_loader(cfg_dir: Optional[Union[str, Path]] = None) -> ConfigLoader:
    """Get a configuration loader instance for a configuration directory.

    Args:
        cfg_dir: Configuration directory. If None, uses the packaged cfg/.

    Returns:
        ConfigLoader instance for that directory
    """
    key = str(Path(cfg_dir).resolve()) if cfg_dir is not None else ''
    if key not in _config_loaders:
        _config_loaders[key] = ConfigLoader(cfg_dir)
    return _config_loaders[key]


def load_coefficient_file(filename: str, cfg_dir: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Convenience function to load a coefficient file with caching.

    Args:
        filename: Name of the coefficient file (e.g., 'site_class_coefficients.json')
        cfg_dir: Configuration directory. If None, uses the packaged cfg/.

    Returns:
        Dictionary containing coefficient data
    """
    return get_config_loader(cfg_dir).load_coefficient_file(filename)
