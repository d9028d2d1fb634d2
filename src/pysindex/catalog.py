"""
Read-only curve and species catalog.

The catalog is built once from the files in cfg/ and then injected into the
engine. It answers every metadata question the engine and its callers ask:
which equation family a curve uses, where its fitted curve starts, how many
years it takes to reach breast height, which species own which curves, and
the species code, site class and site index conversion tables.

Usage:
    from pysindex.catalog import get_catalog
    from pysindex.curves import Curve

    catalog = get_catalog()
    catalog.curve_name(Curve.FDC_BRUCE)     # 'Bruce (1981)'
    catalog.default_curve('SW', Establishment.PLANTATION)
"""
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .config_loader import ConfigLoader, get_config_loader
from .curves import Curve, CurveLike, CurveUse
from .exceptions import (
    ComputationError,
    CurveNotFoundError,
    ErrorKind,
    InvalidDataError,
    InvalidParameterError,
    validate_positive,
    validate_range,
)
from .logging_config import get_logger
from .species import Establishment, Fiz, fiz_check
from .utils import normalize_code, normalize_species_code

logger = get_logger(__name__)

GROWTH_INTERCEPT_FAMILY = 'growth_intercept'
SITE_CLASSES = ('G', 'M', 'P', 'L')

MAX_CURVE_ID = 9999


# ============================================================================
# Records
# ============================================================================

@dataclass(frozen=True)
class CurveDefinition:
    """Everything the engine needs to evaluate one curve."""
    id: int
    key: str
    name: str
    species: str
    uses: CurveUse
    family: str
    breast_height: float = 1.3
    half_year_origin: bool = False
    origin: float = 0.0
    origin_pi: bool = False          # curve starts at the growth proportion
    origin_inclusive: bool = False
    coefficients: Dict[str, Any] = field(default_factory=dict)
    juvenile: Optional[Dict[str, float]] = None
    age_inverse: Optional[str] = None
    direct_site_index: Optional[str] = None
    y2bh: Optional[Dict[str, Any]] = None

    @property
    def is_growth_intercept(self) -> bool:
        return self.family == GROWTH_INTERCEPT_FAMILY

    @property
    def curve(self) -> CurveLike:
        """The Curve member for this definition, or its raw id."""
        try:
            return Curve(self.id)
        except ValueError:
            return self.id


@dataclass(frozen=True)
class GrowthInterceptEquation:
    """Site index from breast-height age and height over a fitted age range.

    ``si = 1.3 + a * (height - 1.3) ** b * bhage ** c``
    """
    form: str
    a: float
    b: float
    c: float
    min_age: float
    max_age: float


@dataclass(frozen=True)
class SpeciesRecord:
    code: str
    name: str
    default_curve: Optional[int] = None
    default_gi_curve: Optional[int] = None


def _as_curve(curve_id: int) -> CurveLike:
    try:
        return Curve(curve_id)
    except ValueError:
        return curve_id


# ============================================================================
# Catalog
# ============================================================================

class Catalog:
    """Immutable view over the curve, species and lookup tables.

    Build one with ``Catalog.from_config`` or ``get_catalog``; the
    constructor takes already-parsed records and is mostly useful in tests.
    """

    def __init__(self,
                 curves: Dict[int, CurveDefinition],
                 species: Dict[str, SpeciesRecord],
                 remap: Optional[Dict[str, Any]] = None,
                 establishment_defaults: Optional[Dict[str, Dict[str, int]]] = None,
                 site_classes: Optional[Dict[str, Any]] = None,
                 conversions: Optional[Dict[Tuple[str, str], Tuple[float, float]]] = None,
                 gi_equations: Optional[Dict[int, GrowthInterceptEquation]] = None):
        self._curves = dict(curves)
        self._keys = {definition.key: curve_id for curve_id, definition in self._curves.items()}
        self._species = dict(species)
        self._remap = dict(remap or {})
        self._establishment_defaults = dict(establishment_defaults or {})
        self._site_classes = dict(site_classes or {})
        self._conversions = dict(conversions or {})
        self._gi_equations = dict(gi_equations or {})

        for definition in self._curves.values():
            if definition.species not in self._species:
                raise InvalidDataError(
                    f"curve {definition.key}",
                    f"species '{definition.species}' is not in the species table"
                )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_config(cls, cfg_dir: Optional[Union[str, Path]] = None,
                    active_curves: Optional[List[str]] = None) -> 'Catalog':
        """Build a catalog from a configuration directory.

        Args:
            cfg_dir: Directory holding the catalog files; defaults to the packaged cfg/
            active_curves: Optional subset of curve keys to load

        Returns:
            A new Catalog
        """
        if active_curves is None:
            loader = get_config_loader(cfg_dir)
        else:
            loader = ConfigLoader(cfg_dir, active_curves)
        return cls.from_loader(loader)

    @classmethod
    def from_loader(cls, loader: ConfigLoader) -> 'Catalog':
        """Build a catalog from an existing ConfigLoader."""
        curves = {}
        for key, raw in loader.load_curve_definitions().items():
            definition = _parse_curve(key, raw)
            if definition.id in curves:
                raise InvalidDataError(
                    f"curve {key}", f"id {definition.id} already used by {curves[definition.id].key}"
                )
            curves[definition.id] = definition
        keys = {definition.key: curve_id for curve_id, definition in curves.items()}

        def resolve(curve_key: Optional[str], where: str) -> Optional[int]:
            if curve_key is None:
                return None
            curve_key = normalize_code(curve_key)
            if curve_key in keys:
                return keys[curve_key]
            try:
                return int(Curve.from_key(curve_key))
            except KeyError:
                raise InvalidDataError(where, f"unknown curve '{curve_key}'") from None

        species_data = loader.load_species_definitions()
        species = {}
        for code, raw in species_data['species'].items():
            code = normalize_species_code(code)
            raw = raw or {}
            species[code] = SpeciesRecord(
                code=code,
                name=raw.get('name', code),
                default_curve=resolve(raw.get('default_curve'), f"species {code}"),
                default_gi_curve=resolve(raw.get('default_gi_curve'), f"species {code}"),
            )

        establishment_defaults = {}
        for code, choices in (species_data.get('establishment_defaults') or {}).items():
            establishment_defaults[normalize_species_code(code)] = {
                kind: resolve(curve_key, f"establishment default for {code}")
                for kind, curve_key in choices.items()
            }

        site_classes = loader.load_site_class_table().get('species', {})

        conversions = {}
        for row in loader.load_site_index_conversions().get('conversions', []):
            pair = (normalize_species_code(row['from']), normalize_species_code(row['to']))
            conversions[pair] = (float(row['a']), float(row['b']))

        gi_equations = {}
        for curve_key, raw in loader.load_growth_intercept_equations().items():
            curve_id = resolve(curve_key, "growth intercept equations")
            gi_equations[curve_id] = _parse_gi_equation(curve_key, raw)

        logger.debug("Catalog built with %d curves, %d species, %d growth intercept equations",
                     len(curves), len(species), len(gi_equations))
        return cls(curves, species, species_data.get('remap'), establishment_defaults,
                   site_classes, conversions, gi_equations)

    def with_growth_intercept_equations(
            self, equations: Dict[CurveLike, GrowthInterceptEquation]) -> 'Catalog':
        """Return a copy of this catalog with extra growth intercept equations."""
        merged = dict(self._gi_equations)
        merged.update({int(curve): equation for curve, equation in equations.items()})
        return Catalog(self._curves, self._species, self._remap, self._establishment_defaults,
                       self._site_classes, self._conversions, merged)

    # ------------------------------------------------------------------
    # Curves
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._curves)

    def __contains__(self, curve: CurveLike) -> bool:
        return self.has_curve(curve)

    def has_curve(self, curve: CurveLike) -> bool:
        try:
            return int(curve) in self._curves
        except (TypeError, ValueError):
            return False

    def get_curve(self, curve: CurveLike) -> CurveDefinition:
        """Return the definition for a curve.

        Raises:
            ComputationError: UNKNOWN_CURVE if the curve is not in the catalog
        """
        try:
            return self._curves[int(curve)]
        except (KeyError, TypeError, ValueError):
            raise ComputationError(ErrorKind.UNKNOWN_CURVE, f"curve {curve!r}") from None

    def curve_by_key(self, key: str) -> CurveDefinition:
        """Return the definition for a curve key such as 'FDC_BRUCE'.

        Raises:
            CurveNotFoundError: If no loaded curve has that key
        """
        normalized = normalize_code(key)
        if normalized not in self._keys:
            raise CurveNotFoundError(key)
        return self._curves[self._keys[normalized]]

    def curves(self) -> List[CurveDefinition]:
        """All loaded curve definitions in id order."""
        return [self._curves[curve_id] for curve_id in sorted(self._curves)]

    def curve_name(self, curve: CurveLike) -> str:
        return self.get_curve(curve).name

    def curve_species(self, curve: CurveLike) -> str:
        return self.get_curve(curve).species

    def curve_use(self, curve: CurveLike) -> CurveUse:
        """Operations the curve is published for."""
        return self.get_curve(curve).uses

    def breast_height(self, curve: CurveLike) -> float:
        return self.get_curve(curve).breast_height

    def curves_for_species(self, species: str) -> List[CurveLike]:
        """Curves owned by a species, in catalog order.

        Raises:
            ComputationError: UNKNOWN_SPECIES if the species is not in the table
        """
        code = self._species_record(species).code
        return [definition.curve for definition in self.curves() if definition.species == code]

    def growth_intercept_equation(self, curve: CurveLike) -> GrowthInterceptEquation:
        """Return the growth intercept equation for a curve.

        Raises:
            ComputationError: UNKNOWN_CURVE if the curve has no equation loaded
        """
        definition = self.get_curve(curve)
        try:
            return self._gi_equations[definition.id]
        except KeyError:
            raise ComputationError(ErrorKind.UNKNOWN_CURVE,
                                   f"no growth intercept equation for {definition.key}") from None

    # ------------------------------------------------------------------
    # Species
    # ------------------------------------------------------------------

    def _species_record(self, species: str) -> SpeciesRecord:
        code = normalize_species_code(species)
        try:
            return self._species[code]
        except KeyError:
            raise ComputationError(ErrorKind.UNKNOWN_SPECIES, f"species {species!r}") from None

    def species_codes(self) -> List[str]:
        return list(self._species)

    def species_name(self, species: str) -> str:
        return self._species_record(species).name

    def species_map(self, code: str) -> str:
        """Normalize and validate an inventory species code.

        Spaces are removed and the code is uppercased.

        Raises:
            ComputationError: UNKNOWN_SPECIES_CODE if the code is not recognized
        """
        normalized = normalize_species_code(code)
        if normalized not in self._species:
            raise ComputationError(ErrorKind.UNKNOWN_SPECIES_CODE, f"code {code!r}")
        return normalized

    def species_remap(self, code: str, fiz: Union[Fiz, str, None] = None) -> str:
        """Map an inventory species code onto a species that owns curves.

        Codes such as 'FD' resolve differently on the coast and in the
        interior, so they need a known forest inventory zone.

        Args:
            code: Inventory species code
            fiz: Fiz member or zone letter

        Raises:
            ComputationError: UNKNOWN_SPECIES_CODE for unknown codes, or for
                zone dependent codes when the zone is unknown
        """
        normalized = normalize_species_code(code)
        target = self._remap.get(normalized)
        if target is None:
            raise ComputationError(ErrorKind.UNKNOWN_SPECIES_CODE, f"code {code!r}")
        if isinstance(target, dict):
            zone = fiz if isinstance(fiz, Fiz) else fiz_check(fiz)
            if zone is Fiz.COAST:
                target = target['coast']
            elif zone is Fiz.INTERIOR:
                target = target['interior']
            else:
                raise ComputationError(ErrorKind.UNKNOWN_SPECIES_CODE,
                                       f"code {code!r} needs a coast or interior zone")
        return normalize_species_code(target)

    def default_curve(self, species: str,
                      establishment: Optional[Union[Establishment, int]] = None) -> CurveLike:
        """Recommended height curve for a species.

        White spruce has separate natural and plantation curves; other
        species ignore ``establishment``.

        Raises:
            ComputationError: UNKNOWN_SPECIES, UNKNOWN_ESTABLISHMENT, or
                NO_CONVERGENCE when the species has no curve of its own
        """
        record = self._species_record(species)
        choices = self._establishment_defaults.get(record.code)
        if choices and establishment is not None:
            try:
                kind = Establishment(int(establishment))
            except (TypeError, ValueError):
                raise ComputationError(ErrorKind.UNKNOWN_ESTABLISHMENT,
                                       f"establishment {establishment!r}") from None
            curve_id = choices.get(kind.name.lower())
            if curve_id is None:
                raise ComputationError(ErrorKind.UNKNOWN_ESTABLISHMENT,
                                       f"no {kind.name.lower()} curve for {record.code}")
            return _as_curve(curve_id)
        if record.default_curve is None:
            raise ComputationError(ErrorKind.NO_CONVERGENCE, f"no default curve for {record.code}")
        return _as_curve(record.default_curve)

    def default_gi_curve(self, species: str) -> CurveLike:
        """Recommended growth intercept curve for a species.

        Raises:
            ComputationError: UNKNOWN_SPECIES, or NO_CONVERGENCE when the
                species has no growth intercept curve
        """
        record = self._species_record(species)
        if record.default_gi_curve is None:
            raise ComputationError(ErrorKind.NO_CONVERGENCE,
                                   f"no growth intercept curve for {record.code}")
        return _as_curve(record.default_gi_curve)

    # ------------------------------------------------------------------
    # Site class and conversions
    # ------------------------------------------------------------------

    def class_to_index(self, species: str, site_class: str,
                       fiz: Union[Fiz, str, None] = None) -> float:
        """Site index for a good/medium/poor/low site class.

        Args:
            species: Curve species code
            site_class: One of 'G', 'M', 'P', 'L'
            fiz: Forest inventory zone, needed for coastal western hemlock

        Raises:
            ComputationError: UNKNOWN_SITE_CLASS, UNKNOWN_SPECIES or UNKNOWN_FIZ
        """
        site_class = normalize_code(site_class)
        if site_class not in SITE_CLASSES:
            raise ComputationError(ErrorKind.UNKNOWN_SITE_CLASS, f"class {site_class!r}")
        column = SITE_CLASSES.index(site_class)

        code = normalize_species_code(species)
        row = self._site_classes.get(code)
        if row is None:
            raise ComputationError(ErrorKind.UNKNOWN_SPECIES, f"no site classes for {species!r}")

        if isinstance(row, dict):
            zone = fiz if isinstance(fiz, Fiz) else fiz_check(fiz)
            if zone is Fiz.COAST:
                row = row['coast']
            elif zone is Fiz.INTERIOR:
                row = row['interior']
            else:
                raise ComputationError(ErrorKind.UNKNOWN_FIZ, f"zone {fiz!r} for {code}")
        return float(row[column])

    def convert_site_index(self, species_from: str, site_index: float, species_to: str) -> float:
        """Convert a site index between species with ``a + b * si``.

        Raises:
            ComputationError: UNKNOWN_SPECIES for unknown codes, NO_CONVERGENCE
                when the pair has no conversion
        """
        source = self._species_record(species_from).code
        target = self._species_record(species_to).code
        try:
            a, b = self._conversions[(source, target)]
        except KeyError:
            raise ComputationError(ErrorKind.NO_CONVERGENCE,
                                   f"no conversion from {source} to {target}") from None
        return a + b * site_index


# ============================================================================
# Parsing
# ============================================================================

def _parse_curve(key: str, raw: Dict[str, Any]) -> CurveDefinition:
    key = normalize_code(key)
    try:
        curve_id = int(raw['id'])
        family = raw['family']
    except KeyError as e:
        raise InvalidDataError(f"curve {key}", f"missing field {e}") from None

    try:
        validate_range(curve_id, 0, MAX_CURVE_ID, 'id')
        breast_height = validate_positive(float(raw.get('breast_height', 1.3)), 'breast_height')
    except InvalidParameterError as e:
        raise InvalidDataError(f"curve {key}", str(e)) from e

    if key in Curve.__members__ and int(Curve[key]) != curve_id:
        raise InvalidDataError(f"curve {key}", f"id {curve_id} does not match {int(Curve[key])}")

    origin = raw.get('origin', 0.0)
    origin_pi = origin == 'pi'

    return CurveDefinition(
        id=curve_id,
        key=key,
        name=raw.get('name', key),
        species=normalize_species_code(raw.get('species', key.split('_')[0])),
        uses=CurveUse(int(raw.get('uses', 0))),
        family=family,
        breast_height=breast_height,
        half_year_origin=bool(raw.get('half_year_origin', False)),
        origin=0.0 if origin_pi else float(origin),
        origin_pi=origin_pi,
        origin_inclusive=bool(raw.get('origin_inclusive', False)),
        coefficients=dict(raw.get('coefficients') or {}),
        juvenile=dict(raw['juvenile']) if raw.get('juvenile') else None,
        age_inverse=raw.get('age_inverse'),
        direct_site_index=raw.get('direct_site_index'),
        y2bh=dict(raw['y2bh']) if raw.get('y2bh') else None,
    )


def _parse_gi_equation(curve_key: str, raw: Dict[str, Any]) -> GrowthInterceptEquation:
    try:
        equation = GrowthInterceptEquation(
            form=raw.get('form', 'power'),
            a=float(raw['a']),
            b=float(raw['b']),
            c=float(raw['c']),
            min_age=float(raw.get('min_age', 1)),
            max_age=float(raw['max_age']),
        )
    except KeyError as e:
        raise InvalidDataError(f"growth intercept equation {curve_key}",
                               f"missing field {e}") from None
    if equation.min_age > equation.max_age:
        raise InvalidDataError(f"growth intercept equation {curve_key}",
                               "min_age is above max_age")
    return equation


@lru_cache(maxsize=8)
def _cached_catalog(cfg_dir: Optional[str], active_curves: Optional[Tuple[str, ...]]) -> Catalog:
    return Catalog.from_config(cfg_dir, list(active_curves) if active_curves is not None else None)


def get_catalog(cfg_dir: Optional[Union[str, Path]] = None,
                active_curves: Optional[List[str]] = None) -> Catalog:
    """Get a cached catalog for a configuration directory and curve subset.

    Args:
        cfg_dir: Directory holding the catalog files; defaults to the packaged cfg/
        active_curves: Optional subset of curve keys

    Returns:
        Shared Catalog instance
    """
    key_dir = str(Path(cfg_dir).resolve()) if cfg_dir is not None else None
    key_curves = tuple(sorted(normalize_code(c) for c in active_curves)) if active_curves is not None else None
    return _cached_catalog(key_dir, key_curves)
