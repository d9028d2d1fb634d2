"""
Species, forest inventory zone and establishment enumerations.

``CurveSpecies`` inherits from (str, Enum) so members can be used wherever a
species code string is expected. It lists only the species that carry their
own site index curves; the full inventory code list (144 codes) lives in
cfg/species.yaml and is served by the catalog.

Usage:
    from pysindex.species import CurveSpecies, fiz_check, Fiz

    species = CurveSpecies.from_string("fdc")
    print(species.value)  # "FDC"

    fiz_check("E") is Fiz.INTERIOR  # True
"""

from enum import Enum, IntEnum
from typing import Optional

from .utils import normalize_code, normalize_fiz

__all__ = [
    'CurveSpecies',
    'Fiz',
    'Establishment',
    'fiz_check',
]


class Fiz(IntEnum):
    """Coarse forest inventory zone classification."""
    UNKNOWN = 0
    COAST = 1
    INTERIOR = 2


class Establishment(IntEnum):
    """How a stand was established."""
    NATURAL = 0
    PLANTATION = 1


_COAST_ZONES = frozenset("ABC")
_INTERIOR_ZONES = frozenset("DEFGHIJKL")


def fiz_check(fiz: Optional[str]) -> Fiz:
    """Classify a forest inventory zone letter.

    Zones A to C are coastal and D to L are interior. Anything else,
    including an empty code, is unknown.

    Args:
        fiz: Zone code; only the first non-space character is used

    Returns:
        Fiz member
    """
    zone = normalize_fiz(fiz)
    if zone in _COAST_ZONES:
        return Fiz.COAST
    if zone in _INTERIOR_ZONES:
        return Fiz.INTERIOR
    return Fiz.UNKNOWN


class CurveSpecies(str, Enum):
    """
    Species codes that own site index curves.

    Inventory codes such as 'FD' or 'S' are first mapped onto one of these
    through ``Catalog.species_remap``.
    """

    # =========================================================================
    # Hardwoods
    # =========================================================================

    BALSAM_POPLAR = "ACB"
    """Balsam poplar (Populus balsamifera)."""

    BLACK_COTTONWOOD = "ACT"
    """Black cottonwood (Populus trichocarpa)."""

    TREMBLING_ASPEN = "AT"
    """Trembling aspen (Populus tremuloides)."""

    RED_ALDER = "DR"
    """Red alder (Alnus rubra)."""

    PAPER_BIRCH = "EP"
    """Paper birch (Betula papyrifera)."""

    # =========================================================================
    # True firs
    # =========================================================================

    AMABILIS_FIR = "BA"
    """Amabilis fir (Abies amabilis)."""

    SUBALPINE_FIR = "BL"
    """Subalpine fir (Abies lasiocarpa)."""

    NOBLE_FIR = "BP"
    """Noble fir (Abies procera)."""

    # =========================================================================
    # Cedars, Douglas-fir, hemlocks, larch
    # =========================================================================

    WESTERN_REDCEDAR_COAST = "CWC"
    """Western redcedar, coastal."""

    WESTERN_REDCEDAR_INTERIOR = "CWI"
    """Western redcedar, interior."""

    DOUGLAS_FIR_COAST = "FDC"
    """Coastal Douglas-fir (Pseudotsuga menziesii var. menziesii)."""

    DOUGLAS_FIR_INTERIOR = "FDI"
    """Interior Douglas-fir (Pseudotsuga menziesii var. glauca)."""

    MOUNTAIN_HEMLOCK = "HM"
    """Mountain hemlock (Tsuga mertensiana)."""

    WESTERN_HEMLOCK_COAST = "HWC"
    """Western hemlock, coastal."""

    WESTERN_HEMLOCK_INTERIOR = "HWI"
    """Western hemlock, interior."""

    WESTERN_LARCH = "LW"
    """Western larch (Larix occidentalis)."""

    # =========================================================================
    # Pines
    # =========================================================================

    JACK_PINE = "PJ"
    """Jack pine (Pinus banksiana)."""

    LODGEPOLE_PINE = "PLI"
    """Lodgepole pine (Pinus contorta var. latifolia)."""

    WESTERN_WHITE_PINE = "PW"
    """Western white pine (Pinus monticola)."""

    PONDEROSA_PINE = "PY"
    """Ponderosa pine (Pinus ponderosa)."""

    # =========================================================================
    # Spruces
    # =========================================================================

    BLACK_SPRUCE = "SB"
    """Black spruce (Picea mariana)."""

    ENGELMANN_SPRUCE = "SE"
    """Engelmann spruce (Picea engelmannii)."""

    SITKA_SPRUCE = "SS"
    """Sitka spruce (Picea sitchensis)."""

    WHITE_SPRUCE = "SW"
    """White spruce (Picea glauca)."""

    @classmethod
    def from_string(cls, code: str) -> "CurveSpecies":
        """
        Convert a string species code to a CurveSpecies member.

        Args:
            code: Species code string (case-insensitive, spaces ignored)

        Returns:
            The corresponding CurveSpecies member

        Raises:
            ValueError: If the code does not own site index curves

        Example:
            >>> CurveSpecies.from_string("Sw")
            <CurveSpecies.WHITE_SPRUCE: 'SW'>
        """
        if code is None:
            raise ValueError("Species code cannot be None")

        normalized = normalize_code(code)
        for member in cls:
            if member.value == normalized:
                return member

        raise ValueError(
            f"Invalid curve species code: '{code}'. "
            f"Valid codes: {', '.join(sorted(m.value for m in cls))}"
        )

    @classmethod
    def is_valid(cls, code: str) -> bool:
        """Check if a string names a species with site index curves."""
        if code is None:
            return False
        normalized = normalize_code(code)
        return any(member.value == normalized for member in cls)
