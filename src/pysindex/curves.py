"""
Curve identifiers and the small enumerations shared by the engine.

Curve indices are stable small integers used by every caller of the engine.
The catalog (cfg/curves.yaml) is the only place that attaches equations and
coefficients to them; this module only names them.

Usage:
    from pysindex.curves import Curve, AgeType

    curve = Curve.FDC_BRUCE
    print(int(curve))  # 16
"""
from enum import IntEnum, IntFlag
from typing import Union

__all__ = [
    'Curve',
    'CurveUse',
    'AgeType',
    'EstimationMode',
    'CurveLike',
    'MAX_CURVES',
]


class AgeType(IntEnum):
    """How an age is counted."""
    TOTAL = 0
    """Years since germination."""
    BREAST = 1
    """Years since the stem passed breast height."""


class EstimationMode(IntEnum):
    """How height_to_index solves for site index."""
    ITERATE = 0
    DIRECT = 1


class CurveUse(IntFlag):
    """Operations a curve is published for."""
    NONE = 0
    HEIGHT = 1
    SITE_INDEX = 2
    YEARS_TO_BREAST_HEIGHT = 4
    GROWTH_INTERCEPT = 8


class Curve(IntEnum):
    """Site index curve indices."""

    ACB_HUANG = 0
    ACT_THROWER = 1
    AT_HUANG = 2
    AT_CIESZEWSKI = 3
    AT_GOUDIE = 4
    BA_DILUCCA = 5
    BB_KER = 6
    BA_KURUCZ86 = 7
    BA_KURUCZ82 = 8
    BL_THROWERGI = 9
    BL_KURUCZ82 = 10
    CWC_KURUCZ = 11
    CWC_BARKER = 12
    DR_NIGH = 13
    DR_HARRING = 14
    FDC_NIGHGI = 15
    FDC_BRUCE = 16
    FDC_COCHRAN = 17
    FDC_KING = 18
    FDI_NIGHGI = 19
    FDI_HUANG_PLA = 20
    FDI_HUANG_NAT = 21
    FDI_MILNER = 22
    FDI_THROWER = 23
    FDI_VDP_MONT = 24
    FDI_VDP_WASH = 25
    FDI_MONS_DF = 26
    FDI_MONS_GF = 27
    FDI_MONS_WRC = 28
    FDI_MONS_WH = 29
    FDI_MONS_SAF = 30
    HWC_NIGHGI = 31
    HWC_FARR = 32
    HWC_BARKER = 33
    HWC_WILEY = 34
    HWC_WILEY_BC = 35
    HWC_WILEY_MB = 36
    HWI_NIGH = 37
    HWI_NIGHGI = 38
    LW_MILNER = 39
    PLI_THROWNIGH = 40
    PLI_NIGHTA98 = 41
    PLI_NIGHGI97 = 42
    PLI_HUANG_PLA = 43
    PLI_HUANG_NAT = 44
    PLI_THROWER = 45
    PLI_MILNER = 46
    PLI_CIESZEWSKI = 47
    PLI_GOUDIE_DRY = 48
    PLI_GOUDIE_WET = 49
    PLI_DEMPSTER = 50
    PW_CURTIS = 51
    PY_MILNER = 52
    PY_HANN = 53
    SB_HUANG = 54
    SB_CIESZEWSKI = 55
    SB_KER = 56
    SB_DEMPSTER = 57
    SS_NIGHGI = 58
    SS_NIGH = 59
    SS_GOUDIE = 60
    SS_FARR = 61
    SS_BARKER = 62
    SW_NIGHGI = 63
    SW_HUANG_PLA = 64
    SW_HUANG_NAT = 65
    SW_THROWER = 66
    SW_CIESZEWSKI = 67
    SW_KER_PLA = 68
    SW_KER_NAT = 69
    SW_GOUDIE_PLA = 70
    SW_GOUDIE_NAT = 71
    SW_DEMPSTER = 72
    BL_CHEN = 73
    AT_CHEN = 74
    DR_CHEN = 75
    PL_CHEN = 76
    CWI_NIGH = 77
    BP_CURTIS = 78
    HWC_NIGHGI99 = 79
    SS_NIGHGI99 = 80
    SW_NIGHGI99 = 81
    LW_NIGHGI = 82
    SW_NIGHTA = 83
    CWI_NIGHGI = 84
    SW_GOUDNIGH = 85
    HM_MEANS = 86
    SE_CHEN = 87
    FDC_NIGHTA = 88
    FDC_BRUCENIGH = 89
    LW_NIGH = 90
    SB_NIGH = 91
    AT_NIGH = 92
    BL_CHENAC = 93
    BP_CURTISAC = 94
    HM_MEANSAC = 95
    FDI_THROWERAC = 96
    ACB_HUANGAC = 97
    PW_CURTISAC = 98
    HWC_WILEYAC = 99
    FDC_BRUCEAC = 100
    CWC_KURUCZAC = 101
    BA_KURUCZ82AC = 102
    ACT_THROWERAC = 103
    PY_HANNAC = 104
    SE_CHENAC = 105
    SW_GOUDIE_NATAC = 106
    PY_NIGH = 107
    PY_NIGHGI = 108
    PLI_NIGHTA2004 = 109
    SE_NIGHTA = 110
    SW_NIGHTA2004 = 111
    SW_GOUDIE_PLAAC = 112
    PJ_HUANG = 113
    PJ_HUANGAC = 114
    SW_NIGHGI2004 = 115
    EP_NIGH = 116
    BA_NIGHGI = 117
    BA_NIGH = 118
    SW_HU_GARCIA = 119
    SE_NIGHGI = 120
    SE_NIGH = 121
    CWC_NIGH = 122
    PLI_NIGH = 123

    @classmethod
    def from_key(cls, key: str) -> 'Curve':
        """Look up a curve by its key, ignoring case.

        Raises:
            KeyError: If no curve has that key
        """
        return cls[key.strip().upper()]


MAX_CURVES = len(Curve)

CurveLike = Union[Curve, int]
