"""
Custom exceptions for pysindex.
Provides domain-specific error handling with informative messages.

Numeric failures inside the engine are raised as ``ComputationError`` and
carry an ``ErrorKind``. Each kind knows the negative sentinel value that
legacy callers expect in place of a height, age or site index.
"""
from enum import Enum


class ErrorKind(Enum):
    """Failure kinds reported by the site index engine.

    The value of each member is ``(sentinel, description)``. Several kinds
    share a sentinel because the historical interface did not distinguish
    them.
    """

    SITE_INDEX_TOO_LOW = (-1, "site index at or below breast height")
    HEIGHT_TOO_LOW = (-1, "height below breast height for a breast-height age")
    BELOW_MINIMUM_GI_AGE = (-2, "breast-height age below the growth intercept range")
    ABOVE_MAXIMUM_GI_AGE = (-3, "breast-height age above the growth intercept range")
    NO_CONVERGENCE = (-4, "no answer within the solver bounds")
    UNKNOWN_CURVE = (-5, "unknown site index curve")
    UNKNOWN_SITE_CLASS = (-6, "unknown site class")
    UNKNOWN_FIZ = (-7, "unknown forest inventory zone")
    UNKNOWN_SPECIES_CODE = (-8, "unknown species code")
    TOTAL_AGE_UNSUPPORTED_FOR_GROWTH_INTERCEPT = (-9, "growth intercept curves need breast-height age")
    NOT_APPLICABLE_TO_GROWTH_INTERCEPT = (-9, "not defined for growth intercept curves")
    UNKNOWN_SPECIES = (-10, "unknown species")
    UNSUPPORTED_AGE_TYPE_COMBINATION = (-11, "unsupported age type conversion")
    UNKNOWN_ESTABLISHMENT = (-12, "unknown establishment type")

    @property
    def sentinel(self) -> int:
        """Legacy return value for this failure."""
        return self.value[0]

    @property
    def description(self) -> str:
        return self.value[1]


class SindexError(Exception):
    """Base exception for all pysindex errors."""
    pass


class ConfigurationError(SindexError):
    """Raised when there are configuration-related issues."""
    pass


class CurveNotFoundError(ConfigurationError):
    """Raised when a curve key is not found in the catalog."""
    def __init__(self, curve_key: str):
        self.curve_key = curve_key
        super().__init__(f"Curve '{curve_key}' not found in catalog. "
                         f"Valid curve keys can be found in cfg/curves.yaml")


class ParameterError(SindexError):
    """Raised when parameters are invalid or out of bounds."""
    pass


class InvalidParameterError(ParameterError):
    """Raised when a parameter value is invalid."""
    def __init__(self, param_name: str, value: any, reason: str = ""):
        self.param_name = param_name
        self.value = value
        self.reason = reason
        message = f"Invalid value for parameter '{param_name}': {value}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class ComputationError(SindexError):
    """Raised when a site index computation has no numeric answer.

    Attributes:
        kind: The ErrorKind describing the failure
        reason: Optional detail about where the failure happened
    """
    def __init__(self, kind: ErrorKind, reason: str = ""):
        self.kind = kind
        self.reason = reason
        message = f"{kind.name}: {kind.description}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)

    @property
    def sentinel(self) -> int:
        return self.kind.sentinel


class DataError(SindexError):
    """Raised when there are data-related issues."""
    pass


class CatalogFileNotFoundError(DataError):
    """Raised when a required catalog file is not found."""
    def __init__(self, file_path: str, file_type: str = "file"):
        self.file_path = file_path
        self.file_type = file_type
        super().__init__(f"Required {file_type} not found: {file_path}")


class InvalidDataError(DataError):
    """Raised when data is malformed or invalid."""
    def __init__(self, data_description: str, reason: str):
        self.data_description = data_description
        self.reason = reason
        super().__init__(f"Invalid {data_description}: {reason}")


# Validation utilities
def validate_positive(value: float, param_name: str) -> float:
    """Validate that a value is positive.

    Args:
        value: Value to validate
        param_name: Parameter name for error message

    Returns:
        The validated value

    Raises:
        InvalidParameterError: If value is not positive
    """
    if value <= 0:
        raise InvalidParameterError(param_name, value, "must be positive")
    return value


def validate_proportion(value: float, param_name: str) -> float:
    """Validate that a value is a valid proportion (0-1).

    Args:
        value: Value to validate
        param_name: Parameter name for error message

    Returns:
        The validated value

    Raises:
        InvalidParameterError: If value is not in [0, 1]
    """
    if not 0 <= value <= 1:
        raise InvalidParameterError(param_name, value, "must be between 0 and 1")
    return value


def validate_range(value: float, min_val: float, max_val: float, param_name: str) -> float:
    """Validate that a value is within a specific range.

    Args:
        value: Value to validate
        min_val: Minimum allowed value
        max_val: Maximum allowed value
        param_name: Parameter name for error message

    Returns:
        The validated value

    Raises:
        InvalidParameterError: If value is outside the range
    """
    if not min_val <= value <= max_val:
        raise InvalidParameterError(
            param_name, value,
            f"must be between {min_val} and {max_val}"
        )
    return value
