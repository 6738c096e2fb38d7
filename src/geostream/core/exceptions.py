"""
Custom exception hierarchy for GeoStream.

This module defines a hierarchy of exceptions that provide clear, specific
error types for the failure modes of a conversion pass. A pass is fail-fast:
the first exception raised by a driver or a sink aborts the remainder of the
pass and propagates to the caller unchanged.
"""

import logging
from contextlib import contextmanager
from typing import Optional


class GeoStreamError(Exception):
    """
    Base exception for all GeoStream-specific errors.

    All custom exceptions in GeoStream inherit from this class.
    This allows catching all GeoStream errors with a single except clause.
    """
    pass


class ConfigurationError(GeoStreamError):
    """
    Configuration-related errors.

    Raised when:
    - Configuration values are invalid
    - An unknown output format is requested
    """
    pass


class ValidationError(GeoStreamError):
    """
    Value or argument validation failures.

    Raised when:
    - An attribute value does not fit its declared kind
    - An integer attribute is out of range for its width
    """
    pass


class GeometryError(GeoStreamError):
    """
    Malformed source geometry.

    Raised when:
    - A driver meets an unknown geometry type
    - Coordinates or members of a geometry are missing or malformed
    """
    pass


class GrammarError(GeometryError):
    """
    Event stream grammar violations.

    Raised when:
    - A begin/end pair is unmatched or mismatched
    - Sibling indices are not contiguous from zero
    - Feature framing events arrive out of order
    """
    pass


class WriteError(GeoStreamError):
    """
    Output transport failures.

    Raised when:
    - The underlying stream rejects a write
    """
    pass


class ConversionError(GeoStreamError):
    """
    Foreign geometry construction failures.

    Raised when:
    - The native geometry library rejects the coordinates it is given
    - A conversion finished without producing a geometry
    """
    pass


# =============================================================================
# Validation Helpers
# =============================================================================

def require(condition: bool, message: str, error_type: type = None) -> None:
    """
    Validate a condition, raising an exception if it fails.

    Args:
        condition: The condition that must be True
        message: Error message if condition is False
        error_type: Exception type to raise (default: ValidationError)

    Raises:
        ValidationError (or specified error_type) if condition is False

    Example:
        >>> require(idx >= 0, "Index must be non-negative")
    """
    if error_type is None:
        error_type = ValidationError
    if not condition:
        raise error_type(message)


@contextmanager
def geostream_error_handler(
    operation: str,
    logger: Optional[logging.Logger] = None,
    error_type: type = GeoStreamError
):
    """
    Context manager for standardized error handling.

    Converts generic exceptions raised inside the block into ``error_type``
    (chained to the original) and leaves GeoStream errors untouched.

    Args:
        operation: Description of the operation being performed (for logging)
        logger: Logger instance for error messages. If None, errors are not logged.
        error_type: GeoStream exception type to convert generic exceptions to

    Raises:
        The original exception if it's already a GeoStreamError, otherwise
        the specified error_type

    Example:
        >>> with geostream_error_handler("building polygon", error_type=ConversionError):
        ...     Polygon(shell, holes)
    """
    try:
        yield
    except GeoStreamError:
        if logger:
            logger.error(f"Error during {operation}", exc_info=True)
        raise
    except Exception as e:
        if logger:
            logger.error(f"Error during {operation}: {e}", exc_info=True)
        raise error_type(f"Failed during {operation}: {e}") from e


__all__ = [
    'GeoStreamError',
    'ConfigurationError',
    'ValidationError',
    'GeometryError',
    'GrammarError',
    'WriteError',
    'ConversionError',
    'require',
    'geostream_error_handler',
]
