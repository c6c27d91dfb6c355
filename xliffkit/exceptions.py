"""
xliffkit exceptions.

Only parse-time problems are raised. Structural problems in an already built
document are reported by the validator as data.
"""
from typing import Any, Dict, Optional


class XliffError(Exception):
    """Base error with optional details for diagnostics."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class XliffParseError(XliffError, ValueError):
    """The text could not be read as an XLIFF document."""


class UnsupportedVersionError(XliffParseError):
    """The version attribute is missing or names an unsupported dialect."""
