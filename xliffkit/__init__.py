# XLIFF 1.2 / 2.0 reading, validation and writing
from .exceptions import UnsupportedVersionError, XliffError, XliffParseError
from .logger import configure_logging
from .model import TranslationFile, TranslationState, TranslationUnit, XliffDocument, XliffVersion
from .parser import parse
from .validator import ValidationError, ValidationResult, validate
from .writer import WriterOptions, convert, write

__all__ = [
    "parse",
    "validate",
    "write",
    "convert",
    "XliffDocument",
    "TranslationFile",
    "TranslationUnit",
    "TranslationState",
    "XliffVersion",
    "ValidationError",
    "ValidationResult",
    "WriterOptions",
    "XliffError",
    "XliffParseError",
    "UnsupportedVersionError",
    "configure_logging",
]
