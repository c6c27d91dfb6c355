from dataclasses import dataclass, field
from typing import List, Optional, Set

from .logger import get_logger
from .model import XliffDocument

logger = get_logger(__name__)


@dataclass
class ValidationError:
    message: str
    path: Optional[str] = None  # e.g. "files[0].units[2].id"


@dataclass
class ValidationResult:
    valid: bool
    errors: List[ValidationError] = field(default_factory=list)

    def __bool__(self):
        return self.valid

    def messages(self) -> List[str]:
        return [e.message for e in self.errors]


def _is_blank(value: Optional[str]) -> bool:
    return value is None or value.strip() == ""


def validate(doc: XliffDocument) -> ValidationResult:
    """
    Checks the structural rules every document must satisfy before it is
    handed to a translation workflow:

    - at least one file
    - every file has a source language and at least one unit
    - every unit has an id, unique within its file, and source text
    - a unit only carries a target if its file has a target language

    All problems are collected and reported; nothing is raised and the
    document is left untouched.
    """
    errors: List[ValidationError] = []

    if not doc.files:
        errors.append(ValidationError("Document must contain at least one file"))
        return ValidationResult(valid=False, errors=errors)

    for file_index, file in enumerate(doc.files):
        file_path = f"files[{file_index}]"

        if _is_blank(file.source_language):
            errors.append(ValidationError(
                "File must have a source language",
                f"{file_path}.source_language",
            ))

        if not file.units:
            errors.append(ValidationError(
                "File must contain at least one translation unit",
                f"{file_path}.units",
            ))
            continue

        seen_ids: Set[str] = set()

        for unit_index, unit in enumerate(file.units):
            unit_path = f"{file_path}.units[{unit_index}]"

            if _is_blank(unit.id):
                errors.append(ValidationError("Translation unit must have an ID", f"{unit_path}.id"))
            elif unit.id in seen_ids:
                errors.append(ValidationError(f"Duplicate translation unit ID: {unit.id}", f"{unit_path}.id"))
            else:
                seen_ids.add(unit.id)

            if _is_blank(unit.source):
                errors.append(ValidationError(
                    f"Translation unit '{unit.id}' must have source text",
                    f"{unit_path}.source",
                ))

            if unit.target and _is_blank(file.target_language):
                errors.append(ValidationError(
                    f"Translation unit '{unit.id}' has target text but file has no target language",
                    f"{file_path}.target_language",
                ))

    if errors:
        logger.debug(f"Validation found {len(errors)} problem(s)")

    return ValidationResult(valid=not errors, errors=errors)
