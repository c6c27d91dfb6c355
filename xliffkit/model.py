from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any

DEFAULT_FILE_ID = "default"


class XliffVersion(str, Enum):
    V1_2 = "1.2"
    V2_0 = "2.0"


class TranslationState(str, Enum):
    INITIAL = "initial"
    TRANSLATED = "translated"
    REVIEWED = "reviewed"
    FINAL = "final"


def _value(v):
    return v.value if isinstance(v, Enum) else v


@dataclass
class TranslationUnit:
    """
    One source/target string pair (trans-unit in 1.2, unit/segment in 2.0).
    """
    id: str
    source: str
    target: Optional[str] = None  # None = no target element, "" = empty target
    state: Optional[str] = None  # TranslationState value
    note: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"id": self.id, "source": self.source}
        for key in ("target", "state", "note"):
            value = getattr(self, key)
            if value is not None:
                data[key] = _value(value)
        return data


@dataclass
class TranslationFile:
    """
    One translatable resource inside a document.

    original, datatype, date and product_name are 1.2 metadata carried through
    untouched; they stay None for documents read from 2.0.
    """
    id: str
    source_language: str
    target_language: Optional[str] = None
    original: Optional[str] = None
    datatype: Optional[str] = None
    date: Optional[str] = None
    product_name: Optional[str] = None
    units: List[TranslationUnit] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = {"id": self.id, "source_language": self.source_language}
        for key in ("target_language", "original", "datatype", "date", "product_name"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        data["units"] = [u.to_dict() for u in self.units]
        return data


@dataclass
class XliffDocument:
    version: XliffVersion
    files: List[TranslationFile] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": _value(self.version),
            "files": [f.to_dict() for f in self.files],
        }
