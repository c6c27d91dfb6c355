from typing import Any, Callable, Dict, List, Optional, Union

from lxml import etree

from .exceptions import UnsupportedVersionError, XliffParseError
from .logger import get_logger
from .model import (
    DEFAULT_FILE_ID,
    TranslationFile,
    TranslationState,
    TranslationUnit,
    XliffDocument,
    XliffVersion,
)
from .tree import ATTRIBUTE_PREFIX, TEXT_KEY, as_list, parse_text, to_dict

logger = get_logger(__name__)

ROOT_TAG = "xliff"


def _node(value: Any) -> Dict[str, Any]:
    """Container element in dict notation; empty or absent containers become {}."""
    if isinstance(value, list):
        value = value[0] if value else None
    return value if isinstance(value, dict) else {}


def _attr(node: Dict[str, Any], name: str) -> Optional[str]:
    return node.get(ATTRIBUTE_PREFIX + name)


def _text(value: Any) -> Optional[str]:
    """
    Text of a leaf element in dict notation, None when the element is absent.
    Repeated leaves (several <note>s) yield the first one.
    """
    if isinstance(value, list):
        value = value[0] if value else None
    if value is None:
        return None
    if isinstance(value, dict):
        # Leaf with attributes, e.g. <source xml:lang="en">
        return value.get(TEXT_KEY, "")
    return value


def _state(raw: Optional[str]) -> Optional[Union[TranslationState, str]]:
    if raw is None:
        return None
    try:
        return TranslationState(raw)
    except ValueError:
        logger.debug(f"Keeping unknown segment state '{raw}' as-is")
        return raw


def _parse_xliff_12(root: Dict[str, Any]) -> XliffDocument:
    """
    XLIFF 1.2: <xliff><file><header/><body><trans-unit>.
    Languages live on each <file>; approval is the only state information.
    """
    files: List[TranslationFile] = []

    for file_node in map(_node, as_list(root.get("file"))):
        body = _node(file_node.get("body"))
        units = []
        for unit_node in map(_node, as_list(body.get("trans-unit"))):
            approved = _attr(unit_node, "approved") == "yes"
            units.append(TranslationUnit(
                id=_attr(unit_node, "id") or "",
                source=_text(unit_node.get("source")) or "",
                target=_text(unit_node.get("target")),
                state=TranslationState.FINAL if approved else TranslationState.INITIAL,
                note=_text(unit_node.get("note")),
            ))

        original = _attr(file_node, "original")
        files.append(TranslationFile(
            id=original or DEFAULT_FILE_ID,
            source_language=_attr(file_node, "source-language") or "",
            target_language=_attr(file_node, "target-language"),
            original=original,
            datatype=_attr(file_node, "datatype"),
            date=_attr(file_node, "date"),
            product_name=_attr(file_node, "product-name"),
            units=units,
        ))

    return XliffDocument(version=XliffVersion.V1_2, files=files)


def _parse_xliff_20(root: Dict[str, Any]) -> XliffDocument:
    """
    XLIFF 2.0: <xliff srcLang trgLang><file><unit><segment>.
    The language pair is declared once and applies to every file.
    """
    source_language = _attr(root, "srcLang") or ""
    target_language = _attr(root, "trgLang")
    files: List[TranslationFile] = []

    for file_node in map(_node, as_list(root.get("file"))):
        units = []
        for unit_node in map(_node, as_list(file_node.get("unit"))):
            segment = _node(unit_node.get("segment"))
            notes = _node(unit_node.get("notes"))
            units.append(TranslationUnit(
                id=_attr(unit_node, "id") or "",
                source=_text(segment.get("source")) or "",
                target=_text(segment.get("target")),
                state=_state(_attr(segment, "state")),
                note=_text(notes.get("note")),
            ))

        files.append(TranslationFile(
            id=_attr(file_node, "id") or DEFAULT_FILE_ID,
            source_language=source_language,
            target_language=target_language,
            units=units,
        ))

    return XliffDocument(version=XliffVersion.V2_0, files=files)


_DIALECTS: Dict[XliffVersion, Callable[[Dict[str, Any]], XliffDocument]] = {
    XliffVersion.V1_2: _parse_xliff_12,
    XliffVersion.V2_0: _parse_xliff_20,
}


def parse(text: str) -> XliffDocument:
    """
    Reads an XLIFF 1.2 or 2.0 document into the version-agnostic model.

    The dialect is picked from the root's version attribute. The result is not
    validated; run validate() on it for structural checks.

    Raises:
        XliffParseError: malformed markup or a root other than <xliff>.
        UnsupportedVersionError: version missing or not 1.2/2.0.
    """
    try:
        root = parse_text(text)
    except (etree.XMLSyntaxError, ValueError) as e:
        raise XliffParseError(f"Invalid XLIFF: malformed XML ({e})") from e

    if root.tag != ROOT_TAG:
        raise XliffParseError(
            "Invalid XLIFF: missing xliff root element",
            details={"root": root.tag},
        )

    root_node = _node(to_dict(root))
    raw_version = _attr(root_node, "version")
    try:
        version = XliffVersion(raw_version)
    except ValueError:
        raise UnsupportedVersionError(
            f"Unsupported XLIFF version: {raw_version}",
            details={"version": raw_version},
        ) from None

    doc = _DIALECTS[version](root_node)
    logger.debug(
        f"Parsed XLIFF {version.value}: {len(doc.files)} file(s), "
        f"{sum(len(f.units) for f in doc.files)} unit(s)"
    )
    return doc
