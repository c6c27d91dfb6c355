from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .exceptions import UnsupportedVersionError
from .logger import get_logger
from .model import DEFAULT_FILE_ID, TranslationFile, TranslationState, XliffDocument, XliffVersion
from .parser import parse
from .tree import ATTRIBUTE_PREFIX, TEXT_KEY, from_dict, serialize

logger = get_logger(__name__)

ROOT_TAG = "xliff"
NAMESPACE_12 = "urn:oasis:names:tc:xliff:document:1.2"
NAMESPACE_20 = "urn:oasis:names:tc:xliff:document:2.0"
FALLBACK_SOURCE_LANGUAGE = "en"

# Child element keys the builders emit; an attribute prefix must not start any of them.
_ELEMENT_KEYS = ("file", "header", "body", "trans-unit", "unit", "segment", "source", "target", "note", "notes")

# camelCase spellings accepted in option mappings
_OPTION_ALIASES = {
    "suppressXmlDeclaration": "suppress_xml_declaration",
    "ignoreAttributes": "ignore_attributes",
    "attributeNamePrefix": "attribute_name_prefix",
}


@dataclass
class WriterOptions:
    """
    Output settings for write().

    format: pretty-print (True) or emit everything without newlines (False).
    indent: unit repeated once per nesting level when formatting.
    suppress_xml_declaration: leave out the <?xml ...?> prologue.
    ignore_attributes: drop every attribute, namespace declarations included.
    attribute_name_prefix: key prefix marking attributes in the intermediate
        dict notation; it never shows up in the output. A prefix that starts
        an element key (e.g. "n" for note) is rejected.
    """
    format: bool = True
    indent: str = "    "
    suppress_xml_declaration: bool = False
    ignore_attributes: bool = False
    attribute_name_prefix: str = ATTRIBUTE_PREFIX

    def __post_init__(self):
        if not self.attribute_name_prefix:
            raise ValueError("attribute_name_prefix must not be empty")
        if self.attribute_name_prefix == TEXT_KEY:
            raise ValueError(f"attribute_name_prefix must differ from the text key {TEXT_KEY!r}")
        clashes = [key for key in _ELEMENT_KEYS if key.startswith(self.attribute_name_prefix)]
        if clashes:
            raise ValueError(
                f"attribute_name_prefix {self.attribute_name_prefix!r} would turn <{clashes[0]}> into an attribute"
            )

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "WriterOptions":
        """Builds options from a mapping; keys left out (or None) keep their defaults."""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in values.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                raise TypeError(f"Unknown writer option: {key}")
            if value is not None:
                kwargs[name] = value
        return cls(**kwargs)


def _resolve_options(options: Union[WriterOptions, Mapping[str, Any], None]) -> WriterOptions:
    if options is None:
        return WriterOptions()
    if isinstance(options, WriterOptions):
        return options
    if isinstance(options, Mapping):
        return WriterOptions.from_mapping(options)
    raise TypeError(f"options must be WriterOptions or a mapping, not {type(options).__name__}")


def _resolve_version(version: Union[XliffVersion, str]) -> XliffVersion:
    try:
        return XliffVersion(version)
    except ValueError:
        raise UnsupportedVersionError(
            f"Unsupported XLIFF version: {version}",
            details={"version": version},
        ) from None


def _original(file: TranslationFile) -> Optional[str]:
    # A 2.0 file only has its id; carry it into 1.2's original attribute.
    if file.original:
        return file.original
    if file.id and file.id != DEFAULT_FILE_ID:
        return file.id
    return None


def _build_xliff_12(doc: XliffDocument, prefix: str) -> Dict[str, Any]:
    files: List[Dict[str, Any]] = []
    collapsed = 0

    for file in doc.files:
        file_node: Dict[str, Any] = {prefix + "source-language": file.source_language}
        optional = (
            ("target-language", file.target_language),
            ("datatype", file.datatype),
            ("original", _original(file)),
            ("date", file.date),
            ("product-name", file.product_name),
        )
        file_node.update({prefix + name: value for name, value in optional if value})

        units = []
        for unit in file.units:
            unit_node: Dict[str, Any] = {prefix + "id": unit.id or ""}
            if unit.state == TranslationState.FINAL:
                unit_node[prefix + "approved"] = "yes"
            elif unit.state in (TranslationState.TRANSLATED, TranslationState.REVIEWED):
                collapsed += 1
            unit_node["source"] = unit.source
            if unit.target:
                unit_node["target"] = unit.target
            if unit.note:
                unit_node["note"] = unit.note
            units.append(unit_node)

        file_node["header"] = {}
        file_node["body"] = {"trans-unit": units}
        files.append(file_node)

    if collapsed:
        logger.debug(f"{collapsed} translated/reviewed unit(s) written without approval (1.2 has no such states)")

    return {
        prefix + "version": XliffVersion.V1_2.value,
        prefix + "xmlns": NAMESPACE_12,
        "file": files,
    }


def _build_xliff_20(doc: XliffDocument, prefix: str) -> Dict[str, Any]:
    first = doc.files[0] if doc.files else None

    # 2.0 declares one language pair for the whole document.
    pairs = {(f.source_language, f.target_language) for f in doc.files}
    if len(pairs) > 1:
        logger.warning(
            f"Files declare {len(pairs)} different language pairs; "
            f"XLIFF 2.0 output uses the first file's ({first.source_language} -> {first.target_language})"
        )

    root: Dict[str, Any] = {
        prefix + "version": XliffVersion.V2_0.value,
        prefix + "xmlns": NAMESPACE_20,
        prefix + "srcLang": (first.source_language if first else None) or FALLBACK_SOURCE_LANGUAGE,
    }
    if first is not None and first.target_language:
        root[prefix + "trgLang"] = first.target_language

    files = []
    for file in doc.files:
        units = []
        for unit in file.units:
            segment: Dict[str, Any] = {}
            if unit.state:
                segment[prefix + "state"] = unit.state
            segment["source"] = unit.source
            if unit.target:
                segment["target"] = unit.target

            # notes precede the segment in the 2.0 content model
            unit_node: Dict[str, Any] = {prefix + "id": unit.id or ""}
            if unit.note:
                unit_node["notes"] = {"note": unit.note}
            unit_node["segment"] = segment
            units.append(unit_node)

        files.append({prefix + "id": file.id or DEFAULT_FILE_ID, "unit": units})

    root["file"] = files
    return root


_BUILDERS: Dict[XliffVersion, Callable[[XliffDocument, str], Dict[str, Any]]] = {
    XliffVersion.V1_2: _build_xliff_12,
    XliffVersion.V2_0: _build_xliff_20,
}


def write(
    doc: XliffDocument,
    target_version: Union[XliffVersion, str, None] = None,
    options: Union[WriterOptions, Mapping[str, Any], None] = None,
) -> str:
    """
    Serializes a document as XLIFF 1.2 or 2.0.

    A missing or empty target_version means doc.version; any other version
    converts the document. Nothing is validated here, run validate() first if
    that matters.

    Args:
        doc: The document to write.
        target_version: "1.2" or "2.0".
        options: WriterOptions, or a mapping of its fields.

    Raises:
        UnsupportedVersionError: target_version is not 1.2/2.0.
    """
    opts = _resolve_options(options)
    version = _resolve_version(target_version or doc.version)

    if version != doc.version:
        source_version = getattr(doc.version, "value", doc.version)
        logger.debug(f"Converting XLIFF {source_version} document to {version.value}")

    content = _BUILDERS[version](doc, opts.attribute_name_prefix)
    root = from_dict(ROOT_TAG, content, opts.attribute_name_prefix, TEXT_KEY)

    return serialize(
        root,
        format=opts.format,
        indent=opts.indent,
        xml_declaration=not opts.suppress_xml_declaration,
        ignore_attributes=opts.ignore_attributes,
    )


def convert(
    text: str,
    target_version: Union[XliffVersion, str],
    options: Union[WriterOptions, Mapping[str, Any], None] = None,
) -> str:
    """Parses text in either dialect and writes it back as target_version."""
    return write(parse(text), target_version, options)
