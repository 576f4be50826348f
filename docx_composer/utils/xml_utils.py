"""
XML utilities for DOCX packages.

Namespace constants, qualified-name helpers and the part names the composer works with.
"""

from typing import Dict, Optional, Tuple

# OPC namespaces
OPC_NS = "http://schemas.openxmlformats.org/package/2006/relationships"
CONTENT_TYPES_NS = "http://schemas.openxmlformats.org/package/2006/content-types"
WORD_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
CHART_NS = "http://schemas.openxmlformats.org/drawingml/2006/chart"
DRAWING_NS = "http://schemas.openxmlformats.org/drawingml/2006/main"
WP_NS = "http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing"

NAMESPACES: Dict[str, str] = {
    "w": WORD_NS,
    "r": REL_NS,
    "c": CHART_NS,
    "a": DRAWING_NS,
    "wp": WP_NS,
    "rels": OPC_NS,
    "ct": CONTENT_TYPES_NS,
}

# Part names
ROOT_RELS_PART = "_rels/.rels"
DOCUMENT_PART = "word/document.xml"
CONTENT_TYPES_PART = "[Content_Types].xml"
DOCUMENT_RELS_PART = "word/_rels/document.xml.rels"
FOOTNOTES_PART = "word/footnotes.xml"
FOOTNOTES_RELS_PART = "word/_rels/footnotes.xml.rels"
WORD_PREFIX = "word/"
CHART_TARGET_PREFIX = "charts/"

# Relationship types
RT_PREFIX = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/"
RT_HYPERLINK = RT_PREFIX + "hyperlink"
RT_CHART = RT_PREFIX + "chart"
RT_FOOTNOTES = RT_PREFIX + "footnotes"
RT_OFFICE_DOCUMENT = RT_PREFIX + "officeDocument"
RT_STYLES = RT_PREFIX + "styles"

# Package-level parts a document may relate to at most once
SINGLE_INSTANCE_TYPES = frozenset(
    RT_PREFIX + name
    for name in (
        "styles",
        "stylesWithEffects",
        "settings",
        "webSettings",
        "fontTable",
        "theme",
        "numbering",
        "footnotes",
        "endnotes",
        "comments",
    )
)

# Content types
CT_CHART = "application/vnd.openxmlformats-officedocument.drawingml.chart+xml"
CT_FOOTNOTES = "application/vnd.openxmlformats-officedocument.wordprocessingml.footnotes+xml"
CT_DOCUMENT = "application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"
CT_RELATIONSHIPS = "application/vnd.openxmlformats-package.relationships+xml"
CT_XML = "application/xml"


def qn(name: str) -> str:
    """
    Convert a prefixed name such as ``w:footnote`` to Clark notation.

    Args:
        name: Prefixed name, or an unprefixed name which is returned as is

    Returns:
        ``{namespace}local`` name
    """
    if ":" not in name:
        return name
    prefix, local = name.split(":", 1)
    try:
        return f"{{{NAMESPACES[prefix]}}}{local}"
    except KeyError:
        raise ValueError(f"Unknown namespace prefix: {prefix}") from None


def split_qname(tag: str) -> Tuple[Optional[str], str]:
    """Split a Clark notation name into (namespace, local name)."""
    if tag.startswith("{"):
        namespace, _, local = tag[1:].partition("}")
        return namespace, local
    return None, tag


def local_name(tag: str) -> str:
    return split_qname(tag)[1]


def is_relationship_attribute(name: str) -> bool:
    """Attributes in the officeDocument relationships namespace hold relationship ids."""
    return name.startswith(f"{{{REL_NS}}}")
