"""Content-type declarations (``[Content_Types].xml``)."""

from __future__ import annotations

from typing import Optional, Tuple

from .part_tree import PartTree
from ..utils.xml_utils import CONTENT_TYPES_NS, CT_DOCUMENT, CT_RELATIONSHIPS, CT_XML

TYPES_TAG = f"{{{CONTENT_TYPES_NS}}}Types"
DEFAULT_TAG = f"{{{CONTENT_TYPES_NS}}}Default"
OVERRIDE_TAG = f"{{{CONTENT_TYPES_NS}}}Override"


def default_entry(extension: str, content_type: str) -> PartTree:
    return PartTree(DEFAULT_TAG, (("Extension", extension), ("ContentType", content_type)))


def override_entry(part_name: str, content_type: str) -> PartTree:
    if not part_name.startswith("/"):
        part_name = "/" + part_name
    return PartTree(OVERRIDE_TAG, (("PartName", part_name), ("ContentType", content_type)))


def empty_content_types() -> PartTree:
    """Minimal declarations for a package holding only the main document part."""
    return PartTree(
        TYPES_TAG,
        children=(
            default_entry("rels", CT_RELATIONSHIPS),
            default_entry("xml", CT_XML),
            override_entry("/word/document.xml", CT_DOCUMENT),
        ),
        namespaces=((None, CONTENT_TYPES_NS),),
    )


def content_type_key(node: PartTree) -> Optional[Tuple[str, str]]:
    """
    Identity of a declaration: extensions are case-insensitive, part names are not.

    Two declarations with the same key cannot coexist in one package.
    """
    if node.tag == DEFAULT_TAG:
        return ("Default", (node.get("Extension") or "").lower())
    if node.tag == OVERRIDE_TAG:
        return ("Override", node.get("PartName") or "")
    return None


def find_override(content_types: PartTree, part_name: str) -> Optional[PartTree]:
    if not part_name.startswith("/"):
        part_name = "/" + part_name
    for node in content_types.elements(OVERRIDE_TAG):
        if node.get("PartName") == part_name:
            return node
    return None
