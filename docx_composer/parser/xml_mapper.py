"""
Mapping between serialized XML parts and PartTree values.

Parsing and serialization go through lxml so that namespace prefix declarations
(including the ones only listed in ``mc:Ignorable``) survive a round trip.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from lxml import etree

from ..exceptions import MalformedPartError
from ..models.part_tree import Child, PartTree

logger = logging.getLogger(__name__)

_PARSER = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True)


def parse_part(data: bytes, part_name: str = "<part>") -> PartTree:
    """
    Parse serialized XML into a PartTree.

    Args:
        data: Raw part content
        part_name: Name used in error messages

    Returns:
        Root PartTree

    Raises:
        MalformedPartError: If the content is not well-formed XML
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    try:
        root = etree.fromstring(data, parser=_PARSER)
    except etree.XMLSyntaxError as e:
        raise MalformedPartError(part_name, str(e)) from e
    tree = element_to_tree(root)
    logger.debug(f"Parsed part {part_name}: <{tree.local_name}>")
    return tree


def element_to_tree(element, parent_nsmap: Optional[Mapping[Optional[str], str]] = None) -> PartTree:
    """Convert an lxml element (and its descendants) into a PartTree."""
    parent_nsmap = parent_nsmap or {}
    nsmap = dict(element.nsmap)
    declared = tuple(
        (prefix, uri) for prefix, uri in nsmap.items() if parent_nsmap.get(prefix) != uri
    )

    children: List[Child] = []
    if element.text:
        children.append(element.text)
    for child in element:
        # Comments and processing instructions are skipped, their tail text is not
        if isinstance(child.tag, str):
            children.append(element_to_tree(child, nsmap))
        if child.tail:
            children.append(child.tail)

    if any(isinstance(child, PartTree) for child in children):
        children = [c for c in children if not (isinstance(c, str) and not c.strip())]

    return PartTree(element.tag, tuple(element.attrib.items()), tuple(children), declared)


def tree_to_element(tree: PartTree, parent=None):
    """Convert a PartTree into an lxml element, attached to ``parent`` when given."""
    nsmap: Dict[Optional[str], str] = dict(tree.namespaces)
    if parent is None:
        element = etree.Element(tree.tag, nsmap=nsmap or None)
    else:
        element = etree.SubElement(parent, tree.tag, nsmap=nsmap or None)

    for name, value in tree.attributes:
        element.set(name, value)

    last = None
    for child in tree.children:
        if isinstance(child, str):
            if last is None:
                element.text = (element.text or "") + child
            else:
                last.tail = (last.tail or "") + child
        else:
            last = tree_to_element(child, element)
    return element


def serialize_part(tree: PartTree) -> bytes:
    """Serialize a PartTree as a standalone UTF-8 XML document."""
    return etree.tostring(
        tree_to_element(tree),
        xml_declaration=True,
        encoding="UTF-8",
        standalone=True,
    )
