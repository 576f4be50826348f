"""
Relationship reconciliation - renumbers a relationship table and the references to it.

Works for both scopes: the document table (``document.xml.rels`` referenced from
``document.xml``) and the footnote table (``footnotes.xml.rels`` referenced from
``footnotes.xml``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping

from ..exceptions import DanglingReferenceError, InvalidArgumentError
from ..models.part_tree import PartTree
from ..models.relationships import (
    RELATIONSHIP_TAG,
    format_relationship_id,
    relationship_entries,
    relationship_index,
    relationship_number,
    relationship_references,
)
from ..utils.xml_utils import is_relationship_attribute

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelationshipReconciliation:
    """Result of renumbering one relationship table."""

    tree: PartTree
    relations: PartTree
    mapping: Dict[str, str]
    high_water_mark: int


def relationship_mapping(relations: PartTree, offset: int) -> Dict[str, str]:
    """
    Old id -> new id.

    ``rId<k>`` becomes ``rId<offset + k>``. Ids without a number get the next free
    numbers above the table's numeric maximum, in table order.
    """
    entries = relationship_entries(relations)
    highest = max((rel.numeric_id for rel in entries if rel.numeric_id is not None), default=0)
    mapping: Dict[str, str] = {}
    spare = highest
    for rel in entries:
        if not rel.id or rel.id in mapping:
            continue
        number = rel.numeric_id
        if number is None:
            spare += 1
            number = spare
        mapping[rel.id] = format_relationship_id(offset + number)
    return mapping


def check_references(tree: PartTree, relations: PartTree, scope: str) -> None:
    """
    Raise DanglingReferenceError if a reference in ``tree`` is missing from ``relations``.
    """
    known = relationship_index(relations)
    for reference in relationship_references(tree):
        if reference not in known:
            raise DanglingReferenceError(reference, scope)


def reconcile_relationships(
    tree: PartTree,
    relations: PartTree,
    offset: int,
    scope: str = "document",
) -> RelationshipReconciliation:
    """
    Shift relationship ids by ``offset`` and rewrite every reference in ``tree``.

    Args:
        tree: Part holding the references (document or footnotes)
        relations: ``Relationships`` tree for that part
        offset: Current relationship high-water mark of the accumulator
        scope: Name used in logs and errors ("document" or "footnotes")

    Returns:
        RelationshipReconciliation; high-water mark is ``offset`` plus the largest
        number assigned

    Raises:
        DanglingReferenceError: If a reference does not resolve after rewriting
    """
    if tree is None or relations is None:
        raise InvalidArgumentError("tree and relations are required")
    if offset < 0:
        raise InvalidArgumentError("Relationship offset must not be negative", str(offset))

    mapping = relationship_mapping(relations, offset)

    def rewrite_table(node: PartTree, name: str, value: str) -> str:
        if node.tag == RELATIONSHIP_TAG and name == "Id":
            return mapping.get(value, value)
        return value

    def rewrite_references(node: PartTree, name: str, value: str) -> str:
        if is_relationship_attribute(name):
            return mapping.get(value, value)
        return value

    new_relations = relations.rewrite_attributes(rewrite_table) if mapping else relations
    new_tree = tree.rewrite_attributes(rewrite_references) if mapping else tree
    check_references(new_tree, new_relations, scope)

    high_water_mark = max((relationship_number(new_id) for new_id in mapping.values()), default=offset)
    logger.debug(
        f"Renumbered {len(mapping)} {scope} relationships with offset {offset} "
        f"(high-water mark {high_water_mark})"
    )
    return RelationshipReconciliation(new_tree, new_relations, mapping, high_water_mark)


def retarget_relationships(relations: PartTree, renames: Mapping[str, str]) -> PartTree:
    """Rewrite relationship targets through ``renames`` (old target -> new target)."""
    if not renames:
        return relations

    def rewrite(node: PartTree, name: str, value: str) -> str:
        if node.tag == RELATIONSHIP_TAG and name == "Target":
            return renames.get(value, value)
        return value

    return relations.rewrite_attributes(rewrite)


def prune_relationships(tree: PartTree, relations: PartTree) -> PartTree:
    """Drop relationship entries that nothing in ``tree`` references."""
    referenced = set(relationship_references(tree))
    kept: List = [
        child for child in relations.children
        if not (isinstance(child, PartTree) and child.tag == RELATIONSHIP_TAG and child.get("Id") not in referenced)
    ]
    if len(kept) == len(relations.children):
        return relations
    return relations.with_children(kept)
