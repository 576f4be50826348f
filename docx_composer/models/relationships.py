"""
Relationship tables (``*.rels`` parts).

A relationship table is kept as its ``Relationships`` PartTree; this module gives
index-style access (id -> entry) and the id parsing rules shared by the reconcilers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from .part_tree import PartTree
from ..utils.xml_utils import OPC_NS, is_relationship_attribute

RELATIONSHIPS_TAG = f"{{{OPC_NS}}}Relationships"
RELATIONSHIP_TAG = f"{{{OPC_NS}}}Relationship"

_RELATIONSHIP_ID = re.compile(r"^(?:rId)?(\d+)$")


def relationship_number(rel_id: Optional[str]) -> Optional[int]:
    """
    Numeric part of a relationship id (``rId7`` -> 7, ``7`` -> 7).

    Returns None for ids that are not numbered or not positive.
    """
    if not rel_id:
        return None
    match = _RELATIONSHIP_ID.match(rel_id.strip())
    if not match:
        return None
    number = int(match.group(1))
    return number if number > 0 else None


def format_relationship_id(number: int) -> str:
    return f"rId{number}"


@dataclass(frozen=True)
class Relationship:
    """One entry of a relationship table."""

    id: str
    type: str
    target: str
    target_mode: str = "Internal"

    @property
    def numeric_id(self) -> Optional[int]:
        return relationship_number(self.id)

    @property
    def is_external(self) -> bool:
        return self.target_mode == "External"

    @classmethod
    def from_tree(cls, node: PartTree) -> "Relationship":
        return cls(
            id=node.get("Id", ""),
            type=node.get("Type", ""),
            target=node.get("Target", ""),
            target_mode=node.get("TargetMode", "Internal"),
        )

    def to_tree(self) -> PartTree:
        attrs = [("Id", self.id), ("Type", self.type), ("Target", self.target)]
        if self.target_mode != "Internal":
            attrs.append(("TargetMode", self.target_mode))
        return PartTree(RELATIONSHIP_TAG, tuple(attrs))


def empty_relationships() -> PartTree:
    return PartTree(RELATIONSHIPS_TAG, namespaces=((None, OPC_NS),))


def relationship_entries(relations: PartTree) -> List[Relationship]:
    return [Relationship.from_tree(node) for node in relations.elements(RELATIONSHIP_TAG)]


def relationship_index(relations: PartTree) -> Dict[str, Relationship]:
    """Map relationship id -> entry."""
    return {rel.id: rel for rel in relationship_entries(relations)}


def max_relationship_id(relations: PartTree) -> int:
    """High-water mark of a relationship table (0 when empty)."""
    numbers = [rel.numeric_id for rel in relationship_entries(relations)]
    return max((n for n in numbers if n is not None), default=0)


def relationship_references(tree: PartTree) -> Iterator[str]:
    """Every relationship id referenced from ``tree`` (``r:id``, ``r:embed``, ``r:link``...)."""
    for node in tree.iter():
        for name, value in node.attributes:
            if is_relationship_attribute(name) and value:
                yield value


def find_relationship(relations: PartTree, rel_type: str) -> Optional[Relationship]:
    for rel in relationship_entries(relations):
        if rel.type == rel_type:
            return rel
    return None
