"""
Footnote reconciliation - renumbers footnote definitions and their references.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict

from ..exceptions import InvalidArgumentError
from ..models.footnotes import (
    FOOTNOTE_REFERENCE_TAG,
    FOOTNOTE_TAG,
    ID_ATTR,
    footnote_ids,
    footnote_number,
)
from ..models.part_tree import PartTree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FootnoteReconciliation:
    """Result of renumbering one document's footnotes."""

    content: PartTree
    footnotes: PartTree
    mapping: Dict[str, str]
    high_water_mark: int


def footnote_mapping(footnotes: PartTree, offset: int) -> Dict[str, str]:
    """
    Old id -> new id for every real footnote (id > 0).

    Built from the largest id down; values are applied through an exact lookup, so
    ``1`` can never match inside an already rewritten ``11``.
    """
    real_ids = sorted({n for n in footnote_ids(footnotes) if n > 0}, reverse=True)
    return {str(n): str(offset + n) for n in real_ids}


def _rewriter(mapping: Dict[str, str], tag: str):
    def rewrite(node: PartTree, name: str, value: str) -> str:
        if node.tag != tag or name != ID_ATTR:
            return value
        number = footnote_number(value)
        if number is None:
            return value
        return mapping.get(str(number), value)

    return rewrite


def reconcile_footnotes(content: PartTree, footnotes: PartTree, offset: int) -> FootnoteReconciliation:
    """
    Shift every footnote id ``k > 0`` to ``offset + k``.

    Args:
        content: Document tree holding ``w:footnoteReference`` elements
        footnotes: ``w:footnotes`` tree
        offset: Current footnote high-water mark of the accumulator

    Returns:
        FootnoteReconciliation with rewritten trees and the new high-water mark
        ``offset + max(original ids)`` (``offset`` when there are none)
    """
    if content is None or footnotes is None:
        raise InvalidArgumentError("content and footnotes are required")
    if offset < 0:
        raise InvalidArgumentError("Footnote offset must not be negative", str(offset))

    mapping = footnote_mapping(footnotes, offset)
    if not mapping:
        return FootnoteReconciliation(content, footnotes, {}, offset)

    new_footnotes = footnotes.rewrite_attributes(_rewriter(mapping, FOOTNOTE_TAG))
    new_content = content.rewrite_attributes(_rewriter(mapping, FOOTNOTE_REFERENCE_TAG))
    high_water_mark = offset + max(int(old) for old in mapping)

    logger.debug(f"Renumbered {len(mapping)} footnotes with offset {offset} (high-water mark {high_water_mark})")
    return FootnoteReconciliation(new_content, new_footnotes, mapping, high_water_mark)
