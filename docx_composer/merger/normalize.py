"""
Per-document normalization applied to every input before it is folded.

Each step depends only on the document itself, so inputs can be normalized
independently (and concurrently) before the sequential fold.
"""

from __future__ import annotations

import logging
from typing import Optional

from .relationship_reconciler import prune_relationships
from ..models.chart import is_chart_target
from ..models.part_tree import PartTree
from ..models.relationships import relationship_entries
from ..models.snapshot import BODY_TAG, DocumentSnapshot
from ..options import ComposeOptions
from ..utils.xml_utils import WORD_NS, qn

logger = logging.getLogger(__name__)

SECTION_PROPERTIES_TAG = qn("w:sectPr")
PARAGRAPH_TAG = qn("w:p")
_RSID_PREFIX = f"{{{WORD_NS}}}rsid"


def _is_rsid(name: str) -> bool:
    return name.startswith(_RSID_PREFIX)


def strip_revision_ids(tree: PartTree) -> PartTree:
    """Remove every ``w:rsid*`` attribute."""
    return tree.transform(lambda node: node.without_attributes(_is_rsid))


def strip_paragraph_attributes(footnotes: PartTree) -> PartTree:
    """Remove all attributes of ``w:p`` elements (footnote paragraphs carry only revision noise)."""

    def visit(node: PartTree) -> PartTree:
        if node.tag == PARAGRAPH_TAG and node.attributes:
            return node.without_attributes(lambda name: True)
        return node

    return footnotes.transform(visit)


def drop_section_properties(content: PartTree) -> PartTree:
    """Remove body-level ``w:sectPr`` elements."""

    def visit(node: PartTree) -> PartTree:
        if node.tag != BODY_TAG:
            return node
        return node.with_children(
            child for child in node.children
            if not (isinstance(child, PartTree) and child.tag == SECTION_PROPERTIES_TAG)
        )

    return content.transform(visit)


def normalize_snapshot(snapshot: DocumentSnapshot, options: Optional[ComposeOptions] = None) -> DocumentSnapshot:
    """
    Prepare an input document for folding.

    Args:
        snapshot: Freshly loaded input document (never the seed)
        options: ComposeOptions; defaults apply when None

    Returns:
        Normalized snapshot with recomputed counters
    """
    options = options or ComposeOptions()
    content = snapshot.content
    footnotes = snapshot.footnotes
    content_relations = snapshot.content_relations
    footnote_relations = snapshot.footnote_relations
    charts = snapshot.charts

    if options.strip_revision_ids:
        content = strip_revision_ids(content)
        footnotes = strip_paragraph_attributes(strip_revision_ids(footnotes))

    if options.drop_section_properties:
        content = drop_section_properties(content)

    if options.prune_relationships:
        content_relations = prune_relationships(content, content_relations)
        footnote_relations = prune_relationships(footnotes, footnote_relations)
        targets = {
            rel.target for rel in relationship_entries(content_relations)
            if not rel.is_external and is_chart_target(rel.target)
        }
        dropped = [chart.name for chart in charts if chart.name not in targets]
        if dropped:
            logger.debug(f"Dropping unreferenced charts {dropped} from {snapshot.source}")
            charts = tuple(chart for chart in charts if chart.name in targets)

    normalized = snapshot.replace(
        content=content,
        footnotes=footnotes,
        content_relations=content_relations,
        footnote_relations=footnote_relations,
        charts=charts,
    ).recount()
    logger.debug(f"Normalized {snapshot.source}: {normalized.summary()}")
    return normalized
