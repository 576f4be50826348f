"""
Builds DocumentSnapshot values from package parts.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from .xml_mapper import parse_part
from ..exceptions import InvalidArgumentError, PartNotFoundError
from ..models.chart import ChartInformation, chart_target_name, is_chart_target
from ..models.part_tree import PartTree
from ..models.relationships import RELATIONSHIP_TAG, relationship_entries
from ..models.snapshot import DocumentSnapshot
from ..utils.xml_utils import (
    CONTENT_TYPES_PART,
    DOCUMENT_PART,
    DOCUMENT_RELS_PART,
    FOOTNOTES_PART,
    FOOTNOTES_RELS_PART,
    WORD_PREFIX,
)

logger = logging.getLogger(__name__)


def _read_part(package: Any, part_name: str) -> Optional[bytes]:
    if isinstance(package, Mapping):
        return package.get(part_name)
    if hasattr(package, "read"):
        return package.read(part_name)
    raise InvalidArgumentError("package must be a mapping or expose read()", type(package).__name__)


def _load_part(package: Any, part_name: str, required: bool = False) -> Optional[PartTree]:
    data = _read_part(package, part_name)
    if data is None:
        if required:
            raise PartNotFoundError(part_name)
        return None
    return parse_part(data, part_name)


def _relative_chart_targets(relations: PartTree) -> PartTree:
    """Chart targets are kept relative to ``word/`` so they match chart names."""

    def rewrite(node: PartTree, name: str, value: str) -> str:
        if (
            node.tag == RELATIONSHIP_TAG
            and name == "Target"
            and node.get("TargetMode") != "External"
            and is_chart_target(value)
        ):
            return chart_target_name(value)
        return value

    return relations.rewrite_attributes(rewrite)


def load_snapshot(package: Any, source: Optional[str] = None) -> DocumentSnapshot:
    """
    Read the parts of one document into a DocumentSnapshot.

    Args:
        package: PackageReader, or any mapping of part name -> bytes
        source: Label used in logs (defaults to the reader's name)

    Returns:
        DocumentSnapshot with derived counters

    Raises:
        PartNotFoundError: If document.xml, [Content_Types].xml or a referenced chart part is missing
        MalformedPartError: If a part is not well-formed XML
    """
    if package is None:
        raise InvalidArgumentError("package is required")
    source = source or getattr(package, "name", None)

    content = _load_part(package, DOCUMENT_PART, required=True)
    content_types = _load_part(package, CONTENT_TYPES_PART, required=True)
    content_relations = _load_part(package, DOCUMENT_RELS_PART)
    footnotes = _load_part(package, FOOTNOTES_PART)
    footnote_relations = _load_part(package, FOOTNOTES_RELS_PART)

    charts: List[ChartInformation] = []
    if content_relations is not None:
        content_relations = _relative_chart_targets(content_relations)
        seen = set()
        for rel in relationship_entries(content_relations):
            if rel.is_external or not is_chart_target(rel.target) or rel.target in seen:
                continue
            seen.add(rel.target)
            chart = _load_part(package, WORD_PREFIX + rel.target, required=True)
            charts.append(ChartInformation(rel.target, chart))

    snapshot = DocumentSnapshot.create(
        content=content,
        content_types=content_types,
        content_relations=content_relations,
        footnotes=footnotes,
        footnote_relations=footnote_relations,
        charts=charts,
        source=source,
    )
    logger.info(
        f"Loaded {source or 'document'}: {len(snapshot.footnote_ids)} footnotes, "
        f"{len(charts)} charts, max rId {snapshot.max_document_relation_id}"
    )
    return snapshot
