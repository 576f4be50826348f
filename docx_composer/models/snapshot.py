"""
Document snapshot - the immutable bundle of parts the composer folds together.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from .chart import ChartInformation, max_chart_number
from .content_types import empty_content_types
from .footnotes import (
    FOOTNOTE_REFERENCE_TAG,
    ID_ATTR,
    empty_footnotes,
    footnote_ids,
    footnote_number,
    max_footnote_id,
)
from .part_tree import PartTree
from .relationships import (
    empty_relationships,
    max_relationship_id,
    relationship_index,
    relationship_references,
)
from ..exceptions import InvalidArgumentError
from ..utils.xml_utils import REL_NS, WORD_NS, qn

logger = logging.getLogger(__name__)

BODY_TAG = qn("w:body")


def empty_document() -> PartTree:
    return PartTree(
        qn("w:document"),
        children=(PartTree(BODY_TAG),),
        namespaces=(("w", WORD_NS), ("r", REL_NS)),
    )


@dataclass(frozen=True)
class DocumentSnapshot:
    """
    All parts of one document that take part in composition.

    Counters are high-water marks: the largest numeric id in use in the
    corresponding table, 0 for an empty table. Use :meth:`create` to derive them
    from the parts; the fold passes explicit values so that a counter never
    decreases.
    """

    content: PartTree
    content_relations: PartTree
    content_types: PartTree
    footnotes: PartTree
    footnote_relations: PartTree
    charts: Tuple[ChartInformation, ...] = ()
    max_document_relation_id: int = 0
    max_footnote_id: int = 0
    max_footnote_relation_id: int = 0
    source: Optional[str] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        for name in ("content", "content_relations", "content_types", "footnotes", "footnote_relations"):
            if not isinstance(getattr(self, name), PartTree):
                raise InvalidArgumentError(f"DocumentSnapshot.{name} must be a PartTree")
        object.__setattr__(self, "charts", tuple(self.charts))

    @classmethod
    def create(
        cls,
        content: PartTree,
        content_types: PartTree,
        content_relations: Optional[PartTree] = None,
        footnotes: Optional[PartTree] = None,
        footnote_relations: Optional[PartTree] = None,
        charts: Iterable[ChartInformation] = (),
        source: Optional[str] = None,
    ) -> "DocumentSnapshot":
        """
        Build a snapshot and derive its counters.

        Missing optional parts are replaced with empty roots.
        """
        if content is None:
            raise InvalidArgumentError("content is required")
        if content_types is None:
            raise InvalidArgumentError("content_types is required")
        content_relations = content_relations if content_relations is not None else empty_relationships()
        footnotes = footnotes if footnotes is not None else empty_footnotes()
        footnote_relations = footnote_relations if footnote_relations is not None else empty_relationships()
        logger.debug(f"Creating snapshot for {source or '<unnamed>'}")
        return cls(
            content=content,
            content_relations=content_relations,
            content_types=content_types,
            footnotes=footnotes,
            footnote_relations=footnote_relations,
            charts=tuple(charts),
            max_document_relation_id=max_relationship_id(content_relations),
            max_footnote_id=max_footnote_id(footnotes),
            max_footnote_relation_id=max_relationship_id(footnote_relations),
            source=source,
        )

    @classmethod
    def empty(cls, source: Optional[str] = None) -> "DocumentSnapshot":
        """An empty but valid snapshot, usable as the initial accumulator."""
        return cls.create(empty_document(), empty_content_types(), source=source)

    def replace(self, **changes) -> "DocumentSnapshot":
        return dataclasses.replace(self, **changes)

    def recount(self) -> "DocumentSnapshot":
        """Recompute counters from the parts (used after per-document normalization)."""
        return self.replace(
            max_document_relation_id=max_relationship_id(self.content_relations),
            max_footnote_id=max_footnote_id(self.footnotes),
            max_footnote_relation_id=max_relationship_id(self.footnote_relations),
        )

    # Derived views --------------------------------------------------------

    @property
    def body(self) -> PartTree:
        body = self.content.find(BODY_TAG)
        if body is None:
            raise InvalidArgumentError("Document content has no w:body element", self.source)
        return body

    @property
    def footnote_ids(self) -> List[int]:
        return footnote_ids(self.footnotes)

    @property
    def chart_names(self) -> List[str]:
        return [chart.name for chart in self.charts]

    @property
    def max_chart_number(self) -> int:
        return max_chart_number(self.charts)

    def find_dangling_references(self) -> Dict[str, List[str]]:
        """
        References that do not resolve, grouped by scope.

        Returns:
            ``{"document": [...], "footnotes": [...], "footnote_ids": [...]}``;
            all lists are empty for a consistent snapshot.
        """
        document_ids = relationship_index(self.content_relations)
        footnote_rel_ids = relationship_index(self.footnote_relations)
        defined_notes = set(self.footnote_ids)
        return {
            "document": [r for r in relationship_references(self.content) if r not in document_ids],
            "footnotes": [r for r in relationship_references(self.footnotes) if r not in footnote_rel_ids],
            "footnote_ids": [
                node.get(ID_ATTR)
                for node in self.content.iter(FOOTNOTE_REFERENCE_TAG)
                if footnote_number(node.get(ID_ATTR)) not in defined_notes
            ],
        }

    def summary(self) -> Dict[str, object]:
        return {
            "source": self.source,
            "body_elements": len(self.body.children),
            "document_relations": len(relationship_index(self.content_relations)),
            "footnotes": len(self.footnote_ids),
            "footnote_relations": len(relationship_index(self.footnote_relations)),
            "charts": self.chart_names,
            "max_document_relation_id": self.max_document_relation_id,
            "max_footnote_id": self.max_footnote_id,
            "max_footnote_relation_id": self.max_footnote_relation_id,
        }
