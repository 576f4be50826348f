"""
Composition fold - merges an ordered sequence of document snapshots into one.

A fold step runs a fixed pipeline of named stages over a FoldState (accumulator,
incoming document, running counters). The order matters: every stage takes its
offset from counters the previous stages may already have moved. After the
stages the reconciled incoming document is unioned into the accumulator and a
new snapshot is returned; the accumulator itself is never modified.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Callable, Hashable, Iterable, List, Optional, Sequence, Tuple

from .chart_reconciler import reconcile_charts
from .footnote_reconciler import reconcile_footnotes
from .relationship_reconciler import reconcile_relationships
from ..exceptions import InvalidArgumentError
from ..models.chart import ChartInformation
from ..models.content_types import content_type_key, find_override, override_entry
from ..models.footnotes import ID_ATTR, footnote_number
from ..models.part_tree import PartTree
from ..models.relationships import (
    RELATIONSHIP_TAG,
    Relationship,
    find_relationship,
    format_relationship_id,
    relationship_entries,
    relationship_references,
)
from ..models.snapshot import BODY_TAG, DocumentSnapshot
from ..utils.xml_utils import CT_FOOTNOTES, FOOTNOTES_PART, RT_FOOTNOTES, SINGLE_INSTANCE_TYPES, qn

logger = logging.getLogger(__name__)

SECTION_PROPERTIES_TAG = qn("w:sectPr")

KeyFunction = Callable[[PartTree], Optional[Hashable]]


@dataclass(frozen=True)
class FoldState:
    """Values threaded through the stages of one fold step."""

    accumulator: DocumentSnapshot
    incoming: DocumentSnapshot
    max_footnote_id: int
    max_footnote_relation_id: int
    max_document_relation_id: int
    charts: Tuple[ChartInformation, ...]

    @classmethod
    def start(cls, accumulator: DocumentSnapshot, incoming: DocumentSnapshot) -> "FoldState":
        return cls(
            accumulator=accumulator,
            incoming=incoming,
            max_footnote_id=accumulator.max_footnote_id,
            max_footnote_relation_id=accumulator.max_footnote_relation_id,
            max_document_relation_id=accumulator.max_document_relation_id,
            charts=accumulator.charts,
        )

    def replace(self, **changes) -> "FoldState":
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class FoldStage:
    """A named step of the fold pipeline."""

    name: str
    run: Callable[[FoldState], FoldState]

    def __call__(self, state: FoldState) -> FoldState:
        return self.run(state)


# Stages -----------------------------------------------------------------------

def reconcile_footnotes_stage(state: FoldState) -> FoldState:
    incoming = state.incoming
    result = reconcile_footnotes(incoming.content, incoming.footnotes, state.accumulator.max_footnote_id)
    return state.replace(
        incoming=incoming.replace(content=result.content, footnotes=result.footnotes),
        max_footnote_id=max(state.max_footnote_id, result.high_water_mark),
    )


def reconcile_footnote_relations_stage(state: FoldState) -> FoldState:
    incoming = state.incoming
    result = reconcile_relationships(
        incoming.footnotes,
        incoming.footnote_relations,
        state.accumulator.max_footnote_relation_id,
        scope="footnotes",
    )
    return state.replace(
        incoming=incoming.replace(footnotes=result.tree, footnote_relations=result.relations),
        max_footnote_relation_id=max(state.max_footnote_relation_id, result.high_water_mark),
    )


def reconcile_document_relations_stage(state: FoldState) -> FoldState:
    incoming = state.incoming
    result = reconcile_relationships(
        incoming.content,
        incoming.content_relations,
        state.accumulator.max_document_relation_id,
        scope="document",
    )
    return state.replace(
        incoming=incoming.replace(content=result.tree, content_relations=result.relations),
        max_document_relation_id=max(state.max_document_relation_id, result.high_water_mark),
    )


def reconcile_charts_stage(state: FoldState) -> FoldState:
    incoming = state.incoming
    result = reconcile_charts(
        state.accumulator.charts,
        incoming.charts,
        incoming.content_relations,
        incoming.content_types,
    )
    return state.replace(
        incoming=incoming.replace(
            content_relations=result.content_relations,
            content_types=result.content_types,
            charts=result.added,
        ),
        charts=result.charts,
    )


DEFAULT_PIPELINE: Tuple[FoldStage, ...] = (
    FoldStage("footnotes", reconcile_footnotes_stage),
    FoldStage("footnote_relations", reconcile_footnote_relations_stage),
    FoldStage("document_relations", reconcile_document_relations_stage),
    FoldStage("charts", reconcile_charts_stage),
)


# Union ------------------------------------------------------------------------

def _relationship_key(node: PartTree) -> Optional[Hashable]:
    return node.get("Id")


def _footnote_key(node: PartTree) -> Optional[Hashable]:
    return footnote_number(node.get(ID_ATTR))


def _is_reserved_footnote(key: Hashable) -> bool:
    return isinstance(key, int) and key <= 0


def union_children(
    existing: PartTree,
    incoming: PartTree,
    key: Optional[KeyFunction] = None,
    expected: Optional[Callable[[Hashable], bool]] = None,
) -> PartTree:
    """
    Set union of two tables' entries, keeping the existing order first.

    Entries structurally equal to an existing one are dropped, and so are entries
    whose key (relationship id, footnote id, content-type extension or part name)
    the existing table already declares. Such a drop is logged as a warning
    unless ``expected(key)`` is true.
    """
    merged: List = list(existing.children)
    seen = {child for child in merged if isinstance(child, PartTree)}
    keys = set()
    if key is not None:
        keys = {key(child) for child in seen} - {None}

    for child in incoming.children:
        if not isinstance(child, PartTree) or child in seen:
            continue
        child_key = key(child) if key is not None else None
        if child_key is not None and child_key in keys:
            level = logging.DEBUG if expected is not None and expected(child_key) else logging.WARNING
            logger.log(level, f"Dropping {child.local_name} {child_key!r}: already declared")
            continue
        merged.append(child)
        seen.add(child)
        if child_key is not None:
            keys.add(child_key)

    return existing.with_children(merged).with_namespaces(dict(incoming.namespaces))


def drop_single_instance_relationships(
    existing: PartTree,
    incoming: PartTree,
    content: PartTree,
) -> PartTree:
    """
    Drop incoming package-level relationships (styles, settings, footnotes...)
    whose type the existing table already holds.

    A document relates to such parts at most once and the seed provides them.
    Entries referenced from ``content`` are kept.
    """
    held = {rel.type for rel in relationship_entries(existing)} & SINGLE_INSTANCE_TYPES
    if not held:
        return incoming
    referenced = set(relationship_references(content))

    kept: List = []
    for child in incoming.children:
        if isinstance(child, PartTree) and child.tag == RELATIONSHIP_TAG:
            rel = Relationship.from_tree(child)
            if rel.type in held and rel.id not in referenced:
                logger.debug(f"Dropping {rel.type.rsplit('/', 1)[-1]} relationship {rel.id}: already declared")
                continue
        kept.append(child)
    if len(kept) == len(incoming.children):
        return incoming
    return incoming.with_children(kept)


def concatenate_content(existing: PartTree, incoming: PartTree) -> PartTree:
    """
    Append the incoming body's elements to the existing body.

    The existing body's trailing ``w:sectPr`` stays the last child.
    """
    existing_body = existing.find(BODY_TAG)
    incoming_body = incoming.find(BODY_TAG)
    if existing_body is None or incoming_body is None:
        raise InvalidArgumentError("Both documents need a w:body element")

    children = [child for child in existing_body.children if isinstance(child, PartTree)]
    trailing = []
    if children and children[-1].tag == SECTION_PROPERTIES_TAG:
        trailing.append(children.pop())
    children.extend(child for child in incoming_body.children if isinstance(child, PartTree))
    children.extend(trailing)
    new_body = existing_body.with_children(children)

    root_children = [new_body if child is existing_body else child for child in existing.children]
    return existing.with_children(root_children).with_namespaces(dict(incoming.namespaces))


def ensure_footnotes_relationship(snapshot: DocumentSnapshot) -> DocumentSnapshot:
    """
    Make sure a document holding real footnotes declares its footnotes part.

    Adds the footnotes relationship (next document relationship id) and the
    ``/word/footnotes.xml`` override when they are missing.
    """
    if not any(n > 0 for n in snapshot.footnote_ids):
        return snapshot

    relations = snapshot.content_relations
    counter = snapshot.max_document_relation_id
    if find_relationship(relations, RT_FOOTNOTES) is None:
        counter += 1
        rel = Relationship(format_relationship_id(counter), RT_FOOTNOTES, "footnotes.xml")
        relations = relations.append(rel.to_tree())
        logger.info(f"Added footnotes relationship {rel.id}")

    content_types = snapshot.content_types
    if find_override(content_types, FOOTNOTES_PART) is None:
        content_types = content_types.append(override_entry(FOOTNOTES_PART, CT_FOOTNOTES))

    return snapshot.replace(
        content_relations=relations,
        content_types=content_types,
        max_document_relation_id=counter,
    )


def union_state(state: FoldState) -> DocumentSnapshot:
    """Union the reconciled incoming document into the accumulator."""
    acc = state.accumulator
    incoming = state.incoming
    incoming_relations = drop_single_instance_relationships(
        acc.content_relations, incoming.content_relations, incoming.content
    )
    merged = acc.replace(
        content=concatenate_content(acc.content, incoming.content),
        content_types=union_children(acc.content_types, incoming.content_types, content_type_key),
        content_relations=union_children(acc.content_relations, incoming_relations, _relationship_key),
        footnote_relations=union_children(acc.footnote_relations, incoming.footnote_relations, _relationship_key),
        footnotes=union_children(acc.footnotes, incoming.footnotes, _footnote_key, _is_reserved_footnote),
        charts=state.charts,
        max_document_relation_id=max(acc.max_document_relation_id, state.max_document_relation_id),
        max_footnote_id=max(acc.max_footnote_id, state.max_footnote_id),
        max_footnote_relation_id=max(acc.max_footnote_relation_id, state.max_footnote_relation_id),
    )
    return ensure_footnotes_relationship(merged)


# Fold -------------------------------------------------------------------------

def fold(
    accumulator: DocumentSnapshot,
    incoming: DocumentSnapshot,
    pipeline: Sequence[FoldStage] = DEFAULT_PIPELINE,
) -> DocumentSnapshot:
    """
    Fold one document into the accumulator.

    Args:
        accumulator: Merged result so far
        incoming: Next document, in input order
        pipeline: Ordered stages; DEFAULT_PIPELINE unless extending the fold

    Returns:
        New accumulator snapshot

    Raises:
        InvalidArgumentError: If either snapshot is None
        DanglingReferenceError: If reconciliation leaves a reference unresolved
    """
    if accumulator is None or incoming is None:
        raise InvalidArgumentError("fold requires an accumulator and an incoming snapshot")

    state = FoldState.start(accumulator, incoming)
    for stage in pipeline:
        logger.debug(f"Running fold stage '{stage.name}' for {incoming.source}")
        state = stage(state)

    merged = union_state(state)
    logger.info(
        f"Folded {incoming.source or 'document'}: footnotes<={merged.max_footnote_id}, "
        f"footnote rIds<={merged.max_footnote_relation_id}, rIds<={merged.max_document_relation_id}, "
        f"{len(merged.charts)} charts"
    )
    return merged


def fold_all(
    initial: DocumentSnapshot,
    snapshots: Iterable[DocumentSnapshot],
    pipeline: Sequence[FoldStage] = DEFAULT_PIPELINE,
) -> DocumentSnapshot:
    """Left fold of ``snapshots`` into ``initial``, in order."""
    if initial is None:
        raise InvalidArgumentError("fold_all requires an initial snapshot")
    if snapshots is None:
        raise InvalidArgumentError("fold_all requires a sequence of snapshots")

    result = initial
    for snapshot in snapshots:
        result = fold(result, snapshot, pipeline)
    return result
