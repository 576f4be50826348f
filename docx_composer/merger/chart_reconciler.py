"""
Chart reconciliation - gives incoming charts collision-free names and drops duplicates.

Charts are compared by markup. An incoming chart equal to one the accumulator
already holds reuses that chart's name; any other chart gets the next free
``charts/chart<n>.xml`` name from a counter independent of relationship and
footnote ids.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Set, Tuple

from .relationship_reconciler import retarget_relationships
from ..models.chart import ChartInformation, chart_name, max_chart_number
from ..models.content_types import OVERRIDE_TAG, override_entry
from ..models.part_tree import PartTree
from ..utils.xml_utils import CT_CHART, WORD_PREFIX

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChartReconciliation:
    """
    Result of reconciling one document's charts against the accumulator.

    Attributes:
        charts: Accumulator charts followed by the newly added ones
        added: Newly added charts only
        renames: Original incoming name -> final name (for every incoming chart)
        content_relations: Incoming relations with chart targets rewritten
        content_types: Incoming declarations with stale chart overrides replaced
    """

    charts: Tuple[ChartInformation, ...]
    added: Tuple[ChartInformation, ...]
    renames: Dict[str, str]
    content_relations: PartTree
    content_types: PartTree


def _next_free_name(counter: int, taken: Set[str]) -> Tuple[int, str]:
    while True:
        counter += 1
        name = chart_name(counter)
        if name not in taken:
            return counter, name


def reconcile_charts(
    existing: Iterable[ChartInformation],
    incoming: Iterable[ChartInformation],
    content_relations: PartTree,
    content_types: PartTree,
) -> ChartReconciliation:
    """
    Merge incoming charts into the existing chart set.

    Args:
        existing: Charts already held by the accumulator
        incoming: Charts of the document being folded in (relations already renumbered)
        content_relations: Incoming document relations
        content_types: Incoming content-type declarations

    Returns:
        ChartReconciliation
    """
    existing = tuple(existing)
    known: List[ChartInformation] = list(existing)
    taken: Set[str] = {chart.name for chart in existing}
    counter = max_chart_number(existing)
    renames: Dict[str, str] = {}
    added: List[ChartInformation] = []

    for chart in incoming:
        duplicate = next((c for c in known if c.is_duplicate_of(chart)), None)
        if duplicate is not None:
            renames[chart.name] = duplicate.name
            logger.debug(f"Chart {chart.name} duplicates {duplicate.name}, reusing it")
            continue
        counter, name = _next_free_name(counter, taken)
        taken.add(name)
        renamed = chart.renamed(name)
        known.append(renamed)
        added.append(renamed)
        renames[chart.name] = name
        logger.debug(f"Chart {chart.name} added as {name}")

    new_relations = retarget_relationships(content_relations, renames)
    new_types = _rewrite_chart_overrides(content_types, renames.keys(), added)

    return ChartReconciliation(
        charts=existing + tuple(added),
        added=tuple(added),
        renames=renames,
        content_relations=new_relations,
        content_types=new_types,
    )


def _rewrite_chart_overrides(
    content_types: PartTree,
    original_names: Iterable[str],
    added: Iterable[ChartInformation],
) -> PartTree:
    """Drop overrides for original chart names and declare the newly added charts."""
    stale = {"/" + WORD_PREFIX + name for name in original_names}
    kept = [
        child for child in content_types.children
        if not (isinstance(child, PartTree) and child.tag == OVERRIDE_TAG and child.get("PartName") in stale)
    ]
    kept.extend(override_entry(chart.part_name, CT_CHART) for chart in added)
    return content_types.with_children(kept)
