"""
Composition engine - identifier reconciliation and the document fold.
"""

from .composition import DEFAULT_PIPELINE, FoldStage, FoldState, fold, fold_all
from .footnote_reconciler import reconcile_footnotes
from .relationship_reconciler import reconcile_relationships
from .chart_reconciler import reconcile_charts
from .normalize import normalize_snapshot

__all__ = [
    "DEFAULT_PIPELINE",
    "FoldStage",
    "FoldState",
    "fold",
    "fold_all",
    "reconcile_footnotes",
    "reconcile_relationships",
    "reconcile_charts",
    "normalize_snapshot",
]
