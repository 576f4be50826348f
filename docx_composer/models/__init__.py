"""Immutable value models for DOCX composition."""

from .part_tree import PartTree
from .relationships import Relationship
from .chart import ChartInformation
from .snapshot import DocumentSnapshot

__all__ = [
    "PartTree",
    "Relationship",
    "ChartInformation",
    "DocumentSnapshot",
]
