"""
DOCX Composer - composes several DOCX documents into one package.

Inputs are folded, in order, into a seed document. Footnote ids, relationship
ids and chart part names are renumbered so that every reference in the result
stays unique and resolvable; identical charts are stored once.
"""

from .composer import Composer, compose_documents
from .exceptions import (
    DanglingReferenceError,
    DocxComposerError,
    InvalidArgumentError,
    MalformedPartError,
    PartNotFoundError,
)
from .export.package_writer import PackageWriter
from .merger.composition import fold, fold_all
from .models.chart import ChartInformation
from .models.part_tree import PartTree
from .models.snapshot import DocumentSnapshot
from .options import ComposeOptions
from .parser.package_reader import PackageReader
from .parser.snapshot_loader import load_snapshot
from .version import __version__

__all__ = [
    "Composer",
    "compose_documents",
    "ComposeOptions",
    "PartTree",
    "DocumentSnapshot",
    "ChartInformation",
    "PackageReader",
    "PackageWriter",
    "load_snapshot",
    "fold",
    "fold_all",
    "DocxComposerError",
    "PartNotFoundError",
    "MalformedPartError",
    "DanglingReferenceError",
    "InvalidArgumentError",
    "__version__",
]
