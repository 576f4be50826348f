"""Parsers turning DOCX packages into composer snapshots."""

from .package_reader import PackageReader
from .snapshot_loader import load_snapshot
from .xml_mapper import parse_part, serialize_part

__all__ = ["PackageReader", "load_snapshot", "parse_part", "serialize_part"]
