"""
Package writer - serializes a composed snapshot into a DOCX package.

The seed package provides every part the composer does not manage (styles,
settings, theme, headers...). Composer-managed parts are replaced by the
snapshot's versions and charts are written under ``word/``.
"""

from __future__ import annotations

import logging
import posixpath
import zipfile
from pathlib import Path
from typing import Dict, Optional, Union

from ..models.content_types import OVERRIDE_TAG
from ..models.part_tree import PartTree
from ..models.relationships import Relationship, empty_relationships, find_relationship, relationship_entries
from ..models.snapshot import DocumentSnapshot
from ..parser.package_reader import PackageReader
from ..parser.xml_mapper import serialize_part
from ..utils.xml_utils import (
    CONTENT_TYPES_PART,
    DOCUMENT_PART,
    DOCUMENT_RELS_PART,
    FOOTNOTES_PART,
    FOOTNOTES_RELS_PART,
    ROOT_RELS_PART,
    RT_FOOTNOTES,
    RT_OFFICE_DOCUMENT,
    WORD_PREFIX,
)

logger = logging.getLogger(__name__)


class PackageWriter:
    """
    Writes DocumentSnapshot values into DOCX packages.
    """

    def __init__(self, base_package: Optional[PackageReader] = None):
        """
        Initialize package writer.

        Args:
            base_package: Seed package whose remaining parts are copied into the output
        """
        self.base_package = base_package

    def to_parts(self, snapshot: DocumentSnapshot) -> Dict[str, bytes]:
        """
        Build the full part map (part name -> bytes) for ``snapshot``.
        """
        parts: Dict[str, bytes] = self.base_package.parts() if self.base_package else {}

        if ROOT_RELS_PART not in parts:
            root_rels = empty_relationships().append(
                Relationship("rId1", RT_OFFICE_DOCUMENT, DOCUMENT_PART).to_tree()
            )
            parts[ROOT_RELS_PART] = serialize_part(root_rels)

        parts[DOCUMENT_PART] = serialize_part(snapshot.content)
        parts[DOCUMENT_RELS_PART] = serialize_part(snapshot.content_relations)

        if (
            snapshot.footnote_ids
            or FOOTNOTES_PART in parts
            or find_relationship(snapshot.content_relations, RT_FOOTNOTES) is not None
        ):
            parts[FOOTNOTES_PART] = serialize_part(snapshot.footnotes)
        if snapshot.footnote_relations.elements() or FOOTNOTES_RELS_PART in parts:
            parts[FOOTNOTES_RELS_PART] = serialize_part(snapshot.footnote_relations)

        for chart in snapshot.charts:
            parts[chart.part_name] = serialize_part(chart.chart)

        self._warn_missing_targets(snapshot, parts)

        content_types = self._drop_missing_overrides(snapshot.content_types, parts)
        parts[CONTENT_TYPES_PART] = serialize_part(content_types)
        return parts

    def save(self, snapshot: DocumentSnapshot, output_path: Union[str, Path]) -> Path:
        """
        Write ``snapshot`` to ``output_path`` as a DOCX package.

        Returns:
            Path of the written package
        """
        output_path = Path(output_path)
        parts = self.to_parts(snapshot)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with zipfile.ZipFile(output_path, "w", zipfile.ZIP_DEFLATED) as zip_file:
            # [Content_Types].xml goes first
            zip_file.writestr(CONTENT_TYPES_PART, parts.pop(CONTENT_TYPES_PART))
            for name in sorted(parts):
                zip_file.writestr(name, parts[name])

        logger.info(f"Saved composed package: {output_path}")
        return output_path

    @staticmethod
    def _warn_missing_targets(snapshot: DocumentSnapshot, parts: Dict[str, bytes]) -> None:
        """Media and other sub-parts of inputs are not copied; report targets the package lacks."""
        for relations in (snapshot.content_relations, snapshot.footnote_relations):
            for rel in relationship_entries(relations):
                if rel.is_external or not rel.target:
                    continue
                if rel.target.startswith("/"):
                    part_name = rel.target.lstrip("/")
                else:
                    part_name = posixpath.normpath(WORD_PREFIX + rel.target)
                if part_name not in parts:
                    logger.warning(f"Relationship {rel.id} points at missing part /{part_name}")

    @staticmethod
    def _drop_missing_overrides(content_types: PartTree, parts: Dict[str, bytes]) -> PartTree:
        """Overrides must name parts that exist in the package."""
        kept = []
        for child in content_types.children:
            if isinstance(child, PartTree) and child.tag == OVERRIDE_TAG:
                part_name = (child.get("PartName") or "").lstrip("/")
                if part_name not in parts:
                    logger.debug(f"Dropping content-type override for missing part /{part_name}")
                    continue
            kept.append(child)
        return content_types.with_children(kept)
