"""
Composition options.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .exceptions import InvalidArgumentError


@dataclass(frozen=True)
class ComposeOptions:
    """
    Options controlling how input documents are prepared and folded.

    Attributes:
        strip_revision_ids: Remove ``w:rsid*`` attributes from content and footnotes,
            and the attributes of footnote paragraphs
        drop_section_properties: Drop body-level ``w:sectPr`` of incoming documents
        prune_relationships: Drop relationships that nothing in the document references
        max_workers: Threads used to load and normalize inputs (1 = sequential,
            None = executor default)
    """

    strip_revision_ids: bool = True
    drop_section_properties: bool = True
    prune_relationships: bool = True
    max_workers: Optional[int] = None

    def validate(self) -> "ComposeOptions":
        if self.max_workers is not None and self.max_workers < 1:
            raise InvalidArgumentError("max_workers must be at least 1", str(self.max_workers))
        return self
