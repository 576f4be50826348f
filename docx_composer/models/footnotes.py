"""Footnote definitions (``word/footnotes.xml``) and references to them."""

from __future__ import annotations

from typing import Iterator, List, Optional

from .part_tree import PartTree
from ..utils.xml_utils import WORD_NS, qn

FOOTNOTES_TAG = qn("w:footnotes")
FOOTNOTE_TAG = qn("w:footnote")
FOOTNOTE_REFERENCE_TAG = qn("w:footnoteReference")
ID_ATTR = qn("w:id")


def footnote_number(value: Optional[str]) -> Optional[int]:
    """Parse a footnote id; separator ids (-1, 0) parse too, garbage returns None."""
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def empty_footnotes() -> PartTree:
    return PartTree(FOOTNOTES_TAG, namespaces=(("w", WORD_NS),))


def footnote_ids(footnotes: PartTree) -> List[int]:
    """Ids of all footnote definitions, in document order (unparseable ids skipped)."""
    ids = []
    for note in footnotes.elements(FOOTNOTE_TAG):
        number = footnote_number(note.get(ID_ATTR))
        if number is not None:
            ids.append(number)
    return ids


def max_footnote_id(footnotes: PartTree) -> int:
    """High-water mark: largest real (positive) footnote id, 0 when there is none."""
    return max((n for n in footnote_ids(footnotes) if n > 0), default=0)


def footnote_references(content: PartTree) -> Iterator[int]:
    for node in content.iter(FOOTNOTE_REFERENCE_TAG):
        number = footnote_number(node.get(ID_ATTR))
        if number is not None:
            yield number


def footnote_text(note: PartTree) -> str:
    return "".join(note.itertext())
