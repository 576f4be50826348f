"""
Chart model for DOCX packages.

A chart is a sub-part (``word/charts/chart<n>.xml``) reached through a document
relationship. Charts are deduplicated by markup, never by name.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from .part_tree import PartTree
from ..utils.xml_utils import CHART_TARGET_PREFIX, WORD_PREFIX

_CHART_NAME = re.compile(r"^charts/chart(\d+)\.xml$")


def chart_name(number: int) -> str:
    return f"{CHART_TARGET_PREFIX}chart{number}.xml"


def chart_number(name: str) -> Optional[int]:
    match = _CHART_NAME.match(name)
    return int(match.group(1)) if match else None


def chart_target_name(target: str) -> str:
    """Relationship target relative to ``word/`` (``/word/charts/chart1.xml`` -> ``charts/chart1.xml``)."""
    if target.startswith("/" + WORD_PREFIX):
        return target[len(WORD_PREFIX) + 1:]
    return target


def is_chart_target(target: Optional[str]) -> bool:
    return bool(target) and chart_target_name(target).startswith(CHART_TARGET_PREFIX)


@dataclass(frozen=True)
class ChartInformation:
    """
    A named chart part.

    Attributes:
        name: Relationship target relative to ``word/`` (``charts/chart1.xml``)
        chart: Chart markup
    """

    name: str
    chart: PartTree

    @property
    def part_name(self) -> str:
        """Package part name (``word/charts/chart1.xml``)."""
        return WORD_PREFIX + self.name

    @property
    def number(self) -> Optional[int]:
        return chart_number(self.name)

    def is_duplicate_of(self, other: "ChartInformation") -> bool:
        return self.chart == other.chart

    def renamed(self, name: str) -> "ChartInformation":
        return ChartInformation(name, self.chart)


def max_chart_number(charts: Iterable[ChartInformation]) -> int:
    return max((c.number for c in charts if c.number is not None), default=0)
