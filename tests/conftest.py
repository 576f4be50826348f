"""
Pytest configuration for DOCX Composer
"""

import logging
import sys
import tempfile
from pathlib import Path

import pytest

from tests.builders import (
    RT_CHART,
    RT_HYPERLINK,
    chart_reference,
    footnote,
    footnote_reference,
    hyperlink,
    make_snapshot,
    package_parts,
    paragraph,
    write_docx,
)


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid handler leaks between tests."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)  # Only show warnings and errors during tests
    console_handler.setFormatter(logging.Formatter('%(name)s - %(levelname)s - %(message)s'))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def first_snapshot():
    """Document with two footnotes, a hyperlink and one chart."""
    return make_snapshot(
        body=[
            paragraph("Intro", footnote_reference(1)),
            paragraph("More", footnote_reference(2), hyperlink("rId1")),
            paragraph("", chart_reference("rId2")),
        ],
        notes=[footnote(1, "First note"), footnote(2, "Second note")],
        document_rels=[
            ("rId1", RT_HYPERLINK, "https://example.com", "External"),
            ("rId2", RT_CHART, "charts/chart1.xml"),
        ],
        charts=[("charts/chart1.xml", "Sales")],
        source="first.docx",
    )


@pytest.fixture
def second_snapshot():
    """Document with three footnotes, a hyperlink and two charts (one equal to the first document's)."""
    return make_snapshot(
        body=[
            paragraph("Second", footnote_reference(1), footnote_reference(2)),
            paragraph("Third", footnote_reference(3), hyperlink("rId1")),
            paragraph("", chart_reference("rId2")),
            paragraph("", chart_reference("rId3")),
        ],
        notes=[footnote(1, "A"), footnote(2, "B"), footnote(3, "C")],
        document_rels=[
            ("rId1", RT_HYPERLINK, "https://example.org", "External"),
            ("rId2", RT_CHART, "charts/chart1.xml"),
            ("rId3", RT_CHART, "charts/chart2.xml"),
        ],
        charts=[("charts/chart1.xml", "Sales"), ("charts/chart2.xml", "Costs")],
        source="second.docx",
    )


@pytest.fixture
def docx_factory(temp_dir):
    """Write a snapshot to a .docx file: ``docx_factory(snapshot, "name.docx")``."""

    def factory(snapshot, name, extra_parts=None):
        parts = package_parts(snapshot)
        parts.update(extra_parts or {})
        return write_docx(temp_dir / name, parts)

    return factory
