"""
Tests for per-document normalization.
"""

from docx_composer.merger.normalize import (
    drop_section_properties,
    normalize_snapshot,
    strip_paragraph_attributes,
    strip_revision_ids,
)
from docx_composer.models.part_tree import PartTree
from docx_composer.models.relationships import relationship_entries
from docx_composer.options import ComposeOptions
from docx_composer.utils.xml_utils import qn

from tests.builders import (
    RT_CHART,
    RT_HYPERLINK,
    RT_STYLES,
    document,
    footnote,
    footnotes,
    hyperlink,
    make_snapshot,
    paragraph,
    section_properties,
)


def _has_rsid(tree):
    return any("rsid" in name for node in tree.iter() for name, _ in node.attributes)


class TestNormalizeHelpers:
    def test_strip_revision_ids(self):
        tree = document(paragraph("x", attributes={"w:rsidR": "00AA", "w:rsidRDefault": "00BB"}))
        tree = tree.append(PartTree.make("w:sectPr", {"w:rsidSect": "00CC"}))

        result = strip_revision_ids(tree)

        assert not _has_rsid(result)
        assert _has_rsid(tree)

    def test_strip_revision_ids_keeps_other_attributes(self):
        tree = PartTree.make("w:p", {"w:rsidR": "1", "w:val": "keep"})

        assert strip_revision_ids(tree).attrib == {qn("w:val"): "keep"}

    def test_strip_paragraph_attributes(self):
        notes = footnotes(
            PartTree.make("w:footnote", {"w:id": "1"}, paragraph("n", attributes={"w:textId": "1A2B"})),
            with_separators=False,
        )

        result = strip_paragraph_attributes(notes)

        assert all(node.attributes == () for node in result.iter(qn("w:p")))
        assert next(result.iter(qn("w:footnote"))).get(qn("w:id")) == "1"

    def test_drop_section_properties(self):
        tree = document(paragraph("x"), section_properties())

        result = drop_section_properties(tree)

        assert list(result.iter(qn("w:sectPr"))) == []
        assert len(list(result.iter(qn("w:p")))) == 1


class TestNormalizeSnapshot:
    def test_prunes_unreferenced_relationships_and_charts(self):
        snapshot = make_snapshot(
            body=[paragraph("x", hyperlink("rId2"))],
            document_rels=[
                ("rId1", RT_STYLES, "styles.xml"),
                ("rId2", RT_HYPERLINK, "https://a", "External"),
                ("rId3", RT_CHART, "charts/chart1.xml"),
            ],
            charts=[("charts/chart1.xml", "Unused")],
        )

        result = normalize_snapshot(snapshot)

        assert [rel.id for rel in relationship_entries(result.content_relations)] == ["rId2"]
        assert result.charts == ()
        assert result.max_document_relation_id == 2

    def test_strips_noise_and_section_properties(self):
        snapshot = make_snapshot(
            body=[paragraph("x", attributes={"w:rsidR": "00AA"}), section_properties()],
            notes=[footnote(1, "n")],
        )

        result = normalize_snapshot(snapshot)

        assert not _has_rsid(result.content)
        assert list(result.content.iter(qn("w:sectPr"))) == []
        assert result.max_footnote_id == 1

    def test_options_disable_steps(self):
        snapshot = make_snapshot(
            body=[paragraph("x", attributes={"w:rsidR": "00AA"}), section_properties()],
            document_rels=[("rId1", RT_STYLES, "styles.xml")],
        )
        options = ComposeOptions(strip_revision_ids=False, drop_section_properties=False, prune_relationships=False)

        result = normalize_snapshot(snapshot, options)

        assert result.content == snapshot.content
        assert result.content_relations == snapshot.content_relations

    def test_source_is_kept(self, first_snapshot):
        assert normalize_snapshot(first_snapshot).source == "first.docx"

    def test_consistent_document_is_unchanged_by_pruning(self, first_snapshot):
        result = normalize_snapshot(first_snapshot)

        assert result.content_relations == first_snapshot.content_relations
        assert result.charts == first_snapshot.charts
