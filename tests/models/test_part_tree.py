"""
Tests for PartTree.
"""

import pytest

from docx_composer.exceptions import InvalidArgumentError
from docx_composer.models.part_tree import PartTree
from docx_composer.utils.xml_utils import WORD_NS, qn


class TestPartTreeConstruction:
    """Construction and read access."""

    def test_make_resolves_prefixes(self):
        """Tag and attribute names are stored in Clark notation."""
        node = PartTree.make("w:p", {"w:rsidR": "00AB"}, "text")

        assert node.tag == f"{{{WORD_NS}}}p"
        assert node.get(qn("w:rsidR")) == "00AB"
        assert node.local_name == "p"
        assert node.text == "text"

    def test_adjacent_text_is_merged(self):
        """Adjacent text children collapse into one."""
        node = PartTree("t", children=("a", "", "b", PartTree("x"), "c"))

        assert node.children[0] == "ab"
        assert node.children[-1] == "c"
        assert len(node.children) == 3

    def test_invalid_child_raises(self):
        """Children must be trees or strings."""
        with pytest.raises(InvalidArgumentError):
            PartTree("t", children=(42,))

    def test_empty_tag_raises(self):
        with pytest.raises(InvalidArgumentError):
            PartTree("")

    def test_find_and_iter(self):
        """find() looks at direct children, iter() walks the whole tree."""
        tree = PartTree.make("w:body", None, PartTree.make("w:p", None, PartTree.make("w:r")), PartTree.make("w:p"))

        assert tree.find(qn("w:p")) is tree.children[0]
        assert tree.find(qn("w:r")) is None
        assert len(list(tree.iter(qn("w:r")))) == 1
        assert len(tree.elements(qn("w:p"))) == 2

    def test_itertext(self):
        tree = PartTree("a", children=("x", PartTree("b", children=("y",)), "z"))

        assert "".join(tree.itertext()) == "xyz"


class TestPartTreeEquality:
    """Structural equality and hashing."""

    def test_equal_structure(self):
        """Independently built equal trees are equal and hash alike."""
        a = PartTree.make("w:p", {"w:a": "1"}, PartTree.make("w:r", None, "t"))
        b = PartTree.make("w:p", {"w:a": "1"}, PartTree.make("w:r", None, "t"))

        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_attribute_order_is_ignored(self):
        a = PartTree("e", (("x", "1"), ("y", "2")))
        b = PartTree("e", (("y", "2"), ("x", "1")))

        assert a == b
        assert hash(a) == hash(b)

    def test_namespace_declarations_are_ignored(self):
        a = PartTree("e", namespaces=(("w", WORD_NS),))
        b = PartTree("e")

        assert a == b

    def test_child_order_matters(self):
        a = PartTree("e", children=(PartTree("x"), PartTree("y")))
        b = PartTree("e", children=(PartTree("y"), PartTree("x")))

        assert a != b

    def test_different_attribute_value(self):
        assert PartTree("e", (("x", "1"),)) != PartTree("e", (("x", "2"),))

    def test_not_equal_to_other_types(self):
        assert PartTree("e") != "e"


class TestPartTreeTransforms:
    """Transforms return new trees and leave the original untouched."""

    def test_set_returns_new_tree(self):
        original = PartTree("e", (("x", "1"),))
        changed = original.set("x", "2")

        assert original.get("x") == "1"
        assert changed.get("x") == "2"

    def test_without_attributes(self):
        node = PartTree.make("w:p", {"w:rsidR": "1", "w:rsidP": "2", "w:val": "3"})
        stripped = node.without_attributes(lambda name: "rsid" in name)

        assert stripped.attrib == {qn("w:val"): "3"}
        assert node.without_attributes(lambda name: False) is node

    def test_transform_shares_unchanged_subtrees(self):
        """Sub-trees the function does not touch are reused."""
        untouched = PartTree.make("w:tbl")
        tree = PartTree.make("w:body", None, untouched, PartTree.make("w:p", {"w:rsidR": "1"}))

        result = tree.transform(lambda node: node.without_attributes(lambda name: "rsid" in name))

        assert result.children[0] is untouched
        assert result.children[1].attributes == ()
        assert tree.children[1].get(qn("w:rsidR")) == "1"

    def test_rewrite_attributes(self):
        tree = PartTree("a", (("id", "1"),), (PartTree("b", (("id", "2"),)),))
        result = tree.rewrite_attributes(lambda node, name, value: str(int(value) * 10))

        assert result.get("id") == "10"
        assert result.children[0].get("id") == "20"

    def test_remove(self):
        tree = PartTree("a", children=(PartTree("b"), PartTree("c", children=(PartTree("b"),))))
        result = tree.remove(lambda node: node.tag == "b")

        assert list(result.iter("b")) == []
        assert len(list(tree.iter("b"))) == 2

    def test_with_namespaces_keeps_existing_bindings(self):
        node = PartTree("e", namespaces=(("w", "urn:first"),))
        result = node.with_namespaces({"w": "urn:other", "r": "urn:r"})

        assert dict(result.namespaces) == {"w": "urn:first", "r": "urn:r"}

    def test_clone_is_equal_but_distinct(self):
        tree = PartTree("a", children=(PartTree("b"),))
        copy = tree.clone()

        assert copy == tree
        assert copy is not tree
        assert copy.children[0] is not tree.children[0]
