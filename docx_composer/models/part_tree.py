"""
Immutable structural tree for one XML part.

A PartTree mirrors an XML element: a Clark-notation tag, an attribute mapping and
ordered children which are either sub-trees or text. Trees compare and hash by
structure, so they can be used as set members and deduplicated across documents.
Nothing is mutated after construction; every transform returns a new tree and
reuses unchanged sub-trees.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from ..exceptions import InvalidArgumentError
from ..utils.xml_utils import local_name, qn

Child = Union["PartTree", str]
AttributeRewriter = Callable[["PartTree", str, str], str]


def _freeze_pairs(pairs) -> Tuple[Tuple, ...]:
    if pairs is None:
        return ()
    if isinstance(pairs, Mapping):
        pairs = pairs.items()
    # Later duplicates win, first position is kept
    ordered: Dict = {}
    for key, value in pairs:
        ordered[key] = value
    return tuple(ordered.items())


def _freeze_children(children) -> Tuple[Child, ...]:
    frozen: List[Child] = []
    for child in children or ():
        if isinstance(child, PartTree):
            frozen.append(child)
        elif isinstance(child, str):
            if not child:
                continue
            if frozen and isinstance(frozen[-1], str):
                frozen[-1] = frozen[-1] + child
            else:
                frozen.append(child)
        else:
            raise InvalidArgumentError(
                "PartTree children must be PartTree or str",
                type(child).__name__,
            )
    return tuple(frozen)


@dataclass(frozen=True, eq=False)
class PartTree:
    """
    Immutable XML-like tree with structural equality.

    Attributes:
        tag: Element name in Clark notation (``{namespace}local``)
        attributes: Ordered (qualified name, value) pairs, compared as a mapping
        children: Ordered sub-trees and text nodes
        namespaces: Prefix declarations made on this element; used for
            serialization only and ignored by equality
    """

    tag: str
    attributes: Tuple[Tuple[str, str], ...] = ()
    children: Tuple[Child, ...] = ()
    namespaces: Tuple[Tuple[Optional[str], str], ...] = ()
    _hash: Optional[int] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.tag or not isinstance(self.tag, str):
            raise InvalidArgumentError("PartTree tag must be a non-empty string")
        attributes = tuple((str(k), str(v)) for k, v in _freeze_pairs(self.attributes))
        object.__setattr__(self, "attributes", attributes)
        object.__setattr__(self, "children", _freeze_children(self.children))
        object.__setattr__(self, "namespaces", _freeze_pairs(self.namespaces))

    @classmethod
    def make(
        cls,
        name: str,
        attributes: Optional[Mapping[str, str]] = None,
        *children: Child,
        namespaces: Optional[Mapping[Optional[str], str]] = None,
    ) -> "PartTree":
        """
        Build a tree from prefixed names, e.g. ``PartTree.make("w:p", {"w:rsidR": "00AB"})``.

        Tag and attribute names go through :func:`qn`; values are used as given.
        """
        attrs = tuple((qn(key), value) for key, value in (attributes or {}).items())
        return cls(qn(name), attrs, children, tuple((namespaces or {}).items()))

    # Equality -------------------------------------------------------------

    def __hash__(self) -> int:
        cached = self._hash
        if cached is None:
            cached = hash((self.tag, frozenset(self.attributes), self.children))
            object.__setattr__(self, "_hash", cached)
        return cached

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, PartTree):
            return NotImplemented
        return (
            self.tag == other.tag
            and hash(self) == hash(other)
            and dict(self.attributes) == dict(other.attributes)
            and self.children == other.children
        )

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __repr__(self) -> str:
        return f"PartTree({local_name(self.tag)!r}, attributes={len(self.attributes)}, children={len(self.children)})"

    # Read access ----------------------------------------------------------

    @property
    def local_name(self) -> str:
        return local_name(self.tag)

    @property
    def attrib(self) -> Dict[str, str]:
        return dict(self.attributes)

    @property
    def text(self) -> str:
        """Concatenated direct text children."""
        return "".join(child for child in self.children if isinstance(child, str))

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        for key, value in self.attributes:
            if key == name:
                return value
        return default

    def elements(self, tag: Optional[str] = None) -> List["PartTree"]:
        """Direct child elements, optionally filtered by Clark-notation tag."""
        return [
            child
            for child in self.children
            if isinstance(child, PartTree) and (tag is None or child.tag == tag)
        ]

    def find(self, tag: str) -> Optional["PartTree"]:
        for child in self.children:
            if isinstance(child, PartTree) and child.tag == tag:
                return child
        return None

    def iter(self, tag: Optional[str] = None) -> Iterator["PartTree"]:
        """Pre-order walk over this tree and all descendants."""
        if tag is None or self.tag == tag:
            yield self
        for child in self.children:
            if isinstance(child, PartTree):
                yield from child.iter(tag)

    def itertext(self) -> Iterator[str]:
        for child in self.children:
            if isinstance(child, str):
                yield child
            else:
                yield from child.itertext()

    # Transforms -----------------------------------------------------------

    def set(self, name: str, value: str) -> "PartTree":
        attrs = dict(self.attributes)
        attrs[name] = value
        return self._replace(attributes=tuple(attrs.items()))

    def without_attributes(self, predicate: Callable[[str], bool]) -> "PartTree":
        kept = tuple((k, v) for k, v in self.attributes if not predicate(k))
        if len(kept) == len(self.attributes):
            return self
        return self._replace(attributes=kept)

    def with_children(self, children) -> "PartTree":
        return self._replace(children=tuple(children))

    def append(self, *children: Child) -> "PartTree":
        return self._replace(children=self.children + tuple(children))

    def with_namespaces(self, namespaces: Mapping[Optional[str], str]) -> "PartTree":
        """Add prefix declarations that are not bound yet on this element."""
        declared = dict(self.namespaces)
        for prefix, uri in namespaces.items():
            declared.setdefault(prefix, uri)
        return self._replace(namespaces=tuple(declared.items()))

    def transform(self, fn: Callable[["PartTree"], "PartTree"]) -> "PartTree":
        """
        Rebuild the tree bottom-up, applying ``fn`` to every element.

        Sub-trees that ``fn`` leaves unchanged are shared with the original.
        """
        changed = False
        children: List[Child] = []
        for child in self.children:
            if isinstance(child, PartTree):
                new_child = child.transform(fn)
                changed = changed or new_child is not child
                children.append(new_child)
            else:
                children.append(child)
        node = self._replace(children=tuple(children)) if changed else self
        return fn(node)

    def rewrite_attributes(self, rewriter: AttributeRewriter) -> "PartTree":
        """Apply ``rewriter(node, name, value) -> new value`` to every attribute in the tree."""

        def visit(node: PartTree) -> PartTree:
            new_attrs = tuple((name, rewriter(node, name, value)) for name, value in node.attributes)
            if new_attrs == node.attributes:
                return node
            return node._replace(attributes=new_attrs)

        return self.transform(visit)

    def remove(self, predicate: Callable[["PartTree"], bool]) -> "PartTree":
        """Drop every descendant element matching ``predicate`` (the root itself is kept)."""

        def visit(node: PartTree) -> PartTree:
            kept = tuple(
                child for child in node.children
                if not (isinstance(child, PartTree) and predicate(child))
            )
            if len(kept) == len(node.children):
                return node
            return node._replace(children=kept)

        return self.transform(visit)

    def clone(self) -> "PartTree":
        """Deep, independent copy."""
        return PartTree(
            self.tag,
            self.attributes,
            tuple(child.clone() if isinstance(child, PartTree) else child for child in self.children),
            self.namespaces,
        )

    def _replace(self, **changes) -> "PartTree":
        values = {
            "tag": self.tag,
            "attributes": self.attributes,
            "children": self.children,
            "namespaces": self.namespaces,
        }
        values.update(changes)
        return PartTree(**values)
