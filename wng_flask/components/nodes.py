"""Document component tree.

A view describes a page as a tree of components rooted at `Document`; the
finalizer later turns it into device-specific markup. Every node carries a
`kind` tag so callers dispatch on `NodeKind` rather than on Python types.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional


class NodeKind(str, Enum):
    DOCUMENT = "document"
    HEAD = "head"
    BODY = "body"
    TITLE = "title"
    META = "meta"
    STYLE_CONTAINER = "style_container"
    STYLE_SHEET = "style_sheet"
    TEXT = "text"
    PARAGRAPH = "paragraph"
    BLOCK = "block"
    LINK = "link"
    IMAGE = "image"
    BREAK = "break"


HEAD_KINDS = frozenset({
    NodeKind.TITLE,
    NodeKind.META,
    NodeKind.STYLE_CONTAINER,
    NodeKind.STYLE_SHEET,
})

LEAF_KINDS = frozenset({
    NodeKind.TITLE,
    NodeKind.META,
    NodeKind.STYLE_CONTAINER,
    NodeKind.STYLE_SHEET,
    NodeKind.TEXT,
    NodeKind.IMAGE,
    NodeKind.BREAK,
})


class Component:
    kind: NodeKind = NodeKind.BLOCK

    def __init__(
        self,
        *,
        id: Optional[str] = None,
        css_class: Optional[str] = None,
        style: Optional[Dict[str, str]] = None,
    ):
        self.id = id
        self.css_class = css_class
        self.style: Dict[str, str] = dict(style or {})
        self.children: List[Component] = []

    def add(self, child: "Component") -> "Component":
        self.children.append(child)
        return child

    def classes(self) -> List[str]:
        return (self.css_class or "").split()

    def add_class(self, name: str) -> None:
        current = self.classes()
        if name not in current:
            current.append(name)
        self.css_class = " ".join(current)

    def __repr__(self) -> str:
        label = f" id={self.id!r}" if self.id else ""
        return f"<{type(self).__name__}{label} children={len(self.children)}>"


class Head(Component):
    kind = NodeKind.HEAD

    def first_of_kind(self, kind: NodeKind) -> Optional[Component]:
        """First direct child of `kind` in declaration order."""
        for child in self.children:
            if child.kind == kind:
                return child
        return None

    def style_container(self) -> Optional["StyleContainer"]:
        return self.first_of_kind(NodeKind.STYLE_CONTAINER)  # type: ignore[return-value]


class Body(Component):
    kind = NodeKind.BODY


class Document(Component):
    kind = NodeKind.DOCUMENT

    def __init__(self, title: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.children = [Head(), Body()]
        if title is not None:
            self.add_to_head(Title(title))

    @property
    def head(self) -> Head:
        return self.children[0]  # type: ignore[return-value]

    @property
    def body(self) -> Body:
        return self.children[1]  # type: ignore[return-value]

    def add_to_head(self, node: Component) -> Component:
        return self.head.add(node)

    def add_to_body(self, node: Component) -> Component:
        return self.body.add(node)


class Title(Component):
    kind = NodeKind.TITLE

    def __init__(self, text: str, **kwargs):
        super().__init__(**kwargs)
        self.text = text


class Meta(Component):
    kind = NodeKind.META

    def __init__(self, name: str, content: str, **kwargs):
        super().__init__(**kwargs)
        self.name = name
        self.content = content


class StyleSheet(Component):
    kind = NodeKind.STYLE_SHEET

    def __init__(self, href: str, **kwargs):
        super().__init__(**kwargs)
        self.href = href


@dataclass
class StyleRule:
    selector: str
    properties: Dict[str, str] = field(default_factory=dict)

    def to_css(self) -> str:
        decls = "; ".join(f"{name}: {value}" for name, value in self.properties.items())
        return f"{self.selector} {{ {decls} }}"


class StyleContainer(Component):
    kind = NodeKind.STYLE_CONTAINER

    def __init__(self, rules: Optional[List[StyleRule]] = None, **kwargs):
        super().__init__(**kwargs)
        self.rules: List[StyleRule] = []
        for rule in rules or []:
            self.add_rule(rule)

    def rule_for(self, selector: str) -> Optional[StyleRule]:
        for rule in self.rules:
            if rule.selector == selector:
                return rule
        return None

    def add_rule(self, rule: StyleRule) -> StyleRule:
        existing = self.rule_for(rule.selector)
        if existing is None:
            self.rules.append(rule)
            return rule
        existing.properties.update(rule.properties)
        return existing

    def is_empty(self) -> bool:
        return not self.rules


class Text(Component):
    kind = NodeKind.TEXT

    def __init__(self, text: str, **kwargs):
        super().__init__(**kwargs)
        self.text = text


class Paragraph(Component):
    kind = NodeKind.PARAGRAPH


class Block(Component):
    kind = NodeKind.BLOCK


class Link(Component):
    kind = NodeKind.LINK

    def __init__(self, href: str, text: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.href = href
        if text:
            self.add(Text(text))


class Image(Component):
    kind = NodeKind.IMAGE

    def __init__(
        self,
        src: str,
        alt: Optional[str] = "",
        width: Optional[int] = None,
        height: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.src = src
        self.alt = alt
        self.width = width
        self.height = height


class Break(Component):
    kind = NodeKind.BREAK


Visit = Callable[[Component, Optional[Component]], None]


def walk(node: Component, visit: Visit, parent: Optional[Component] = None) -> None:
    """Depth-first pre-order traversal calling ``visit(node, parent)``.

    Children are snapshotted before descending, so `visit` may rewrite the
    children list of the node it is given.
    """
    visit(node, parent)
    for child in list(node.children):
        walk(child, visit, node)


def iter_nodes(node: Component) -> Iterator[Component]:
    yield node
    for child in list(node.children):
        yield from iter_nodes(child)


@dataclass(frozen=True)
class RenderedDocument:
    content_type: str
    markup: str


__all__ = [
    "NodeKind",
    "HEAD_KINDS",
    "LEAF_KINDS",
    "Component",
    "Document",
    "Head",
    "Body",
    "Title",
    "Meta",
    "StyleSheet",
    "StyleRule",
    "StyleContainer",
    "Text",
    "Paragraph",
    "Block",
    "Link",
    "Image",
    "Break",
    "walk",
    "iter_nodes",
    "RenderedDocument",
]
