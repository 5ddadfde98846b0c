"""Document → markup rendering.

The page shell (doctype, head, card) comes from a per-group Jinja2 template;
components are rendered by small per-family node renderers. All text and
attribute values go through MarkupSafe escaping; WML output additionally
doubles ``$``, which WML reserves for variable references.
"""
from __future__ import annotations

from typing import Callable, Dict, List, Optional, Protocol, Tuple, Union

from jinja2 import DictLoader, Environment
from markupsafe import Markup, escape

from wng_flask.components import (
    Component,
    Document,
    NodeKind,
    RenderedDocument,
)
from wng_flask.device.model import Device, DeviceView
from wng_flask.errors import RenderingError
from wng_flask.services.rendering.groups import (
    DefaultRendererGroupResolver,
    RendererGroup,
    RendererGroupResolver,
    content_type_for,
)
from wng_flask.utils.logging import get_logger

LOG = get_logger("wng.renderer")

SHELL_TEMPLATES = {
    "xhtml_advanced.html": (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        '<meta charset="utf-8">\n'
        "{% if title %}<title>{{ title }}</title>\n{% endif %}"
        "{% if head %}{{ head }}\n{% endif %}"
        "</head>\n"
        "<body>\n{{ body }}\n</body>\n"
        "</html>\n"
    ),
    "xhtml_simple.html": (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<!DOCTYPE html PUBLIC "-//WAPFORUM//DTD XHTML Mobile 1.0//EN" '
        '"http://www.wapforum.org/DTD/xhtml-mobile10.dtd">\n'
        '<html xmlns="http://www.w3.org/1999/xhtml">\n'
        "<head>\n"
        "<title>{{ title }}</title>\n"
        "{% if head %}{{ head }}\n{% endif %}"
        "</head>\n"
        "<body>\n{{ body }}\n</body>\n"
        "</html>\n"
    ),
    "chtml.html": (
        '<!DOCTYPE html PUBLIC "-//W3C//DTD Compact HTML 1.0 Draft//EN">\n'
        "<html>\n"
        "<head>\n"
        "<title>{{ title }}</title>\n"
        "{% if head %}{{ head }}\n{% endif %}"
        "</head>\n"
        "<body>\n{{ body }}\n</body>\n"
        "</html>\n"
    ),
    "wml.wml": (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<!DOCTYPE wml PUBLIC "-//WAPFORUM//DTD WML 1.1//EN" '
        '"http://www.wapforum.org/DTD/wml_1.1.xml">\n'
        "<wml>\n"
        "{% if head %}<head>{{ head }}</head>\n{% endif %}"
        '<card id="main"{% if title %} title="{{ title }}"{% endif %}>\n'
        "{{ body }}\n"
        "</card>\n"
        "</wml>\n"
    ),
}

_SHELL_NAMES = {
    RendererGroup.XHTML_ADVANCED: "xhtml_advanced.html",
    RendererGroup.XHTML_SIMPLE: "xhtml_simple.html",
    RendererGroup.CHTML: "chtml.html",
    RendererGroup.WML: "wml.wml",
}


class DocumentRenderer(Protocol):
    def render_document(self, document: Document, device: DeviceView) -> RenderedDocument:
        ...


def _attr(name: str, value: object) -> str:
    return f' {name}="{escape(str(value))}"'


def wml_escape(value: object) -> Markup:
    """Escape for WML, where a literal ``$`` must be written ``$$``."""
    return Markup(str(escape(str(value))).replace("$", "$$"))


def scaled_size(
    width: Optional[int], height: Optional[int], max_width: Optional[int]
) -> Tuple[Optional[int], Optional[int]]:
    """Shrink (width, height) proportionally so width fits `max_width`."""
    if not max_width or not width or width <= max_width:
        return width, height
    if height:
        height = max(1, round(height * max_width / width))
    return max_width, height


class _MarkupWriter:
    """Shared node walk; subclasses provide per-kind handlers."""

    empty_close = " />"

    def __init__(self, device: DeviceView):
        self.device = device
        self.handlers: Dict[NodeKind, Callable[[Component], str]] = {}

    def render(self, node: Component) -> str:
        handler = self.handlers.get(node.kind)
        if handler is None:
            raise RenderingError(f"cannot render {node.kind.value} node in {type(self).__name__}")
        return handler(node)

    def quote(self, value: object) -> str:
        return str(escape(str(value)))

    def attr(self, name: str, value: object) -> str:
        return f' {name}="{self.quote(value)}"'

    def render_children(self, node: Component) -> str:
        return "".join(self.render(child) for child in node.children)

    def image_attrs(self, node: Component) -> str:
        width, height = scaled_size(
            getattr(node, "width", None),
            getattr(node, "height", None),
            self.device.max_image_width,
        )
        attrs = self.attr("src", node.src) + self.attr("alt", node.alt or "")  # type: ignore[attr-defined]
        if width:
            attrs += self.attr("width", width)
        if height:
            attrs += self.attr("height", height)
        return attrs


class _HtmlWriter(_MarkupWriter):
    def __init__(self, device: DeviceView, group: RendererGroup):
        super().__init__(device)
        self.css = group.supports_css
        if group is RendererGroup.CHTML:
            self.empty_close = ">"
        self.handlers = {
            NodeKind.TEXT: lambda n: str(escape(n.text)),  # type: ignore[attr-defined]
            NodeKind.PARAGRAPH: lambda n: self._element("p", n),
            NodeKind.BLOCK: lambda n: self._element("div", n),
            NodeKind.LINK: lambda n: self._element("a", n, _attr("href", n.href)),  # type: ignore[attr-defined]
            NodeKind.IMAGE: lambda n: f"<img{self._common(n)}{self.image_attrs(n)}{self.empty_close}",
            NodeKind.BREAK: lambda n: f"<br{self.empty_close}",
        }

    def _common(self, node: Component) -> str:
        attrs = ""
        if node.id:
            attrs += _attr("id", node.id)
        if self.css and node.css_class:
            attrs += _attr("class", node.css_class)
        return attrs

    def _element(self, tag: str, node: Component, extra: str = "") -> str:
        return f"<{tag}{self._common(node)}{extra}>{self.render_children(node)}</{tag}>"

    def head(self, document: Document) -> str:
        parts: List[str] = []
        for node in document.head.children:
            if node.kind == NodeKind.META:
                parts.append(f"<meta{_attr('name', node.name)}{_attr('content', node.content)}{self.empty_close}")  # type: ignore[attr-defined]
            elif node.kind == NodeKind.STYLE_SHEET and self.css:
                parts.append(f'<link rel="stylesheet" type="text/css"{_attr("href", node.href)}{self.empty_close}')  # type: ignore[attr-defined]
            elif node.kind == NodeKind.STYLE_CONTAINER and self.css and node.rules:  # type: ignore[attr-defined]
                css = "\n".join(rule.to_css() for rule in node.rules).replace("</", "<\\/")  # type: ignore[attr-defined]
                parts.append(f'<style type="text/css">\n{css}\n</style>')
        return "\n".join(parts)


class _WmlWriter(_MarkupWriter):
    empty_close = "/>"

    def quote(self, value: object) -> str:
        return str(wml_escape(value))

    def __init__(self, device: DeviceView):
        super().__init__(device)
        self.handlers = {
            NodeKind.TEXT: lambda n: self.quote(n.text),  # type: ignore[attr-defined]
            NodeKind.PARAGRAPH: lambda n: self.render_children(n) + "<br/>",
            NodeKind.BLOCK: lambda n: self.render_children(n) + "<br/>",
            NodeKind.LINK: lambda n: f"<a{self.attr('href', n.href)}>{self.render_children(n)}</a>",  # type: ignore[attr-defined]
            NodeKind.IMAGE: lambda n: f"<img{self.image_attrs(n)}/>",
            NodeKind.BREAK: lambda n: "<br/>",
        }

    def body(self, document: Document) -> str:
        """Group body content into WML paragraphs; text may not sit on a card directly."""
        paragraphs: List[str] = []
        run: List[str] = []
        for node in document.body.children:
            if node.kind in (NodeKind.PARAGRAPH, NodeKind.BLOCK):
                if run:
                    paragraphs.append("<p>" + "".join(run) + "</p>")
                    run = []
                paragraphs.append("<p>" + self.render_children(node) + "</p>")
            else:
                run.append(self.render(node))
        if run:
            paragraphs.append("<p>" + "".join(run) + "</p>")
        return "\n".join(paragraphs)

    def head(self, document: Document) -> str:
        return "".join(
            f"<meta{self.attr('name', node.name)}{self.attr('content', node.content)}/>"  # type: ignore[attr-defined]
            for node in document.head.children
            if node.kind == NodeKind.META
        )


def _title(document: Document) -> str:
    node = document.head.first_of_kind(NodeKind.TITLE)
    return getattr(node, "text", "") if node is not None else ""


class DefaultDocumentRenderer:
    """Renders a document with the markup family its device's group selects."""

    def __init__(self, group_resolver: Optional[RendererGroupResolver] = None):
        self.group_resolver = group_resolver or DefaultRendererGroupResolver()
        self.env = Environment(
            loader=DictLoader(SHELL_TEMPLATES),
            autoescape=True,
            keep_trailing_newline=True,
        )

    def render_document(self, document: Document, device: Union[DeviceView, Device]) -> RenderedDocument:
        view = device if isinstance(device, DeviceView) else DeviceView(device)
        group = self.group_resolver.resolve(view)
        title: object = _title(document)
        if group is RendererGroup.WML:
            wml = _WmlWriter(view)
            head, body = wml.head(document), wml.body(document)
            title = wml_escape(title)
        else:
            html = _HtmlWriter(view, group)
            head, body = html.head(document), html.render_children(document.body)
        template = self.env.get_template(_SHELL_NAMES[group])
        markup = template.render(title=title, head=Markup(head), body=Markup(body))
        LOG.debug("rendered document for %s as %s (%d chars)", view.id, group.value, len(markup))
        return RenderedDocument(content_type=content_type_for(group, view), markup=markup)


__all__ = [
    "DocumentRenderer",
    "DefaultDocumentRenderer",
    "SHELL_TEMPLATES",
    "scaled_size",
    "wml_escape",
]
