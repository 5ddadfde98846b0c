"""Device-specific style optimization.

Collects inline component styles into the document's style container and
trims the container to what the device can use and the body references.
All changes happen in place.
"""
from __future__ import annotations

import re
from typing import Dict, Optional, Set, Tuple

from wng_flask.components import (
    Component,
    Document,
    StyleContainer,
    StyleRule,
    iter_nodes,
    walk,
)
from wng_flask.device.model import DeviceView
from wng_flask.utils.logging import get_logger

LOG = get_logger("wng.style_optimizer")

GENERATED_PREFIX = "wng-s"
_TOKEN_RE = re.compile(r"([.#])(-?[_a-zA-Z][_a-zA-Z0-9-]*)")
# Negations and attribute blocks never require a class or id to be present.
_NEUTRAL_RE = re.compile(r":not\([^)]*\)|\[[^\]]*\]")

DeclKey = Tuple[Tuple[str, str], ...]


def _decl_key(properties: Dict[str, str]) -> DeclKey:
    return tuple(sorted((name.strip().lower(), str(value).strip()) for name, value in properties.items()))


class _ClassAllocator:
    """Hands out `.wng-sN` class names, one per distinct declaration block."""

    def __init__(self, container: StyleContainer):
        self.container = container
        self.by_decl: Dict[DeclKey, str] = {}
        self.taken: Set[str] = set()
        for rule in container.rules:
            self.taken.add(rule.selector)
            if rule.selector.startswith("." + GENERATED_PREFIX):
                self.by_decl.setdefault(_decl_key(rule.properties), rule.selector[1:])
        self.counter = 0

    def class_for(self, properties: Dict[str, str]) -> str:
        key = _decl_key(properties)
        name = self.by_decl.get(key)
        if name is not None:
            return name
        while True:
            self.counter += 1
            name = f"{GENERATED_PREFIX}{self.counter}"
            if "." + name not in self.taken:
                break
        self.container.add_rule(StyleRule("." + name, dict(key)))
        self.taken.add("." + name)
        self.by_decl[key] = name
        return name


def _hoist_inline_styles(document: Document, container: StyleContainer, unsupported: frozenset) -> int:
    allocator = _ClassAllocator(container)
    hoisted = 0

    def _visit(node: Component, _parent: Optional[Component]) -> None:
        nonlocal hoisted
        if not node.style:
            return
        usable = {
            name: value for name, value in node.style.items()
            if name.strip().lower() not in unsupported
        }
        node.style = {}
        if not usable:
            return
        node.add_class(allocator.class_for(usable))
        hoisted += 1

    walk(document.body, _visit)
    return hoisted


def _strip_inline_styles(document: Document) -> None:
    for node in iter_nodes(document):
        node.style = {}


def _drop_unsupported(container: StyleContainer, unsupported: frozenset) -> None:
    if not unsupported:
        return
    for rule in container.rules:
        rule.properties = {
            name: value for name, value in rule.properties.items()
            if name.strip().lower() not in unsupported
        }
    container.rules = [rule for rule in container.rules if rule.properties]


def _referenced_tokens(document: Document) -> Tuple[Set[str], Set[str]]:
    classes: Set[str] = set()
    ids: Set[str] = set()
    for node in iter_nodes(document.body):
        classes.update(node.classes())
        if node.id:
            ids.add(node.id)
    return classes, ids


def _selector_used(selector: str, classes: Set[str], ids: Set[str]) -> bool:
    for marker, name in _TOKEN_RE.findall(_NEUTRAL_RE.sub("", selector)):
        pool = classes if marker == "." else ids
        if name not in pool:
            return False
    return True


def _prune_unreferenced(document: Document, container: StyleContainer) -> None:
    classes, ids = _referenced_tokens(document)
    kept = StyleContainer()
    for rule in container.rules:
        parts = [part.strip() for part in rule.selector.split(",") if part.strip()]
        used = [part for part in parts if _selector_used(part, classes, ids)]
        if not used:
            LOG.debug("pruned unreferenced style rule: %s", rule.selector)
            continue
        if len(used) != len(parts):
            rule.selector = ", ".join(used)
        kept.add_rule(rule)
    container.rules = kept.rules


def optimize_styles(document: Document, device: DeviceView, style_container: StyleContainer) -> None:
    if not device.supports_css:
        _strip_inline_styles(document)
        style_container.rules = []
        LOG.debug("device %s has no css support; styles cleared", device.id)
        return
    unsupported = device.unsupported_css_properties
    hoisted = _hoist_inline_styles(document, style_container, unsupported)
    _drop_unsupported(style_container, unsupported)
    _prune_unreferenced(document, style_container)
    LOG.debug(
        "styles optimized for %s: hoisted=%d rules=%d",
        device.id,
        hoisted,
        len(style_container.rules),
    )


__all__ = ["optimize_styles", "GENERATED_PREFIX"]
