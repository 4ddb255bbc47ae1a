"""Allowlist policy for rich-text nodes: tags, attributes, inline styles, classes.

The policy is fixed.  ``filter_node()`` decides for one element at a time
and never raises: it returns the attributes the element keeps, or ``None``
when the element itself must be unwrapped (the caller keeps its children).

Anchors that survive are always hardened to open in a new browsing context
without opener or referrer.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

import tinycss2

ALLOWED_TAGS = frozenset(
    {"b", "strong", "i", "em", "u", "br", "span", "div", "p", "ul", "ol", "li", "a"}
)

# Sizing, spacing, typeface and background properties are never allowed:
# pasted content must not override the host page typography.
ALLOWED_STYLE_PROPERTIES = frozenset(
    {"color", "font-weight", "font-style", "text-decoration"}
)

ALLOWED_CLASSES = frozenset({"rte-size-body", "rte-size-subhead", "rte-size-head"})

LINK_TARGET = "_blank"
LINK_REL = "noopener noreferrer"

# Browsers ignore ASCII control characters and spaces inside a URL scheme.
_SCHEME_NOISE = re.compile(r"[\x00-\x20]+")
_UNSAFE_SCHEME = re.compile(r"^(javascript|vbscript|data):", re.IGNORECASE)
_UNSAFE_STYLE_FUNCTIONS = frozenset({"url", "expression", "image", "image-set", "element"})
_UNSAFE_STYLE_SCHEMES = frozenset({"javascript", "vbscript"})

AttrValue = Union[str, list, None]


@dataclass
class StyleDeclaration:
    """Ordered ``(property, value)`` pairs parsed from a ``style`` attribute.

    The attribute is tokenized with tinycss2, so quoted strings and comments
    never split a declaration.  A repeated property keeps the position of
    its first appearance and the value of its last one, which is what a
    browser renders.  Declarations whose value loads a resource, runs an
    expression or fails to tokenize are dropped while parsing.
    """

    items: list[tuple[str, str]] = field(default_factory=list)

    @classmethod
    def parse(cls, text: str) -> StyleDeclaration:
        values: dict[str, str] = {}
        for node in tinycss2.parse_declaration_list(
            text or "", skip_comments=True, skip_whitespace=True
        ):
            if node.type != "declaration" or _has_unsafe_token(node.value):
                continue
            value = tinycss2.serialize(node.value).strip()
            if not value:
                continue
            if node.important:
                value += " !important"
            values[node.lower_name] = value
        return cls(items=list(values.items()))

    def keep(self, allowed: Iterable[str]) -> StyleDeclaration:
        allowed = frozenset(allowed)
        return StyleDeclaration(
            items=[(prop, value) for prop, value in self.items if prop in allowed]
        )

    def render(self) -> str:
        return ";".join(f"{prop}:{value}" for prop, value in self.items)

    def __bool__(self) -> bool:
        return bool(self.items)


def _has_unsafe_token(tokens: Iterable) -> bool:
    previous = None
    for token in tokens:
        if token.type in ("url", "error"):
            return True
        if token.type == "function":
            if token.lower_name in _UNSAFE_STYLE_FUNCTIONS:
                return True
            if _has_unsafe_token(token.arguments):
                return True
        elif token.type in ("() block", "[] block", "{} block"):
            if _has_unsafe_token(token.content):
                return True
        elif (
            token.type == "literal"
            and token.value == ":"
            and previous is not None
            and previous.type == "ident"
            and previous.lower_value in _UNSAFE_STYLE_SCHEMES
        ):
            return True  # javascript:...
        if token.type != "whitespace":
            previous = token
    return False


def _attr_text(value: AttrValue) -> str:
    """Flatten a BS4 attribute value (multi-valued attrs come as lists)."""
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(str(item) for item in value)
    return str(value)


def is_allowed_tag(name: Optional[str]) -> bool:
    return bool(name) and name.lower() in ALLOWED_TAGS


def is_safe_href(href: str) -> bool:
    """Reject script-capable URL schemes (``javascript:``, ``vbscript:``, ``data:``)."""
    return not _UNSAFE_SCHEME.match(_SCHEME_NOISE.sub("", href))


def filter_style(style: AttrValue) -> str:
    """Keep only allowed style properties.  Returns ``""`` when nothing survives."""
    return StyleDeclaration.parse(_attr_text(style)).keep(ALLOWED_STYLE_PROPERTIES).render()


def filter_classes(value: AttrValue) -> str:
    """Keep only the semantic size classes, de-duplicated, in input order."""
    kept: list[str] = []
    for name in _attr_text(value).split():
        if name in ALLOWED_CLASSES and name not in kept:
            kept.append(name)
    return " ".join(kept)


def filter_node(tag: Optional[str], attrs: dict[str, AttrValue]) -> Optional[dict[str, str]]:
    """Apply the allowlist to one element.

    Returns:
        The attributes to keep, in a deterministic order (surviving
        ``href``/``class``/``style`` in input order, then ``target`` and
        ``rel`` for anchors), or ``None`` if the element is not allowed and
        has to be unwrapped.
    """
    if not is_allowed_tag(tag):
        return None
    tag = tag.lower()

    kept: dict[str, str] = {}
    for name, raw in attrs.items():
        name = name.lower()
        value = _attr_text(raw)
        if name == "href" and tag == "a":
            if is_safe_href(value):
                kept["href"] = value
        elif name == "style":
            style = filter_style(value)
            if style:
                kept["style"] = style
        elif name == "class":
            classes = filter_classes(value)
            if classes:
                kept["class"] = classes

    if tag == "a":
        kept["target"] = LINK_TARGET
        kept["rel"] = LINK_REL
    return kept


def migrate_legacy_tag(
    tag: Optional[str], attrs: dict[str, AttrValue]
) -> Optional[tuple[str, dict[str, str]]]:
    """Rewrite ``<font color=...>`` as a span carrying an equivalent color style.

    Returns the replacement ``(tag, attrs)`` or ``None`` when *tag* is not a
    legacy construct.  Other ``font`` attributes (``face``, ``size``) are
    discarded.
    """
    if not tag or tag.lower() != "font" or "color" not in attrs:
        return None
    return "span", {"style": f"color:{_attr_text(attrs['color']).strip()}"}
