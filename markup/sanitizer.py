"""Allowlist sanitizer for user-authored rich text.

Parses untrusted markup, migrates legacy ``<font color>`` to styled spans,
then walks the tree depth-first applying ``filtering.filter_node()``.

The walk is a node visitor that returns the replacement for each node as a
list: ``[node]`` when the element is kept, its cleaned children when the
element is unwrapped, ``[]`` for comments and other non-text leaves.  Each
parent snapshots its children before visiting them and is rebuilt from the
returned lists, so unwrapping never disturbs an ongoing iteration.
"""

from __future__ import annotations

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PageElement

from markup.filtering import filter_node, migrate_legacy_tag
from markup.tree import is_text, parse_fragment, replace_children, serialize


def sanitize(raw_markup: str) -> str:
    """Return *raw_markup* restricted to the allowed tags, attributes and styles.

    Text content of removed elements is always kept.  Idempotent:
    ``sanitize(sanitize(x)) == sanitize(x)``.
    """
    root = parse_fragment(raw_markup)
    _migrate_legacy_fonts(root)
    replace_children(root, _clean_children(root))
    return serialize(root)


def _migrate_legacy_fonts(root: BeautifulSoup) -> None:
    for font in root.find_all("font"):
        migrated = migrate_legacy_tag(font.name, font.attrs)
        if migrated is not None:
            font.name, font.attrs = migrated


def _clean(node: PageElement) -> list[PageElement]:
    if isinstance(node, Tag):
        attrs = filter_node(node.name, node.attrs)
        if attrs is None:
            return _clean_children(node)
        node.attrs = attrs
        replace_children(node, _clean_children(node))
        return [node]
    if is_text(node):
        # Script/style strings become plain text so they are escaped on output.
        return [NavigableString(str(node))]
    return []


def _clean_children(node: Tag) -> list[PageElement]:
    cleaned: list[PageElement] = []
    for child in list(node.contents):
        cleaned.extend(_clean(child))
    return cleaned
