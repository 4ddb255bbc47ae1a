"""Fragment parsing and text helpers shared by the markup passes.

Fragments are parsed with ``BeautifulSoup`` using the ``html.parser``
builder: it tolerates unterminated and stray tags and, unlike ``lxml``,
does not wrap a fragment in ``<html><body><p>``.  The returned soup object
is the implicit, tag-less root container of the fragment.
"""

from __future__ import annotations

import re
import warnings

from bs4 import (
    BeautifulSoup,
    MarkupResemblesLocatorWarning,
    NavigableString,
    ParserRejectedMarkup,
    Tag,
)
from bs4.element import PageElement, PreformattedString

PARSER = "html.parser"

_TAG_LIKE = re.compile(r"<[^>]*>")


def parse_fragment(markup: str) -> BeautifulSoup:
    """Parse an untrusted markup fragment.  Never raises on malformed input."""
    with warnings.catch_warnings():
        # A pasted bare URL is legitimate content, not a file name.
        warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
        try:
            return BeautifulSoup(markup or "", PARSER)
        except ParserRejectedMarkup:
            # Keep the text, drop anything that looks like a tag.
            root = BeautifulSoup("", PARSER)
            root.append(NavigableString(_TAG_LIKE.sub("", markup)))
            return root


def serialize(root: BeautifulSoup) -> str:
    """Serialize *root* in the form the parser reads back unchanged."""
    settle_strings(root)
    return root.decode()


def settle_strings(root: BeautifulSoup) -> None:
    """Merge adjacent text runs and collapse whitespace-only runs.

    Removing elements can leave text runs side by side that the parser
    would read back as one.  A whitespace-only run becomes ``"\\n"`` if it
    contains a newline and ``" "`` otherwise, exactly as the tree builder
    stores it, except inside ``pre`` and ``textarea``.
    """
    root.smooth()
    preserved = list(root.builder.preserve_whitespace_tags or ())
    for string in list(root.find_all(string=True)):
        if not is_text(string):
            continue
        if not string:
            string.extract()
            continue
        if any(c not in BeautifulSoup.ASCII_SPACES for c in string):
            continue
        if preserved and string.find_parent(preserved) is not None:
            continue
        collapsed = "\n" if "\n" in string else " "
        if string != collapsed:
            string.replace_with(NavigableString(collapsed))


def is_text(node: PageElement | None) -> bool:
    """Return True for text runs.

    Comments, doctypes, CDATA sections and processing instructions are
    ``PreformattedString`` subclasses and do not count as text.
    """
    return isinstance(node, NavigableString) and not isinstance(
        node, PreformattedString
    )


def is_tag(node: PageElement | None, *names: str) -> bool:
    """Return True if *node* is an element, optionally one of *names*."""
    if not isinstance(node, Tag):
        return False
    return not names or node.name in names


def normalize_nbsp(text: str) -> str:
    """Replace no-break spaces with plain spaces."""
    return text.replace("\xa0", " ")


def is_blank(text: str) -> bool:
    return not normalize_nbsp(text).strip()


def replace_children(parent: Tag, children: list[PageElement]) -> None:
    """Detach every current child of *parent* and append *children* instead."""
    parent.clear()
    for child in children:
        parent.append(child)
