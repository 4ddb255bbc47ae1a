"""Structural cleanup of sanitized rich text.

The allowlist constrains tags and attributes but not nesting, and content
pasted from editors arrives with loose list text, a ``div`` per line,
stacked ``<br>`` runs and empty blocks.  Passes, in order (each assumes
the previous ones have run on the same tree):

    1. List repair -- non-blank text directly inside ``ul``/``ol`` is wrapped
       in a new ``li``; blank text there is dropped.
    2. Div coalescing -- a ``div`` outside any list whose own children are
       all inline becomes a ``p``.
    3. Line-break collapsing -- runs of ``br`` (blank text in between does
       not end a run) are cut to ``MAX_BREAK_RUN``.
    4. Empty-block removal -- ``p``/``div``/``li`` with no text, no media
       and no element other than ``br`` are removed.  An ``li`` holding a
       nested list is always kept.
    5. Span unwrapping -- a ``span`` without attributes is replaced by its
       children.

A later pass can expose work for an earlier one (unwrapping a bare span in
a list exposes loose text, removing an empty ``p`` can leave a ``div``
with only inline children), so the passes are repeated until the output
stops changing.  No round adds an element except the ``li`` that
absorbs loose list text, so the tree settles after a few rounds.
"""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag
from bs4.element import PageElement

from markup.tree import (
    is_blank,
    is_tag,
    is_text,
    normalize_nbsp,
    parse_fragment,
    serialize,
)

BLOCK_TAGS = frozenset(
    {"p", "div", "ul", "ol", "li", "h1", "h2", "h3", "h4", "h5", "h6",
     "table", "blockquote"}
)
LIST_TAGS = ["ul", "ol"]
MEDIA_TAGS = ["img", "video", "svg"]
EMPTY_CANDIDATE_TAGS = ["p", "div", "li"]

MAX_BREAK_RUN = 2


def normalize(safe_markup: str) -> str:
    """Repair the structure of sanitized markup.

    Returns the normalized markup, trimmed of surrounding whitespace.
    Idempotent: ``normalize(normalize(x)) == normalize(x)``.
    """
    markup = safe_markup or ""
    while True:
        normalized = _normalize_once(markup)
        if normalized == markup:
            return markup
        markup = normalized


def _normalize_once(markup: str) -> str:
    root = parse_fragment(markup)
    _repair_lists(root)
    _coalesce_divs(root)
    _collapse_break_runs(root, MAX_BREAK_RUN)
    _remove_empty_blocks(root)
    _unwrap_bare_spans(root)
    return serialize(root).strip()


# ---------------------------------------------------------------------------
# 1. Lists
# ---------------------------------------------------------------------------


def _repair_lists(root: BeautifulSoup) -> None:
    for list_tag in root.find_all(LIST_TAGS):
        for child in list(list_tag.children):
            if not is_text(child):
                continue
            text = normalize_nbsp(str(child)).strip()
            if not text:
                child.extract()
                continue
            item = root.new_tag("li")
            item.string = text
            child.replace_with(item)


# ---------------------------------------------------------------------------
# 2. Divs
# ---------------------------------------------------------------------------


def _coalesce_divs(root: BeautifulSoup) -> None:
    for div in root.find_all("div"):
        if div.find_parent(LIST_TAGS + ["li"]) is not None:
            continue
        if any(is_tag(child, *BLOCK_TAGS) for child in div.children):
            continue
        div.name = "p"
        div.attrs = {}


# ---------------------------------------------------------------------------
# 3. Line breaks
# ---------------------------------------------------------------------------


def _previous_meaningful(node: PageElement) -> PageElement | None:
    sibling = node.previous_sibling
    while is_text(sibling) and is_blank(str(sibling)):
        sibling = sibling.previous_sibling
    return sibling


def _next_meaningful(node: PageElement) -> PageElement | None:
    sibling = node.next_sibling
    while is_text(sibling) and is_blank(str(sibling)):
        sibling = sibling.next_sibling
    return sibling


def _collapse_break_runs(root: BeautifulSoup, max_run: int) -> None:
    for br in root.find_all("br"):
        if br.parent is None:
            continue  # already removed as part of an earlier run
        if is_tag(_previous_meaningful(br), "br"):
            continue  # not the head of its run
        run = [br]
        node = _next_meaningful(br)
        while is_tag(node, "br"):
            run.append(node)
            node = _next_meaningful(node)
        for extra in run[max_run:]:
            extra.extract()


# ---------------------------------------------------------------------------
# 4. Empty blocks
# ---------------------------------------------------------------------------


def _is_empty_block(block: Tag) -> bool:
    if not is_blank(block.get_text()):
        return False
    if block.find(MEDIA_TAGS) is not None:
        return False
    for child in block.children:
        if is_tag(child) and child.name != "br":
            return False
        if is_text(child) and not is_blank(str(child)):
            return False
    return True


def _remove_empty_blocks(root: BeautifulSoup) -> None:
    # Descendants before ancestors, so a nested chain of empties goes at once.
    for block in reversed(root.find_all(EMPTY_CANDIDATE_TAGS)):
        if block.name == "li" and block.find(LIST_TAGS, recursive=False) is not None:
            continue
        if _is_empty_block(block):
            block.extract()


# ---------------------------------------------------------------------------
# 5. Spans
# ---------------------------------------------------------------------------


def _unwrap_bare_spans(root: BeautifulSoup) -> None:
    for span in root.find_all("span"):
        if not span.attrs:
            span.unwrap()
