"""Single entry point for turning stored rich text into presentable markup."""

from __future__ import annotations

import logging

from markup.normalizer import normalize
from markup.sanitizer import sanitize

logger = logging.getLogger("presenter.markup")


def sanitize_and_normalize(raw_markup: str) -> str:
    """Sanitize untrusted markup, then repair its structure.

    The result only contains allowed tags, attributes, styles and classes,
    and is free of loose list text, inline-only divs, long ``<br>`` runs,
    empty blocks and bare spans.
    """
    raw_markup = raw_markup or ""
    sanitized = sanitize(raw_markup)
    normalized = normalize(sanitized)
    logger.debug(
        "rich text cleaned",
        extra={"chars_in": len(raw_markup), "chars_out": len(normalized)},
    )
    return normalized
