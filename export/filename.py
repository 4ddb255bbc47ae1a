"""PDF download filename."""

from __future__ import annotations

import datetime
import re

DEFAULT_FIRM_NAME = "Firm"

# Characters that are invalid in file names on at least one common OS.
_UNSAFE_FILENAME_CHARS = re.compile(r'[/\\:*?"<>|]')


def build_pdf_filename(
    firm_name: str | None = None, today: datetime.date | None = None
) -> str:
    """Return ``"<firm> - Proposals - MM-DD-YYYY.pdf"``.

    An empty firm name falls back to ``DEFAULT_FIRM_NAME``.
    """
    firm = (firm_name or "").strip() or DEFAULT_FIRM_NAME
    day = today or datetime.date.today()
    safe_firm = _UNSAFE_FILENAME_CHARS.sub("-", firm)
    return f"{safe_firm} - Proposals - {day:%m-%d-%Y}.pdf"
