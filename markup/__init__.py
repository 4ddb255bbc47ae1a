"""Rich-text sanitizer and structural normalizer."""

from markup.normalizer import normalize
from markup.pipeline import sanitize_and_normalize
from markup.sanitizer import sanitize

__all__ = ["normalize", "sanitize", "sanitize_and_normalize"]
