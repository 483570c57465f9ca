"""
Text normalization for answer comparison.

Two normalizations exist and they are intentionally different:

- normalize(): case-fold and delete every whitespace run, so that
  "학습 능력" and "학습능력" compare equal. Used by strict grading.
- normalize_loose(): case-fold and trim the ends only. Internal spaces
  survive because the similarity scorer tokenizes on them.
"""

from __future__ import annotations

import re

_WHITESPACE = re.compile(r"\s+")


def normalize(text: str) -> str:
    """
    Canonicalize a string for strict equality.

    Args:
        text: Raw answer text (may be empty)

    Returns:
        Lower-cased text with all whitespace removed
    """
    return _WHITESPACE.sub("", text.lower())


def normalize_loose(text: str) -> str:
    """Lower-case and strip leading/trailing whitespace."""
    return text.lower().strip()
