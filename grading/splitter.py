"""
Multi-blank answer splitting.

A question with several accepted answers (one per blank) may receive a
single comma-joined string instead of one value per blank. try_split()
attempts to recover the per-blank pieces; when it cannot, callers fall
back to comparing the whole string.
"""

from __future__ import annotations

from typing import Sequence

BLANK_DELIMITER = ","


def split_pieces(value: str) -> list[str]:
    """Split on the blank delimiter, trim each piece and drop empty ones."""
    pieces = (piece.strip() for piece in value.split(BLANK_DELIMITER))
    return [piece for piece in pieces if piece]


def try_split(
    values: Sequence[str], accepted_answers: Sequence[str]
) -> list[tuple[str, str]] | None:
    """
    Pair a single joined answer with the accepted answers positionally.

    Only applies when more than one answer is accepted and exactly one
    value was submitted. The split is rejected unless the piece count
    equals the accepted-answer count.

    Args:
        values: Submitted values for one question
        accepted_answers: Accepted answers, one per blank

    Returns:
        List of (submitted_piece, accepted_answer) pairs, or None when the
        split does not apply
    """
    if len(accepted_answers) <= 1 or len(values) != 1:
        return None

    pieces = split_pieces(values[0])
    if len(pieces) != len(accepted_answers):
        return None

    return list(zip(pieces, accepted_answers))
