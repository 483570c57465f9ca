"""
Token-overlap similarity between a candidate answer and a reference answer.

The score is a rough confidence in [0, 1]:

1. identical (after normalize_loose)       -> 1.0
2. one string contains the other           -> 0.7
3. shared whitespace tokens                -> matched / max(token counts)
4. nothing in common                       -> 0.0
"""

from __future__ import annotations

from typing import Iterable

from .normalize import normalize_loose

EXACT_SCORE = 1.0
CONTAINMENT_SCORE = 0.7


def similarity(candidate: str, reference: str) -> float:
    """
    Score how closely candidate matches reference.

    Args:
        candidate: Student's answer
        reference: One accepted answer

    Returns:
        Similarity in [0.0, 1.0]
    """
    a = normalize_loose(candidate)
    b = normalize_loose(reference)

    if a == b:
        return EXACT_SCORE

    if a in b or b in a:
        return CONTAINMENT_SCORE

    a_tokens = a.split()
    b_tokens = b.split()
    reference_tokens = set(b_tokens)
    # Repeated candidate tokens each count.
    matched = sum(1 for token in a_tokens if token in reference_tokens)

    if matched > 0:
        return matched / max(len(a_tokens), len(b_tokens))

    return 0.0


def best_similarity(candidate: str, references: Iterable[str]) -> float:
    """Highest similarity of candidate against any reference (0.0 if none)."""
    return max((similarity(candidate, ref) for ref in references), default=0.0)
