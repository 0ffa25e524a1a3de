"""Normalized edit-distance similarity between a transcript and a script line."""

from rapidfuzz.distance import Levenshtein

from line_rehearser.constants import SIMILARITY_THRESHOLD


def similarity(a: str, b: str) -> float:
    """Return (maxLen - distance) / maxLen in [0, 1].

    Unit-cost insert/delete/substitute distance. Two empty strings are a
    perfect match. Case-sensitive: callers lower-case both sides first.
    """
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    distance = Levenshtein.distance(a, b)
    return (max_len - distance) / max_len


def is_delivered(transcript: str, expected: str, threshold: float = SIMILARITY_THRESHOLD) -> tuple[bool, float]:
    """Score a spoken transcript against the expected text, ignoring case."""
    score = similarity(transcript.lower(), expected.lower())
    return score >= threshold, score
