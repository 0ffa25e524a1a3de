"""Distinct characters of a structured script."""

from line_rehearser.models import ScriptLine


def list_roles(script: list[ScriptLine]) -> list[str]:
    """Characters in order of first appearance."""
    return list(dict.fromkeys(line.character for line in script))


def role_line_counts(script: list[ScriptLine]) -> dict[str, int]:
    counts = {}
    for line in script:
        counts[line.character] = counts.get(line.character, 0) + 1
    return counts
