"""Editing operations on a structured script.

Every operation returns a new list and keeps indices contiguous from 0.
"""

from line_rehearser.models import ScriptLine


def _clean(character: str, text: str) -> tuple[str, str]:
    character = (character or "").strip()
    text = (text or "").strip()
    if not character:
        raise ValueError("Character name cannot be empty")
    if not text:
        raise ValueError("Line text cannot be empty")
    return character, text


def reindex(lines: list[ScriptLine]) -> list[ScriptLine]:
    return [ScriptLine(line.character, line.text, i) for i, line in enumerate(lines)]


def append_line(script: list[ScriptLine], character: str, text: str) -> list[ScriptLine]:
    """Add a dictated or typed line to the end of the script."""
    character, text = _clean(character, text)
    return list(script) + [ScriptLine(character, text, len(script))]


def update_line(script: list[ScriptLine], index: int, character: str, text: str) -> list[ScriptLine]:
    if not 0 <= index < len(script):
        raise IndexError(f"No line at index {index}")
    character, text = _clean(character, text)
    updated = list(script)
    updated[index] = ScriptLine(character, text, index)
    return updated


def delete_line(script: list[ScriptLine], index: int) -> list[ScriptLine]:
    if not 0 <= index < len(script):
        raise IndexError(f"No line at index {index}")
    return reindex(script[:index] + script[index + 1:])


def format_script(script: list[ScriptLine]) -> str:
    """Render as ``CHARACTER: text`` lines."""
    return "\n".join(f"{line.character}: {line.text}" for line in script)
