"""Recover (character, line) pairs from raw script text."""

import logging
import re

from line_rehearser.cleanup import preclean
from line_rehearser.constants import BOILERPLATE_MARKERS, CUE_MAX_LENGTH, SCENE_HEADING_PREFIXES
from line_rehearser.errors import NoValidContent
from line_rehearser.models import ScriptLine, SourceKind

logger = logging.getLogger(__name__)

# "TOM: Hello": a single uppercase word, then a colon
_FORMATTED_LINE_RE = re.compile(r"^[A-Z]+:.*$")

# Page numbers on their own line: "12."
_PAGE_NUMBER_RE = re.compile(r"^\d+\.$")

# Actor directions attached to a cue: "TOM (V.O.)"
_PARENTHETICAL_RE = re.compile(r"\([^)]*\)")


def _is_scene_heading(line: str) -> bool:
    return line.startswith(SCENE_HEADING_PREFIXES)


def _is_parenthetical(line: str) -> bool:
    return line.startswith("(")


def _is_boilerplate(line: str) -> bool:
    return any(marker in line for marker in BOILERPLATE_MARKERS)


def _is_skippable(line: str) -> bool:
    """Scene headings, parentheticals, page numbers and page furniture."""
    return (
        _is_scene_heading(line)
        or _is_parenthetical(line)
        or _is_boilerplate(line)
        or bool(_PAGE_NUMBER_RE.match(line))
    )


def _is_cue(line: str) -> bool:
    return line == line.upper() and len(line) < CUE_MAX_LENGTH


def _is_dialogue(line: str) -> bool:
    """A cue's dialogue must carry lowercase text and not be layout."""
    return (
        bool(line)
        and not _is_parenthetical(line)
        and not _is_scene_heading(line)
        and not _is_boilerplate(line)
        and line != line.upper()
    )


def is_preformatted(text: str) -> bool:
    """True if any line already reads ``CHARACTER: text``."""
    return any(_FORMATTED_LINE_RE.match(line.strip()) for line in text.split("\n"))


def _split_colon_lines(text: str) -> list[tuple[str, str]]:
    pairs = []
    for line in text.split("\n"):
        if ":" not in line:
            continue
        character, _, spoken = line.partition(":")
        character = character.strip()
        spoken = spoken.strip()
        if character and spoken:
            pairs.append((character, spoken))
    return pairs


def _recover_dialogue(text: str) -> list[tuple[str, str]]:
    """Pair screenplay cues with the dialogue line that follows them."""
    lines = text.split("\n")
    pairs = []
    i = 0
    while i < len(lines):
        line = lines[i].strip()
        if not line or _is_skippable(line) or not _is_cue(line):
            i += 1
            continue

        # Look past blank lines for the first candidate
        j = i + 1
        while j < len(lines) and not lines[j].strip():
            j += 1
        if j >= len(lines):
            break

        candidate = lines[j].strip()
        if not _is_dialogue(candidate):
            i += 1
            continue

        character = _PARENTHETICAL_RE.sub("", line).strip()
        if character:
            pairs.append((character, candidate))
        else:
            logger.debug("Cue %r has no name once directions are removed", line)
        i = j + 1

    return pairs


def _to_script(pairs: list[tuple[str, str]]) -> list[ScriptLine]:
    if not pairs:
        raise NoValidContent()
    return [ScriptLine(character=c, text=t, index=i) for i, (c, t) in enumerate(pairs)]


def segment(raw_text: str, source_kind: SourceKind = SourceKind.PLAIN_FORMATTED) -> list[ScriptLine]:
    """Structure raw script text into an ordered list of ScriptLines.

    Unstructured sources are pre-cleaned first. Plain sources that already
    contain ``CHARACTER: text`` lines take the colon fast path; everything
    else goes through screenplay cue recovery. Raises NoValidContent when
    no line survives.
    """
    text = raw_text.replace("\r\n", "\n").replace("\r", "\n")
    if source_kind is SourceKind.UNSTRUCTURED:
        text = preclean(text)

    if source_kind is SourceKind.PLAIN_FORMATTED and is_preformatted(text):
        logger.debug("Input already formatted, splitting on colons")
        pairs = _split_colon_lines(text)
    else:
        pairs = _recover_dialogue(text)

    script = _to_script(pairs)
    logger.debug("Segmented %d lines", len(script))
    return script


def parse_pasted(text: str) -> list[ScriptLine]:
    """Split pasted ``Character: text`` lines, any case, on the first colon."""
    return _to_script(_split_colon_lines(text.replace("\r\n", "\n")))
