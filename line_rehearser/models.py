"""Data models for script structuring and rehearsal."""

from dataclasses import dataclass, field
from enum import Enum

from line_rehearser.constants import DEFAULT_VOICE, DEFAULT_RATE, DEFAULT_PITCH, DEFAULT_VOLUME


@dataclass(frozen=True)
class ScriptLine:
    character: str
    text: str
    index: int      # position in performance order, 0-based


class SourceKind(Enum):
    """How the segmenter should treat raw text."""
    PLAIN_FORMATTED = "plain"      # may already be in "CHARACTER: text" form
    UNSTRUCTURED = "unstructured"  # scraped from a page layout, needs pre-clean


class DocumentKind(Enum):
    PDF = "pdf"
    DOCX = "docx"
    PLAIN = "plain"


class SessionState(Enum):
    IDLE = "idle"
    SPEAKING = "speaking"
    LISTENING = "listening"
    EVALUATING = "evaluating"
    COMPLETE = "complete"


@dataclass
class VoiceConfig:
    voice_id: str = DEFAULT_VOICE
    rate: float = DEFAULT_RATE
    pitch: float = DEFAULT_PITCH
    volume: float = DEFAULT_VOLUME


@dataclass
class RehearsalSession:
    """One run through a script with the user playing ``user_role``.

    Owned by a RehearsalController; nothing else should move ``cursor`` or
    ``state``.
    """
    script: list[ScriptLine]
    user_role: str
    cursor: int = 0
    state: SessionState = SessionState.IDLE
    attempts: dict[int, int] = field(default_factory=dict)  # line index → capture count

    def __post_init__(self):
        if not self.script:
            raise ValueError("Cannot rehearse an empty script")
        if not self.user_role or not self.user_role.strip():
            raise ValueError("A role must be selected")

    @property
    def current_line(self) -> ScriptLine | None:
        if self.cursor < len(self.script):
            return self.script[self.cursor]
        return None

    @property
    def is_users_turn(self) -> bool:
        line = self.current_line
        return line is not None and line.character == self.user_role

    @property
    def is_complete(self) -> bool:
        return self.cursor >= len(self.script)


@dataclass
class TurnResult:
    """Outcome of one capture on the user's line."""
    delivered: bool
    transcript: str = ""
    score: float | None = None
    cancelled: bool = False
