"""Turn-taking state machine for running lines.

The controller speaks every line that isn't the user's, then waits for the
user to start a capture on their own line. A capture only moves the cursor
when the transcript scores at or above the similarity threshold; otherwise
the line stays put until the user tries again.

Only one port request is ever outstanding. The cursor only moves after the
awaited playback or capture has resolved.
"""

import asyncio
import logging
from typing import Callable

from line_rehearser.constants import SIMILARITY_THRESHOLD
from line_rehearser.errors import (
    NotUsersTurn,
    PlaybackFailed,
    RecognitionUnavailable,
    RehearsalError,
    TurnInProgress,
)
from line_rehearser.models import RehearsalSession, ScriptLine, SessionState, TurnResult, VoiceConfig
from line_rehearser.ports import SpeechRecognitionPort, SpeechSynthesisPort
from line_rehearser.similarity import is_delivered

logger = logging.getLogger(__name__)


class RehearsalController:

    def __init__(
        self,
        synthesizer: SpeechSynthesisPort,
        recognizer: SpeechRecognitionPort,
        voices: dict[str, VoiceConfig] | None = None,
        default_voice: VoiceConfig | None = None,
        threshold: float = SIMILARITY_THRESHOLD,
        on_change: Callable[[RehearsalSession], None] | None = None,
    ):
        self._synthesizer = synthesizer
        self._recognizer = recognizer
        self._voices = dict(voices or {})
        self._default_voice = default_voice or VoiceConfig()
        self.threshold = threshold
        self._on_change = on_change

        self._session: RehearsalSession | None = None
        self._generation = 0        # bumped on reset; stale awaits check it
        self._playing = False
        self._capture: asyncio.Future | None = None
        self._stopped_capture: asyncio.Future | None = None

    # --- Read-only view ---

    @property
    def session(self) -> RehearsalSession | None:
        return self._session

    @property
    def state(self) -> SessionState:
        if self._session is None:
            return SessionState.IDLE
        return self._session.state

    @property
    def cursor(self) -> int:
        return self._session.cursor if self._session else 0

    @property
    def current_line(self) -> ScriptLine | None:
        return self._session.current_line if self._session else None

    @property
    def is_users_turn(self) -> bool:
        return self._session is not None and self._session.is_users_turn

    def voice_for(self, character: str) -> VoiceConfig:
        return self._voices.get(character, self._default_voice)

    # --- Transitions ---

    def reset(self, session: RehearsalSession) -> None:
        """Adopt ``session`` and rewind it to the first line."""
        if self._capture is not None:
            self._abandon_capture()
        self._generation += 1
        session.cursor = 0
        session.attempts.clear()
        self._session = session
        self._set_state(SessionState.IDLE)
        logger.debug("Session reset: role=%s, %d lines", session.user_role, len(session.script))

    async def start(self, session: RehearsalSession | None = None) -> SessionState:
        """Begin the rehearsal, auto-playing partner lines up to the user's first line."""
        if session is not None:
            self.reset(session)
        self._require_session()
        self._check_free()
        if self.state is SessionState.COMPLETE:
            return self.state
        await self._play_chain()
        return self.state

    async def play_next(self) -> SessionState:
        """Speak the current partner line again after a failed playback.

        Does nothing on the user's line or once the script is complete.
        """
        session = self._require_session()
        self._check_free()
        if session.is_complete or session.is_users_turn:
            return self.state
        await self._play_chain()
        return self.state

    async def begin_listening(self, on_interim: Callable[[str], None] | None = None) -> TurnResult:
        """Capture the user's delivery of the current line and score it.

        Raises NotUsersTurn if the current line belongs to someone else,
        TurnInProgress if playback or another capture is outstanding, and
        RecognitionUnavailable if the capture port fails.
        """
        session = self._require_session()
        self._check_free()
        if not session.is_users_turn:
            line = session.current_line
            raise NotUsersTurn(line.character if line else None)

        line = session.current_line
        generation = self._generation
        session.attempts[line.index] = session.attempts.get(line.index, 0) + 1
        self._set_state(SessionState.LISTENING)

        capture = asyncio.ensure_future(self._recognizer.start(on_interim))
        self._capture = capture
        try:
            transcript = await capture
        except asyncio.CancelledError:
            if self._stopped_capture is capture:
                return TurnResult(delivered=False, cancelled=True)
            # Our own caller was cancelled; leave the capture cleanly
            if generation == self._generation:
                self._abandon_capture()
            raise
        except Exception as e:
            logger.warning("Speech recognition failed: %s", e)
            if generation == self._generation:
                self._set_state(SessionState.IDLE)
            raise RecognitionUnavailable(f"Speech recognition failed: {e}") from e
        finally:
            if self._capture is capture:
                self._capture = None

        if generation != self._generation or session.state is not SessionState.LISTENING:
            # Stopped or reset after the transcript arrived
            return TurnResult(delivered=False, transcript=transcript, cancelled=True)

        return await self._evaluate(line, transcript)

    def stop_listening(self) -> bool:
        """Abandon the capture and return to Idle. Cursor is untouched.

        Returns False if the session wasn't listening.
        """
        if self.state is not SessionState.LISTENING:
            return False
        self._abandon_capture()
        return True

    # --- Internals ---

    def _require_session(self) -> RehearsalSession:
        if self._session is None:
            raise RehearsalError("No rehearsal session; choose a script and role first")
        return self._session

    def _check_free(self) -> None:
        """Enforce one outstanding port request at a time."""
        if self._playing:
            raise TurnInProgress("A line is still playing")
        if self._capture is not None:
            raise TurnInProgress("Already listening")

    def _set_state(self, state: SessionState) -> None:
        session = self._session
        if session.state is not state:
            logger.debug("State %s -> %s (cursor %d)", session.state.value, state.value, session.cursor)
        session.state = state
        if self._on_change is not None:
            self._on_change(session)

    def _abandon_capture(self) -> None:
        capture = self._capture
        self._capture = None
        if capture is not None:
            self._recognizer.stop()
            if not capture.done():
                self._stopped_capture = capture
                capture.cancel()
        self._set_state(SessionState.IDLE)

    async def _evaluate(self, line: ScriptLine, transcript: str) -> TurnResult:
        session = self._session
        self._set_state(SessionState.EVALUATING)
        delivered, score = is_delivered(transcript, line.text, self.threshold)
        logger.debug("Line %d scored %.3f (expected %r, heard %r)", line.index, score, line.text, transcript)

        if not delivered:
            # No automatic retry: the user starts the next capture
            self._set_state(SessionState.LISTENING)
            return TurnResult(delivered=False, transcript=transcript, score=score)

        session.cursor += 1
        await self._play_chain()
        return TurnResult(delivered=True, transcript=transcript, score=score)

    async def _play_chain(self) -> None:
        """Speak partner lines from the cursor until the user's turn or the end."""
        session = self._session
        generation = self._generation
        while not session.is_complete:
            line = session.current_line
            if line.character == session.user_role:
                self._set_state(SessionState.IDLE)
                return

            self._set_state(SessionState.SPEAKING)
            self._playing = True
            try:
                await self._synthesizer.speak(line.text, self.voice_for(line.character))
            except asyncio.CancelledError:
                if generation == self._generation:
                    self._set_state(SessionState.IDLE)
                raise
            except Exception as e:
                if generation != self._generation:
                    return
                logger.warning("Playback of line %d failed: %s", line.index, e)
                self._set_state(SessionState.IDLE)
                raise PlaybackFailed(f"Could not play line {line.index + 1}: {e}") from e
            finally:
                self._playing = False

            if generation != self._generation:
                # Session was replaced while this line played
                return
            session.cursor += 1

        self._set_state(SessionState.COMPLETE)
