"""Speech capability contracts the rehearsal controller drives.

Both ports are asynchronous and resolve once per call: ``speak`` when the
line has finished playing, ``start`` with the final transcript. Failures
are raised from the awaited call.
"""

import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable

from line_rehearser.constants import LISTEN_PROMPT
from line_rehearser.errors import InputClosed
from line_rehearser.models import VoiceConfig

logger = logging.getLogger(__name__)


class SpeechSynthesisPort(ABC):

    @abstractmethod
    async def speak(self, text: str, voice: VoiceConfig) -> None:
        """Play ``text`` and return once playback has finished."""


class SpeechRecognitionPort(ABC):

    @abstractmethod
    async def start(self, on_interim: Callable[[str], None] | None = None) -> str:
        """Capture one utterance and return its final transcript.

        Interim transcripts, if the engine produces them, go to
        ``on_interim`` before the final one is returned.
        """

    @abstractmethod
    def stop(self) -> None:
        """Abandon the capture in progress, if any."""


class ConsoleSynthesizer(SpeechSynthesisPort):
    """Prints partner lines instead of speaking them."""

    def __init__(self, output=print):
        self._output = output

    async def speak(self, text: str, voice: VoiceConfig) -> None:
        self._output(f"  [{voice.voice_id}] {text}")


def _settle(future: asyncio.Future, result, error) -> None:
    if future.done():
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(result)


class ConsoleRecognizer(SpeechRecognitionPort):
    """Takes the user's delivery as a typed line.

    Each read runs on a daemon thread, so a prompt left waiting when the
    rehearsal is interrupted does not hold up interpreter shutdown.
    """

    def __init__(self, input_func=None, prompt: str = LISTEN_PROMPT):
        self._input = input_func or input
        self._prompt = prompt

    async def start(self, on_interim=None) -> str:
        loop = asyncio.get_running_loop()
        reply = loop.create_future()
        threading.Thread(target=self._read, args=(loop, reply), daemon=True).start()
        try:
            return await reply
        except EOFError as e:
            raise InputClosed("No more input to read") from e

    def _read(self, loop: asyncio.AbstractEventLoop, reply: asyncio.Future) -> None:
        try:
            outcome = (self._input(self._prompt), None)
        except Exception as e:
            outcome = (None, e)
        try:
            loop.call_soon_threadsafe(_settle, reply, *outcome)
        except RuntimeError:
            logger.debug("Console read finished after the event loop closed")

    def stop(self) -> None:
        # A pending console read can't be interrupted; the controller
        # discards whatever it eventually returns.
        logger.debug("Console capture stopped")
