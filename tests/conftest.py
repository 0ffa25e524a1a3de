"""Shared fixtures for line rehearser tests."""

import asyncio

import pytest

from line_rehearser.errors import SynthesisError
from line_rehearser.models import RehearsalSession, ScriptLine
from line_rehearser.ports import SpeechRecognitionPort, SpeechSynthesisPort


class FakeSynthesizer(SpeechSynthesisPort):
    """Records spoken lines. With hold=True each line waits on ``pending``."""

    def __init__(self, fail_on=(), hold=False):
        self.spoken = []
        self.fail_on = set(fail_on)
        self.hold = hold
        self.pending = None

    async def speak(self, text, voice):
        self.spoken.append((text, voice.voice_id))
        if text in self.fail_on:
            raise SynthesisError("audio device unavailable")
        if self.hold:
            self.pending = asyncio.get_running_loop().create_future()
            await self.pending


class FakeRecognizer(SpeechRecognitionPort):
    """Returns queued transcripts. With hold=True each capture waits on ``pending``."""

    def __init__(self, transcripts=(), error=None, hold=False, interim=None):
        self.transcripts = list(transcripts)
        self.error = error
        self.hold = hold
        self.interim = interim
        self.started = 0
        self.stopped = 0
        self.pending = None

    async def start(self, on_interim=None):
        self.started += 1
        if self.error is not None:
            raise self.error
        if self.hold:
            self.pending = asyncio.get_running_loop().create_future()
            return await self.pending
        if on_interim is not None and self.interim:
            on_interim(self.interim)
        return self.transcripts.pop(0)

    def stop(self):
        self.stopped += 1


@pytest.fixture
def two_hander():
    """A speaks first, B answers."""
    return [
        ScriptLine(character="A", text="Hi", index=0),
        ScriptLine(character="B", text="Hey", index=1),
    ]


@pytest.fixture
def scene():
    return [
        ScriptLine(character="TOM", text="Did you see her?", index=0),
        ScriptLine(character="JANE", text="Who?", index=1),
        ScriptLine(character="TOM", text="The new girl in chem class.", index=2),
        ScriptLine(character="SAM", text="She sits behind me.", index=3),
        ScriptLine(character="JANE", text="Oh, yeah. She's cool.", index=4),
    ]


@pytest.fixture
def jane_session(scene):
    return RehearsalSession(script=scene, user_role="JANE")
