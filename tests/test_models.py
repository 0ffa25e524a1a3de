"""Tests for constants and models."""

import dataclasses

import pytest

from line_rehearser import constants
from line_rehearser.models import RehearsalSession, ScriptLine, SessionState, TurnResult, VoiceConfig


def test_script_line_is_immutable():
    line = ScriptLine(character="TOM", text="Hi", index=0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        line.text = "Bye"


def test_session_defaults(two_hander):
    session = RehearsalSession(script=two_hander, user_role="B")
    assert session.cursor == 0
    assert session.state is SessionState.IDLE
    assert session.attempts == {}
    assert session.current_line.character == "A"
    assert not session.is_users_turn
    assert not session.is_complete


def test_session_rejects_empty_script():
    with pytest.raises(ValueError):
        RehearsalSession(script=[], user_role="B")


def test_session_rejects_blank_role(two_hander):
    with pytest.raises(ValueError):
        RehearsalSession(script=two_hander, user_role="  ")


def test_session_past_last_line(two_hander):
    session = RehearsalSession(script=two_hander, user_role="B", cursor=2)
    assert session.current_line is None
    assert session.is_complete
    assert not session.is_users_turn


def test_voice_config_defaults():
    voice = VoiceConfig()
    assert voice.voice_id == constants.DEFAULT_VOICE
    assert voice.rate == 1.0
    assert voice.pitch == 1.0
    assert voice.volume == 1.0


def test_turn_result_defaults():
    result = TurnResult(delivered=False)
    assert result.transcript == ""
    assert result.score is None
    assert result.cancelled is False


def test_constants_exist():
    """All module-level constants are defined."""
    expected = [
        "SIMILARITY_THRESHOLD",
        "CUE_MAX_LENGTH",
        "BOILERPLATE_MARKERS",
        "SCENE_HEADING_PREFIXES",
        "DEFAULT_VOICE",
        "TTS_RETRY_COUNT",
        "TTS_RETRY_BASE_DELAY",
        "PITCH_HZ_PER_UNIT",
        "CAST_SUFFIX",
        "VERSION",
    ]
    for name in expected:
        assert hasattr(constants, name), f"Missing constant: {name}"
    assert constants.SIMILARITY_THRESHOLD == 0.7
    assert constants.CUE_MAX_LENGTH == 50
