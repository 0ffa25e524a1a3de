"""Partner line playback via edge-tts with retry logic."""

import asyncio
import logging
import os
import tempfile

import edge_tts
from pydub import AudioSegment
from pydub.playback import play

from line_rehearser.constants import PITCH_HZ_PER_UNIT, TTS_RETRY_BASE_DELAY, TTS_RETRY_COUNT
from line_rehearser.errors import SynthesisError
from line_rehearser.models import VoiceConfig
from line_rehearser.ports import SpeechSynthesisPort

logger = logging.getLogger(__name__)


def _percent(multiplier: float) -> str:
    return f"{round((multiplier - 1.0) * 100):+d}%"


def edge_settings(voice: VoiceConfig) -> dict:
    """Translate multipliers into edge-tts prosody strings.

    rate 1.5 → "+50%", volume 0.8 → "-20%", pitch 1.2 → "+10Hz".
    """
    return {
        "rate": _percent(voice.rate),
        "volume": _percent(voice.volume),
        "pitch": f"{round((voice.pitch - 1.0) * PITCH_HZ_PER_UNIT):+d}Hz",
    }


async def synthesize(text: str, voice: VoiceConfig, output_path: str) -> None:
    """Render one line to an MP3 with retry logic.

    Retries on network errors, HTTP errors, or 0-byte output files.
    """
    last_error = None
    for attempt in range(TTS_RETRY_COUNT):
        try:
            communicate = edge_tts.Communicate(text, voice.voice_id, **edge_settings(voice))
            await communicate.save(output_path)

            # Validate output: 0-byte file counts as failure
            if os.path.exists(output_path) and os.path.getsize(output_path) > 0:
                return

            last_error = SynthesisError(f"TTS produced 0-byte file for: {text[:50]}...")
        except Exception as e:
            last_error = e

        if attempt < TTS_RETRY_COUNT - 1:
            delay = TTS_RETRY_BASE_DELAY * (2 ** attempt)
            logger.warning("TTS attempt %d failed (%s), retrying in %.1fs", attempt + 1, last_error, delay)
            await asyncio.sleep(delay)

    raise last_error


class EdgeSpeechSynthesizer(SpeechSynthesisPort):
    """Speaks partner lines through the default audio device."""

    async def speak(self, text: str, voice: VoiceConfig) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "line.mp3")
            await synthesize(text, voice, path)
            try:
                clip = AudioSegment.from_mp3(path)
                await asyncio.to_thread(play, clip)
            except Exception as e:
                raise SynthesisError(f"Audio playback failed: {e}") from e
