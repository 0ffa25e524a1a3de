"""Partner voice casting."""

import hashlib
import json
import logging
import os

from line_rehearser.constants import CAST_SUFFIX, DEFAULT_PITCH, DEFAULT_RATE, DEFAULT_VOLUME
from line_rehearser.models import VoiceConfig

logger = logging.getLogger(__name__)

# Hardcoded English voice pool (avoids network call at startup)
VOICE_POOL = [
    "en-US-AriaNeural",
    "en-US-DavisNeural",
    "en-US-TonyNeural",
    "en-US-JennyNeural",
    "en-US-SaraNeural",
    "en-GB-SoniaNeural",
    "en-GB-RyanNeural",
    "en-GB-ThomasNeural",
    "en-AU-NatashaNeural",
    "en-AU-WilliamNeural",
    "en-CA-ClaraNeural",
    "en-CA-LiamNeural",
    "en-IN-NeerjaNeural",
    "en-IN-PrabhatNeural",
    "en-IE-EmilyNeural",
]


def load_cast(script_path: str) -> dict:
    """Load the .cast.json sidecar next to a script, if there is one.

    Returns cast dict or empty dict if not found or malformed.
    """
    cast_path = os.path.splitext(script_path)[0] + CAST_SUFFIX
    if not os.path.exists(cast_path):
        return {}
    try:
        with open(cast_path) as f:
            cast = json.load(f)
    except json.JSONDecodeError:
        logger.warning("Malformed cast file: %s, using hash fallback", cast_path)
        return {}
    if not isinstance(cast, dict):
        logger.warning("Cast file %s is not an object, ignoring", cast_path)
        return {}
    return cast


def _resolve_alias(character: str, cast_entries: dict) -> str:
    for primary, info in cast_entries.items():
        aliases = [a.lower() for a in info.get("aliases", [])]
        if character.lower() in aliases:
            return primary
    return character


def _cast_voice(character: str, cast_entries: dict) -> str | None:
    resolved = _resolve_alias(character, cast_entries).lower()
    for name, info in cast_entries.items():
        if name.lower() == resolved:
            return info.get("voice")
    return None


def _hash_voice(character: str, pool: list[str]) -> str:
    """Deterministic voice assignment via sha256 hash."""
    h = hashlib.sha256(character.lower().encode()).hexdigest()
    return pool[int(h, 16) % len(pool)]


def assign_voices(
    characters: list[str],
    cast: dict | None = None,
    voice_id: str | None = None,
    rate: float | None = None,
    pitch: float | None = None,
    volume: float | None = None,
) -> dict[str, VoiceConfig]:
    """Build a VoiceConfig for every partner character.

    Priority: cast file → ``voice_id`` override → hash fallback. Speech
    settings come from the keyword overrides, then the cast file's
    ``voice`` block, then defaults.
    """
    if cast is None:
        cast = {}
    cast_entries = cast.get("cast", {})
    settings = cast.get("voice", {})

    rate = rate if rate is not None else settings.get("rate", DEFAULT_RATE)
    pitch = pitch if pitch is not None else settings.get("pitch", DEFAULT_PITCH)
    volume = volume if volume is not None else settings.get("volume", DEFAULT_VOLUME)

    # Keep hashed voices away from ones the cast file already claimed
    claimed = {info["voice"] for info in cast_entries.values() if info.get("voice")}
    pool = [v for v in VOICE_POOL if v not in claimed] or list(VOICE_POOL)

    assigned = {}
    for character in characters:
        chosen = _cast_voice(character, cast_entries) or voice_id or _hash_voice(character, pool)
        assigned[character] = VoiceConfig(voice_id=chosen, rate=rate, pitch=pitch, volume=volume)
    return assigned
