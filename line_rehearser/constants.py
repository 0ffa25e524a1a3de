"""All magic numbers and configuration constants."""

SIMILARITY_THRESHOLD = 0.7          # min similarity for a line to count as delivered
CUE_MAX_LENGTH = 50                 # chars; uppercase lines at or above this are not cues
BOILERPLATE_MARKERS = (             # substrings that mark a line as page furniture
    "Sides by Breakdown",
)
SCENE_HEADING_PREFIXES = ("INT.", "EXT.")
DEFAULT_VOICE = "en-US-AriaNeural"  # partner voice when nothing else is cast
DEFAULT_RATE = 1.0                  # playback speed multiplier
DEFAULT_PITCH = 1.0                 # pitch multiplier
DEFAULT_VOLUME = 1.0                # volume multiplier
PITCH_HZ_PER_UNIT = 50              # Hz shift for a pitch multiplier change of 1.0
TTS_RETRY_COUNT = 3                 # max attempts per synthesized line
TTS_RETRY_BASE_DELAY = 1.0          # seconds, base delay for exponential backoff
CAST_SUFFIX = ".cast.json"          # sidecar voice casting file
LISTEN_PROMPT = "> "
VERSION = "0.1.0"
