"""Exception types raised while structuring scripts and running rehearsals."""


class RehearserError(Exception):
    """Base class for every error this package raises deliberately."""


class ParsingError(RehearserError):
    pass


class NoValidContent(ParsingError):
    def __init__(self, message="No valid script content found. Please check the file format."):
        super().__init__(message)


class UnsupportedFormat(ParsingError):
    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Unsupported document format: {kind!r} (expected PDF, DOCX, or TXT)")


class ExtractionFailed(ParsingError):
    pass


class RehearsalError(RehearserError):
    pass


class NotUsersTurn(RehearsalError):
    def __init__(self, character: str | None = None):
        self.character = character
        if character:
            super().__init__(f"It's not your line ({character} speaks next)")
        else:
            super().__init__("It's not your line")


class TurnInProgress(RehearsalError):
    """Playback or capture is already outstanding."""


class RecognitionUnavailable(RehearsalError):
    pass


class PlaybackFailed(RehearsalError):
    pass


# Raised by port implementations; the controller translates these.

class CaptureError(Exception):
    pass


class SynthesisError(Exception):
    pass


class InputClosed(CaptureError):
    """The capture source has no more input and never will."""
