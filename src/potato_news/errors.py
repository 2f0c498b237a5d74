"""Exceptions raised by the rendering and encoding stages."""


class PotatoNewsError(Exception):
    """Base class for pipeline errors."""


class AudioAnalysisError(PotatoNewsError):
    """Duration probe or waveform analysis failed; callers fall back to estimates."""


class EncoderError(PotatoNewsError):
    """An ffmpeg/ffprobe invocation failed to start or exited non-zero."""

    def __init__(self, stage: str, returncode=None, output: str = ""):
        self.stage = stage
        self.returncode = returncode
        self.output = output
        detail = f"exit code {returncode}" if returncode is not None else "could not start encoder"
        super().__init__(f"{stage} failed ({detail})")
