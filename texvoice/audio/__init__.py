"""Speech synthesis and transcoding collaborators.

This package wraps the external tools that turn section text files into
audio files.
"""

from .synthesizer import SaySynthesizer, SpeechSynthesizer
from .transcoder import AudioTranscoder, FfmpegTranscoder

__all__ = ["AudioTranscoder", "FfmpegTranscoder", "SaySynthesizer", "SpeechSynthesizer"]
