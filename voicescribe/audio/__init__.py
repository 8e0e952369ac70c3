"""Audio capture and buffering module."""

from .capture import AudioCapture
from .buffer import SessionAudioBuffer
from .wav import encode_wav

__all__ = [
    'AudioCapture',
    'SessionAudioBuffer',
    'encode_wav'
]
