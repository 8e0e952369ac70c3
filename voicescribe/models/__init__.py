"""Data models for the VoiceScribe pipeline."""

from .audio import AudioStats, AudioFrame, CaptureState
from .credential import Credential
from .session import RecordingSession, RecordingStatus
from .transcription import TranscriptionResult, TranscriptOutcome
from .ui import RecordingState, DEFAULT_PLACEHOLDER_TEXT

__all__ = [
    "AudioStats",
    "AudioFrame",
    "CaptureState",
    "Credential",
    "RecordingSession",
    "RecordingStatus",
    "TranscriptionResult",
    "TranscriptOutcome",
    "RecordingState",
    "DEFAULT_PLACEHOLDER_TEXT",
]
