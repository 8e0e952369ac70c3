"""Transcription module for VoiceScribe."""

from .base import AbstractTranscriptionClient
from ..models.transcription import TranscriptionResult
from .whisper_client import WhisperTranscriptionClient

__all__ = [
    "AbstractTranscriptionClient",
    "TranscriptionResult",
    "WhisperTranscriptionClient",
]
