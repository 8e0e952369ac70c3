"""Abstract base class for transcription clients."""

from abc import ABC, abstractmethod

from ..models.credential import Credential
from ..models.transcription import TranscriptionResult


class AbstractTranscriptionClient(ABC):
    """Turns one recorded payload into text."""

    @abstractmethod
    async def transcribe(self, payload: bytes, credential: Credential) -> TranscriptionResult:
        """Transcribe a complete recording.

        Args:
            payload: Raw audio captured for the session
            credential: Bearer token for the transcription service

        Returns:
            TranscriptionResult with the transcript and request metadata

        Raises:
            TranscriptionError: if no transcript could be obtained
        """
        pass
