"""Transcription-related data models."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..exceptions import ErrorKind


@dataclass
class TranscriptionResult:
    """Result of a transcription request."""
    text: str
    processing_time: float
    timestamp: datetime
    service: str
    model: str
    payload_bytes: int = 0


@dataclass(frozen=True)
class TranscriptOutcome:
    """Latest outcome of a session: either text or an error."""
    text: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error_kind is None
