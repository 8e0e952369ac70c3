"""State published to presentation collaborators."""

from dataclasses import dataclass
from typing import Optional

from .session import RecordingStatus
from ..exceptions import ErrorKind

DEFAULT_PLACEHOLDER_TEXT = "Your transcription will be displayed here as you speak."


@dataclass(frozen=True)
class RecordingState:
    """Snapshot of the recording controller for display."""
    status: RecordingStatus = RecordingStatus.IDLE
    transcript: str = DEFAULT_PLACEHOLDER_TEXT
    error_message: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    credential_prompt_visible: bool = False
    session_id: Optional[str] = None
