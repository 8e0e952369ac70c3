"""Session-related data models."""

import random
import string
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from ..exceptions import VoiceScribeError


class RecordingStatus(Enum):
    """Observable status of the recording pipeline."""
    IDLE = "idle"
    AWAITING_CREDENTIAL = "awaiting_credential"
    REQUESTING = "requesting"
    CAPTURING = "capturing"
    TRANSCRIBING = "transcribing"
    COMPLETED = "completed"
    FAILED = "failed"


def new_session_id() -> str:
    """Create a session ID from the current time with a random suffix."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    random_suffix = ''.join(random.choices(string.ascii_lowercase + string.digits, k=4))
    return f"{timestamp}_{random_suffix}"


@dataclass
class RecordingSession:
    """One capture-to-transcript cycle."""
    session_id: str = field(default_factory=new_session_id)
    status: RecordingStatus = RecordingStatus.IDLE
    started_at: datetime = field(default_factory=datetime.now)
    payload_bytes: Optional[int] = None
    transcript: Optional[str] = None  # Set only when completed
    error: Optional[VoiceScribeError] = None  # Set only when failed
