"""Audio-related data models."""

from dataclasses import dataclass
from enum import Enum


class CaptureState(Enum):
    """Lifecycle of the microphone stream."""
    IDLE = "idle"
    REQUESTING = "requesting"
    CAPTURING = "capturing"
    DRAINING = "draining"


@dataclass
class AudioStats:
    """Audio recording statistics."""
    is_recording: bool
    duration_seconds: float
    buffer_size: int  # Bytes buffered for the current session
    sample_rate: int
    chunk_size: int
    total_chunks: int


@dataclass
class AudioFrame:
    """A single audio chunk with arrival time."""
    data: bytes
    timestamp: float  # Time when this chunk arrived
    frame_number: int
