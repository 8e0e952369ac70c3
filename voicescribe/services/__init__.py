"""Services layer for VoiceScribe application logic."""

from .recording_controller import RecordingController
from .state_publisher import RecordingStatePublisher

__all__ = [
    "RecordingController",
    "RecordingStatePublisher"
]
