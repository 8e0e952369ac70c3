"""Error taxonomy for the recording and transcription pipeline."""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Kinds of failure a recording session can end with."""
    INVALID_CREDENTIAL = "invalid_credential"
    PERMISSION_DENIED = "permission_denied"
    DEVICE_UNAVAILABLE = "device_unavailable"
    UNAUTHORIZED = "unauthorized"
    TRANSPORT_FAILURE = "transport_failure"
    INVALID_RESPONSE = "invalid_response"
    EMPTY_RECORDING = "empty_recording"


class VoiceScribeError(Exception):
    """Base class for all pipeline errors."""

    kind: ErrorKind
    default_message = "Something went wrong"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidCredential(VoiceScribeError):
    kind = ErrorKind.INVALID_CREDENTIAL
    default_message = "API key must not be empty"


class CaptureError(VoiceScribeError):
    """Microphone acquisition or release failed."""


class PermissionDenied(CaptureError):
    kind = ErrorKind.PERMISSION_DENIED
    default_message = "Microphone permission denied"


class DeviceUnavailable(CaptureError):
    kind = ErrorKind.DEVICE_UNAVAILABLE
    default_message = "No microphone available"


class TranscriptionError(VoiceScribeError):
    """The transcription request did not produce text."""


class Unauthorized(TranscriptionError):
    kind = ErrorKind.UNAUTHORIZED
    default_message = "Transcription request was rejected"

    def __init__(self, message: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class TransportFailure(TranscriptionError):
    kind = ErrorKind.TRANSPORT_FAILURE
    default_message = "Could not reach the transcription service"


class InvalidResponse(TranscriptionError):
    kind = ErrorKind.INVALID_RESPONSE
    default_message = "Transcription service returned an unexpected response"


class EmptyRecording(TranscriptionError):
    kind = ErrorKind.EMPTY_RECORDING
    default_message = "Nothing was recorded"
