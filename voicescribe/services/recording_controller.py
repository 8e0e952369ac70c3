"""Controller that drives the recording and transcription lifecycle."""

import logging
from typing import Optional

from ..audio.capture import AudioCapture
from ..exceptions import (
    CaptureError,
    DeviceUnavailable,
    InvalidCredential,
    TranscriptionError,
    TransportFailure,
    VoiceScribeError,
)
from ..models.credential import Credential
from ..models.session import RecordingSession, RecordingStatus
from ..models.transcription import TranscriptOutcome
from ..models.ui import RecordingState, DEFAULT_PLACEHOLDER_TEXT
from ..storage.credential_store import CredentialStore
from ..transcription.base import AbstractTranscriptionClient
from .state_publisher import RecordingStatePublisher

logger = logging.getLogger(__name__)


class RecordingController:
    """Orchestrates credential gating, capture, and transcription.

    The public surface is a single toggle: it starts a session when idle and
    stops/transcribes when capturing. Every state change is published through
    the state publisher; errors from the components end the session in the
    FAILED state and never escape to the caller.
    """

    def __init__(self,
                 credential_store: CredentialStore,
                 audio_capture: AudioCapture,
                 transcription_client: AbstractTranscriptionClient,
                 publisher: Optional[RecordingStatePublisher] = None,
                 placeholder_text: str = DEFAULT_PLACEHOLDER_TEXT):
        """Initialize recording controller.

        Args:
            credential_store: Slot holding the transcription credential
            audio_capture: Microphone capture
            transcription_client: Client for the transcription service
            publisher: Where state snapshots are published
            placeholder_text: Transcript shown before the first completion
        """
        self.credential_store = credential_store
        self.audio_capture = audio_capture
        self.transcription_client = transcription_client
        self.publisher = publisher or RecordingStatePublisher()

        self.status = RecordingStatus.IDLE
        self.transcript = placeholder_text
        self.outcome: Optional[TranscriptOutcome] = None
        self.credential_prompt_visible = False
        self.session: Optional[RecordingSession] = None
        self._credential: Optional[Credential] = None

    def get_state(self) -> RecordingState:
        """Snapshot of everything presentation needs."""
        error = self.outcome if self.outcome and not self.outcome.succeeded else None
        return RecordingState(
            status=self.status,
            transcript=self.transcript,
            error_message=error.message if error else None,
            error_kind=error.error_kind if error else None,
            credential_prompt_visible=self.credential_prompt_visible,
            session_id=self.session.session_id if self.session else None,
        )

    def _set_status(self, status: RecordingStatus) -> None:
        self.status = status
        self.publisher.publish_state(self.get_state())

    async def toggle_recording(self) -> RecordingState:
        """Start a session when idle, or stop and transcribe when capturing."""
        if self.status == RecordingStatus.CAPTURING:
            await self._stop_and_transcribe()
        elif self.status in (RecordingStatus.REQUESTING, RecordingStatus.TRANSCRIBING):
            logger.warning(f"Ignoring toggle while {self.status.value}")
        elif self.status == RecordingStatus.AWAITING_CREDENTIAL:
            logger.debug("Credential prompt already showing")
        else:
            credential = self.credential_store.get()
            if credential is None:
                logger.info("No credential stored, prompting")
                self.credential_prompt_visible = True
                self._set_status(RecordingStatus.AWAITING_CREDENTIAL)
            else:
                await self._start_capture(credential)
        return self.get_state()

    async def submit_credential(self, value: str) -> RecordingState:
        """Store a credential and, if the prompt was showing, start recording."""
        try:
            credential = self.credential_store.set(value)
        except InvalidCredential as e:
            logger.info(f"Rejected credential submission: {e}")
            return self.get_state()

        if self.status != RecordingStatus.AWAITING_CREDENTIAL:
            logger.info("Credential updated; it will be used for the next session")
            return self.get_state()

        self.credential_prompt_visible = False
        await self._start_capture(credential)
        return self.get_state()

    async def _start_capture(self, credential: Credential) -> None:
        self.session = RecordingSession(status=RecordingStatus.REQUESTING)
        self._credential = credential
        logger.info(f"Starting session {self.session.session_id}")
        self._set_status(RecordingStatus.REQUESTING)

        try:
            await self.audio_capture.start()
        except CaptureError as e:
            self._fail(e)
            return
        except Exception as e:
            logger.exception("Unexpected error starting capture")
            self._fail(DeviceUnavailable(f"Microphone unavailable: {e}"))
            return

        self.session.status = RecordingStatus.CAPTURING
        self._set_status(RecordingStatus.CAPTURING)

    async def _stop_and_transcribe(self) -> None:
        # Status changes before the first await so re-entrant toggles are rejected
        self.session.status = RecordingStatus.TRANSCRIBING
        self._set_status(RecordingStatus.TRANSCRIBING)

        try:
            payload = await self.audio_capture.stop()
        except CaptureError as e:
            self._fail(e)
            return
        except Exception as e:
            logger.exception("Unexpected error stopping capture")
            self._fail(DeviceUnavailable(f"Microphone failed to stop: {e}"))
            return

        if payload is None:
            logger.warning("Capture was not running when stopped; submitting empty payload")
            payload = b''
        self.session.payload_bytes = len(payload)

        try:
            result = await self.transcription_client.transcribe(payload, self._credential)
        except TranscriptionError as e:
            self._fail(e)
            return
        except Exception as e:
            logger.exception("Unexpected error during transcription")
            self._fail(TransportFailure(f"Transcription failed: {e}"))
            return

        self._complete(result.text)

    def _complete(self, text: str) -> None:
        logger.info(f"Session {self.session.session_id} completed: {len(text)} characters")
        self.session.status = RecordingStatus.COMPLETED
        self.session.transcript = text
        self.transcript = text
        self.outcome = TranscriptOutcome(text=text)
        self._set_status(RecordingStatus.COMPLETED)
        self._set_status(RecordingStatus.IDLE)

    def _fail(self, error: VoiceScribeError) -> None:
        logger.error(f"Session {self.session.session_id} failed ({error.kind.value}): {error.message}")
        self.session.status = RecordingStatus.FAILED
        self.session.error = error
        self.outcome = TranscriptOutcome(error_kind=error.kind, message=error.message)
        self._set_status(RecordingStatus.FAILED)
        self._set_status(RecordingStatus.IDLE)

    async def shutdown(self) -> None:
        """Release the microphone if a session is capturing."""
        if self.status == RecordingStatus.CAPTURING:
            logger.info(f"Abandoning session {self.session.session_id} on shutdown")
            try:
                await self.audio_capture.release()
            except Exception as e:
                logger.error(f"Error releasing microphone on shutdown: {e}")
            self.session.status = RecordingStatus.IDLE
            self._set_status(RecordingStatus.IDLE)
