"""Pytest configuration and fixtures for VoiceScribe tests."""

import asyncio
from datetime import datetime
import logging
import tempfile
from typing import List, Optional
from unittest.mock import Mock, patch

import numpy as np
import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from voicescribe.models.credential import Credential
from voicescribe.models.session import RecordingStatus
from voicescribe.models.transcription import TranscriptionResult
from voicescribe.services.recording_controller import RecordingController
from voicescribe.services.state_publisher import RecordingStatePublisher
from voicescribe.storage.credential_store import InMemoryCredentialStore
from voicescribe.transcription.base import AbstractTranscriptionClient


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

TEST_STATE_TOPIC = "test.recording.state"


@pytest.fixture
def temp_data_dir():
    """Create temporary directory for test data."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


@pytest.fixture
def sample_audio_chunk():
    """Generate a sample audio chunk for testing."""
    # Generate 1024 samples of 16-bit audio (sine wave)
    sample_rate = 16000
    duration = 1024 / sample_rate  # ~0.064 seconds
    freq = 440  # A4 note

    t = np.linspace(0, duration, 1024, False)
    wave_data = np.sin(2 * np.pi * freq * t)

    # Convert to 16-bit integers
    audio_data = (wave_data * 32767).astype(np.int16)
    return audio_data.tobytes()


@pytest.fixture
def mock_pyaudio():
    """Mock PyAudio for testing without actual audio hardware."""
    with patch('pyaudio.PyAudio') as mock_pyaudio_class:
        mock_pyaudio_instance = Mock()
        mock_stream = Mock()

        # Configure mock stream
        mock_stream.start_stream.return_value = None
        mock_stream.stop_stream.return_value = None
        mock_stream.close.return_value = None

        # Configure mock PyAudio instance
        mock_pyaudio_instance.open.return_value = mock_stream
        mock_pyaudio_instance.terminate.return_value = None
        mock_pyaudio_instance.get_default_input_device_info.return_value = {
            "index": 0,
            "name": "Test Microphone",
            "maxInputChannels": 1,
        }

        # Configure mock PyAudio class
        mock_pyaudio_class.return_value = mock_pyaudio_instance

        yield {
            'class': mock_pyaudio_class,
            'instance': mock_pyaudio_instance,
            'stream': mock_stream
        }


@pytest.fixture
def deliver_chunks(mock_pyaudio):
    """Feed chunks through the stream callback registered with the mock device."""
    def _deliver(chunks):
        callback = mock_pyaudio['instance'].open.call_args.kwargs['stream_callback']
        return [callback(chunk, len(chunk) // 2, {}, 0) for chunk in chunks]
    return _deliver


class FakeAudioCapture:
    """Stands in for AudioCapture; returns preset chunks on stop."""

    def __init__(self, chunks=(), start_error: Optional[Exception] = None,
                 stop_error: Optional[Exception] = None):
        self.chunks = list(chunks)
        self.start_error = start_error
        self.stop_error = stop_error
        self.stop_gate: Optional[asyncio.Event] = None
        self.is_recording = False
        self.start_calls = 0
        self.stop_calls = 0
        self.release_calls = 0

    async def start(self) -> None:
        self.start_calls += 1
        if self.start_error:
            raise self.start_error
        self.is_recording = True

    async def stop(self) -> Optional[bytes]:
        self.stop_calls += 1
        if not self.is_recording:
            return None
        if self.stop_gate is not None:
            await self.stop_gate.wait()
        self.is_recording = False
        if self.stop_error:
            raise self.stop_error
        return b''.join(self.chunks)

    async def release(self) -> None:
        self.release_calls += 1
        self.is_recording = False


class FakeTranscriptionClient(AbstractTranscriptionClient):
    """Records submitted payloads and returns a preset text or error."""

    def __init__(self, text: str = "hello world", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.gate: Optional[asyncio.Event] = None
        self.calls: List[tuple] = []

    async def transcribe(self, payload: bytes, credential: Credential) -> TranscriptionResult:
        self.calls.append((payload, credential))
        if self.gate is not None:
            await self.gate.wait()
        if self.error:
            raise self.error
        return TranscriptionResult(
            text=self.text,
            processing_time=0.01,
            timestamp=datetime.now(),
            service="fake",
            model="fake-1",
            payload_bytes=len(payload),
        )


class StateRecorder:
    """Collects every state published on a topic."""

    def __init__(self):
        self.states = []

    def on_state(self, state):
        self.states.append(state)

    @property
    def statuses(self) -> List[RecordingStatus]:
        return [state.status for state in self.states]


@pytest.fixture
def state_publisher():
    return RecordingStatePublisher(TEST_STATE_TOPIC)


@pytest.fixture
def state_recorder(state_publisher):
    """Subscribe a recorder to the test topic for the duration of a test."""
    recorder = StateRecorder()
    state_publisher.subscribe(recorder.on_state)
    yield recorder
    state_publisher.unsubscribe(recorder.on_state)


@pytest.fixture
def credential_store():
    return InMemoryCredentialStore()


@pytest.fixture
def fake_capture():
    return FakeAudioCapture()


@pytest.fixture
def fake_client():
    return FakeTranscriptionClient()


@pytest.fixture
def controller(credential_store, fake_capture, fake_client, state_publisher, state_recorder):
    return RecordingController(
        credential_store=credential_store,
        audio_capture=fake_capture,
        transcription_client=fake_client,
        publisher=state_publisher,
    )


class FakeTranscriptionService:
    """Local HTTP endpoint mimicking the transcription API."""

    PATH = "/v1/audio/transcriptions"

    def __init__(self):
        self.status = 200
        self.body = {"text": "hello world"}
        self.requests = []
        self.server: Optional[TestServer] = None

    @property
    def url(self) -> str:
        return str(self.server.make_url(self.PATH))

    async def handle(self, request: web.Request) -> web.Response:
        form = await request.post()
        upload = form["file"]
        self.requests.append({
            "authorization": request.headers.get("Authorization"),
            "model": form.get("model"),
            "language": form.get("language"),
            "response_format": form.get("response_format"),
            "filename": upload.filename,
            "content_type": upload.content_type,
            "file": upload.file.read(),
        })
        if isinstance(self.body, (dict, list)):
            return web.json_response(self.body, status=self.status)
        if isinstance(self.body, bytes):
            return web.Response(body=self.body, status=self.status)
        return web.Response(text=self.body, status=self.status)


@pytest_asyncio.fixture
async def transcription_service():
    """Run a fake transcription service on a local port."""
    service = FakeTranscriptionService()
    app = web.Application()
    app.router.add_post(FakeTranscriptionService.PATH, service.handle)

    service.server = TestServer(app)
    await service.server.start_server()
    yield service
    await service.server.close()
