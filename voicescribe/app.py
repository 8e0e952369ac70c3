"""Application wiring for VoiceScribe."""

import sys
import logging
from pathlib import Path
from typing import Optional

from .audio.capture import AudioCapture
from .config import VoiceScribeConfig
from .models.ui import RecordingState
from .services.recording_controller import RecordingController
from .services.state_publisher import RecordingStatePublisher
from .storage.credential_store import CredentialStore, FileCredentialStore
from .transcription.whisper_client import WhisperTranscriptionClient

logger = logging.getLogger(__name__)


class VoiceScribeApp:
    """Builds the recording pipeline from configuration.

    Presentation layers drive it through ``toggle_recording`` and
    ``submit_credential`` and observe it by subscribing to the state topic.
    """

    def __init__(self, config_path: Optional[str] = None,
                 credential_store: Optional[CredentialStore] = None,
                 configure_logging: bool = True):
        self.config = VoiceScribeConfig(config_path)
        if configure_logging:
            setup_logging(self.config, self.config.get('logging.level', 'INFO'))

        sample_rate = self.config.get('audio.sample_rate', 16000)
        chunk_size = self.config.get('audio.chunk_size', 1024)
        channels = self.config.get('audio.channels', 1)
        logger.info(f"Audio settings: {sample_rate}Hz, {chunk_size} samples/chunk, {channels} channels")

        self.audio_capture = AudioCapture(
            sample_rate=sample_rate,
            chunk_size=chunk_size,
            channels=channels
        )
        self.transcription_client = WhisperTranscriptionClient(
            api_url=self.config.get('transcription.api_url'),
            model=self.config.get('transcription.model'),
            language=self.config.get('transcription.language'),
            sample_rate=sample_rate,
            channels=channels,
            sample_width=self.audio_capture.sample_width
        )
        self.credential_store = credential_store or FileCredentialStore(
            self.config.get_credential_store_path(),
            slot=self.config.get('credentials.slot')
        )
        self.publisher = RecordingStatePublisher(self.config.get('publication.topic'))
        self.controller = RecordingController(
            credential_store=self.credential_store,
            audio_capture=self.audio_capture,
            transcription_client=self.transcription_client,
            publisher=self.publisher,
            placeholder_text=self.config.get('publication.placeholder_text')
        )

    async def toggle_recording(self) -> RecordingState:
        return await self.controller.toggle_recording()

    async def submit_credential(self, value: str) -> RecordingState:
        return await self.controller.submit_credential(value)

    def get_state(self) -> RecordingState:
        return self.controller.get_state()

    async def shutdown(self) -> None:
        await self.controller.shutdown()
        logger.info("VoiceScribe shut down")


def setup_logging(config: VoiceScribeConfig, level: str = "INFO") -> None:
    """Set up logging configuration from YAML config."""
    log_file_path = config.get('logging.file_path', 'logs/voicescribe.log')
    console_output = config.get('logging.console_output', True)

    log_dir = Path(log_file_path).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    handlers = []

    # File handler - always write to file
    file_handler = logging.FileHandler(log_file_path)
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    file_handler.setFormatter(file_formatter)
    handlers.append(file_handler)

    # Console handler - only if enabled in config
    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.WARNING)
        console_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(console_formatter)
        handlers.append(console_handler)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    logger.info("=" * 50)
    logger.info("VoiceScribe starting up")
    logger.info(f"Log file: {log_file_path}")
    logger.info(f"Log level set to: {level}")
    logger.info("=" * 50)
