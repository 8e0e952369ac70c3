"""Client for an OpenAI-compatible speech-to-text endpoint."""

import asyncio
import json
import logging
import time
from datetime import datetime
from typing import Optional

import aiohttp

from .base import AbstractTranscriptionClient
from ..audio.wav import encode_wav
from ..exceptions import EmptyRecording, InvalidResponse, TransportFailure, Unauthorized
from ..models.credential import Credential
from ..models.transcription import TranscriptionResult

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.openai.com/v1/audio/transcriptions"
DEFAULT_MODEL = "whisper-1"


class WhisperTranscriptionClient(AbstractTranscriptionClient):
    """Sends a recording to the transcription service in a single request."""

    def __init__(self,
                 api_url: str = DEFAULT_API_URL,
                 model: str = DEFAULT_MODEL,
                 language: Optional[str] = None,
                 sample_rate: int = 16000,
                 channels: int = 1,
                 sample_width: int = 2):
        """Initialize the client.

        Args:
            api_url: Transcription endpoint
            model: Model identifier sent with every request
            language: Optional ISO-639-1 hint for the service
            sample_rate: Sample rate of the PCM payloads
            channels: Channel count of the PCM payloads
            sample_width: Bytes per sample of the PCM payloads
        """
        self.api_url = api_url
        self.model = model
        self.language = language
        self.sample_rate = sample_rate
        self.channels = channels
        self.sample_width = sample_width
        self.service_name = "OpenAI Whisper"

        logger.info(f"WhisperTranscriptionClient initialized: {api_url} (model: {model})")

    def _build_form(self, payload: bytes) -> aiohttp.FormData:
        form = aiohttp.FormData()
        form.add_field(
            "file",
            encode_wav(payload, self.sample_rate, self.channels, self.sample_width),
            filename="recording.wav",
            content_type="audio/wav",
        )
        form.add_field("model", self.model)
        form.add_field("response_format", "json")
        if self.language:
            form.add_field("language", self.language)
        return form

    async def transcribe(self, payload: bytes, credential: Credential) -> TranscriptionResult:
        if not payload:
            logger.warning("Refusing to submit an empty recording")
            raise EmptyRecording()

        start_time = time.time()
        headers = {"Authorization": f"Bearer {credential.value}"}
        logger.debug(f"Submitting {len(payload)} bytes to {self.api_url} with credential {credential.masked()}")

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(self.api_url, headers=headers, data=self._build_form(payload)) as response:
                    if not 200 <= response.status < 300:
                        error_text = await response.text(errors="replace")
                        logger.error(f"Transcription API error: {response.status} - {error_text[:200]}")
                        raise Unauthorized(
                            f"Transcription failed (HTTP {response.status})",
                            status=response.status,
                        )
                    body = await response.read()
        except aiohttp.ClientError as e:
            logger.error(f"Transcription request failed: {e}")
            raise TransportFailure(f"Could not reach the transcription service: {e}") from e
        except asyncio.TimeoutError as e:
            logger.error("Transcription request timed out")
            raise TransportFailure("Transcription request timed out") from e
        except ValueError as e:
            # aiohttp refuses header values it considers unsafe
            logger.error(f"Transcription request could not be built: {e}")
            raise TransportFailure(f"Could not send the transcription request: {e}") from e

        text = self._parse_text(body)
        processing_time = time.time() - start_time
        logger.info(f"Transcription received: {len(text)} characters in {processing_time:.2f}s")

        return TranscriptionResult(
            text=text,
            processing_time=processing_time,
            timestamp=datetime.now(),
            service=self.service_name,
            model=self.model,
            payload_bytes=len(payload),
        )

    @staticmethod
    def _parse_text(body: bytes) -> str:
        try:
            data = json.loads(body)
        except ValueError as e:
            logger.error(f"Transcription response is not JSON: {body[:200]!r}")
            raise InvalidResponse() from e

        text = data.get("text") if isinstance(data, dict) else None
        if not isinstance(text, str):
            logger.error(f"Transcription response has no text field: {data!r:.200}")
            raise InvalidResponse()
        return text
