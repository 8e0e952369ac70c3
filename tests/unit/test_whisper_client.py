"""Unit tests for WhisperTranscriptionClient against a local fake service."""

import io
import wave

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer as AiohttpTestServer

from voicescribe.exceptions import EmptyRecording, InvalidResponse, TransportFailure, Unauthorized
from voicescribe.models.credential import Credential
from voicescribe.transcription.whisper_client import WhisperTranscriptionClient

PAYLOAD = b'\x10\x00\x20\x00' * 400
CREDENTIAL = Credential("sk-test123")


@pytest.fixture
def make_client(transcription_service):
    def _make(**kwargs):
        return WhisperTranscriptionClient(api_url=transcription_service.url, **kwargs)
    return _make


@pytest.mark.unit
class TestWhisperTranscriptionClient:

    @pytest.mark.asyncio
    async def test_successful_transcription(self, make_client, transcription_service):
        result = await make_client().transcribe(PAYLOAD, CREDENTIAL)

        assert result.text == "hello world"
        assert result.model == "whisper-1"
        assert result.payload_bytes == len(PAYLOAD)
        assert result.processing_time >= 0
        assert len(transcription_service.requests) == 1

    @pytest.mark.asyncio
    async def test_request_carries_bearer_and_model(self, make_client, transcription_service):
        await make_client(model="whisper-large").transcribe(PAYLOAD, CREDENTIAL)

        request = transcription_service.requests[0]
        assert request["authorization"] == "Bearer sk-test123"
        assert request["model"] == "whisper-large"
        assert request["response_format"] == "json"
        assert request["language"] is None
        assert request["filename"] == "recording.wav"
        assert request["content_type"] == "audio/wav"

    @pytest.mark.asyncio
    async def test_payload_sent_unchanged_in_wav_container(self, make_client, transcription_service):
        await make_client(sample_rate=22050).transcribe(PAYLOAD, CREDENTIAL)

        uploaded = transcription_service.requests[0]["file"]
        with wave.open(io.BytesIO(uploaded), 'rb') as wf:
            assert wf.getframerate() == 22050
            assert wf.getnchannels() == 1
            assert wf.getsampwidth() == 2
            assert wf.readframes(wf.getnframes()) == PAYLOAD

    @pytest.mark.asyncio
    async def test_language_hint(self, make_client, transcription_service):
        await make_client(language="de").transcribe(PAYLOAD, CREDENTIAL)

        assert transcription_service.requests[0]["language"] == "de"

    @pytest.mark.asyncio
    async def test_empty_transcript_is_valid(self, make_client, transcription_service):
        transcription_service.body = {"text": ""}

        result = await make_client().transcribe(PAYLOAD, CREDENTIAL)
        assert result.text == ""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 401, 403, 429, 500, 503])
    async def test_non_success_status_is_rejection(self, make_client, transcription_service, status):
        transcription_service.status = status
        transcription_service.body = {"error": {"message": "nope"}}

        with pytest.raises(Unauthorized) as exc_info:
            await make_client().transcribe(PAYLOAD, CREDENTIAL)

        assert exc_info.value.status == status
        assert str(status) in exc_info.value.message
        assert len(transcription_service.requests) == 1

    @pytest.mark.asyncio
    async def test_undecodable_error_body_is_rejection(self, make_client, transcription_service):
        transcription_service.status = 500
        transcription_service.body = b'\xff\xfe\xfa bad gateway'

        with pytest.raises(Unauthorized) as exc_info:
            await make_client().transcribe(PAYLOAD, CREDENTIAL)

        assert exc_info.value.status == 500

    @pytest.mark.asyncio
    async def test_unsendable_credential_is_transport_failure(self, make_client, transcription_service):
        with pytest.raises(TransportFailure):
            await make_client().transcribe(PAYLOAD, Credential("sk-a\nb"))

        assert transcription_service.requests == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        "not json at all",
        {"transcript": "hello"},
        {"text": 42},
        ["hello"],
    ])
    async def test_unexpected_body_is_invalid_response(self, make_client, transcription_service, body):
        transcription_service.body = body

        with pytest.raises(InvalidResponse):
            await make_client().transcribe(PAYLOAD, CREDENTIAL)

    @pytest.mark.asyncio
    async def test_empty_payload_rejected_locally(self, make_client, transcription_service):
        with pytest.raises(EmptyRecording):
            await make_client().transcribe(b'', CREDENTIAL)

        assert transcription_service.requests == []

    @pytest.mark.asyncio
    async def test_unreachable_service_is_transport_failure(self):
        server = AiohttpTestServer(web.Application())
        await server.start_server()
        url = str(server.make_url("/v1/audio/transcriptions"))
        await server.close()

        client = WhisperTranscriptionClient(api_url=url)
        with pytest.raises(TransportFailure):
            await client.transcribe(PAYLOAD, CREDENTIAL)
