"""Microphone capture with a start/stop lifecycle and per-session buffering."""

import asyncio
import errno
import logging
from datetime import datetime
from threading import Event
from typing import Optional

import pyaudio

from .buffer import SessionAudioBuffer
from ..exceptions import CaptureError, DeviceUnavailable, PermissionDenied
from ..models.audio import AudioStats, CaptureState

logger = logging.getLogger(__name__)


def classify_device_error(error: Exception) -> CaptureError:
    """Map a PortAudio/OS failure to the capture error the user sees."""
    if isinstance(error, PermissionError) or getattr(error, "errno", None) in (errno.EACCES, errno.EPERM):
        return PermissionDenied(f"Microphone permission denied: {error}")
    return DeviceUnavailable(f"Microphone unavailable: {error}")


class AudioCapture:
    """Exclusive microphone access that accumulates one session's audio.

    The stream runs in PortAudio callback mode: chunks arrive on the audio
    thread and are appended to the session buffer in arrival order. Opening
    and stopping the device block, so both run in the default executor.
    """

    def __init__(
        self,
        sample_rate: int = 16000,
        chunk_size: int = 1024,
        channels: int = 1,
        format: int = pyaudio.paInt16,
    ):
        """Initialize audio capture with specified parameters.

        Args:
            sample_rate: Audio sample rate (16kHz for Whisper compatibility)
            chunk_size: Size of each audio chunk in samples
            channels: Number of audio channels (1 for mono)
            format: Audio format (16-bit signed int)
        """
        self.sample_rate = sample_rate
        self.chunk_size = chunk_size
        self.channels = channels
        self.format = format
        self.sample_width = pyaudio.get_sample_size(format)

        self.state = CaptureState.IDLE
        self.stop_event = Event()
        self.buffer: Optional[SessionAudioBuffer] = None

        # Statistics tracking
        self.start_time: Optional[datetime] = None
        self.total_chunks = 0

        # Device handles
        self.pyaudio_instance: Optional[pyaudio.PyAudio] = None
        self.stream: Optional[pyaudio.Stream] = None

    @property
    def is_recording(self) -> bool:
        return self.state == CaptureState.CAPTURING

    async def start(self) -> None:
        """Acquire the microphone and begin buffering chunks.

        Raises:
            PermissionDenied: if access to the microphone is refused
            DeviceUnavailable: if no usable input device exists, or the
                microphone is already held by this capture
        """
        if self.state != CaptureState.IDLE:
            raise DeviceUnavailable(f"Microphone is busy ({self.state.value})")

        logger.info("Requesting microphone")
        self.state = CaptureState.REQUESTING
        self.stop_event.clear()
        self.total_chunks = 0

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._open_stream)
        except Exception as e:
            self.buffer = None
            try:
                self._release_device()
            except Exception as release_error:
                logger.warning(f"Error releasing microphone after failed start: {release_error}")
            self.state = CaptureState.IDLE
            error = classify_device_error(e)
            logger.error(f"Failed to start audio capture: {error}")
            raise error from e

        self.start_time = datetime.now()
        self.state = CaptureState.CAPTURING
        logger.info(f"Audio capture started: {self.sample_rate}Hz, "
                    f"{self.chunk_size} samples/chunk, {self.channels} channel(s)")

    async def stop(self) -> Optional[bytes]:
        """Stop the microphone and hand over the session payload.

        Returns:
            All chunks concatenated in arrival order, or None if not capturing

        Raises:
            DeviceUnavailable: if the device fails while stopping; the device
                is still released
        """
        if self.state != CaptureState.CAPTURING:
            logger.debug(f"Ignoring stop while {self.state.value}")
            return None

        logger.info("Stopping audio capture")
        self.state = CaptureState.DRAINING
        self.stop_event.set()

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._release_device)
        except Exception as e:
            self.buffer = None
            self.state = CaptureState.IDLE
            logger.error(f"Error stopping audio stream: {e}")
            raise DeviceUnavailable(f"Microphone failed to stop: {e}") from e

        buffer, self.buffer = self.buffer, None
        payload = buffer.drain() if buffer is not None else b''
        self.state = CaptureState.IDLE
        logger.info(f"Audio capture stopped. Total chunks: {self.total_chunks}, payload: {len(payload)} bytes")
        return payload

    async def release(self) -> None:
        """Release the microphone, discarding any buffered audio."""
        if self.state != CaptureState.CAPTURING:
            return

        self.state = CaptureState.DRAINING
        self.stop_event.set()
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._release_device)
        finally:
            self.buffer = None
            self.state = CaptureState.IDLE

    def _open_stream(self) -> None:
        self.pyaudio_instance = pyaudio.PyAudio()
        # Raises OSError when there is no default input device
        device_info = self.pyaudio_instance.get_default_input_device_info()
        logger.debug(f"Default input device: {device_info}")

        self.stream = self.pyaudio_instance.open(
            format=self.format,
            channels=self.channels,
            rate=self.sample_rate,
            input=True,
            frames_per_buffer=self.chunk_size,
            start=False,
            stream_callback=self._on_audio_chunk,
        )
        self.buffer = SessionAudioBuffer()
        self.stream.start_stream()

    def _on_audio_chunk(self, in_data, frame_count, time_info, status_flags):
        """PortAudio callback: runs on the audio thread for every chunk."""
        if status_flags:
            logger.debug(f"Audio callback status flags: {status_flags}")

        buffer = self.buffer
        if buffer is not None and in_data:
            buffer.add_audio_chunk(in_data)
            self.total_chunks += 1

        # The chunk delivered alongside the stop request is kept
        if self.stop_event.is_set():
            return (None, pyaudio.paComplete)
        return (None, pyaudio.paContinue)

    def _release_device(self) -> None:
        stream, self.stream = self.stream, None
        pyaudio_instance, self.pyaudio_instance = self.pyaudio_instance, None
        try:
            if stream is not None:
                try:
                    # Blocks until the last callback has returned
                    stream.stop_stream()
                finally:
                    stream.close()
        finally:
            if pyaudio_instance is not None:
                pyaudio_instance.terminate()
                logger.info("Microphone released")

    def get_recording_stats(self) -> AudioStats:
        """Get current recording statistics."""
        duration = 0.0
        if self.start_time and self.is_recording:
            duration = (datetime.now() - self.start_time).total_seconds()

        buffer = self.buffer
        return AudioStats(
            is_recording=self.is_recording,
            duration_seconds=duration,
            buffer_size=buffer.total_bytes if buffer is not None else 0,
            sample_rate=self.sample_rate,
            chunk_size=self.chunk_size,
            total_chunks=self.total_chunks,
        )

    def __del__(self):
        """Ensure the device is released on deletion."""
        if getattr(self, "stream", None) is not None or getattr(self, "pyaudio_instance", None) is not None:
            self._release_device()
