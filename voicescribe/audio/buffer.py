"""Append-only audio buffer for one recording session."""

import time
import logging
import threading
from typing import List
from ..models.audio import AudioFrame

logger = logging.getLogger(__name__)


class SessionAudioBuffer:
    """Thread-safe buffer that keeps every chunk of a session in arrival order.

    Chunks are appended from the audio callback thread and drained once, on the
    event loop, when the session stops.
    """

    def __init__(self):
        self.frames: List[AudioFrame] = []
        self.lock = threading.Lock()
        self.total_bytes = 0
        self.frame_counter = 0
        self.start_time = None
        self.drained = False

    def add_audio_chunk(self, audio_data: bytes) -> None:
        """Append a chunk to the buffer."""
        if not audio_data:
            return

        current_time = time.time()

        with self.lock:
            if self.drained:
                logger.warning("Dropping audio chunk delivered after drain")
                return

            if self.start_time is None:
                self.start_time = current_time

            self.frames.append(AudioFrame(
                data=bytes(audio_data),
                timestamp=current_time,
                frame_number=self.frame_counter
            ))
            self.frame_counter += 1
            self.total_bytes += len(audio_data)

    def drain(self) -> bytes:
        """Concatenate all chunks into one payload and close the buffer."""
        with self.lock:
            self.drained = True
            payload = b''.join(frame.data for frame in self.frames)
            logger.debug(f"Drained audio buffer: {len(self.frames)} frames, {len(payload)} bytes")
            self.frames = []
            return payload
