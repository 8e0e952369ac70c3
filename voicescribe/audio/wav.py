"""WAV framing for raw PCM payloads."""

import io
import wave


def encode_wav(pcm_data: bytes, sample_rate: int = 16000, channels: int = 1, sample_width: int = 2) -> bytes:
    """Wrap raw PCM frames in a WAV container without altering the samples.

    Args:
        pcm_data: Raw interleaved PCM frames
        sample_rate: Sample rate in Hz
        channels: Number of audio channels
        sample_width: Bytes per sample

    Returns:
        WAV file contents
    """
    out = io.BytesIO()
    with wave.open(out, 'wb') as wf:
        wf.setnchannels(channels)
        wf.setsampwidth(sample_width)
        wf.setframerate(sample_rate)
        wf.writeframes(pcm_data)
    return out.getvalue()
