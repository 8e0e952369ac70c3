"""VoiceScribe: record from the microphone and transcribe with a remote service."""

__version__ = "0.1.0"
