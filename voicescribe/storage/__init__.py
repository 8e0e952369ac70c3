"""Durable storage for VoiceScribe."""

from .credential_store import CredentialStore, FileCredentialStore, InMemoryCredentialStore

__all__ = [
    "CredentialStore",
    "FileCredentialStore",
    "InMemoryCredentialStore",
]
