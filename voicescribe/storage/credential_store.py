"""Durable storage for the transcription-service credential."""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Any, Optional

from ..exceptions import InvalidCredential
from ..models.credential import Credential

logger = logging.getLogger(__name__)

DEFAULT_SLOT = "transcription_api_key"


class CredentialStore(ABC):
    """A single named slot holding the credential."""

    @abstractmethod
    def get(self) -> Optional[Credential]:
        """Read the stored credential, or None if the slot is unset."""

    @abstractmethod
    def set(self, value: str) -> Credential:
        """Persist a new credential, replacing any prior value.

        Raises:
            InvalidCredential: if the value is empty or contains control characters
        """

    @staticmethod
    def _validate(value: Optional[str]) -> Credential:
        if value is None or not value.strip():
            raise InvalidCredential()
        value = value.strip()
        # Sent verbatim in an HTTP header
        if any(ord(ch) < 32 or ord(ch) == 127 for ch in value):
            raise InvalidCredential("API key must not contain control characters")
        return Credential(value)


class InMemoryCredentialStore(CredentialStore):
    """Credential slot that lives only as long as the process."""

    def __init__(self, initial: Optional[str] = None):
        self._credential = self._validate(initial) if initial else None

    def get(self) -> Optional[Credential]:
        return self._credential

    def set(self, value: str) -> Credential:
        self._credential = self._validate(value)
        return self._credential


class FileCredentialStore(CredentialStore):
    """Credential slot persisted in a JSON file.

    Other keys already present in the file are preserved on write.
    """

    def __init__(self, path: str, slot: str = DEFAULT_SLOT):
        """Initialize the store.

        Args:
            path: JSON file holding the slot
            slot: Key under which the credential is stored
        """
        self.path = Path(path).expanduser()
        self.slot = slot
        logger.info(f"FileCredentialStore initialized: {self.path} (slot '{slot}')")

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error reading credential file {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.error(f"Credential file {self.path} does not hold a JSON object")
            return {}
        return data

    def get(self) -> Optional[Credential]:
        value = self._load().get(self.slot)
        if not isinstance(value, str) or not value.strip():
            return None
        try:
            return self._validate(value)
        except InvalidCredential as e:
            logger.error(f"Ignoring stored credential in {self.path}: {e}")
            return None

    def set(self, value: str) -> Credential:
        credential = self._validate(value)

        data = self._load()
        data[self.slot] = credential.value

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)

        logger.info(f"Credential saved to {self.path}: {credential.masked()}")
        return credential
