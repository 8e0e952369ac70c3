"""Credential model for the transcription service."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Credential:
    """Bearer token authorizing calls to the transcription service."""
    value: str = field(repr=False)

    def masked(self) -> str:
        """Return a form of the token that is safe to log."""
        if len(self.value) <= 8:
            return "*" * len(self.value)
        return f"{self.value[:3]}...{self.value[-4:]}"

    def __str__(self) -> str:
        return self.masked()
