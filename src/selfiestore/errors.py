"""Typed errors raised by the selfie store."""

from __future__ import annotations

from pathlib import Path


class SelfieStoreError(Exception):
    """Base exception for all selfie store errors."""


class PersistenceError(SelfieStoreError):
    """Raised when a record or image cannot be written to the store directory."""


class EnumerationError(SelfieStoreError):
    """Raised when the store directory cannot be listed."""


class EncodingError(SelfieStoreError):
    """Raised when an image cannot be encoded; keeps the offending payload."""

    def __init__(self, payload: object, reason: str | None = None) -> None:
        self.payload = payload
        message = f"Cannot encode image payload of type {type(payload).__name__}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class DecodingError(SelfieStoreError):
    """Raised by the codec when stored bytes are not a readable image."""


class DeletionError(SelfieStoreError):
    """Raised when an existing file in the store cannot be removed."""

    def __init__(self, path: Path, reason: str | None = None) -> None:
        self.path = path
        message = f"Cannot delete {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
