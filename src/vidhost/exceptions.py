"""Typed error hierarchy surfaced by the vidhost core.

Hierarchy
---------
VidhostError
├── ValidationError
├── NotFoundError
├── PersistenceError
└── ExternalStorageError
"""

from __future__ import annotations

from typing import Optional, Sequence


class VidhostError(Exception):
    """Base exception for all vidhost errors."""

    def __init__(self, message: str, *, hint: Optional[str] = None) -> None:
        super().__init__(message)
        self.hint: Optional[str] = hint


class ValidationError(VidhostError):
    """Raised when the caller supplied insufficient or malformed input."""


class NotFoundError(VidhostError):
    """Raised when a referenced video or user does not exist."""


class PersistenceError(VidhostError):
    """Raised when the document store fails to complete an operation."""


class ExternalStorageError(VidhostError):
    """Raised when the media provider fails to store or remove a file.

    ``provider_ids`` lists the provider objects that may be left behind so the
    caller can retry the cleanup.
    """

    def __init__(
        self,
        message: str,
        *,
        provider_ids: Sequence[str] = (),
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.provider_ids: list[str] = list(provider_ids)


__all__ = [
    "ExternalStorageError",
    "NotFoundError",
    "PersistenceError",
    "ValidationError",
    "VidhostError",
]
