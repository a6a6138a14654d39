"""Validation helpers for document identifiers and provider handles."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Optional
from urllib.parse import unquote, urlparse

from bson import ObjectId

from vidhost.exceptions import ValidationError


def parse_object_id(value: object, *, label: str = "id") -> ObjectId:
    """Validate and convert a document identifier into an :class:`ObjectId`."""

    if isinstance(value, ObjectId):
        return value
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{label} is required.")
    candidate = str(value).strip()
    if not ObjectId.is_valid(candidate):
        raise ValidationError(f"Invalid {label}: {value!r}")
    return ObjectId(candidate)


def derive_provider_id(url: str) -> str:
    """Derive a provider identifier from a stored media URL.

    The identifier is the last path segment without its file extension, e.g.
    ``https://cdn.example.com/v1/abc123.mp4`` yields ``abc123``. Only used for
    records that predate explicit provider identifiers.
    """

    path = unquote(urlparse(url.strip()).path)
    stem = PurePosixPath(path).stem
    if not stem:
        raise ValidationError(f"Cannot derive a provider identifier from {url!r}")
    return stem


def resolve_provider_id(recorded: Optional[str], url: str) -> str:
    """Prefer the recorded provider identifier, falling back to the URL."""

    if recorded:
        return recorded
    return derive_provider_id(url)


__all__ = ["derive_provider_id", "parse_object_id", "resolve_provider_id"]
