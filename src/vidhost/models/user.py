"""Pydantic models describing video owners."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from vidhost.models.base import VidhostBaseModel, stringify_object_id


class User(VidhostBaseModel):
    """Domain model representing a document in the ``users`` collection.

    Users are owned by an external account subsystem; vidhost only reads them to
    validate ownership and to embed an :class:`OwnerProjection` in read models.
    """

    id: Optional[str] = Field(default=None, alias="_id")
    username: str = Field(min_length=1)
    full_name: str = ""
    email: str = ""
    avatar: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def normalise_object_ids(cls, value: object) -> object:
        return stringify_object_id(value)


class OwnerProjection(VidhostBaseModel):
    """Minimal, display-safe view of a user embedded into read models."""

    id: Optional[str] = Field(default=None, alias="_id")
    username: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    avatar: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def normalise_object_ids(cls, value: object) -> object:
        return stringify_object_id(value)

    @property
    def is_empty(self) -> bool:
        return self.id is None


__all__ = ["OwnerProjection", "User"]
