"""Pydantic models describing stored videos and their public read model."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator, model_validator

from vidhost.models.base import VidhostBaseModel, stringify_object_id
from vidhost.models.user import OwnerProjection


class Video(VidhostBaseModel):
    """Domain model representing a document in the ``videos`` collection.

    A video is only created once both its media file and thumbnail are stored by
    the media provider, so ``video_file`` and ``thumbnail`` are never empty.
    ``provider_id`` and ``thumbnail_provider_id`` address the stored objects for
    later removal; older records may lack them, in which case they are derived
    from the stored URLs.
    """

    id: Optional[str] = Field(default=None, alias="_id")
    title: str = ""
    description: str = ""
    video_file: str = Field(min_length=1)
    thumbnail: str = Field(min_length=1)
    duration: float = Field(default=0.0, ge=0.0)
    views: int = Field(default=0, ge=0)
    is_published: bool = True
    owner: str = Field(min_length=1)
    provider_id: Optional[str] = None
    thumbnail_provider_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("id", "owner", mode="before")
    @classmethod
    def normalise_object_ids(cls, value: object) -> object:
        return stringify_object_id(value)

    @model_validator(mode="after")
    def require_title_or_description(self) -> "Video":
        if not (self.title.strip() or self.description.strip()):
            raise ValueError("A video requires a title or a description.")
        return self


class PublishedVideo(VidhostBaseModel):
    """Entry of the public listing; never persisted."""

    id: str = Field(alias="_id")
    thumbnail: str
    title: str = ""
    duration: float = 0.0
    views: int = 0
    owner: OwnerProjection = Field(default_factory=OwnerProjection)
    created_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def normalise_object_ids(cls, value: object) -> object:
        return stringify_object_id(value)


__all__ = ["PublishedVideo", "Video"]
