"""Repository for interacting with the `videos` collection."""

from __future__ import annotations

from vidhost.db import VIDEOS_COLLECTION
from vidhost.db.connection import Database
from vidhost.db.repositories import BaseRepository
from vidhost.models.video import Video
from vidhost.utils.validation import parse_object_id


class VideoRepository(BaseRepository[Video]):
    """Data access object encapsulating video persistence logic."""

    collection_name = VIDEOS_COLLECTION
    model_type = Video
    entity_label = "video"
    insert_fields = (
        "title",
        "description",
        "video_file",
        "thumbnail",
        "duration",
        "views",
        "is_published",
        "owner",
        "provider_id",
        "thumbnail_provider_id",
    )
    # `is_published` is only written through `set_published`.
    update_fields = (
        "title",
        "description",
        "thumbnail",
        "thumbnail_provider_id",
    )

    def __init__(self, database: Database) -> None:
        super().__init__(database)

    def set_published(self, record_id: object, is_published: bool) -> Video:
        """Persist the publish flag without touching any other field."""

        return self._find_one_and_update(
            record_id,
            {"$set": {"is_published": is_published, "updated_at": self._now()}},
        )

    def _transform_value(self, field: str, value: object) -> object:
        if field == "owner" and value is not None:
            return parse_object_id(value, label="owner id")
        return super()._transform_value(field, value)


__all__ = ["VideoRepository"]
