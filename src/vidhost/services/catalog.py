"""Published-video read model built with a single aggregation pass."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError as ModelValidationError
from pymongo.errors import PyMongoError
from rich.console import Console

from vidhost.db import USERS_COLLECTION, VIDEOS_COLLECTION
from vidhost.db.connection import Database
from vidhost.exceptions import PersistenceError
from vidhost.models.video import PublishedVideo

OWNER_FIELDS = ("_id", "username", "full_name", "email", "avatar")
LISTING_FIELDS = ("_id", "thumbnail", "title", "duration", "views", "created_at")


def build_published_pipeline() -> List[Dict[str, Any]]:
    """Return the aggregation pipeline producing the public listing.

    Stages: keep published videos, join the owner document, keep videos whose
    owner is missing, project the display fields and a minimal owner, then sort
    newest first with ``_id`` as a tiebreaker.
    """

    projection: Dict[str, Any] = {field: 1 for field in LISTING_FIELDS}
    projection.update({f"owner.{field}": 1 for field in OWNER_FIELDS})

    return [
        {"$match": {"is_published": True}},
        {
            "$lookup": {
                "from": USERS_COLLECTION,
                "localField": "owner",
                "foreignField": "_id",
                "as": "owner",
            }
        },
        {"$unwind": {"path": "$owner", "preserveNullAndEmptyArrays": True}},
        {"$project": projection},
        {"$sort": {"created_at": -1, "_id": -1}},
    ]


class PublishedVideoCatalog:
    """Read-only view over published videos for public browsing surfaces."""

    def __init__(self, database: Database, *, console: Optional[Console] = None) -> None:
        self._database = database
        self._console = console or Console()

    def list_published(self) -> List[PublishedVideo]:
        """Return every published video with its owner projection.

        An empty store yields an empty list. A video whose owner cannot be
        resolved is still listed, with an empty owner projection.
        """

        try:
            rows = list(self._database.collection(VIDEOS_COLLECTION).aggregate(build_published_pipeline()))
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to list published videos: {exc}") from exc

        entries = [self._shape(row) for row in rows]
        self._console.log(f"[blue]Catalog:[/blue] listed {len(entries)} published videos")
        return entries

    @staticmethod
    def _shape(row: Mapping[str, Any]) -> PublishedVideo:
        owner = row.get("owner")
        if not isinstance(owner, Mapping) or "_id" not in owner:
            owner = {}
        payload = {field: row[field] for field in LISTING_FIELDS if field in row}
        payload["owner"] = {field: owner[field] for field in OWNER_FIELDS if field in owner}
        try:
            return PublishedVideo.model_validate(payload)
        except ModelValidationError as exc:
            raise PersistenceError(f"Stored video {row.get('_id')} is malformed: {exc}") from exc


__all__ = ["LISTING_FIELDS", "OWNER_FIELDS", "PublishedVideoCatalog", "build_published_pipeline"]
