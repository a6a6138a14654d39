"""Tests for the published-video read model (services/catalog.py)."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Callable
from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import OperationFailure

from vidhost.db import VIDEOS_COLLECTION
from vidhost.db.connection import Database
from vidhost.exceptions import PersistenceError
from vidhost.models.user import User
from vidhost.models.video import Video
from vidhost.services.catalog import PublishedVideoCatalog, build_published_pipeline
from vidhost.services.videos import VideoService

EXPECTED_KEYS = {"id", "thumbnail", "title", "duration", "views", "owner", "created_at"}
OWNER_KEYS = {"id", "username", "full_name", "email", "avatar"}


def _insert_raw(database: Database, **fields: Any) -> ObjectId:
    document = {
        "title": "Raw",
        "description": "secret description",
        "video_file": "https://cdn.example.com/media/raw.mp4",
        "thumbnail": "https://cdn.example.com/media/raw.png",
        "duration": 12.0,
        "views": 0,
        "is_published": True,
        "provider_id": "raw",
        "thumbnail_provider_id": "raw-thumb",
        "created_at": datetime(2024, 1, 1, 12, 0, 0),
    }
    document.update(fields)
    return database.collection(VIDEOS_COLLECTION).insert_one(document).inserted_id


class TestPublishFilter:
    def test_only_published_videos_are_listed(
        self,
        catalog: PublishedVideoCatalog,
        service: VideoService,
        make_video: Callable[..., Video],
    ) -> None:
        first, hidden, third = make_video(), make_video(), make_video()
        service.toggle_publish(hidden.id)

        entries = catalog.list_published()

        assert len(entries) == 2
        assert {entry.id for entry in entries} == {first.id, third.id}

    def test_empty_store_returns_empty_list(self, catalog: PublishedVideoCatalog) -> None:
        assert catalog.list_published() == []

    def test_no_published_videos_returns_empty_list(
        self, catalog: PublishedVideoCatalog, service: VideoService, make_video: Callable[..., Video]
    ) -> None:
        video = make_video()
        service.toggle_publish(video.id)

        assert catalog.list_published() == []


class TestProjection:
    def test_entries_carry_only_display_fields(
        self, catalog: PublishedVideoCatalog, make_video: Callable[..., Video], owner: User
    ) -> None:
        video = make_video(title="Shown", duration=90)

        (entry,) = catalog.list_published()
        payload = entry.model_dump()

        assert set(payload) == EXPECTED_KEYS
        assert set(payload["owner"]) == OWNER_KEYS
        assert entry.thumbnail == video.thumbnail
        assert entry.title == "Shown"
        assert entry.duration == 90
        assert entry.owner.id == owner.id
        assert entry.owner.username == "alice"
        assert entry.owner.email == "alice@example.com"

    def test_owner_private_fields_are_not_embedded(
        self, catalog: PublishedVideoCatalog, database: Database, owner: User
    ) -> None:
        database.collection("users").update_one(
            {"_id": ObjectId(owner.id)}, {"$set": {"password": "hash", "refresh_token": "tok"}}
        )
        _insert_raw(database, owner=ObjectId(owner.id))

        (entry,) = catalog.list_published()

        dumped = entry.model_dump()
        assert "password" not in dumped["owner"]
        assert "refresh_token" not in dumped["owner"]
        assert "description" not in dumped
        assert "video_file" not in dumped
        assert "provider_id" not in dumped
        assert "is_published" not in dumped

    def test_pipeline_projects_display_fields_only(self) -> None:
        project = next(stage["$project"] for stage in build_published_pipeline() if "$project" in stage)

        assert "description" not in project
        assert "video_file" not in project
        assert "provider_id" not in project
        assert "is_published" not in project
        assert project["owner.username"] == 1


class TestDanglingOwner:
    def test_unresolved_owner_yields_empty_projection(
        self, catalog: PublishedVideoCatalog, database: Database, make_video: Callable[..., Video]
    ) -> None:
        make_video()
        orphan_id = _insert_raw(database, owner=ObjectId())

        entries = {entry.id: entry for entry in catalog.list_published()}

        assert len(entries) == 2
        orphan = entries[str(orphan_id)]
        assert orphan.owner.is_empty
        assert orphan.owner.username is None


class TestOrdering:
    def test_newest_first_and_stable(self, catalog: PublishedVideoCatalog, database: Database, owner: User) -> None:
        base = datetime(2024, 5, 1, 8, 0, 0)
        older = _insert_raw(database, owner=ObjectId(owner.id), created_at=base)
        newer = _insert_raw(database, owner=ObjectId(owner.id), created_at=base + timedelta(hours=1))
        newest = _insert_raw(database, owner=ObjectId(owner.id), created_at=base + timedelta(days=1))

        first = [entry.id for entry in catalog.list_published()]
        second = [entry.id for entry in catalog.list_published()]

        assert first == [str(newest), str(newer), str(older)]
        assert first == second


class TestErrors:
    def test_driver_failure_is_wrapped(self, quiet_console: Any) -> None:
        collection = MagicMock()
        collection.aggregate.side_effect = OperationFailure("aggregation failed")
        database = MagicMock(spec=Database)
        database.collection.return_value = collection

        with pytest.raises(PersistenceError):
            PublishedVideoCatalog(database, console=quiet_console).list_published()
