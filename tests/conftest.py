"""Shared pytest fixtures for the vidhost test suite.

Guidelines
----------
* MongoDB is replaced by an in-process ``mongomock`` client.
* The media provider is a ``MagicMock`` unless a test exercises
  :class:`LocalMediaStorage` directly against ``tmp_path``.
"""

from __future__ import annotations

from itertools import count
from pathlib import Path
from typing import Any, Callable
from unittest.mock import MagicMock

import mongomock
import pytest
from rich.console import Console

from vidhost.config.settings import Settings
from vidhost.db.connection import Database
from vidhost.db.user_repository import UserRepository
from vidhost.models.user import User
from vidhost.models.video import Video
from vidhost.services.catalog import PublishedVideoCatalog
from vidhost.services.media import StoredMedia
from vidhost.services.videos import VideoService


@pytest.fixture()
def quiet_console() -> Console:
    return Console(quiet=True)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        mongodb_uri="mongodb://localhost:27017",
        db_name="vidhost-test",
        media_root=tmp_path / "media",
        media_base_url="https://cdn.example.com/media",
        default_publish=True,
    )


@pytest.fixture()
def database() -> Database:
    return Database(client=mongomock.MongoClient(), name="vidhost-test")


@pytest.fixture()
def owner(database: Database) -> User:
    return UserRepository(database).insert(
        User(username="Alice", full_name="Alice Example", email="alice@example.com", avatar="https://img/alice.png")
    )


@pytest.fixture()
def media() -> MagicMock:
    """Mock media provider returning sequential provider ids."""

    sequence = count(1)

    def _store(local_path: Any) -> StoredMedia:
        provider_id = f"obj{next(sequence)}"
        suffix = Path(str(local_path)).suffix
        return StoredMedia(url=f"https://cdn.example.com/media/{provider_id}{suffix}", provider_id=provider_id)

    provider = MagicMock()
    provider.store.side_effect = _store
    provider.remove.return_value = True
    return provider


@pytest.fixture()
def service(database: Database, media: MagicMock, settings: Settings, quiet_console: Console) -> VideoService:
    return VideoService(database, media, settings=settings, console=quiet_console)


@pytest.fixture()
def catalog(database: Database, quiet_console: Console) -> PublishedVideoCatalog:
    return PublishedVideoCatalog(database, console=quiet_console)


@pytest.fixture()
def make_video(service: VideoService, owner: User) -> Callable[..., Video]:
    """Create a stored video through the record store."""

    sequence = count(1)

    def _make(**overrides: Any) -> Video:
        index = next(sequence)
        fields: dict[str, Any] = {
            "title": f"Video {index}",
            "description": f"Description {index}",
            "video_file": f"https://cdn.example.com/media/vid{index}.mp4",
            "thumbnail": f"https://cdn.example.com/media/thumb{index}.png",
            "duration": 60.0 * index,
            "owner_id": owner.id,
            "provider_id": f"vid{index}",
            "thumbnail_provider_id": f"thumb{index}",
        }
        fields.update(overrides)
        return service.create(**fields)

    return _make
