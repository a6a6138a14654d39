"""Service wiring shared by CLI commands."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from rich.console import Console

from vidhost.config.settings import Settings, get_settings
from vidhost.db.connection import Database
from vidhost.services.catalog import PublishedVideoCatalog
from vidhost.services.media import LocalMediaStorage, MediaStorage
from vidhost.services.videos import VideoService


@dataclass(slots=True)
class Services:
    """Services bound to one open database handle."""

    database: Database
    videos: VideoService
    catalog: PublishedVideoCatalog


@dataclass(slots=True)
class ServiceFactory:
    """Builds the database handle and media provider used by CLI commands."""

    settings: Settings
    database_factory: Callable[[], Database]
    media_factory: Callable[[], MediaStorage]

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ServiceFactory":
        settings = settings or get_settings()
        return cls(
            settings=settings,
            database_factory=lambda: Database.from_settings(settings),
            media_factory=lambda: LocalMediaStorage(settings=settings),
        )

    @contextmanager
    def open(self, console: Console) -> Iterator[Services]:
        """Connect the database for the duration of one command."""

        database = self.database_factory().connect()
        try:
            yield Services(
                database=database,
                videos=VideoService(database, self.media_factory(), settings=self.settings, console=console),
                catalog=PublishedVideoCatalog(database, console=console),
            )
        finally:
            database.close()


__all__ = ["ServiceFactory", "Services"]
