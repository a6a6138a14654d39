"""Explicit MongoDB handle with clear init/teardown."""

from __future__ import annotations

from types import TracebackType
from typing import Any, Mapping, Optional, Type

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database as MongoDatabase
from pymongo.errors import PyMongoError

from vidhost.config.settings import Settings, get_settings
from vidhost.exceptions import PersistenceError

Document = Mapping[str, Any]


class Database:
    """Process-wide handle around a :class:`pymongo.MongoClient`.

    The handle is created once at startup, passed into repositories and
    services, and closed at shutdown. A pre-built client (for example a
    ``mongomock.MongoClient`` in tests) may be supplied instead of a URI.
    """

    def __init__(
        self,
        *,
        uri: Optional[str] = None,
        name: str,
        client: Optional[MongoClient] = None,
        server_selection_timeout_ms: int = 5000,
    ) -> None:
        if client is None and uri is None:
            raise ValueError("Either `uri` or `client` must be provided.")
        self._uri = uri
        self._name = name
        self._client: Optional[MongoClient] = client
        self._owns_client = client is None
        self._server_selection_timeout_ms = server_selection_timeout_ms

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "Database":
        """Build an unconnected handle from application settings."""

        settings = settings or get_settings()
        return cls(
            uri=settings.mongodb_uri,
            name=settings.db_name,
            server_selection_timeout_ms=settings.server_selection_timeout_ms,
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    def connect(self) -> "Database":
        """Open the client connection if it is not already open."""

        if self._client is not None:
            return self
        try:
            self._client = MongoClient(
                self._uri,
                serverSelectionTimeoutMS=self._server_selection_timeout_ms,
            )
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to connect to MongoDB: {exc}") from exc
        self._owns_client = True
        return self

    def close(self) -> None:
        """Close the underlying client when this handle opened it."""

        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    def collection(self, name: str) -> Collection:
        """Return a collection from the connected database."""

        return self._database()[name]

    def _database(self) -> MongoDatabase:
        if self._client is None:
            raise PersistenceError(
                "Database handle is not connected.",
                hint="Call `Database.connect()` before using repositories.",
            )
        return self._client[self._name]

    def __enter__(self) -> "Database":
        return self.connect()

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.close()


__all__ = ["Database", "Document"]
