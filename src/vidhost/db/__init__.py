"""Database utilities and connection helpers for vidhost."""

from __future__ import annotations

from vidhost.db.connection import Database

USERS_COLLECTION = "users"
VIDEOS_COLLECTION = "videos"

__all__ = ["Database", "USERS_COLLECTION", "VIDEOS_COLLECTION"]
