"""Repository for reading the `users` collection."""

from __future__ import annotations

from vidhost.db import USERS_COLLECTION
from vidhost.db.connection import Database
from vidhost.db.repositories import BaseRepository
from vidhost.models.user import User


class UserRepository(BaseRepository[User]):
    """Data access object for video owners.

    Account management lives outside vidhost; inserts exist for seeding and tests.
    """

    collection_name = USERS_COLLECTION
    model_type = User
    entity_label = "user"
    insert_fields = ("username", "full_name", "email", "avatar")
    update_fields = ("full_name", "email", "avatar")

    def __init__(self, database: Database) -> None:
        super().__init__(database)

    def _transform_value(self, field: str, value: object) -> object:
        if field == "username" and isinstance(value, str):
            return value.strip().lower()
        return super()._transform_value(field, value)


__all__ = ["UserRepository"]
