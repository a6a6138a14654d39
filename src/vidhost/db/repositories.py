"""Generic repository abstractions for MongoDB-backed persistence."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, Generic, Iterable, Mapping, Optional, Sequence, Type, TypeVar

from bson import ObjectId
from pydantic import ValidationError as ModelValidationError
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from vidhost.db.connection import Database
from vidhost.exceptions import NotFoundError, PersistenceError
from vidhost.models.base import VidhostBaseModel
from vidhost.utils.validation import parse_object_id

ModelT = TypeVar("ModelT", bound=VidhostBaseModel)

SortSpec = Sequence[tuple[str, int]]


class BaseRepository(Generic[ModelT]):
    """Reusable building block for collection-specific repositories."""

    collection_name: ClassVar[str]
    model_type: ClassVar[Type[ModelT]]
    insert_fields: ClassVar[Sequence[str]]
    update_fields: ClassVar[Sequence[str]]
    entity_label: ClassVar[str] = "record"
    auto_timestamp_field: ClassVar[Optional[str]] = "updated_at"
    created_timestamp_field: ClassVar[Optional[str]] = "created_at"

    def __init__(self, database: Database) -> None:
        self._database = database

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def insert(self, model: ModelT) -> ModelT:
        """Persist a new document and return it with its generated identifier."""

        payload = self._serialize(model, fields=self.insert_fields, include_none=False)
        now = self._now()
        if self.created_timestamp_field:
            payload[self.created_timestamp_field] = now
        if self.auto_timestamp_field:
            payload[self.auto_timestamp_field] = now

        try:
            result = self._collection().insert_one(payload)
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to insert {self.entity_label}: {exc}") from exc
        return self.get_by_id(result.inserted_id)

    def update_by_id(self, record_id: object, changes: Mapping[str, object]) -> ModelT:
        """Apply a partial ``$set`` to a document and return the updated model.

        Only fields listed in ``update_fields`` are written; other fields are
        left untouched and are not re-validated.
        """

        payload = {
            field: self._transform_value(field, value)
            for field, value in changes.items()
            if field in self.update_fields
        }
        if not payload:
            raise PersistenceError(f"No updatable fields provided for {self.entity_label}.")
        if self.auto_timestamp_field:
            payload[self.auto_timestamp_field] = self._now()

        return self._find_one_and_update(record_id, {"$set": payload})

    def increment(self, record_id: object, field: str, amount: int = 1) -> ModelT:
        """Atomically increment a numeric field and return the updated model."""

        return self._find_one_and_update(record_id, {"$inc": {field: amount}})

    def get_by_id(self, record_id: object) -> ModelT:
        """Return a single document by its primary key."""

        object_id = self._normalise_identifier(record_id)
        document = self._find_one({"_id": object_id})
        if document is None:
            raise NotFoundError(f"No {self.entity_label} found with id {object_id}.")
        return self._to_model(document)

    def exists(self, record_id: object) -> bool:
        """Return whether a document with the given primary key exists."""

        return self._find_one({"_id": self._normalise_identifier(record_id)}, projection={"_id": 1}) is not None

    def fetch_one(self, criteria: Mapping[str, object]) -> ModelT:
        """Return the first document matching the provided filter."""

        document = self._find_one(criteria)
        if document is None:
            raise NotFoundError(f"No {self.entity_label} matched {dict(criteria)!r}.")
        return self._to_model(document)

    def fetch_all(
        self,
        criteria: Optional[Mapping[str, object]] = None,
        *,
        sort: Optional[SortSpec] = None,
    ) -> list[ModelT]:
        """Return all documents, optionally filtered and sorted."""

        try:
            cursor = self._collection().find(dict(criteria or {}))
            if sort:
                cursor = cursor.sort(list(sort))
            documents = list(cursor)
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to query {self.entity_label} records: {exc}") from exc
        return [self._to_model(document) for document in documents]

    def delete_by_id(self, record_id: object) -> None:
        """Delete a document identified by its primary key."""

        object_id = self._normalise_identifier(record_id)
        try:
            result = self._collection().delete_one({"_id": object_id})
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to delete {self.entity_label} {object_id}: {exc}") from exc
        if result.deleted_count == 0:
            raise NotFoundError(f"No {self.entity_label} found with id {object_id}.")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _serialize(
        self,
        model: ModelT,
        *,
        fields: Iterable[str],
        include_none: bool,
    ) -> Dict[str, object]:
        raw_values = model.model_dump(mode="python")
        payload: Dict[str, object] = {}

        for field in fields:
            if field not in raw_values:
                continue
            value = raw_values[field]
            if value is None and not include_none:
                continue
            payload[field] = self._transform_value(field, value)

        return payload

    def _transform_value(self, field: str, value: object) -> object:  # noqa: D401
        """Hook for subclasses to customise value transformations."""

        return value

    def _to_model(self, document: Mapping[str, Any]) -> ModelT:
        try:
            return self.model_type.model_validate(dict(document))
        except ModelValidationError as exc:
            raise PersistenceError(f"Stored {self.entity_label} is malformed: {exc}") from exc

    def _find_one(
        self,
        criteria: Mapping[str, object],
        *,
        projection: Optional[Mapping[str, object]] = None,
    ) -> Optional[Mapping[str, Any]]:
        try:
            return self._collection().find_one(dict(criteria), projection)
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to read {self.entity_label}: {exc}") from exc

    def _find_one_and_update(self, record_id: object, update: Mapping[str, object]) -> ModelT:
        object_id = self._normalise_identifier(record_id)
        try:
            document = self._collection().find_one_and_update(
                {"_id": object_id},
                dict(update),
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to update {self.entity_label} {object_id}: {exc}") from exc
        if document is None:
            raise NotFoundError(f"No {self.entity_label} found with id {object_id}.")
        return self._to_model(document)

    def _collection(self) -> Collection:
        return self._database.collection(self.collection_name)

    def _normalise_identifier(self, value: object) -> ObjectId:
        return parse_object_id(value, label=f"{self.entity_label} id")

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)


__all__ = ["BaseRepository", "SortSpec"]
