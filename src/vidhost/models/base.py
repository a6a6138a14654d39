"""Shared base model definitions for vidhost domain objects."""

from __future__ import annotations

from typing import Any

from bson import ObjectId
from pydantic import BaseModel, ConfigDict


class VidhostBaseModel(BaseModel):
    """Base model configured for vidhost-wide defaults.

    Stored documents carry ``_id`` which is exposed as ``id``; unknown document
    fields are ignored so older records still load.
    """

    model_config = ConfigDict(extra="ignore", validate_assignment=True, populate_by_name=True)


def stringify_object_id(value: Any) -> Any:
    """Convert BSON ObjectIds to their hex string form."""

    if isinstance(value, ObjectId):
        return str(value)
    return value


__all__ = ["VidhostBaseModel", "stringify_object_id"]
