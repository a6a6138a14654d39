"""Tests for vidhost pydantic models (models/)."""

from __future__ import annotations

import pydantic
import pytest
from bson import ObjectId

from vidhost.exceptions import ExternalStorageError, NotFoundError, PersistenceError, ValidationError
from vidhost.models.envelope import ApiResponse, status_for
from vidhost.models.user import OwnerProjection
from vidhost.models.video import PublishedVideo, Video


def _video(**overrides: object) -> Video:
    fields: dict[str, object] = {
        "title": "Title",
        "video_file": "https://cdn.example.com/a.mp4",
        "thumbnail": "https://cdn.example.com/a.png",
        "owner": ObjectId("65a1b2c3d4e5f60718293a4b"),
    }
    fields.update(overrides)
    return Video.model_validate(fields)


class TestVideo:
    def test_object_ids_become_strings(self) -> None:
        video = _video(_id=ObjectId("65a1b2c3d4e5f60718293a4c"))

        assert video.id == "65a1b2c3d4e5f60718293a4c"
        assert video.owner == "65a1b2c3d4e5f60718293a4b"

    def test_defaults(self) -> None:
        video = _video()

        assert video.description == ""
        assert video.views == 0
        assert video.duration == 0.0
        assert video.provider_id is None

    def test_description_alone_is_enough(self) -> None:
        assert _video(title="", description="Only text").description == "Only text"

    def test_title_or_description_required(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            _video(title="  ", description="")

    @pytest.mark.parametrize("field", ["video_file", "thumbnail"])
    def test_locations_cannot_be_empty(self, field: str) -> None:
        with pytest.raises(pydantic.ValidationError):
            _video(**{field: ""})

    def test_negative_values_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            _video(duration=-0.5)
        with pytest.raises(pydantic.ValidationError):
            _video(views=-1)

    def test_unknown_document_fields_are_ignored(self) -> None:
        assert not hasattr(_video(__v=0), "__v")


class TestReadModel:
    def test_owner_defaults_to_empty_projection(self) -> None:
        entry = PublishedVideo.model_validate({"_id": ObjectId(), "thumbnail": "https://cdn.example.com/t.png"})

        assert entry.owner == OwnerProjection()
        assert entry.owner.is_empty

    def test_owner_projection_from_document(self) -> None:
        owner_id = ObjectId()
        owner = OwnerProjection.model_validate({"_id": owner_id, "username": "bob"})

        assert owner.id == str(owner_id)
        assert not owner.is_empty


class TestEnvelope:
    @pytest.mark.parametrize(
        ("error", "status"),
        [
            (ValidationError("bad"), 400),
            (NotFoundError("missing"), 404),
            (ExternalStorageError("provider"), 502),
            (PersistenceError("db"), 500),
            (RuntimeError("other"), 500),
        ],
    )
    def test_status_mapping(self, error: Exception, status: int) -> None:
        assert status_for(error) == status

    def test_ok_envelope(self) -> None:
        payload = ApiResponse.ok({"id": "1"}, "done").model_dump()

        assert payload == {"status_code": 200, "data": {"id": "1"}, "message": "done", "success": True}

    def test_error_envelope_carries_provider_ids(self) -> None:
        response = ApiResponse.from_error(ExternalStorageError("cleanup incomplete", provider_ids=["a", "b"]))

        assert response.status_code == 502
        assert response.success is False
        assert response.data == {"provider_ids": ["a", "b"]}
        assert response.message == "cleanup incomplete"
