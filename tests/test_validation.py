"""Tests for identifier helpers (utils/validation.py)."""

from __future__ import annotations

import pytest
from bson import ObjectId

from vidhost.exceptions import ValidationError
from vidhost.utils.validation import derive_provider_id, parse_object_id, resolve_provider_id


class TestParseObjectId:
    def test_accepts_hex_string(self) -> None:
        value = ObjectId()
        assert parse_object_id(str(value)) == value

    def test_accepts_object_id(self) -> None:
        value = ObjectId()
        assert parse_object_id(value) is value

    @pytest.mark.parametrize("value", [None, "", "  ", "123", "zzzzzzzzzzzzzzzzzzzzzzzz"])
    def test_rejects_malformed(self, value: object) -> None:
        with pytest.raises(ValidationError):
            parse_object_id(value)

    def test_label_in_message(self) -> None:
        with pytest.raises(ValidationError, match="video id"):
            parse_object_id("", label="video id")


class TestProviderIds:
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://res.example.com/video/upload/v1700/abc123.mp4", "abc123"),
            ("https://res.example.com/image/upload/v1700/thumb_9.png", "thumb_9"),
            ("https://cdn.example.com/media/noext", "noext"),
            ("https://cdn.example.com/media/with%20space.jpg?x=1", "with space"),
        ],
    )
    def test_derive_from_url(self, url: str, expected: str) -> None:
        assert derive_provider_id(url) == expected

    def test_derive_rejects_url_without_path(self) -> None:
        with pytest.raises(ValidationError):
            derive_provider_id("https://cdn.example.com/")

    def test_recorded_id_wins(self) -> None:
        assert resolve_provider_id("recorded", "https://cdn.example.com/media/other.mp4") == "recorded"

    def test_falls_back_to_url(self) -> None:
        assert resolve_provider_id(None, "https://cdn.example.com/media/other.mp4") == "other"
