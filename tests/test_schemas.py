"""Tests for entry validation."""

import pytest

from vidiary.core.exceptions import ValidationException
from vidiary.models.schemas import VideoEntryCreate, validate_create, validate_update


class TestCreate:

    def test_defaults(self):
        fields = validate_create({"name": "Walk", "uri": "file:///a.mp4", "duration": 5.0})
        assert fields.description == ""
        assert fields.thumbnail_uri is None

    def test_description_may_be_null(self):
        fields = validate_create({"name": "Walk", "description": None, "uri": "file:///a.mp4", "duration": 5.0})
        assert fields.description is None

    def test_passes_through_model_instances(self):
        model = VideoEntryCreate(name="Walk", uri="file:///a.mp4", duration=5.0)
        assert validate_create(model) is model

    @pytest.mark.parametrize("data", [
        {"name": "", "uri": "file:///a.mp4", "duration": 5.0},
        {"name": "   ", "uri": "file:///a.mp4", "duration": 5.0},
        {"uri": "file:///a.mp4", "duration": 5.0},
        {"name": "Walk", "uri": "", "duration": 5.0},
        {"name": "Walk", "uri": "file:///a.mp4", "duration": 0},
        {"name": "Walk", "uri": "file:///a.mp4", "duration": 5.0, "rating": 3},
    ])
    def test_rejects_invalid(self, data):
        with pytest.raises(ValidationException):
            validate_create(data)

    def test_error_message_names_the_field(self):
        with pytest.raises(ValidationException) as exc_info:
            validate_create({"name": "", "uri": "file:///a.mp4", "duration": 5.0})
        assert "name" in exc_info.value.message


class TestUpdate:

    def test_changes_only_contains_set_fields(self):
        assert validate_update({"description": "new"}).changes() == {"description": "new"}

    def test_description_may_be_cleared(self):
        assert validate_update({"description": None}).changes() == {"description": None}

    @pytest.mark.parametrize("data", [
        {"name": None},
        {"name": ""},
        {"uri": None},
        {"duration": None},
        {"duration": -1},
        {"id": "other"},
        {"created_at": "2024-05-01T08:00:00.000Z"},
    ])
    def test_rejects_invalid(self, data):
        with pytest.raises(ValidationException):
            validate_update(data)
