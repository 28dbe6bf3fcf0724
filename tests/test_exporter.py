"""Unit tests for exporter utilities."""

import json
from datetime import datetime, timezone

import pytest

from lyntfeed.core.exporter import save_json, to_dict, to_json
from lyntfeed.models.item import ItemReadResult, ItemView


NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def result() -> ItemReadResult:
    root = ItemView(id="1", author_id="u1", content="root", created_at=NOW, author_handle="alice")
    return ItemReadResult(
        id="2",
        author_id="u2",
        content="leaf",
        is_repost=True,
        parent_id="1",
        views=3,
        created_at=NOW,
        referenced_lynts=[root],
    )


class TestToDict:
    """Test dictionary conversion."""

    def test_camel_case_keys(self, result):
        data = to_dict(result)
        assert data["authorId"] == "u2"
        assert data["isRepost"] is True
        assert data["parentId"] == "1"
        assert "author_id" not in data

    def test_chain_under_referenced_lynts(self, result):
        data = to_dict(result)
        assert [i["id"] for i in data["referencedLynts"]] == ["1"]
        assert data["referencedLynts"][0]["authorHandle"] == "alice"

    def test_datetime_serialized(self, result):
        data = to_dict(result)
        assert isinstance(data["createdAt"], str)


class TestToJson:
    """Test JSON string conversion."""

    def test_to_json_is_valid_json(self, result):
        parsed = json.loads(to_json(result))
        assert parsed["id"] == "2"
        assert parsed["views"] == 3

    def test_round_trip_by_alias(self, result):
        restored = ItemReadResult.model_validate_json(to_json(result))
        assert restored == result


class TestSaveJson:
    """Test file output."""

    def test_save_creates_parent_dirs(self, result, tmp_path):
        path = save_json(result, tmp_path / "nested" / "lynt.json")
        assert path.exists()
        assert json.loads(path.read_text(encoding="utf-8"))["content"] == "leaf"
