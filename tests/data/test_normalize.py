"""Tests for record normalization."""

import json
from itertools import count

import pytest

from cuaderno.data.normalize import (
    is_valid_document,
    normalize_category,
    normalize_dataset,
    normalize_item,
    validate_document,
)
from cuaderno.errors import InvalidDatasetError

NOW = "2024-05-01T10:00:00.000Z"


@pytest.fixture
def ids():
    """Deterministic id factory: id-1, id-2, ..."""
    counter = count(1)
    return lambda: f"id-{next(counter)}"


class TestNormalizeItem:
    def test_fills_missing_fields(self, ids):
        item = normalize_item({}, now=NOW, id_factory=ids)
        assert item.id == "id-1"
        assert item.key == ""
        assert item.value == ""
        assert item.note == ""
        assert item.created_at == NOW
        assert item.updated_at == NOW

    def test_keeps_present_fields(self, ids):
        raw = {
            "id": "abc",
            "key": "Pizza",
            "value": "Mushroom",
            "note": "n",
            "createdAt": "2024-01-01T00:00:00.000Z",
            "updatedAt": "2024-01-02T00:00:00.000Z",
        }
        item = normalize_item(raw, now=NOW, id_factory=ids)
        assert item.to_dict() == raw

    def test_does_not_fix_updated_before_created(self, ids):
        raw = {"id": "x", "createdAt": "2024-02-01T00:00:00.000Z", "updatedAt": "2024-01-01T00:00:00.000Z"}
        item = normalize_item(raw, now=NOW, id_factory=ids)
        assert item.updated_at < item.created_at

    def test_empty_id_gets_new_one(self, ids):
        assert normalize_item({"id": ""}, now=NOW, id_factory=ids).id == "id-1"

    def test_non_string_scalars_become_strings(self, ids):
        item = normalize_item({"id": 7, "key": 42, "value": 3.5}, now=NOW, id_factory=ids)
        assert item.id == "7"
        assert item.key == "42"
        assert item.value == "3.5"

    def test_non_mapping_is_treated_as_empty(self, ids):
        item = normalize_item("garbage", now=NOW, id_factory=ids)
        assert item.id == "id-1"
        assert item.key == ""


class TestNormalizeCategory:
    def test_defaults(self, ids):
        category = normalize_category({}, now=NOW, id_factory=ids)
        assert category.id == "id-1"
        assert category.name == "Sin nombre"
        assert category.emoji == "📁"
        assert category.items == []

    def test_falsy_name_and_emoji_get_defaults(self, ids):
        category = normalize_category({"id": "c", "name": "", "emoji": None}, now=NOW, id_factory=ids)
        assert category.name == "Sin nombre"
        assert category.emoji == "📁"

    @pytest.mark.parametrize("items", [None, "x", 5, {"a": 1}])
    def test_non_list_items_become_empty(self, ids, items):
        category = normalize_category({"id": "c", "items": items}, now=NOW, id_factory=ids)
        assert category.items == []

    def test_non_mapping_items_are_dropped(self, ids):
        raw = {"id": "c", "items": ["nope", 3, {"id": "i", "key": "k", "value": "v"}]}
        category = normalize_category(raw, now=NOW, id_factory=ids)
        assert [item.id for item in category.items] == ["i"]

    def test_items_keep_order(self, ids):
        raw = {"id": "c", "items": [{"id": "b"}, {"id": "a"}, {"id": "c"}]}
        category = normalize_category(raw, now=NOW, id_factory=ids)
        assert [item.id for item in category.items] == ["b", "a", "c"]


class TestNormalizeDataset:
    def test_empty_input(self, ids):
        dataset = normalize_dataset({}, now=NOW, id_factory=ids)
        assert dataset.version == 1
        assert dataset.created_at == NOW
        assert dataset.updated_at == NOW
        assert dataset.categories == []

    @pytest.mark.parametrize("raw", [None, [], "text", 12])
    def test_never_raises_on_garbage(self, ids, raw):
        dataset = normalize_dataset(raw, now=NOW, id_factory=ids)
        assert dataset.categories == []

    def test_non_list_categories_become_empty(self, ids):
        dataset = normalize_dataset({"categories": {"a": 1}}, now=NOW, id_factory=ids)
        assert dataset.categories == []

    def test_keeps_version(self, ids):
        assert normalize_dataset({"version": 3}, now=NOW, id_factory=ids).version == 3

    @pytest.mark.parametrize("version", ["1", 1.0, True, None])
    def test_non_integer_version_becomes_one(self, ids, version):
        assert normalize_dataset({"version": version}, now=NOW, id_factory=ids).version == 1

    def test_nested_defaults(self, ids):
        raw = {"categories": [{"name": "Comida", "items": [{"key": "Pizza"}]}]}
        dataset = normalize_dataset(raw, now=NOW, id_factory=ids)
        category = dataset.categories[0]
        assert category.name == "Comida"
        assert category.emoji == "📁"
        assert category.items[0].key == "Pizza"
        assert category.items[0].value == ""
        assert category.items[0].created_at == NOW

    def test_duplicate_category_ids_reassigned(self, ids):
        raw = {"categories": [{"id": "c"}, {"id": "c"}]}
        dataset = normalize_dataset(raw, now=NOW, id_factory=ids)
        assert dataset.categories[0].id == "c"
        assert dataset.categories[1].id == "id-1"

    def test_duplicate_item_ids_across_categories_reassigned(self, ids):
        raw = {
            "categories": [
                {"id": "a", "items": [{"id": "dup", "key": "first"}]},
                {"id": "b", "items": [{"id": "dup", "key": "second"}]},
            ]
        }
        dataset = normalize_dataset(raw, now=NOW, id_factory=ids)
        first = dataset.categories[0].items[0]
        second = dataset.categories[1].items[0]
        assert first.id == "dup"
        assert second.id != "dup"
        assert second.key == "second"

    def test_unknown_fields_are_dropped(self, ids):
        raw = {"extra": 1, "categories": [{"id": "c", "color": "red", "items": []}]}
        data = normalize_dataset(raw, now=NOW, id_factory=ids).to_dict()
        assert "extra" not in data
        assert "color" not in data["categories"][0]

    def test_idempotent(self, ids):
        raw = {
            "categories": [
                {"name": "Comida", "items": [{"key": "Pizza", "value": "Mushroom"}, "junk"]},
                {"id": "x", "emoji": "🎵", "items": None},
                {"id": "x", "items": [{"id": 5, "createdAt": "2024-02-01T00:00:00.000Z"}]},
            ]
        }
        once = normalize_dataset(raw, now=NOW, id_factory=ids).to_dict()
        twice = normalize_dataset(
            once, now="2099-01-01T00:00:00.000Z", id_factory=ids
        ).to_dict()
        assert json.dumps(once, sort_keys=True) == json.dumps(twice, sort_keys=True)


class TestValidation:
    def test_valid_document(self):
        assert is_valid_document({"categories": []}) is True

    @pytest.mark.parametrize("raw", [None, [], {}, {"categories": None}, {"categories": {}}, "x"])
    def test_invalid_documents(self, raw):
        assert is_valid_document(raw) is False

    def test_validate_raises(self):
        with pytest.raises(InvalidDatasetError):
            validate_document({"version": 1})

    def test_validate_returns_document(self):
        doc = {"categories": []}
        assert validate_document(doc) is doc
