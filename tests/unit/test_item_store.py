"""
Unit tests for the Item Store loader.

Tests per-category JSON loading and its tolerance of missing or
malformed documents and records.
"""

import json

import pytest

from minimal_pairs.item_store import Category, Item, ItemStore


def record(item_id, **overrides):
    data = {
        "id": item_id,
        "correct": "Ich helfe dir.",
        "incorrect": "Ich helfe dich.",
        "highlight": ["dir", "dich"],
        "explanation": "helfen + Dativ",
    }
    data.update(overrides)
    return data


@pytest.fixture
def write_category(tmp_path):
    def write(category, payload):
        path = tmp_path / f"{category.value}.json"
        if isinstance(payload, str):
            path.write_text(payload, encoding="utf-8")
        else:
            path.write_text(json.dumps(payload), encoding="utf-8")

    return write


@pytest.fixture
def data_dir(tmp_path, write_category):
    write_category(Category.DATIV_VERBEN, {"items": [record("dv-1"), record("dv-2")]})
    write_category(Category.PASSIV, {"items": [record("pv-1")]})
    return tmp_path


class TestCategory:
    def test_ten_categories(self):
        assert len(Category) == 10

    def test_display_names(self):
        assert Category.KASUS.display_name == "Kasus (Fälle)"
        assert Category.KONJUNKTIV_II.display_name == "Konjunktiv II"
        assert all(category.display_name for category in Category)

    def test_parse(self):
        assert Category.parse("dativ-verben") is Category.DATIV_VERBEN
        assert Category.parse("latein") is None


class TestItemFromDict:
    def test_category_attached_by_loader(self):
        item = Item.from_dict(record("dv-1"), Category.DATIV_VERBEN)
        assert item.category is Category.DATIV_VERBEN
        assert item.highlight == ("dir", "dich")

    def test_optional_fields_default(self):
        data = {"id": "x", "correct": "a", "incorrect": "b"}
        item = Item.from_dict(data, Category.KASUS)
        assert item.highlight == ()
        assert item.explanation == ""

    def test_missing_required_field(self):
        data = record("x")
        del data["incorrect"]
        with pytest.raises(KeyError):
            Item.from_dict(data, Category.KASUS)

    @pytest.mark.parametrize(
        "overrides",
        [{"id": 7}, {"correct": ""}, {"highlight": "dir"}, {"highlight": [1]}, {"explanation": 3}],
    )
    def test_wrong_types(self, overrides):
        with pytest.raises(TypeError):
            Item.from_dict(record("x", **overrides), Category.KASUS)

    def test_items_are_immutable(self):
        item = Item.from_dict(record("x"), Category.KASUS)
        with pytest.raises(AttributeError):
            item.correct = "changed"


class TestItemStoreLoad:
    def test_loads_available_categories(self, data_dir):
        store = ItemStore(data_dir)
        assert store.load() == 3
        assert [item.id for item in store] == ["dv-1", "dv-2", "pv-1"]
        assert store.get("pv-1").category is Category.PASSIV

    def test_missing_categories_contribute_nothing(self, data_dir):
        store = ItemStore(data_dir)
        store.load()
        counts = store.counts_by_category()
        assert counts[Category.DATIV_VERBEN] == 2
        assert counts[Category.KASUS] == 0

    def test_malformed_json_skipped(self, data_dir, write_category):
        write_category(Category.KASUS, "{oops")
        store = ItemStore(data_dir)
        assert store.load() == 3

    @pytest.mark.parametrize("payload", [[record("k-1")], {"items": "none"}, {"entries": []}])
    def test_wrong_document_shape_skipped(self, data_dir, write_category, payload):
        write_category(Category.KASUS, payload)
        store = ItemStore(data_dir)
        store.load()
        assert store.counts_by_category()[Category.KASUS] == 0

    def test_invalid_records_skipped(self, data_dir, write_category):
        write_category(
            Category.KASUS,
            {"items": [record("k-1"), {"id": "k-2"}, "text", record("k-3", highlight=None)]},
        )
        store = ItemStore(data_dir)
        store.load()
        assert [item.id for item in store.in_categories({Category.KASUS})] == ["k-1", "k-3"]

    def test_duplicate_ids_keep_first(self, data_dir, write_category):
        write_category(Category.KASUS, {"items": [record("dv-1", correct="other")]})
        store = ItemStore(data_dir)
        store.load()
        assert store.get("dv-1").category is Category.DATIV_VERBEN
        assert len(store) == 3

    def test_empty_directory(self, tmp_path):
        assert ItemStore(tmp_path).load() == 0

    def test_reload_replaces_items(self, data_dir):
        store = ItemStore(data_dir)
        store.load()
        (data_dir / "passiv.json").unlink()
        assert store.load() == 2
        assert "pv-1" not in store

    def test_bundled_sample_data(self, project_root):
        store = ItemStore(project_root / "data")
        assert store.load() > 0
        assert all(count > 0 for count in store.counts_by_category().values())
