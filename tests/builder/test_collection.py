"""
Unit tests for ItemCollection (CRUD, selection, duplicate, autofill).
"""

import pytest

from gangsheet_toolkit.builder.collection import AutofillLimitExceeded, ItemCollection
from gangsheet_toolkit.core.models import get_preset


@pytest.fixture
def collection(pixel_sheet):
    return ItemCollection(pixel_sheet)


class TestItemCollectionCrud:
    """Tests for add/update/remove/select."""

    def test_when_items_added_then_insertion_order_kept(self, collection, make_item):
        collection.add(make_item("a"))
        collection.add(make_item("b"))
        assert [i.id for i in collection] == ["a", "b"]
        assert len(collection) == 2
        assert "a" in collection

    def test_when_duplicate_id_added_then_raises(self, collection, make_item):
        collection.add(make_item("a"))
        with pytest.raises(ValueError, match="Duplicate"):
            collection.add(make_item("a"))

    def test_when_update_then_only_patched_fields_change(self, collection, make_item):
        collection.add(make_item("a", x=5, y=6, rotation=10))
        updated = collection.update("a", {"x": 50})
        assert (updated.x, updated.y, updated.rotation) == (50, 6, 10)
        assert collection.get("a") == updated

    def test_when_update_unknown_id_then_noop(self, collection, make_item):
        collection.add(make_item("a"))
        revision = collection.revision
        assert collection.update("missing", {"x": 1}) is None
        assert collection.revision == revision

    def test_when_update_immutable_field_then_raises(self, collection, make_item):
        collection.add(make_item("a"))
        with pytest.raises(ValueError, match="cannot be updated"):
            collection.update("a", {"width": 10})

    def test_when_update_scale_zero_then_raises_and_item_unchanged(self, collection, make_item):
        item = collection.add(make_item("a"))
        with pytest.raises(ValueError):
            collection.update("a", {"scale": 0})
        assert collection.get("a") == item

    def test_when_selected_item_removed_then_selection_cleared(self, collection, make_item):
        collection.add(make_item("a"))
        collection.select("a")
        assert collection.remove("a") is True
        assert collection.selected_id is None
        assert collection.remove("a") is False

    def test_when_select_unknown_then_key_error(self, collection):
        with pytest.raises(KeyError):
            collection.select("nope")

    def test_when_replace_all_with_duplicate_ids_then_raises(self, collection, make_item):
        with pytest.raises(ValueError, match="unique"):
            collection.replace_all([make_item("a"), make_item("a")])

    def test_revision_increases_on_every_change(self, collection, make_item):
        start = collection.revision
        collection.add(make_item("a"))
        collection.update("a", {"x": 3})
        collection.remove("a")
        assert collection.revision == start + 3


class TestDuplicate:
    """Tests for duplicate()."""

    def test_when_duplicated_twice_then_offset_per_copy(self, make_item):
        # Arrange
        collection = ItemCollection(get_preset("22x24"))
        collection.add(make_item("a", width=100, height=100, x=20, y=20))

        # Act
        clones = collection.duplicate("a", 2)

        # Assert
        assert [(c.x, c.y) for c in clones] == [(32, 32), (44, 44)]
        assert len({c.id for c in clones} | {"a"}) == 3
        assert all(c.source == collection.get("a").source for c in clones)
        assert collection.selected_id == clones[-1].id

    def test_when_copy_would_leave_sheet_then_clamped(self, collection, make_item):
        collection.add(make_item("a", width=40, height=20, x=355, y=275))
        (clone,) = collection.duplicate("a")
        assert (clone.x, clone.y) == (360, 280)

    def test_when_count_zero_then_raises(self, collection, make_item):
        collection.add(make_item("a"))
        with pytest.raises(ValueError):
            collection.duplicate("a", 0)

    def test_when_unknown_id_then_empty(self, collection):
        assert collection.duplicate("missing") == []


class TestAutofill:
    """Tests for autofill()."""

    def test_when_item_divides_sheet_then_fills_every_cell(self, collection, make_item):
        collection.add(make_item("a", width=100, height=100))
        tiles = collection.autofill("a")
        assert len(tiles) == 12  # 4 columns x 3 rows on 400x300
        assert tiles[0].x == 0 and tiles[0].y == 0
        assert tiles[-1].x == 300 and tiles[-1].y == 200

    def test_when_gap_set_then_partial_cells_skipped(self, pixel_sheet, make_item):
        collection = ItemCollection(pixel_sheet, autofill_gap=10)
        collection.add(make_item("a", width=100, height=100))
        tiles = collection.autofill("a")
        assert len(tiles) == 6
        assert sorted({t.x for t in tiles}) == [0, 110, 220]

    def test_when_tiles_created_then_all_inside_sheet(self, collection, make_item, pixel_sheet):
        collection.add(make_item("a", width=70, height=45, scale=1.3))
        for tile in collection.autofill("a"):
            assert pixel_sheet.contains(tile.x, tile.y, tile.scaled_width, tile.scaled_height)

    def test_when_item_larger_than_sheet_then_no_tiles(self, collection, make_item):
        collection.add(make_item("a", width=500, height=100))
        assert collection.autofill("a") == []

    def test_when_limit_matches_cell_count_then_sheet_filled(self, pixel_sheet, make_item):
        collection = ItemCollection(pixel_sheet, autofill_limit=12)
        collection.add(make_item("a", width=100, height=100))
        assert len(collection.autofill("a")) == 12

    def test_when_tiles_exceed_limit_then_raises_and_nothing_added(self, pixel_sheet, make_item):
        # Arrange
        collection = ItemCollection(pixel_sheet, autofill_limit=11)
        collection.add(make_item("a", width=100, height=100))
        revision = collection.revision

        # Act
        with pytest.raises(AutofillLimitExceeded, match="11"):
            collection.autofill("a")

        # Assert
        assert [i.id for i in collection] == ["a"]
        assert collection.revision == revision
