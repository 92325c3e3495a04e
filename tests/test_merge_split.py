import pytest

from html_table_editor import merge_split
from html_table_editor.editor import TableEditor
from html_table_editor.errors import InvalidOperationError
from html_table_editor.structures import HEADER, LogicalRect

from conftest import assert_tiled, cell_id_at, uniform_html


class TestMerge:

    def test_merge_two_by_two_block(self, grid3):
        grid3.select(cell_id_at(grid3, 0, 0), cell_id_at(grid3, 1, 1))
        survivor = grid3.merge_selection()

        assert survivor == "cell-0"
        assert grid3.grid.rect_of(survivor) == LogicalRect(0, 0, 1, 1)
        cell = grid3.grid.cell(survivor)
        assert (cell.rowspan, cell.colspan) == (2, 2)
        assert cell.content == "r0c0,r0c1,r1c0,r1c1"
        # la fusionada más las 5 celdas unitarias que quedan
        assert len(grid3.grid) == 6
        assert sum(1 for _, rect in grid3.grid.items() if rect.is_unit) == 5
        assert_tiled(grid3)

    def test_merge_uses_configured_join_marker(self):
        editor = TableEditor(uniform_html(1, 3), {"join_marker": " | "})
        editor.select(cell_id_at(editor, 0, 0), cell_id_at(editor, 0, 2))
        survivor = editor.merge_selection()
        assert editor.grid.cell(survivor).content == "r0c0 | r0c1 | r0c2"

    def test_merge_expands_through_tall_cell(self, tall_left):
        tall_left.select(cell_id_at(tall_left, 1, 1), cell_id_at(tall_left, 1, 0))
        assert tall_left.session.rect == LogicalRect(0, 0, 2, 1)
        survivor = tall_left.merge_selection()

        assert tall_left.grid.rect_of(survivor) == LogicalRect(0, 0, 2, 1)
        assert tall_left.grid.cell(survivor).content == "A,B,D,F"
        assert [c.content for c in tall_left.grid.column_cells(2)] == ["C", "E", "G"]
        assert_tiled(tall_left)

    def test_merge_single_cell_fails_and_keeps_selection(self, grid3):
        cid = cell_id_at(grid3, 1, 1)
        grid3.select(cid)
        html = grid3.to_html()
        with pytest.raises(InvalidOperationError):
            grid3.merge_selection()
        assert grid3.selected_ids == [cid]
        assert grid3.to_html() == html

    def test_merge_without_selection(self, grid3):
        with pytest.raises(InvalidOperationError):
            grid3.merge_selection()

    def test_selection_is_cleared_after_merge(self, grid3):
        grid3.select(cell_id_at(grid3, 0, 0), cell_id_at(grid3, 0, 1))
        survivor = grid3.merge_selection()
        assert grid3.selected_ids == []
        assert not grid3.grid.cell(survivor).has_class("selected")


class TestSplit:

    def test_split_restores_unit_grid(self, grid3):
        grid3.select(cell_id_at(grid3, 0, 0), cell_id_at(grid3, 1, 1))
        survivor = grid3.merge_selection()

        created = grid3.split_cell(survivor)

        assert len(created) == 3
        assert len(grid3.grid) == 9
        assert all(rect.is_unit for _, rect in grid3.grid.items())
        assert all(c.rowspan == 1 and c.colspan == 1 for c in grid3.grid)
        assert grid3.grid.cell(survivor).content == "r0c0,r0c1,r1c0,r1c1"
        assert_tiled(grid3)

    def test_split_tall_cell_inserts_at_row_start(self, tall_left):
        tall = cell_id_at(tall_left, 0, 0)
        created = tall_left.split_cell(tall)

        assert len(created) == 2
        assert [c.content for c in tall_left.grid.row_cells(1)] == ["", "D", "E"]
        assert [c.content for c in tall_left.grid.row_cells(2)] == ["", "F", "G"]
        assert_tiled(tall_left)

    def test_split_block_in_the_middle(self, mixed):
        block = cell_id_at(mixed, 0, 1)
        created = mixed.split_cell(block)

        assert len(created) == 3
        assert len(mixed.grid) == 12
        assert [c.content for c in mixed.grid.row_cells(1)] == ["d", "", "", "e"]
        assert all(mixed.grid.cell(cid).kind == HEADER for cid in created)
        assert_tiled(mixed)

    def test_new_cells_get_fresh_ids(self, mixed):
        before = set(mixed.grid.ids)
        created = mixed.split_cell(cell_id_at(mixed, 0, 1))
        assert not before.intersection(created)
        assert len(set(created)) == len(created)

    def test_split_unit_cell_fails(self, grid3):
        with pytest.raises(InvalidOperationError):
            grid3.split_cell(cell_id_at(grid3, 0, 0))

    def test_split_selection_splits_every_merged_cell(self):
        editor = TableEditor(uniform_html(2, 4))
        editor.select(cell_id_at(editor, 0, 0), cell_id_at(editor, 1, 1))
        editor.merge_selection()
        editor.select(cell_id_at(editor, 0, 2), cell_id_at(editor, 0, 3))
        editor.merge_selection()
        assert len(editor.grid) == 4

        editor.select(cell_id_at(editor, 0, 0), cell_id_at(editor, 1, 3))
        created = editor.split_selection()

        assert len(created) == 4
        assert len(editor.grid) == 8
        assert_tiled(editor)

    def test_split_selection_of_unit_cell_fails(self, grid3):
        grid3.select(cell_id_at(grid3, 0, 0))
        with pytest.raises(InvalidOperationError):
            grid3.split_selection()

    def test_split_region_skips_cells_gone_from_the_index(self, monkeypatch, caplog):
        editor = TableEditor(uniform_html(2, 4))
        editor.select(cell_id_at(editor, 0, 0), cell_id_at(editor, 1, 1))
        editor.merge_selection()
        editor.select(cell_id_at(editor, 0, 2), cell_id_at(editor, 0, 3))
        editor.merge_selection()
        wide = editor.grid.cell(cell_id_at(editor, 0, 2))

        real_split = merge_split.split_cell

        def split_then_drop_wide(table, grid, cell_id, new_cell_text=""):
            created = real_split(table, grid, cell_id, new_cell_text)
            if wide.tag.parent is not None:
                table.remove_cell(wide)
            return created

        monkeypatch.setattr(merge_split, "split_cell", split_then_drop_wide)
        created = merge_split.split_region(editor.table, editor.grid, LogicalRect(0, 0, 1, 3))

        assert len(created) == 3
        assert "Se omite la celda" in caplog.text
        assert [c.content for c in editor.table.cells()][:2] == ["r0c0,r0c1,r1c0,r1c1", ""]
