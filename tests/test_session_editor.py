import pytest
from bs4 import BeautifulSoup

from html_table_editor.config import EditorOptions
from html_table_editor.editor import TableEditor
from html_table_editor.session import IDLE, SELECTING
from html_table_editor.structures import NORMAL, LogicalRect

from conftest import MIXED_HTML, cell_id_at, uniform_html


class TestSelectionSession:

    def test_press_drag_release(self, grid3):
        anchor, cursor = cell_id_at(grid3, 0, 0), cell_id_at(grid3, 1, 2)

        assert grid3.pointer_down(anchor)
        assert grid3.session.state == SELECTING
        assert grid3.pointer_move(cursor)
        grid3.pointer_up()

        assert grid3.session.state == IDLE
        assert grid3.session.rect == LogicalRect(0, 0, 1, 2)
        assert len(grid3.selected_ids) == 6
        assert all(grid3.grid.cell(cid).has_class("selected") for cid in grid3.selected_ids)

    def test_move_is_normalized(self, mixed):
        mixed.pointer_down(cell_id_at(mixed, 0, 0))
        mixed.pointer_move(cell_id_at(mixed, 0, 1))
        assert mixed.session.rect == LogicalRect(0, 0, 1, 2)
        assert sorted(mixed.grid.cell(cid).content for cid in mixed.selected_ids) == ["a", "b", "d"]

    def test_move_without_press_is_ignored(self, grid3):
        assert not grid3.pointer_move(cell_id_at(grid3, 0, 0))
        assert grid3.session.rect is None

    def test_move_after_release_is_ignored(self, grid3):
        grid3.select(cell_id_at(grid3, 0, 0))
        assert not grid3.pointer_move(cell_id_at(grid3, 2, 2))
        assert grid3.session.rect == LogicalRect(0, 0, 0, 0)

    def test_move_to_same_cell_is_a_no_op(self, grid3):
        cid = cell_id_at(grid3, 0, 0)
        grid3.pointer_down(cid)
        assert not grid3.pointer_move(cid)

    def test_press_outside_any_cell(self, grid3):
        assert not grid3.pointer_down("no-existe")
        assert grid3.session.state == IDLE

    def test_new_press_replaces_marks(self, grid3):
        grid3.select(cell_id_at(grid3, 0, 0), cell_id_at(grid3, 0, 2))
        grid3.select(cell_id_at(grid3, 2, 2))

        marked = [c.id for c in grid3.grid if c.has_class("selected")]
        assert marked == grid3.selected_ids == [cell_id_at(grid3, 2, 2)]

    def test_custom_selected_class(self):
        editor = TableEditor(uniform_html(1, 2), EditorOptions(selected_class="marcada"))
        editor.select(cell_id_at(editor, 0, 0))
        assert editor.grid.cell_at(0, 0).has_class("marcada")

    def test_selected_text(self, grid3):
        grid3.select(cell_id_at(grid3, 0, 0), cell_id_at(grid3, 0, 2))
        assert grid3.get_selected_text() == "r0c0,r0c1,r0c2"

    def test_selection_cleared_by_structural_change(self, grid3):
        grid3.select(cell_id_at(grid3, 0, 0), cell_id_at(grid3, 1, 1))
        grid3.insert_row(NORMAL, 0)
        assert grid3.selected_ids == []
        assert "selected" not in grid3.to_html()


class TestEditor:

    def test_update_event_after_every_change(self, grid3):
        calls = []
        grid3.on("update", lambda: calls.append(len(grid3.grid)))

        grid3.select(cell_id_at(grid3, 0, 0), cell_id_at(grid3, 0, 1))
        grid3.merge_selection()
        grid3.alter_cell(0, 0, "x")

        assert calls == [8, 8]

    @pytest.mark.parametrize("name", ["", "Update!", "con espacio"])
    def test_rejects_bad_event_names(self, grid3, name):
        with pytest.raises(ValueError):
            grid3.on(name, lambda: None)

    def test_rejects_non_callable_handler(self, grid3):
        with pytest.raises(ValueError):
            grid3.on("update", "no")

    def test_accepts_existing_table_tag(self):
        soup = BeautifulSoup("<div>" + uniform_html(2, 2) + "</div>", "lxml")
        editor = TableEditor(soup.find("table"))
        editor.select(cell_id_at(editor, 0, 0), cell_id_at(editor, 1, 0))
        editor.merge_selection()
        # la edición se hace sobre el propio documento
        assert 'rowspan="2"' in str(soup)

    def test_unknown_options_are_ignored(self, caplog):
        editor = TableEditor(MIXED_HTML, {"color": "rojo"})
        assert editor.options == EditorOptions()
        assert "color" in caplog.text

    def test_custom_id_prefix(self):
        editor = TableEditor(uniform_html(1, 2), {"id_prefix": "t1"})
        assert editor.grid.ids == ["t1-0", "t1-1"]
