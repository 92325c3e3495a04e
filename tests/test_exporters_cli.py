import pytest

from html_table_editor import main as cli
from html_table_editor.exporters import grid_report, grid_to_frame

from conftest import MIXED_HTML, uniform_html


def test_frame_shape_and_labels(mixed):
    frame = grid_to_frame(mixed.grid, show="content")
    assert frame.shape == (3, 4)
    assert list(frame.columns) == ["A", "B", "C", "D"]
    assert list(frame.index) == [1, 2, 3]
    assert frame.loc[2].tolist() == ["d", "b", "b", "e"]


def test_frame_shows_ids_by_default(grid3):
    frame = grid_to_frame(grid3.grid)
    assert frame.iloc[0, 0] == "cell-0"
    assert frame.iloc[2, 2] == "cell-8"


def test_frame_rejects_unknown_mode(grid3):
    with pytest.raises(ValueError):
        grid_to_frame(grid3.grid, show="kind")


def test_report_for_empty_table():
    from html_table_editor.editor import TableEditor
    editor = TableEditor(uniform_html(1, 1))
    editor.remove_column(0)
    assert grid_report(editor.grid) == "(tabla vacía)"


@pytest.fixture
def html_file(tmp_path):
    path = tmp_path / "tabla.html"
    path.write_text("<html><body><p>otra cosa</p>" + uniform_html(3, 3) + "</body></html>", encoding="utf-8")
    return str(path)


def test_cli_merge(html_file, capsys):
    code = cli.main([html_file, "--op", "merge:0,0:1,1", "--show", "content", "--print-html"])
    out = capsys.readouterr().out

    assert code == 0
    assert "r0c0,r0c1,r1c0,r1c1" in out
    assert 'rowspan="2"' in out


def test_cli_applies_ops_in_order(html_file, capsys):
    code = cli.main([html_file,
                     "--op", "insert-row:header:0",
                     "--op", "remove-col:2",
                     "--op", "set:1,1:hola:mundo",
                     "--show", "content"])
    out = capsys.readouterr().out

    assert code == 0
    assert "hola:mundo" in out
    assert "r0c2" not in out


def test_cli_reports_bad_op(html_file, capsys):
    assert cli.main([html_file, "--op", "remove-row:x"]) == 1
    assert cli.main([html_file, "--op", "explode:1"]) == 1


def test_cli_reports_edit_errors(html_file):
    assert cli.main([html_file, "--op", "split:0,0"]) == 1
    assert cli.main([html_file, "--op", "remove-row:9"]) == 1


def test_cli_missing_file(tmp_path):
    assert cli.main([str(tmp_path / "no.html")]) == 1


def test_cli_table_index(tmp_path, capsys):
    path = tmp_path / "dos.html"
    path.write_text(uniform_html(1, 1) + MIXED_HTML, encoding="utf-8")
    assert cli.main([str(path), "--table-index", "1", "--show", "content"]) == 0
    assert "b" in capsys.readouterr().out
