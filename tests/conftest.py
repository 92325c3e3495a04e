"""Shared fixtures: small HTML tables with and without spans."""

import pytest

from html_table_editor.editor import TableEditor


def uniform_html(rows: int, cols: int) -> str:
    """Tabla rows x cols sin spans; el texto de cada celda es r<fila>c<columna>."""
    body = "".join(
        "<tr>" + "".join(f"<td>r{r}c{c}</td>" for c in range(cols)) + "</tr>"
        for r in range(rows)
    )
    return f"<table><tbody>{body}</tbody></table>"


TALL_LEFT_HTML = """
<table>
  <tr><td rowspan="3">A</td><td>B</td><td>C</td></tr>
  <tr><td>D</td><td>E</td></tr>
  <tr><td>F</td><td>G</td></tr>
</table>
"""

# a | b b | c
# d | b b | e
# f | g h i
MIXED_HTML = """
<table>
  <thead><tr><th>a</th><th colspan="2" rowspan="2">b</th><th>c</th></tr>
  <tr><th>d</th><th>e</th></tr></thead>
  <tbody><tr><td>f</td><td>g</td><td>h</td><td>i</td></tr></tbody>
</table>
"""

# a b c
# wide wide wide
# d e f
CROSS_HTML = """
<table>
  <tr><td>a</td><td>b</td><td>c</td></tr>
  <tr><td colspan="3">wide</td></tr>
  <tr><td>d</td><td>e</td><td>f</td></tr>
</table>
"""


def assert_tiled(editor: TableEditor) -> None:
    problems = editor.grid.coverage_problems()
    assert problems == [], problems


def cell_id_at(editor: TableEditor, row: int, col: int) -> str:
    return editor.grid.cell_at(row, col).id


@pytest.fixture
def grid3():
    return TableEditor(uniform_html(3, 3))


@pytest.fixture
def tall_left():
    return TableEditor(TALL_LEFT_HTML)


@pytest.fixture
def mixed():
    return TableEditor(MIXED_HTML)


@pytest.fixture
def cross():
    return TableEditor(CROSS_HTML)
