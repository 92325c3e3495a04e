# src/html_table_editor/exporters.py
from __future__ import annotations
from typing import List

import pandas as pd

from .commands import column_label
from .grid_index import GridIndex


def grid_to_frame(grid: GridIndex, show: str = "id") -> pd.DataFrame:
    """
    Rejilla lógica como DataFrame: una fila/columna por fila/columna lógica.

    `show` elige qué se pinta en cada posición: "id" de la celda dueña o su
    "content". Las posiciones sin dueña quedan vacías.
    """
    if show not in ("id", "content"):
        raise ValueError(f"show debe ser 'id' o 'content', no {show!r}")
    owner = grid.owner_matrix()
    order = grid.ids
    data: List[List[str]] = []
    for r in range(grid.row_count):
        row = []
        for c in range(grid.column_count):
            pos = int(owner[r, c])
            if pos < 0:
                row.append("")
                continue
            cid = order[pos]
            row.append(cid if show == "id" else grid.cell(cid).content)
        data.append(row)
    columns = [column_label(c) for c in range(grid.column_count)]
    index = pd.RangeIndex(start=1, stop=grid.row_count + 1, name="fila")
    return pd.DataFrame(data, columns=columns, index=index)


def grid_report(grid: GridIndex, show: str = "id") -> str:
    frame = grid_to_frame(grid, show=show)
    if frame.empty:
        return "(tabla vacía)"
    return frame.to_string()
