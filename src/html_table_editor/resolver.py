# src/html_table_editor/resolver.py
from __future__ import annotations
import logging
from typing import Dict, List, Optional

from .structures import LogicalRect, PhysicalCell
from .table import PhysicalTable

log = logging.getLogger(__name__)


def _spans_into_row(placed: Dict[str, LogicalRect], row_index: int) -> List[LogicalRect]:
    """Rectángulos de filas superiores cuyo rowspan llega a `row_index`, ordenados de izquierda a derecha."""
    intruders = [rc for rc in placed.values() if rc.start_row < row_index <= rc.end_row]
    intruders.sort(key=lambda rc: rc.start_col)
    return intruders


def resolve(cell: PhysicalCell,
            total_columns: int,
            placed: Dict[str, LogicalRect],
            *,
            row_index: int,
            row_cells: Optional[List[PhysicalCell]] = None,
            ) -> LogicalRect:
    """
    Calcula el rectángulo lógico de una celda física.

    `placed` es el índice explícito de orden lógico: los rectángulos ya resueltos
    de las filas superiores. Sustituye a la posición en píxeles del navegador
    como señal de orden horizontal entre filas con distinto número de celdas.

    - Si la fila tiene tantas celdas como columnas lógicas, la columna es el ordinal.
    - Si no, al ordinal se suman los colspan de las celdas superiores que bajan
      hasta esta fila y quedan a su izquierda, más (colspan - 1) de cada celda
      anterior de la misma fila.
    """
    siblings = row_cells if row_cells is not None else [PhysicalCell(t) for t in cell.row.find_all(["td", "th"], recursive=False)]
    ordinal = siblings.index(cell)

    if len(siblings) == total_columns and all(s.colspan == 1 for s in siblings):
        logical_col = ordinal
    else:
        intruders = _spans_into_row(placed, row_index)
        offset = 0
        col = 0  # columna lógica donde empezaría la siguiente celda de esta fila
        k = 0
        for position, sibling in enumerate(siblings):
            # Las celdas que bajan desde arriba y empiezan justo aquí empujan a la derecha.
            while k < len(intruders) and intruders[k].start_col <= col:
                if intruders[k].end_col >= col:
                    offset += intruders[k].end_col - col + 1
                    col = intruders[k].end_col + 1
                k += 1
            if position == ordinal:
                break
            offset += sibling.colspan - 1
            col += sibling.colspan
        logical_col = ordinal + offset

    return LogicalRect(
        start_row=row_index,
        start_col=logical_col,
        end_row=row_index + cell.rowspan - 1,
        end_col=logical_col + cell.colspan - 1,
    )


def resolve_table(table: PhysicalTable) -> Dict[str, LogicalRect]:
    """Resuelve todas las celdas, fila a fila y de arriba abajo. O(filas x celdas)."""
    total_columns = table.first_row_width()
    placed: Dict[str, LogicalRect] = {}
    for row_index, row in enumerate(table.rows):
        cells = table.row_cells(row)
        for cell in cells:
            placed[cell.id] = resolve(cell, total_columns, placed, row_index=row_index, row_cells=cells)
    log.debug("Resueltas %d celdas sobre %d columnas lógicas.", len(placed), total_columns)
    return placed
