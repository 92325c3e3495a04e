from __future__ import annotations

import logging
from typing import List

from .errors import IndexInconsistencyError, InvalidOperationError
from .grid_index import GridIndex
from .normalizer import normalize
from .structures import LogicalRect
from .table import PhysicalTable

log = logging.getLogger(__name__)


def merge_cells(table: PhysicalTable,
                grid: GridIndex,
                rect: LogicalRect,
                join_marker: str = ",") -> str:
    """
    Fusiona en una sola celda todas las celdas del rectángulo (normalizado antes).

    La celda superior izquierda sobrevive: recibe el texto de todas, unido con
    `join_marker` en orden fila-mayor, y los spans del rectángulo. Las demás se
    eliminan. Devuelve el id de la superviviente. El índice queda obsoleto.
    """
    target = normalize(rect, grid)
    cells = grid.cells_within(target)
    if len(cells) < 2:
        raise InvalidOperationError("No se puede fusionar una sola celda.")

    survivor = cells[0]
    text = join_marker.join(cell.content for cell in cells)
    for cell in cells[1:]:
        table.remove_cell(cell)
    survivor.content = text
    survivor.colspan = target.col_count
    survivor.rowspan = target.row_count
    log.info("Fusionadas %d celdas en %s (%s).", len(cells), survivor.id, target)
    return survivor.id


def split_cell(table: PhysicalTable,
               grid: GridIndex,
               cell_id: str,
               new_cell_text: str = "") -> List[str]:
    """
    Deshace una celda combinada en celdas unitarias. Devuelve los ids creados.

    1. Columnas: inserta colspan - 1 celdas detrás de la celda en su fila.
    2. Filas: en cada fila siguiente que abarcaba inserta colspan celdas en la
       posición que le corresponde según el índice.
    """
    cell = grid.cell(cell_id)
    rect = grid.rect_of(cell)
    if rect.is_unit:
        raise InvalidOperationError(f"No se puede dividir la celda unitaria {cell_id}.")

    rows = table.rows
    created: List[str] = []
    kind = cell.kind

    # Las posiciones de inserción se calculan antes de tocar la tabla.
    targets = []
    for k in range(1, rect.row_count):
        row_index = rect.start_row + k
        if row_index >= len(rows):
            log.warning("La celda %s abarca la fila %d, que no existe; se ignora.", cell_id, row_index)
            break
        targets.append((rows[row_index], grid.insertion_index(row_index, rect.start_col)))

    if rect.col_count > 1:
        ordinal = table.ordinal_of(cell)
        for _ in range(rect.col_count - 1):
            new = table.new_cell(kind, new_cell_text)
            table.insert_cell(cell.row, ordinal + 1, new)
            created.append(new.id)
        cell.colspan = 1

    for row, index in targets:
        for _ in range(rect.col_count):
            new = table.new_cell(kind, new_cell_text)
            table.insert_cell(row, index, new)
            created.append(new.id)
    cell.rowspan = 1

    log.info("Celda %s dividida en %d celdas nuevas.", cell_id, len(created))
    return created


def split_region(table: PhysicalTable,
                 grid: GridIndex,
                 rect: LogicalRect,
                 new_cell_text: str = "") -> List[str]:
    """
    Divide todas las celdas combinadas contenidas en `rect`.

    Tras cada división se reconstruye el índice; si una celda ya no aparece en
    él se salta con un aviso en lugar de abortar toda la operación.
    """
    target = normalize(rect, grid)
    if target.is_unit:
        raise InvalidOperationError("No se puede dividir: la selección es una sola celda unitaria.")

    pending = [cell.id for cell in grid.cells_within(target) if not grid.rect_of(cell).is_unit]
    created: List[str] = []
    for cell_id in pending:
        try:
            created.extend(split_cell(table, grid, cell_id, new_cell_text))
        except IndexInconsistencyError as exc:
            log.warning("Se omite la celda %s al dividir: %s", cell_id, exc)
            continue
        grid = GridIndex.build(table)
    return created
