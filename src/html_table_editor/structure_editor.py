from __future__ import annotations

import logging
from typing import Optional, Set

from .errors import InvalidOperationError, OutOfRangeError
from .grid_index import GridIndex
from .structures import CELL_KINDS, HEADER, tag_for_kind
from .table import PhysicalTable

log = logging.getLogger(__name__)


def _check_kind(kind: str) -> None:
    if kind not in CELL_KINDS:
        raise InvalidOperationError(f"Tipo de celda desconocido: {kind!r} (válidos: {', '.join(CELL_KINDS)}).")


# ----------------------------------------------------------------------
# Filas
# ----------------------------------------------------------------------

def insert_row(table: PhysicalTable,
               grid: GridIndex,
               kind: str,
               position: Optional[int] = None,
               new_cell_text: str = "") -> None:
    """
    Inserta una fila en la posición lógica `position` (None = al final).

    La sección se elige con la primera regla que encaje:
      1. la fila en `position` está en thead -> thead, antes de ella;
      2. fila de cabecera justo después de thead -> al final de thead;
      3. la fila anterior está en tfoot -> tfoot;
      4. fila de cabecera justo antes de tfoot -> tfoot;
      5. posición 0 y cabecera -> primera fila de thead;
      6. al final y cabecera -> al final de tfoot;
      7. en otro caso tbody, junto a sus filas vecinas.

    Las celdas con rowspan que cruzan el punto de inserción crecen una fila y
    la nueva fila no recibe celdas en sus columnas.
    """
    _check_kind(kind)
    total_rows = grid.row_count
    if position is None:
        position = total_rows
    if not (0 <= position <= total_rows):
        raise OutOfRangeError(f"Posición de fila {position} fuera de rango (0..{total_rows}).")

    covered: Set[int] = set()
    for cell, rect in list(grid.items()):
        if rect.start_row < position <= rect.end_row:
            cell.rowspan = cell.rowspan + 1
            covered.update(rect.cols())

    new_row = table.new_row()
    for col in range(grid.column_count):
        if col not in covered:
            new_row.append(table.new_cell(kind, new_cell_text).tag)

    rows = table.rows
    prev_row = rows[position - 1] if position > 0 else None
    next_row = rows[position] if position < len(rows) else None
    prev_section = table.section_of(prev_row) if prev_row is not None else None
    next_section = table.section_of(next_row) if next_row is not None else None

    if next_section == "thead":
        next_row.insert_before(new_row)
    elif prev_section == "thead" and kind == HEADER:
        table.section("thead").append(new_row)
    elif prev_section == "tfoot":
        if next_row is not None:
            next_row.insert_before(new_row)
        else:
            table.section("tfoot").append(new_row)
    elif next_section == "tfoot" and kind == HEADER:
        next_row.insert_before(new_row)
    elif position == 0 and kind == HEADER:
        table.section("thead").append(new_row)
    elif position == total_rows and kind == HEADER:
        table.section("tfoot").append(new_row)
    elif next_section == "tbody":
        next_row.insert_before(new_row)
    else:
        table.section("tbody").append(new_row)

    table.update_sections()
    log.info("Fila %s insertada en la posición %d (%s).", kind, position, table.section_of(new_row))


def remove_row(table: PhysicalTable, grid: GridIndex, row_index: int) -> None:
    """
    Elimina la fila lógica `row_index`.

    Para conservar la cobertura de la rejilla:
      - las celdas de filas superiores que bajan hasta ella pierden una fila;
      - las celdas que empiezan en ella con rowspan > 1 bajan a la fila siguiente.
    """
    if not (0 <= row_index < grid.row_count):
        raise OutOfRangeError(f"Fila {row_index} no encontrada (hay {grid.row_count}).")

    rows = table.rows
    row = rows[row_index]
    for cell, rect in list(grid.items()):
        if rect.start_row < row_index <= rect.end_row:
            cell.rowspan = cell.rowspan - 1

    movers = [cell for cell in grid.physical_row(row_index) if grid.rect_of(cell).row_count > 1]
    if movers and row_index + 1 < len(rows):
        next_row = rows[row_index + 1]
        # Índices calculados con el índice previo a cualquier cambio en next_row.
        positions = [grid.insertion_index(row_index + 1, grid.rect_of(cell).start_col) + i
                     for i, cell in enumerate(movers)]
        for cell, index in zip(movers, positions):
            cell.tag.extract()
            cell.rowspan = cell.rowspan - 1
            table.insert_cell(next_row, index, cell)
        log.debug("%d celdas combinadas bajan a la fila siguiente.", len(movers))

    table.remove_row(row)
    log.info("Fila %d eliminada.", row_index)


# ----------------------------------------------------------------------
# Columnas
# ----------------------------------------------------------------------

def insert_column(table: PhysicalTable,
                  grid: GridIndex,
                  kind: str,
                  position: Optional[int] = None,
                  new_cell_text: str = "") -> None:
    """
    Inserta una columna en la posición lógica `position` (None = al final).

    Las filas de thead y tfoot reciben siempre celdas de cabecera. Las celdas con
    colspan que cruzan el punto de inserción crecen una columna en su lugar.
    """
    _check_kind(kind)
    total_cols = grid.column_count
    if position is None:
        position = total_cols
    if not (0 <= position <= total_cols):
        raise OutOfRangeError(f"Posición de columna {position} fuera de rango (0..{total_cols}).")

    covered: Set[int] = set()
    for cell, rect in list(grid.items()):
        if rect.start_col < position <= rect.end_col:
            cell.colspan = cell.colspan + 1
            covered.update(rect.rows())

    for row_index, row in enumerate(table.rows):
        if row_index in covered:
            continue
        row_kind = HEADER if table.section_of(row) in ("thead", "tfoot") else kind
        index = grid.insertion_index(row_index, position)
        table.insert_cell(row, index, table.new_cell(row_kind, new_cell_text))
    log.info("Columna %s insertada en la posición %d.", kind, position)


def remove_column(table: PhysicalTable, grid: GridIndex, col: int) -> None:
    """Quita la columna lógica `col`: las celdas de ancho 1 se borran, las más anchas pierden una columna."""
    if not (0 <= col < grid.column_count):
        raise OutOfRangeError(f"Columna {col} fuera de rango (0..{grid.column_count - 1}).")

    for cell in grid.column_cells(col):
        if grid.rect_of(cell).col_count == 1:
            table.remove_cell(cell)
        else:
            cell.colspan = cell.colspan - 1

    if grid.column_count == 1:
        # Sin columnas no quedan filas que pintar.
        for row in table.rows:
            table.remove_row(row)
    log.info("Columna %d eliminada.", col)


# ----------------------------------------------------------------------
# Tipos de celda y contenido
# ----------------------------------------------------------------------

def change_cell_kind(table: PhysicalTable, grid: GridIndex, col: int, row: int, kind: str) -> bool:
    """Cambia <td>/<th> conservando id, spans y texto. Devuelve True si hubo cambio."""
    _check_kind(kind)
    cell = grid.cell_at(row, col)
    new_name = tag_for_kind(kind)
    if cell.tag.name == new_name:
        return False
    cell.tag.name = new_name
    log.debug("Celda %s convertida a %s.", cell.id, new_name)
    return True


def change_row_kind(table: PhysicalTable, grid: GridIndex, row: int, kind: str) -> int:
    _check_kind(kind)
    changed = 0
    for cell in grid.physical_row(row):
        rect = grid.rect_of(cell)
        changed += change_cell_kind(table, grid, rect.start_col, rect.start_row, kind)
    return changed


def change_column_kind(table: PhysicalTable, grid: GridIndex, col: int, kind: str) -> int:
    _check_kind(kind)
    changed = 0
    for cell in grid.column_cells(col):
        rect = grid.rect_of(cell)
        if rect.start_col == col:
            changed += change_cell_kind(table, grid, rect.start_col, rect.start_row, kind)
    return changed


def alter_cell(table: PhysicalTable, grid: GridIndex, col: int, row: int, text: str) -> None:
    cell = grid.cell_at(row, col)
    cell.content = text
