# src/html_table_editor/normalizer.py
from __future__ import annotations
import logging
from typing import Iterator

from .errors import OutOfRangeError
from .grid_index import GridIndex
from .structures import LogicalRect

log = logging.getLogger(__name__)


def _touches(cell_rect: LogicalRect, rect: LogicalRect) -> bool:
    """Alguna esquina de la celda cae dentro de `rect`, o ambos rectángulos se solapan.

    El solape cubre además el caso en cruz (una celda ancha atravesando una
    selección estrecha) en el que ninguna esquina queda dentro.
    """
    if any(rect.covers(r, c) for r, c in cell_rect.corners()):
        return True
    return rect.overlaps(cell_rect)


def _check_bounds(rect: LogicalRect, grid: GridIndex) -> None:
    if rect.start_row > rect.end_row or rect.start_col > rect.end_col:
        raise OutOfRangeError(f"Rectángulo invertido: {rect}")
    if rect.start_row < 0 or rect.start_col < 0:
        raise OutOfRangeError(f"Rectángulo con índices negativos: {rect}")
    if rect.end_row >= grid.row_count or rect.end_col >= grid.column_count:
        raise OutOfRangeError(
            f"Rectángulo {rect} fuera de la rejilla {grid.row_count}x{grid.column_count}.")


def iter_expansion(rect: LogicalRect, grid: GridIndex) -> Iterator[LogicalRect]:
    """
    Genera el rectángulo tras cada pasada que lo hace crecer.

    Cada pasada recorre toda la rejilla y une al rectángulo las celdas que lo
    tocan. Los límites solo crecen, así que termina en como mucho R + C pasadas.
    """
    _check_bounds(rect, grid)
    current = rect
    while True:
        expanded = current
        for _, cell_rect in grid.items():
            if _touches(cell_rect, expanded):
                expanded = expanded.union(cell_rect)
        if expanded == current:
            return
        current = expanded
        yield current


def normalize(rect: LogicalRect, grid: GridIndex) -> LogicalRect:
    """Menor rectángulo que contiene a `rect` sin cortar ninguna celda combinada."""
    result = rect
    passes = 0
    for result in iter_expansion(rect, grid):
        passes += 1
    if passes:
        log.debug("Selección %s ampliada a %s en %d pasadas.", rect, result, passes)
    return result


def is_span_closed(rect: LogicalRect, grid: GridIndex) -> bool:
    return all(rect.contains(rc) or not rect.overlaps(rc) for _, rc in grid.items())
