from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Union

import numpy as np

from .errors import IndexInconsistencyError, OutOfRangeError
from .resolver import resolve_table
from .structures import LogicalRect, PhysicalCell
from .table import PhysicalTable

log = logging.getLogger(__name__)

CellRef = Union[str, PhysicalCell]


def _cell_id(ref: CellRef) -> str:
    return ref.id if isinstance(ref, PhysicalCell) else ref


class GridIndex:
    """
    Índice id de celda -> rectángulo lógico, con búsquedas inversas por fila y columna.

    Es un dato derivado: no se edita a mano. Cualquier cambio estructural en la
    tabla lo invalida y hay que reconstruirlo con `GridIndex.build`.
    """

    def __init__(self,
                 rects: Dict[str, LogicalRect],
                 cells: Dict[str, PhysicalCell],
                 physical_rows: List[List[str]],
                 column_count: int):
        self._rects = rects
        self._cells = cells
        self._physical_rows = physical_rows
        self.row_count = len(physical_rows)
        self.column_count = column_count
        # Orden fila-mayor: primero por fila de inicio, luego por columna.
        self._order = sorted(rects, key=lambda cid: (rects[cid].start_row, rects[cid].start_col))
        self._owner = np.full((self.row_count, self.column_count), -1, dtype=int)
        self._counts = np.zeros((self.row_count, self.column_count), dtype=int)
        for pos, cid in enumerate(self._order):
            rc = rects[cid]
            r1 = min(rc.end_row, self.row_count - 1) + 1
            c1 = min(rc.end_col, self.column_count - 1) + 1
            if rc.start_row >= r1 or rc.start_col >= c1:
                continue
            self._owner[rc.start_row:r1, rc.start_col:c1] = pos
            self._counts[rc.start_row:r1, rc.start_col:c1] += 1

    @classmethod
    def build(cls, table: PhysicalTable) -> "GridIndex":
        rects = resolve_table(table)
        cells: Dict[str, PhysicalCell] = {}
        physical_rows: List[List[str]] = []
        for row in table.rows:
            ids = []
            for cell in table.row_cells(row):
                cells[cell.id] = cell
                ids.append(cell.id)
            physical_rows.append(ids)
        grid = cls(rects, cells, physical_rows, table.first_row_width())
        problems = grid.coverage_problems()
        if problems:
            log.warning("La rejilla no cubre exactamente %dx%d: %s",
                        grid.row_count, grid.column_count, "; ".join(problems[:5]))
        log.debug("Índice reconstruido: %d celdas, %dx%d.", len(cells), grid.row_count, grid.column_count)
        return grid

    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._rects)

    def __contains__(self, ref: object) -> bool:
        if isinstance(ref, (str, PhysicalCell)):
            return _cell_id(ref) in self._rects
        return False

    def __iter__(self) -> Iterator[PhysicalCell]:
        return (self._cells[cid] for cid in self._order)

    @property
    def ids(self) -> List[str]:
        return list(self._order)

    @property
    def full_rect(self) -> Optional[LogicalRect]:
        if not self.row_count or not self.column_count:
            return None
        return LogicalRect(0, 0, self.row_count - 1, self.column_count - 1)

    def items(self) -> Iterator[tuple]:
        return ((self._cells[cid], self._rects[cid]) for cid in self._order)

    def rect_of(self, ref: CellRef) -> LogicalRect:
        cid = _cell_id(ref)
        try:
            return self._rects[cid]
        except KeyError:
            raise IndexInconsistencyError(f"La celda '{cid}' no está en el índice de la rejilla.") from None

    def cell(self, cell_id: str) -> PhysicalCell:
        try:
            return self._cells[cell_id]
        except KeyError:
            raise IndexInconsistencyError(f"La celda '{cell_id}' no está en el índice de la rejilla.") from None

    def check_position(self, row: int, col: int) -> None:
        if not (0 <= row < self.row_count):
            raise OutOfRangeError(f"Fila {row} fuera de rango (0..{self.row_count - 1}).")
        if not (0 <= col < self.column_count):
            raise OutOfRangeError(f"Columna {col} fuera de rango (0..{self.column_count - 1}).")

    def cell_at(self, row: int, col: int) -> PhysicalCell:
        self.check_position(row, col)
        pos = int(self._owner[row, col])
        if pos < 0:
            raise IndexInconsistencyError(f"Ninguna celda cubre la posición ({row}, {col}).")
        return self._cells[self._order[pos]]

    def physical_row(self, row: int) -> List[PhysicalCell]:
        """Celdas que empiezan en la fila física `row`, en orden de documento."""
        if not (0 <= row < self.row_count):
            raise OutOfRangeError(f"Fila {row} fuera de rango (0..{self.row_count - 1}).")
        return [self._cells[cid] for cid in self._physical_rows[row]]

    def insertion_index(self, row: int, start_col: int) -> int:
        """
        Posición ordinal, dentro de la fila física `row`, para una celda que debe empezar en `start_col`.

        Se cuentan las celdas de la fila que empiezan a la izquierda; el índice
        lógico sustituye a la comparación de posiciones en píxeles. Sin
        coincidencias es 0: el span empezaba en la primera columna.
        """
        return sum(1 for cell in self.physical_row(row) if self._rects[cell.id].start_col < start_col)

    def row_cells(self, row: int) -> List[PhysicalCell]:
        """Celdas distintas que cubren la fila lógica `row`, de izquierda a derecha."""
        if not (0 <= row < self.row_count):
            raise OutOfRangeError(f"Fila {row} fuera de rango (0..{self.row_count - 1}).")
        return self._distinct(self._owner[row, :])

    def column_cells(self, col: int) -> List[PhysicalCell]:
        """Celdas distintas que cubren la columna lógica `col`, de arriba abajo."""
        if not (0 <= col < self.column_count):
            raise OutOfRangeError(f"Columna {col} fuera de rango (0..{self.column_count - 1}).")
        return self._distinct(self._owner[:, col])

    def _distinct(self, owners: np.ndarray) -> List[PhysicalCell]:
        seen = []
        for pos in owners.tolist():
            if pos >= 0 and pos not in seen:
                seen.append(pos)
        return [self._cells[self._order[pos]] for pos in seen]

    def cells_within(self, rect: LogicalRect) -> List[PhysicalCell]:
        """Celdas completamente contenidas en `rect`, en orden fila-mayor."""
        return [self._cells[cid] for cid in self._order if rect.contains(self._rects[cid])]

    # ------------------------------------------------------------------
    # Invariante de cobertura
    # ------------------------------------------------------------------

    def coverage_problems(self) -> List[str]:
        problems: List[str] = []
        for cid in self._order:
            rc = self._rects[cid]
            if rc.end_row >= self.row_count or rc.end_col >= self.column_count:
                problems.append(f"celda {cid} sale de la rejilla: {rc}")
        gaps = np.argwhere(self._counts == 0)
        for r, c in gaps.tolist():
            problems.append(f"hueco en ({r}, {c})")
        overlaps = np.argwhere(self._counts > 1)
        for r, c in overlaps.tolist():
            problems.append(f"solape en ({r}, {c})")
        return problems

    @property
    def is_consistent(self) -> bool:
        return not self.coverage_problems()

    def owner_matrix(self) -> np.ndarray:
        """Matriz filas x columnas con la posición (orden fila-mayor) de la celda dueña; -1 = hueco."""
        return self._owner.copy()
