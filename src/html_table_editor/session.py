from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from .grid_index import GridIndex
from .normalizer import normalize
from .structures import LogicalRect

log = logging.getLogger(__name__)

IDLE = "idle"
SELECTING = "selecting"


@dataclass
class Selection:
    anchor_id: str
    cursor_id: str
    rect: LogicalRect


class SelectionSession:
    """
    Máquina de estados de la selección con puntero (una por tabla).

    idle --down--> selecting --move--> selecting --up--> idle

    Al soltar, la selección se conserva hasta el siguiente `pointer_down` o hasta
    que se fusiona/divide.
    """

    def __init__(self, grid_provider: Callable[[], GridIndex], selected_class: str = "selected"):
        self._grid = grid_provider
        self.selected_class = selected_class
        self.state = IDLE
        self.selection: Optional[Selection] = None
        self._marked: List[str] = []

    @property
    def rect(self) -> Optional[LogicalRect]:
        return self.selection.rect if self.selection else None

    @property
    def selected_ids(self) -> List[str]:
        return list(self._marked)

    def pointer_down(self, cell_id: str) -> bool:
        grid = self._grid()
        if cell_id not in grid:
            log.debug("pointer_down fuera de una celda (%s); se ignora.", cell_id)
            return False
        self._unmark(grid)
        rect = grid.rect_of(cell_id)
        self.selection = Selection(anchor_id=cell_id, cursor_id=cell_id, rect=rect)
        self.state = SELECTING
        self._mark(grid)
        return True

    def pointer_move(self, cell_id: str) -> bool:
        if self.state != SELECTING or self.selection is None:
            return False
        if cell_id == self.selection.cursor_id:
            return False
        grid = self._grid()
        if cell_id not in grid:
            return False
        anchor = grid.rect_of(self.selection.anchor_id)
        cursor = grid.rect_of(cell_id)
        self.selection.cursor_id = cell_id
        self.selection.rect = normalize(LogicalRect.span(anchor, cursor), grid)
        self._unmark(grid)
        self._mark(grid)
        return True

    def pointer_up(self) -> None:
        self.state = IDLE

    def clear(self) -> None:
        """Olvida la selección y quita las marcas de las celdas que sigan en la tabla."""
        self._unmark(self._grid())
        self.selection = None
        self.state = IDLE

    def _mark(self, grid: GridIndex) -> None:
        self._marked = []
        for cell in grid.cells_within(self.selection.rect):
            cell.add_class(self.selected_class)
            self._marked.append(cell.id)

    def _unmark(self, grid: GridIndex) -> None:
        for cid in self._marked:
            if cid in grid:
                grid.cell(cid).remove_class(self.selected_class)
        self._marked = []
