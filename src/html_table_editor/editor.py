from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from bs4 import Tag

from . import merge_split, structure_editor
from .commands import Command, dispatch
from .config import EditorOptions
from .errors import InvalidOperationError
from .grid_index import GridIndex
from .parser import parse_table
from .session import SelectionSession
from .structures import NORMAL
from .table import PhysicalTable

log = logging.getLogger(__name__)

UPDATE_EVENT = "update"
_EVENT_NAME_RE = re.compile(r"[^a-z0-9.*\-]", re.IGNORECASE)


class TableEditor:
    """
    Editor de una tabla HTML con celdas combinadas.

    La tabla física (árbol de BeautifulSoup) es la fuente de verdad; tras cada
    cambio se reconstruye el índice de la rejilla completo antes de devolver el
    control y se emite el evento `update`.
    """

    def __init__(self,
                 source: Union[str, Tag, PhysicalTable],
                 options: Optional[Union[Mapping[str, Any], EditorOptions]] = None):
        self.options = EditorOptions.from_mapping(options)
        if isinstance(source, PhysicalTable):
            self.table = source
        elif isinstance(source, Tag):
            self.table = PhysicalTable(source, id_prefix=self.options.id_prefix)
        else:
            self.table = PhysicalTable(parse_table(source, features=self.options.parser),
                                       id_prefix=self.options.id_prefix)
        self._handlers: Dict[str, List[Callable[..., Any]]] = {}
        self.grid = GridIndex.build(self.table)
        self.session = SelectionSession(lambda: self.grid, self.options.selected_class)

    # ------------------------------------------------------------------
    # Eventos
    # ------------------------------------------------------------------

    def on(self, event_name: str, handler: Callable[..., Any]) -> None:
        if not event_name or not isinstance(event_name, str) or _EVENT_NAME_RE.search(event_name):
            raise ValueError("Nombre de evento no válido.")
        if not callable(handler):
            raise ValueError("Hace falta una función para suscribirse al evento.")
        self._handlers.setdefault(event_name, []).append(handler)

    def _emit(self, event_name: str, *args: Any) -> None:
        for handler in self._handlers.get(event_name, []):
            handler(*args)

    def refresh(self) -> GridIndex:
        """Reconstruye el índice desde la tabla física."""
        self.grid = GridIndex.build(self.table)
        self._emit(UPDATE_EVENT)
        return self.grid

    # ------------------------------------------------------------------
    # Puntero
    # ------------------------------------------------------------------

    def pointer_down(self, cell_id: str) -> bool:
        return self.session.pointer_down(cell_id)

    def pointer_move(self, cell_id: str) -> bool:
        return self.session.pointer_move(cell_id)

    def pointer_up(self) -> None:
        self.session.pointer_up()

    def select(self, anchor_id: str, cursor_id: Optional[str] = None) -> None:
        """Atajo: pulsar sobre `anchor_id`, arrastrar hasta `cursor_id` y soltar."""
        self.pointer_down(anchor_id)
        if cursor_id is not None:
            self.pointer_move(cursor_id)
        self.pointer_up()

    @property
    def selected_ids(self) -> List[str]:
        return self.session.selected_ids

    def get_selected_text(self) -> str:
        return self.options.join_marker.join(self.grid.cell(cid).content for cid in self.session.selected_ids)

    # ------------------------------------------------------------------
    # Fusión / división
    # ------------------------------------------------------------------

    def merge_selection(self) -> str:
        rect = self.session.rect
        if rect is None:
            raise InvalidOperationError("No hay ninguna selección que fusionar.")
        survivor = merge_split.merge_cells(self.table, self.grid, rect, self.options.join_marker)
        self.refresh()
        self.session.clear()
        return survivor

    def split_cell(self, cell_id: str) -> List[str]:
        created = merge_split.split_cell(self.table, self.grid, cell_id, self.options.new_cell_text)
        self.refresh()
        self.session.clear()
        return created

    def split_selection(self) -> List[str]:
        rect = self.session.rect
        if rect is None:
            raise InvalidOperationError("No hay ninguna selección que dividir.")
        created = merge_split.split_region(self.table, self.grid, rect, self.options.new_cell_text)
        self.refresh()
        self.session.clear()
        return created

    # ------------------------------------------------------------------
    # Filas y columnas
    # ------------------------------------------------------------------

    def _structural(self, func: Callable[..., Any], *args: Any) -> Any:
        result = func(self.table, self.grid, *args)
        self.refresh()
        self.session.clear()
        return result

    def insert_row(self, kind: str = NORMAL, position: Optional[int] = None) -> None:
        self._structural(structure_editor.insert_row, kind, position, self.options.new_cell_text)

    def remove_row(self, row_index: int) -> None:
        self._structural(structure_editor.remove_row, row_index)

    def insert_column(self, kind: str = NORMAL, position: Optional[int] = None) -> None:
        self._structural(structure_editor.insert_column, kind, position, self.options.new_cell_text)

    def remove_column(self, col: int) -> None:
        self._structural(structure_editor.remove_column, col)

    def change_cell_kind(self, col: int, row: int, kind: str) -> bool:
        changed = structure_editor.change_cell_kind(self.table, self.grid, col, row, kind)
        self.refresh()
        return changed

    def change_row_kind(self, row: int, kind: str) -> int:
        changed = structure_editor.change_row_kind(self.table, self.grid, row, kind)
        self.refresh()
        return changed

    def change_column_kind(self, col: int, kind: str) -> int:
        changed = structure_editor.change_column_kind(self.table, self.grid, col, kind)
        self.refresh()
        return changed

    def alter_cell(self, col: int, row: int, text: str) -> None:
        structure_editor.alter_cell(self.table, self.grid, col, row, text)
        self.refresh()

    def execute(self, command: Command) -> Any:
        return dispatch(self, command)

    def to_html(self) -> str:
        return self.table.to_html()
