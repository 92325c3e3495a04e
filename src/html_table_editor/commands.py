from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, List, Optional, Union

from .errors import InvalidOperationError
from .structures import HEADER, NORMAL

if TYPE_CHECKING:
    from .editor import TableEditor

ROW = "row"
COLUMN = "col"


@dataclass(frozen=True)
class InsertRow:
    kind: str = NORMAL
    position: Optional[int] = None


@dataclass(frozen=True)
class RemoveRow:
    index: int


@dataclass(frozen=True)
class InsertColumn:
    kind: str = NORMAL
    position: Optional[int] = None


@dataclass(frozen=True)
class RemoveColumn:
    index: int


@dataclass(frozen=True)
class ConvertRowKind:
    index: int
    kind: str


@dataclass(frozen=True)
class ConvertColumnKind:
    index: int
    kind: str


@dataclass(frozen=True)
class ConvertCellKind:
    col: int
    row: int
    kind: str


@dataclass(frozen=True)
class AlterCell:
    col: int
    row: int
    text: str


@dataclass(frozen=True)
class MergeSelection:
    pass


@dataclass(frozen=True)
class SplitCell:
    cell_id: str


@dataclass(frozen=True)
class SplitSelection:
    pass


Command = Union[InsertRow, RemoveRow, InsertColumn, RemoveColumn, ConvertRowKind,
                ConvertColumnKind, ConvertCellKind, AlterCell, MergeSelection,
                SplitCell, SplitSelection]


def dispatch(editor: "TableEditor", command: Command) -> Any:
    """Ejecuta un comando sobre el editor. Un único punto de despacho por tipo."""
    if isinstance(command, InsertRow):
        return editor.insert_row(command.kind, command.position)
    if isinstance(command, RemoveRow):
        return editor.remove_row(command.index)
    if isinstance(command, InsertColumn):
        return editor.insert_column(command.kind, command.position)
    if isinstance(command, RemoveColumn):
        return editor.remove_column(command.index)
    if isinstance(command, ConvertRowKind):
        return editor.change_row_kind(command.index, command.kind)
    if isinstance(command, ConvertColumnKind):
        return editor.change_column_kind(command.index, command.kind)
    if isinstance(command, ConvertCellKind):
        return editor.change_cell_kind(command.col, command.row, command.kind)
    if isinstance(command, AlterCell):
        return editor.alter_cell(command.col, command.row, command.text)
    if isinstance(command, MergeSelection):
        return editor.merge_selection()
    if isinstance(command, SplitCell):
        return editor.split_cell(command.cell_id)
    if isinstance(command, SplitSelection):
        return editor.split_selection()
    raise InvalidOperationError(f"Comando desconocido: {command!r}")


# ----------------------------------------------------------------------
# Menú de los controladores de fila/columna
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class MenuItem:
    label: str
    command: Command


def column_label(index: int) -> str:
    """0 -> 'A', 25 -> 'Z', 26 -> 'AA'... como las cabeceras de una hoja de cálculo."""
    label = ""
    n = index
    while n >= 0:
        label = chr(65 + n % 26) + label
        n = n // 26 - 1
    return label


def controller_menu(orientation: str, index: int) -> List[MenuItem]:
    """Entradas del menú contextual de la fila o columna `index`."""
    if orientation == ROW:
        name, insert, remove, convert = "Row", InsertRow, RemoveRow, ConvertRowKind
    elif orientation == COLUMN:
        name, insert, remove, convert = "Column", InsertColumn, RemoveColumn, ConvertColumnKind
    else:
        raise InvalidOperationError(f"Orientación desconocida: {orientation!r}")

    return [
        MenuItem(f"Delete {name}", remove(index)),
        MenuItem(f"Insert Header {name} Before", insert(HEADER, index)),
        MenuItem(f"Insert Header {name} After", insert(HEADER, index + 1)),
        MenuItem(f"Insert {name} Before", insert(NORMAL, index)),
        MenuItem(f"Insert {name} After", insert(NORMAL, index + 1)),
        MenuItem(f"Convert to header {name.lower()}", convert(index, HEADER)),
        MenuItem(f"Convert to regular {name.lower()}", convert(index, NORMAL)),
    ]
