from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence, Tuple

from .commands import (
    AlterCell,
    Command,
    ConvertCellKind,
    ConvertColumnKind,
    ConvertRowKind,
    InsertColumn,
    InsertRow,
    RemoveColumn,
    RemoveRow,
)
from .config import EditorOptions, setup_logging
from .editor import TableEditor
from .errors import TableEditError
from .exporters import grid_report
from .parser import read_table

log = logging.getLogger(__name__)

OPS_HELP = """Operaciones (en orden, repetibles con --op):
  merge:R0,C0:R1,C1     selecciona de (R0,C0) a (R1,C1) y fusiona
  split:R,C             divide la celda que cubre (R,C)
  insert-row:KIND[:POS] inserta fila (header|normal|footer)
  remove-row:N          elimina la fila N
  insert-col:KIND[:POS] inserta columna
  remove-col:N          elimina la columna N
  row-kind:N:KIND       convierte la fila N
  col-kind:N:KIND       convierte la columna N
  cell-kind:R,C:KIND    convierte la celda en (R,C)
  set:R,C:TEXTO         cambia el texto de la celda en (R,C)
"""


def _pair(text: str) -> Tuple[int, int]:
    r, c = text.split(",")
    return int(r), int(c)


def apply_op(editor: TableEditor, op: str) -> None:
    """Interpreta y ejecuta una operación de la línea de comandos."""
    name, _, rest = op.partition(":")
    args = rest.split(":") if rest else []
    try:
        if name == "merge":
            start, end = _pair(args[0]), _pair(args[1])
            editor.select(editor.grid.cell_at(*start).id, editor.grid.cell_at(*end).id)
            editor.merge_selection()
            return
        if name == "split":
            editor.split_cell(editor.grid.cell_at(*_pair(args[0])).id)
            return
        editor.execute(_build_command(name, args))
    except (IndexError, ValueError) as exc:
        if isinstance(exc, TableEditError):
            raise
        raise argparse.ArgumentTypeError(f"Operación mal formada '{op}': {exc}") from exc


def _build_command(name: str, args: Sequence[str]) -> Command:
    if name == "insert-row":
        return InsertRow(args[0], int(args[1]) if len(args) > 1 else None)
    if name == "remove-row":
        return RemoveRow(int(args[0]))
    if name == "insert-col":
        return InsertColumn(args[0], int(args[1]) if len(args) > 1 else None)
    if name == "remove-col":
        return RemoveColumn(int(args[0]))
    if name == "row-kind":
        return ConvertRowKind(int(args[0]), args[1])
    if name == "col-kind":
        return ConvertColumnKind(int(args[0]), args[1])
    if name == "cell-kind":
        row, col = _pair(args[0])
        return ConvertCellKind(col, row, args[1])
    if name == "set":
        row, col = _pair(args[0])
        return AlterCell(col, row, ":".join(args[1:]))
    raise ValueError(f"operación desconocida '{name}'")


def parse_args(argv: Sequence[str] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Edita una tabla HTML con celdas combinadas y muestra la rejilla lógica resultante.",
        epilog=OPS_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("html_path", type=str, help="Ruta al archivo HTML con la tabla")
    parser.add_argument("--table-index", type=int, default=0, help="Qué <table> del documento editar (default: 0)")
    parser.add_argument("--op", action="append", default=[], help="Operación a aplicar (ver abajo)")
    parser.add_argument("--show", default="id", choices=["id", "content"],
                        help="Qué mostrar en cada posición de la rejilla (default: id)")
    parser.add_argument("--print-html", action="store_true", help="Imprime además el HTML resultante")
    parser.add_argument("--join-marker", default=None, help="Separador al fusionar textos (default: ',')")
    parser.add_argument("--loglevel", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Nivel de verbosidad del log (default: INFO)")
    return parser.parse_args(argv)


def main(argv: Sequence[str] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.loglevel)

    options = {}
    if args.join_marker is not None:
        options["join_marker"] = args.join_marker
    options = EditorOptions.from_mapping(options)

    try:
        table = read_table(args.html_path, features=options.parser, index=args.table_index)
        editor = TableEditor(table, options)
        log.info("Tabla cargada: %d filas x %d columnas lógicas.", editor.grid.row_count, editor.grid.column_count)
        for op in args.op:
            log.info("Aplicando %s", op)
            apply_op(editor, op)
    except FileNotFoundError:
        log.error("Error: No se encontró el archivo de entrada: %s", args.html_path)
        return 1
    except (TableEditError, argparse.ArgumentTypeError) as exc:
        log.error("No se pudo editar la tabla: %s", exc)
        return 1
    except Exception as exc:
        log.error("Ocurrió un error inesperado: %s", exc, exc_info=True)
        return 1

    print(grid_report(editor.grid, show=args.show))
    if args.print_html:
        print(editor.to_html())
    problems = editor.grid.coverage_problems()
    if problems:
        log.warning("La rejilla final tiene %d problemas de cobertura.", len(problems))
    return 0


if __name__ == "__main__":
    sys.exit(main())
