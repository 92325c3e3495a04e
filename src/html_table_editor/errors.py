from __future__ import annotations


class TableEditError(ValueError):
    """Error base de las operaciones de edición de la tabla."""


class OutOfRangeError(TableEditError, IndexError):
    """Índice de fila/columna fuera de la rejilla lógica actual."""


class InvalidOperationError(TableEditError):
    """Operación sin sentido para la selección o celda dada (p. ej. fusionar una sola celda)."""


class IndexInconsistencyError(TableEditError, KeyError):
    """Una celda física no aparece en el índice de la rejilla."""

    def __str__(self) -> str:
        # KeyError entrecomilla el mensaje; se deja como el resto de errores.
        return str(self.args[0]) if self.args else ""
