from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

from bs4 import NavigableString, Tag

HEADER = "header"
NORMAL = "normal"
FOOTER = "footer"
CELL_KINDS = (HEADER, NORMAL, FOOTER)


def tag_for_kind(kind: str) -> str:
    """Los tipos header/footer se pintan como <th>, el resto como <td>."""
    return "th" if kind in (HEADER, FOOTER) else "td"


def _span_value(raw: Optional[str]) -> int:
    if not raw:
        return 1
    try:
        value = int(str(raw).strip())
    except ValueError:
        return 1
    return max(1, value)


@dataclass(frozen=True)
class LogicalRect:
    """Rectángulo inclusivo sobre la rejilla lógica (filas/columnas tras aplicar spans)."""
    start_row: int
    start_col: int
    end_row: int
    end_col: int

    @classmethod
    def span(cls, a: "LogicalRect", b: "LogicalRect") -> "LogicalRect":
        return a.union(b)

    @property
    def row_count(self) -> int:
        return self.end_row - self.start_row + 1

    @property
    def col_count(self) -> int:
        return self.end_col - self.start_col + 1

    @property
    def is_unit(self) -> bool:
        return self.start_row == self.end_row and self.start_col == self.end_col

    def rows(self) -> range:
        return range(self.start_row, self.end_row + 1)

    def cols(self) -> range:
        return range(self.start_col, self.end_col + 1)

    def corners(self) -> Tuple[Tuple[int, int], ...]:
        return (
            (self.start_row, self.start_col),
            (self.end_row, self.start_col),
            (self.start_row, self.end_col),
            (self.end_row, self.end_col),
        )

    def covers(self, row: int, col: int) -> bool:
        return self.start_row <= row <= self.end_row and self.start_col <= col <= self.end_col

    def contains(self, other: "LogicalRect") -> bool:
        return (other.start_row >= self.start_row and other.end_row <= self.end_row and
                other.start_col >= self.start_col and other.end_col <= self.end_col)

    def overlaps(self, other: "LogicalRect") -> bool:
        return (other.start_row <= self.end_row and other.end_row >= self.start_row and
                other.start_col <= self.end_col and other.end_col >= self.start_col)

    def union(self, other: "LogicalRect") -> "LogicalRect":
        return LogicalRect(
            start_row=min(self.start_row, other.start_row),
            start_col=min(self.start_col, other.start_col),
            end_row=max(self.end_row, other.end_row),
            end_col=max(self.end_col, other.end_col),
        )


class PhysicalCell:
    """
    Envoltorio ligero sobre un <td>/<th> de BeautifulSoup.

    La identidad es el atributo `id` de la celda; dos envoltorios sobre la misma
    etiqueta son iguales.
    """
    __slots__ = ("tag",)

    def __init__(self, tag: Tag):
        self.tag = tag

    def __repr__(self) -> str:
        return f"PhysicalCell(id={self.id!r}, rowspan={self.rowspan}, colspan={self.colspan})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, PhysicalCell) and other.tag is self.tag

    def __hash__(self) -> int:
        return id(self.tag)

    @property
    def id(self) -> str:
        return self.tag.get("id", "")

    @property
    def row(self) -> Optional[Tag]:
        return self.tag.parent

    @property
    def rowspan(self) -> int:
        return _span_value(self.tag.get("rowspan"))

    @rowspan.setter
    def rowspan(self, value: int) -> None:
        self._set_span("rowspan", value)

    @property
    def colspan(self) -> int:
        return _span_value(self.tag.get("colspan"))

    @colspan.setter
    def colspan(self, value: int) -> None:
        self._set_span("colspan", value)

    def _set_span(self, attr: str, value: int) -> None:
        value = int(value)
        if value < 1:
            raise ValueError(f"{attr} debe ser >= 1 (recibido {value})")
        if value == 1:
            if attr in self.tag.attrs:
                del self.tag[attr]
        else:
            self.tag[attr] = str(value)

    @property
    def content(self) -> str:
        return self.tag.get_text()

    @content.setter
    def content(self, text: str) -> None:
        self.tag.clear()
        if text:
            self.tag.append(NavigableString(text))

    @property
    def kind(self) -> str:
        if self.tag.name == "td":
            return NORMAL
        section = self.row.parent if self.row is not None else None
        if section is not None and section.name == "tfoot":
            return FOOTER
        return HEADER

    def has_class(self, name: str) -> bool:
        return name in (self.tag.get("class") or [])

    def add_class(self, name: str) -> None:
        classes = list(self.tag.get("class") or [])
        if name not in classes:
            classes.append(name)
            self.tag["class"] = classes

    def remove_class(self, name: str) -> None:
        classes = [c for c in (self.tag.get("class") or []) if c != name]
        if classes:
            self.tag["class"] = classes
        elif "class" in self.tag.attrs:
            del self.tag["class"]
