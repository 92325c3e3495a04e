from __future__ import annotations

import logging
import re
from typing import Dict, List

from bs4 import BeautifulSoup, Tag

from .structures import NORMAL, PhysicalCell, tag_for_kind

log = logging.getLogger(__name__)

SECTION_ORDER = ("thead", "tbody", "tfoot")
CELL_TAGS = ("td", "th")


def _child_tags(element: Tag, names) -> List[Tag]:
    return [c for c in element.children if isinstance(c, Tag) and c.name in names]


class PhysicalTable:
    """
    Tabla física: el árbol <table> de BeautifulSoup es la única fuente de verdad.

    Al construirse:
      - se agrupan las filas sueltas y los <tbody> múltiples en un único <tbody>,
      - las secciones quedan en orden thead, tbody, tfoot,
      - cada celda recibe un `id` estable si no lo trae.
    """

    def __init__(self, element: Tag, id_prefix: str = "cell"):
        if element is None or element.name != "table":
            raise ValueError("Se esperaba un elemento <table>.")
        self.element = element
        self.id_prefix = id_prefix
        self._next_id = 0
        self._sections: Dict[str, Tag] = {}
        self._factory = self._find_factory(element)
        self._normalize_sections()
        self._assign_ids()

    @classmethod
    def from_html(cls, html: str, features: str = "lxml", id_prefix: str = "cell") -> "PhysicalTable":
        from .parser import parse_table
        return cls(parse_table(html, features=features), id_prefix=id_prefix)

    @staticmethod
    def _find_factory(element: Tag) -> BeautifulSoup:
        root = element
        while root.parent is not None:
            root = root.parent
        if isinstance(root, BeautifulSoup):
            return root
        return BeautifulSoup("", "lxml")

    # ------------------------------------------------------------------
    # Secciones
    # ------------------------------------------------------------------

    def _normalize_sections(self) -> None:
        existing = {name: _child_tags(self.element, (name,)) for name in SECTION_ORDER}
        loose_rows = _child_tags(self.element, ("tr",))

        for name in ("thead", "tfoot"):
            found = existing[name]
            if found:
                self._sections[name] = found[0]
                for extra in found[1:]:
                    for row in _child_tags(extra, ("tr",)):
                        found[0].append(row.extract())
                    extra.decompose()

        bodies = existing["tbody"]
        if bodies:
            body = bodies[0]
        else:
            body = self._factory.new_tag("tbody")
        for row in loose_rows:
            body.append(row.extract())
        for extra in bodies[1:]:
            for row in _child_tags(extra, ("tr",)):
                body.append(row.extract())
            extra.decompose()
        self._sections["tbody"] = body
        self.update_sections()

    def section(self, name: str) -> Tag:
        """Devuelve la sección pedida, creándola (sin adjuntar) si no existe."""
        if name not in SECTION_ORDER:
            raise ValueError(f"Sección desconocida: {name}")
        if name not in self._sections:
            self._sections[name] = self._factory.new_tag(name)
        return self._sections[name]

    def update_sections(self) -> None:
        """Reordena las secciones y desengancha las vacías, como hace el navegador al pintar."""
        for name in SECTION_ORDER:
            sec = self._sections.get(name)
            if sec is not None and sec.parent is not None:
                sec.extract()
        for name in SECTION_ORDER:
            sec = self._sections.get(name)
            if sec is not None and _child_tags(sec, ("tr",)):
                self.element.append(sec)

    def section_of(self, row: Tag) -> str:
        parent = row.parent
        return parent.name if parent is not None else ""

    # ------------------------------------------------------------------
    # Filas y celdas
    # ------------------------------------------------------------------

    @property
    def rows(self) -> List[Tag]:
        result: List[Tag] = []
        for name in SECTION_ORDER:
            sec = self._sections.get(name)
            if sec is not None:
                result.extend(_child_tags(sec, ("tr",)))
        return result

    def row_cells(self, row: Tag) -> List[PhysicalCell]:
        return [PhysicalCell(tag) for tag in _child_tags(row, CELL_TAGS)]

    def cells(self) -> List[PhysicalCell]:
        return [cell for row in self.rows for cell in self.row_cells(row)]

    def first_row_width(self) -> int:
        rows = self.rows
        if not rows:
            return 0
        return sum(cell.colspan for cell in self.row_cells(rows[0]))

    def ordinal_of(self, cell: PhysicalCell) -> int:
        siblings = self.row_cells(cell.row)
        for i, other in enumerate(siblings):
            if other == cell:
                return i
        raise ValueError(f"La celda {cell.id} no pertenece a su fila.")

    def _assign_ids(self) -> None:
        used = set()
        pattern = re.compile(rf"^{re.escape(self.id_prefix)}-(\d+)$")
        for cell in self.cells():
            cid = cell.id
            if cid:
                if cid in used:
                    log.warning("id de celda duplicado '%s'; se reasigna.", cid)
                    del cell.tag["id"]
                    continue
                used.add(cid)
                m = pattern.match(cid)
                if m:
                    self._next_id = max(self._next_id, int(m.group(1)) + 1)
        for cell in self.cells():
            if not cell.id:
                cell.tag["id"] = self._new_id()

    def _new_id(self) -> str:
        cid = f"{self.id_prefix}-{self._next_id}"
        self._next_id += 1
        return cid

    def new_cell(self, kind: str = NORMAL, text: str = "") -> PhysicalCell:
        tag = self._factory.new_tag(tag_for_kind(kind))
        tag["id"] = self._new_id()
        cell = PhysicalCell(tag)
        cell.content = text
        return cell

    def new_row(self) -> Tag:
        return self._factory.new_tag("tr")

    def insert_cell(self, row: Tag, index: int, cell: PhysicalCell) -> None:
        """Inserta `cell` en la posición ordinal `index` de la fila (como HTMLTableRowElement.insertCell)."""
        siblings = _child_tags(row, CELL_TAGS)
        if index >= len(siblings):
            if siblings:
                siblings[-1].insert_after(cell.tag)
            else:
                row.append(cell.tag)
        else:
            siblings[max(index, 0)].insert_before(cell.tag)

    def remove_cell(self, cell: PhysicalCell) -> None:
        cell.tag.decompose()

    def remove_row(self, row: Tag) -> None:
        row.decompose()
        self.update_sections()

    def to_html(self) -> str:
        return str(self.element)
