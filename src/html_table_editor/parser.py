# src/html_table_editor/parser.py
from __future__ import annotations
from typing import Optional
from bs4 import BeautifulSoup, Tag


def _load_soup(text: str, features: str = "lxml") -> BeautifulSoup:
    return BeautifulSoup(text, features)


def parse_table(html: str, features: str = "lxml", index: int = 0) -> Tag:
    """
    Devuelve el `index`-ésimo <table> del documento.
    Solo se edita una tabla por editor; las tablas anidadas no se tratan aparte.
    """
    soup = _load_soup(html, features)
    tables = soup.find_all("table")
    if not tables:
        raise ValueError("No se encontró ningún <table> en el HTML de entrada.")
    if index >= len(tables):
        raise ValueError(f"El documento tiene {len(tables)} tablas; índice {index} no válido.")
    return tables[index]


def read_table(html_path: str, features: str = "lxml", index: int = 0,
               encoding: Optional[str] = "utf-8") -> Tag:
    with open(html_path, "r", encoding=encoding) as f:
        raw = f.read()
    return parse_table(raw, features=features, index=index)
