from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

log = logging.getLogger(__name__)

DEFAULT_JOIN_MARKER = ","
DEFAULT_SELECTED_CLASS = "selected"
DEFAULT_ID_PREFIX = "cell"
DEFAULT_PARSER = "lxml"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


@dataclass
class EditorOptions:
    """Opciones del editor. Todas tienen un valor por defecto razonable."""
    join_marker: str = DEFAULT_JOIN_MARKER
    new_cell_text: str = ""
    selected_class: str = DEFAULT_SELECTED_CLASS
    id_prefix: str = DEFAULT_ID_PREFIX
    parser: str = DEFAULT_PARSER

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]]) -> "EditorOptions":
        if options is None:
            return cls()
        if isinstance(options, EditorOptions):
            return options
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in options.items():
            if key in known:
                kwargs[key] = value
            else:
                log.warning("Opción desconocida ignorada: %s", key)
        return cls(**kwargs)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
