# run.py
from __future__ import annotations
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent / "src"))
from importlib import import_module
editor_main = import_module("html_table_editor.main")

if __name__ == "__main__":
    sys.exit(editor_main.main())
