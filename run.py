# run.py
from __future__ import annotations
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent / "src"))
from importlib import import_module
cli = import_module("tablespanner.cli")

if __name__ == "__main__":
    sys.exit(cli.main())
