# src/tablespanner/exporters.py
from __future__ import annotations
from pathlib import Path
from typing import List, Union
import csv
import io
import json

from .renderer import ContentLookup, make_lookup
from .slots import Anchor, PhysicalGrid


def ensure_parent_dir(path: Union[str, Path]) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def grid_to_layout_json(grid: PhysicalGrid) -> str:
    """Layout en JSON compacto: etiqueta en cada ancla, null en el resto."""
    return json.dumps(grid.to_layout(), separators=(",", ":"), ensure_ascii=False)


def grid_to_rows(grid: PhysicalGrid, content_lookup: ContentLookup = None) -> List[List[str]]:
    lookup = make_lookup(content_lookup)
    return [
        [lookup(slot.label) if isinstance(slot, Anchor) else "" for slot in row]
        for row in grid.rows
    ]


def rows_to_csv_text(rows: List[List[str]]) -> str:
    buf = io.StringIO()
    csv.writer(buf).writerows(rows)
    return buf.getvalue()


def rows_to_csv(rows: List[List[str]], csv_path: str) -> None:
    ensure_parent_dir(csv_path)
    with open(csv_path, "w", encoding="utf-8-sig", newline="") as f:
        w = csv.writer(f)
        w.writerows(rows)


def grid_to_csv_text(grid: PhysicalGrid, content_lookup: ContentLookup = None) -> str:
    return rows_to_csv_text(grid_to_rows(grid, content_lookup))


def grid_to_csv(grid: PhysicalGrid, content_lookup: ContentLookup, csv_path: str) -> None:
    rows_to_csv(grid_to_rows(grid, content_lookup), csv_path)


def write_text(text: str, path: str) -> None:
    ensure_parent_dir(path)
    with open(path, "w", encoding="utf-8") as fh:
        fh.write(text)
        if text and not text.endswith("\n"):
            fh.write("\n")
