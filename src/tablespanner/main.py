from __future__ import annotations

import logging
from typing import Any, Optional

from .exporters import grid_to_layout_json, grid_to_rows, rows_to_csv, rows_to_csv_text, write_text
from .grid_builder import resolve
from .parser import parse_content_map, parse_logical_table, parse_span_map
from .renderer import RenderOptions, render

log = logging.getLogger(__name__)

OUTPUT_FORMATS = ("text", "json", "csv")


def spans_to_output(
    span_map: Any,
    logical_table: Any,
    *,
    content: Any = None,
    fmt: str = "text",
    options: Optional[RenderOptions] = None,
    output_path: Optional[str] = None,
) -> str:
    """
    Orquesta resolución y salida: decodifica las entradas (JSON o ya decodificadas),
    resuelve la rejilla y la dibuja o exporta según `fmt`.
    Cualquier error de resolución aborta antes de producir salida.
    """
    fmt = (fmt or "text").lower()
    if fmt not in OUTPUT_FORMATS:
        raise ValueError(f"Formato de salida desconocido: {fmt!r}")
    log.info("Formato seleccionado: %s", fmt)

    spans = parse_span_map(span_map)
    table = parse_logical_table(logical_table)
    content_map = parse_content_map(content) if content is not None else None

    grid = resolve(table, spans)

    if fmt == "json":
        result = grid_to_layout_json(grid)
    elif fmt == "csv":
        rows = grid_to_rows(grid, content_map)
        result = rows_to_csv_text(rows)
        if output_path:
            rows_to_csv(rows, output_path)
            log.info("CSV escrito en: %s", output_path)
        return result
    else:
        result = render(grid, content_map, options)

    if output_path:
        write_text(result, output_path)
        log.info("Salida escrita en: %s", output_path)
    return result
