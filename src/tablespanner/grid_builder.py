# src/tablespanner/grid_builder.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
import numpy as np

from .errors import DuplicateAnchor
from .parser import coerce_logical_table, coerce_span_map
from .slots import DEFAULT_SPAN, EMPTY, Anchor, Continuation, PhysicalGrid, Slot

log = logging.getLogger(__name__)


@dataclass
class ActiveSpan:
    """Span anclado en una fila anterior que todavía baja a las siguientes."""
    column: int
    label: str
    colspan: int
    remaining_rows: int


class RowOccupancy:
    """Bitmap de columnas ocupadas en una fila. Crece a medida que se marcan columnas."""

    def __init__(self) -> None:
        self.mask = np.zeros(0, dtype=bool)

    @property
    def width(self) -> int:
        return len(self.mask)

    def mark(self, start: int, count: int) -> None:
        end = start + count
        if end > len(self.mask):
            self.mask = np.concatenate([self.mask, np.zeros(end - len(self.mask), dtype=bool)])
        self.mask[start:end] = True

    def fits(self, start: int, count: int) -> bool:
        # las columnas más allá del final del bitmap están libres
        return not self.mask[start:start + count].any()

    def next_fit(self, start: int, count: int) -> int:
        col = start
        while not self.fits(col, count):
            col += 1
        return col


def _continue_active_spans(active: List[ActiveSpan],
                           occupancy: RowOccupancy,
                           placed: Dict[int, Slot]) -> List[ActiveSpan]:
    """Marca las continuaciones de los spans activos en la fila actual y descuenta una fila."""
    still_active: List[ActiveSpan] = []
    for entry in active:
        occupancy.mark(entry.column, entry.colspan)
        for col in range(entry.column, entry.column + entry.colspan):
            placed[col] = Continuation(entry.label)
        entry.remaining_rows -= 1
        if entry.remaining_rows > 0:
            still_active.append(entry)
    return still_active


def resolve(logical_table: Sequence[Sequence[str]],
            span_map: Optional[Mapping[str, Any]] = None) -> PhysicalGrid:
    """
    Convierte la tabla lógica (etiquetas en orden de lectura) y el mapa de spans
    en una rejilla física rectangular.

    Cada etiqueta se coloca en la primera posición, a partir del cursor, donde
    caben todas sus columnas; así dos anclas nunca se solapan. Los rowspans que
    pasan de la última fila se recortan.

    También acepta los argumentos en el orden (span_map, logical_table), que es
    el que usa el front end JSON.
    """
    if isinstance(logical_table, Mapping) and not isinstance(span_map, Mapping):
        logical_table, span_map = span_map, logical_table
    spans = coerce_span_map(span_map)
    rows = coerce_logical_table(logical_table)
    n_rows = len(rows)
    log.info("Resolviendo rejilla: %d filas lógicas, %d spans declarados.", n_rows, len(spans))

    active: List[ActiveSpan] = []
    anchored: Dict[str, Tuple[int, int]] = {}
    placed_rows: List[Dict[int, Slot]] = []
    width = 0

    for r, labels in enumerate(rows):
        occupancy = RowOccupancy()
        placed: Dict[int, Slot] = {}
        active = _continue_active_spans(active, occupancy, placed)

        cursor = 0
        for label in labels:
            span = spans.get(label, DEFAULT_SPAN)
            col = occupancy.next_fit(cursor, span.colspan)
            if label in anchored:
                first_r, first_c = anchored[label]
                raise DuplicateAnchor(
                    f"La etiqueta {label!r} ya ancla en la fila {first_r}, columna {first_c}; "
                    f"aparece de nuevo en la fila {r}",
                    label=label,
                    position=(r, col),
                )

            if col != occupancy.next_fit(cursor, 1):
                log.debug("%r no cabe junto al cursor en la fila %d; se desplaza a la columna %d.", label, r, col)

            rowspan = min(span.rowspan, n_rows - r)
            if rowspan < span.rowspan:
                log.debug("Rowspan de %r recortado de %d a %d (fin de la tabla).", label, span.rowspan, rowspan)

            placed[col] = Anchor(label=label, colspan=span.colspan, rowspan=rowspan)
            for extra in range(col + 1, col + span.colspan):
                placed[extra] = Continuation(label)
            occupancy.mark(col, span.colspan)
            anchored[label] = (r, col)

            if rowspan > 1:
                active.append(ActiveSpan(column=col, label=label, colspan=span.colspan, remaining_rows=rowspan - 1))
            cursor = col + span.colspan

        active.sort(key=lambda entry: entry.column)
        width = max(width, occupancy.width)
        placed_rows.append(placed)

    unused = sorted(set(spans) - set(anchored))
    if unused:
        log.warning("Spans declarados para etiquetas que no aparecen en la tabla: %s", unused)

    grid = PhysicalGrid(rows=tuple(
        tuple(placed.get(c, EMPTY) for c in range(width)) for placed in placed_rows
    ))
    log.info("Rejilla resuelta con %d filas y %d columnas.", grid.height, grid.width)
    return grid
