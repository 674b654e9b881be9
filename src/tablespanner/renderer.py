# src/tablespanner/renderer.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Tuple, Union
import numpy as np

from .errors import MissingContent
from .slots import Anchor, Continuation, PhysicalGrid

log = logging.getLogger(__name__)

DEFAULT_BORDER_STYLE = "ascii"
DEFAULT_MIN_WIDTH = 1
DEFAULT_ALIGN = "left"
CELL_PADDING = 1

BORDER_STYLES = ("ascii", "unicode")
ALIGNMENTS = ("left", "center")

ContentLookup = Union[Mapping[str, str], Callable[[str], str], None]

# (arriba, abajo, izquierda, derecha) -> glifo
_UNICODE_JUNCTIONS: Dict[Tuple[bool, bool, bool, bool], str] = {
    (False, True, False, True): "┌",
    (False, True, True, False): "┐",
    (True, False, False, True): "└",
    (True, False, True, False): "┘",
    (True, True, False, True): "├",
    (True, True, True, False): "┤",
    (False, True, True, True): "┬",
    (True, False, True, True): "┴",
    (True, True, True, True): "┼",
    (False, False, True, True): "─",
    (True, True, False, False): "│",
}


@dataclass(frozen=True)
class RenderOptions:
    border_style: str = DEFAULT_BORDER_STYLE
    min_width: int = DEFAULT_MIN_WIDTH
    align: str = DEFAULT_ALIGN
    padding: int = CELL_PADDING

    def __post_init__(self) -> None:
        if self.border_style not in BORDER_STYLES:
            raise ValueError(f"Estilo de borde desconocido: {self.border_style!r}")
        if self.align not in ALIGNMENTS:
            raise ValueError(f"Alineación desconocida: {self.align!r}")
        if self.min_width < 0 or self.padding < 0:
            raise ValueError("min_width y padding deben ser >= 0")

    @property
    def separator_width(self) -> int:
        """Columnas de texto entre dos columnas vecinas: padding + borde + padding."""
        return 2 * self.padding + 1


def make_lookup(content_lookup: ContentLookup) -> Callable[[str], str]:
    """Unifica mapping, callable o None (la etiqueta es su propio texto) y traduce fallos a MissingContent."""
    if content_lookup is None:
        return lambda label: label

    getter = content_lookup.__getitem__ if isinstance(content_lookup, Mapping) else content_lookup

    def lookup(label: str) -> str:
        try:
            text = getter(label)
        except KeyError as exc:
            raise MissingContent(f"No hay contenido para la etiqueta {label!r}", label=label) from exc
        if text is None:
            raise MissingContent(f"No hay contenido para la etiqueta {label!r}", label=label)
        return str(text)

    return lookup


def text_lines(text: str) -> List[str]:
    lines = text.splitlines()
    return lines or [""]


def text_width(text: str) -> int:
    return max(len(line) for line in text_lines(text))


def text_height(text: str) -> int:
    return len(text_lines(text))


def distribute_largest_remainder(sizes: np.ndarray, deficit: int) -> np.ndarray:
    """
    Reparte `deficit` unidades entre `sizes` en proporción a su tamaño actual
    (método del mayor resto). Si todos pesan 0, el reparto es uniforme.
    Los empates se resuelven a favor del tamaño menor y, después, del índice más bajo.
    """
    sizes = np.asarray(sizes, dtype=np.int64)
    weights = sizes if sizes.sum() > 0 else np.ones_like(sizes)
    total = int(weights.sum())
    quotas = (deficit * weights) // total
    remainders = (deficit * weights) % total
    leftover = deficit - int(quotas.sum())
    order = np.lexsort((np.arange(len(sizes)), sizes, -remainders))
    quotas[order[:leftover]] += 1
    return sizes + quotas


def _fit_spans(sizes: np.ndarray,
               spans: List[Tuple[int, int, int]],
               separator: int) -> np.ndarray:
    """
    Crece `sizes` para que cada (inicio, extensión, necesario) de varias
    unidades quepa. Se procesan de menor a mayor extensión.
    """
    for start, extent, needed in sorted(spans, key=lambda s: s[1]):
        window = sizes[start:start + extent]
        available = int(window.sum()) + (extent - 1) * separator
        if needed > available:
            sizes[start:start + extent] = distribute_largest_remainder(window, needed - available)
    return sizes


def compute_column_widths(grid: PhysicalGrid,
                          texts: Dict[str, str],
                          options: RenderOptions) -> np.ndarray:
    widths = np.full(grid.width, options.min_width, dtype=np.int64)
    multi: List[Tuple[int, int, int]] = []
    for _, c, anchor in grid.anchors():
        w = text_width(texts[anchor.label])
        if anchor.colspan == 1:
            widths[c] = max(widths[c], w)
        else:
            multi.append((c, anchor.colspan, w))
    return _fit_spans(widths, multi, options.separator_width)


def compute_row_heights(grid: PhysicalGrid, texts: Dict[str, str]) -> np.ndarray:
    heights = np.ones(grid.height, dtype=np.int64)
    multi: List[Tuple[int, int, int]] = []
    for r, _, anchor in grid.anchors():
        h = text_height(texts[anchor.label])
        if anchor.rowspan == 1:
            heights[r] = max(heights[r], h)
        else:
            multi.append((r, anchor.rowspan, h))
    # una fila de borde separa las filas de un mismo span
    return _fit_spans(heights, multi, 1)


def _boundaries(sizes: np.ndarray, extra: int) -> np.ndarray:
    """Posición de cada línea de borde: 0, luego acumulando tamaño + extra + 1."""
    return np.concatenate([[0], np.cumsum(sizes + extra + 1)])


def _draw_box(canvas: np.ndarray, top: int, bottom: int, left: int, right: int) -> None:
    canvas[top, left + 1:right] = "-"
    canvas[bottom, left + 1:right] = "-"
    canvas[top + 1:bottom, left] = "|"
    canvas[top + 1:bottom, right] = "|"


def _to_unicode(canvas: np.ndarray) -> np.ndarray:
    out = canvas.copy()
    out[canvas == "-"] = "─"
    out[canvas == "|"] = "│"
    height, width = canvas.shape
    for y, x in zip(*np.nonzero(canvas == "+")):
        y, x = int(y), int(x)
        arms = (
            y > 0 and canvas[y - 1, x] in "|+",
            y < height - 1 and canvas[y + 1, x] in "|+",
            x > 0 and canvas[y, x - 1] in "-+",
            x < width - 1 and canvas[y, x + 1] in "-+",
        )
        out[y, x] = _UNICODE_JUNCTIONS.get(arms, "┼")
    return out


def render(grid: PhysicalGrid,
           content_lookup: ContentLookup = None,
           options: Optional[RenderOptions] = None) -> str:
    """
    Dibuja la rejilla física como texto con bordes.

    El contenido de cada ancla se alinea arriba y a la izquierda (o centrado)
    dentro del rectángulo que cubre; las continuaciones quedan en blanco.
    """
    options = options or RenderOptions()
    if grid.height == 0 or grid.width == 0:
        log.warning("Rejilla vacía; no hay nada que dibujar.")
        return ""

    lookup = make_lookup(content_lookup)
    texts = {anchor.label: lookup(anchor.label) for _, _, anchor in grid.anchors()}

    widths = compute_column_widths(grid, texts, options)
    heights = compute_row_heights(grid, texts)
    log.debug("Anchos de columna: %s; altos de fila: %s", widths.tolist(), heights.tolist())

    xs = _boundaries(widths, 2 * options.padding)
    ys = _boundaries(heights, 0)
    canvas = np.full((int(ys[-1]) + 1, int(xs[-1]) + 1), " ", dtype="<U1")

    boxes: List[Tuple[int, int, int, int]] = []
    for r, row in enumerate(grid.rows):
        for c, slot in enumerate(row):
            if isinstance(slot, Continuation):
                continue
            colspan = slot.colspan if isinstance(slot, Anchor) else 1
            rowspan = slot.rowspan if isinstance(slot, Anchor) else 1
            boxes.append((int(ys[r]), int(ys[r + rowspan]), int(xs[c]), int(xs[c + colspan])))

    for top, bottom, left, right in boxes:
        _draw_box(canvas, top, bottom, left, right)
    for top, bottom, left, right in boxes:
        canvas[[top, top, bottom, bottom], [left, right, left, right]] = "+"
    # los glifos unicode se calculan sobre el lienzo sin texto
    if options.border_style == "unicode":
        canvas = _to_unicode(canvas)

    for r, c, anchor in grid.anchors():
        top, left = int(ys[r]) + 1, int(xs[c]) + 1 + options.padding
        inner = int(xs[c + anchor.colspan]) - int(xs[c]) - 1 - 2 * options.padding
        for offset, line in enumerate(text_lines(texts[anchor.label])):
            if options.align == "center":
                line = line.center(inner)
            if line:
                canvas[top + offset, left:left + len(line)] = list(line)

    log.info("Tabla dibujada: %d x %d caracteres.", canvas.shape[1], canvas.shape[0])
    return "\n".join("".join(row) for row in canvas.tolist())
