# src/tablespanner/slots.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, List, Optional, Set, Tuple, Union

from .errors import InvalidSpan


@dataclass(frozen=True)
class Span:
    """Número de columnas y filas que ocupa una celda."""
    colspan: int = 1
    rowspan: int = 1

    def __post_init__(self) -> None:
        for name in ("colspan", "rowspan"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidSpan(f"{name} debe ser entero, se recibió {value!r}")
            if value < 1:
                raise InvalidSpan(f"{name} debe ser >= 1, se recibió {value}")


DEFAULT_SPAN = Span()


@dataclass(frozen=True)
class Anchor:
    """Posición donde se origina el contenido de una celda (extensión ya resuelta)."""
    label: str
    colspan: int = 1
    rowspan: int = 1


@dataclass(frozen=True)
class Continuation:
    """Posición cubierta por el span de `label`, sin contenido propio."""
    label: str


@dataclass(frozen=True)
class Empty:
    """Posición no usada (p. ej. relleno de una fila corta)."""


EMPTY = Empty()

Slot = Union[Anchor, Continuation, Empty]


def slot_label(slot: Slot) -> Optional[str]:
    if isinstance(slot, (Anchor, Continuation)):
        return slot.label
    return None


@dataclass(frozen=True)
class PhysicalGrid:
    """Rejilla rectangular de slots, por filas."""
    rows: Tuple[Tuple[Slot, ...], ...]

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    def slot(self, row: int, col: int) -> Slot:
        return self.rows[row][col]

    def anchors(self) -> Iterator[Tuple[int, int, Anchor]]:
        for r, row in enumerate(self.rows):
            for c, slot in enumerate(row):
                if isinstance(slot, Anchor):
                    yield r, c, slot

    def positions(self, label: str) -> Set[Tuple[int, int]]:
        return {
            (r, c)
            for r, row in enumerate(self.rows)
            for c, slot in enumerate(row)
            if slot_label(slot) == label
        }

    def to_layout(self) -> List[List[Optional[str]]]:
        """Formato de salida clásico: la etiqueta en el ancla y None en el resto."""
        return [
            [slot.label if isinstance(slot, Anchor) else None for slot in row]
            for row in self.rows
        ]
