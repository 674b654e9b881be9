from __future__ import annotations
from typing import Optional, Tuple


class TableSpanError(ValueError):
    """Error base del paquete. Lleva el tipo de error, la etiqueta y la posición implicadas."""

    kind = "TableSpanError"

    def __init__(self, message: str, *,
                 label: Optional[str] = None,
                 position: Optional[Tuple[int, int]] = None) -> None:
        super().__init__(message)
        self.label = label
        self.position = position

    def describe(self) -> str:
        return f"{self.kind}: {self}"


class InvalidSpan(TableSpanError):
    """colspan o rowspan menor que 1 (o no entero)."""
    kind = "InvalidSpan"


class DuplicateAnchor(TableSpanError):
    """Una etiqueta ancla más de una posición física."""
    kind = "DuplicateAnchor"


class MalformedInput(TableSpanError):
    kind = "MalformedInput"


class MissingContent(TableSpanError):
    """El lookup de contenido no tiene texto para una etiqueta del grid."""
    kind = "MissingContent"
