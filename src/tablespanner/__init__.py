from .errors import DuplicateAnchor, InvalidSpan, MalformedInput, MissingContent, TableSpanError
from .grid_builder import resolve
from .renderer import RenderOptions, render
from .slots import EMPTY, Anchor, Continuation, Empty, PhysicalGrid, Slot, Span

__all__ = [
    "resolve",
    "render",
    "RenderOptions",
    "PhysicalGrid",
    "Slot",
    "Anchor",
    "Continuation",
    "Empty",
    "EMPTY",
    "Span",
    "TableSpanError",
    "InvalidSpan",
    "DuplicateAnchor",
    "MalformedInput",
    "MissingContent",
]
