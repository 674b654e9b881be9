# src/tablespanner/parser.py
from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence, Union

from .errors import InvalidSpan, MalformedInput
from .slots import Span

log = logging.getLogger(__name__)

JsonSource = Union[str, bytes, Any]


def _decode(source: JsonSource, what: str) -> Any:
    """Si recibe texto lo decodifica como JSON; si no, devuelve el objeto tal cual."""
    if isinstance(source, (str, bytes)):
        try:
            return json.loads(source)
        except json.JSONDecodeError as exc:
            raise MalformedInput(f"{what}: JSON inválido ({exc.msg}, línea {exc.lineno} col {exc.colno})") from exc
    return source


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def load_json_file(path: Union[str, Path]) -> Any:
    log.debug("Leyendo JSON desde: %s", path)
    with open(path, "r", encoding="utf-8") as fh:
        raw = fh.read()
    return _decode(raw, str(path))


def coerce_span_map(data: Any) -> Dict[str, Span]:
    """
    Normaliza un mapa etiqueta -> [colspan, rowspan] (o Span) a Dict[str, Span].
    Los valores < 1 los rechaza Span con InvalidSpan.
    """
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise MalformedInput(f"El mapa de spans debe ser un objeto, se recibió {type(data).__name__}")

    spans: Dict[str, Span] = {}
    for label, value in data.items():
        if not isinstance(label, str):
            raise MalformedInput(f"Etiqueta no textual en el mapa de spans: {label!r}", label=str(label))
        if isinstance(value, Span):
            spans[label] = value
            continue
        if not _is_sequence(value) or len(value) != 2:
            raise MalformedInput(
                f"El span de {label!r} debe ser un par [colspan, rowspan], se recibió {value!r}",
                label=label,
            )
        colspan, rowspan = value
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in (colspan, rowspan)):
            raise MalformedInput(f"El span de {label!r} debe contener enteros, se recibió {value!r}", label=label)
        try:
            spans[label] = Span(colspan=colspan, rowspan=rowspan)
        except InvalidSpan as exc:
            exc.label = label
            raise
    return spans


def coerce_logical_table(data: Any) -> List[List[str]]:
    if not _is_sequence(data):
        raise MalformedInput(f"La tabla lógica debe ser una lista de filas, se recibió {type(data).__name__}")

    rows: List[List[str]] = []
    for r, row in enumerate(data):
        if not _is_sequence(row):
            raise MalformedInput(f"La fila {r} no es una lista de etiquetas: {row!r}", position=(r, 0))
        for c, label in enumerate(row):
            if not isinstance(label, str):
                raise MalformedInput(
                    f"Etiqueta no textual en la fila {r}, posición {c}: {label!r}",
                    position=(r, c),
                )
        rows.append(list(row))
    return rows


def parse_span_map(source: JsonSource) -> Dict[str, Span]:
    return coerce_span_map(_decode(source, "mapa de spans"))


def parse_logical_table(source: JsonSource) -> List[List[str]]:
    return coerce_logical_table(_decode(source, "tabla lógica"))


def parse_content_map(source: JsonSource) -> Dict[str, str]:
    """Mapa etiqueta -> texto a mostrar (puede ser multilínea)."""
    data = _decode(source, "mapa de contenido")
    if not isinstance(data, Mapping):
        raise MalformedInput(f"El mapa de contenido debe ser un objeto, se recibió {type(data).__name__}")
    content: Dict[str, str] = {}
    for label, text in data.items():
        if not isinstance(label, str) or not isinstance(text, str):
            raise MalformedInput(f"Entrada de contenido inválida: {label!r} -> {text!r}", label=str(label))
        content[label] = text
    return content
