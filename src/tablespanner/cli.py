from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, List, Optional

from .errors import TableSpanError
from .main import OUTPUT_FORMATS, spans_to_output
from .parser import load_json_file
from .renderer import ALIGNMENTS, BORDER_STYLES, DEFAULT_ALIGN, DEFAULT_BORDER_STYLE, DEFAULT_MIN_WIDTH, RenderOptions

log = logging.getLogger(__name__)


def _json_arg(value: str) -> Any:
    """Texto JSON literal, o `@ruta` para leerlo de un archivo."""
    if value.startswith("@"):
        return load_json_file(value[1:])
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Calcula el layout físico de una tabla con celdas combinadas y la dibuja como texto."
    )
    parser.add_argument("spaninfo", metavar="SPANINFO",
                        help='Objeto JSON etiqueta -> [colspan, rowspan], p. ej. \'{"A": [2, 1]}\'. Use @archivo.json para leerlo de disco.')
    parser.add_argument("tablespec", metavar="TABLESPEC",
                        help='Lista JSON de filas de etiquetas, p. ej. \'[["A", "B"], ["C", "D"]]\'. Use @archivo.json para leerlo de disco.')
    parser.add_argument("--content", help="Archivo JSON con el texto de cada etiqueta (por defecto se muestra la etiqueta).")
    parser.add_argument("--format", dest="fmt", default="text", choices=OUTPUT_FORMATS,
                        help="Formato de salida (default: text)")
    parser.add_argument("--output", help="Ruta de salida; si se omite se escribe en stdout.")
    parser.add_argument("--border", default=DEFAULT_BORDER_STYLE, choices=BORDER_STYLES,
                        help=f"Estilo de borde (default: {DEFAULT_BORDER_STYLE})")
    parser.add_argument("--min-width", type=int, default=DEFAULT_MIN_WIDTH,
                        help=f"Ancho mínimo de columna (default: {DEFAULT_MIN_WIDTH})")
    parser.add_argument("--align", default=DEFAULT_ALIGN, choices=ALIGNMENTS,
                        help=f"Alineación horizontal del texto (default: {DEFAULT_ALIGN})")
    parser.add_argument("--loglevel", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Nivel de verbosidad del log (default: INFO)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.loglevel, format="%(asctime)s - %(levelname)s - %(message)s")

    if args.min_width < 0:
        parser.error("--min-width debe ser >= 0")

    try:
        spaninfo = _json_arg(args.spaninfo)
        tablespec = _json_arg(args.tablespec)
        result = spans_to_output(
            spaninfo,
            tablespec,
            content=load_json_file(args.content) if args.content else None,
            fmt=args.fmt,
            options=RenderOptions(border_style=args.border, min_width=args.min_width, align=args.align),
            output_path=args.output,
        )
    except TableSpanError as exc:
        log.error("%s", exc.describe())
        return 2
    except FileNotFoundError as exc:
        log.error("Error: No se encontró el archivo de entrada: %s", exc.filename)
        return 1
    except Exception as e:
        log.error(f"Ocurrió un error inesperado: {e}", exc_info=True)
        return 1

    if not args.output:
        sys.stdout.write(result)
        if result and not result.endswith("\n"):
            sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
