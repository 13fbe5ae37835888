# cii2ubl/main.py
from __future__ import annotations
import argparse
import sys
from pathlib import Path
from typing import Iterable, List, Optional

from cii2ubl.core.config import load_config
from cii2ubl.core.ubl_writer import UBLWriter
from cii2ubl.facade.converter_facade import CIIToUBLConverter
from cii2ubl.models.diagnostics import ErrorLevel
from cii2ubl.utils.logger import configure_logging, get_logger


# Códigos de salida
EXIT_SUCCESS = 0
EXIT_CONFIG_ERROR = 1
EXIT_CONVERSION_ERROR = 2
EXIT_UNKNOWN_ERROR = 99

OUTPUT_SUFFIX = "-ubl.xml"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cii2ubl",
        description="Convierte facturas CII (CrossIndustryInvoice) a UBL 2.x",
    )
    parser.add_argument("inputs", nargs="+", type=Path, help="Archivos XML CII o directorios")
    parser.add_argument("-o", "--output-dir", type=Path, default=None,
                        help="Directorio de salida (por defecto el configurado o el del archivo)")
    parser.add_argument("--settings", type=Path, default=None, help="Ruta a settings.json")
    return parser


def collect_inputs(paths: Iterable[Path]) -> List[Path]:
    """Expande directorios a sus archivos .xml (recursivo, orden estable)."""
    files = []
    for path in paths:
        if path.is_dir():
            files.extend(sorted(p for p in path.rglob("*.xml") if p.is_file()))
        else:
            files.append(path)
    return files


def output_path_for(source: Path, output_dir: Optional[Path]) -> Path:
    target_dir = output_dir if output_dir is not None else source.parent
    return target_dir / f"{source.stem}{OUTPUT_SUFFIX}"


def convert_one(source: Path, converter: CIIToUBLConverter, writer: UBLWriter,
                conversion_settings, output_dir: Optional[Path], logger) -> bool:
    """
    Convierte un archivo y escribe el resultado.

    Returns:
        True si se generó un documento
    """
    logger.info("Convirtiendo %s", source)
    result = converter.convert_file(source, conversion_settings)

    for diagnostic in result.diagnostics:
        if diagnostic.level is ErrorLevel.ERROR:
            logger.error("%s: %s", source.name, diagnostic)
        else:
            logger.warning("%s: %s", source.name, diagnostic)

    if result.document is None:
        logger.error("No se generó documento para %s", source)
        return False

    target = writer.write(result.document, output_path_for(source, output_dir))
    logger.info("%s -> %s (%d diagnósticos)", source.name, target, len(result.diagnostics))
    return True


def main(argv: Optional[List[str]] = None) -> int:

    logger = None
    args = build_parser().parse_args(argv)

    try:
        # PASO 1: Cargar configuración
        try:
            cfg = load_config(args.settings)
            configure_logging(cfg.LOG_LEVEL, cfg.LOG_DIR)
            logger = get_logger("Main")
            conversion_settings = cfg.to_conversion_settings()
            logger.info("Configuración cargada (UBL %s)", conversion_settings.ubl_version.value)
        except Exception as exc:
            print(f"ERROR CRÍTICO: No se pudo cargar la configuración: {exc}", file=sys.stderr)
            return EXIT_CONFIG_ERROR

        # PASO 2: Convertir cada archivo
        output_dir = args.output_dir or cfg.output_dir
        converter = CIIToUBLConverter()
        writer = UBLWriter()

        sources = collect_inputs(args.inputs)
        if not sources:
            logger.error("No se encontraron archivos XML para convertir")
            return EXIT_CONVERSION_ERROR

        failed = 0
        for source in sources:
            try:
                if not convert_one(source, converter, writer, conversion_settings, output_dir, logger):
                    failed += 1
            except OSError as exc:
                logger.error("Error escribiendo la salida de %s: %s", source, exc)
                failed += 1

        # PASO 3: Resumen
        logger.info("Archivos procesados: %d, fallidos: %d", len(sources), failed)
        return EXIT_CONVERSION_ERROR if failed else EXIT_SUCCESS

    except KeyboardInterrupt:
        if logger:
            logger.warning("Conversión interrumpida por el usuario (Ctrl+C)")
        else:
            print("\nConversión interrumpida por el usuario", file=sys.stderr)
        return EXIT_UNKNOWN_ERROR


if __name__ == "__main__":
    sys.exit(main())
