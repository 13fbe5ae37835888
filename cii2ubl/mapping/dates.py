"""
Interpretación de fechas CII según el código de formato UNTDID 2379.
"""
from datetime import date, datetime
from typing import Callable, Dict, Optional, Tuple

from cii2ubl.models.cii_types import CIIDateTime
from cii2ubl.models.diagnostics import DiagnosticList
from cii2ubl.utils.text import has_text

DEFAULT_DATE_FORMAT = "102"

DateParser = Callable[[str], date]

# código -> patrón strptime
DATE_PATTERNS = {
    "2": "%d%m%y",
    "3": "%m%d%y",
    "4": "%d%m%Y",
    "101": "%y%m%d",
    "102": "%Y%m%d",
    "105": "%y%j",
}


def _strptime_parser(pattern: str) -> DateParser:
    def parse(value: str) -> date:
        result = datetime.strptime(value, pattern).date()
        # años de dos dígitos: siempre 2000-2099
        if "%y" in pattern and result.year < 2000:
            result = result.replace(year=result.year + 100)
        return result
    return parse


def _parse_iso_week(value: str) -> date:
    # YYwwee: año de dos dígitos, semana ISO, día de la semana en dos dígitos (01 = lunes)
    if len(value) != 6 or not value.isdigit():
        raise ValueError(value)
    year = 2000 + int(value[0:2])
    return date.fromisocalendar(year, int(value[2:4]), int(value[4:6]))


DATE_PARSERS: Dict[str, DateParser] = {code: _strptime_parser(pattern) for code, pattern in DATE_PATTERNS.items()}
DATE_PARSERS["103"] = _parse_iso_week


def _resolve_format(format_code: Optional[str]) -> str:
    return format_code if has_text(format_code) else DEFAULT_DATE_FORMAT


def get_date_pattern(format_code: Optional[str], diagnostics: DiagnosticList,
                     path: Optional[Tuple[str, ...]] = None) -> Optional[DateParser]:
    """
    Devuelve la función que interpreta fechas del código de formato.

    Un código vacío equivale al formato por defecto "102". Un código no
    soportado genera un error y devuelve None.
    """
    code = _resolve_format(format_code)
    parser = DATE_PARSERS.get(code)
    if parser is None:
        diagnostics.error(f"Unsupported date format '{code}'", path)
    return parser


def parse_date(value: Optional[str], format_code: Optional[str], diagnostics: DiagnosticList,
               path: Optional[Tuple[str, ...]] = None) -> Optional[date]:
    """
    Interpreta una fecha CII.

    Args:
        value: Texto de la fecha
        format_code: Código de formato (None o vacío = "102")
        diagnostics: Lista donde se registran los errores
        path: Ruta del campo para los diagnósticos

    Returns:
        La fecha, o None si no hay valor o no se pudo interpretar
    """
    if not has_text(value):
        return None

    parser = get_date_pattern(format_code, diagnostics, path)
    if parser is None:
        return None

    try:
        return parser(value.strip())
    except ValueError:
        diagnostics.error(
            f"Failed to parse the date '{value}' using format '{_resolve_format(format_code)}'", path
        )
        return None


def parse_cii_date(source: Optional[CIIDateTime], diagnostics: DiagnosticList,
                   path: Optional[Tuple[str, ...]] = None) -> Optional[date]:
    """Atajo para un CIIDateTime completo."""
    if source is None:
        return None
    return parse_date(source.value, source.format, diagnostics, path)
