"""
Resolución de indicadores CII (booleano o texto) a un valor de tres estados.
"""
from enum import Enum
from typing import Optional, Tuple

from cii2ubl.models.cii_types import CIIIndicator
from cii2ubl.models.diagnostics import DiagnosticList


class TriState(Enum):
    TRUE = "true"
    FALSE = "false"
    UNDEFINED = "undefined"

    @classmethod
    def of(cls, value: bool) -> "TriState":
        return cls.TRUE if value else cls.FALSE

    @property
    def is_defined(self) -> bool:
        return self is not TriState.UNDEFINED

    @property
    def is_true(self) -> bool:
        return self is TriState.TRUE

    @property
    def is_false(self) -> bool:
        return self is TriState.FALSE


def parse_indicator(indicator: Optional[CIIIndicator], diagnostics: DiagnosticList,
                    path: Optional[Tuple[str, ...]] = None) -> TriState:
    """
    Interpreta un indicador CII.

    Orden: la forma booleana gana; si no existe se usa la forma de texto, que
    solo admite "true" o "false" (sensible a mayúsculas). Sin indicador se
    devuelve UNDEFINED sin diagnóstico (el llamador decide); un contenedor sin
    ninguna de las dos formas o un texto no válido registran un error.
    """
    if indicator is None:
        return TriState.UNDEFINED

    if indicator.indicator is not None:
        return TriState.of(indicator.indicator)

    if indicator.indicator_string is not None:
        if indicator.indicator_string == "true":
            return TriState.TRUE
        if indicator.indicator_string == "false":
            return TriState.FALSE
        diagnostics.error(f"Indicator has an unsupported value '{indicator.indicator_string}'", path)
        return TriState.UNDEFINED

    diagnostics.error("Indicator has neither a value nor a string value", path)
    return TriState.UNDEFINED
