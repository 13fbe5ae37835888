"""
Helpers pequeños para texto y decimales.
"""
from decimal import Decimal
from typing import Iterable, Optional


def has_text(value: Optional[str]) -> bool:
    """True si la cadena existe y no está vacía."""
    return value is not None and value != ""


def first_non_empty(values: Iterable[Optional[str]]) -> Optional[str]:
    """Devuelve el primer valor con texto, o None."""
    for value in values:
        if has_text(value):
            return value
    return None


def strip_trailing_zeros(value: Decimal) -> Decimal:
    """
    Elimina ceros a la derecha sin pasar a notación exponencial.

    Decimal("19.00") -> Decimal("19"), Decimal("100") -> Decimal("100")
    """
    if value == value.to_integral_value():
        return value.quantize(Decimal(1))
    return value.normalize()
