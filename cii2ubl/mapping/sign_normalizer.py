"""
Normalización de signos de cantidad y precio en líneas negativas.

UBL exige un precio neto no negativo (BT-146). Las líneas negativas en CII
pueden venir con cantidad negativa, precio negativo o ambos; aquí se
trasladan los signos a la cantidad cuando la configuración lo permite.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple

from cii2ubl.core.config import ConversionSettings
from cii2ubl.models.diagnostics import DiagnosticList


@dataclass(frozen=True)
class SignNormalization:
    quantity: Decimal
    price: Optional[Decimal]


def _negate_quantity(quantity: Decimal, settings: ConversionSettings, diagnostics: DiagnosticList,
                     path: Optional[Tuple[str, ...]]) -> Decimal:
    if settings.swap_quantity_sign_if_needed:
        return -quantity
    diagnostics.info(f"The sign of the quantity {quantity} should be swapped, but swapping is disabled", path)
    return quantity


def _negate_price(price: Decimal, settings: ConversionSettings, diagnostics: DiagnosticList,
                  path: Optional[Tuple[str, ...]]) -> Decimal:
    if settings.swap_price_sign_if_needed:
        return -price
    diagnostics.info(f"The sign of the price {price} should be swapped, but swapping is disabled", path)
    return price


def swap_quantity_and_price_if_needed(line_extension_negative: bool, quantity: Decimal,
                                      price: Optional[Decimal], settings: ConversionSettings,
                                      diagnostics: DiagnosticList,
                                      path: Optional[Tuple[str, ...]] = None) -> SignNormalization:
    """
    Aplica la tabla de decisión de signos.

    Args:
        line_extension_negative: El importe neto de la línea es negativo
        quantity: Cantidad facturada
        price: Precio neto, o None si no se conoce
        settings: Flags swap_quantity_sign_if_needed / swap_price_sign_if_needed
        diagnostics: Lista de diagnósticos
        path: Ruta de la línea

    Returns:
        Cantidad y precio resultantes
    """
    quantity_negative = quantity < 0

    if price is None:
        if line_extension_negative != quantity_negative:
            diagnostics.warn(
                f"Line extension amount sign and quantity {quantity} are inconsistent and no price is present",
                path,
            )
        return SignNormalization(quantity, None)

    price_negative = price < 0

    if line_extension_negative:
        if not quantity_negative and price_negative:
            return SignNormalization(
                _negate_quantity(quantity, settings, diagnostics, path),
                _negate_price(price, settings, diagnostics, path),
            )
        if quantity_negative and not price_negative:
            return SignNormalization(quantity, price)
        diagnostics.warn(
            f"Quantity {quantity} and price {price} have the same sign, but the line extension amount is negative",
            path,
        )
        return SignNormalization(quantity, price)

    if quantity_negative and price_negative:
        return SignNormalization(
            _negate_quantity(quantity, settings, diagnostics, path),
            _negate_price(price, settings, diagnostics, path),
        )
    if quantity_negative or price_negative:
        diagnostics.warn(
            f"Quantity {quantity} and price {price} have different signs, but the line extension amount is not negative",
            path,
        )
    return SignNormalization(quantity, price)
