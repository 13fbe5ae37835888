"""
Conversión de descuentos y cargos (cabecera y línea).
"""
from typing import Optional, Tuple

from cii2ubl.core.config import ConversionSettings
from cii2ubl.mapping.indicator import parse_indicator
from cii2ubl.mapping.primitives import copy_amount, copy_code, copy_text
from cii2ubl.mapping.totals import convert_tax_category
from cii2ubl.models.cii_types import TradeAllowanceCharge
from cii2ubl.models.diagnostics import DiagnosticList
from cii2ubl.models.ubl_types import AllowanceCharge
from cii2ubl.utils.text import strip_trailing_zeros

HEADER_ALLOWANCE_CHARGE_PATH = (
    "CrossIndustryInvoice",
    "SupplyChainTradeTransaction",
    "ApplicableHeaderTradeSettlement",
    "SpecifiedTradeAllowanceCharge",
)

LINE_ALLOWANCE_CHARGE_PATH = (
    "CrossIndustryInvoice",
    "SupplyChainTradeTransaction",
    "IncludedSupplyChainTradeLineItem",
    "SpecifiedLineTradeSettlement",
    "SpecifiedTradeAllowanceCharge",
)


def convert_allowance_charge(source: TradeAllowanceCharge, currency: Optional[str],
                             settings: ConversionSettings, diagnostics: DiagnosticList,
                             path: Tuple[str, ...] = HEADER_ALLOWANCE_CHARGE_PATH) -> Optional[AllowanceCharge]:
    """
    Convierte un descuento/cargo CII.

    Returns:
        AllowanceCharge, o None si no se pudo determinar si es descuento o cargo
    """
    indicator = parse_indicator(source.charge_indicator, diagnostics, path + ("ChargeIndicator",))
    if not indicator.is_defined:
        diagnostics.error(f"Failed to determine if {path[-1]} is an Allowance or a Charge", path)
        return None

    result = AllowanceCharge(
        charge_indicator=indicator.is_true,
        reason_code=copy_code(source.reason_code),
        amount=None,
        base_amount=copy_amount(source.basis_amount, currency),
    )

    reason = copy_text(source.reason)
    if reason is not None:
        result.reasons.append(reason)

    if source.calculation_percent is not None:
        result.multiplier_factor = strip_trailing_zeros(source.calculation_percent)

    for actual_amount in source.actual_amounts:
        result.amount = copy_amount(actual_amount, currency)
        if result.amount is not None:
            break

    for tax in source.category_trade_taxes:
        result.tax_categories.append(convert_tax_category(tax, settings, with_exemption=False))

    return result
