"""
Totales de impuestos y total monetario legal.
"""
from decimal import Decimal
from typing import List, Optional

from cii2ubl.core.config import ConversionSettings
from cii2ubl.mapping.primitives import copy_amount, copy_code, copy_text, create_amount
from cii2ubl.models.cii_types import CIIAmount, HeaderTradeSettlement, TradeTax
from cii2ubl.models.ubl_types import MonetaryTotal, TaxCategory, TaxSubtotal, TaxTotal, UBLAmount
from cii2ubl.utils.text import strip_trailing_zeros


def _first_amount(amounts: List[CIIAmount], currency: Optional[str]) -> Optional[UBLAmount]:
    for amount in amounts:
        copied = copy_amount(amount, currency)
        if copied is not None:
            return copied
    return None


def convert_tax_category(tax: TradeTax, settings: ConversionSettings, with_exemption: bool = True) -> TaxCategory:
    """
    Categoría de impuesto. Los motivos de exención solo se copian en los
    subtotales de cabecera (with_exemption).
    """
    category = TaxCategory(id=copy_code(tax.category_code), tax_scheme_id=settings.vat_scheme)
    if tax.rate_applicable_percent is not None:
        category.percent = strip_trailing_zeros(tax.rate_applicable_percent)
    if with_exemption:
        category.exemption_reason_code = copy_code(tax.exemption_reason_code)
        reason = copy_text(tax.exemption_reason)
        if reason is not None:
            category.exemption_reasons.append(reason)
    return category


def convert_tax_totals(settlement: HeaderTradeSettlement, currency: Optional[str],
                       settings: ConversionSettings) -> List[TaxTotal]:
    """
    Un TaxTotal por importe de impuesto total (uno por moneda). El primero
    lleva los subtotales. Sin importes se genera un único TaxTotal en cero.
    """
    result = []
    summation = settlement.monetary_summation
    tax_amounts = summation.tax_total_amounts if summation is not None else []

    for tax_amount in tax_amounts:
        copied = copy_amount(tax_amount, currency)
        if copied is not None:
            result.append(TaxTotal(tax_amount=copied))

    if not result:
        result.append(TaxTotal(tax_amount=create_amount(Decimal(0), currency)))

    primary = result[0]
    for tax in settlement.trade_taxes:
        primary.subtotals.append(TaxSubtotal(
            taxable_amount=_first_amount(tax.basis_amounts, currency),
            tax_amount=_first_amount(tax.calculated_amounts, currency),
            tax_category=convert_tax_category(tax, settings),
        ))
    return result


def convert_monetary_total(settlement: HeaderTradeSettlement, currency: Optional[str]) -> MonetaryTotal:
    """
    Copia directa de los totales. El redondeo solo se copia si es distinto de
    cero (compatibilidad con una versión antigua de las reglas EN16931).
    """
    total = MonetaryTotal()
    summation = settlement.monetary_summation
    if summation is None:
        return total

    total.line_extension_amount = _first_amount(summation.line_total_amounts, currency)
    total.tax_exclusive_amount = _first_amount(summation.tax_basis_total_amounts, currency)
    total.tax_inclusive_amount = _first_amount(summation.grand_total_amounts, currency)
    total.allowance_total_amount = _first_amount(summation.allowance_total_amounts, currency)
    total.charge_total_amount = _first_amount(summation.charge_total_amounts, currency)
    total.prepaid_amount = _first_amount(summation.total_prepaid_amounts, currency)

    rounding = _first_amount(summation.rounding_amounts, currency)
    if rounding is not None and rounding.value != 0:
        total.payable_rounding_amount = rounding

    total.payable_amount = _first_amount(summation.due_payable_amounts, currency)
    return total
