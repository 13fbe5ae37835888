"""
Conversión de líneas CII (IncludedSupplyChainTradeLineItem) a líneas UBL.
"""
from decimal import Decimal
from typing import Optional, Tuple, Type

from cii2ubl.core.config import ConversionSettings
from cii2ubl.mapping.allowance_charge import LINE_ALLOWANCE_CHARGE_PATH, convert_allowance_charge
from cii2ubl.mapping.primitives import copy_amount, copy_code, copy_id, copy_note, copy_quantity, copy_text, create_amount
from cii2ubl.mapping.references import convert_document_reference, convert_period
from cii2ubl.mapping.sign_normalizer import swap_quantity_and_price_if_needed
from cii2ubl.mapping.totals import convert_tax_category
from cii2ubl.models.cii_types import (
    LineTradeAgreement,
    LineTradeSettlement,
    SupplyChainTradeLineItem,
    TradeProduct,
)
from cii2ubl.models.diagnostics import DiagnosticList
from cii2ubl.models.ubl_types import (
    AllowanceCharge,
    Country,
    DocumentLineBase,
    Item,
    ItemProperty,
    Price,
)
from cii2ubl.utils.text import has_text

LINE_PATH = (
    "CrossIndustryInvoice",
    "SupplyChainTradeTransaction",
    "IncludedSupplyChainTradeLineItem",
)


def _convert_item(product: Optional[TradeProduct], settlement: LineTradeSettlement,
                  settings: ConversionSettings) -> Item:
    item = Item()
    if product is not None:
        description = copy_text(product.description)
        if description is not None:
            item.descriptions.append(description)

        if product.names:
            item.name = copy_text(product.names[0])

        item.buyers_item_id = copy_id(product.buyer_assigned_id)
        item.sellers_item_id = copy_id(product.seller_assigned_id)
        item.standard_item_id = copy_id(product.global_id)

        origin = product.origin_country
        if origin is not None:
            item.origin_country = Country(
                identification_code=origin.id,
                name=copy_text(origin.names[0]) if origin.names else None,
            )

        for classification in product.classifications:
            code = copy_code(classification.class_code)
            if code is not None:
                item.commodity_classifications.append(code)

    for tax in settlement.trade_taxes:
        item.classified_tax_categories.append(convert_tax_category(tax, settings, with_exemption=False))

    if product is not None:
        for characteristic in product.characteristics:
            if not characteristic.descriptions:
                continue
            prop = ItemProperty(name=copy_text(characteristic.descriptions[0]))
            if characteristic.values:
                prop.value = copy_text(characteristic.values[0])
            if prop.name is not None:
                item.additional_properties.append(prop)

    return item


def _convert_price(agreement: Optional[LineTradeAgreement], currency: Optional[str]) -> Optional[Price]:
    """
    Precio de la línea. Solo se usa si hay precio neto (BT-146).

    El precio bruto aporta el descuento sobre el precio (BT-147), el precio
    bruto (BT-148) y la unidad de la cantidad base (BT-150).
    """
    if agreement is None:
        return None

    price = Price()
    price_allowance = AllowanceCharge(charge_indicator=False)
    gross = agreement.gross_price
    net = agreement.net_price

    if gross is not None:
        if gross.applied_allowance_charges:
            discount = gross.applied_allowance_charges[0]
            if discount.actual_amounts:
                price_allowance.amount = copy_amount(discount.actual_amounts[0], currency)
        if gross.charge_amounts:
            price_allowance.base_amount = copy_amount(gross.charge_amounts[0], currency)
            if price_allowance.base_amount is not None and price_allowance.amount is None:
                # descuento "0" para que el bloque se emita
                price_allowance.amount = create_amount(Decimal(0), currency)

    if net is None:
        return None

    if net.charge_amounts:
        price.price_amount = copy_amount(net.charge_amounts[0], currency)
    if price.price_amount is None:
        return None

    # se prefiere la cantidad base del precio bruto
    base_quantity_source = gross.basis_quantity if gross is not None and gross.basis_quantity is not None else net.basis_quantity
    price.base_quantity = copy_quantity(base_quantity_source)
    if price.base_quantity is not None and gross is not None and gross.basis_quantity is not None:
        price.base_quantity.unit_code = gross.basis_quantity.unit_code

    if price_allowance.amount is not None:
        price.allowance_charges.append(price_allowance)
    return price


def convert_line(line_item: SupplyChainTradeLineItem, line_class: Type[DocumentLineBase],
                 currency: Optional[str], settings: ConversionSettings, diagnostics: DiagnosticList,
                 index: int = 0) -> DocumentLineBase:
    """
    Convierte una línea CII.

    Args:
        line_item: Línea CII
        line_class: InvoiceLine o CreditNoteLine
        currency: Moneda del documento
        settings: Configuración de la conversión
        diagnostics: Lista de diagnósticos
        index: Posición de la línea (para las rutas de diagnóstico)
    """
    path: Tuple[str, ...] = LINE_PATH[:-1] + (f"{LINE_PATH[-1]}[{index}]",)
    line = line_class()
    settlement = line_item.settlement or LineTradeSettlement()

    document_line = line_item.document_line
    if document_line is not None:
        line.id = copy_id(document_line.line_id)
        for note in document_line.notes:
            converted = copy_note(note)
            if converted is not None:
                line.notes.append(converted)

    line_extension_negative = False
    summation = settlement.monetary_summation
    if summation is not None and summation.line_total_amounts:
        line.line_extension_amount = copy_amount(summation.line_total_amounts[0], currency)
        if line.line_extension_amount is not None and line.line_extension_amount.value < 0:
            line_extension_negative = True

    if line_item.delivery is not None:
        line.quantity = copy_quantity(line_item.delivery.billed_quantity)

    if settlement.receivable_accounting_account_ids:
        account_id = settlement.receivable_accounting_account_ids[0]
        if has_text(account_id.value):
            line.accounting_cost = account_id.value

    line.invoice_period = convert_period(settlement.billing_period, diagnostics, path=path)

    agreement = line_item.agreement
    if agreement is not None and agreement.buyer_order_reference is not None:
        line.order_line_reference_id = copy_id(agreement.buyer_order_reference.line_id)

    for reference in settlement.additional_references:
        converted = convert_document_reference(reference, diagnostics, path)
        if converted is not None:
            line.document_references.append(converted)

    for allowance_charge in settlement.allowance_charges:
        converted = convert_allowance_charge(allowance_charge, currency, settings, diagnostics,
                                             LINE_ALLOWANCE_CHARGE_PATH)
        if converted is not None:
            line.allowance_charges.append(converted)

    line.item = _convert_item(line_item.product, settlement, settings)
    price = _convert_price(agreement, currency)

    if line.quantity is not None:
        normalized = swap_quantity_and_price_if_needed(
            line_extension_negative,
            line.quantity.value,
            price.price_amount.value if price is not None else None,
            settings,
            diagnostics,
            path,
        )
        line.quantity.value = normalized.quantity
        if price is not None:
            price.price_amount.value = normalized.price

    line.price = price
    return line
