"""
Estructuras de datos del documento fuente CII (CrossIndustryInvoice D16B).

Los nombres siguen a los elementos CII; los elementos repetibles son listas.
El motor de mapeo solo lee estas estructuras, nunca las modifica.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional


# --- Tipos primitivos ---

@dataclass
class CIIIdentifier:
    """Identificador con sus metadatos de esquema"""
    value: Optional[str] = None
    scheme_id: Optional[str] = None
    scheme_name: Optional[str] = None
    scheme_agency_id: Optional[str] = None
    scheme_agency_name: Optional[str] = None
    scheme_version_id: Optional[str] = None
    scheme_data_uri: Optional[str] = None
    scheme_uri: Optional[str] = None


@dataclass
class CIIText:
    """Texto con idioma opcional"""
    value: Optional[str] = None
    language_id: Optional[str] = None
    language_locale_id: Optional[str] = None


@dataclass
class CIICode:
    """Código con metadatos de lista"""
    value: Optional[str] = None
    list_id: Optional[str] = None
    list_agency_id: Optional[str] = None
    list_agency_name: Optional[str] = None
    list_name: Optional[str] = None
    list_version_id: Optional[str] = None
    name: Optional[str] = None
    language_id: Optional[str] = None
    list_uri: Optional[str] = None
    list_scheme_uri: Optional[str] = None


@dataclass
class CIIAmount:
    """Importe con moneda; value es None si el texto no era numérico"""
    value: Optional[Decimal] = None
    currency_id: Optional[str] = None
    currency_code_list_version_id: Optional[str] = None


@dataclass
class CIIQuantity:
    value: Optional[Decimal] = None
    unit_code: Optional[str] = None
    unit_code_list_id: Optional[str] = None
    unit_code_list_agency_id: Optional[str] = None
    unit_code_list_agency_name: Optional[str] = None


@dataclass
class CIIDateTime:
    """Fecha como texto más su código de formato (UNTDID 2379)"""
    value: Optional[str] = None
    format: Optional[str] = None


@dataclass
class CIIIndicator:
    """Indicador con forma booleana y/o forma de texto"""
    indicator: Optional[bool] = None
    indicator_string: Optional[str] = None


@dataclass
class CIINote:
    content: List[str] = field(default_factory=list)
    subject_code: Optional[str] = None


@dataclass
class BinaryObject:
    """Adjunto embebido (base64 tal como viene en el XML)"""
    value: Optional[str] = None
    mime_code: Optional[str] = None
    filename: Optional[str] = None


# --- Partes ---

@dataclass
class TradeAddress:
    postcode: Optional[str] = None
    line_one: Optional[str] = None
    line_two: Optional[str] = None
    line_three: Optional[str] = None
    city_name: Optional[str] = None
    country_id: Optional[str] = None
    country_subdivision_names: List[CIIText] = field(default_factory=list)


@dataclass
class TradeContact:
    person_name: Optional[CIIText] = None
    department_name: Optional[CIIText] = None
    telephone: Optional[str] = None
    email: Optional[str] = None


@dataclass
class LegalOrganization:
    id: Optional[CIIIdentifier] = None
    trading_business_name: Optional[CIIText] = None


@dataclass
class TaxRegistration:
    id: Optional[CIIIdentifier] = None


@dataclass
class TradeParty:
    """Parte comercial (vendedor, comprador, beneficiario, ...)"""
    ids: List[CIIIdentifier] = field(default_factory=list)
    global_ids: List[CIIIdentifier] = field(default_factory=list)
    name: Optional[CIIText] = None
    descriptions: List[CIIText] = field(default_factory=list)
    legal_organization: Optional[LegalOrganization] = None
    contacts: List[TradeContact] = field(default_factory=list)
    postal_address: Optional[TradeAddress] = None
    uri_communications: List[CIIIdentifier] = field(default_factory=list)
    tax_registrations: List[TaxRegistration] = field(default_factory=list)


# --- Referencias ---

@dataclass
class ReferencedDocument:
    issuer_assigned_id: Optional[CIIIdentifier] = None
    uri_id: Optional[CIIIdentifier] = None
    line_id: Optional[CIIIdentifier] = None
    type_code: Optional[CIICode] = None
    names: List[CIIText] = field(default_factory=list)
    attachment: Optional[BinaryObject] = None
    reference_type_code: Optional[CIICode] = None
    formatted_issue_date: Optional[CIIDateTime] = None


@dataclass
class ProcuringProject:
    id: Optional[CIIIdentifier] = None
    name: Optional[CIIText] = None


# --- Acuerdo y entrega ---

@dataclass
class HeaderTradeAgreement:
    buyer_reference: Optional[CIIText] = None
    seller: Optional[TradeParty] = None
    buyer: Optional[TradeParty] = None
    seller_tax_representative: Optional[TradeParty] = None
    seller_order_reference: Optional[ReferencedDocument] = None
    buyer_order_reference: Optional[ReferencedDocument] = None
    contract_reference: Optional[ReferencedDocument] = None
    additional_references: List[ReferencedDocument] = field(default_factory=list)
    procuring_project: Optional[ProcuringProject] = None


@dataclass
class SupplyChainEvent:
    occurrence_date: Optional[CIIDateTime] = None


@dataclass
class HeaderTradeDelivery:
    ship_to: Optional[TradeParty] = None
    actual_delivery_event: Optional[SupplyChainEvent] = None
    despatch_advice_reference: Optional[ReferencedDocument] = None
    receiving_advice_reference: Optional[ReferencedDocument] = None


# --- Liquidación ---

@dataclass
class TradeTax:
    """Impuesto aplicable (cabecera, línea o cargo/descuento)"""
    calculated_amounts: List[CIIAmount] = field(default_factory=list)
    type_code: Optional[CIICode] = None
    exemption_reason: Optional[CIIText] = None
    basis_amounts: List[CIIAmount] = field(default_factory=list)
    category_code: Optional[CIICode] = None
    exemption_reason_code: Optional[CIICode] = None
    tax_point_date: Optional[CIIDateTime] = None
    due_date_type_code: Optional[CIICode] = None
    rate_applicable_percent: Optional[Decimal] = None


@dataclass
class FinancialAccount:
    """Cuenta del deudor o del acreedor"""
    iban_id: Optional[CIIIdentifier] = None
    account_name: Optional[CIIText] = None
    proprietary_id: Optional[CIIIdentifier] = None


@dataclass
class FinancialCard:
    id: Optional[CIIIdentifier] = None
    cardholder_name: Optional[CIIText] = None


@dataclass
class PaymentMeans:
    type_code: Optional[CIICode] = None
    information: List[CIIText] = field(default_factory=list)
    financial_card: Optional[FinancialCard] = None
    payer_debtor_account: Optional[FinancialAccount] = None
    payee_creditor_account: Optional[FinancialAccount] = None
    payer_institution_bic: Optional[CIIIdentifier] = None
    payee_institution_bic: Optional[CIIIdentifier] = None


@dataclass
class PaymentTerms:
    descriptions: List[CIIText] = field(default_factory=list)
    due_date: Optional[CIIDateTime] = None
    direct_debit_mandate_ids: List[CIIIdentifier] = field(default_factory=list)


@dataclass
class TradeAllowanceCharge:
    charge_indicator: Optional[CIIIndicator] = None
    calculation_percent: Optional[Decimal] = None
    basis_amount: Optional[CIIAmount] = None
    actual_amounts: List[CIIAmount] = field(default_factory=list)
    reason_code: Optional[CIICode] = None
    reason: Optional[CIIText] = None
    category_trade_taxes: List[TradeTax] = field(default_factory=list)


@dataclass
class MonetarySummation:
    """Totales de cabecera (o de línea: solo line_total_amounts)"""
    line_total_amounts: List[CIIAmount] = field(default_factory=list)
    charge_total_amounts: List[CIIAmount] = field(default_factory=list)
    allowance_total_amounts: List[CIIAmount] = field(default_factory=list)
    tax_basis_total_amounts: List[CIIAmount] = field(default_factory=list)
    tax_total_amounts: List[CIIAmount] = field(default_factory=list)
    rounding_amounts: List[CIIAmount] = field(default_factory=list)
    grand_total_amounts: List[CIIAmount] = field(default_factory=list)
    total_prepaid_amounts: List[CIIAmount] = field(default_factory=list)
    due_payable_amounts: List[CIIAmount] = field(default_factory=list)


@dataclass
class SpecifiedPeriod:
    start: Optional[CIIDateTime] = None
    end: Optional[CIIDateTime] = None


@dataclass
class HeaderTradeSettlement:
    creditor_reference_id: Optional[CIIIdentifier] = None
    payment_references: List[CIIText] = field(default_factory=list)
    tax_currency_code: Optional[str] = None
    invoice_currency_code: Optional[str] = None
    payee: Optional[TradeParty] = None
    payment_means: List[PaymentMeans] = field(default_factory=list)
    trade_taxes: List[TradeTax] = field(default_factory=list)
    billing_period: Optional[SpecifiedPeriod] = None
    allowance_charges: List[TradeAllowanceCharge] = field(default_factory=list)
    payment_terms: List[PaymentTerms] = field(default_factory=list)
    monetary_summation: Optional[MonetarySummation] = None
    invoice_reference: Optional[ReferencedDocument] = None
    receivable_accounting_account_ids: List[CIIIdentifier] = field(default_factory=list)


# --- Líneas ---

@dataclass
class TradePrice:
    charge_amounts: List[CIIAmount] = field(default_factory=list)
    basis_quantity: Optional[CIIQuantity] = None
    applied_allowance_charges: List[TradeAllowanceCharge] = field(default_factory=list)


@dataclass
class ProductCharacteristic:
    descriptions: List[CIIText] = field(default_factory=list)
    values: List[CIIText] = field(default_factory=list)


@dataclass
class ProductClassification:
    class_code: Optional[CIICode] = None


@dataclass
class TradeCountry:
    id: Optional[str] = None
    names: List[CIIText] = field(default_factory=list)


@dataclass
class TradeProduct:
    global_id: Optional[CIIIdentifier] = None
    seller_assigned_id: Optional[CIIIdentifier] = None
    buyer_assigned_id: Optional[CIIIdentifier] = None
    names: List[CIIText] = field(default_factory=list)
    description: Optional[CIIText] = None
    characteristics: List[ProductCharacteristic] = field(default_factory=list)
    classifications: List[ProductClassification] = field(default_factory=list)
    origin_country: Optional[TradeCountry] = None


@dataclass
class LineTradeAgreement:
    buyer_order_reference: Optional[ReferencedDocument] = None
    gross_price: Optional[TradePrice] = None
    net_price: Optional[TradePrice] = None


@dataclass
class LineTradeDelivery:
    billed_quantity: Optional[CIIQuantity] = None


@dataclass
class LineTradeSettlement:
    trade_taxes: List[TradeTax] = field(default_factory=list)
    billing_period: Optional[SpecifiedPeriod] = None
    allowance_charges: List[TradeAllowanceCharge] = field(default_factory=list)
    monetary_summation: Optional[MonetarySummation] = None
    additional_references: List[ReferencedDocument] = field(default_factory=list)
    receivable_accounting_account_ids: List[CIIIdentifier] = field(default_factory=list)


@dataclass
class DocumentLine:
    line_id: Optional[CIIIdentifier] = None
    notes: List[CIINote] = field(default_factory=list)


@dataclass
class SupplyChainTradeLineItem:
    """Línea de factura CII"""
    document_line: Optional[DocumentLine] = None
    product: Optional[TradeProduct] = None
    agreement: Optional[LineTradeAgreement] = None
    delivery: Optional[LineTradeDelivery] = None
    settlement: Optional[LineTradeSettlement] = None


# --- Documento ---

@dataclass
class SupplyChainTradeTransaction:
    line_items: List[SupplyChainTradeLineItem] = field(default_factory=list)
    agreement: Optional[HeaderTradeAgreement] = None
    delivery: Optional[HeaderTradeDelivery] = None
    settlement: Optional[HeaderTradeSettlement] = None


@dataclass
class ExchangedDocumentContext:
    business_process_ids: List[CIIIdentifier] = field(default_factory=list)
    guideline_ids: List[CIIIdentifier] = field(default_factory=list)


@dataclass
class ExchangedDocument:
    id: Optional[CIIIdentifier] = None
    type_code: Optional[CIICode] = None
    issue_date_time: Optional[CIIDateTime] = None
    notes: List[CIINote] = field(default_factory=list)


@dataclass
class CrossIndustryInvoice:
    """Documento fuente completo"""
    context: Optional[ExchangedDocumentContext] = None
    exchanged_document: Optional[ExchangedDocument] = None
    transaction: Optional[SupplyChainTradeTransaction] = None
