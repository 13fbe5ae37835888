"""
Estructuras de datos del documento destino UBL 2.x (Invoice / CreditNote).

Invoice y CreditNote comparten la misma forma; solo cambian el elemento raíz,
el elemento del código de tipo y el nombre del campo de cantidad en las líneas.
"""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import ClassVar, List, Optional


# --- Tipos primitivos ---

@dataclass
class UBLIdentifier:
    value: Optional[str] = None
    scheme_id: Optional[str] = None
    scheme_name: Optional[str] = None
    scheme_agency_id: Optional[str] = None
    scheme_agency_name: Optional[str] = None
    scheme_version_id: Optional[str] = None
    scheme_data_uri: Optional[str] = None
    scheme_uri: Optional[str] = None


@dataclass
class UBLText:
    value: Optional[str] = None
    language_id: Optional[str] = None
    language_locale_id: Optional[str] = None


@dataclass
class UBLCode:
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
class UBLAmount:
    value: Optional[Decimal] = None
    currency_id: Optional[str] = None
    currency_code_list_version_id: Optional[str] = None


@dataclass
class UBLQuantity:
    value: Optional[Decimal] = None
    unit_code: Optional[str] = None
    unit_code_list_id: Optional[str] = None
    unit_code_list_agency_id: Optional[str] = None
    unit_code_list_agency_name: Optional[str] = None


# --- Partes ---

@dataclass
class Address:
    street_name: Optional[str] = None
    additional_street_name: Optional[str] = None
    city_name: Optional[str] = None
    postal_zone: Optional[str] = None
    country_subentity: Optional[str] = None
    address_line: Optional[str] = None
    country_code: Optional[str] = None


@dataclass
class Contact:
    name: Optional[str] = None
    telephone: Optional[str] = None
    electronic_mail: Optional[str] = None


@dataclass
class PartyTaxScheme:
    company_id: Optional[UBLIdentifier] = None
    tax_scheme_id: Optional[str] = None


@dataclass
class PartyLegalEntity:
    registration_name: Optional[str] = None
    company_id: Optional[UBLIdentifier] = None
    company_legal_forms: List[str] = field(default_factory=list)


@dataclass
class Party:
    """Parte UBL (proveedor, cliente, beneficiario, representante fiscal)"""
    endpoint_id: Optional[UBLIdentifier] = None
    identifications: List[UBLIdentifier] = field(default_factory=list)
    party_names: List[str] = field(default_factory=list)
    postal_address: Optional[Address] = None
    tax_schemes: List[PartyTaxScheme] = field(default_factory=list)
    legal_entities: List[PartyLegalEntity] = field(default_factory=list)
    contact: Optional[Contact] = None


# --- Pago ---

@dataclass
class FinancialAccount:
    id: Optional[UBLIdentifier] = None
    name: Optional[str] = None
    branch_id: Optional[UBLIdentifier] = None


@dataclass
class CardAccount:
    primary_account_number_id: Optional[UBLIdentifier] = None
    network_id: Optional[str] = None
    holder_name: Optional[str] = None


@dataclass
class PaymentMandate:
    id: Optional[UBLIdentifier] = None
    payer_financial_account: Optional[FinancialAccount] = None


@dataclass
class PaymentMeans:
    code: Optional[UBLCode] = None
    payment_due_date: Optional[date] = None
    payment_ids: List[str] = field(default_factory=list)
    card_account: Optional[CardAccount] = None
    payee_financial_account: Optional[FinancialAccount] = None
    payment_mandate: Optional[PaymentMandate] = None


@dataclass
class PaymentTerms:
    notes: List[UBLText] = field(default_factory=list)


# --- Impuestos, cargos y totales ---

@dataclass
class TaxCategory:
    id: Optional[UBLCode] = None
    percent: Optional[Decimal] = None
    exemption_reason_code: Optional[UBLCode] = None
    exemption_reasons: List[UBLText] = field(default_factory=list)
    tax_scheme_id: Optional[str] = None


@dataclass
class AllowanceCharge:
    charge_indicator: bool = False
    reason_code: Optional[UBLCode] = None
    reasons: List[UBLText] = field(default_factory=list)
    multiplier_factor: Optional[Decimal] = None
    amount: Optional[UBLAmount] = None
    base_amount: Optional[UBLAmount] = None
    tax_categories: List[TaxCategory] = field(default_factory=list)


@dataclass
class TaxSubtotal:
    taxable_amount: Optional[UBLAmount] = None
    tax_amount: Optional[UBLAmount] = None
    tax_category: Optional[TaxCategory] = None


@dataclass
class TaxTotal:
    tax_amount: Optional[UBLAmount] = None
    subtotals: List[TaxSubtotal] = field(default_factory=list)


@dataclass
class MonetaryTotal:
    line_extension_amount: Optional[UBLAmount] = None
    tax_exclusive_amount: Optional[UBLAmount] = None
    tax_inclusive_amount: Optional[UBLAmount] = None
    allowance_total_amount: Optional[UBLAmount] = None
    charge_total_amount: Optional[UBLAmount] = None
    prepaid_amount: Optional[UBLAmount] = None
    payable_rounding_amount: Optional[UBLAmount] = None
    payable_amount: Optional[UBLAmount] = None


# --- Referencias y entrega ---

@dataclass
class Period:
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    description_codes: List[UBLCode] = field(default_factory=list)


@dataclass
class OrderReference:
    id: Optional[UBLIdentifier] = None
    sales_order_id: Optional[UBLIdentifier] = None


@dataclass
class Attachment:
    embedded_value: Optional[str] = None
    mime_code: Optional[str] = None
    filename: Optional[str] = None
    external_uri: Optional[str] = None


@dataclass
class DocumentReference:
    id: Optional[UBLIdentifier] = None
    issue_date: Optional[date] = None
    document_type_code: Optional[UBLCode] = None
    descriptions: List[UBLText] = field(default_factory=list)
    attachment: Optional[Attachment] = None


@dataclass
class Delivery:
    actual_delivery_date: Optional[date] = None
    location_id: Optional[UBLIdentifier] = None
    location_address: Optional[Address] = None
    party_name: Optional[str] = None


# --- Artículo y precio ---

@dataclass
class Country:
    identification_code: Optional[str] = None
    name: Optional[UBLText] = None


@dataclass
class ItemProperty:
    name: Optional[UBLText] = None
    value: Optional[UBLText] = None


@dataclass
class Item:
    descriptions: List[UBLText] = field(default_factory=list)
    name: Optional[UBLText] = None
    buyers_item_id: Optional[UBLIdentifier] = None
    sellers_item_id: Optional[UBLIdentifier] = None
    standard_item_id: Optional[UBLIdentifier] = None
    origin_country: Optional[Country] = None
    commodity_classifications: List[UBLCode] = field(default_factory=list)
    classified_tax_categories: List[TaxCategory] = field(default_factory=list)
    additional_properties: List[ItemProperty] = field(default_factory=list)


@dataclass
class Price:
    price_amount: Optional[UBLAmount] = None
    base_quantity: Optional[UBLQuantity] = None
    allowance_charges: List[AllowanceCharge] = field(default_factory=list)


# --- Líneas ---

@dataclass
class DocumentLineBase:
    """Campos comunes de InvoiceLine y CreditNoteLine"""
    ELEMENT_NAME: ClassVar[str] = ""
    QUANTITY_ELEMENT_NAME: ClassVar[str] = ""

    id: Optional[UBLIdentifier] = None
    notes: List[UBLText] = field(default_factory=list)
    quantity: Optional[UBLQuantity] = None
    line_extension_amount: Optional[UBLAmount] = None
    accounting_cost: Optional[str] = None
    invoice_period: Optional[Period] = None
    order_line_reference_id: Optional[UBLIdentifier] = None
    document_references: List[DocumentReference] = field(default_factory=list)
    allowance_charges: List[AllowanceCharge] = field(default_factory=list)
    item: Optional[Item] = None
    price: Optional[Price] = None


@dataclass
class InvoiceLine(DocumentLineBase):
    ELEMENT_NAME: ClassVar[str] = "InvoiceLine"
    QUANTITY_ELEMENT_NAME: ClassVar[str] = "InvoicedQuantity"

    @property
    def invoiced_quantity(self) -> Optional[UBLQuantity]:
        return self.quantity


@dataclass
class CreditNoteLine(DocumentLineBase):
    ELEMENT_NAME: ClassVar[str] = "CreditNoteLine"
    QUANTITY_ELEMENT_NAME: ClassVar[str] = "CreditedQuantity"

    @property
    def credited_quantity(self) -> Optional[UBLQuantity]:
        return self.quantity


# --- Documentos ---

@dataclass
class UBLDocumentBase:
    """Campos comunes de Invoice y CreditNote"""
    ROOT_ELEMENT_NAME: ClassVar[str] = ""
    TYPE_CODE_ELEMENT_NAME: ClassVar[str] = ""
    LINE_CLASS: ClassVar[type] = DocumentLineBase

    customization_id: Optional[str] = None
    profile_id: Optional[str] = None
    id: Optional[UBLIdentifier] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    type_code: Optional[UBLCode] = None
    notes: List[UBLText] = field(default_factory=list)
    tax_point_date: Optional[date] = None
    document_currency_code: Optional[str] = None
    tax_currency_code: Optional[str] = None
    accounting_cost: Optional[str] = None
    buyer_reference: Optional[str] = None
    invoice_period: Optional[Period] = None
    order_reference: Optional[OrderReference] = None
    billing_references: List[DocumentReference] = field(default_factory=list)
    despatch_references: List[DocumentReference] = field(default_factory=list)
    receipt_references: List[DocumentReference] = field(default_factory=list)
    originator_references: List[DocumentReference] = field(default_factory=list)
    contract_references: List[DocumentReference] = field(default_factory=list)
    additional_references: List[DocumentReference] = field(default_factory=list)
    project_references: List[UBLIdentifier] = field(default_factory=list)
    supplier_party: Optional[Party] = None
    customer_party: Optional[Party] = None
    payee_party: Optional[Party] = None
    tax_representative_party: Optional[Party] = None
    deliveries: List[Delivery] = field(default_factory=list)
    payment_means: List[PaymentMeans] = field(default_factory=list)
    payment_terms: List[PaymentTerms] = field(default_factory=list)
    allowance_charges: List[AllowanceCharge] = field(default_factory=list)
    tax_totals: List[TaxTotal] = field(default_factory=list)
    legal_monetary_total: Optional[MonetaryTotal] = None
    lines: List[DocumentLineBase] = field(default_factory=list)


@dataclass
class Invoice(UBLDocumentBase):
    ROOT_ELEMENT_NAME: ClassVar[str] = "Invoice"
    TYPE_CODE_ELEMENT_NAME: ClassVar[str] = "InvoiceTypeCode"
    LINE_CLASS: ClassVar[type] = InvoiceLine


@dataclass
class CreditNote(UBLDocumentBase):
    ROOT_ELEMENT_NAME: ClassVar[str] = "CreditNote"
    TYPE_CODE_ELEMENT_NAME: ClassVar[str] = "CreditNoteTypeCode"
    LINE_CLASS: ClassVar[type] = CreditNoteLine


class DocumentKind(str, Enum):
    """Variante de documento UBL a generar"""
    INVOICE = "invoice"
    CREDIT_NOTE = "credit_note"

    @property
    def document_class(self) -> type:
        return Invoice if self is DocumentKind.INVOICE else CreditNote
