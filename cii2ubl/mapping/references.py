"""
Referencias a documentos, referencia de pedido y períodos de facturación.
"""
from typing import Optional, Tuple

from cii2ubl.core.config import ConversionSettings
from cii2ubl.mapping.dates import parse_cii_date
from cii2ubl.mapping.primitives import copy_code, copy_id, copy_id_value, copy_text
from cii2ubl.models.cii_types import HeaderTradeAgreement, ReferencedDocument, SpecifiedPeriod
from cii2ubl.models.diagnostics import DiagnosticList
from cii2ubl.models.ubl_types import Attachment, DocumentReference, OrderReference, Period, UBLCode
from cii2ubl.utils.text import has_text

# TypeCode de la referencia de licitación o lote (BT-17)
ORIGINATOR_DOCUMENT_TYPE_CODE = "50"

# Valores aceptados en DocumentTypeCode de AdditionalDocumentReference
VALID_DOCUMENT_TYPE_CODES = frozenset({"50", "130", "916"})

# DueDateTypeCode (UNTDID 2475) -> DescriptionCode (UNTDID 2005)
DUE_DATE_TYPE_CODE_MAP = {
    "5": "3",
    "29": "35",
    "72": "432",
}


def is_originator_reference(document: ReferencedDocument) -> bool:
    code = document.type_code
    return code is not None and code.value == ORIGINATOR_DOCUMENT_TYPE_CODE


def is_valid_document_type_code(code: Optional[str]) -> bool:
    return code in VALID_DOCUMENT_TYPE_CODES


def map_due_date_type_code(code: Optional[str]) -> Optional[str]:
    """Códigos fuera de la tabla se devuelven sin cambios."""
    if not has_text(code):
        return None
    return DUE_DATE_TYPE_CODE_MAP.get(code, code)


def convert_document_reference(source: Optional[ReferencedDocument], diagnostics: DiagnosticList,
                               path: Optional[Tuple[str, ...]] = None) -> Optional[DocumentReference]:
    """
    Convierte un documento referenciado. Sin IssuerAssignedID no hay referencia.
    """
    if source is None:
        return None
    reference_id = copy_id(source.issuer_assigned_id)
    if reference_id is None:
        return None

    reference_type_code = source.reference_type_code
    if reference_type_code is not None and has_text(reference_type_code.value):
        reference_id.scheme_id = reference_type_code.value

    result = DocumentReference(id=reference_id)

    type_code = source.type_code.value if source.type_code is not None else None
    if is_valid_document_type_code(type_code):
        result.document_type_code = copy_code(source.type_code)

    result.issue_date = parse_cii_date(source.formatted_issue_date, diagnostics, path)

    for name in source.names:
        description = copy_text(name)
        if description is not None:
            result.descriptions.append(description)

    attachment = Attachment()
    binary = source.attachment
    if binary is not None and has_text(binary.value):
        attachment.embedded_value = binary.value
        attachment.mime_code = binary.mime_code
        attachment.filename = binary.filename
    if source.uri_id is not None and has_text(source.uri_id.value):
        attachment.external_uri = source.uri_id.value
    if attachment.embedded_value is not None or attachment.external_uri is not None:
        result.attachment = attachment

    return result


def create_order_reference(agreement: HeaderTradeAgreement, settings: ConversionSettings) -> Optional[OrderReference]:
    """
    Referencia de pedido. Si solo hay pedido del vendedor, el ID (obligatorio
    en UBL) toma el valor configurado por defecto.
    """
    buyer_order = agreement.buyer_order_reference
    seller_order = agreement.seller_order_reference

    order_id = copy_id(buyer_order.issuer_assigned_id) if buyer_order is not None else None
    sales_order_id = copy_id(seller_order.issuer_assigned_id) if seller_order is not None else None

    if sales_order_id is not None and order_id is None:
        order_id = copy_id_value(settings.default_order_ref_id)

    if order_id is None and sales_order_id is None:
        return None
    return OrderReference(id=order_id, sales_order_id=sales_order_id)


def convert_period(source: Optional[SpecifiedPeriod], diagnostics: DiagnosticList,
                   description_code: Optional[str] = None,
                   path: Optional[Tuple[str, ...]] = None) -> Optional[Period]:
    """Período de facturación; None si no queda ningún dato."""
    period = Period()
    if source is not None:
        period.start_date = parse_cii_date(source.start, diagnostics, path)
        period.end_date = parse_cii_date(source.end, diagnostics, path)
    if has_text(description_code):
        period.description_codes.append(UBLCode(value=description_code))

    if period.start_date is None and period.end_date is None and not period.description_codes:
        return None
    return period
