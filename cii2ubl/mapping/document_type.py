"""
Decide si un documento CII se convierte en Invoice o en CreditNote.
"""
from typing import Optional

from cii2ubl.core.config import ConversionSettings, CreationMode
from cii2ubl.mapping.indicator import TriState
from cii2ubl.models.cii_types import CrossIndustryInvoice
from cii2ubl.models.diagnostics import DiagnosticList
from cii2ubl.models.ubl_types import DocumentKind
from cii2ubl.utils.logger import get_logger

logger = get_logger("DocumentType")

# UNTDID 1001, subconjunto EN16931 (875-877 son códigos de XRechnung)
INVOICE_TYPE_CODES = frozenset(
    "80 82 84 130 202 203 204 211 295 325 326 380 383 384 385 386 387 388 389 390 "
    "393 394 395 456 457 527 575 623 633 751 780 875 876 877 935".split()
)
CREDIT_NOTE_TYPE_CODES = frozenset("81 83 261 262 296 308 381 396 420 458 532".split())


def _type_code(cii: CrossIndustryInvoice) -> Optional[str]:
    document = cii.exchanged_document
    if document is None or document.type_code is None:
        return None
    return document.type_code.value


def classify_document(cii: CrossIndustryInvoice) -> TriState:
    """
    Clasifica el documento: TRUE = factura, FALSE = nota crédito.

    1. Código de tipo en una de las dos listas.
    2. Signo del importe a pagar (DuePayableAmount) de la liquidación.
    3. UNDEFINED si no hay ninguno de los dos.
    """
    code = _type_code(cii)
    if code in INVOICE_TYPE_CODES:
        return TriState.TRUE
    if code in CREDIT_NOTE_TYPE_CODES:
        return TriState.FALSE

    transaction = cii.transaction
    settlement = transaction.settlement if transaction is not None else None
    summation = settlement.monetary_summation if settlement is not None else None
    if summation is not None:
        for amount in summation.due_payable_amounts:
            if amount.value is not None:
                return TriState.of(amount.value >= 0)

    return TriState.UNDEFINED


def resolve_document_kind(cii: CrossIndustryInvoice, settings: ConversionSettings,
                          diagnostics: DiagnosticList) -> DocumentKind:
    """Aplica el modo de creación y, en modo automático, el clasificador."""
    if settings.creation_mode is CreationMode.INVOICE:
        return DocumentKind.INVOICE
    if settings.creation_mode is CreationMode.CREDIT_NOTE:
        return DocumentKind.CREDIT_NOTE

    classification = classify_document(cii)
    if classification.is_true:
        return DocumentKind.INVOICE
    if classification.is_false:
        return DocumentKind.CREDIT_NOTE

    diagnostics.warn(
        "Failed to determine whether the document is an invoice or a credit note; "
        f"using '{settings.undetermined_document_kind.value}'",
        ("CrossIndustryInvoice", "ExchangedDocument", "TypeCode"),
    )
    logger.warning(f"Tipo de documento no determinado, se usa {settings.undetermined_document_kind.value}")
    return settings.undetermined_document_kind
