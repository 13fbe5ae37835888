# cii2ubl/facade/converter_facade.py

from pathlib import Path
from typing import BinaryIO, Optional, Union

from cii2ubl.core.cii_reader import CIIReader
from cii2ubl.core.config import ConversionSettings
from cii2ubl.mapping.allowance_charge import convert_allowance_charge
from cii2ubl.mapping.dates import parse_cii_date
from cii2ubl.mapping.document_type import resolve_document_kind
from cii2ubl.mapping.lines import convert_line
from cii2ubl.mapping.party import add_party_id, convert_full_party, convert_postal_address, first_party_id
from cii2ubl.mapping.payment_means import convert_payment_means
from cii2ubl.mapping.primitives import copy_code, copy_id, copy_id_value, copy_note, copy_text
from cii2ubl.mapping.references import (
    convert_document_reference,
    convert_period,
    create_order_reference,
    is_originator_reference,
    map_due_date_type_code,
)
from cii2ubl.mapping.totals import convert_monetary_total, convert_tax_totals
from cii2ubl.models.cii_types import (
    CrossIndustryInvoice,
    HeaderTradeAgreement,
    HeaderTradeDelivery,
    HeaderTradeSettlement,
)
from cii2ubl.models.diagnostics import ConversionResult, DiagnosticList, StructuralError
from cii2ubl.models.ubl_types import (
    CreditNote,
    Delivery,
    DocumentKind,
    Invoice,
    Party,
    PaymentTerms,
    UBLDocumentBase,
)
from cii2ubl.utils.logger import get_logger
from cii2ubl.utils.text import has_text

logger = get_logger("CIIToUBLConverter")

TRANSACTION_PATH = ("CrossIndustryInvoice", "SupplyChainTradeTransaction")
SETTLEMENT_PATH = TRANSACTION_PATH + ("ApplicableHeaderTradeSettlement",)


class CIIToUBLConverter:
    """
    Fachada de conversión CII -> UBL (Invoice o CreditNote).

    No guarda estado entre llamadas: la configuración se pasa en cada
    conversión, por lo que una instancia puede compartirse entre hilos.
    """

    def __init__(self, reader: Optional[CIIReader] = None):
        self.reader = reader or CIIReader()

    # ------------------------------------------------------------------
    # API pública
    # ------------------------------------------------------------------

    def convert(self, cii: CrossIndustryInvoice,
                settings: Optional[ConversionSettings] = None) -> ConversionResult:
        """
        Convierte un documento CII ya parseado.

        Args:
            cii: Documento fuente
            settings: Configuración (por defecto ConversionSettings())

        Returns:
            ConversionResult con el documento (None si falta un bloque
            obligatorio) y la lista de diagnósticos
        """
        settings = settings or ConversionSettings()
        diagnostics = DiagnosticList()

        kind = resolve_document_kind(cii, settings, diagnostics)
        logger.debug(f"Tipo de documento destino: {kind.value} (UBL {settings.ubl_version.value})")

        if kind is DocumentKind.INVOICE:
            document = self.convert_to_invoice(cii, settings, diagnostics)
        else:
            document = self.convert_to_credit_note(cii, settings, diagnostics)
        return ConversionResult(document=document, diagnostics=diagnostics)

    def convert_file(self, source: Union[str, Path, bytes, BinaryIO],
                     settings: Optional[ConversionSettings] = None) -> ConversionResult:
        """Parsea el XML CII (ruta, bytes u objeto archivo) y lo convierte."""
        diagnostics = DiagnosticList()
        cii = self.reader.parse(source, diagnostics)
        if cii is None:
            return ConversionResult(document=None, diagnostics=diagnostics)

        result = self.convert(cii, settings)
        for diagnostic in result.diagnostics:
            diagnostics.add(diagnostic)
        return ConversionResult(document=result.document, diagnostics=diagnostics)

    def convert_to_invoice(self, cii: CrossIndustryInvoice, settings: ConversionSettings,
                           diagnostics: DiagnosticList) -> Optional[Invoice]:
        return self._convert_guarded(cii, Invoice, settings, diagnostics)

    def convert_to_credit_note(self, cii: CrossIndustryInvoice, settings: ConversionSettings,
                               diagnostics: DiagnosticList) -> Optional[CreditNote]:
        return self._convert_guarded(cii, CreditNote, settings, diagnostics)

    # ------------------------------------------------------------------
    # Ensamblado
    # ------------------------------------------------------------------

    def _convert_guarded(self, cii, document_class, settings, diagnostics):
        try:
            return self._assemble(cii, document_class, settings, diagnostics)
        except StructuralError as exc:
            logger.error(f"Conversión abortada: {exc}")
            diagnostics.error(str(exc), exc.path)
            return None

    @staticmethod
    def _require_substructures(cii: CrossIndustryInvoice):
        transaction = cii.transaction
        if transaction is None:
            raise StructuralError(TRANSACTION_PATH)
        if transaction.agreement is None:
            raise StructuralError(TRANSACTION_PATH + ("ApplicableHeaderTradeAgreement",))
        if transaction.delivery is None:
            raise StructuralError(TRANSACTION_PATH + ("ApplicableHeaderTradeDelivery",))
        if transaction.settlement is None:
            raise StructuralError(SETTLEMENT_PATH)
        return transaction.agreement, transaction.delivery, transaction.settlement

    def _assemble(self, cii: CrossIndustryInvoice, document_class, settings: ConversionSettings,
                  diagnostics: DiagnosticList) -> UBLDocumentBase:
        agreement, delivery, settlement = self._require_substructures(cii)
        is_invoice = document_class is Invoice
        document = document_class()
        currency = settlement.invoice_currency_code or None

        self._convert_header(cii, document, agreement, settlement, settings, diagnostics, is_invoice)
        self._convert_references(document, agreement, delivery, settlement, settings, diagnostics, is_invoice)
        self._convert_parties(document, agreement, settlement, settings)
        self._convert_delivery(document, delivery, diagnostics)

        due_date = None if is_invoice else self._find_due_date(settlement, diagnostics)
        for index, payment_means in enumerate(settlement.payment_means):
            outcome = convert_payment_means(
                payment_means, settlement, settings, diagnostics,
                SETTLEMENT_PATH + (f"SpecifiedTradeSettlementPaymentMeans[{index}]",),
                due_date=due_date,
            )
            for effect in outcome.effects:
                add_party_id(document.supplier_party.identifications, effect.identifier)
            if outcome.payment_means is not None:
                document.payment_means.append(outcome.payment_means)

        for terms in settlement.payment_terms:
            notes = [copy_text(description) for description in terms.descriptions]
            notes = [note for note in notes if note is not None]
            if notes:
                document.payment_terms.append(PaymentTerms(notes=notes))

        for allowance_charge in settlement.allowance_charges:
            converted = convert_allowance_charge(allowance_charge, currency, settings, diagnostics)
            if converted is not None:
                document.allowance_charges.append(converted)

        document.tax_totals = convert_tax_totals(settlement, currency, settings)
        document.legal_monetary_total = convert_monetary_total(settlement, currency)

        transaction = cii.transaction
        for index, line_item in enumerate(transaction.line_items):
            document.lines.append(
                convert_line(line_item, document_class.LINE_CLASS, currency, settings, diagnostics, index)
            )

        logger.debug(f"Documento {document_class.ROOT_ELEMENT_NAME} con {len(document.lines)} líneas")
        return document

    @staticmethod
    def _find_due_date(settlement: HeaderTradeSettlement, diagnostics: DiagnosticList):
        for terms in settlement.payment_terms:
            due_date = parse_cii_date(terms.due_date, diagnostics, SETTLEMENT_PATH + ("SpecifiedTradePaymentTerms",))
            if due_date is not None:
                return due_date
        return None

    def _convert_header(self, cii: CrossIndustryInvoice, document: UBLDocumentBase,
                        agreement: HeaderTradeAgreement, settlement: HeaderTradeSettlement,
                        settings: ConversionSettings, diagnostics: DiagnosticList, is_invoice: bool) -> None:
        context = cii.context
        if context is not None:
            if context.business_process_ids:
                document.profile_id = context.business_process_ids[0].value
            if context.guideline_ids:
                document.customization_id = context.guideline_ids[0].value

        # los valores configurados tienen prioridad
        if has_text(settings.profile_id):
            document.profile_id = settings.profile_id
        if has_text(settings.customization_id):
            document.customization_id = settings.customization_id

        exchanged = cii.exchanged_document
        if exchanged is not None:
            document.id = copy_id(exchanged.id)
            document.issue_date = parse_cii_date(
                exchanged.issue_date_time, diagnostics,
                ("CrossIndustryInvoice", "ExchangedDocument", "IssueDateTime"),
            )
            document.type_code = copy_code(exchanged.type_code)
            for note in exchanged.notes:
                converted = copy_note(note)
                if converted is not None:
                    document.notes.append(converted)

        if is_invoice:
            document.due_date = self._find_due_date(settlement, diagnostics)

        for tax in settlement.trade_taxes:
            tax_point_date = parse_cii_date(tax.tax_point_date, diagnostics, SETTLEMENT_PATH + ("ApplicableTradeTax",))
            if tax_point_date is not None:
                document.tax_point_date = tax_point_date
                break

        document.document_currency_code = settlement.invoice_currency_code or None
        document.tax_currency_code = settlement.tax_currency_code or None

        for account_id in settlement.receivable_accounting_account_ids:
            if has_text(account_id.value):
                document.accounting_cost = account_id.value
                break

        if agreement.buyer_reference is not None and has_text(agreement.buyer_reference.value):
            document.buyer_reference = agreement.buyer_reference.value

        description_code = None
        if settlement.trade_taxes:
            due_date_type_code = settlement.trade_taxes[0].due_date_type_code
            if due_date_type_code is not None:
                description_code = map_due_date_type_code(due_date_type_code.value)
        document.invoice_period = convert_period(
            settlement.billing_period, diagnostics, description_code,
            SETTLEMENT_PATH + ("BillingSpecifiedPeriod",),
        )

    def _convert_references(self, document: UBLDocumentBase, agreement: HeaderTradeAgreement,
                            delivery: HeaderTradeDelivery, settlement: HeaderTradeSettlement,
                            settings: ConversionSettings, diagnostics: DiagnosticList, is_invoice: bool) -> None:
        document.order_reference = create_order_reference(agreement, settings)

        billing = convert_document_reference(settlement.invoice_reference, diagnostics)
        if billing is not None:
            document.billing_references.append(billing)

        despatch = convert_document_reference(delivery.despatch_advice_reference, diagnostics)
        if despatch is not None:
            document.despatch_references.append(despatch)

        receipt = convert_document_reference(delivery.receiving_advice_reference, diagnostics)
        if receipt is not None:
            document.receipt_references.append(receipt)

        for reference in agreement.additional_references:
            if is_originator_reference(reference):
                converted = convert_document_reference(reference, diagnostics)
                if converted is not None:
                    converted.document_type_code = None
                    document.originator_references.append(converted)

        contract = convert_document_reference(agreement.contract_reference, diagnostics)
        if contract is not None:
            document.contract_references.append(contract)

        for reference in agreement.additional_references:
            if not is_originator_reference(reference):
                converted = convert_document_reference(reference, diagnostics)
                if converted is not None:
                    document.additional_references.append(converted)

        project = agreement.procuring_project
        if project is not None and (is_invoice or settings.capabilities.credit_note_project_reference):
            project_id = copy_id_value(project.id.value if project.id is not None else None)
            if project_id is not None:
                document.project_references.append(project_id)

    def _convert_parties(self, document: UBLDocumentBase, agreement: HeaderTradeAgreement,
                         settlement: HeaderTradeSettlement, settings: ConversionSettings) -> None:
        # proveedor y cliente son obligatorios en UBL
        document.supplier_party = convert_full_party(
            agreement.seller, settings, multi_id=True, use_legal_entity_name=True, with_legal_entity=True
        ) or Party()
        document.customer_party = convert_full_party(
            agreement.buyer, settings, multi_id=False, use_legal_entity_name=True, with_legal_entity=True
        ) or Party()
        document.payee_party = convert_full_party(
            settlement.payee, settings, multi_id=False, use_legal_entity_name=False, with_legal_entity=False
        )
        document.tax_representative_party = convert_full_party(
            agreement.seller_tax_representative, settings,
            multi_id=False, use_legal_entity_name=False, with_legal_entity=False,
        )

    @staticmethod
    def _convert_delivery(document: UBLDocumentBase, delivery: HeaderTradeDelivery,
                          diagnostics: DiagnosticList) -> None:
        result = Delivery()
        used = False

        event = delivery.actual_delivery_event
        if event is not None and event.occurrence_date is not None:
            result.actual_delivery_date = parse_cii_date(
                event.occurrence_date, diagnostics,
                TRANSACTION_PATH + ("ApplicableHeaderTradeDelivery", "ActualDeliverySupplyChainEvent"),
            )
            used = True

        ship_to = delivery.ship_to
        if ship_to is not None:
            result.location_id = first_party_id(ship_to)
            result.location_address = convert_postal_address(ship_to.postal_address)
            if result.location_id is not None or result.location_address is not None:
                used = True
            if ship_to.name is not None and has_text(ship_to.name.value):
                result.party_name = ship_to.name.value
                used = True

        if used:
            document.deliveries.append(result)
