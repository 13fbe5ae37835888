"""
Lector de XML CII (CrossIndustryInvoice D16B) hacia los dataclasses de
cii2ubl.models.cii_types.
"""
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

from lxml import etree

from cii2ubl.core.xml_utils import (
    CII_NAMESPACES,
    element_text,
    get_attribute,
    get_node,
    get_nodes,
    safe_decimal,
    safe_parse_xml,
)
from cii2ubl.models import cii_types as cii
from cii2ubl.models.diagnostics import DiagnosticList
from cii2ubl.utils.logger import logger

CII_ROOT_TAG = f"{{{CII_NAMESPACES['rsm']}}}CrossIndustryInvoice"

_XS_BOOLEAN = {"true": True, "1": True, "false": False, "0": False}


class CIIReader:
    """
    Parser de documentos CrossIndustryInvoice.

    Los errores de sintaxis o un elemento raíz distinto de
    rsm:CrossIndustryInvoice se registran como diagnóstico y devuelven None.
    """

    def __init__(self):
        self.namespaces = CII_NAMESPACES

    # ------------------------------------------------------------------
    # Entradas
    # ------------------------------------------------------------------

    def parse(self, source: Union[str, Path, bytes, BinaryIO],
              diagnostics: DiagnosticList) -> Optional[cii.CrossIndustryInvoice]:
        """Parsea desde ruta, bytes u objeto archivo."""
        root = safe_parse_xml(source)
        if root is None:
            diagnostics.error("The CII document could not be parsed as XML")
            return None
        return self.read_root(root, diagnostics)

    def parse_from_path(self, xml_path: Path, diagnostics: DiagnosticList) -> Optional[cii.CrossIndustryInvoice]:
        return self.parse(Path(xml_path), diagnostics)

    def parse_from_bytes(self, xml_bytes: bytes, diagnostics: DiagnosticList) -> Optional[cii.CrossIndustryInvoice]:
        return self.parse(xml_bytes, diagnostics)

    def parse_from_file(self, fh: BinaryIO, diagnostics: DiagnosticList) -> Optional[cii.CrossIndustryInvoice]:
        return self.parse(fh, diagnostics)

    def read_root(self, root: etree._Element, diagnostics: DiagnosticList) -> Optional[cii.CrossIndustryInvoice]:
        """
        Convierte el elemento raíz ya parseado.

        Args:
            root: Elemento rsm:CrossIndustryInvoice
            diagnostics: Lista de diagnósticos

        Returns:
            Documento CII o None si la raíz no es CII
        """
        if root.tag != CII_ROOT_TAG:
            diagnostics.error(f"The root element '{root.tag}' is not a CII CrossIndustryInvoice")
            logger.warning(f"Elemento raíz inesperado: {root.tag}")
            return None

        return cii.CrossIndustryInvoice(
            context=self._context(get_node(root, "rsm:ExchangedDocumentContext")),
            exchanged_document=self._exchanged_document(get_node(root, "rsm:ExchangedDocument")),
            transaction=self._transaction(get_node(root, "rsm:SupplyChainTradeTransaction")),
        )

    # ------------------------------------------------------------------
    # Tipos primitivos
    # ------------------------------------------------------------------

    def _nodes(self, element: Optional[etree._Element], xpath: str) -> List[etree._Element]:
        if element is None:
            return []
        return get_nodes(element, xpath, self.namespaces)

    def _node(self, element: Optional[etree._Element], xpath: str) -> Optional[etree._Element]:
        if element is None:
            return None
        return get_node(element, xpath, self.namespaces)

    def _str(self, element: Optional[etree._Element], xpath: str) -> Optional[str]:
        return element_text(self._node(element, xpath))

    def _identifier(self, node: Optional[etree._Element]) -> Optional[cii.CIIIdentifier]:
        if node is None:
            return None
        return cii.CIIIdentifier(
            value=element_text(node),
            scheme_id=get_attribute(node, "schemeID"),
            scheme_name=get_attribute(node, "schemeName"),
            scheme_agency_id=get_attribute(node, "schemeAgencyID"),
            scheme_agency_name=get_attribute(node, "schemeAgencyName"),
            scheme_version_id=get_attribute(node, "schemeVersionID"),
            scheme_data_uri=get_attribute(node, "schemeDataURI"),
            scheme_uri=get_attribute(node, "schemeURI"),
        )

    def _id(self, element, xpath: str) -> Optional[cii.CIIIdentifier]:
        return self._identifier(self._node(element, xpath))

    def _ids(self, element, xpath: str) -> List[cii.CIIIdentifier]:
        return [self._identifier(node) for node in self._nodes(element, xpath)]

    def _text_node(self, node: Optional[etree._Element]) -> Optional[cii.CIIText]:
        if node is None:
            return None
        return cii.CIIText(
            value=element_text(node),
            language_id=get_attribute(node, "languageID"),
            language_locale_id=get_attribute(node, "languageLocaleID"),
        )

    def _text(self, element, xpath: str) -> Optional[cii.CIIText]:
        return self._text_node(self._node(element, xpath))

    def _texts(self, element, xpath: str) -> List[cii.CIIText]:
        return [self._text_node(node) for node in self._nodes(element, xpath)]

    def _code(self, element, xpath: str) -> Optional[cii.CIICode]:
        node = self._node(element, xpath)
        if node is None:
            return None
        return cii.CIICode(
            value=element_text(node),
            list_id=get_attribute(node, "listID"),
            list_agency_id=get_attribute(node, "listAgencyID"),
            list_agency_name=get_attribute(node, "listAgencyName"),
            list_name=get_attribute(node, "listName"),
            list_version_id=get_attribute(node, "listVersionID"),
            name=get_attribute(node, "name"),
            language_id=get_attribute(node, "languageID"),
            list_uri=get_attribute(node, "listURI"),
            list_scheme_uri=get_attribute(node, "listSchemeURI"),
        )

    def _amount_node(self, node: etree._Element) -> cii.CIIAmount:
        return cii.CIIAmount(
            value=safe_decimal(element_text(node)),
            currency_id=get_attribute(node, "currencyID"),
            currency_code_list_version_id=get_attribute(node, "currencyCodeListVersionID"),
        )

    def _amount(self, element, xpath: str) -> Optional[cii.CIIAmount]:
        node = self._node(element, xpath)
        return self._amount_node(node) if node is not None else None

    def _amounts(self, element, xpath: str) -> List[cii.CIIAmount]:
        return [self._amount_node(node) for node in self._nodes(element, xpath)]

    def _quantity(self, element, xpath: str) -> Optional[cii.CIIQuantity]:
        node = self._node(element, xpath)
        if node is None:
            return None
        return cii.CIIQuantity(
            value=safe_decimal(element_text(node)),
            unit_code=get_attribute(node, "unitCode"),
            unit_code_list_id=get_attribute(node, "unitCodeListID"),
            unit_code_list_agency_id=get_attribute(node, "unitCodeListAgencyID"),
            unit_code_list_agency_name=get_attribute(node, "unitCodeListAgencyName"),
        )

    def _date_time(self, element, xpath: str) -> Optional[cii.CIIDateTime]:
        """xpath apunta al elemento contenedor (udt:DateTimeString, udt:DateString, ...)."""
        node = self._node(element, xpath)
        if node is None:
            return None
        return cii.CIIDateTime(value=element_text(node), format=get_attribute(node, "format"))

    def _decimal(self, element, xpath: str):
        return safe_decimal(self._str(element, xpath))

    def _indicator(self, element, xpath: str) -> Optional[cii.CIIIndicator]:
        node = self._node(element, xpath)
        if node is None:
            return None
        result = cii.CIIIndicator()
        flag = self._str(node, "udt:Indicator")
        if flag is not None:
            if flag in _XS_BOOLEAN:
                result.indicator = _XS_BOOLEAN[flag]
            else:
                result.indicator_string = flag
        else:
            result.indicator_string = self._str(node, "udt:IndicatorString")
        return result

    def _note(self, node: etree._Element) -> cii.CIINote:
        return cii.CIINote(
            content=[element_text(content) for content in self._nodes(node, "ram:Content")],
            subject_code=self._str(node, "ram:SubjectCode"),
        )

    def _notes(self, element, xpath: str) -> List[cii.CIINote]:
        return [self._note(node) for node in self._nodes(element, xpath)]

    # ------------------------------------------------------------------
    # Estructuras
    # ------------------------------------------------------------------

    def _context(self, node) -> Optional[cii.ExchangedDocumentContext]:
        if node is None:
            return None
        return cii.ExchangedDocumentContext(
            business_process_ids=self._ids(node, "ram:BusinessProcessSpecifiedDocumentContextParameter/ram:ID"),
            guideline_ids=self._ids(node, "ram:GuidelineSpecifiedDocumentContextParameter/ram:ID"),
        )

    def _exchanged_document(self, node) -> Optional[cii.ExchangedDocument]:
        if node is None:
            return None
        return cii.ExchangedDocument(
            id=self._id(node, "ram:ID"),
            type_code=self._code(node, "ram:TypeCode"),
            issue_date_time=self._date_time(node, "ram:IssueDateTime/udt:DateTimeString"),
            notes=self._notes(node, "ram:IncludedNote"),
        )

    def _address(self, node) -> Optional[cii.TradeAddress]:
        if node is None:
            return None
        return cii.TradeAddress(
            postcode=self._str(node, "ram:PostcodeCode"),
            line_one=self._str(node, "ram:LineOne"),
            line_two=self._str(node, "ram:LineTwo"),
            line_three=self._str(node, "ram:LineThree"),
            city_name=self._str(node, "ram:CityName"),
            country_id=self._str(node, "ram:CountryID"),
            country_subdivision_names=self._texts(node, "ram:CountrySubDivisionName"),
        )

    def _contact(self, node) -> cii.TradeContact:
        return cii.TradeContact(
            person_name=self._text(node, "ram:PersonName"),
            department_name=self._text(node, "ram:DepartmentName"),
            telephone=self._str(node, "ram:TelephoneUniversalCommunication/ram:CompleteNumber"),
            email=self._str(node, "ram:EmailURIUniversalCommunication/ram:URIID"),
        )

    def _party(self, node) -> Optional[cii.TradeParty]:
        if node is None:
            return None
        organization_node = self._node(node, "ram:SpecifiedLegalOrganization")
        organization = None
        if organization_node is not None:
            organization = cii.LegalOrganization(
                id=self._id(organization_node, "ram:ID"),
                trading_business_name=self._text(organization_node, "ram:TradingBusinessName"),
            )
        return cii.TradeParty(
            ids=self._ids(node, "ram:ID"),
            global_ids=self._ids(node, "ram:GlobalID"),
            name=self._text(node, "ram:Name"),
            descriptions=self._texts(node, "ram:Description"),
            legal_organization=organization,
            contacts=[self._contact(c) for c in self._nodes(node, "ram:DefinedTradeContact")],
            postal_address=self._address(self._node(node, "ram:PostalTradeAddress")),
            uri_communications=self._ids(node, "ram:URIUniversalCommunication/ram:URIID"),
            tax_registrations=[
                cii.TaxRegistration(id=self._id(reg, "ram:ID"))
                for reg in self._nodes(node, "ram:SpecifiedTaxRegistration")
            ],
        )

    def _referenced_document(self, node) -> Optional[cii.ReferencedDocument]:
        if node is None:
            return None
        attachment = None
        binary_node = self._node(node, "ram:AttachmentBinaryObject")
        if binary_node is not None:
            attachment = cii.BinaryObject(
                value=element_text(binary_node),
                mime_code=get_attribute(binary_node, "mimeCode"),
                filename=get_attribute(binary_node, "filename"),
            )
        return cii.ReferencedDocument(
            issuer_assigned_id=self._id(node, "ram:IssuerAssignedID"),
            uri_id=self._id(node, "ram:URIID"),
            line_id=self._id(node, "ram:LineID"),
            type_code=self._code(node, "ram:TypeCode"),
            names=self._texts(node, "ram:Name"),
            attachment=attachment,
            reference_type_code=self._code(node, "ram:ReferenceTypeCode"),
            formatted_issue_date=self._date_time(node, "ram:FormattedIssueDateTime/qdt:DateTimeString"),
        )

    def _trade_tax(self, node) -> cii.TradeTax:
        return cii.TradeTax(
            calculated_amounts=self._amounts(node, "ram:CalculatedAmount"),
            type_code=self._code(node, "ram:TypeCode"),
            exemption_reason=self._text(node, "ram:ExemptionReason"),
            basis_amounts=self._amounts(node, "ram:BasisAmount"),
            category_code=self._code(node, "ram:CategoryCode"),
            exemption_reason_code=self._code(node, "ram:ExemptionReasonCode"),
            tax_point_date=self._date_time(node, "ram:TaxPointDate/udt:DateString"),
            due_date_type_code=self._code(node, "ram:DueDateTypeCode"),
            rate_applicable_percent=self._decimal(node, "ram:RateApplicablePercent"),
        )

    def _trade_taxes(self, element, xpath: str) -> List[cii.TradeTax]:
        return [self._trade_tax(node) for node in self._nodes(element, xpath)]

    def _allowance_charge(self, node) -> cii.TradeAllowanceCharge:
        return cii.TradeAllowanceCharge(
            charge_indicator=self._indicator(node, "ram:ChargeIndicator"),
            calculation_percent=self._decimal(node, "ram:CalculationPercent"),
            basis_amount=self._amount(node, "ram:BasisAmount"),
            actual_amounts=self._amounts(node, "ram:ActualAmount"),
            reason_code=self._code(node, "ram:ReasonCode"),
            reason=self._text(node, "ram:Reason"),
            category_trade_taxes=self._trade_taxes(node, "ram:CategoryTradeTax"),
        )

    def _allowance_charges(self, element, xpath: str) -> List[cii.TradeAllowanceCharge]:
        return [self._allowance_charge(node) for node in self._nodes(element, xpath)]

    def _period(self, node) -> Optional[cii.SpecifiedPeriod]:
        if node is None:
            return None
        return cii.SpecifiedPeriod(
            start=self._date_time(node, "ram:StartDateTime/udt:DateTimeString"),
            end=self._date_time(node, "ram:EndDateTime/udt:DateTimeString"),
        )

    def _financial_account(self, node) -> Optional[cii.FinancialAccount]:
        if node is None:
            return None
        return cii.FinancialAccount(
            iban_id=self._id(node, "ram:IBANID"),
            account_name=self._text(node, "ram:AccountName"),
            proprietary_id=self._id(node, "ram:ProprietaryID"),
        )

    def _payment_means(self, node) -> cii.PaymentMeans:
        card_node = self._node(node, "ram:ApplicableTradeSettlementFinancialCard")
        card = None
        if card_node is not None:
            card = cii.FinancialCard(
                id=self._id(card_node, "ram:ID"),
                cardholder_name=self._text(card_node, "ram:CardholderName"),
            )
        return cii.PaymentMeans(
            type_code=self._code(node, "ram:TypeCode"),
            information=self._texts(node, "ram:Information"),
            financial_card=card,
            payer_debtor_account=self._financial_account(self._node(node, "ram:PayerPartyDebtorFinancialAccount")),
            payee_creditor_account=self._financial_account(self._node(node, "ram:PayeePartyCreditorFinancialAccount")),
            payer_institution_bic=self._id(node, "ram:PayerSpecifiedDebtorFinancialInstitution/ram:BICID"),
            payee_institution_bic=self._id(node, "ram:PayeeSpecifiedCreditorFinancialInstitution/ram:BICID"),
        )

    def _payment_terms(self, node) -> cii.PaymentTerms:
        return cii.PaymentTerms(
            descriptions=self._texts(node, "ram:Description"),
            due_date=self._date_time(node, "ram:DueDateDateTime/udt:DateTimeString"),
            direct_debit_mandate_ids=self._ids(node, "ram:DirectDebitMandateID"),
        )

    def _summation(self, node) -> Optional[cii.MonetarySummation]:
        if node is None:
            return None
        return cii.MonetarySummation(
            line_total_amounts=self._amounts(node, "ram:LineTotalAmount"),
            charge_total_amounts=self._amounts(node, "ram:ChargeTotalAmount"),
            allowance_total_amounts=self._amounts(node, "ram:AllowanceTotalAmount"),
            tax_basis_total_amounts=self._amounts(node, "ram:TaxBasisTotalAmount"),
            tax_total_amounts=self._amounts(node, "ram:TaxTotalAmount"),
            rounding_amounts=self._amounts(node, "ram:RoundingAmount"),
            grand_total_amounts=self._amounts(node, "ram:GrandTotalAmount"),
            total_prepaid_amounts=self._amounts(node, "ram:TotalPrepaidAmount"),
            due_payable_amounts=self._amounts(node, "ram:DuePayableAmount"),
        )

    def _agreement(self, node) -> Optional[cii.HeaderTradeAgreement]:
        if node is None:
            return None
        project_node = self._node(node, "ram:SpecifiedProcuringProject")
        project = None
        if project_node is not None:
            project = cii.ProcuringProject(id=self._id(project_node, "ram:ID"), name=self._text(project_node, "ram:Name"))
        return cii.HeaderTradeAgreement(
            buyer_reference=self._text(node, "ram:BuyerReference"),
            seller=self._party(self._node(node, "ram:SellerTradeParty")),
            buyer=self._party(self._node(node, "ram:BuyerTradeParty")),
            seller_tax_representative=self._party(self._node(node, "ram:SellerTaxRepresentativeTradeParty")),
            seller_order_reference=self._referenced_document(self._node(node, "ram:SellerOrderReferencedDocument")),
            buyer_order_reference=self._referenced_document(self._node(node, "ram:BuyerOrderReferencedDocument")),
            contract_reference=self._referenced_document(self._node(node, "ram:ContractReferencedDocument")),
            additional_references=[
                self._referenced_document(ref) for ref in self._nodes(node, "ram:AdditionalReferencedDocument")
            ],
            procuring_project=project,
        )

    def _delivery(self, node) -> Optional[cii.HeaderTradeDelivery]:
        if node is None:
            return None
        event_node = self._node(node, "ram:ActualDeliverySupplyChainEvent")
        event = None
        if event_node is not None:
            event = cii.SupplyChainEvent(
                occurrence_date=self._date_time(event_node, "ram:OccurrenceDateTime/udt:DateTimeString")
            )
        return cii.HeaderTradeDelivery(
            ship_to=self._party(self._node(node, "ram:ShipToTradeParty")),
            actual_delivery_event=event,
            despatch_advice_reference=self._referenced_document(self._node(node, "ram:DespatchAdviceReferencedDocument")),
            receiving_advice_reference=self._referenced_document(self._node(node, "ram:ReceivingAdviceReferencedDocument")),
        )

    def _settlement(self, node) -> Optional[cii.HeaderTradeSettlement]:
        if node is None:
            return None
        return cii.HeaderTradeSettlement(
            creditor_reference_id=self._id(node, "ram:CreditorReferenceID"),
            payment_references=self._texts(node, "ram:PaymentReference"),
            tax_currency_code=self._str(node, "ram:TaxCurrencyCode"),
            invoice_currency_code=self._str(node, "ram:InvoiceCurrencyCode"),
            payee=self._party(self._node(node, "ram:PayeeTradeParty")),
            payment_means=[self._payment_means(pm) for pm in self._nodes(node, "ram:SpecifiedTradeSettlementPaymentMeans")],
            trade_taxes=self._trade_taxes(node, "ram:ApplicableTradeTax"),
            billing_period=self._period(self._node(node, "ram:BillingSpecifiedPeriod")),
            allowance_charges=self._allowance_charges(node, "ram:SpecifiedTradeAllowanceCharge"),
            payment_terms=[self._payment_terms(pt) for pt in self._nodes(node, "ram:SpecifiedTradePaymentTerms")],
            monetary_summation=self._summation(self._node(node, "ram:SpecifiedTradeSettlementHeaderMonetarySummation")),
            invoice_reference=self._referenced_document(self._node(node, "ram:InvoiceReferencedDocument")),
            receivable_accounting_account_ids=self._ids(node, "ram:ReceivableSpecifiedTradeAccountingAccount/ram:ID"),
        )

    def _price(self, node) -> Optional[cii.TradePrice]:
        if node is None:
            return None
        return cii.TradePrice(
            charge_amounts=self._amounts(node, "ram:ChargeAmount"),
            basis_quantity=self._quantity(node, "ram:BasisQuantity"),
            applied_allowance_charges=self._allowance_charges(node, "ram:AppliedTradeAllowanceCharge"),
        )

    def _product(self, node) -> Optional[cii.TradeProduct]:
        if node is None:
            return None
        origin_node = self._node(node, "ram:OriginTradeCountry")
        origin = None
        if origin_node is not None:
            origin = cii.TradeCountry(id=self._str(origin_node, "ram:ID"), names=self._texts(origin_node, "ram:Name"))
        return cii.TradeProduct(
            global_id=self._id(node, "ram:GlobalID"),
            seller_assigned_id=self._id(node, "ram:SellerAssignedID"),
            buyer_assigned_id=self._id(node, "ram:BuyerAssignedID"),
            names=self._texts(node, "ram:Name"),
            description=self._text(node, "ram:Description"),
            characteristics=[
                cii.ProductCharacteristic(
                    descriptions=self._texts(c, "ram:Description"),
                    values=self._texts(c, "ram:Value"),
                )
                for c in self._nodes(node, "ram:ApplicableProductCharacteristic")
            ],
            classifications=[
                cii.ProductClassification(class_code=self._code(c, "ram:ClassCode"))
                for c in self._nodes(node, "ram:DesignatedProductClassification")
            ],
            origin_country=origin,
        )

    def _line_item(self, node) -> cii.SupplyChainTradeLineItem:
        document_node = self._node(node, "ram:AssociatedDocumentLineDocument")
        document_line = None
        if document_node is not None:
            document_line = cii.DocumentLine(
                line_id=self._id(document_node, "ram:LineID"),
                notes=self._notes(document_node, "ram:IncludedNote"),
            )

        agreement_node = self._node(node, "ram:SpecifiedLineTradeAgreement")
        agreement = None
        if agreement_node is not None:
            agreement = cii.LineTradeAgreement(
                buyer_order_reference=self._referenced_document(
                    self._node(agreement_node, "ram:BuyerOrderReferencedDocument")
                ),
                gross_price=self._price(self._node(agreement_node, "ram:GrossPriceProductTradePrice")),
                net_price=self._price(self._node(agreement_node, "ram:NetPriceProductTradePrice")),
            )

        delivery_node = self._node(node, "ram:SpecifiedLineTradeDelivery")
        delivery = None
        if delivery_node is not None:
            delivery = cii.LineTradeDelivery(billed_quantity=self._quantity(delivery_node, "ram:BilledQuantity"))

        settlement_node = self._node(node, "ram:SpecifiedLineTradeSettlement")
        settlement = None
        if settlement_node is not None:
            settlement = cii.LineTradeSettlement(
                trade_taxes=self._trade_taxes(settlement_node, "ram:ApplicableTradeTax"),
                billing_period=self._period(self._node(settlement_node, "ram:BillingSpecifiedPeriod")),
                allowance_charges=self._allowance_charges(settlement_node, "ram:SpecifiedTradeAllowanceCharge"),
                monetary_summation=self._summation(
                    self._node(settlement_node, "ram:SpecifiedTradeSettlementLineMonetarySummation")
                ),
                additional_references=[
                    self._referenced_document(ref)
                    for ref in self._nodes(settlement_node, "ram:AdditionalReferencedDocument")
                ],
                receivable_accounting_account_ids=self._ids(
                    settlement_node, "ram:ReceivableSpecifiedTradeAccountingAccount/ram:ID"
                ),
            )

        return cii.SupplyChainTradeLineItem(
            document_line=document_line,
            product=self._product(self._node(node, "ram:SpecifiedTradeProduct")),
            agreement=agreement,
            delivery=delivery,
            settlement=settlement,
        )

    def _transaction(self, node) -> Optional[cii.SupplyChainTradeTransaction]:
        if node is None:
            return None
        return cii.SupplyChainTradeTransaction(
            line_items=[self._line_item(item) for item in self._nodes(node, "ram:IncludedSupplyChainTradeLineItem")],
            agreement=self._agreement(self._node(node, "ram:ApplicableHeaderTradeAgreement")),
            delivery=self._delivery(self._node(node, "ram:ApplicableHeaderTradeDelivery")),
            settlement=self._settlement(self._node(node, "ram:ApplicableHeaderTradeSettlement")),
        )
