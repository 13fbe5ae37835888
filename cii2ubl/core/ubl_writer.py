"""
Serialización de los documentos UBL (Invoice / CreditNote) a XML con lxml.

El orden de los elementos sigue la secuencia del esquema UBL 2.x; los campos
vacíos (None o listas vacías) no se emiten.
"""
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import List, Optional, Union

from lxml import etree

from cii2ubl.core.xml_utils import UBL_DOCUMENT_NAMESPACES, UBL_NAMESPACES, format_decimal
from cii2ubl.models.ubl_types import (
    Address,
    AllowanceCharge,
    Contact,
    CreditNote,
    Delivery,
    DocumentLineBase,
    DocumentReference,
    Invoice,
    Item,
    MonetaryTotal,
    Party,
    PaymentMeans,
    Period,
    Price,
    TaxCategory,
    TaxTotal,
    UBLAmount,
    UBLCode,
    UBLDocumentBase,
    UBLIdentifier,
    UBLQuantity,
    UBLText,
)
from cii2ubl.utils.logger import logger


class UBLWriter:
    """Convierte un UBLDocumentBase en un árbol lxml."""

    def __init__(self, pretty_print: bool = True):
        self.pretty_print = pretty_print

    # ------------------------------------------------------------------
    # API pública
    # ------------------------------------------------------------------

    def to_element(self, document: UBLDocumentBase) -> etree._Element:
        """
        Construye el elemento raíz del documento.

        Args:
            document: Invoice o CreditNote

        Returns:
            Elemento raíz con los namespaces UBL
        """
        root_name = document.ROOT_ELEMENT_NAME
        namespace = UBL_DOCUMENT_NAMESPACES[root_name]
        nsmap = {None: namespace, "cac": UBL_NAMESPACES["cac"], "cbc": UBL_NAMESPACES["cbc"]}
        root = etree.Element(f"{{{namespace}}}{root_name}", nsmap=nsmap)

        self._add_header(root, document)
        self._add_references(root, document)
        self._add_parties(root, document)

        for delivery in document.deliveries:
            self._add_delivery(root, delivery)
        for payment_means in document.payment_means:
            self._add_payment_means(root, payment_means)
        for terms in document.payment_terms:
            terms_element = self._add_cac(root, "PaymentTerms")
            for note in terms.notes:
                self._add_text(terms_element, "Note", note)
        for allowance_charge in document.allowance_charges:
            self._add_allowance_charge(root, allowance_charge)
        for tax_total in document.tax_totals:
            self._add_tax_total(root, tax_total)
        self._add_monetary_total(root, document.legal_monetary_total)

        for line in document.lines:
            self._add_line(root, line)

        return root

    def to_bytes(self, document: UBLDocumentBase) -> bytes:
        """XML serializado en UTF-8 con declaración."""
        return etree.tostring(
            self.to_element(document),
            pretty_print=self.pretty_print,
            xml_declaration=True,
            encoding="UTF-8",
        )

    def write(self, document: UBLDocumentBase, output_path: Union[str, Path]) -> Path:
        """Escribe el documento en disco y devuelve la ruta."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(self.to_bytes(document))
        logger.info(f"Documento {document.ROOT_ELEMENT_NAME} escrito en {output_path}")
        return output_path

    # ------------------------------------------------------------------
    # Helpers de elementos
    # ------------------------------------------------------------------

    @staticmethod
    def _cbc(tag: str) -> str:
        return f"{{{UBL_NAMESPACES['cbc']}}}{tag}"

    @staticmethod
    def _cac(tag: str) -> str:
        return f"{{{UBL_NAMESPACES['cac']}}}{tag}"

    @staticmethod
    def _set_attributes(element: etree._Element, **attribs: Optional[str]) -> None:
        for key, value in attribs.items():
            if value is not None:
                element.set(key, value)

    def _add_cbc(self, parent: etree._Element, tag: str, text: Optional[str], **attribs: Optional[str]) -> Optional[etree._Element]:
        """Añade un elemento cbc si hay texto."""
        if text is None:
            return None
        element = etree.SubElement(parent, self._cbc(tag))
        element.text = text
        self._set_attributes(element, **attribs)
        return element

    def _add_cac(self, parent: etree._Element, tag: str) -> etree._Element:
        return etree.SubElement(parent, self._cac(tag))

    def _add_date(self, parent: etree._Element, tag: str, value: Optional[date]) -> None:
        if value is not None:
            self._add_cbc(parent, tag, value.isoformat())

    def _add_decimal(self, parent: etree._Element, tag: str, value: Optional[Decimal]) -> None:
        if value is not None:
            self._add_cbc(parent, tag, format_decimal(value))

    def _add_id(self, parent: etree._Element, tag: str, identifier: Optional[UBLIdentifier]) -> None:
        if identifier is None:
            return
        self._add_cbc(
            parent, tag, identifier.value,
            schemeID=identifier.scheme_id,
            schemeName=identifier.scheme_name,
            schemeAgencyID=identifier.scheme_agency_id,
            schemeAgencyName=identifier.scheme_agency_name,
            schemeVersionID=identifier.scheme_version_id,
            schemeDataURI=identifier.scheme_data_uri,
            schemeURI=identifier.scheme_uri,
        )

    def _add_text(self, parent: etree._Element, tag: str, text: Optional[UBLText]) -> None:
        if text is None:
            return
        self._add_cbc(
            parent, tag, text.value,
            languageID=text.language_id,
            languageLocaleID=text.language_locale_id,
        )

    def _add_code(self, parent: etree._Element, tag: str, code: Optional[UBLCode]) -> None:
        if code is None:
            return
        self._add_cbc(
            parent, tag, code.value,
            listID=code.list_id,
            listAgencyID=code.list_agency_id,
            listAgencyName=code.list_agency_name,
            listName=code.list_name,
            listVersionID=code.list_version_id,
            name=code.name,
            languageID=code.language_id,
            listURI=code.list_uri,
            listSchemeURI=code.list_scheme_uri,
        )

    def _add_amount(self, parent: etree._Element, tag: str, amount: Optional[UBLAmount]) -> None:
        if amount is None or amount.value is None:
            return
        self._add_cbc(
            parent, tag, format_decimal(amount.value),
            currencyID=amount.currency_id,
            currencyCodeListVersionID=amount.currency_code_list_version_id,
        )

    def _add_quantity(self, parent: etree._Element, tag: str, quantity: Optional[UBLQuantity]) -> None:
        if quantity is None or quantity.value is None:
            return
        self._add_cbc(
            parent, tag, format_decimal(quantity.value),
            unitCode=quantity.unit_code,
            unitCodeListID=quantity.unit_code_list_id,
            unitCodeListAgencyID=quantity.unit_code_list_agency_id,
            unitCodeListAgencyName=quantity.unit_code_list_agency_name,
        )

    # ------------------------------------------------------------------
    # Cabecera y referencias
    # ------------------------------------------------------------------

    def _add_header(self, root: etree._Element, document: UBLDocumentBase) -> None:
        self._add_cbc(root, "CustomizationID", document.customization_id)
        self._add_cbc(root, "ProfileID", document.profile_id)
        self._add_id(root, "ID", document.id)
        self._add_date(root, "IssueDate", document.issue_date)
        # Invoice-2: DueDate, tipo, Note, TaxPointDate
        # CreditNote-2: TaxPointDate, tipo, Note (sin DueDate)
        if isinstance(document, Invoice):
            self._add_date(root, "DueDate", document.due_date)
        else:
            self._add_date(root, "TaxPointDate", document.tax_point_date)
        self._add_code(root, document.TYPE_CODE_ELEMENT_NAME, document.type_code)
        for note in document.notes:
            self._add_text(root, "Note", note)
        if isinstance(document, Invoice):
            self._add_date(root, "TaxPointDate", document.tax_point_date)
        self._add_cbc(root, "DocumentCurrencyCode", document.document_currency_code)
        self._add_cbc(root, "TaxCurrencyCode", document.tax_currency_code)
        self._add_cbc(root, "AccountingCost", document.accounting_cost)
        self._add_cbc(root, "BuyerReference", document.buyer_reference)
        self._add_period(root, "InvoicePeriod", document.invoice_period)

        order = document.order_reference
        if order is not None:
            order_element = self._add_cac(root, "OrderReference")
            self._add_id(order_element, "ID", order.id)
            self._add_id(order_element, "SalesOrderID", order.sales_order_id)

    def _add_references(self, root: etree._Element, document: UBLDocumentBase) -> None:
        for reference in document.billing_references:
            billing = self._add_cac(root, "BillingReference")
            self._add_document_reference(billing, "InvoiceDocumentReference", reference)
        for reference in document.despatch_references:
            self._add_document_reference(root, "DespatchDocumentReference", reference)
        for reference in document.receipt_references:
            self._add_document_reference(root, "ReceiptDocumentReference", reference)

        if isinstance(document, CreditNote):
            # orden del esquema CreditNote-2
            self._add_references_of(root, "ContractDocumentReference", document.contract_references)
            self._add_references_of(root, "AdditionalDocumentReference", document.additional_references)
            self._add_references_of(root, "OriginatorDocumentReference", document.originator_references)
        else:
            self._add_references_of(root, "OriginatorDocumentReference", document.originator_references)
            self._add_references_of(root, "ContractDocumentReference", document.contract_references)
            self._add_references_of(root, "AdditionalDocumentReference", document.additional_references)

        for project in document.project_references:
            project_element = self._add_cac(root, "ProjectReference")
            self._add_id(project_element, "ID", project)

    def _add_references_of(self, parent: etree._Element, tag: str, references: List[DocumentReference]) -> None:
        for reference in references:
            self._add_document_reference(parent, tag, reference)

    def _add_document_reference(self, parent: etree._Element, tag: str, reference: DocumentReference) -> None:
        element = self._add_cac(parent, tag)
        self._add_id(element, "ID", reference.id)
        self._add_date(element, "IssueDate", reference.issue_date)
        self._add_code(element, "DocumentTypeCode", reference.document_type_code)
        for description in reference.descriptions:
            self._add_text(element, "DocumentDescription", description)

        attachment = reference.attachment
        if attachment is not None:
            attachment_element = self._add_cac(element, "Attachment")
            self._add_cbc(
                attachment_element, "EmbeddedDocumentBinaryObject", attachment.embedded_value,
                mimeCode=attachment.mime_code,
                filename=attachment.filename,
            )
            if attachment.external_uri is not None:
                external = self._add_cac(attachment_element, "ExternalReference")
                self._add_cbc(external, "URI", attachment.external_uri)

    def _add_period(self, parent: etree._Element, tag: str, period: Optional[Period]) -> None:
        if period is None:
            return
        element = self._add_cac(parent, tag)
        self._add_date(element, "StartDate", period.start_date)
        self._add_date(element, "EndDate", period.end_date)
        for code in period.description_codes:
            self._add_code(element, "DescriptionCode", code)

    # ------------------------------------------------------------------
    # Partes y entrega
    # ------------------------------------------------------------------

    def _add_parties(self, root: etree._Element, document: UBLDocumentBase) -> None:
        if document.supplier_party is not None:
            supplier = self._add_cac(root, "AccountingSupplierParty")
            self._add_party(supplier, "Party", document.supplier_party)
        if document.customer_party is not None:
            customer = self._add_cac(root, "AccountingCustomerParty")
            self._add_party(customer, "Party", document.customer_party)
        if document.payee_party is not None:
            self._add_party(root, "PayeeParty", document.payee_party)
        if document.tax_representative_party is not None:
            self._add_party(root, "TaxRepresentativeParty", document.tax_representative_party)

    def _add_party(self, parent: etree._Element, tag: str, party: Party) -> None:
        element = self._add_cac(parent, tag)
        self._add_id(element, "EndpointID", party.endpoint_id)
        for identification in party.identifications:
            identification_element = self._add_cac(element, "PartyIdentification")
            self._add_id(identification_element, "ID", identification)
        for name in party.party_names:
            name_element = self._add_cac(element, "PartyName")
            self._add_cbc(name_element, "Name", name)
        self._add_address(element, "PostalAddress", party.postal_address)

        for tax_scheme in party.tax_schemes:
            scheme_element = self._add_cac(element, "PartyTaxScheme")
            self._add_id(scheme_element, "CompanyID", tax_scheme.company_id)
            scheme = self._add_cac(scheme_element, "TaxScheme")
            self._add_cbc(scheme, "ID", tax_scheme.tax_scheme_id)

        for legal_entity in party.legal_entities:
            entity_element = self._add_cac(element, "PartyLegalEntity")
            self._add_cbc(entity_element, "RegistrationName", legal_entity.registration_name)
            self._add_id(entity_element, "CompanyID", legal_entity.company_id)
            for legal_form in legal_entity.company_legal_forms:
                self._add_cbc(entity_element, "CompanyLegalForm", legal_form)

        self._add_contact(element, party.contact)

    def _add_address(self, parent: etree._Element, tag: str, address: Optional[Address]) -> None:
        if address is None:
            return
        element = self._add_cac(parent, tag)
        self._add_cbc(element, "StreetName", address.street_name)
        self._add_cbc(element, "AdditionalStreetName", address.additional_street_name)
        self._add_cbc(element, "CityName", address.city_name)
        self._add_cbc(element, "PostalZone", address.postal_zone)
        self._add_cbc(element, "CountrySubentity", address.country_subentity)
        if address.address_line is not None:
            line = self._add_cac(element, "AddressLine")
            self._add_cbc(line, "Line", address.address_line)
        if address.country_code is not None:
            country = self._add_cac(element, "Country")
            self._add_cbc(country, "IdentificationCode", address.country_code)

    def _add_contact(self, parent: etree._Element, contact: Optional[Contact]) -> None:
        if contact is None:
            return
        element = self._add_cac(parent, "Contact")
        self._add_cbc(element, "Name", contact.name)
        self._add_cbc(element, "Telephone", contact.telephone)
        self._add_cbc(element, "ElectronicMail", contact.electronic_mail)

    def _add_delivery(self, root: etree._Element, delivery: Delivery) -> None:
        element = self._add_cac(root, "Delivery")
        self._add_date(element, "ActualDeliveryDate", delivery.actual_delivery_date)
        if delivery.location_id is not None or delivery.location_address is not None:
            location = self._add_cac(element, "DeliveryLocation")
            self._add_id(location, "ID", delivery.location_id)
            self._add_address(location, "Address", delivery.location_address)
        if delivery.party_name is not None:
            party = self._add_cac(element, "DeliveryParty")
            party_name = self._add_cac(party, "PartyName")
            self._add_cbc(party_name, "Name", delivery.party_name)

    # ------------------------------------------------------------------
    # Pago, cargos e impuestos
    # ------------------------------------------------------------------

    def _add_payment_means(self, root: etree._Element, payment_means: PaymentMeans) -> None:
        element = self._add_cac(root, "PaymentMeans")
        self._add_code(element, "PaymentMeansCode", payment_means.code)
        self._add_date(element, "PaymentDueDate", payment_means.payment_due_date)
        for payment_id in payment_means.payment_ids:
            self._add_cbc(element, "PaymentID", payment_id)

        card = payment_means.card_account
        if card is not None:
            card_element = self._add_cac(element, "CardAccount")
            self._add_id(card_element, "PrimaryAccountNumberID", card.primary_account_number_id)
            self._add_cbc(card_element, "NetworkID", card.network_id)
            self._add_cbc(card_element, "HolderName", card.holder_name)

        account = payment_means.payee_financial_account
        if account is not None:
            self._add_financial_account(element, "PayeeFinancialAccount", account)

        mandate = payment_means.payment_mandate
        if mandate is not None:
            mandate_element = self._add_cac(element, "PaymentMandate")
            self._add_id(mandate_element, "ID", mandate.id)
            if mandate.payer_financial_account is not None:
                self._add_financial_account(mandate_element, "PayerFinancialAccount", mandate.payer_financial_account)

    def _add_financial_account(self, parent: etree._Element, tag: str, account) -> None:
        element = self._add_cac(parent, tag)
        self._add_id(element, "ID", account.id)
        self._add_cbc(element, "Name", account.name)
        if account.branch_id is not None:
            branch = self._add_cac(element, "FinancialInstitutionBranch")
            self._add_id(branch, "ID", account.branch_id)

    def _add_allowance_charge(self, parent: etree._Element, allowance_charge: AllowanceCharge) -> None:
        element = self._add_cac(parent, "AllowanceCharge")
        self._add_cbc(element, "ChargeIndicator", "true" if allowance_charge.charge_indicator else "false")
        self._add_code(element, "AllowanceChargeReasonCode", allowance_charge.reason_code)
        for reason in allowance_charge.reasons:
            self._add_text(element, "AllowanceChargeReason", reason)
        self._add_decimal(element, "MultiplierFactorNumeric", allowance_charge.multiplier_factor)
        self._add_amount(element, "Amount", allowance_charge.amount)
        self._add_amount(element, "BaseAmount", allowance_charge.base_amount)
        for category in allowance_charge.tax_categories:
            self._add_tax_category(element, "TaxCategory", category)

    def _add_tax_category(self, parent: etree._Element, tag: str, category: TaxCategory) -> None:
        element = self._add_cac(parent, tag)
        self._add_code(element, "ID", category.id)
        self._add_decimal(element, "Percent", category.percent)
        self._add_code(element, "TaxExemptionReasonCode", category.exemption_reason_code)
        for reason in category.exemption_reasons:
            self._add_text(element, "TaxExemptionReason", reason)
        scheme = self._add_cac(element, "TaxScheme")
        self._add_cbc(scheme, "ID", category.tax_scheme_id)

    def _add_tax_total(self, root: etree._Element, tax_total: TaxTotal) -> None:
        element = self._add_cac(root, "TaxTotal")
        self._add_amount(element, "TaxAmount", tax_total.tax_amount)
        for subtotal in tax_total.subtotals:
            subtotal_element = self._add_cac(element, "TaxSubtotal")
            self._add_amount(subtotal_element, "TaxableAmount", subtotal.taxable_amount)
            self._add_amount(subtotal_element, "TaxAmount", subtotal.tax_amount)
            if subtotal.tax_category is not None:
                self._add_tax_category(subtotal_element, "TaxCategory", subtotal.tax_category)

    def _add_monetary_total(self, root: etree._Element, total: Optional[MonetaryTotal]) -> None:
        if total is None:
            return
        element = self._add_cac(root, "LegalMonetaryTotal")
        self._add_amount(element, "LineExtensionAmount", total.line_extension_amount)
        self._add_amount(element, "TaxExclusiveAmount", total.tax_exclusive_amount)
        self._add_amount(element, "TaxInclusiveAmount", total.tax_inclusive_amount)
        self._add_amount(element, "AllowanceTotalAmount", total.allowance_total_amount)
        self._add_amount(element, "ChargeTotalAmount", total.charge_total_amount)
        self._add_amount(element, "PrepaidAmount", total.prepaid_amount)
        self._add_amount(element, "PayableRoundingAmount", total.payable_rounding_amount)
        self._add_amount(element, "PayableAmount", total.payable_amount)

    # ------------------------------------------------------------------
    # Líneas
    # ------------------------------------------------------------------

    def _add_line(self, root: etree._Element, line: DocumentLineBase) -> None:
        element = self._add_cac(root, line.ELEMENT_NAME)
        self._add_id(element, "ID", line.id)
        for note in line.notes:
            self._add_text(element, "Note", note)
        self._add_quantity(element, line.QUANTITY_ELEMENT_NAME, line.quantity)
        self._add_amount(element, "LineExtensionAmount", line.line_extension_amount)
        self._add_cbc(element, "AccountingCost", line.accounting_cost)
        self._add_period(element, "InvoicePeriod", line.invoice_period)
        if line.order_line_reference_id is not None:
            order_line = self._add_cac(element, "OrderLineReference")
            self._add_id(order_line, "LineID", line.order_line_reference_id)
        self._add_references_of(element, "DocumentReference", line.document_references)
        for allowance_charge in line.allowance_charges:
            self._add_allowance_charge(element, allowance_charge)
        if line.item is not None:
            self._add_item(element, line.item)
        if line.price is not None:
            self._add_price(element, line.price)

    def _add_item(self, parent: etree._Element, item: Item) -> None:
        element = self._add_cac(parent, "Item")
        for description in item.descriptions:
            self._add_text(element, "Description", description)
        self._add_text(element, "Name", item.name)

        for tag, identifier in (
            ("BuyersItemIdentification", item.buyers_item_id),
            ("SellersItemIdentification", item.sellers_item_id),
            ("StandardItemIdentification", item.standard_item_id),
        ):
            if identifier is not None:
                identification = self._add_cac(element, tag)
                self._add_id(identification, "ID", identifier)

        if item.origin_country is not None:
            country = self._add_cac(element, "OriginCountry")
            self._add_cbc(country, "IdentificationCode", item.origin_country.identification_code)
            self._add_text(country, "Name", item.origin_country.name)

        for classification in item.commodity_classifications:
            classification_element = self._add_cac(element, "CommodityClassification")
            self._add_code(classification_element, "ItemClassificationCode", classification)

        for category in item.classified_tax_categories:
            self._add_tax_category(element, "ClassifiedTaxCategory", category)

        for prop in item.additional_properties:
            prop_element = self._add_cac(element, "AdditionalItemProperty")
            self._add_text(prop_element, "Name", prop.name)
            self._add_text(prop_element, "Value", prop.value)

    def _add_price(self, parent: etree._Element, price: Price) -> None:
        element = self._add_cac(parent, "Price")
        self._add_amount(element, "PriceAmount", price.price_amount)
        self._add_quantity(element, "BaseQuantity", price.base_quantity)
        for allowance_charge in price.allowance_charges:
            self._add_allowance_charge(element, allowance_charge)
