"""
Tests para el lector CII y el escritor UBL (lxml), incluida una conversión
completa desde XML.
"""
from datetime import date
from decimal import Decimal
from io import BytesIO

from lxml import etree

from cii2ubl.core.cii_reader import CIIReader
from cii2ubl.core.config import ConversionSettings, CreationMode
from cii2ubl.core.ubl_writer import UBLWriter
from cii2ubl.core.xml_utils import UBL_NAMESPACES
from cii2ubl.mapping.indicator import parse_indicator, TriState
from cii2ubl.models.ubl_types import CreditNote, Invoice

SAMPLE_CII = b"""<?xml version="1.0" encoding="UTF-8"?>
<rsm:CrossIndustryInvoice
    xmlns:rsm="urn:un:unece:uncefact:data:standard:CrossIndustryInvoice:100"
    xmlns:ram="urn:un:unece:uncefact:data:standard:ReusableAggregateBusinessInformationEntity:100"
    xmlns:udt="urn:un:unece:uncefact:data:standard:UnqualifiedDataType:100"
    xmlns:qdt="urn:un:unece:uncefact:data:standard:QualifiedDataType:100">
  <rsm:ExchangedDocumentContext>
    <ram:GuidelineSpecifiedDocumentContextParameter>
      <ram:ID>urn:cen.eu:en16931:2017</ram:ID>
    </ram:GuidelineSpecifiedDocumentContextParameter>
  </rsm:ExchangedDocumentContext>
  <rsm:ExchangedDocument>
    <ram:ID>471102</ram:ID>
    <ram:TypeCode>380</ram:TypeCode>
    <ram:IssueDateTime>
      <udt:DateTimeString format="102">20240305</udt:DateTimeString>
    </ram:IssueDateTime>
    <ram:IncludedNote>
      <ram:Content>Invoice note</ram:Content>
      <ram:SubjectCode>AAI</ram:SubjectCode>
    </ram:IncludedNote>
  </rsm:ExchangedDocument>
  <rsm:SupplyChainTradeTransaction>
    <ram:IncludedSupplyChainTradeLineItem>
      <ram:AssociatedDocumentLineDocument>
        <ram:LineID>1</ram:LineID>
      </ram:AssociatedDocumentLineDocument>
      <ram:SpecifiedTradeProduct>
        <ram:GlobalID schemeID="0160">4012345001235</ram:GlobalID>
        <ram:Name>Trennbl\xc3\xa4tter A4</ram:Name>
      </ram:SpecifiedTradeProduct>
      <ram:SpecifiedLineTradeAgreement>
        <ram:NetPriceProductTradePrice>
          <ram:ChargeAmount>9.90</ram:ChargeAmount>
        </ram:NetPriceProductTradePrice>
      </ram:SpecifiedLineTradeAgreement>
      <ram:SpecifiedLineTradeDelivery>
        <ram:BilledQuantity unitCode="H87">20.0000</ram:BilledQuantity>
      </ram:SpecifiedLineTradeDelivery>
      <ram:SpecifiedLineTradeSettlement>
        <ram:ApplicableTradeTax>
          <ram:TypeCode>VAT</ram:TypeCode>
          <ram:CategoryCode>S</ram:CategoryCode>
          <ram:RateApplicablePercent>19.00</ram:RateApplicablePercent>
        </ram:ApplicableTradeTax>
        <ram:SpecifiedTradeSettlementLineMonetarySummation>
          <ram:LineTotalAmount>198.00</ram:LineTotalAmount>
        </ram:SpecifiedTradeSettlementLineMonetarySummation>
      </ram:SpecifiedLineTradeSettlement>
    </ram:IncludedSupplyChainTradeLineItem>
    <ram:ApplicableHeaderTradeAgreement>
      <ram:BuyerReference>04011000-12345-34</ram:BuyerReference>
      <ram:SellerTradeParty>
        <ram:GlobalID schemeID="0088">4000001123452</ram:GlobalID>
        <ram:Name>Lieferant GmbH</ram:Name>
        <ram:PostalTradeAddress>
          <ram:PostcodeCode>80333</ram:PostcodeCode>
          <ram:LineOne>Lieferantenstra\xc3\x9fe 20</ram:LineOne>
          <ram:CityName>M\xc3\xbcnchen</ram:CityName>
          <ram:CountryID>DE</ram:CountryID>
        </ram:PostalTradeAddress>
        <ram:SpecifiedTaxRegistration>
          <ram:ID schemeID="VA">DE123456789</ram:ID>
        </ram:SpecifiedTaxRegistration>
      </ram:SellerTradeParty>
      <ram:BuyerTradeParty>
        <ram:ID>GE2020211</ram:ID>
        <ram:Name>Kunden AG Mitte</ram:Name>
      </ram:BuyerTradeParty>
    </ram:ApplicableHeaderTradeAgreement>
    <ram:ApplicableHeaderTradeDelivery>
      <ram:ActualDeliverySupplyChainEvent>
        <ram:OccurrenceDateTime>
          <udt:DateTimeString format="102">20240304</udt:DateTimeString>
        </ram:OccurrenceDateTime>
      </ram:ActualDeliverySupplyChainEvent>
    </ram:ApplicableHeaderTradeDelivery>
    <ram:ApplicableHeaderTradeSettlement>
      <ram:InvoiceCurrencyCode>EUR</ram:InvoiceCurrencyCode>
      <ram:SpecifiedTradeSettlementPaymentMeans>
        <ram:TypeCode>58</ram:TypeCode>
        <ram:PayeePartyCreditorFinancialAccount>
          <ram:IBANID>DE02120300000000202051</ram:IBANID>
        </ram:PayeePartyCreditorFinancialAccount>
      </ram:SpecifiedTradeSettlementPaymentMeans>
      <ram:ApplicableTradeTax>
        <ram:CalculatedAmount>37.62</ram:CalculatedAmount>
        <ram:TypeCode>VAT</ram:TypeCode>
        <ram:BasisAmount>198.00</ram:BasisAmount>
        <ram:CategoryCode>S</ram:CategoryCode>
        <ram:RateApplicablePercent>19.00</ram:RateApplicablePercent>
      </ram:ApplicableTradeTax>
      <ram:SpecifiedTradeAllowanceCharge>
        <ram:ChargeIndicator>
          <udt:Indicator>false</udt:Indicator>
        </ram:ChargeIndicator>
        <ram:ActualAmount>0.00</ram:ActualAmount>
        <ram:Reason>Rabatt</ram:Reason>
      </ram:SpecifiedTradeAllowanceCharge>
      <ram:SpecifiedTradePaymentTerms>
        <ram:Description>Zahlbar innerhalb 30 Tagen netto</ram:Description>
        <ram:DueDateDateTime>
          <udt:DateTimeString format="102">20240404</udt:DateTimeString>
        </ram:DueDateDateTime>
      </ram:SpecifiedTradePaymentTerms>
      <ram:SpecifiedTradeSettlementHeaderMonetarySummation>
        <ram:LineTotalAmount>198.00</ram:LineTotalAmount>
        <ram:TaxBasisTotalAmount>198.00</ram:TaxBasisTotalAmount>
        <ram:TaxTotalAmount currencyID="EUR">37.62</ram:TaxTotalAmount>
        <ram:RoundingAmount>0.00</ram:RoundingAmount>
        <ram:GrandTotalAmount>235.62</ram:GrandTotalAmount>
        <ram:DuePayableAmount>235.62</ram:DuePayableAmount>
      </ram:SpecifiedTradeSettlementHeaderMonetarySummation>
    </ram:ApplicableHeaderTradeSettlement>
  </rsm:SupplyChainTradeTransaction>
</rsm:CrossIndustryInvoice>
"""

UBL_INVOICE_NS = "urn:oasis:names:specification:ubl:schema:xsd:Invoice-2"
UBL_CREDIT_NOTE_NS = "urn:oasis:names:specification:ubl:schema:xsd:CreditNote-2"
NS = dict(UBL_NAMESPACES, inv=UBL_INVOICE_NS, cn=UBL_CREDIT_NOTE_NS)


class TestCIIReader:
    """Tests para CIIReader"""

    def test_parse_bytes(self, diagnostics):
        """Test: lectura de los bloques principales"""
        source = CIIReader().parse_from_bytes(SAMPLE_CII, diagnostics)
        assert len(diagnostics) == 0
        assert source.exchanged_document.id.value == "471102"
        assert source.exchanged_document.issue_date_time.format == "102"
        assert source.exchanged_document.notes[0].subject_code == "AAI"
        assert source.context.guideline_ids[0].value == "urn:cen.eu:en16931:2017"

        transaction = source.transaction
        seller = transaction.agreement.seller
        assert seller.global_ids[0].scheme_id == "0088"
        assert seller.postal_address.city_name == "München"
        assert seller.tax_registrations[0].id.scheme_id == "VA"

        settlement = transaction.settlement
        assert settlement.invoice_currency_code == "EUR"
        assert settlement.payment_means[0].payee_creditor_account.iban_id.value == "DE02120300000000202051"
        assert settlement.monetary_summation.tax_total_amounts[0].currency_id == "EUR"
        assert settlement.monetary_summation.grand_total_amounts[0].value == Decimal("235.62")

        line = transaction.line_items[0]
        assert line.delivery.billed_quantity.unit_code == "H87"
        assert line.settlement.trade_taxes[0].rate_applicable_percent == Decimal("19.00")

    def test_indicator_is_read(self, diagnostics):
        """Test: ChargeIndicator se lee como booleano"""
        source = CIIReader().parse_from_bytes(SAMPLE_CII, diagnostics)
        indicator = source.transaction.settlement.allowance_charges[0].charge_indicator
        assert indicator.indicator is False
        assert parse_indicator(indicator, diagnostics) is TriState.FALSE

    def test_parse_file_object_and_path(self, diagnostics, tmp_path):
        """Test: lectura desde objeto archivo y desde ruta"""
        reader = CIIReader()
        assert reader.parse_from_file(BytesIO(SAMPLE_CII), diagnostics) is not None
        xml_path = tmp_path / "invoice.xml"
        xml_path.write_bytes(SAMPLE_CII)
        assert reader.parse_from_path(xml_path, diagnostics).exchanged_document.id.value == "471102"
        assert len(diagnostics) == 0

    def test_malformed_xml(self, diagnostics):
        """Test: XML mal formado devuelve None con error"""
        assert CIIReader().parse_from_bytes(b"<rsm:CrossIndustryInvoice", diagnostics) is None
        assert diagnostics.has_errors()

    def test_not_cii_root(self, diagnostics):
        """Test: raíz distinta de CrossIndustryInvoice"""
        assert CIIReader().parse_from_bytes(b"<Invoice/>", diagnostics) is None
        assert len(diagnostics.errors) == 1


class TestEndToEnd:
    """Tests de conversión completa XML -> XML"""

    def test_convert_file_and_write(self, converter):
        """Test: la factura de ejemplo se convierte y serializa"""
        result = converter.convert_file(SAMPLE_CII)
        assert not result.has_errors
        document = result.document
        assert isinstance(document, Invoice)
        assert document.issue_date == date(2024, 3, 5)
        assert document.due_date == date(2024, 4, 4)
        assert document.legal_monetary_total.payable_rounding_amount is None

        root = etree.fromstring(UBLWriter().to_bytes(document))
        assert root.tag == f"{{{UBL_INVOICE_NS}}}Invoice"
        assert root.findtext("cbc:ID", namespaces=NS) == "471102"
        assert root.findtext("cbc:IssueDate", namespaces=NS) == "2024-03-05"
        assert root.findtext("cbc:DueDate", namespaces=NS) == "2024-04-04"
        assert root.findtext("cbc:InvoiceTypeCode", namespaces=NS) == "380"
        assert root.findtext("cbc:Note", namespaces=NS) == "#AAI#Invoice note"
        assert root.findtext("cbc:BuyerReference", namespaces=NS) == "04011000-12345-34"

        supplier = root.find("cac:AccountingSupplierParty/cac:Party", namespaces=NS)
        assert supplier.findtext("cac:PartyIdentification/cbc:ID", namespaces=NS) == "4000001123452"
        assert supplier.find("cac:PartyIdentification/cbc:ID", namespaces=NS).get("schemeID") == "0088"
        assert supplier.findtext("cac:PartyTaxScheme/cac:TaxScheme/cbc:ID", namespaces=NS) == "VAT"
        assert supplier.findtext("cac:PartyLegalEntity/cbc:RegistrationName", namespaces=NS) == "Lieferant GmbH"

        payable = root.find("cac:LegalMonetaryTotal/cbc:PayableAmount", namespaces=NS)
        assert payable.text == "235.62"
        assert payable.get("currencyID") == "EUR"
        assert root.find("cac:LegalMonetaryTotal/cbc:PayableRoundingAmount", namespaces=NS) is None

        iban = root.findtext("cac:PaymentMeans/cac:PayeeFinancialAccount/cbc:ID", namespaces=NS)
        assert iban == "DE02120300000000202051"

        line = root.find("cac:InvoiceLine", namespaces=NS)
        quantity = line.find("cbc:InvoicedQuantity", namespaces=NS)
        assert quantity.text == "20"
        assert quantity.get("unitCode") == "H87"
        assert line.findtext("cac:Price/cbc:PriceAmount", namespaces=NS) == "9.9"
        assert line.findtext("cac:Item/cac:ClassifiedTaxCategory/cbc:Percent", namespaces=NS) == "19"

    def test_element_order(self, converter):
        """Test: los bloques de cabecera siguen el orden del esquema"""
        document = converter.convert_file(SAMPLE_CII).document
        root = UBLWriter().to_element(document)
        names = [etree.QName(child).localname for child in root]
        ordered = ["CustomizationID", "ID", "IssueDate", "DueDate", "InvoiceTypeCode",
                   "AccountingSupplierParty", "AccountingCustomerParty", "Delivery", "PaymentMeans",
                   "PaymentTerms", "AllowanceCharge", "TaxTotal", "LegalMonetaryTotal", "InvoiceLine"]
        positions = [names.index(name) for name in ordered]
        assert positions == sorted(positions)

    def test_credit_note_output(self, converter):
        """Test: nota crédito sin DueDate y con CreditedQuantity"""
        settings = ConversionSettings(creation_mode=CreationMode.CREDIT_NOTE)
        document = converter.convert_file(SAMPLE_CII, settings).document
        assert isinstance(document, CreditNote)

        root = etree.fromstring(UBLWriter().to_bytes(document))
        assert root.tag == f"{{{UBL_CREDIT_NOTE_NS}}}CreditNote"
        assert root.find("cbc:DueDate", namespaces=NS) is None
        assert root.findtext("cbc:CreditNoteTypeCode", namespaces=NS) == "380"
        assert root.findtext("cac:PaymentMeans/cbc:PaymentDueDate", namespaces=NS) == "2024-04-04"
        assert root.find("cac:CreditNoteLine/cbc:CreditedQuantity", namespaces=NS) is not None

    def test_tax_point_date_position(self, converter):
        """Test: TaxPointDate antes del tipo en CreditNote y después de Note en Invoice"""
        def header_order(document):
            document.tax_point_date = date(2024, 3, 1)
            root = etree.fromstring(UBLWriter().to_bytes(document))
            return [etree.QName(child).localname for child in root]

        credit_note = converter.convert_file(
            SAMPLE_CII, ConversionSettings(creation_mode=CreationMode.CREDIT_NOTE)).document
        order = header_order(credit_note)
        assert order.index("IssueDate") < order.index("TaxPointDate") < order.index("CreditNoteTypeCode")
        assert order.index("CreditNoteTypeCode") < order.index("Note")

        invoice = converter.convert_file(SAMPLE_CII).document
        order = header_order(invoice)
        assert order.index("InvoiceTypeCode") < order.index("Note") < order.index("TaxPointDate")
        assert order.index("TaxPointDate") < order.index("DocumentCurrencyCode")

    def test_write_to_disk(self, converter, tmp_path):
        """Test: escritura del archivo de salida"""
        document = converter.convert_file(SAMPLE_CII).document
        target = UBLWriter().write(document, tmp_path / "out" / "invoice-ubl.xml")
        assert target.exists()
        assert etree.parse(str(target)).getroot().tag == f"{{{UBL_INVOICE_NS}}}Invoice"

    def test_convert_file_with_malformed_xml(self, converter):
        """Test: XML inválido no genera documento"""
        result = converter.convert_file(b"not xml")
        assert result.document is None
        assert result.has_errors
