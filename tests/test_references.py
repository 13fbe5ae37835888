"""
Tests para referencias a documentos, referencia de pedido y períodos.
"""
from datetime import date

import pytest

from cii2ubl.core.config import ConversionSettings
from cii2ubl.mapping.references import (
    convert_document_reference,
    convert_period,
    create_order_reference,
    is_originator_reference,
    map_due_date_type_code,
)
from cii2ubl.models.cii_types import (
    BinaryObject,
    CIICode,
    CIIDateTime,
    CIIIdentifier,
    CIIText,
    HeaderTradeAgreement,
    ReferencedDocument,
    SpecifiedPeriod,
)


def reference(ref_id="DOC-1", type_code=None, **kwargs):
    return ReferencedDocument(
        issuer_assigned_id=CIIIdentifier(value=ref_id) if ref_id is not None else None,
        type_code=CIICode(value=type_code) if type_code is not None else None,
        **kwargs
    )


class TestDocumentReference:
    """Tests para convert_document_reference"""

    def test_full_reference(self, diagnostics):
        """Test: referencia con fecha, descripción, adjunto y URI"""
        source = reference(
            "DOC-1", "916",
            reference_type_code=CIICode(value="AAA"),
            names=[CIIText(value="Timesheet")],
            formatted_issue_date=CIIDateTime(value="20240110", format="102"),
            attachment=BinaryObject(value="aGVsbG8=", mime_code="application/pdf", filename="ts.pdf"),
            uri_id=CIIIdentifier(value="https://example.com/ts.pdf"),
        )
        result = convert_document_reference(source, diagnostics)
        assert result.id.value == "DOC-1"
        assert result.id.scheme_id == "AAA"
        assert result.document_type_code.value == "916"
        assert result.issue_date == date(2024, 1, 10)
        assert result.descriptions[0].value == "Timesheet"
        assert result.attachment.embedded_value == "aGVsbG8="
        assert result.attachment.mime_code == "application/pdf"
        assert result.attachment.external_uri == "https://example.com/ts.pdf"

    def test_invalid_type_code_is_dropped(self, diagnostics):
        """Test: DocumentTypeCode fuera de 50/130/916 no se copia"""
        assert convert_document_reference(reference(type_code="380"), diagnostics).document_type_code is None
        assert convert_document_reference(reference(type_code="130"), diagnostics).document_type_code.value == "130"

    def test_without_id(self, diagnostics):
        """Test: sin IssuerAssignedID no hay referencia"""
        assert convert_document_reference(reference(None), diagnostics) is None
        assert convert_document_reference(None, diagnostics) is None

    def test_originator(self):
        """Test: TypeCode 50 identifica la referencia de licitación"""
        assert is_originator_reference(reference(type_code="50"))
        assert not is_originator_reference(reference(type_code="130"))
        assert not is_originator_reference(reference())


class TestOrderReference:
    """Tests para create_order_reference"""

    def test_buyer_and_seller_order(self, settings):
        """Test: pedido del comprador y del vendedor"""
        agreement = HeaderTradeAgreement(
            buyer_order_reference=reference("PO-1"),
            seller_order_reference=reference("SO-1"),
        )
        result = create_order_reference(agreement, settings)
        assert result.id.value == "PO-1"
        assert result.sales_order_id.value == "SO-1"

    def test_default_order_id(self, settings):
        """Test: solo pedido del vendedor usa el ID por defecto "NA" """
        result = create_order_reference(HeaderTradeAgreement(seller_order_reference=reference("SO-1")), settings)
        assert result.id.value == "NA"
        assert result.sales_order_id.value == "SO-1"

    def test_configured_default_order_id(self):
        """Test: el ID por defecto es configurable"""
        settings = ConversionSettings(default_order_ref_id="UNKNOWN")
        result = create_order_reference(HeaderTradeAgreement(seller_order_reference=reference("SO-1")), settings)
        assert result.id.value == "UNKNOWN"

    def test_no_order(self, settings):
        """Test: sin pedidos no hay referencia"""
        assert create_order_reference(HeaderTradeAgreement(), settings) is None


class TestPeriod:
    """Tests para períodos y DueDateTypeCode"""

    @pytest.mark.parametrize("code, expected", [
        ("5", "3"),
        ("29", "35"),
        ("72", "432"),
        ("99", "99"),
        (None, None),
    ])
    def test_due_date_type_code_mapping(self, code, expected):
        """Test: remapeo de DueDateTypeCode a DescriptionCode"""
        assert map_due_date_type_code(code) == expected

    def test_period_with_description(self, diagnostics):
        """Test: período con fechas y código de descripción"""
        source = SpecifiedPeriod(start=CIIDateTime(value="20240101"), end=CIIDateTime(value="20240131"))
        result = convert_period(source, diagnostics, "35")
        assert result.start_date == date(2024, 1, 1)
        assert result.end_date == date(2024, 1, 31)
        assert result.description_codes[0].value == "35"

    def test_empty_period(self, diagnostics):
        """Test: período sin datos no se emite"""
        assert convert_period(SpecifiedPeriod(), diagnostics) is None
        assert convert_period(None, diagnostics) is None
