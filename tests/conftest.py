"""
Configuración central de pytest y fixtures compartidas para todos los tests.

Proporciona:
- Configuración de conversión por defecto y por versión UBL
- Lista de diagnósticos vacía
- Constructores de documentos CII mínimos
"""
from decimal import Decimal

import pytest

from cii2ubl.core.config import ConversionSettings, UBLVersion
from cii2ubl.facade.converter_facade import CIIToUBLConverter
from cii2ubl.models import cii_types as cii
from cii2ubl.models.diagnostics import DiagnosticList


# ==================== HELPERS ====================

def amount(value: str, currency: str = None) -> cii.CIIAmount:
    return cii.CIIAmount(value=Decimal(value), currency_id=currency)


def build_cii(type_code: str = "380", settlement: cii.HeaderTradeSettlement = None,
              agreement: cii.HeaderTradeAgreement = None, delivery: cii.HeaderTradeDelivery = None,
              line_items=None) -> cii.CrossIndustryInvoice:
    """Documento CII con las tres subestructuras obligatorias."""
    return cii.CrossIndustryInvoice(
        context=cii.ExchangedDocumentContext(),
        exchanged_document=cii.ExchangedDocument(
            id=cii.CIIIdentifier(value="INV-1"),
            type_code=cii.CIICode(value=type_code) if type_code is not None else None,
            issue_date_time=cii.CIIDateTime(value="20240115", format="102"),
        ),
        transaction=cii.SupplyChainTradeTransaction(
            line_items=list(line_items or []),
            agreement=agreement or cii.HeaderTradeAgreement(),
            delivery=delivery or cii.HeaderTradeDelivery(),
            settlement=settlement or cii.HeaderTradeSettlement(invoice_currency_code="EUR"),
        ),
    )


# ==================== FIXTURES GLOBALES ====================

@pytest.fixture
def settings():
    """Configuración por defecto (UBL 2.1, modo automático)."""
    return ConversionSettings()


@pytest.fixture
def settings_v23():
    """Configuración con destino UBL 2.3."""
    return ConversionSettings(ubl_version=UBLVersion.V2_3)


@pytest.fixture
def diagnostics():
    """Lista de diagnósticos vacía."""
    return DiagnosticList()


@pytest.fixture
def converter():
    return CIIToUBLConverter()


@pytest.fixture
def minimal_cii():
    """CII mínimo: solo las subestructuras obligatorias, sin código de tipo."""
    return cii.CrossIndustryInvoice(
        transaction=cii.SupplyChainTradeTransaction(
            agreement=cii.HeaderTradeAgreement(),
            delivery=cii.HeaderTradeDelivery(),
            settlement=cii.HeaderTradeSettlement(),
        ),
    )


@pytest.fixture
def seller():
    """Vendedor con identificadores, registro fiscal, contacto y dirección."""
    return cii.TradeParty(
        ids=[cii.CIIIdentifier(value="LOCAL-1")],
        global_ids=[cii.CIIIdentifier(value="4000001123452", scheme_id="0088")],
        name=cii.CIIText(value="Seller GmbH"),
        descriptions=[cii.CIIText(value="Limited company")],
        legal_organization=cii.LegalOrganization(
            id=cii.CIIIdentifier(value="HRB 1234", scheme_id="0002"),
            trading_business_name=cii.CIIText(value="Seller Trading"),
        ),
        contacts=[cii.TradeContact(
            person_name=cii.CIIText(value="Jane Doe"),
            telephone="+49 30 1234",
            email="jane@seller.example",
        )],
        postal_address=cii.TradeAddress(
            postcode="10115",
            line_one="Main Street 1",
            city_name="Berlin",
            country_id="DE",
        ),
        uri_communications=[cii.CIIIdentifier(value="jane@seller.example", scheme_id="EM")],
        tax_registrations=[cii.TaxRegistration(id=cii.CIIIdentifier(value="DE123456789", scheme_id="VA"))],
    )
