# cii2ubl/models/__init__.py

"""
Modelos de datos: documento fuente CII, documento destino UBL y diagnósticos.
"""
from cii2ubl.models.diagnostics import (
    ErrorLevel,
    Diagnostic,
    DiagnosticList,
    ConversionResult,
    StructuralError,
)
from cii2ubl.models.ubl_types import DocumentKind, Invoice, CreditNote, InvoiceLine, CreditNoteLine
from cii2ubl.models.cii_types import CrossIndustryInvoice

__all__ = [
    # Diagnósticos
    'ErrorLevel',
    'Diagnostic',
    'DiagnosticList',
    'ConversionResult',
    'StructuralError',

    # Destino
    'DocumentKind',
    'Invoice',
    'CreditNote',
    'InvoiceLine',
    'CreditNoteLine',

    # Fuente
    'CrossIndustryInvoice',
]
