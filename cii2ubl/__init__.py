# cii2ubl/__init__.py

"""
Conversión de facturas CII (UN/CEFACT CrossIndustryInvoice) a UBL 2.x
(Invoice / CreditNote) según EN16931.
"""
from cii2ubl.core.config import ConversionSettings, CreationMode, UBLVersion
from cii2ubl.facade.converter_facade import CIIToUBLConverter
from cii2ubl.models.diagnostics import ConversionResult, ErrorLevel

__version__ = "1.0.0"

__all__ = [
    'CIIToUBLConverter',
    'ConversionSettings',
    'ConversionResult',
    'CreationMode',
    'ErrorLevel',
    'UBLVersion',
]
