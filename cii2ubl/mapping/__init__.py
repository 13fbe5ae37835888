# cii2ubl/mapping/__init__.py

"""
Módulo mapping - Reglas de conversión de cada bloque CII a su equivalente UBL.
"""
from cii2ubl.mapping.document_type import classify_document, resolve_document_kind
from cii2ubl.mapping.lines import convert_line
from cii2ubl.mapping.payment_means import convert_payment_means
from cii2ubl.mapping.sign_normalizer import swap_quantity_and_price_if_needed

__all__ = [
    'classify_document',
    'resolve_document_kind',
    'convert_line',
    'convert_payment_means',
    'swap_quantity_and_price_if_needed',
]
