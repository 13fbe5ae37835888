# cii2ubl/facade/__init__.py
"""
Módulo facade - Punto de entrada unificado para la conversión CII -> UBL.
"""
from cii2ubl.facade.converter_facade import CIIToUBLConverter

__all__ = [
    'CIIToUBLConverter',
]
