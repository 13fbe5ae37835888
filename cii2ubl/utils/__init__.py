# cii2ubl/utils/__init__.py

"""
Utilidades generales: logging y helpers de texto/decimales.
"""
from cii2ubl.utils.logger import configure_logging, get_logger, logger
from cii2ubl.utils.text import has_text, first_non_empty, strip_trailing_zeros

__all__ = [
    'configure_logging',
    'get_logger',
    'logger',
    'has_text',
    'first_non_empty',
    'strip_trailing_zeros',
]
