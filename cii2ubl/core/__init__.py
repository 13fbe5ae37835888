# cii2ubl/core/__init__.py

"""
Módulo core - Configuración, utilidades XML, lector CII y escritor UBL.
"""
from cii2ubl.core.xml_utils import (
    safe_parse_xml,
    get_nodes,
    get_node,
    safe_decimal,
    CII_NAMESPACES,
    UBL_NAMESPACES,
)
from cii2ubl.core.config import (
    ConversionSettings,
    CreationMode,
    Settings,
    UBLVersion,
    load_config,
)
from cii2ubl.core.cii_reader import CIIReader
from cii2ubl.core.ubl_writer import UBLWriter

__all__ = [
    # XML utilities
    'safe_parse_xml',
    'get_nodes',
    'get_node',
    'safe_decimal',
    'CII_NAMESPACES',
    'UBL_NAMESPACES',

    # Config
    'ConversionSettings',
    'CreationMode',
    'Settings',
    'UBLVersion',
    'load_config',

    # Lectura / escritura
    'CIIReader',
    'UBLWriter',
]
