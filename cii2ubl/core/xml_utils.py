"""
Utilidades para manejo de XML CII (lectura) y UBL 2.x (escritura).
"""
from decimal import Decimal, InvalidOperation
from typing import Optional, List, Dict, Any
from pathlib import Path
from lxml import etree

from cii2ubl.utils.logger import logger


# Namespaces CII D16B
CII_NAMESPACES = {
    'rsm': 'urn:un:unece:uncefact:data:standard:CrossIndustryInvoice:100',
    'ram': 'urn:un:unece:uncefact:data:standard:ReusableAggregateBusinessInformationEntity:100',
    'udt': 'urn:un:unece:uncefact:data:standard:UnqualifiedDataType:100',
    'qdt': 'urn:un:unece:uncefact:data:standard:QualifiedDataType:100',
}

# Namespaces UBL 2.x (iguales para 2.1 a 2.4)
UBL_NAMESPACES = {
    'cbc': 'urn:oasis:names:specification:ubl:schema:xsd:CommonBasicComponents-2',
    'cac': 'urn:oasis:names:specification:ubl:schema:xsd:CommonAggregateComponents-2',
}

UBL_DOCUMENT_NAMESPACES = {
    'Invoice': 'urn:oasis:names:specification:ubl:schema:xsd:Invoice-2',
    'CreditNote': 'urn:oasis:names:specification:ubl:schema:xsd:CreditNote-2',
}


def get_nodes(element: etree._Element, xpath: str, namespaces: Optional[Dict[str, str]] = None) -> List[etree._Element]:
    """
    Obtiene lista de nodos usando XPath de manera segura.

    Args:
        element: Elemento XML base
        xpath: Expresión XPath
        namespaces: Namespaces a usar (por defecto CII_NAMESPACES)

    Returns:
        Lista de elementos encontrados
    """
    if namespaces is None:
        namespaces = CII_NAMESPACES

    try:
        nodes = element.xpath(xpath, namespaces=namespaces)
        return [node for node in nodes if isinstance(node, etree._Element)]
    except etree.XPathError as e:
        logger.warning(f"Error obteniendo nodos con XPath '{xpath}': {e}")
        return []


def get_node(element: etree._Element, xpath: str, namespaces: Optional[Dict[str, str]] = None) -> Optional[etree._Element]:
    """Primer nodo que cumple el XPath, o None."""
    nodes = get_nodes(element, xpath, namespaces)
    return nodes[0] if nodes else None


def get_attribute(element: etree._Element, attr_name: str) -> Optional[str]:
    """
    Obtiene un atributo de un elemento de manera segura.

    Returns:
        Valor del atributo o None si no existe
    """
    value = element.get(attr_name)
    if value is None:
        return None
    return value.strip()


def element_text(element: Optional[etree._Element]) -> Optional[str]:
    """Texto de un elemento sin espacios exteriores; None si no hay elemento."""
    if element is None:
        return None
    return (element.text or "").strip()


def safe_decimal(value: Any, default: Optional[Decimal] = None) -> Optional[Decimal]:
    """
    Convierte un valor a Decimal de manera segura.

    Args:
        value: Valor a convertir
        default: Valor por defecto si falla la conversión

    Returns:
        Decimal del valor o valor por defecto
    """
    if value is None:
        return default

    try:
        if isinstance(value, Decimal):
            return value

        if isinstance(value, str):
            cleaned = value.strip()
            if not cleaned:
                return default
            result = Decimal(cleaned)
            # NaN e infinitos no son importes válidos
            if not result.is_finite():
                return default
            return result

        return Decimal(str(value))

    except (InvalidOperation, ValueError, TypeError) as e:
        logger.warning(f"Error convirtiendo '{value}' a Decimal: {e}")
        return default


def format_decimal(value: Decimal) -> str:
    """Representación en notación plana (sin exponente) para el XML."""
    return format(value, "f")


def safe_parse_xml(xml_source) -> Optional[etree._Element]:
    """
    Parsea XML de manera segura desde archivo o bytes.

    Args:
        xml_source: Ruta de archivo (str/Path), contenido XML (bytes) u objeto archivo

    Returns:
        Elemento raíz del XML o None si hay error
    """
    try:
        parser = etree.XMLParser(resolve_entities=False, no_network=True, strip_cdata=False)

        if isinstance(xml_source, (str, Path)):
            # Parsear desde archivo
            tree = etree.parse(str(xml_source), parser)
            return tree.getroot()
        if isinstance(xml_source, bytes):
            return etree.fromstring(xml_source, parser)
        # Objeto tipo archivo
        return etree.parse(xml_source, parser).getroot()

    except (etree.XMLSyntaxError, OSError) as e:
        logger.error(f"Error parseando XML: {e}")
        return None
