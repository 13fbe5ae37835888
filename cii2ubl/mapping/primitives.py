"""
Copia de campos primitivos CII -> UBL.

Regla común: un valor fuente ausente da None (nunca un valor vacío), y los
metadatos (esquema, lista, moneda, unidad) se copian solo si están presentes.
"""
from decimal import Decimal
from typing import Optional

from cii2ubl.models.cii_types import CIIAmount, CIICode, CIIIdentifier, CIINote, CIIQuantity, CIIText
from cii2ubl.models.ubl_types import UBLAmount, UBLCode, UBLIdentifier, UBLQuantity, UBLText
from cii2ubl.utils.text import has_text, strip_trailing_zeros


def copy_id(source: Optional[CIIIdentifier]) -> Optional[UBLIdentifier]:
    """Copia un identificador con todos sus atributos de esquema."""
    if source is None or not has_text(source.value):
        return None
    return UBLIdentifier(
        value=source.value,
        scheme_id=source.scheme_id,
        scheme_name=source.scheme_name,
        scheme_agency_id=source.scheme_agency_id,
        scheme_agency_name=source.scheme_agency_name,
        scheme_version_id=source.scheme_version_id,
        scheme_data_uri=source.scheme_data_uri,
        scheme_uri=source.scheme_uri,
    )


def copy_id_value(value: Optional[str], scheme_id: Optional[str] = None) -> Optional[UBLIdentifier]:
    """Crea un identificador desde texto plano; None si no hay texto."""
    if not has_text(value):
        return None
    return UBLIdentifier(value=value, scheme_id=scheme_id)


def copy_text(source: Optional[CIIText]) -> Optional[UBLText]:
    if source is None or not has_text(source.value):
        return None
    return UBLText(
        value=source.value,
        language_id=source.language_id,
        language_locale_id=source.language_locale_id,
    )


def copy_code(source: Optional[CIICode]) -> Optional[UBLCode]:
    if source is None or not has_text(source.value):
        return None
    return UBLCode(
        value=source.value,
        list_id=source.list_id,
        list_agency_id=source.list_agency_id,
        list_agency_name=source.list_agency_name,
        list_name=source.list_name,
        list_version_id=source.list_version_id,
        name=source.name,
        language_id=source.language_id,
        list_uri=source.list_uri,
        list_scheme_uri=source.list_scheme_uri,
    )


def copy_quantity(source: Optional[CIIQuantity]) -> Optional[UBLQuantity]:
    if source is None or source.value is None:
        return None
    return UBLQuantity(
        value=strip_trailing_zeros(source.value),
        unit_code=source.unit_code,
        unit_code_list_id=source.unit_code_list_id,
        unit_code_list_agency_id=source.unit_code_list_agency_id,
        unit_code_list_agency_name=source.unit_code_list_agency_name,
    )


def copy_amount(source: Optional[CIIAmount], default_currency: Optional[str] = None) -> Optional[UBLAmount]:
    """
    Copia un importe. Si la fuente no trae moneda se usa default_currency.

    Args:
        source: Importe CII
        default_currency: Moneda del documento

    Returns:
        Importe UBL o None si no hay fuente o no tiene valor
    """
    if source is None or source.value is None:
        return None
    currency = source.currency_id if has_text(source.currency_id) else default_currency
    return UBLAmount(
        value=strip_trailing_zeros(source.value),
        currency_id=currency,
        currency_code_list_version_id=source.currency_code_list_version_id,
    )


def create_amount(value: Decimal, currency: Optional[str]) -> UBLAmount:
    return UBLAmount(value=strip_trailing_zeros(value), currency_id=currency)


def copy_note(source: Optional[CIINote]) -> Optional[UBLText]:
    """
    Convierte una nota CII en un único texto UBL.

    El código de asunto se antepone como "#CODIGO#" y los contenidos se unen
    con saltos de línea.
    """
    if source is None:
        return None
    text = ""
    if has_text(source.subject_code):
        text = f"#{source.subject_code}#"
    text += "\n".join(content for content in source.content if content is not None)
    if not text:
        return None
    return UBLText(value=text)
