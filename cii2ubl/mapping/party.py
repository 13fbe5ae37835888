"""
Mapeo de partes comerciales CII a partes UBL.

Incluye la selección de identificadores (globales con esquema vs locales),
el esquema fiscal, la entidad legal, el contacto y la dirección postal.
"""
from typing import List, Optional

from cii2ubl.core.config import ConversionSettings
from cii2ubl.mapping.primitives import copy_id
from cii2ubl.models.cii_types import CIIIdentifier, TradeAddress, TradeContact, TradeParty
from cii2ubl.models.ubl_types import (
    Address,
    Contact,
    Party,
    PartyLegalEntity,
    PartyTaxScheme,
    UBLIdentifier,
)
from cii2ubl.utils.text import first_non_empty, has_text

# Alias heredado del esquema de IVA
LEGACY_VAT_SCHEME_ALIAS = "VA"


def _is_usable_global_id(identifier: CIIIdentifier) -> bool:
    return has_text(identifier.value) and has_text(identifier.scheme_id)


def has_usable_global_id(party: TradeParty) -> bool:
    """True si algún identificador global tiene valor y esquema."""
    return any(_is_usable_global_id(gid) for gid in party.global_ids)


def usable_global_ids(party: TradeParty) -> List[CIIIdentifier]:
    return [gid for gid in party.global_ids if _is_usable_global_id(gid)]


def first_party_id(party: TradeParty) -> Optional[UBLIdentifier]:
    """
    Primer identificador utilizable: global con esquema, si no el primer
    identificador local, si no None.
    """
    global_ids = usable_global_ids(party)
    if global_ids:
        return copy_id(global_ids[0])
    for local_id in party.ids:
        copied = copy_id(local_id)
        if copied is not None:
            return copied
    return None


def all_party_ids(party: TradeParty) -> List[UBLIdentifier]:
    """
    Todos los identificadores (modo multi-id, solo vendedor): los globales
    utilizables, o todos los locales si no hay ninguno global.
    """
    source_ids = usable_global_ids(party) or party.ids
    result = []
    for source_id in source_ids:
        copied = copy_id(source_id)
        if copied is not None:
            result.append(copied)
    return result


def add_party_id(target: List[UBLIdentifier], identifier: Optional[UBLIdentifier]) -> bool:
    """
    Agrega un identificador si no existe otro con el mismo valor y esquema.

    Returns:
        True si se agregó
    """
    if identifier is None:
        return False
    for existing in target:
        if existing.value == identifier.value and existing.scheme_id == identifier.scheme_id:
            return False
    target.append(identifier)
    return True


def convert_postal_address(address: Optional[TradeAddress]) -> Optional[Address]:
    if address is None:
        return None
    subentity = first_non_empty(name.value for name in address.country_subdivision_names)
    return Address(
        street_name=address.line_one,
        additional_street_name=address.line_two,
        city_name=address.city_name,
        postal_zone=address.postcode,
        country_subentity=subentity,
        address_line=address.line_three,
        country_code=address.country_id,
    )


def convert_party(party: TradeParty, multi_id: bool, use_legal_entity_name: bool) -> Party:
    """
    Datos básicos de la parte: endpoint, identificadores, nombre y dirección.

    Args:
        party: Parte CII
        multi_id: Emitir todos los identificadores (vendedor) o solo el primero
        use_legal_entity_name: Poner el nombre como razón social de la entidad
            legal en lugar de PartyName
    """
    result = Party()

    for uri in party.uri_communications:
        result.endpoint_id = copy_id(uri)
        break

    if multi_id:
        for identifier in all_party_ids(party):
            add_party_id(result.identifications, identifier)
    else:
        add_party_id(result.identifications, first_party_id(party))

    name = party.name.value if party.name is not None else None
    if has_text(name):
        if use_legal_entity_name:
            result.legal_entities.append(PartyLegalEntity(registration_name=name))
        else:
            result.party_names.append(name)

    result.postal_address = convert_postal_address(party.postal_address)
    return result


def convert_party_tax_schemes(party: TradeParty, settings: ConversionSettings) -> List[PartyTaxScheme]:
    """
    Un PartyTaxScheme por registro fiscal con identificador.

    Un esquema vacío o el alias "VA" se reemplazan por el esquema de IVA
    configurado.
    """
    result = []
    for registration in party.tax_registrations:
        company_id = copy_id(registration.id)
        if company_id is None:
            continue
        scheme = registration.id.scheme_id
        if not has_text(scheme) or scheme == LEGACY_VAT_SCHEME_ALIAS:
            scheme = settings.vat_scheme
        result.append(PartyTaxScheme(company_id=company_id, tax_scheme_id=scheme))
    return result


def convert_party_legal_entity(party: TradeParty, target: Party, settings: ConversionSettings) -> None:
    """
    Completa la entidad legal de target a partir de la organización legal CII.

    La razón social es obligatoria en UBL: si no viene ya del nombre de la
    parte se toma del nombre plano.
    """
    if target.legal_entities:
        legal_entity = target.legal_entities[0]
    else:
        legal_entity = PartyLegalEntity()

    organization = party.legal_organization
    if organization is not None:
        trading_name = organization.trading_business_name
        if trading_name is not None and has_text(trading_name.value):
            target.party_names.append(trading_name.value)
        if organization.id is not None:
            legal_entity.company_id = copy_id(organization.id)

    descriptions = [d.value for d in party.descriptions if has_text(d.value)]
    if descriptions:
        if settings.capabilities.multiple_company_legal_forms:
            legal_entity.company_legal_forms = descriptions
        else:
            legal_entity.company_legal_forms = descriptions[:1]

    if not has_text(legal_entity.registration_name):
        legal_entity.registration_name = party.name.value if party.name is not None else None

    if not target.legal_entities:
        target.legal_entities.append(legal_entity)


def convert_contact(contacts: List[TradeContact]) -> Optional[Contact]:
    """
    Primer contacto CII. Nombre de la persona o, si falta, del departamento.
    None si no queda ningún dato.
    """
    if not contacts:
        return None
    contact = contacts[0]
    name = first_non_empty([
        contact.person_name.value if contact.person_name is not None else None,
        contact.department_name.value if contact.department_name is not None else None,
    ])
    result = Contact(
        name=name,
        telephone=contact.telephone if has_text(contact.telephone) else None,
        electronic_mail=contact.email if has_text(contact.email) else None,
    )
    if result.name is None and result.telephone is None and result.electronic_mail is None:
        return None
    return result


def convert_full_party(party: Optional[TradeParty], settings: ConversionSettings, multi_id: bool,
                       use_legal_entity_name: bool, with_legal_entity: bool) -> Optional[Party]:
    """Parte completa: datos básicos, esquemas fiscales, entidad legal y contacto."""
    if party is None:
        return None
    result = convert_party(party, multi_id, use_legal_entity_name)
    result.tax_schemes = convert_party_tax_schemes(party, settings)
    if with_legal_entity:
        convert_party_legal_entity(party, result, settings)
    result.contact = convert_contact(party.contacts)
    return result
