from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional
import json

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_settings import BaseSettings
from cii2ubl.models.ubl_types import DocumentKind
from cii2ubl.utils.logger import get_logger

logger = get_logger("Config")


DEFAULT_VAT_SCHEME = "VAT"
DEFAULT_CUSTOMIZATION_ID = "urn:cen.eu:en16931:2017#compliant#urn:fdc:peppol.eu:2017:poacc:billing:3.0"
DEFAULT_PROFILE_ID = "urn:fdc:peppol.eu:2017:poacc:billing:01:1.0"
DEFAULT_CARD_ACCOUNT_NETWORK_ID = "mapped-from-cii"
DEFAULT_ORDER_REF_ID = "NA"


@dataclass(frozen=True)
class VersionCapabilities:
    """Diferencias entre versiones UBL que afectan al mapeo"""
    credit_note_project_reference: bool
    multiple_company_legal_forms: bool
    drop_payment_means_without_account: bool


class UBLVersion(str, Enum):
    """Versiones UBL destino soportadas"""
    V2_1 = "2.1"
    V2_2 = "2.2"
    V2_3 = "2.3"
    V2_4 = "2.4"

    @property
    def capabilities(self) -> VersionCapabilities:
        return _VERSION_CAPABILITIES[self]


_VERSION_CAPABILITIES = {
    UBLVersion.V2_1: VersionCapabilities(
        credit_note_project_reference=False,
        multiple_company_legal_forms=False,
        drop_payment_means_without_account=True,
    ),
    UBLVersion.V2_2: VersionCapabilities(
        credit_note_project_reference=True,
        multiple_company_legal_forms=False,
        drop_payment_means_without_account=True,
    ),
    UBLVersion.V2_3: VersionCapabilities(
        credit_note_project_reference=True,
        multiple_company_legal_forms=True,
        drop_payment_means_without_account=False,
    ),
    UBLVersion.V2_4: VersionCapabilities(
        credit_note_project_reference=True,
        multiple_company_legal_forms=True,
        drop_payment_means_without_account=False,
    ),
}


class CreationMode(str, Enum):
    """Cómo se decide la variante de documento"""
    AUTOMATIC = "automatic"
    INVOICE = "invoice"
    CREDIT_NOTE = "credit_note"


class ConversionSettings(BaseModel):
    """
    Opciones de una conversión. Inmutable: se construye una vez y se pasa
    explícitamente a cada llamada.
    """
    model_config = ConfigDict(frozen=True)

    ubl_version: UBLVersion = UBLVersion.V2_1
    creation_mode: CreationMode = CreationMode.AUTOMATIC
    undetermined_document_kind: DocumentKind = DocumentKind.INVOICE
    vat_scheme: str = DEFAULT_VAT_SCHEME
    customization_id: str = DEFAULT_CUSTOMIZATION_ID
    profile_id: str = DEFAULT_PROFILE_ID
    card_account_network_id: str = DEFAULT_CARD_ACCOUNT_NETWORK_ID
    default_order_ref_id: str = DEFAULT_ORDER_REF_ID
    swap_quantity_sign_if_needed: bool = True
    swap_price_sign_if_needed: bool = True

    @property
    def capabilities(self) -> VersionCapabilities:
        return self.ubl_version.capabilities


class Settings(BaseSettings):
    """Configuración global de la aplicación"""
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[Path] = None
    output_dir: Optional[Path] = None

    ubl_version: UBLVersion = UBLVersion.V2_1
    creation_mode: CreationMode = CreationMode.AUTOMATIC
    undetermined_document_kind: DocumentKind = DocumentKind.INVOICE
    vat_scheme: str = DEFAULT_VAT_SCHEME
    customization_id: str = DEFAULT_CUSTOMIZATION_ID
    profile_id: str = DEFAULT_PROFILE_ID
    card_account_network_id: str = DEFAULT_CARD_ACCOUNT_NETWORK_ID
    default_order_ref_id: str = DEFAULT_ORDER_REF_ID
    swap_quantity_sign_if_needed: bool = True
    swap_price_sign_if_needed: bool = True

    @field_validator("vat_scheme", mode="before")
    @classmethod
    def ensure_vat_scheme(cls, v):
        if v is None or v == "":
            return DEFAULT_VAT_SCHEME
        return v

    class Config:
        env_prefix = "CII2UBL_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    def to_conversion_settings(self) -> ConversionSettings:
        """Construye la instantánea inmutable usada por el convertidor."""
        return ConversionSettings(
            **self.model_dump(exclude={"LOG_LEVEL", "LOG_DIR", "output_dir"})
        )


def load_config(settings_path: Optional[Path] = None) -> Settings:
    """
    Carga configuración desde variables de entorno y settings.json.

    Las claves de settings.json tienen prioridad sobre el entorno.

    Args:
        settings_path: Ruta opcional al archivo settings.json

    Returns:
        Objeto Settings con configuración completa
    """
    file_settings = {}

    if settings_path is None:
        settings_path = Path(__file__).resolve().parent.parent.parent / "settings.json"

    if settings_path.exists():
        logger.info(f"Cargando configuración desde: {settings_path}")
        with open(settings_path, "r", encoding="utf-8") as fh:
            file_settings = json.load(fh)
    else:
        logger.debug(f"No se encontró {settings_path}, se usa solo el entorno")

    env_settings = Settings()
    config_dict = env_settings.model_dump()
    config_dict.update(file_settings)

    return Settings.model_validate(config_dict)
