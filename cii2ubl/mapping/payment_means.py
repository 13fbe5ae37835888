"""
Clasificación y conversión de medios de pago CII.

El clasificador es puro: devuelve el medio de pago UBL (o None) y la lista de
efectos adicionales que el ensamblador debe aplicar (p. ej. agregar el
identificador de acreedor SEPA al vendedor).
"""
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional, Tuple

from cii2ubl.core.config import ConversionSettings
from cii2ubl.mapping.primitives import copy_code, copy_id
from cii2ubl.models.cii_types import HeaderTradeSettlement, PaymentMeans
from cii2ubl.models import ubl_types as ubl
from cii2ubl.models.diagnostics import DiagnosticList
from cii2ubl.utils.text import first_non_empty, has_text

CREDIT_TRANSFER_CODES = frozenset({"30", "42", "58"})
CARD_CODES = frozenset({"48"})
DIRECT_DEBIT_CODES = frozenset({"49", "59"})

SEPA_SCHEME_ID = "SEPA"


class PaymentMeansKind(str, Enum):
    CREDIT_TRANSFER = "credit_transfer"
    CARD = "card"
    DIRECT_DEBIT = "direct_debit"
    OTHER = "other"
    UNCLASSIFIABLE = "unclassifiable"


@dataclass(frozen=True)
class AddSellerIdentifier:
    """Efecto: agregar un identificador a las identificaciones del vendedor"""
    identifier: ubl.UBLIdentifier


@dataclass
class PaymentMeansOutcome:
    payment_means: Optional[ubl.PaymentMeans] = None
    effects: List[AddSellerIdentifier] = field(default_factory=list)


def classify_payment_means_code(code: Optional[str]) -> PaymentMeansKind:
    """
    Clasifica un código UNTDID 4461.

    Cualquier código no vacío que no sea transferencia, tarjeta o débito
    directo se acepta como OTHER.
    """
    if not has_text(code):
        return PaymentMeansKind.UNCLASSIFIABLE
    if code in CREDIT_TRANSFER_CODES:
        return PaymentMeansKind.CREDIT_TRANSFER
    if code in CARD_CODES:
        return PaymentMeansKind.CARD
    if code in DIRECT_DEBIT_CODES:
        return PaymentMeansKind.DIRECT_DEBIT
    return PaymentMeansKind.OTHER


def _credit_transfer(source: PaymentMeans, target: ubl.PaymentMeans, settings: ConversionSettings,
                     diagnostics: DiagnosticList, path: Tuple[str, ...]) -> bool:
    account = source.payee_creditor_account
    account_id = None
    if account is not None:
        account_id = copy_id(account.iban_id) or copy_id(account.proprietary_id)

    if account_id is None:
        diagnostics.error("The payee financial account identifier (IBAN or proprietary ID) is missing",
                          path + ("PayeePartyCreditorFinancialAccount",))
        # en 2.1/2.2 el medio de pago sin cuenta no es válido
        return not settings.capabilities.drop_payment_means_without_account

    financial_account = ubl.FinancialAccount(id=account_id)
    if account.account_name is not None and has_text(account.account_name.value):
        financial_account.name = account.account_name.value
    financial_account.branch_id = copy_id(source.payee_institution_bic)
    target.payee_financial_account = financial_account
    return True


def _card(source: PaymentMeans, target: ubl.PaymentMeans, settings: ConversionSettings,
          diagnostics: DiagnosticList, path: Tuple[str, ...]) -> bool:
    card = source.financial_card
    card_path = path + ("ApplicableTradeSettlementFinancialCard",)
    if card is None:
        diagnostics.error("The Payment card information is missing", card_path)
        return False

    primary_account_number = copy_id(card.id)
    if primary_account_number is None:
        diagnostics.error("The Payment card primary account number is missing", card_path + ("ID",))
        return False

    if not has_text(settings.card_account_network_id):
        diagnostics.error("The Payment card network ID is missing", card_path)
        return False

    holder_name = None
    if card.cardholder_name is not None and has_text(card.cardholder_name.value):
        holder_name = card.cardholder_name.value

    target.card_account = ubl.CardAccount(
        primary_account_number_id=primary_account_number,
        network_id=settings.card_account_network_id,
        holder_name=holder_name,
    )
    return True


def _direct_debit(source: PaymentMeans, settlement: HeaderTradeSettlement, target: ubl.PaymentMeans,
                  outcome: PaymentMeansOutcome) -> bool:
    mandate = ubl.PaymentMandate()
    for terms in settlement.payment_terms:
        for mandate_id in terms.direct_debit_mandate_ids:
            mandate.id = copy_id(mandate_id)
            if mandate.id is not None:
                break
        if mandate.id is not None:
            break

    creditor_reference = settlement.creditor_reference_id
    if creditor_reference is not None and has_text(creditor_reference.value):
        outcome.effects.append(AddSellerIdentifier(
            ubl.UBLIdentifier(value=creditor_reference.value, scheme_id=SEPA_SCHEME_ID)
        ))

    debtor_account = source.payer_debtor_account
    debtor_iban = copy_id(debtor_account.iban_id) if debtor_account is not None else None
    debtor_bic = copy_id(source.payer_institution_bic)
    if debtor_iban is not None or debtor_bic is not None:
        mandate.payer_financial_account = ubl.FinancialAccount(id=debtor_iban, branch_id=debtor_bic)

    if mandate.id is not None or mandate.payer_financial_account is not None:
        target.payment_mandate = mandate
    return True


def convert_payment_means(source: PaymentMeans, settlement: HeaderTradeSettlement, settings: ConversionSettings,
                          diagnostics: DiagnosticList, path: Tuple[str, ...],
                          due_date: Optional[date] = None) -> PaymentMeansOutcome:
    """
    Convierte un medio de pago CII.

    Args:
        source: Medio de pago CII
        settlement: Liquidación que lo contiene (referencias de pago,
            mandatos, referencia de acreedor)
        settings: Configuración de la conversión
        diagnostics: Lista de diagnósticos
        path: Ruta del medio de pago para los diagnósticos
        due_date: Fecha de vencimiento a copiar (notas crédito)

    Returns:
        PaymentMeansOutcome; payment_means es None si el medio se descarta
    """
    outcome = PaymentMeansOutcome()
    code = source.type_code.value if source.type_code is not None else None
    kind = classify_payment_means_code(code)

    if kind is PaymentMeansKind.UNCLASSIFIABLE:
        diagnostics.error(f"Failed to determine a supported Payment Means Type from code '{code or ''}'",
                          path + ("TypeCode",))
        return outcome

    target = ubl.PaymentMeans(code=copy_code(source.type_code), payment_due_date=due_date)
    name = first_non_empty(info.value for info in source.information)
    if name is not None:
        target.code.name = name

    target.payment_ids = [ref.value for ref in settlement.payment_references if has_text(ref.value)]

    if kind is PaymentMeansKind.CREDIT_TRANSFER:
        keep = _credit_transfer(source, target, settings, diagnostics, path)
    elif kind is PaymentMeansKind.CARD:
        keep = _card(source, target, settings, diagnostics, path)
    elif kind is PaymentMeansKind.DIRECT_DEBIT:
        keep = _direct_debit(source, settlement, target, outcome)
    else:
        keep = True

    if keep:
        outcome.payment_means = target
    return outcome
