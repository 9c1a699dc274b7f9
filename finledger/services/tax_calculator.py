# FINLEDGER/backend/finledger/services/tax_calculator.py : calcul de la taxe et du total

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Tuple

from finledger.constants import DEBT_KINDS, MAX_AMOUNT
from finledger.errors import InvalidInputError

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def to_decimal(value, field: str = "value") -> Decimal:
    """Convertit un montant en Decimal fini, sinon INVALID_INPUT"""
    if isinstance(value, bool):
        raise InvalidInputError(f"{field} doit être numérique", field=field)
    try:
        if isinstance(value, float):
            result = Decimal(str(value))
        elif isinstance(value, str):
            result = Decimal(value.strip())
        else:
            result = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidInputError(f"{field} doit être numérique", field=field)
    if not result.is_finite():
        raise InvalidInputError(f"{field} doit être un nombre fini", field=field)
    return result


def check_amount(value: Decimal, field: str = "value") -> Decimal:
    """INVALID_INPUT si le montant dépasse la capacité des colonnes monétaires"""
    if abs(value) > MAX_AMOUNT:
        raise InvalidInputError(f"{field} dépasse le montant maximal ({MAX_AMOUNT})", field=field)
    return value


def to_money(value, field: str = "value") -> Decimal:
    """Arrondit au centime, les égalités s'éloignant de zéro"""
    amount = check_amount(to_decimal(value, field), field)
    return check_amount(amount.quantize(CENT, rounding=ROUND_HALF_UP), field)


def compute(base, rate_percent) -> Tuple[Decimal, Decimal]:
    """
    Calcule (tax, total) pour un montant hors taxe et un taux en pourcentage.

    tax = round(base * rate / 100, 2) et total = round(base + tax, 2), arrondi
    ROUND_HALF_UP. Une base négative (correction) est acceptée et garde son signe ;
    un taux négatif ou non fini est refusé.
    """
    base = to_decimal(base, "base")
    rate = to_decimal(rate_percent, "rate")
    if rate < 0:
        raise InvalidInputError("Le taux de taxe ne peut pas être négatif", field="rate")

    tax = (base * rate / HUNDRED).quantize(CENT, rounding=ROUND_HALF_UP)
    total = (base + tax).quantize(CENT, rounding=ROUND_HALF_UP)
    return tax, total


def signed_delta(kind: str, amount) -> Decimal:
    """+amount pour une avance, -amount pour un remboursement"""
    return to_money(amount, "amount") * DEBT_KINDS[kind]
