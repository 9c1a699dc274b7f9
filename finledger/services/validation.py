# FINLEDGER/backend/finledger/services/validation.py : validation des brouillons avant écriture

from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional

from finledger.errors import InvalidInputError, MissingFieldError


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def require(draft: Dict[str, Any], fields: Iterable[str]):
    """Lève MISSING_FIELD pour le premier champ obligatoire absent"""
    for field in fields:
        if is_blank(draft.get(field)):
            raise MissingFieldError(f"Champ obligatoire manquant: {field}", field=field)


def parse_date(value: Any, field: str = "date") -> date:
    """Accepte une date ou une chaîne ISO YYYY-MM-DD"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise InvalidInputError(f"{field} doit être au format YYYY-MM-DD", field=field)


def parse_optional_date(value: Any, field: str) -> Optional[date]:
    if is_blank(value):
        return None
    return parse_date(value, field)


def clean_text(value: Any) -> Optional[str]:
    """Texte libre nettoyé, None si vide"""
    if is_blank(value):
        return None
    return str(value).strip()


def normalize_choice(value: Any) -> str:
    return str(value).strip().lower()
