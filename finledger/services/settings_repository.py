# FINLEDGER/backend/finledger/services/settings_repository.py : paramètres par compte

import logging
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from finledger.config import DEFAULT_SETTINGS
from finledger.constants import MAX_TAX_RATE, MIN_TAX_RATE, SETTINGS_FIELDS, TRANSACTION_TYPES
from finledger.errors import InvalidInputError
from finledger.models.models import Settings
from finledger.services.ledger_store import LedgerStore
from finledger.services.tax_calculator import to_decimal, to_money
from finledger.services.validation import is_blank

logger = logging.getLogger(__name__)


def rate_for(settings: Settings, transaction_type: str) -> Decimal:
    """Taux applicable à un type de transaction"""
    return Decimal(getattr(settings, TRANSACTION_TYPES[transaction_type]))


class SettingsRepository:
    """Lecture et mise à jour partielle des paramètres d'un compte"""

    def __init__(self, store: LedgerStore):
        self.store = store

    @staticmethod
    def create_defaults(db: Session, tenant_id: int) -> Settings:
        """Paramètres initiaux, ajoutés dans la même transaction que le compte"""
        settings = Settings(
            user_id=tenant_id,
            currency=DEFAULT_SETTINGS["currency"],
            tax_income_rate=to_decimal(DEFAULT_SETTINGS["tax_income_rate"]),
            tax_expense_rate=to_decimal(DEFAULT_SETTINGS["tax_expense_rate"]),
            monthly_expense_cap=to_money(DEFAULT_SETTINGS["monthly_expense_cap"]),
            categories=None,
            payment_methods=None,
        )
        db.add(settings)
        return settings

    @staticmethod
    def find(db: Session, tenant_id: int) -> Optional[Settings]:
        return db.execute(
            select(Settings)
            .where(Settings.user_id == tenant_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def load(self, db: Session, tenant_id: int) -> Settings:
        """Paramètres courants du compte (recréés par défaut s'ils manquent)"""
        settings = self.find(db, tenant_id)
        if settings is None:
            logger.warning(f"⚠️ Paramètres absents pour le compte {tenant_id}, valeurs par défaut créées")
            settings = self.create_defaults(db, tenant_id)
            db.flush()
        return settings

    def get(self, tenant_id: int) -> Settings:
        """Simple lecture ; le verrou du compte n'est pris que pour recréer les valeurs par défaut"""
        settings = self.store.read(lambda db: self.find(db, tenant_id))
        if settings is None:
            settings = self.store.with_tenant_lock(tenant_id, lambda db: self.load(db, tenant_id))
        return settings

    def update(self, tenant_id: int, changes: Mapping[str, Any]) -> Settings:
        """Chaque champ est optionnel ; un champ absent ou nul garde sa valeur"""
        cleaned = self._validate(changes)

        def apply(db: Session) -> Settings:
            settings = self.load(db, tenant_id)
            for field, value in cleaned.items():
                setattr(settings, field, value)
            return settings

        settings = self.store.with_tenant_lock(tenant_id, apply)
        if cleaned:
            logger.info(f"⚙️ Paramètres mis à jour pour le compte {tenant_id}: {sorted(cleaned)}")
        return settings

    def _validate(self, changes: Mapping[str, Any]) -> Dict[str, Any]:
        cleaned: Dict[str, Any] = {}
        for field in SETTINGS_FIELDS:
            value = changes.get(field)
            if value is None:
                continue
            if field == "currency":
                if is_blank(value):
                    raise InvalidInputError("La devise ne peut pas être vide", field=field)
                cleaned[field] = str(value).strip()
            elif field in ("tax_income_rate", "tax_expense_rate"):
                rate = to_decimal(value, field)
                if rate < MIN_TAX_RATE or rate > MAX_TAX_RATE:
                    raise InvalidInputError(
                        f"{field} doit être compris entre {MIN_TAX_RATE} et {MAX_TAX_RATE}", field=field
                    )
                cleaned[field] = rate
            elif field == "monthly_expense_cap":
                cap = to_money(value, field)
                if cap < 0:
                    raise InvalidInputError("Le plafond mensuel ne peut pas être négatif", field=field)
                cleaned[field] = cap
            else:
                cleaned[field] = self._vocabulary(value, field)
        return cleaned

    @staticmethod
    def _vocabulary(value: Any, field: str) -> List[str]:
        if isinstance(value, str) or not isinstance(value, (list, tuple)):
            raise InvalidInputError(f"{field} doit être une liste", field=field)
        items: List[str] = []
        for item in value:
            if not isinstance(item, str) or is_blank(item):
                raise InvalidInputError(f"{field} contient une valeur vide ou invalide", field=field)
            if item.strip() not in items:
                items.append(item.strip())
        return items
