# FINLEDGER/backend/finledger/services/transaction_manager.py : revenus et dépenses d'un compte

import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from finledger.constants import TRANSACTION_FIELDS, TRANSACTION_TYPES
from finledger.errors import InvalidTypeError
from finledger.models.models import Transaction
from finledger.services.ledger_store import LedgerStore
from finledger.services.settings_repository import SettingsRepository, rate_for
from finledger.services.tax_calculator import check_amount, compute, to_money
from finledger.services.validation import (
    clean_text, is_blank, normalize_choice, parse_date, parse_optional_date, require
)

logger = logging.getLogger(__name__)


class TransactionManager:
    """
    Création, modification et suppression des transactions.

    tax et total ne sont jamais fournis par le client : ils sont recalculés à
    chaque écriture à partir de base, type et du taux courant du compte.
    """

    def __init__(self, store: LedgerStore):
        self.store = store
        self.settings = SettingsRepository(store)

    def list(self, tenant_id: int, transaction_type: Optional[str] = None,
             employee: Optional[str] = None, date_from=None, date_to=None) -> List[Transaction]:
        """Transactions du compte, de la plus récente à la plus ancienne"""
        query = select(Transaction).where(Transaction.user_id == tenant_id)

        if not is_blank(transaction_type):
            query = query.where(Transaction.type == self._check_type(transaction_type))
        if not is_blank(employee):
            query = query.where(func.lower(Transaction.employee) == employee.strip().lower())
        start = parse_optional_date(date_from, "date_from")
        if start:
            query = query.where(Transaction.date >= start)
        end = parse_optional_date(date_to, "date_to")
        if end:
            query = query.where(Transaction.date <= end)

        query = query.order_by(
            Transaction.date.desc(), Transaction.created_at.desc(), Transaction.id.desc()
        )
        return self.store.read(lambda db: list(db.execute(query).scalars().all()))

    def get(self, tenant_id: int, transaction_id: int) -> Transaction:
        return self.store.read(
            lambda db: self.store.get_owned(db, Transaction, tenant_id, transaction_id, "Transaction")
        )

    def create(self, tenant_id: int, fields: Mapping[str, Any]) -> Transaction:
        values = self._validate(fields)

        def insert(db: Session) -> Transaction:
            tax, total = self._derive(db, tenant_id, values)
            row = Transaction(user_id=tenant_id, tax=tax, total=total,
                              created_at=self.store.now(), **values)
            return self.store.insert(db, row)

        transaction = self.store.with_tenant_lock(tenant_id, insert)
        logger.info(f"💰 Transaction {transaction.id} créée ({values['type']}) pour le compte {tenant_id}")
        return transaction

    def update(self, tenant_id: int, transaction_id: int, changes: Mapping[str, Any]) -> Transaction:
        """
        Fusionne les champs fournis, valide le brouillon, recalcule puis enregistre.

        Un champ nul garde sa valeur ; une chaîne vide efface employee ou notes.
        """
        changes = {
            field: value for field, value in changes.items()
            if field in TRANSACTION_FIELDS and value is not None
        }

        def apply(db: Session) -> Transaction:
            row = self.store.get_owned(db, Transaction, tenant_id, transaction_id, "Transaction")
            draft = {field: getattr(row, field) for field in TRANSACTION_FIELDS}
            draft.update(changes)
            values = self._validate(draft)
            tax, total = self._derive(db, tenant_id, values)

            for field, value in values.items():
                setattr(row, field, value)
            row.tax = tax
            row.total = total
            return row

        transaction = self.store.with_tenant_lock(tenant_id, apply)
        logger.info(f"✏️ Transaction {transaction_id} mise à jour pour le compte {tenant_id}")
        return transaction

    def delete(self, tenant_id: int, transaction_id: int) -> None:
        def remove(db: Session) -> None:
            row = self.store.get_owned(db, Transaction, tenant_id, transaction_id, "Transaction")
            db.delete(row)

        self.store.with_tenant_lock(tenant_id, remove)
        logger.info(f"🗑️ Transaction {transaction_id} supprimée pour le compte {tenant_id}")

    def _derive(self, db: Session, tenant_id: int, values: Dict[str, Any]):
        settings = self.settings.load(db, tenant_id)
        tax, total = compute(values["base"], rate_for(settings, values["type"]))
        # total doit tenir dans Numeric(14, 2) lui aussi
        check_amount(total, "base")
        return tax, total

    @staticmethod
    def _check_type(value: Any) -> str:
        transaction_type = normalize_choice(value)
        if transaction_type not in TRANSACTION_TYPES:
            raise InvalidTypeError(
                f"Type invalide: {value} (attendu: {', '.join(TRANSACTION_TYPES)})", field="type"
            )
        return transaction_type

    def _validate(self, draft: Mapping[str, Any]) -> Dict[str, Any]:
        require(draft, ("date", "type", "category", "base"))
        return {
            "type": self._check_type(draft["type"]),
            "date": parse_date(draft["date"]),
            "category": str(draft["category"]).strip(),
            "base": to_money(draft["base"], "base"),
            "employee": clean_text(draft.get("employee")),
            "notes": clean_text(draft.get("notes")),
        }
