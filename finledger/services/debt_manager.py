# FINLEDGER/backend/finledger/services/debt_manager.py : avances et remboursements des employés

import logging
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from finledger.constants import DEBT_FIELDS, DEBT_KINDS, UNASSIGNED_EMPLOYEE
from finledger.errors import InvalidInputError, InvalidKindError
from finledger.models.models import Debt
from finledger.services.ledger_store import LedgerStore
from finledger.services.tax_calculator import signed_delta, to_money
from finledger.services.validation import (
    clean_text, is_blank, normalize_choice, parse_date, parse_optional_date, require
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


class DebtManager:
    """Mouvements de dette employé ; delta est toujours dérivé de kind et amount"""

    def __init__(self, store: LedgerStore):
        self.store = store

    def list(self, tenant_id: int, employee: Optional[str] = None,
             date_from=None, date_to=None) -> List[Debt]:
        """Historique chronologique (le plus ancien d'abord)"""
        query = select(Debt).where(Debt.user_id == tenant_id)

        if not is_blank(employee):
            query = query.where(func.lower(Debt.employee) == employee.strip().lower())
        start = parse_optional_date(date_from, "date_from")
        if start:
            query = query.where(Debt.date >= start)
        end = parse_optional_date(date_to, "date_to")
        if end:
            query = query.where(Debt.date <= end)

        query = query.order_by(Debt.date.asc(), Debt.created_at.asc(), Debt.id.asc())
        return self.store.read(lambda db: list(db.execute(query).scalars().all()))

    def get(self, tenant_id: int, debt_id: int) -> Debt:
        return self.store.read(
            lambda db: self.store.get_owned(db, Debt, tenant_id, debt_id, "Dette")
        )

    def create(self, tenant_id: int, fields: Mapping[str, Any]) -> Debt:
        values = self._validate(fields)

        def insert(db: Session) -> Debt:
            row = Debt(user_id=tenant_id, delta=signed_delta(values["kind"], values["amount"]),
                       created_at=self.store.now(), **values)
            return self.store.insert(db, row)

        debt = self.store.with_tenant_lock(tenant_id, insert)
        logger.info(f"🤝 Dette {debt.id} créée ({values['kind']}) pour le compte {tenant_id}")
        return debt

    def update(self, tenant_id: int, debt_id: int, changes: Mapping[str, Any]) -> Debt:
        """Un champ nul garde sa valeur, comme pour les transactions"""
        changes = {
            field: value for field, value in changes.items()
            if field in DEBT_FIELDS and value is not None
        }

        def apply(db: Session) -> Debt:
            row = self.store.get_owned(db, Debt, tenant_id, debt_id, "Dette")
            draft = {field: getattr(row, field) for field in DEBT_FIELDS}
            draft.update(changes)
            values = self._validate(draft)

            for field, value in values.items():
                setattr(row, field, value)
            row.delta = signed_delta(values["kind"], values["amount"])
            return row

        debt = self.store.with_tenant_lock(tenant_id, apply)
        logger.info(f"✏️ Dette {debt_id} mise à jour pour le compte {tenant_id}")
        return debt

    def delete(self, tenant_id: int, debt_id: int) -> None:
        def remove(db: Session) -> None:
            row = self.store.get_owned(db, Debt, tenant_id, debt_id, "Dette")
            db.delete(row)

        self.store.with_tenant_lock(tenant_id, remove)
        logger.info(f"🗑️ Dette {debt_id} supprimée pour le compte {tenant_id}")

    def balances(self, tenant_id: int) -> Dict[str, Dict[str, Decimal]]:
        """
        Solde par employé, recalculé à chaque appel à partir de toutes les dettes.

        Les dettes sans employé sont regroupées sous la clé "".
        """
        balances: Dict[str, Dict[str, Decimal]] = {}
        for debt in self.list(tenant_id):
            key = debt.employee or UNASSIGNED_EMPLOYEE
            entry = balances.setdefault(key, {"advances": ZERO, "repayments": ZERO, "balance": ZERO})
            amount = Decimal(debt.amount)
            if debt.kind == "advance":
                entry["advances"] += amount
            else:
                entry["repayments"] += amount
            entry["balance"] = entry["advances"] - entry["repayments"]
        return {key: balances[key] for key in sorted(balances)}

    def _validate(self, draft: Mapping[str, Any]) -> Dict[str, Any]:
        require(draft, ("date", "employee", "kind", "amount"))
        kind = normalize_choice(draft["kind"])
        if kind not in DEBT_KINDS:
            raise InvalidKindError(
                f"Type de mouvement invalide: {draft['kind']} (attendu: {', '.join(DEBT_KINDS)})",
                field="kind"
            )
        amount = to_money(draft["amount"], "amount")
        if amount < 0:
            raise InvalidInputError("Le montant doit être positif ou nul", field="amount")
        return {
            "date": parse_date(draft["date"]),
            "employee": str(draft["employee"]).strip(),
            "kind": kind,
            "amount": amount,
            "notes": clean_text(draft.get("notes")),
        }
