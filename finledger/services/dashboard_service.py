# FINLEDGER/backend/finledger/services/dashboard_service.py : synthèse du tableau de bord

from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional

from finledger.constants import TRANSACTION_TYPES
from finledger.errors import InvalidInputError
from finledger.services.debt_manager import DebtManager
from finledger.services.ledger_store import LedgerStore
from finledger.services.settings_repository import SettingsRepository
from finledger.services.transaction_manager import TransactionManager
from finledger.services.validation import is_blank

ZERO = Decimal("0.00")


class DashboardService:
    """Totaux calculés à la demande, rien n'est stocké"""

    def __init__(self, store: LedgerStore, tenant_id: int):
        self.store = store
        self.tenant_id = tenant_id
        self.transactions = TransactionManager(store)
        self.debts = DebtManager(store)
        self.settings = SettingsRepository(store)

    def _month_bounds(self, month: Optional[str]):
        if is_blank(month):
            today = self.store.now().date()
            year, month_num = today.year, today.month
        else:
            try:
                year, month_num = (int(part) for part in month.strip().split("-"))
                date(year, month_num, 1)
            except ValueError:
                raise InvalidInputError("month doit être au format YYYY-MM", field="month")
        start = date(year, month_num, 1)
        end = date(year + 1, 1, 1) if month_num == 12 else date(year, month_num + 1, 1)
        return start, end

    def summary(self, date_from=None, date_to=None, month: Optional[str] = None) -> Dict[str, Any]:
        settings = self.settings.get(self.tenant_id)
        transactions = self.transactions.list(self.tenant_id, date_from=date_from, date_to=date_to)

        totals = {
            transaction_type: {"base": ZERO, "tax": ZERO, "total": ZERO, "count": 0}
            for transaction_type in TRANSACTION_TYPES
        }
        for tx in transactions:
            bucket = totals[tx.type]
            bucket["base"] += Decimal(tx.base)
            bucket["tax"] += Decimal(tx.tax)
            bucket["total"] += Decimal(tx.total)
            bucket["count"] += 1

        # Le plafond mensuel est indicatif : on le compare, on ne bloque rien
        start, end = self._month_bounds(month)
        month_expenses = sum(
            (Decimal(tx.total) for tx in self.transactions.list(
                self.tenant_id, transaction_type="expense", date_from=start, date_to=end
            ) if tx.date < end),
            ZERO
        )
        cap = Decimal(settings.monthly_expense_cap)

        balances = self.debts.balances(self.tenant_id)

        return {
            "currency": settings.currency,
            "income": totals["income"],
            "expense": totals["expense"],
            "net": totals["income"]["total"] - totals["expense"]["total"],
            "tax_balance": totals["income"]["tax"] - totals["expense"]["tax"],
            "expense_cap": {
                "month": start.strftime("%Y-%m"),
                "expenses": month_expenses,
                "cap": cap,
                "remaining": cap - month_expenses,
                "exceeded": month_expenses > cap,
            },
            "outstanding_debt": sum((entry["balance"] for entry in balances.values()), ZERO),
        }
