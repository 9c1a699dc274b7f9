# FINLEDGER/backend/finledger/constants.py

from decimal import Decimal

# Types de transaction et taux de taxe associé dans les paramètres
TRANSACTION_TYPES = {
    "income": "tax_income_rate",
    "expense": "tax_expense_rate"
}

# Mouvements de dette employé et signe du delta
DEBT_KINDS = {
    "advance": 1,   # avance versée à l'employé
    "repay": -1     # remboursement par l'employé
}

# Groupe des dettes sans employé renseigné dans les soldes
UNASSIGNED_EMPLOYEE = ""

# Champs modifiables par le client (tax/total/delta sont toujours recalculés)
TRANSACTION_FIELDS = ("date", "type", "category", "base", "employee", "notes")
DEBT_FIELDS = ("date", "employee", "kind", "amount", "notes")
SETTINGS_FIELDS = (
    "currency", "tax_income_rate", "tax_expense_rate",
    "monthly_expense_cap", "categories", "payment_methods"
)

# Bornes des taux de taxe (en pourcentage)
MIN_TAX_RATE = 0
MAX_TAX_RATE = 100

# Plus grand montant représentable par les colonnes Numeric(14, 2)
MAX_AMOUNT = Decimal("999999999999.99")
