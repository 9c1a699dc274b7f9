# FINLEDGER/backend/finledger/schemas/schemas.py

from pydantic import BaseModel, ConfigDict, field_serializer
from typing import Optional, List, Dict
from datetime import date, datetime
from decimal import Decimal

# ---------- USER SCHEMAS ----------
class UserCreate(BaseModel):
    email: str
    password: str
    company_name: Optional[str] = None

class UserLogin(BaseModel):
    email: str
    password: str

class UserOut(BaseModel):
    id: int
    email: str
    company_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

# ---------- TOKEN SCHEMA ----------
class Token(BaseModel):
    access_token: str
    token_type: str
    user: UserOut

# ---------- SETTINGS SCHEMAS ----------
class SettingsUpdate(BaseModel):
    """Mise à jour partielle : un champ absent ou nul garde sa valeur"""
    currency: Optional[str] = None
    tax_income_rate: Optional[Decimal] = None
    tax_expense_rate: Optional[Decimal] = None
    monthly_expense_cap: Optional[Decimal] = None
    categories: Optional[List[str]] = None
    payment_methods: Optional[List[str]] = None

class SettingsOut(BaseModel):
    currency: str
    tax_income_rate: Decimal
    tax_expense_rate: Decimal
    monthly_expense_cap: Decimal
    categories: Optional[List[str]] = None
    payment_methods: Optional[List[str]] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer('tax_income_rate', 'tax_expense_rate', 'monthly_expense_cap')
    def serialize_decimal(self, value: Decimal) -> float:
        return float(value)

class MeOut(BaseModel):
    user: UserOut
    settings: SettingsOut

# ---------- TRANSACTION SCHEMAS ----------
# Les champs obligatoires sont vérifiés par le TransactionManager (MISSING_FIELD)
class TransactionCreate(BaseModel):
    date: Optional[str] = None
    type: Optional[str] = None
    category: Optional[str] = None
    base: Optional[Decimal] = None
    employee: Optional[str] = None
    notes: Optional[str] = None

class TransactionUpdate(TransactionCreate):
    """Mise à jour partielle : un champ absent ou nul garde sa valeur, "" efface employee/notes"""
    # Acceptés pour compatibilité mais toujours recalculés
    tax: Optional[Decimal] = None
    total: Optional[Decimal] = None

class TransactionOut(BaseModel):
    id: int
    user_id: int
    date: date
    type: str
    category: str
    base: Decimal
    tax: Decimal
    total: Decimal
    employee: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer('base', 'tax', 'total')
    def serialize_money(self, value: Decimal) -> float:
        """Montants renvoyés comme nombres JSON"""
        return float(value)

    @field_serializer('created_at')
    def serialize_datetime(self, value: datetime) -> str:
        """Sérialise un datetime en chaîne ISO 8601 pour JSON."""
        return value.isoformat()

# ---------- DEBT SCHEMAS ----------
class DebtCreate(BaseModel):
    date: Optional[str] = None
    employee: Optional[str] = None
    kind: Optional[str] = None
    amount: Optional[Decimal] = None
    notes: Optional[str] = None

class DebtUpdate(DebtCreate):
    """Mise à jour partielle : un champ absent ou nul garde sa valeur, "" efface notes"""
    delta: Optional[Decimal] = None

class DebtOut(BaseModel):
    id: int
    user_id: int
    date: date
    employee: str
    kind: str
    amount: Decimal
    delta: Decimal
    notes: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer('amount', 'delta')
    def serialize_money(self, value: Decimal) -> float:
        return float(value)

    @field_serializer('created_at')
    def serialize_datetime(self, value: datetime) -> str:
        return value.isoformat()

class EmployeeBalance(BaseModel):
    advances: Decimal
    repayments: Decimal
    balance: Decimal

    @field_serializer('advances', 'repayments', 'balance')
    def serialize_money(self, value: Decimal) -> float:
        return float(value)

# ---------- DASHBOARD SCHEMAS ----------
class TypeTotals(BaseModel):
    base: Decimal
    tax: Decimal
    total: Decimal
    count: int

    @field_serializer('base', 'tax', 'total')
    def serialize_money(self, value: Decimal) -> float:
        return float(value)

class ExpenseCapStatus(BaseModel):
    month: str
    expenses: Decimal
    cap: Decimal
    remaining: Decimal
    exceeded: bool

    @field_serializer('expenses', 'cap', 'remaining')
    def serialize_money(self, value: Decimal) -> float:
        return float(value)

class DashboardSummary(BaseModel):
    currency: str
    income: TypeTotals
    expense: TypeTotals
    net: Decimal
    tax_balance: Decimal
    expense_cap: ExpenseCapStatus
    outstanding_debt: Decimal

    @field_serializer('net', 'tax_balance', 'outstanding_debt')
    def serialize_money(self, value: Decimal) -> float:
        return float(value)

# ---------- MISC ----------
class DeleteResult(BaseModel):
    ok: bool = True

BalancesOut = Dict[str, EmployeeBalance]
