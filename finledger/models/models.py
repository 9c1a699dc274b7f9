# FINLEDGER/backend/finledger/models/models.py

from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, DateTime, Date, Text, JSON, Index
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from finledger.database import Base


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    company_name = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow)

    settings = relationship("Settings", back_populates="user", uselist=False,
                            cascade="all, delete-orphan", passive_deletes=True)
    transactions = relationship("Transaction", back_populates="user",
                                cascade="all, delete-orphan", passive_deletes=True)
    debts = relationship("Debt", back_populates="user",
                         cascade="all, delete-orphan", passive_deletes=True)

class Settings(Base):
    __tablename__ = "settings"
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    currency = Column(String, nullable=False)
    tax_income_rate = Column(Numeric(7, 4), nullable=False)
    tax_expense_rate = Column(Numeric(7, 4), nullable=False)
    monthly_expense_cap = Column(Numeric(14, 2), nullable=False)
    categories = Column(JSON, nullable=True)
    payment_methods = Column(JSON, nullable=True)

    user = relationship("User", back_populates="settings")

class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        Index("idx_tx_user_date", "user_id", "date"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    type = Column(String, nullable=False)
    category = Column(String, nullable=False)
    base = Column(Numeric(14, 2), nullable=False)
    tax = Column(Numeric(14, 2), nullable=False)
    total = Column(Numeric(14, 2), nullable=False)
    employee = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    user = relationship("User", back_populates="transactions")

class Debt(Base):
    __tablename__ = "debts"
    __table_args__ = (
        Index("idx_debt_user_date", "user_id", "date"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    employee = Column(String, nullable=False)
    kind = Column(String, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    delta = Column(Numeric(14, 2), nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    user = relationship("User", back_populates="debts")
