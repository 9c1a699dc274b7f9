# FINLEDGER/backend/scripts/seed_data.py : script pour générer des données de démo

#!/usr/bin/env python
"""Script pour générer des données de test réalistes"""

import random
import sys
import os
from datetime import date, timedelta
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from finledger.auth import hash_password
from finledger.database import SessionLocal, create_tables
from finledger.models import models
from finledger.services.debt_manager import DebtManager
from finledger.services.ledger_store import LedgerStore
from finledger.services.settings_repository import SettingsRepository
from finledger.services.transaction_manager import TransactionManager

DEMO_EMAIL = "demo@finledger.app"
DEMO_PASSWORD = "demo123"

def generate_test_data(days: int = 180):
    """Génère des données de démo via les managers (taxes et deltas calculés)"""
    create_tables()
    db = SessionLocal()
    try:
        if db.query(models.User).filter(models.User.email == DEMO_EMAIL).first():
            print(f"ℹ️ Le compte {DEMO_EMAIL} existe déjà")
            return

        demo_user = models.User(
            email=DEMO_EMAIL,
            password_hash=hash_password(DEMO_PASSWORD),
            company_name="Démo"
        )
        db.add(demo_user)
        db.flush()
        SettingsRepository.create_defaults(db, demo_user.id)
        db.commit()

        store = LedgerStore(db)
        transactions = TransactionManager(store)
        debts = DebtManager(store)

        employees = ["Ahmed", "Sara", "Youssef"]
        income_categories = ["Vente", "Service"]
        expense_categories = ["Loyer", "Salaires", "Fournitures", "Transport"]

        for days_ago in range(days):
            day = (date.today() - timedelta(days=days_ago)).isoformat()

            # 1-3 ventes par jour
            for _ in range(random.randint(1, 3)):
                transactions.create(demo_user.id, {
                    "date": day,
                    "type": "income",
                    "category": random.choice(income_categories),
                    "base": random.randint(500, 20000),
                })

            # Dépenses 2-3 fois par semaine
            if random.random() < 0.3:
                transactions.create(demo_user.id, {
                    "date": day,
                    "type": "expense",
                    "category": random.choice(expense_categories),
                    "base": random.randint(1000, 5000),
                    "employee": random.choice(employees),
                })

            # Avances et remboursements occasionnels
            if random.random() < 0.1:
                debts.create(demo_user.id, {
                    "date": day,
                    "employee": random.choice(employees),
                    "kind": random.choice(["advance", "repay"]),
                    "amount": random.randint(100, 1500),
                })

        print("✅ Données de démo générées avec succès!")
        print(f"👤 Utilisateur de démo: {DEMO_EMAIL} / {DEMO_PASSWORD}")
    finally:
        db.close()

if __name__ == "__main__":
    generate_test_data()
