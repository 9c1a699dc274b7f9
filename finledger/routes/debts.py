# FINLEDGER/backend/finledger/routes/debts.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Dict, List, Optional
from finledger.models import models as db_models
from finledger.schemas import schemas
from finledger.database import get_db
from finledger.auth import get_current_user
from finledger.services.debt_manager import DebtManager
from finledger.services.ledger_store import LedgerStore

router = APIRouter(prefix="/debts", tags=["debts"])

@router.get("/", response_model=List[schemas.DebtOut])
def get_debts(
    employee: Optional[str] = None,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Historique des dettes, du plus ancien au plus récent"""
    manager = DebtManager(LedgerStore(db))
    return manager.list(current_user.id, employee=employee, date_from=date_from, date_to=date_to)

@router.get("/balances", response_model=Dict[str, schemas.EmployeeBalance])
def get_balances(
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Solde par employé (avances - remboursements)"""
    return DebtManager(LedgerStore(db)).balances(current_user.id)

@router.post("/", response_model=schemas.DebtOut)
def create_debt(
    debt: schemas.DebtCreate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    return DebtManager(LedgerStore(db)).create(current_user.id, debt.model_dump())

@router.get("/{debt_id}", response_model=schemas.DebtOut)
def get_debt(
    debt_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    return DebtManager(LedgerStore(db)).get(current_user.id, debt_id)

@router.put("/{debt_id}", response_model=schemas.DebtOut)
def update_debt(
    debt_id: int,
    changes: schemas.DebtUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Mise à jour partielle ; delta est toujours recalculé"""
    manager = DebtManager(LedgerStore(db))
    return manager.update(current_user.id, debt_id, changes.model_dump(exclude_unset=True))

@router.delete("/{debt_id}", response_model=schemas.DeleteResult)
def delete_debt(
    debt_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    DebtManager(LedgerStore(db)).delete(current_user.id, debt_id)
    return {"ok": True}
