# FINLEDGER/backend/finledger/routes/transactions.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from finledger.models import models as db_models
from finledger.schemas import schemas
from finledger.database import get_db
from finledger.auth import get_current_user
from finledger.services.ledger_store import LedgerStore
from finledger.services.transaction_manager import TransactionManager

router = APIRouter(prefix="/transactions", tags=["transactions"])

@router.get("/", response_model=List[schemas.TransactionOut])
def get_transactions(
    type: Optional[str] = None,
    employee: Optional[str] = None,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Transactions du compte, triées par date puis création (décroissant)"""
    manager = TransactionManager(LedgerStore(db))
    return manager.list(
        current_user.id,
        transaction_type=type,
        employee=employee,
        date_from=date_from,
        date_to=date_to
    )

@router.post("/", response_model=schemas.TransactionOut)
def create_transaction(
    transaction: schemas.TransactionCreate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Créer une transaction ; tax et total sont calculés avec le taux du compte"""
    manager = TransactionManager(LedgerStore(db))
    return manager.create(current_user.id, transaction.model_dump())

@router.get("/{transaction_id}", response_model=schemas.TransactionOut)
def get_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Récupérer une transaction spécifique"""
    return TransactionManager(LedgerStore(db)).get(current_user.id, transaction_id)

@router.put("/{transaction_id}", response_model=schemas.TransactionOut)
def update_transaction(
    transaction_id: int,
    changes: schemas.TransactionUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Mise à jour partielle ; tax et total fournis par le client sont ignorés"""
    manager = TransactionManager(LedgerStore(db))
    return manager.update(current_user.id, transaction_id, changes.model_dump(exclude_unset=True))

@router.delete("/{transaction_id}", response_model=schemas.DeleteResult)
def delete_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    TransactionManager(LedgerStore(db)).delete(current_user.id, transaction_id)
    return {"ok": True}
