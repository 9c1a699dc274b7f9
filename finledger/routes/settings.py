# FINLEDGER/backend/finledger/routes/settings.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from finledger.auth import get_current_user
from finledger.database import get_db
from finledger.models import models as db_models
from finledger.schemas import schemas
from finledger.services.ledger_store import LedgerStore
from finledger.services.settings_repository import SettingsRepository

router = APIRouter(prefix="/settings", tags=["settings"])

@router.get("/", response_model=schemas.SettingsOut)
def get_settings(
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Paramètres du compte (devise, taux de taxe, plafond, vocabulaires)"""
    return SettingsRepository(LedgerStore(db)).get(current_user.id)

@router.put("/", response_model=schemas.SettingsOut)
def update_settings(
    changes: schemas.SettingsUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Mise à jour partielle : les champs omis gardent leur valeur"""
    repository = SettingsRepository(LedgerStore(db))
    return repository.update(current_user.id, changes.model_dump(exclude_unset=True))
