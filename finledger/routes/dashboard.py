# FINLEDGER/backend/finledger/routes/dashboard.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional
from finledger.database import get_db
from finledger.auth import get_current_user
from finledger.models import models as db_models
from finledger.schemas import schemas
from finledger.services.dashboard_service import DashboardService
from finledger.services.ledger_store import LedgerStore

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

@router.get("/", response_model=schemas.DashboardSummary)
def dashboard_summary(
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    month: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Tableau de bord financier - peut être filtré par période"""
    service = DashboardService(LedgerStore(db), current_user.id)
    return service.summary(date_from=date_from, date_to=date_to, month=month)
