# FINLEDGER/backend/finledger/routes/admin.py : sauvegardes protégées par X-Admin-Token

import hmac
import logging

from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.responses import FileResponse, JSONResponse
from sqlalchemy.orm import Session
from typing import Optional
from finledger import config
from finledger.database import get_db
from finledger.errors import NotFoundError
from finledger.services.backup_service import export_snapshot
from finledger.services.ledger_store import LedgerStore

logger = logging.getLogger(__name__)

def admin_only(x_admin_token: Optional[str] = Header(None)):
    """Un ADMIN_TOKEN vide désactive les sauvegardes"""
    if not config.ADMIN_TOKEN or not x_admin_token or not hmac.compare_digest(
        x_admin_token, config.ADMIN_TOKEN
    ):
        raise HTTPException(status_code=401, detail="UNAUTHORIZED")

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(admin_only)])

@router.get("/backup/json")
def backup_json(db: Session = Depends(get_db)):
    """Export JSON de toutes les tables (sans empreintes de mot de passe)"""
    snapshot = LedgerStore(db).read(export_snapshot)
    logger.info(f"📦 Export JSON: {len(snapshot['users'])} comptes")
    return JSONResponse(
        content=snapshot,
        headers={"Content-Disposition": 'attachment; filename="backup.json"'}
    )

@router.get("/backup/sqlite")
def backup_sqlite():
    """Téléchargement du fichier SQLite"""
    path = config.sqlite_path()
    if path is None or not path.exists():
        raise NotFoundError("Aucun fichier SQLite à télécharger")
    return FileResponse(path.resolve(), filename="data.db", media_type="application/octet-stream")
