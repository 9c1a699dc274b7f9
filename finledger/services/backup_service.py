# FINLEDGER/backend/finledger/services/backup_service.py : export complet des données

import gzip
import json
from datetime import date, datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List

from sqlalchemy import inspect, select
from sqlalchemy.orm import Session

from finledger.models.models import Debt, Settings, Transaction, User

# Les empreintes de mot de passe ne sortent jamais de la base
EXCLUDED_COLUMNS = {"users": {"password_hash"}}


def _json_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def _rows(db: Session, model) -> List[Dict[str, Any]]:
    mapper = inspect(model)
    excluded = EXCLUDED_COLUMNS.get(model.__tablename__, set())
    columns = [column.key for column in mapper.columns if column.key not in excluded]
    primary_key = mapper.primary_key[0]
    rows = db.execute(select(model).order_by(primary_key)).scalars().all()
    return [{key: _json_value(getattr(row, key)) for key in columns} for row in rows]


def export_snapshot(db: Session) -> Dict[str, Any]:
    """Instantané JSON de toutes les tables"""
    return {
        "users": _rows(db, User),
        "settings": _rows(db, Settings),
        "transactions": _rows(db, Transaction),
        "debts": _rows(db, Debt),
        "exported_at": datetime.now(timezone.utc).isoformat(),
    }


def write_snapshot(snapshot: Dict[str, Any], path: Path) -> Path:
    """Écrit l'instantané compressé (gzip)"""
    path.parent.mkdir(parents=True, exist_ok=True)
    with gzip.open(path, "wt", encoding="utf-8") as f:
        json.dump(snapshot, f, ensure_ascii=False)
    return path
