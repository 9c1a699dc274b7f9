# FINLEDGER/backend/finledger/routes/users.py

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from finledger import auth
from finledger.errors import ConflictError, InvalidInputError, MissingFieldError
from finledger.models import models as db_models
from finledger.schemas.schemas import UserOut, UserCreate, UserLogin, Token, MeOut, DeleteResult
from finledger.database import get_db
from finledger.services.ledger_store import LedgerStore
from finledger.services.settings_repository import SettingsRepository
from finledger.services.validation import is_blank

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()

@router.post("/register", response_model=UserOut)
def register(user: UserCreate, db: Session = Depends(get_db)):
    """Créer un compte et ses paramètres par défaut dans la même transaction"""
    email = _normalize_email(user.email)
    if not email or is_blank(user.password):
        raise MissingFieldError("email et mot de passe requis", field="email" if not email else "password")
    if len(user.password.encode("utf-8")) > 72:
        raise InvalidInputError("Mot de passe trop long (72 octets max)", field="password")

    if db.query(db_models.User).filter(db_models.User.email == email).first():
        raise ConflictError("Email déjà utilisé", field="email")

    new_user = db_models.User(
        email=email,
        password_hash=auth.hash_password(user.password),
        company_name=(user.company_name or "").strip() or None
    )
    try:
        db.add(new_user)
        db.flush()
        SettingsRepository.create_defaults(db, new_user.id)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError("Email déjà utilisé", field="email") from e
    db.refresh(new_user)
    logger.info(f"👤 Nouveau compte {new_user.id}")
    return new_user

@router.post("/login", response_model=Token)
def login(user: UserLogin, db: Session = Depends(get_db)):
    db_user = db.query(db_models.User).filter(db_models.User.email == _normalize_email(user.email)).first()
    if not db_user or not auth.verify_password(user.password or "", db_user.password_hash):
        raise HTTPException(status_code=401, detail="INVALID_CREDENTIALS")
    token = auth.create_access_token({"sub": str(db_user.id), "email": db_user.email})
    return {"access_token": token, "token_type": "bearer", "user": db_user}

@router.get("/me", response_model=MeOut)
def me(
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_user)
):
    settings = SettingsRepository(LedgerStore(db)).get(current_user.id)
    return {"user": current_user, "settings": settings}

@router.delete("/me", response_model=DeleteResult)
def delete_account(
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_user)
):
    """Supprimer le compte : paramètres, transactions et dettes partent en cascade"""
    user_id = current_user.id
    LedgerStore(db).with_tenant_lock(user_id, lambda session: session.delete(current_user))
    logger.info(f"🗑️ Compte {user_id} supprimé")
    return {"ok": True}
