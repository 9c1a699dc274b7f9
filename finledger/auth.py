# FINLEDGER/backend/finledger/auth.py : mots de passe et jetons JWT

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from finledger import config
from finledger.database import get_db
from finledger.models import models as db_models

logger = logging.getLogger(__name__)

# auto_error=False : on renvoie nous-mêmes un 401 plutôt que le 403 par défaut
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Empreinte bcrypt du mot de passe"""
    salt = bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(data: dict, expires_minutes: Optional[int] = None) -> str:
    """Jeton d'accès signé ; data doit contenir 'sub' (id du compte)"""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or config.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    to_encode["exp"] = expire
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=config.ALGORITHM)


def _unauthorized():
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="UNAUTHORIZED",
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> db_models.User:
    """Dépendance FastAPI : le compte authentifié (l'identité du locataire)"""
    if credentials is None:
        raise _unauthorized()
    try:
        payload = jwt.decode(credentials.credentials, config.SECRET_KEY, algorithms=[config.ALGORITHM])
        user_id = int(payload["sub"])
    except (jwt.PyJWTError, KeyError, TypeError, ValueError) as e:
        logger.info(f"🔒 Jeton refusé: {e}")
        raise _unauthorized()

    user = db.get(db_models.User, user_id)
    if user is None:
        raise _unauthorized()
    return user
