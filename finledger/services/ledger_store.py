# FINLEDGER/backend/finledger/services/ledger_store.py : accès cohérent aux registres d'un compte

import logging
import threading
from datetime import datetime
from typing import Callable, Dict, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from finledger.database import Base
from finledger.errors import NotFoundError, StorageFailureError
from finledger.models.models import Settings, utcnow

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TenantLockRegistry:
    """Un verrou par compte, créé à la demande"""

    def __init__(self):
        self._locks: Dict[int, threading.Lock] = {}
        self._guard = threading.Lock()

    def get(self, tenant_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(tenant_id)
            if lock is None:
                lock = self._locks[tenant_id] = threading.Lock()
            return lock


# Partagé par toutes les requêtes du processus
tenant_locks = TenantLockRegistry()


class LedgerStore:
    """
    Point d'accès unique des managers à la base.

    Toute lecture-modification-écriture d'un compte passe par
    with_tenant_lock : le verrou du compte est pris dans le processus, la ligne
    settings du compte est verrouillée (SELECT ... FOR UPDATE sous PostgreSQL),
    puis l'unité est validée d'un bloc ou annulée entièrement. Deux comptes
    différents n'attendent jamais l'un l'autre.
    """

    def __init__(self, db: Session, clock: Callable[[], datetime] = utcnow,
                 locks: Optional[TenantLockRegistry] = None):
        self.db = db
        self.clock = clock
        self.locks = locks or tenant_locks

    def now(self) -> datetime:
        return self.clock()

    def with_tenant_lock(self, tenant_id: int, fn: Callable[[Session], T]) -> T:
        lock = self.locks.get(tenant_id)
        if not lock.acquire(blocking=False):
            logger.debug(f"⏳ Attente du verrou du compte {tenant_id}")
            lock.acquire()
        try:
            return self._run_unit(tenant_id, fn)
        finally:
            lock.release()

    def _run_unit(self, tenant_id: int, fn: Callable[[Session], T]) -> T:
        db = self.db
        try:
            db.execute(
                select(Settings.user_id)
                .where(Settings.user_id == tenant_id)
                .with_for_update()
            )
            result = fn(db)
            db.commit()
            if isinstance(result, Base):
                db.refresh(result)
            return result
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"❌ Échec d'écriture pour le compte {tenant_id}: {e}")
            raise StorageFailureError("Erreur de stockage, opération annulée") from e
        except Exception:
            db.rollback()
            raise

    def read(self, fn: Callable[[Session], T], retries: int = 1) -> T:
        """Lecture seule, relancée en cas d'erreur transitoire"""
        attempt = 0
        while True:
            try:
                return fn(self.db)
            except OperationalError as e:
                self.db.rollback()
                if attempt >= retries:
                    logger.error(f"❌ Lecture impossible: {e}")
                    raise StorageFailureError("Erreur de stockage en lecture") from e
                attempt += 1
                logger.warning(f"⚠️ Lecture relancée après erreur transitoire: {e}")
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"❌ Lecture impossible: {e}")
                raise StorageFailureError("Erreur de stockage en lecture") from e

    def insert(self, db: Session, row):
        """Ajoute une ligne ; l'identifiant AUTOINCREMENT n'est jamais réutilisé"""
        db.add(row)
        try:
            db.flush()
        except IntegrityError as e:
            raise StorageFailureError("Violation d'intégrité à l'insertion") from e
        return row

    def get_owned(self, db: Session, model: Type[T], tenant_id: int, record_id: int,
                  label: str = "Enregistrement") -> T:
        """Ligne du compte, relue depuis la base ; NOT_FOUND si absente ou étrangère"""
        row = db.execute(
            select(model)
            .where(model.id == record_id, model.user_id == tenant_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if row is None:
            raise NotFoundError(f"{label} non trouvée")
        return row
