# FINLEDGER/backend/tests/conftest.py : configuration pour les tests

import itertools
import os
import sys
from datetime import datetime, timedelta
from pathlib import Path

# Ajoute le dossier parent au PYTHONPATH
BASE_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(BASE_DIR))

# Avant tout import de finledger : base de test et hachage rapide
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from finledger.main import app
from finledger.database import Base, build_engine, get_db
from finledger.models.models import User
from finledger.services.ledger_store import LedgerStore, TenantLockRegistry
from finledger.services.settings_repository import SettingsRepository


class StepClock:
    """Horloge de test : avance d'une seconde à chaque lecture"""

    def __init__(self, start=datetime(2024, 1, 1, 8, 0, 0)):
        self.current = start

    def __call__(self):
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def db_engine(tmp_path):
    """Une base SQLite fichier par test (les threads ont chacun leur connexion)"""
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()

@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

@pytest.fixture
def db_session(session_factory):
    """Créer une session de base de données pour chaque test"""
    session = session_factory()
    yield session
    session.close()

@pytest.fixture
def locks():
    return TenantLockRegistry()

@pytest.fixture
def clock():
    return StepClock()

@pytest.fixture
def store(db_session, clock, locks):
    return LedgerStore(db_session, clock=clock, locks=locks)

@pytest.fixture
def make_tenant(db_session):
    """Crée un compte avec ses paramètres par défaut, éventuellement modifiés"""
    counter = itertools.count(1)

    def _make(**settings):
        user = User(email=f"tenant{next(counter)}@test.com", password_hash="x")
        db_session.add(user)
        db_session.flush()
        SettingsRepository.create_defaults(db_session, user.id)
        db_session.commit()
        if settings:
            SettingsRepository(LedgerStore(db_session)).update(user.id, settings)
        return user.id

    return _make

@pytest.fixture
def client(session_factory):
    """Client de test avec la base de données de test"""
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()

@pytest.fixture
def login(client):
    """Inscrit puis connecte un utilisateur, retourne les en-têtes d'autorisation"""
    def _login(email="test@example.com", password="Test123!"):
        client.post("/users/register", json={"email": email, "password": password})
        response = client.post("/users/login", json={"email": email, "password": password})
        assert response.status_code == 200
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _login
