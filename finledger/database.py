# FINLEDGER/backend/finledger/database.py

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import declarative_base, sessionmaker
from finledger.config import DATABASE_URL, is_sqlite, sqlite_path
import logging

logger = logging.getLogger(__name__)


def build_engine(url: str):
    """Crée un moteur SQLAlchemy adapté au type de base"""
    if is_sqlite(url):
        path = sqlite_path(url)
        if path is not None:
            path.parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},  # FastAPI sert les routes depuis un threadpool
            echo=False
        )

        # SQLite n'applique les clés étrangères (ON DELETE CASCADE) que sur demande
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(
        url,
        pool_size=5,  # Nombre de connexions permanentes
        max_overflow=10,  # Connexions supplémentaires temporaires
        pool_pre_ping=True,  # Vérifie que la connexion est vivante avant utilisation
        echo=False
    )


# Création de la connexion à la base de données
engine = build_engine(DATABASE_URL)

# Session pour interagir avec la base
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

# Base pour créer les modèles (tables)
Base = declarative_base()

# Dependency pour FastAPI
def get_db():
    """
    Dépendance FastAPI pour obtenir une session de base de données.
    À utiliser dans les routes avec: db: Session = Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def create_tables(bind=None):
    """Crée toutes les tables définies dans les modèles"""
    # Les modèles doivent être importés pour être enregistrés sur Base.metadata
    from finledger.models import models  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)
    logger.info("✅ Tables créées/vérifiées avec succès")

def check_connection(bind=None):
    """Vérifie que la connexion à la base fonctionne"""
    try:
        with (bind or engine).connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"❌ Erreur de connexion: {e}")
        return False
