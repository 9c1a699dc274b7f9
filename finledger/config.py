# FINLEDGER/backend/finledger/config.py

import os
from dotenv import load_dotenv
from pathlib import Path

# Trouve le chemin absolu du dossier contenant ce fichier (finledger/)
BASE_DIR = Path(__file__).parent.absolute()
env_path = BASE_DIR / '.env'

# Charge les variables depuis le fichier .env
if env_path.exists():
    load_dotenv(dotenv_path=env_path)
    print(f"✅ Fichier .env chargé depuis: {env_path}")

# ============================================
# CONFIGURATION ENVIRONNEMENT
# ============================================
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# ============================================
# CONFIGURATION BASE DE DONNÉES
# ============================================
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data.db")

# ============================================
# CONFIGURATION JWT / AUTH
# ============================================
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-secret")
if SECRET_KEY == "change-me-secret" and ENVIRONMENT == "production":
    raise ValueError("SECRET_KEY must be changed in production")

ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "10080"))  # 7 jours
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# Jeton pour les endpoints de sauvegarde (vide = désactivés)
ADMIN_TOKEN = os.getenv("ADMIN_TOKEN", "")

# ============================================
# PARAMÈTRES PAR DÉFAUT D'UN NOUVEAU COMPTE
# ============================================
DEFAULT_SETTINGS = {
    "currency": os.getenv("DEFAULT_CURRENCY", "ر.س"),
    "tax_income_rate": os.getenv("DEFAULT_TAX_INCOME_RATE", "15.0"),
    "tax_expense_rate": os.getenv("DEFAULT_TAX_EXPENSE_RATE", "15.0"),
    "monthly_expense_cap": os.getenv("DEFAULT_MONTHLY_EXPENSE_CAP", "50000.0"),
}

# ============================================
# CONFIGURATION AWS (pour les backups)
# ============================================
AWS_CONFIG = {
    "access_key_id": os.getenv("AWS_ACCESS_KEY_ID", ""),
    "secret_access_key": os.getenv("AWS_SECRET_ACCESS_KEY", ""),
    "region": os.getenv("AWS_REGION", "me-south-1"),
    "bucket_name": os.getenv("AWS_BUCKET_NAME", "finledger-backups"),
    "enabled": all([
        os.getenv("AWS_ACCESS_KEY_ID"),
        os.getenv("AWS_SECRET_ACCESS_KEY"),
        os.getenv("AWS_BUCKET_NAME")
    ])
}

# ============================================
# CONFIGURATION BACKUP
# ============================================
BACKUP_CONFIG = {
    "backup_dir": os.getenv("BACKUP_DIR", "./backups"),
    "retention_days": int(os.getenv("BACKUP_RETENTION_DAYS", "30")),
    "enabled": os.getenv("BACKUP_ENABLED", "true").lower() == "true"
}

# ============================================
# CONFIGURATION CORS (Frontend)
# ============================================
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

# ============================================
# LOGGING
# ============================================
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE", "./logs/finledger.log")

# ============================================
# FONCTIONS UTILITAIRES
# ============================================
def is_production():
    """Vérifie si on est en production"""
    return ENVIRONMENT == "production"

def is_sqlite(url: str = None):
    """Vérifie si la base configurée est un fichier SQLite"""
    return (url or DATABASE_URL).startswith("sqlite")

def sqlite_path(url: str = None):
    """Chemin du fichier SQLite (None pour une base en mémoire ou non SQLite)"""
    url = url or DATABASE_URL
    if not is_sqlite(url):
        return None
    path = url.split(":///", 1)[-1]
    if not path or path == ":memory:":
        return None
    return Path(path)
