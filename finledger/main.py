# FINLEDGER/backend/finledger/main.py

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from finledger import config
from finledger.routes import users, settings, transactions, debts, dashboard, admin
from finledger.database import check_connection, create_tables
from finledger.errors import LedgerError
import logging
import datetime
import sys
import fastapi
import sqlalchemy

# Configuration du logging
logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Démarrage de l'API Finledger...")

    if check_connection():
        logger.info("✅ Connexion à la base de données établie")
        create_tables()
    else:
        logger.error("❌ Impossible de se connecter à la base de données")

    yield

    logger.info("👋 Arrêt de l'API Finledger")

app = FastAPI(
    title="Finledger API",
    description="Registre financier par compte : transactions, taxes et dettes des employés",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "users",
            "description": "Inscription, connexion et suppression de compte"
        },
        {
            "name": "settings",
            "description": "Devise, taux de taxe et plafond mensuel"
        },
        {
            "name": "transactions",
            "description": "Revenus et dépenses avec taxe calculée"
        },
        {
            "name": "debts",
            "description": "Avances et remboursements des employés, soldes"
        },
        {
            "name": "dashboard",
            "description": "Tableau de bord synthétique"
        },
        {
            "name": "admin",
            "description": "Sauvegardes (X-Admin-Token)"
        }
    ]
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    """Erreurs métier typées -> {"error": CODE, "detail": ..., "field": ...}"""
    if exc.status_code >= 500:
        logger.error(f"❌ {exc.code} sur {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Corps illisible ou non numérique -> INVALID_INPUT"""
    return JSONResponse(
        status_code=400,
        content={
            "error": "INVALID_INPUT",
            "detail": jsonable_encoder(exc.errors()),
            "field": None
        }
    )

# Inclusion des routeurs
app.include_router(users.router)
app.include_router(settings.router)
app.include_router(transactions.router)
app.include_router(debts.router)
app.include_router(dashboard.router)
app.include_router(admin.router)

@app.get("/")
def root():
    """
    Racine de l'API - Informations générales
    """
    return {
        "ok": True,
        "service": "finledger-api",
        "version": app.version,
        "environment": config.ENVIRONMENT,
        "documentation": {
            "swagger": "/docs",
            "redoc": "/redoc"
        },
        "endpoints": {
            "users": "/users",
            "settings": "/settings",
            "transactions": "/transactions",
            "debts": "/debts",
            "dashboard": "/dashboard",
            "docs": "/docs"
        },
        "health_check": "/health"
    }

@app.get("/health")
def health_check():
    """
    Endpoint de santé pour le monitoring
    """
    db_status = check_connection()

    return {
        "status": "healthy" if db_status else "unhealthy",
        "database": "connected" if db_status else "disconnected",
        "version": app.version,
        "timestamp": datetime.datetime.now().isoformat()
    }

@app.get("/info")
def info():
    """
    Informations détaillées sur l'API
    """
    return {
        "name": app.title,
        "description": app.description,
        "version": app.version,
        "python_version": sys.version,
        "fastapi_version": fastapi.__version__,
        "sqlalchemy_version": sqlalchemy.__version__,
        "environment": config.ENVIRONMENT
    }
