# FINLEDGER/backend/finledger/errors.py

from typing import Optional


class LedgerError(Exception):
    """Erreur métier typée, renvoyée au client avec son code"""

    code = "LEDGER_ERROR"
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self):
        return {"error": self.code, "detail": self.message, "field": self.field}


class MissingFieldError(LedgerError):
    code = "MISSING_FIELD"


class InvalidTypeError(LedgerError):
    code = "INVALID_TYPE"


class InvalidKindError(LedgerError):
    code = "INVALID_KIND"


class InvalidInputError(LedgerError):
    code = "INVALID_INPUT"


class NotFoundError(LedgerError):
    code = "NOT_FOUND"
    status_code = 404


class ConflictError(LedgerError):
    code = "CONFLICT"
    status_code = 409


class StorageFailureError(LedgerError):
    code = "STORAGE_FAILURE"
    status_code = 500
