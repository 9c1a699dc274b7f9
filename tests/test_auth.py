# FINLEDGER/backend/tests/test_auth.py : test pour l'authentification et les comptes

import pytest
import uuid
from sqlalchemy import func, select
from finledger.models.models import Debt, Settings, Transaction

class TestAuth:
    @pytest.fixture(autouse=True)
    def setup(self, client, login):
        self.client = client
        self.login = login
        self.test_email = "test@example.com"
        self.test_password = "Test123!"

    def _register(self, email=None, password=None, **extra):
        return self.client.post("/users/register", json={
            "email": email or self.test_email,
            "password": password or self.test_password,
            **extra
        })

    def test_register_user(self):
        """Test d'inscription utilisateur"""
        response = self._register(company_name="Boutique")
        assert response.status_code == 200
        data = response.json()
        assert data["email"] == self.test_email
        assert data["company_name"] == "Boutique"
        assert "id" in data
        assert "password_hash" not in data

    def test_register_normalizes_email(self):
        response = self._register(email="  Test@Example.COM ")
        assert response.json()["email"] == "test@example.com"

    def test_register_duplicate_email(self):
        """Test d'inscription avec email déjà utilisé"""
        unique_email = f"test_{uuid.uuid4()}@test.com"

        assert self._register(email=unique_email).status_code == 200
        response = self._register(email=unique_email.upper())
        assert response.status_code == 409
        assert response.json()["error"] == "CONFLICT"

    def test_register_missing_password(self):
        response = self._register(password=" ")
        assert response.status_code == 400
        assert response.json()["error"] == "MISSING_FIELD"

    def test_register_creates_default_settings(self):
        headers = self.login()
        response = self.client.get("/users/me", headers=headers)
        assert response.status_code == 200
        data = response.json()
        assert data["user"]["email"] == self.test_email
        assert data["settings"]["currency"] == "ر.س"
        assert data["settings"]["tax_income_rate"] == 15.0
        assert data["settings"]["tax_expense_rate"] == 15.0
        assert data["settings"]["monthly_expense_cap"] == 50000.0

    def test_login_success(self):
        """Test de connexion réussie"""
        self._register()
        response = self.client.post("/users/login", json={
            "email": self.test_email,
            "password": self.test_password
        })
        assert response.status_code == 200
        data = response.json()
        assert "access_token" in data
        assert data["token_type"] == "bearer"
        assert data["user"]["email"] == self.test_email

    def test_login_wrong_password(self):
        """Test de connexion avec mauvais mot de passe"""
        self._register()
        response = self.client.post("/users/login", json={
            "email": self.test_email,
            "password": "wrongpassword"
        })
        assert response.status_code == 401
        assert response.json()["detail"] == "INVALID_CREDENTIALS"

    def test_login_nonexistent_user(self):
        response = self.client.post("/users/login", json={
            "email": "nonexistent@test.com",
            "password": "password123"
        })
        assert response.status_code == 401

    def test_protected_route_without_token(self):
        """Test d'accès à une route protégée sans token"""
        response = self.client.get("/transactions/")
        assert response.status_code == 401

    def test_protected_route_with_invalid_token(self):
        headers = {"Authorization": "Bearer invalid_token"}
        response = self.client.get("/transactions/", headers=headers)
        assert response.status_code == 401
        assert response.json()["detail"] == "UNAUTHORIZED"

    def test_protected_route_with_valid_token(self):
        headers = self.login()
        response = self.client.get("/transactions/", headers=headers)
        assert response.status_code == 200
        assert response.json() == []

    def test_delete_account_cascades(self, db_session):
        """La suppression du compte emporte paramètres, transactions et dettes"""
        headers = self.login()
        user_id = self.client.get("/users/me", headers=headers).json()["user"]["id"]
        self.client.post("/transactions/", headers=headers, json={
            "date": "2024-01-10", "type": "income", "category": "Vente", "base": 100
        })
        self.client.post("/debts/", headers=headers, json={
            "date": "2024-01-10", "employee": "A", "kind": "advance", "amount": 10
        })

        response = self.client.delete("/users/me", headers=headers)
        assert response.status_code == 200
        assert response.json() == {"ok": True}

        # Le jeton ne correspond plus à aucun compte
        assert self.client.get("/users/me", headers=headers).status_code == 401
        for model in (Settings, Transaction, Debt):
            count = db_session.execute(
                select(func.count()).select_from(model).where(model.user_id == user_id)
            ).scalar()
            assert count == 0
