# FINLEDGER/backend/tests/test_dashboard.py : tableau de bord

import pytest

class TestDashboard:
    @pytest.fixture(autouse=True)
    def setup(self, client, login):
        self.client = client
        self.headers = login()
        self._add_test_data()

    def _add_test_data(self):
        """Ajouter des transactions et dettes de test (taux par défaut 15%)"""
        for payload in [
            {"date": "2024-05-10", "type": "income", "category": "Vente", "base": 1000},
            {"date": "2024-05-15", "type": "expense", "category": "Loyer", "base": 200},
            {"date": "2024-04-01", "type": "expense", "category": "Transport", "base": 100},
        ]:
            assert self.client.post("/transactions/", json=payload, headers=self.headers).status_code == 200
        for payload in [
            {"date": "2024-05-01", "employee": "A", "kind": "advance", "amount": 100},
            {"date": "2024-05-20", "employee": "A", "kind": "repay", "amount": 40},
        ]:
            assert self.client.post("/debts/", json=payload, headers=self.headers).status_code == 200

    def test_summary(self):
        response = self.client.get("/dashboard/?month=2024-05", headers=self.headers)
        assert response.status_code == 200
        data = response.json()

        assert data["currency"] == "ر.س"
        assert data["income"] == {"base": 1000.0, "tax": 150.0, "total": 1150.0, "count": 1}
        assert data["expense"] == {"base": 300.0, "tax": 45.0, "total": 345.0, "count": 2}
        assert data["net"] == 805.0
        assert data["tax_balance"] == 105.0
        assert data["outstanding_debt"] == 60.0
        assert data["expense_cap"] == {
            "month": "2024-05",
            "expenses": 230.0,
            "cap": 50000.0,
            "remaining": 49770.0,
            "exceeded": False
        }

    def test_cap_exceeded_is_reported_not_enforced(self):
        self.client.put("/settings/", json={"monthly_expense_cap": 100}, headers=self.headers)
        data = self.client.get("/dashboard/?month=2024-05", headers=self.headers).json()
        assert data["expense_cap"]["exceeded"] is True
        assert data["expense_cap"]["remaining"] == -130.0

    def test_period_filter(self):
        data = self.client.get("/dashboard/?date_from=2024-05-01&date_to=2024-05-31&month=2024-04",
                               headers=self.headers).json()
        assert data["expense"]["count"] == 1
        assert data["expense_cap"]["expenses"] == 115.0

    def test_invalid_month(self):
        response = self.client.get("/dashboard/?month=2024-13", headers=self.headers)
        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_INPUT"
