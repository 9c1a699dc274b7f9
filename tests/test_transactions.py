# FINLEDGER/backend/tests/test_transactions.py : API des transactions

import pytest

class TestTransactions:
    @pytest.fixture(autouse=True)
    def setup(self, client, login):
        self.client = client
        self.headers = login()
        self.other_headers = login(email="user2@test.com")

    def _create(self, headers=None, **overrides):
        payload = {"date": "2024-01-10", "type": "income", "category": "Vente", "base": 1000}
        payload.update(overrides)
        return self.client.post("/transactions/", json=payload, headers=headers or self.headers)

    # ========== CRÉATION ==========

    def test_create_transaction(self):
        """Taux par défaut 15% : 1000 -> 150 de taxe, 1150 au total"""
        response = self._create(employee="Sara", notes="Facture 12")
        assert response.status_code == 200
        data = response.json()
        assert data["tax"] == 150.0
        assert data["total"] == 1150.0
        assert data["base"] == 1000.0
        assert data["date"] == "2024-01-10"
        assert data["employee"] == "Sara"
        assert "created_at" in data

    def test_client_tax_is_ignored_on_create(self):
        response = self._create(tax=1, total=2)
        assert response.json()["tax"] == 150.0

    def test_missing_fields(self):
        response = self.client.post("/transactions/", json={"type": "income"}, headers=self.headers)
        assert response.status_code == 400
        assert response.json()["error"] == "MISSING_FIELD"

    def test_invalid_type(self):
        response = self._create(type="gift")
        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_TYPE"

    def test_non_numeric_base(self):
        response = self._create(base="mille")
        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_INPUT"

    # ========== MISE À JOUR ==========

    def test_update_rederives(self):
        tx_id = self._create().json()["id"]
        response = self.client.put(f"/transactions/{tx_id}", json={"base": 2000}, headers=self.headers)
        assert response.status_code == 200
        data = response.json()
        assert data["tax"] == 300.0
        assert data["total"] == 2300.0
        assert data["type"] == "income"

    def test_update_uses_current_rate(self):
        tx_id = self._create().json()["id"]
        self.client.put("/settings/", json={"tax_income_rate": 5}, headers=self.headers)

        response = self.client.put(f"/transactions/{tx_id}", json={"notes": "revu"}, headers=self.headers)
        assert response.json()["tax"] == 50.0
        assert response.json()["total"] == 1050.0

    def test_update_discards_tampered_totals(self):
        tx_id = self._create().json()["id"]
        response = self.client.put(f"/transactions/{tx_id}",
            json={"tax": 0, "total": 0}, headers=self.headers)
        assert response.json()["tax"] == 150.0
        assert response.json()["total"] == 1150.0

    def test_update_other_user_transaction(self):
        """Doit être 404 (pas trouvé), et la ligne reste intacte"""
        tx_id = self._create().json()["id"]
        response = self.client.put(f"/transactions/{tx_id}", json={"base": 1}, headers=self.other_headers)
        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"

        own = self.client.get(f"/transactions/{tx_id}", headers=self.headers).json()
        assert own["base"] == 1000.0

    # ========== SUPPRESSION ==========

    def test_delete_transaction(self):
        tx_id = self._create().json()["id"]
        response = self.client.delete(f"/transactions/{tx_id}", headers=self.headers)
        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert self.client.get(f"/transactions/{tx_id}", headers=self.headers).status_code == 404

    def test_delete_other_user_transaction(self):
        tx_id = self._create().json()["id"]
        response = self.client.delete(f"/transactions/{tx_id}", headers=self.other_headers)
        assert response.status_code == 404
        assert self.client.get(f"/transactions/{tx_id}", headers=self.headers).status_code == 200

    def test_delete_unknown_transaction(self):
        response = self.client.delete("/transactions/99999", headers=self.headers)
        assert response.status_code == 404

    # ========== LISTE ==========

    def test_list_order_and_filters(self):
        self._create(date="2024-01-01", employee="Sara")
        self._create(date="2024-01-20", type="expense", base=200)
        self._create(date="2024-02-05")

        data = self.client.get("/transactions/", headers=self.headers).json()
        assert [tx["date"] for tx in data] == ["2024-02-05", "2024-01-20", "2024-01-01"]

        expenses = self.client.get("/transactions/?type=expense", headers=self.headers).json()
        assert [tx["total"] for tx in expenses] == [230.0]

        sara = self.client.get("/transactions/?employee=sara", headers=self.headers).json()
        assert len(sara) == 1

        january = self.client.get("/transactions/?date_from=2024-01-01&date_to=2024-01-31",
                                  headers=self.headers).json()
        assert len(january) == 2

    def test_list_is_per_user(self):
        self._create()
        assert self.client.get("/transactions/", headers=self.other_headers).json() == []

    def test_invalid_filter(self):
        response = self.client.get("/transactions/?date_from=hier", headers=self.headers)
        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_INPUT"

    # ========== VALEURS NULLES ET LIMITES ==========

    def test_null_in_update_keeps_value(self):
        tx_id = self._create(employee="Sara").json()["id"]
        response = self.client.put(f"/transactions/{tx_id}",
            json={"type": None, "employee": None, "base": 2000}, headers=self.headers)
        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "income"
        assert data["employee"] == "Sara"
        assert data["total"] == 2300.0

        cleared = self.client.put(f"/transactions/{tx_id}", json={"employee": ""}, headers=self.headers)
        assert cleared.json()["employee"] is None

    def test_base_too_large(self):
        response = self._create(base="12345678901234567.89")
        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_INPUT"
        assert response.json()["field"] == "base"
