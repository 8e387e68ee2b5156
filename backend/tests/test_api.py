"""Health check, envelope and error-handling tests."""

from fastapi.testclient import TestClient


class TestHealth:
    def test_health(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Mesa Feliz API is running"
        assert "timestamp" in data
        assert data["environment"] == "test"

    def test_security_headers(self, client: TestClient):
        response = client.get("/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"


class TestErrorEnvelope:
    def test_unknown_route_is_404_envelope(self, client: TestClient):
        response = client.get("/api/no-such-thing")
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Endpoint not found"}

    def test_missing_table_is_404(self, client: TestClient):
        response = client.get("/api/tables/does-not-exist")
        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Table not found"

    def test_request_validation_error_is_400(self, client: TestClient):
        response = client.post("/api/auth/customer/login", json={"email": "not-an-email"})
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert "email" in body["error"]

    def test_success_envelope_omits_empty_keys(self, client: TestClient, table):
        response = client.get(f"/api/tables/{table.id}")
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert "error" not in body
        assert "message" not in body

    def test_database_error_is_generic_500(self, client: TestClient, monkeypatch):
        from sqlalchemy.exc import OperationalError

        from app.services.table_service import TableService

        def broken(self, table_id):
            raise OperationalError("SELECT 1", {}, Exception("database is locked"))

        monkeypatch.setattr(TableService, "get_table", broken)
        response = client.get("/api/tables/abc")
        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Internal server error"}

    def test_unexpected_error_is_generic_500(self, client: TestClient, monkeypatch):
        from app.services.table_service import TableService

        def broken(self, table_id):
            raise RuntimeError("boom")

        monkeypatch.setattr(TableService, "get_table", broken)
        response = client.get("/api/tables/abc")
        assert response.status_code == 500
        assert response.json()["error"] == "Internal server error"
