from datetime import timedelta

from clinic_queue.core.security import create_access_token, verify_token


class TestAuthentication:

    def test_missing_token(self, client):
        response = client.get("/api/queue/D1")
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_invalid_token(self, client):
        headers = {"Authorization": "Bearer invalid_token"}

        response = client.get("/api/queue/D1", headers=headers)
        assert response.status_code == 401

    def test_expired_token(self, client):
        token = create_access_token({"sub": "U1", "role": "patient"}, timedelta(minutes=-5))
        headers = {"Authorization": f"Bearer {token}"}

        response = client.get("/api/queue/D1", headers=headers)
        assert response.status_code == 401

    def test_unknown_role_claim(self, client):
        token = create_access_token({"sub": "U1", "role": "janitor"})
        headers = {"Authorization": f"Bearer {token}"}

        response = client.get("/api/queue/D1", headers=headers)
        assert response.status_code == 401

    def test_missing_subject(self, client):
        token = create_access_token({"role": "patient"})
        headers = {"Authorization": f"Bearer {token}"}

        response = client.get("/api/queue/D1", headers=headers)
        assert response.status_code == 401

    def test_valid_token(self, client, auth_headers):
        response = client.get("/api/queue/D1", headers=auth_headers("U9", "patient"))
        assert response.status_code == 200

    def test_verify_token_round_trip(self):
        token = create_access_token({"sub": "U1", "role": "doctor", "email": "u1@example.com"})

        payload = verify_token(token)
        assert payload.sub == "U1"
        assert payload.role == "doctor"
        assert payload.token_type == "access"


class TestPublicEndpoints:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Process-Time" in response.headers

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["endpoints"]["queue"] == "/api/join-queue"

    def test_unknown_route(self, client):
        response = client.get("/api/nothing-here")
        assert response.status_code == 404
        assert response.json()["error"] == "Not Found"
