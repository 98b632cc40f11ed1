"""
Tests for registration and user lookup endpoints.
"""

from utils.jwt_utils import verify_token


def register(client, **overrides):
    payload = {"role": "driver", "name": "Ibrahim Kano", "phone": "08031234567"}
    payload.update(overrides)
    return client.post("/api/auth/register", json=payload)


class TestRegister:
    def test_register_returns_numeric_id_and_token(self, client):
        response = register(client, nin="12345678901", address="Tarauni, Kano")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert isinstance(body["id"], int)
        assert body["user"]["role"] == "driver"
        assert body["user"]["nin"] == "12345678901"

        claims = verify_token(body["token"])
        assert claims["user_id"] == body["id"]
        assert claims["role"] == "driver"

    def test_ids_are_sequential(self, client):
        first = register(client, phone="08030000001").json()["id"]
        second = register(client, phone="08030000002", role="passenger").json()["id"]

        assert second == first + 1

    def test_duplicate_phone_is_rejected(self, client):
        register(client)
        response = register(client, name="Someone Else")

        assert response.status_code == 400
        assert "already registered" in response.json()["detail"]

    def test_unknown_role_is_rejected(self, client):
        response = register(client, role="conductor")
        assert response.status_code == 422


class TestUserLookup:
    def test_lookup_by_phone(self, client):
        register(client, role="passenger", name="Aisha Bello", phone="08039876543")

        response = client.get("/api/users/08039876543")

        assert response.status_code == 200
        assert response.json()["name"] == "Aisha Bello"

    def test_unknown_phone(self, client):
        response = client.get("/api/users/00000000000")

        assert response.status_code == 404
        assert response.json()["detail"] == "User not found"
