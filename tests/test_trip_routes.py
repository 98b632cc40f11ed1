"""
Tests for trip lifecycle and fare quote endpoints.
"""

from unittest.mock import AsyncMock, patch

from config import settings
from models.trip_model import Trip
from utils.ai_utils import FALLBACK_PRICE


def start_trip(client):
    return client.post(
        "/api/trips/start",
        json={"passenger_id": 101, "driver_id": 201, "start_lat": 12.0, "start_lng": 8.59},
    )


class TestTripLifecycle:
    def test_start_creates_active_trip(self, client):
        response = start_trip(client)

        assert response.status_code == 200
        trip = Trip.objects(id=response.json()["id"]).first()
        assert trip.status == "active"
        assert trip.driver_id == 201

    def test_complete_trip(self, client):
        trip_id = start_trip(client).json()["id"]

        response = client.post(
            "/api/trips/complete",
            json={
                "trip_id": trip_id,
                "end_lat": 12.01,
                "end_lng": 8.6,
                "fare": 500,
                "distance": "1.4 km",
                "safety_score": 92,
            },
        )

        assert response.status_code == 200
        trip = response.json()["trip"]
        assert trip["status"] == "completed"
        assert trip["fare"] == 500
        assert trip["safety_score"] == 92
        assert trip["completed_at"] is not None

    def test_complete_unknown_trip(self, client):
        response = client.post(
            "/api/trips/complete", json={"trip_id": 999, "end_lat": 12.0, "end_lng": 8.59}
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Trip not found"

    def test_start_rejects_bad_coordinates(self, client):
        response = client.post(
            "/api/trips/start",
            json={"passenger_id": 101, "driver_id": 201, "start_lat": 120, "start_lng": 8.59},
        )
        assert response.status_code == 422


class TestPriceQuote:
    def test_quote_uses_scoring_service(self, client):
        quote = {"base_fare": 300, "demand_multiplier": 1.5, "total_fare": 450, "explanation": "Rush"}

        with patch(
            "routes.trip_routes.calculate_dynamic_price", AsyncMock(return_value=quote)
        ) as mock_price:
            response = client.post(
                "/api/trips/price",
                json={"origin": "Sabon Gari", "destination": "Kano Zoo", "demand_level": "high"},
            )

        assert response.status_code == 200
        assert response.json() == {"success": True, "price": quote}
        mock_price.assert_awaited_once_with("Sabon Gari", "Kano Zoo", "now", "high")

    def test_quote_falls_back_without_api_key(self, client, monkeypatch):
        monkeypatch.setattr(settings, "GEMINI_API_KEY", None)

        response = client.post(
            "/api/trips/price", json={"origin": "Sabon Gari", "destination": "Kano Zoo"}
        )

        assert response.status_code == 200
        assert response.json()["price"] == FALLBACK_PRICE

    def test_invalid_demand_level(self, client):
        response = client.post(
            "/api/trips/price",
            json={"origin": "A", "destination": "B", "demand_level": "extreme"},
        )
        assert response.status_code == 422
