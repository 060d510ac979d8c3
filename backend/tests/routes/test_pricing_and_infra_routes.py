from __future__ import annotations

import pytest


@pytest.mark.parametrize(
    "tier, fee, net",
    [("Free", 3.0, 97.0), ("Professional", 2.5, 97.5), ("Teams", 2.25, 97.75)],
)
def test_booking_fee_by_tier(client, tier, fee, net):
    response = client.get("/api/v1/pricing/booking-fee", params={"price": "100.00", "tier": tier})

    assert response.status_code == 200
    data = response.json()
    assert data["gross"] == 100.0
    assert data["fee"] == fee
    assert data["net"] == net
    assert data["tier"] == tier


def test_booking_fee_defaults_to_free(client):
    response = client.get("/api/v1/pricing/booking-fee", params={"price": "50"})

    assert response.json()["tier"] == "Free"
    assert response.json()["fee"] == 1.5


def test_booking_fee_rejects_unknown_tier(client):
    response = client.get("/api/v1/pricing/booking-fee", params={"price": "50", "tier": "Gold"})

    assert response.status_code == 422


def test_payout_fee(client):
    response = client.get("/api/v1/pricing/payout-fee", params={"amount": "200"})

    assert response.status_code == 200
    assert response.json()["fee"] == 6.0
    assert response.json()["net"] == 194.0


def test_negative_amount_rejected(client):
    response = client.get("/api/v1/pricing/payout-fee", params={"amount": "-1"})

    assert response.status_code == 422


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["environment"] == "test"


def test_metrics_exposes_booking_counters(client):
    response = client.get("/metrics")

    assert response.status_code == 200
    assert "text/plain" in response.headers["content-type"]
    assert "safeseat_bookings_created_total" in response.text
    assert "safeseat_slot_conflicts_total" in response.text
