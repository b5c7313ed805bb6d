"""HTTP API tests against an in-memory workspace."""

import inspect
from decimal import Decimal
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from listiq.api.app import app
from listiq.api.deps import get_workspace
from listiq.data.store import MemoryStateStore
from listiq.workspace import ComparisonWorkspace

REDFIN_URL = "https://www.redfin.com/TX/Austin/22-Oak-Ave-78702/home/2"


@pytest.fixture
def ws():
    return ComparisonWorkspace(MemoryStateStore())


@pytest.fixture
def client(ws):
    app.dependency_overrides[get_workspace] = lambda: ws
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def filled(ws, listings):
    ws.properties.extend(listings)
    return ws


class TestHealth:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}


class TestProperties:
    def test_add_detects_address(self, client):
        resp = client.post("/api/v1/properties", json={"url": REDFIN_URL, "price": 400000, "square_feet": 2000})
        assert resp.status_code == 201
        body = resp.json()
        assert body["address"] == "22 Oak Ave, Austin, TX 78702"
        assert body["source"] == "Redfin"
        assert body["price_per_sqft"] == "200.00"
        assert body["monthly_payment"] is None

    def test_add_missing_fields(self, client, ws):
        resp = client.post("/api/v1/properties", json={"url": REDFIN_URL, "price": 0, "square_feet": 2000})
        assert resp.status_code == 422
        assert "price" in resp.json()["detail"]
        assert ws.properties == []

    def test_list_sorted_with_flags(self, client, filled):
        body = client.get("/api/v1/properties", params={"sort": "price-desc"}).json()
        assert body["sort"] == "price-desc"
        assert body["total_count"] == 3
        assert [p["id"] for p in body["properties"]] == ["ranch", "condo", "cottage"]
        assert [p["is_best_value"] for p in body["properties"]] == [True, False, False]

    def test_list_bad_sort(self, client, filled):
        assert client.get("/api/v1/properties", params={"sort": "nope"}).status_code == 422

    def test_favorites_view(self, client, filled):
        client.post("/api/v1/properties/cottage/favorite")
        body = client.get("/api/v1/properties", params={"view": "favorites"}).json()
        assert [p["id"] for p in body["properties"]] == ["cottage"]
        assert body["favorite_count"] == 1
        assert body["properties"][0]["is_favorite"] is True

    def test_set_sort_persists(self, client, filled, ws):
        resp = client.put("/api/v1/properties/sort", json={"sort": "squareFeet-desc"})
        assert resp.json() == {"value": "squareFeet-desc", "label": "Square Feet: High to Low"}
        assert ws.sort.encode() == "squareFeet-desc"

    def test_sort_options(self, client):
        options = client.get("/api/v1/properties/sort-options").json()
        assert len(options) == 16
        assert options[0]["value"] == "price-asc"

    def test_update(self, client, filled):
        resp = client.put("/api/v1/properties/condo", json={"price": "310000"})
        assert resp.status_code == 200
        assert resp.json()["price"] == "310000.00"
        assert resp.json()["address"] == "1 Main St, Austin, TX 78701"

    def test_unknown_property(self, client):
        assert client.get("/api/v1/properties/nope").status_code == 404
        assert client.put("/api/v1/properties/nope", json={"price": 1}).status_code == 404
        assert client.delete("/api/v1/properties/nope").status_code == 404
        assert client.post("/api/v1/properties/nope/favorite").status_code == 404

    def test_delete(self, client, filled):
        assert client.delete("/api/v1/properties/condo").status_code == 204
        assert [p.id for p in filled.properties] == ["ranch", "cottage"]

    def test_bulk_remove(self, client, filled):
        resp = client.post("/api/v1/properties/remove", json={"ids": ["condo", "ranch", "ghost"]})
        assert resp.json() == {"removed": 2}


class TestMortgageAndComparison:
    def test_payment_calculator(self, client):
        resp = client.post("/api/v1/comparison/payment", json={
            "price": 300000, "down_payment_pct": 20, "interest_rate": 6.5, "annual_taxes": 3000,
        })
        body = resp.json()
        assert body["principal"] == "240000.00"
        assert body["monthly_taxes"] == "250.00"
        assert body["monthly_insurance"] == "125.00"
        parts = sum(Decimal(body[k]) for k in ("monthly_mortgage", "monthly_taxes", "monthly_insurance"))
        assert Decimal(body["total_monthly"]) == parts

    def test_zero_rate(self, client):
        resp = client.post("/api/v1/comparison/payment", json={
            "price": 120000, "down_payment_pct": 0, "interest_rate": 0, "loan_term_years": 10,
        })
        assert resp.json()["monthly_mortgage"] == "1000.00"
        assert resp.json()["total_monthly"] == "1050.00"

    def test_payment_rejects_bad_input(self, client):
        resp = client.post("/api/v1/comparison/payment", json={"price": 1, "down_payment_pct": 150})
        assert resp.status_code == 422

    def test_settings_round_trip(self, client, filled):
        assert client.get("/api/v1/mortgage/settings").json()["enabled"] is False
        resp = client.put("/api/v1/mortgage/settings", json={
            "enabled": True, "interest_rate": 6.5, "down_payment_pct": 20, "loan_term_years": 30,
        })
        assert resp.status_code == 200
        assert filled.mortgage.enabled is True

        body = client.get("/api/v1/comparison").json()
        assert body["mortgage_enabled"] is True
        assert body["best_value_id"] == "ranch"
        assert body["best_price_per_sqft"] == "200.00"
        assert body["lowest_payment_id"] == "cottage"

    def test_settings_out_of_range(self, client):
        resp = client.put("/api/v1/mortgage/settings", json={"loan_term_years": 0})
        assert resp.status_code == 422

    def test_empty_comparison(self, client):
        body = client.get("/api/v1/comparison").json()
        assert body["property_count"] == 0
        assert body["best_value_id"] is None


class TestSearches:
    def test_save_and_conflict(self, client, filled):
        first = client.post("/api/v1/searches", json={"name": "Austin"})
        assert first.status_code == 201
        assert first.json()["property_count"] == 3

        conflict = client.post("/api/v1/searches", json={"name": "austin"})
        assert conflict.status_code == 409
        assert conflict.json()["detail"]["existing_id"] == first.json()["id"]

        overwrite = client.post("/api/v1/searches", json={"name": "Austin", "overwrite": True})
        assert overwrite.status_code == 201
        assert overwrite.json()["id"] == first.json()["id"]
        assert len(client.get("/api/v1/searches").json()) == 1

    def test_blank_name(self, client):
        assert client.post("/api/v1/searches", json={"name": " "}).status_code == 422

    def test_share_then_import_link(self, client, filled):
        search_id = client.post("/api/v1/searches", json={"name": "Austin"}).json()["id"]
        shared = client.get(f"/api/v1/searches/{search_id}/share").json()
        assert shared["filename"] == "austin-shared-search.json"
        assert shared["url"].endswith("?shared=" + shared["code"])

        filled.clear_properties()
        resp = client.post("/api/v1/searches/import", json={"payload": shared["code"], "from_link": True})
        assert resp.status_code == 201
        assert resp.json()["name"] == "Austin (Shared)"
        assert len(filled.properties) == 3

    def test_import_bad_payload(self, client):
        resp = client.post("/api/v1/searches/import", json={"payload": "garbage"})
        assert resp.status_code == 422
        assert resp.json()["detail"] == "Invalid import code or data format"

    def test_load_and_delete(self, client, filled):
        search_id = client.post("/api/v1/searches", json={"name": "Austin"}).json()["id"]
        filled.clear_properties()
        assert client.post(f"/api/v1/searches/{search_id}/load").status_code == 200
        assert len(filled.properties) == 3
        assert client.delete(f"/api/v1/searches/{search_id}").status_code == 204
        assert client.get(f"/api/v1/searches/{search_id}").status_code == 404

    def test_unknown_search(self, client):
        assert client.post("/api/v1/searches/nope/load").status_code == 404
        assert client.delete("/api/v1/searches/nope").status_code == 404
        assert client.get("/api/v1/searches/nope/share").status_code == 404


class TestSummary:
    def test_fallback_without_key(self, client, filled):
        with patch("listiq.data.summary.settings") as mock_settings:
            mock_settings.anthropic_api_key = ""
            body = client.post("/api/v1/summary").json()
        assert body["used_ai"] is False
        assert body["property_count"] == 3
        assert body["text"].startswith("Comparing 3 properties")


def test_workspace_routes_run_off_the_event_loop():
    # The store is synchronous; these handlers must be plain functions so
    # FastAPI runs them in its threadpool.
    for route in app.routes:
        path = getattr(route, "path", "")
        if path.startswith(("/api/v1/properties", "/api/v1/comparison", "/api/v1/mortgage", "/api/v1/searches")):
            assert not inspect.iscoroutinefunction(route.endpoint), path
