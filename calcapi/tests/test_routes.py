"""
Tests for the calcdesk HTTP API.

Validates:
1. Each calculator endpoint returns the engine's figures
2. Engine errors map to 400, unknown formulas to 404, schema errors to 422
3. CSV schedule export
"""

import math

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from fastapi.testclient import TestClient

from calcapi.main import app
from calcapi.middleware.rate_limit import RateLimitMiddleware


@pytest.fixture
def client():
    return TestClient(app)


class TestHealth:

    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "calcdesk-api"}


class TestFormulaRoutes:

    def test_list(self, client):
        data = client.get("/api/formulas").json()
        assert data["total"] == 8
        assert "ohms_law" in [f["name"] for f in data["formulas"]]

    def test_list_by_category(self, client):
        data = client.get("/api/formulas", params={"category": "electrical"}).json()
        assert data["total"] == 1

    def test_get_one(self, client):
        data = client.get("/api/formulas/ohms_law").json()
        assert [v["name"] for v in data["variables"]] == ["voltage", "current", "resistance"]

    def test_get_unknown_404(self, client):
        assert client.get("/api/formulas/pythagoras").status_code == 404

    def test_solve(self, client):
        response = client.post(
            "/api/formulas/ohms_law/solve",
            json={"solve_for": "current", "values": {"voltage": 12, "resistance": 4}},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["value"] == pytest.approx(3.0)
        assert data["unit"] == "Amperes (A)"
        assert data["display"] == "3 A"

    def test_solve_zero_divisor_400(self, client):
        response = client.post(
            "/api/formulas/ohms_law/solve",
            json={"solve_for": "current", "values": {"voltage": 12, "resistance": 0}},
        )
        assert response.status_code == 400
        assert "resistance" in response.json()["detail"].lower()

    def test_solve_missing_value_400(self, client):
        response = client.post(
            "/api/formulas/density/solve",
            json={"solve_for": "density", "values": {"mass": 10}},
        )
        assert response.status_code == 400

    def test_solve_unknown_formula_404(self, client):
        response = client.post("/api/formulas/nope/solve", json={"solve_for": "x", "values": {}})
        assert response.status_code == 404


class TestNetworkRoutes:

    def test_subnet(self, client):
        response = client.post("/api/network/subnet", json={"ip_address": "192.168.1.1", "cidr": 24})
        assert response.status_code == 200
        data = response.json()
        assert data["subnet_mask"] == "255.255.255.0"
        assert data["network_address"] == "192.168.1.0"
        assert data["broadcast_address"] == "192.168.1.255"
        assert data["usable_hosts"] == 254
        assert data["host_range_start"] == "192.168.1.1"
        assert data["host_range_end"] == "192.168.1.254"

    def test_cidr_notation(self, client):
        response = client.post("/api/network/subnet", json={"ip_address": "10.1.2.3/8"})
        assert response.status_code == 200
        assert response.json()["network_address"] == "10.0.0.0"

    def test_conflicting_prefix_400(self, client):
        response = client.post("/api/network/subnet", json={"ip_address": "10.1.2.3/8", "cidr": 16})
        assert response.status_code == 400

    def test_missing_cidr_400(self, client):
        response = client.post("/api/network/subnet", json={"ip_address": "10.1.2.3"})
        assert response.status_code == 400

    def test_bad_address_400(self, client):
        response = client.post("/api/network/subnet", json={"ip_address": "300.1.1.1", "cidr": 24})
        assert response.status_code == 400

    def test_prefix_out_of_range_422(self, client):
        response = client.post("/api/network/subnet", json={"ip_address": "10.1.2.3", "cidr": 40})
        assert response.status_code == 422


class TestFinanceRoutes:

    def test_payoff(self, client):
        response = client.post(
            "/api/finance/payoff",
            json={"balance": 50000, "apr": 36, "monthly_payment": 2500},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["months_to_pay_off"] == 31
        assert data["duration"] == "2 years and 7 months"
        assert math.isfinite(data["total_interest"])

    def test_non_convergent_400(self, client):
        response = client.post(
            "/api/finance/payoff",
            json={"balance": 50000, "apr": 36, "monthly_payment": 1400},
        )
        assert response.status_code == 400
        assert "never be paid off" in response.json()["detail"]

    def test_negative_balance_422(self, client):
        response = client.post(
            "/api/finance/payoff",
            json={"balance": -5, "apr": 10, "monthly_payment": 100},
        )
        assert response.status_code == 422

    def test_emi(self, client):
        response = client.post(
            "/api/finance/emi",
            json={"principal": 100000, "annual_rate": 12, "term_months": 12},
        )
        assert response.status_code == 200
        growth = 1.01 ** 12
        assert response.json()["monthly_payment"] == pytest.approx(100000 * 0.01 * growth / (growth - 1))

    def test_schedule_json(self, client):
        response = client.post(
            "/api/finance/schedule",
            json={"balance": 1200, "apr": 0, "monthly_payment": 100},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["payoff"]["months_to_pay_off"] == 12
        assert len(data["schedule"]) == 12
        assert data["schedule"][-1]["balance"] == 0

    def test_schedule_tiny_balance(self, client):
        response = client.post(
            "/api/finance/schedule",
            json={"balance": 0.0001, "apr": 0, "monthly_payment": 1e6},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["payoff"]["months_to_pay_off"] == 1
        assert data["payoff"]["duration"] == "1 month"
        assert len(data["schedule"]) == 1

    def test_schedule_csv(self, client):
        response = client.post(
            "/api/finance/schedule",
            params={"format": "csv"},
            json={"balance": 1200, "apr": 0, "monthly_payment": 100},
        )
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "attachment" in response.headers["content-disposition"]
        lines = response.text.strip().splitlines()
        assert lines[0].startswith("Month,Payment")
        assert lines[-1].startswith("TOTAL")


class TestMathRoutes:

    def test_combination(self, client):
        response = client.post("/api/math/combinatorics", json={"n": 10, "r": 3})
        assert response.status_code == 200
        data = response.json()
        assert data["result"] == pytest.approx(120)
        assert data["exact"] == "120"

    def test_permutation(self, client):
        response = client.post("/api/math/combinatorics", json={"n": 10, "r": 3, "kind": "permutation"})
        assert response.json()["exact"] == "720"

    def test_r_greater_than_n_400(self, client):
        response = client.post("/api/math/combinatorics", json={"n": 3, "r": 5})
        assert response.status_code == 400

    def test_quadratic_complex(self, client):
        response = client.post("/api/math/quadratic", json={"a": 1, "b": 0, "c": 1})
        assert response.status_code == 200
        data = response.json()
        assert data["nature"] == "complex"
        assert data["real_roots"] == []
        assert data["roots"][0]["imag"] == pytest.approx(1)
        assert data["roots"][1]["imag"] == pytest.approx(-1)

    def test_quadratic_zero_a_400(self, client):
        response = client.post("/api/math/quadratic", json={"a": 0, "b": 2, "c": 1})
        assert response.status_code == 400

    def test_determinant(self, client):
        response = client.post("/api/math/determinant", json={"matrix": [[6, 1, 1], [4, -2, 5], [2, 8, 7]]})
        assert response.status_code == 200
        data = response.json()
        assert data["size"] == "3x3"
        assert data["determinant"] == pytest.approx(-306)

    def test_overflowing_quadratic_400(self, client):
        response = client.post("/api/math/quadratic", json={"a": 1e-308, "b": 1e10, "c": 0})
        assert response.status_code == 400

    def test_overflowing_determinant_400(self, client):
        response = client.post("/api/math/determinant", json={"matrix": [[1e300, 0], [0, 1e300]]})
        assert response.status_code == 400

    def test_ragged_matrix_400(self, client):
        response = client.post("/api/math/determinant", json={"matrix": [[1, 2], [3]]})
        assert response.status_code == 400


class TestAgricultureRoutes:

    def test_fertilizer(self, client):
        response = client.post(
            "/api/agriculture/fertilizer",
            json={
                "area": 1,
                "rec_n": 120,
                "rec_p": 60,
                "rec_k": 40,
                "fertilizers": [
                    {"name": "Urea", "n": 46},
                    {"name": "DAP", "n": 18, "p": 46},
                    {"name": "MOP", "k": 60},
                ],
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["unit"] == "kg"
        amounts = {f["name"]: f["amount"] for f in data["fertilizers"]}
        assert amounts["DAP"] == pytest.approx(60 / 0.46)
        assert amounts["MOP"] == pytest.approx(40 / 0.6)

    def test_no_products_422(self, client):
        response = client.post(
            "/api/agriculture/fertilizer",
            json={"area": 1, "rec_n": 10, "rec_p": 0, "rec_k": 0, "fertilizers": []},
        )
        assert response.status_code == 422


class TestRateLimit:

    def test_limit_enforced(self):
        from fastapi import FastAPI

        limited = FastAPI()
        limited.add_middleware(RateLimitMiddleware, requests_per_minute=2)

        @limited.get("/api/ping")
        async def ping():
            return {"ok": True}

        client = TestClient(limited)
        assert client.get("/api/ping").status_code == 200
        assert client.get("/api/ping").status_code == 200
        response = client.get("/api/ping")
        assert response.status_code == 429
        assert "Rate limit" in response.json()["detail"]
