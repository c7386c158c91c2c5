import pytest

from loan_calc_web.app import app


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


class TestIndex:
    def test_defaults(self, client):
        response = client.get("/")
        assert response.status_code == 200
        body = response.get_data(as_text=True)
        assert "Loan Repayment Calculator" in body
        assert "$1,122.61" in body
        assert "Year 30" in body
        assert "120 rows. 240 more rows truncated." in body

    def test_full_schedule(self, client):
        response = client.post(
            "/",
            data={"principal": "250000", "rate": "3.5", "term": "30", "balloon": "0", "show_full_schedule": "1"},
        )
        assert "more rows truncated" not in response.get_data(as_text=True)

    def test_override(self, client):
        response = client.post(
            "/",
            data={"principal": "250000", "rate": "3.5", "term": "30", "balloon": "0", "override": "1", "payment": "2000"},
        )
        body = response.get_data(as_text=True)
        assert "$2,000.00" in body
        assert "Calculated repayment" not in body

    def test_payment_field_ignored_without_override(self, client):
        response = client.post(
            "/",
            data={"principal": "250000", "rate": "3.5", "term": "30", "balloon": "0", "payment": "2000"},
        )
        body = response.get_data(as_text=True)
        assert 'value="1122.61"' in body

    def test_invalid_input(self, client):
        response = client.post("/", data={"principal": "0", "rate": "3.5", "term": "30", "balloon": "0"})
        assert response.status_code == 200
        assert "Enter valid loan details to see the schedule." in response.get_data(as_text=True)


class TestAmortizationApi:
    def test_query_string(self, client):
        response = client.get("/api/amortization?principal=250000&rate=3.5&term=30")
        data = response.get_json()
        assert data["summary"]["computed_payment"] == 1122.61
        assert len(data["schedule"]) == 360
        assert data["chart"][0]["name"] == "Year 1"
        assert len(data["yearly"]) == 30

    def test_json_body_with_override(self, client):
        response = client.post(
            "/api/amortization",
            json={"principal": 250000, "rate": 3.5, "term": 30, "override": True, "payment": 2000},
        )
        data = response.get_json()
        assert data["summary"]["effective_payment"] == 2000.0
        assert data["summary"]["computed_payment"] == 1122.61
        assert data["summary"]["payments_made"] < 360

    def test_invalid_returns_empty_result(self, client):
        response = client.get("/api/amortization?principal=250000&rate=3.5&term=30&balloon=-1")
        assert response.status_code == 200
        data = response.get_json()
        assert data["summary"]["valid"] is False
        assert data["schedule"] == []
        assert data["chart"] == []
        assert data["summary"]["total_interest"] == 0.0

    def test_tiny_rate(self, client):
        response = client.get("/api/amortization?principal=1000&rate=1e-27&term=1")
        assert response.status_code == 200
        data = response.get_json()
        assert data["summary"]["valid"] is True
        assert data["summary"]["computed_payment"] == 83.33

    def test_non_object_json_body(self, client):
        response = client.post("/api/amortization", json=[1, 2])
        assert response.status_code == 200
        assert response.get_json()["summary"]["computed_payment"] == 1122.61

    def test_interest_shortfall_reported(self, client):
        response = client.get("/api/amortization?principal=1000&rate=12&term=1&override=1&payment=5")
        assert response.get_json()["summary"]["payment_covers_interest"] is False
