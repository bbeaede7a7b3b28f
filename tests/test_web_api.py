"""Tests for the validation HTTP API."""

import csv
import dataclasses
import io

import pytest

from web import create_app


@pytest.fixture
def client(env_config):
    """Create a test client for the app."""
    app = create_app(env_config, testing=True)
    with app.test_client() as client:
        yield client


ENTRIES = [
    {"gameId": "1000000001", "ticketTime": "2025-06-02T19:45:00-03:00", "ticketNumber": "T1", "chosenNumbers": [1, 2, 3]},
    {"gameId": "1000000001", "ticketTime": "2025-06-02T19:50:00-03:00", "ticketNumber": "T2"},
    {"gameId": "1000000002", "ticketTime": "02/06/2025 10:00:00", "ticketNumber": "T3"},
]
RECHARGES = [
    {"gameId": "1000000001", "rechargeId": "R1", "rechargeTime": "2025-06-02T19:30:00-03:00", "amount": 20},
]


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.get_json()
    assert data["status"] == "ok"
    assert data["calendar"]["holidays"] == ["01-01", "12-25"]
    assert data["calendar"]["no_draw_weekdays"] == [6]


def test_validate(client):
    response = client.post("/api/validate", json={"entries": ENTRIES, "recharges": RECHARGES})
    assert response.status_code == 200

    data = response.get_json()
    results = {r["ticketNumber"]: r for r in data["results"]}
    assert results["T1"]["verdict"] == "VALID"
    assert results["T1"]["boundRechargeId"] == "R1"
    assert results["T1"]["drawDay"] == "2025-06-02"
    assert results["T1"]["eligibleWindow"]["day2"] == "2025-06-03"
    assert results["T2"]["reasonCode"] == "INVALID_NOT_FIRST_TICKET_AFTER_RECHARGE"
    assert results["T3"]["reasonCode"] == "NO_ELIGIBLE_RECHARGE"
    assert data["stats"]["valid"] == 1
    assert data["stats"]["rechargeCount"] == 1


@pytest.mark.parametrize("recharges", [None, []])
def test_validate_without_recharge_data(client, recharges):
    response = client.post("/api/validate", json={"entries": ENTRIES, "recharges": recharges})
    data = response.get_json()
    assert {r["verdict"] for r in data["results"]} == {"UNKNOWN"}
    assert data["stats"]["unknown"] == len(ENTRIES)


@pytest.mark.parametrize("payload", [
    None,
    {"entries": "nope"},
    {"entries": [{"ticketTime": "2025-06-02T19:45:00Z"}]},
    {"entries": ENTRIES, "recharges": [{"gameId": "1"}]},
    {"entries": [{"gameId": "1", "ticketTime": "2025-06-02T19:45:00Z", "chosenNumbers": 5}]},
    {"entries": [{"gameId": "1", "chosenNumbers": {"a": 1}}]},
    {"entries": ENTRIES, "recharges": [{"gameId": "1", "rechargeId": "R1", "amount": {"value": 20}}]},
    {"entries": ENTRIES, "recharges": [{"gameId": "1", "rechargeId": "R1", "amount": [20]}]},
])
def test_validate_bad_payload(client, payload):
    response = client.post("/api/validate", json=payload)
    assert response.status_code == 400
    assert "error" in response.get_json()


def test_validate_csv(client):
    entries_csv = (
        "Timestamp,Platform,Game ID,WhatsApp,Numbers,Draw Date,Contest,Ticket,Status\n"
        "03/06/2025 10:00:00,POPN1,1000000001,,1 2 3,03/06/2025,1002,T1,\n"
    )
    recharges_csv = (
        "Game ID,Recharge ID,A,B,C,Time,Type,Source,Amount\n"
        "1000000001,R1,,,,02/06/2025 19:30:00,充值,三方,20\n"
    )

    response = client.post("/api/validate/csv", json={"entries_csv": entries_csv, "recharges_csv": recharges_csv})

    assert response.status_code == 200
    assert response.mimetype == "text/csv"
    assert "attachment" in response.headers["Content-Disposition"]
    text = response.get_data(as_text=True)
    assert text.startswith("\ufeff")
    [row] = list(csv.DictReader(io.StringIO(text.lstrip("\ufeff"))))
    assert row["verdict"] == "VALID"
    assert row["cutoff_flag"] == "true"


def test_validate_csv_requires_entries(client):
    response = client.post("/api/validate/csv", json={"recharges_csv": ""})
    assert response.status_code == 400


def test_reasons(client):
    data = client.get("/api/reasons").get_json()
    assert "INVALID_RECHARGE_WINDOW_EXPIRED" in data
    assert len(data) == 8


def test_engagement(client):
    response = client.post("/api/engagement", json={
        "entries": ENTRIES, "recharges": RECHARGES, "days": 2, "today": "2025-06-03",
    })
    assert response.status_code == 200
    data = response.get_json()
    assert data["overall"]["totalRechargers"] == 1
    assert data["overall"]["participationRate"] == 100.0
    assert [d["date"] for d in data["daily"]] == ["2025-06-03", "2025-06-02"]


@pytest.mark.parametrize("extra", [{"days": 0}, {"days": "7"}, {"today": "yesterday"}])
def test_engagement_bad_params(client, extra):
    payload = {"entries": ENTRIES, "recharges": RECHARGES, **extra}
    assert client.post("/api/engagement", json=payload).status_code == 400


def test_unknown_route_is_json(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.get_json()["error"] == "Not Found"


def test_broken_calendar_returns_500(env_config):
    config = dataclasses.replace(env_config, no_draw_weekdays=frozenset(range(7)))
    client = create_app(config, testing=True).test_client()

    response = client.post("/api/validate", json={"entries": ENTRIES, "recharges": RECHARGES})

    assert response.status_code == 500
    assert response.get_json()["error"] == "calendar_configuration"


def test_metrics_endpoint(client):
    client.get("/health")
    response = client.get("/metrics")
    assert response.status_code == 200
    assert b"http_request_latency_seconds" in response.data
