from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from src.api.main import app


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def _simulation_payload(hedge_amount=120):
    return {
        "input_data": {"hedge_amount": hedge_amount},
        "entities": [
            {
                "id": "ent_1",
                "name": "Head Office",
                "type": "Branch",
                "nav_type": "RE",
                "nav": "100",
                "car_exempt": True,
            },
            {
                "id": "ent_2",
                "name": "Subsidiary A",
                "type": "Subsidiary",
                "nav_type": "COI",
                "nav": "50",
                "optimal_car": "10",
            },
        ],
    }


def _block_rule():
    return {
        "id": "rule_block",
        "name": "Block large hedges",
        "priority": "high",
        "status": "active",
        "conditions": {
            "kind": "group",
            "id": "grp_1",
            "conditions": [
                {
                    "kind": "condition",
                    "id": "cond_1",
                    "field": "input.hedge_amount",
                    "operator": "greaterThan",
                    "value": 1000,
                }
            ],
        },
        "actions": [
            {
                "id": "act_1",
                "type": "modifyHedge",
                "parameters": {"status": "Blocked", "reason": "Above limit"},
            },
            {"id": "act_2", "type": "setField", "field": "review.required", "value": True},
        ],
    }


def test_simulate_stage_allocates_hedge_amount(client):
    response = client.post(
        "/stages/stage-1a/simulate",
        json=_simulation_payload(),
        headers={"X-Correlation-Id": "corr-sim-1"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "Approved"
    assert [entry["rule_name"] for entry in body["trace"]] == ["Message Validation"]
    allocations = body["entity_allocations"]
    assert [item["entity_id"] for item in allocations] == ["ent_1", "ent_2"]
    assert [Decimal(str(item["allocation"])) for item in allocations] == [
        Decimal("100"),
        Decimal("20"),
    ]
    assert [item["exhausted"] for item in allocations] == [True, False]


def test_simulate_stage_applies_rule_actions(client):
    client.post("/stages/stage-2/rules", json=_block_rule())

    body = client.post("/stages/stage-2/simulate", json=_simulation_payload(5000)).json()

    assert body["status"] == "Blocked"
    assert body["reason"] == "Above limit"
    assert body["calculated_fields"] == {"review.required": True}
    assert body["trace"][0]["condition_evaluation"] is True
    assert body["trace"][0]["output_state"]["review"] == {"required": True}


def test_simulate_unknown_stage_returns_404(client):
    response = client.post("/stages/missing/simulate", json=_simulation_payload())

    assert response.status_code == 404
    assert response.json()["detail"] == "STAGE_NOT_FOUND"


def test_simulate_rejects_invalid_entities(client):
    payload = _simulation_payload()
    payload["entities"][0]["type"] = "Partnership"

    assert client.post("/stages/stage-1a/simulate", json=payload).status_code == 422


def test_saved_environment_flow(client):
    assert client.get("/stages/stage-1a/environment").status_code == 404

    saved = client.put("/stages/stage-1a/environment", json=_simulation_payload(30))
    assert saved.status_code == 200
    assert saved.json()["stage_id"] == "stage-1a"

    environment = client.get("/stages/stage-1a/environment").json()
    assert environment["input_data"] == {"hedge_amount": 30}

    body = client.post("/stages/stage-1a/environment/simulate").json()
    assert [Decimal(str(item["allocation"])) for item in body["entity_allocations"]] == [
        Decimal("30"),
        Decimal("0"),
    ]

    assert client.delete("/simulation-environments").status_code == 204
    missing = client.post("/stages/stage-1a/environment/simulate")
    assert missing.status_code == 404
    assert missing.json()["detail"] == "SIMULATION_ENVIRONMENT_NOT_FOUND"
