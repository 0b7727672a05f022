import pytest
from fastapi.testclient import TestClient

from src.api.main import app


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def _rule_payload(rule_id="rule_cap", **overrides):
    payload = {
        "id": rule_id,
        "name": "Hedge amount cap",
        "conditions": {
            "kind": "group",
            "id": "grp_1",
            "operator": "and",
            "conditions": [
                {
                    "kind": "condition",
                    "id": "cond_1",
                    "field": "input.hedge_amount",
                    "operator": "greaterThan",
                    "value": 1000000,
                    "value_type": "number",
                }
            ],
        },
        "actions": [{"id": "act_1", "type": "modifyHedge", "parameters": {"status": "Blocked"}}],
        "status": "active",
        "priority": "high",
    }
    payload.update(overrides)
    return payload


def test_list_and_get_field_definitions(client):
    fields = client.get("/fields").json()
    assert [item["id"] for item in fields][:3] == ["hedge_id", "hedge_type", "amount"]

    assert client.get("/fields/amount").json()["type"] == "number"

    missing = client.get("/fields/desk")
    assert missing.status_code == 404
    assert missing.json()["detail"] == "FIELD_NOT_FOUND"


def test_rule_crud_flow(client):
    created = client.post("/rules", json=_rule_payload())
    assert created.status_code == 201

    assert [item["id"] for item in client.get("/rules").json()] == ["rule_cap"]
    assert client.get("/rules/rule_cap").json()["priority"] == "high"

    updated = client.put("/rules/rule_cap", json=_rule_payload(name="Cap v2"))
    assert updated.status_code == 200
    assert updated.json()["name"] == "Cap v2"

    assert client.delete("/rules/rule_cap").status_code == 204
    assert client.get("/rules/rule_cap").status_code == 404


def test_invalid_active_rule_is_rejected(client):
    response = client.post("/rules", json=_rule_payload(actions=[]))

    assert response.status_code == 422
    assert "At least one action is required" in response.json()["detail"]


def test_draft_rule_without_actions_is_stored(client):
    response = client.post("/rules", json=_rule_payload(actions=[], status="draft"))
    assert response.status_code == 201


def test_update_rule_requires_matching_id(client):
    client.post("/rules", json=_rule_payload())

    response = client.put("/rules/rule_cap", json=_rule_payload(rule_id="other"))

    assert response.status_code == 422
    assert response.json()["detail"] == "RULE_ID_MISMATCH"


def test_unknown_rule_returns_404(client):
    assert client.get("/rules/missing").json()["detail"] == "RULE_NOT_FOUND"
    assert client.put("/rules/missing", json=_rule_payload("missing")).status_code == 404
    assert client.delete("/rules/missing").status_code == 404


def test_validate_rule_reports_errors(client):
    response = client.post("/rules/validate", json=_rule_payload(name="", actions=[]))

    assert response.status_code == 200
    assert response.json() == {
        "is_valid": False,
        "errors": ["Rule name is required", "At least one action is required"],
    }


def test_evaluate_rule_returns_actions_on_match(client):
    client.post("/rules", json=_rule_payload())

    matched = client.post(
        "/rules/rule_cap/evaluate", json={"context": {"input": {"hedge_amount": 2500000}}}
    ).json()
    unmatched = client.post(
        "/rules/rule_cap/evaluate", json={"context": {"input": {"hedge_amount": 10}}}
    ).json()

    assert matched["matched"] is True
    assert [item["id"] for item in matched["actions"]] == ["act_1"]
    assert unmatched == {"rule_id": "rule_cap", "matched": False, "actions": []}


def test_evaluate_unknown_rule_returns_404(client):
    response = client.post("/rules/missing/evaluate", json={"context": {}})
    assert response.status_code == 404


def test_compile_condition_group(client):
    response = client.post(
        "/conditions/compile",
        json={
            "condition": {
                "kind": "group",
                "id": "grp_1",
                "operator": "or",
                "conditions": [
                    {
                        "kind": "condition",
                        "id": "cond_1",
                        "field": "amount",
                        "operator": "between",
                        "value": [10, 20],
                    },
                    {
                        "kind": "condition",
                        "id": "cond_2",
                        "field": "hedge_id",
                        "operator": "startsWith",
                        "value": "HG",
                        "negated": True,
                    },
                ],
            }
        },
    )

    assert response.status_code == 200
    assert response.json()["expression"] == {
        "or": [
            {"and": [{">=": [{"var": "amount"}, 10]}, {"<=": [{"var": "amount"}, 20]}]},
            {"!": {"startsWith": [{"var": "hedge_id"}, "HG"]}},
        ]
    }


def test_compile_empty_group_is_true(client):
    response = client.post(
        "/conditions/compile", json={"condition": {"kind": "group", "id": "grp_1"}}
    )
    assert response.json()["expression"] is True


def test_unknown_operator_is_rejected(client):
    response = client.post(
        "/conditions/compile",
        json={
            "condition": {
                "kind": "condition",
                "id": "cond_1",
                "field": "amount",
                "operator": "matches",
                "value": 1,
            }
        },
    )
    assert response.status_code == 422
