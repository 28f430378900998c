"""Integration tests for the account, category and tag endpoints"""

from types import SimpleNamespace
from fastapi.testclient import TestClient


def account_payload(**overrides) -> dict:
    payload = {
        "name": "Travel card",
        "initial_balance": "250.00",
        "color": "#ff8800",
        "currency": "EUR",
        "type": "credit_card",
    }
    payload.update(overrides)
    return payload


def test_account_crud(client: TestClient, seed: SimpleNamespace):
    response = client.post("/v1/accounts", json=account_payload(icon="plane"), headers=seed.headers)
    assert response.status_code == 201
    account = response.json()
    assert account["tenant_id"] == seed.tenant_id
    assert account["initial_balance"] == "250.00"
    assert account["icon"] == "plane"

    response = client.get(f"/v1/accounts/{account['id']}", headers=seed.headers)
    assert response.json()["name"] == "Travel card"

    response = client.put(
        f"/v1/accounts/{account['id']}",
        json=account_payload(name="Euro card", initial_balance="0"),
        headers=seed.headers,
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Euro card"
    assert response.json()["icon"] == ""

    response = client.delete(f"/v1/accounts/{account['id']}", headers=seed.headers)
    assert response.status_code == 204

    response = client.get(f"/v1/accounts/{account['id']}", headers=seed.headers)
    assert response.status_code == 404
    names = [a["name"] for a in client.get("/v1/accounts", headers=seed.headers).json()]
    assert names == ["Checking", "Savings", "Visa"]


def test_created_catalog_entries_are_usable_by_transactions(client: TestClient, seed: SimpleNamespace):
    account = client.post("/v1/accounts", json=account_payload(), headers=seed.headers).json()
    category = client.post(
        "/v1/categories", json={"name": "Travel", "type": "expense"}, headers=seed.headers
    ).json()
    tag = client.post("/v1/tags", json={"name": "vacation"}, headers=seed.headers).json()

    response = client.post(
        "/v1/transactions",
        json={
            "from_account_id": account["id"],
            "amount": "120.00",
            "transaction_type": "debit",
            "category_id": category["id"],
            "due_date": "2024-05-02",
            "tag_ids": [tag["id"]],
        },
        headers=seed.headers,
    )

    assert response.status_code == 201
    assert response.json()["currency"] == "EUR"
    assert response.json()["tag_ids"] == [tag["id"]]


def test_account_validation_errors(client: TestClient, seed: SimpleNamespace):
    response = client.post("/v1/accounts", json=account_payload(type="wallet"), headers=seed.headers)
    assert response.status_code == 422

    response = client.post("/v1/accounts", json=account_payload(initial_balance="-1"), headers=seed.headers)
    assert response.status_code == 422

    response = client.post("/v1/accounts", json=account_payload(), headers={"X-Tenant-ID": seed.tenant_id})
    assert response.status_code == 401


def test_other_tenant_catalog_is_not_found(client: TestClient, seed: SimpleNamespace):
    assert client.get("/v1/accounts/acc-foreign", headers=seed.headers).status_code == 404
    assert client.get("/v1/categories/cat-foreign", headers=seed.headers).status_code == 404
    assert client.delete("/v1/tags/tag-foreign", headers=seed.headers).status_code == 404

    response = client.put("/v1/tags/tag-foreign", json={"name": "mine"}, headers=seed.headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "tag tag-foreign not found"


def test_category_parent_rules(client: TestClient, seed: SimpleNamespace):
    response = client.post(
        "/v1/categories",
        json={"name": "Restaurants", "type": "expense", "parent_category_id": "cat-food"},
        headers=seed.headers,
    )
    assert response.status_code == 201
    child = response.json()
    assert child["parent_category_id"] == "cat-food"

    response = client.put(
        "/v1/categories/cat-food",
        json={"name": "Food", "parent_category_id": child["id"]},
        headers=seed.headers,
    )
    assert response.status_code == 422
    assert "parent_category_id" in response.json()["detail"]["errors"]

    response = client.post(
        "/v1/categories",
        json={"name": "Theirs too", "type": "expense", "parent_category_id": "cat-foreign"},
        headers=seed.headers,
    )
    assert response.status_code == 404
    assert response.json()["detail"]["field"] == "parent_category_id"


def test_category_update_keeps_type(client: TestClient, seed: SimpleNamespace):
    response = client.put(
        "/v1/categories/cat-food",
        json={"name": "Groceries", "type": "income", "color": "#00aa00"},
        headers=seed.headers,
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Groceries"
    assert response.json()["type"] == "expense"
    assert response.json()["color"] == "#00aa00"


def test_deleted_tag_is_rejected_by_transactions(client: TestClient, seed: SimpleNamespace):
    assert client.delete("/v1/tags/tag-groceries", headers=seed.headers).status_code == 204

    names = [t["name"] for t in client.get("/v1/tags", headers=seed.headers).json()]
    assert names == ["monthly"]

    response = client.post(
        "/v1/transactions",
        json={
            "from_account_id": "acc-bank",
            "amount": "10.00",
            "transaction_type": "debit",
            "category_id": "cat-food",
            "due_date": "2024-01-15",
            "tag_ids": ["tag-groceries"],
        },
        headers=seed.headers,
    )
    assert response.status_code == 404
    assert response.json()["detail"]["field"] == "tag_ids"


def test_catalog_changes_are_counted(client: TestClient, seed: SimpleNamespace):
    client.post("/v1/tags", json={"name": "travel"}, headers=seed.headers)

    body = client.get("/metrics").text
    assert 'fintrack_catalog_changes_total{entity="tag",action="created"}' in body
