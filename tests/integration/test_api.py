"""Integration tests for API endpoints"""

from types import SimpleNamespace
from fastapi.testclient import TestClient


def transaction_payload(**overrides) -> dict:
    payload = {
        "from_account_id": "acc-bank",
        "amount": 100.00,
        "transaction_type": "debit",
        "category_id": "cat-food",
        "due_date": "2023-01-15",
    }
    payload.update(overrides)
    return payload


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "fintrack-core"}


def test_request_id_header(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_create_single_transaction(client: TestClient, seed: SimpleNamespace):
    response = client.post(
        "/v1/transactions",
        json=transaction_payload(comments="Groceries", tag_ids=["tag-groceries"]),
        headers=seed.headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["tenant_id"] == seed.tenant_id
    assert data["currency"] == "USD"
    assert data["accrual_month"] == "202301"
    assert data["amount"] == "100.00"
    assert data["comments"] == "Groceries"
    assert data["payment_date"] is None
    assert data["tag_ids"] == ["tag-groceries"]
    assert data["created_by"] == seed.user_id


def test_create_split_installments(client: TestClient, seed: SimpleNamespace):
    """100.00 in 3 installments -> 33.34 / 33.33 / 33.33, one month apart"""
    response = client.post(
        "/v1/transactions",
        json=transaction_payload(installments=3, tag_ids=["tag-monthly"]),
        headers=seed.headers,
    )

    assert response.status_code == 201
    parent = response.json()
    assert parent["amount"] == "33.34"
    assert parent["due_date"] == "2023-01-15"
    assert parent["comments"] == "[Installment 1/3] "

    group = client.get(f"/v1/transactions/{parent['id']}/installments", headers=seed.headers).json()
    assert [t["amount"] for t in group] == ["33.34", "33.33", "33.33"]
    assert [t["due_date"] for t in group] == ["2023-01-15", "2023-02-15", "2023-03-15"]
    assert [t["accrual_month"] for t in group] == ["202301", "202302", "202303"]
    assert all(t["parent_transaction_id"] == parent["id"] for t in group[1:])
    assert all(t["tag_ids"] == ["tag-monthly"] for t in group)


def test_create_recurring_on_credit_card(client: TestClient, seed: SimpleNamespace):
    response = client.post(
        "/v1/transactions",
        json=transaction_payload(
            from_account_id="acc-card", amount=29.9, installments=3, is_recurring=True, due_date="2024-01-31"
        ),
        headers=seed.headers,
    )

    assert response.status_code == 201
    group = client.get(f"/v1/transactions/{response.json()['id']}/installments", headers=seed.headers).json()
    assert [t["amount"] for t in group] == ["29.90", "29.90", "29.90"]
    assert [t["due_date"] for t in group] == ["2024-01-31", "2024-02-29", "2024-03-31"]
    assert [t["payment_date"] for t in group] == ["2024-01-31", "2024-02-29", "2024-03-31"]
    assert all(t["currency"] == "BRL" for t in group)


def test_create_requires_user(client: TestClient, seed: SimpleNamespace):
    response = client.post(
        "/v1/transactions",
        json=transaction_payload(),
        headers={"X-Tenant-ID": seed.tenant_id},
    )
    assert response.status_code == 401


def test_create_requires_tenant(client: TestClient, seed: SimpleNamespace):
    response = client.post("/v1/transactions", json=transaction_payload(), headers={"X-User-ID": seed.user_id})
    assert response.status_code == 422


def test_create_with_foreign_tag_persists_nothing(client: TestClient, seed: SimpleNamespace):
    response = client.post(
        "/v1/transactions",
        json=transaction_payload(installments=3, tag_ids=["tag-groceries", "tag-foreign"]),
        headers=seed.headers,
    )

    assert response.status_code == 404
    assert response.json()["detail"]["field"] == "tag_ids"
    assert client.get("/v1/transactions", headers=seed.headers).json() == []


def test_create_with_foreign_category(client: TestClient, seed: SimpleNamespace):
    response = client.post(
        "/v1/transactions",
        json=transaction_payload(category_id="cat-foreign"),
        headers=seed.headers,
    )
    assert response.status_code == 404


def test_create_transfer_validation_errors(client: TestClient, seed: SimpleNamespace):
    response = client.post(
        "/v1/transactions",
        json=transaction_payload(transaction_type="transfer", to_account_id="acc-bank", accrual_month="2023-1"),
        headers=seed.headers,
    )

    assert response.status_code == 422
    errors = response.json()["detail"]["errors"]
    assert set(errors) == {"to_account_id", "accrual_month"}


def test_list_filters(client: TestClient, seed: SimpleNamespace):
    client.post("/v1/transactions", json=transaction_payload(installments=2), headers=seed.headers)
    client.post(
        "/v1/transactions",
        json=transaction_payload(from_account_id="acc-card", transaction_type="credit"),
        headers=seed.headers,
    )

    everything = client.get("/v1/transactions", headers=seed.headers).json()
    february = client.get("/v1/transactions?accrual_month=202302", headers=seed.headers).json()
    card = client.get("/v1/transactions?account_id=acc-card", headers=seed.headers).json()
    credits = client.get("/v1/transactions?transaction_type=credit", headers=seed.headers).json()

    assert len(everything) == 3
    assert len(february) == 1 and february[0]["comments"] == "[Installment 2/2] "
    assert len(card) == 1 and card[0]["payment_date"] == "2023-01-15"
    assert len(credits) == 1


def test_other_tenant_cannot_read(client: TestClient, seed: SimpleNamespace):
    created = client.post("/v1/transactions", json=transaction_payload(), headers=seed.headers).json()

    foreign_headers = {"X-Tenant-ID": seed.other_tenant_id, "X-User-ID": seed.user_id}
    assert client.get(f"/v1/transactions/{created['id']}", headers=foreign_headers).status_code == 404
    assert client.get("/v1/transactions", headers=foreign_headers).json() == []


def test_update_single_installment(client: TestClient, seed: SimpleNamespace):
    parent = client.post(
        "/v1/transactions",
        json=transaction_payload(installments=3, tag_ids=["tag-groceries"]),
        headers=seed.headers,
    ).json()
    group = client.get(f"/v1/transactions/{parent['id']}/installments", headers=seed.headers).json()
    second = group[1]

    response = client.put(
        f"/v1/transactions/{second['id']}",
        json=transaction_payload(amount=50, due_date="2023-02-20", comments="renegotiated", tag_ids=[]),
        headers={**seed.headers, "X-User-ID": "user-2"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["amount"] == "50.00"
    assert data["accrual_month"] == "202302"
    assert data["tag_ids"] == []
    assert data["updated_by"] == "user-2"
    assert data["parent_transaction_id"] == parent["id"]

    unchanged = client.get(f"/v1/transactions/{group[2]['id']}", headers=seed.headers).json()
    assert unchanged["amount"] == "33.33"
    assert unchanged["tag_ids"] == ["tag-groceries"]


def test_update_without_tag_ids_keeps_tags(client: TestClient, seed: SimpleNamespace):
    created = client.post(
        "/v1/transactions",
        json=transaction_payload(tag_ids=["tag-groceries"]),
        headers=seed.headers,
    ).json()

    response = client.put(f"/v1/transactions/{created['id']}", json=transaction_payload(amount=12), headers=seed.headers)

    assert response.status_code == 200
    assert response.json()["tag_ids"] == ["tag-groceries"]


def test_update_unknown_transaction(client: TestClient, seed: SimpleNamespace):
    response = client.put("/v1/transactions/missing", json=transaction_payload(), headers=seed.headers)
    assert response.status_code == 404


def test_delete_is_soft_and_single(client: TestClient, seed: SimpleNamespace):
    parent = client.post("/v1/transactions", json=transaction_payload(installments=3), headers=seed.headers).json()

    response = client.delete(f"/v1/transactions/{parent['id']}", headers=seed.headers)
    assert response.status_code == 204

    assert client.get(f"/v1/transactions/{parent['id']}", headers=seed.headers).status_code == 404
    assert len(client.get("/v1/transactions", headers=seed.headers).json()) == 2
    assert client.delete(f"/v1/transactions/{parent['id']}", headers=seed.headers).status_code == 404


def test_metrics_endpoint(client: TestClient, seed: SimpleNamespace):
    """Creation counters are exported"""
    client.post("/v1/transactions", json=transaction_payload(installments=2), headers=seed.headers)

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "fintrack_transactions_created_total" in response.text
    assert "fintrack_installments_generated_total" in response.text


def test_out_of_range_amounts_rejected(client: TestClient, seed: SimpleNamespace):
    for amount in ("1e27", "1000000000000", "NaN", "Infinity"):
        response = client.post("/v1/transactions", json=transaction_payload(amount=amount), headers=seed.headers)
        assert response.status_code == 422, amount

    assert client.get("/v1/transactions", headers=seed.headers).json() == []


def test_latency_is_labelled_by_route_template(client: TestClient, seed: SimpleNamespace):
    created = client.post("/v1/transactions", json=transaction_payload(), headers=seed.headers).json()
    client.get(f"/v1/transactions/{created['id']}", headers=seed.headers)
    client.get("/no/such/path")

    body = client.get("/metrics").text
    assert 'endpoint="/v1/transactions/{transaction_id}"' in body
    assert 'endpoint="unmatched"' in body
    assert created["id"] not in body
