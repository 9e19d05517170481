from __future__ import annotations

from fastapi.testclient import TestClient

RESTAURANT_ID = 1
BASE = f"/v1/restaurants/{RESTAURANT_ID}"

ORDER_BODY = {
    "origin": 0,
    "note": "no onions",
    "items": [
        {
            "dish": {
                "dishId": 0,
                "removedIngredients": [{"name": "basil", "removable": True}],
                "addedOptions": [{"option": "extra cheese", "price": 99, "enabled": True}],
            },
            "amount": 2,
        }
    ],
}


def role_headers(role: str, table_id: int | None = None) -> dict[str, str]:
    headers = {"X-Roles": role, "X-Restaurant-Id": str(RESTAURANT_ID)}
    if table_id is not None:
        headers["X-Table-Id"] = str(table_id)
    return headers


def _place_order(client: TestClient, table_id: int = 0) -> dict:
    body = {**ORDER_BODY, "origin": table_id}
    response = client.post(f"{BASE}/orders", json=body, headers=role_headers("user", table_id))
    assert response.status_code == 201, response.text
    return response.json()


def test_restaurant_data_is_public(client: TestClient) -> None:
    response = client.get(BASE)

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Tableside Bistro"
    assert [table["id"] for table in body["tables"]] == [0, 1, 2, 3, 4]
    assert body["dishes"][0]["params"]["title"] == "Margherita Pizza"


def test_full_order_lifecycle(client: TestClient) -> None:
    order = _place_order(client)

    assert order["id"] == 0
    assert order["status"] == "ORDER_RECEIVED"
    assert order["note"] == "no onions"
    assert order["items"][0]["status"] == "INIT"
    assert order["price"] == {"price": 29.0, "discount": 0.0, "extras": 1.5, "finalPrice": 30.5}

    notifications = client.get(f"{BASE}/notifications", headers=role_headers("waiter")).json()
    assert [(n["type"], n["extraData"]) for n in notifications] == [("NEW_ORDER", {"orderID": [0]})]

    item_id = order["items"][0]["id"]
    in_progress = client.post(
        f"{BASE}/orders/0/items/{item_id}/status",
        json={"status": "IN_PROGRESS"},
        headers=role_headers("kitchen"),
    )
    assert in_progress.status_code == 200
    assert in_progress.json()["status"] == "IN_PROGRESS"

    table_orders = client.get(f"{BASE}/tables/0/orders", headers=role_headers("user", 0))
    assert [o["id"] for o in table_orders.json()] == [0]

    finished = client.post(
        f"{BASE}/orders/0/status", json={"status": "FINISHED"}, headers=role_headers("waiter")
    )
    assert finished.status_code == 200
    assert finished.json()["status"] == "FINISHED"

    assert client.get(f"{BASE}/tables/0/orders", headers=role_headers("waiter")).json() == []
    notifications = client.get(f"{BASE}/notifications", headers=role_headers("waiter")).json()
    assert [n["active"] for n in notifications] == [False]

    statistics = client.get(f"{BASE}/statistics", headers=role_headers("admin"))
    assert statistics.status_code == 200
    hourly = statistics.json()["timeframes"][0]
    assert hourly["timeFrame"] == "hourly"
    assert hourly["orders"]["finished"] == 1
    assert hourly["orders"]["totalTurnover"] == 30.5
    assert hourly["dishes"]["Margherita Pizza"] == 2


def test_table_requests_and_notification_deactivation(client: TestClient) -> None:
    user = role_headers("user", 3)
    waiter = role_headers("waiter")

    first = client.post(f"{BASE}/tables/3/assistance-requests", headers=user)
    duplicate = client.post(f"{BASE}/tables/3/assistance-requests", headers=user)

    assert first.status_code == 202
    assert duplicate.status_code == 409
    assert duplicate.json()["error"]["code"] == "DUPLICATE_REQUEST"

    [notification] = client.get(f"{BASE}/notifications", headers=waiter).json()
    assert notification["type"] == "NEED_ASSISTANCE"
    assert notification["extraData"] == {}

    path = f"{BASE}/notifications/{notification['id']}/deactivate"
    assert client.post(path, headers=waiter).json()["active"] is False
    again = client.post(path, headers=waiter)
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "ALREADY_INACTIVE"

    check = client.post(
        f"{BASE}/tables/3/check-requests", json={"paymentMethod": "card"}, headers=user
    )
    assert check.status_code == 202
    blocked = client.post(
        f"{BASE}/orders", json={**ORDER_BODY, "origin": 3}, headers=user
    )
    assert blocked.status_code == 409
    assert blocked.json()["error"]["details"] == {"reason": "CHECK_PENDING"}


def test_error_mapping(client: TestClient) -> None:
    waiter = role_headers("waiter")
    user = role_headers("user", 0)
    _place_order(client)

    missing_order = client.post(
        f"{BASE}/orders/42/status", json={"status": "FINISHED"}, headers=waiter
    )
    assert missing_order.status_code == 404
    assert missing_order.json()["error"]["code"] == "NOT_FOUND"

    bad_status = client.post(f"{BASE}/orders/0/status", json={"status": "PAID"}, headers=waiter)
    assert bad_status.status_code == 400
    assert bad_status.json()["error"]["code"] == "INVALID_STATUS"

    empty = client.post(f"{BASE}/orders", json={"origin": 0, "items": []}, headers=user)
    assert empty.status_code == 409
    assert empty.json()["error"] == {
        "code": "ORDER_REJECTED",
        "message": "cannot accept an empty order",
        "details": {"reason": "EMPTY_ORDER"},
    }

    too_many = {**ORDER_BODY, "items": [{**ORDER_BODY["items"][0], "amount": 11}]}
    invalid = client.post(f"{BASE}/orders", json=too_many, headers=user)
    assert invalid.status_code == 400
    assert invalid.json()["error"]["code"] == "VALIDATION_ERROR"

    malformed = client.post(f"{BASE}/orders", json={"items": []}, headers=user)
    assert malformed.status_code == 400
    assert malformed.json()["error"]["code"] == "INVALID_REQUEST"

    bad_method = client.post(
        f"{BASE}/tables/0/check-requests", json={"paymentMethod": "bitcoin"}, headers=user
    )
    assert bad_method.status_code == 400

    unknown_restaurant = client.get("/v1/restaurants/99")
    assert unknown_restaurant.status_code == 404


def test_authorization_is_enforced(client: TestClient) -> None:
    other_table = client.post(f"{BASE}/orders", json=ORDER_BODY, headers=role_headers("user", 1))
    assert other_table.status_code == 403
    assert other_table.json()["error"]["code"] == "PERMISSION_DENIED"

    assert client.get(f"{BASE}/notifications", headers=role_headers("kitchen")).status_code == 403
    assert client.get(f"{BASE}/statistics", headers=role_headers("waiter")).status_code == 403
    assert client.get(f"{BASE}/orders").status_code == 403

    wrong_restaurant = {"X-Roles": "waiter", "X-Restaurant-Id": "2"}
    assert client.get(f"{BASE}/orders", headers=wrong_restaurant).status_code == 403

    _place_order(client, table_id=2)
    assert client.get(f"{BASE}/tables/2/orders", headers=role_headers("user", 1)).status_code == 403


def test_responses_carry_request_id(client: TestClient) -> None:
    response = client.get(BASE, headers={"X-Request-Id": "req-123"})

    assert response.headers["X-Request-Id"] == "req-123"
    missing = client.get("/v1/restaurants/99", headers={"X-Request-Id": "req-456"})
    assert missing.json()["requestId"] == "req-456"


def test_blank_request_id_is_replaced(client: TestClient) -> None:
    response = client.get(BASE, headers={"X-Request-Id": "   "})

    generated = response.headers["X-Request-Id"]
    assert generated.strip() == generated
    assert len(generated) == 32
