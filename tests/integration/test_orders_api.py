"""Integration tests for Orders API endpoints."""

import asyncio
from datetime import timedelta
from decimal import Decimal

from fastapi.testclient import TestClient

from core.utils.datetime import utc_now


def order_payload(catalog, **overrides) -> dict:
    payload = {
        "customer": {"name": "Pema Wangmo", "phone": "17123456"},
        "items": [
            {"product_id": catalog["apple"], "quantity": 2},
            {"product_id": catalog["orange"], "quantity": 1},
        ],
        "fulfillment_type": "DELIVERY",
        "shipping_address": "Norzin Lam, Thimphu",
        "delivery_cost": "30.00",
    }
    payload.update(overrides)
    return payload


def create_order(test_client: TestClient, catalog, **overrides) -> dict:
    response = test_client.post("/api/v1/orders", json=order_payload(catalog, **overrides))
    assert response.status_code == 201, response.text
    return response.json()


def test_create_order_success(test_client: TestClient, api_catalog, api_session_factory, seeders):
    """POST /orders prices the lines, applies discounts and returns the order."""
    now = utc_now()
    asyncio.run(
        seeders.discount(
            api_session_factory,
            start=now - timedelta(days=1),
            end=now + timedelta(days=1),
        )
    )

    data = create_order(test_client, api_catalog)

    assert data["order_number"].startswith("ORD-")
    assert data["fulfillment_status"] == "PLACED"
    assert data["payment_status"] == "PENDING"
    assert data["customer_name"] == "Pema Wangmo"
    assert len(data["items"]) == 2
    assert Decimal(data["subtotal"]) == Decimal("225.00")
    assert Decimal(data["total_payable"]) == Decimal("255.00")
    assert data["execution_id"]

    # Verify data persistence by retrieving the order
    get_response = test_client.get(f"/api/v1/orders/{data['id']}")
    assert get_response.status_code == 200
    assert get_response.json()["order_number"] == data["order_number"]


def test_create_order_validation(test_client: TestClient, api_catalog):
    no_address = order_payload(api_catalog, shipping_address=None)
    bad_quantity = order_payload(
        api_catalog, items=[{"product_id": api_catalog["apple"], "quantity": 0}]
    )
    unknown = order_payload(api_catalog, items=[{"product_id": 9999, "quantity": 1}])
    unavailable = order_payload(api_catalog, items=[{"product_id": api_catalog["retired"], "quantity": 1}])

    assert test_client.post("/api/v1/orders", json=no_address).status_code == 400
    assert test_client.post("/api/v1/orders", json=bad_quantity).status_code == 422
    assert test_client.post("/api/v1/orders", json=unknown).status_code == 404

    response = test_client.post("/api/v1/orders", json=unavailable)
    assert response.status_code == 400
    assert response.json()["details"] == {"product_id": api_catalog["retired"]}


def test_get_unknown_order(test_client: TestClient):
    response = test_client.get("/api/v1/orders/12345")

    assert response.status_code == 404
    assert response.json()["detail"] == "Order 12345 not found"


def test_full_lifecycle(test_client: TestClient, api_catalog):
    order = create_order(test_client, api_catalog)
    order_id = order["id"]

    paid = test_client.post(
        f"/api/v1/orders/{order_id}/payment", json={"status": "PAID", "payment_method": "CASH"}
    ).json()
    assert paid["fulfillment_status"] == "CONFIRMED"
    assert paid["receipt_number"].startswith("RCP-")

    again = test_client.post(f"/api/v1/orders/{order_id}/payment", json={"status": "PAID"})
    assert again.status_code == 409

    skipped = test_client.post(f"/api/v1/orders/{order_id}/fulfillment", json={"status": "SHIPPING"})
    assert skipped.status_code == 400

    processing = test_client.post(f"/api/v1/orders/{order_id}/fulfillment", json={"status": "PROCESSING"})
    assert processing.json()["fulfillment_status"] == "PROCESSING"

    shipping = test_client.post(
        f"/api/v1/orders/{order_id}/fulfillment",
        json={"status": "SHIPPING", "driver_name": "Tashi", "vehicle_number": "BP-1-A1234"},
    ).json()
    assert shipping["driver_name"] == "Tashi"

    delivered = test_client.post(f"/api/v1/orders/{order_id}/deliver").json()
    assert delivered["fulfillment_status"] == "DELIVERED"
    assert delivered["feedback_token"]

    canceled = test_client.post(f"/api/v1/orders/{order_id}/cancel", json={"reason": "refund"})
    assert canceled.status_code == 200
    assert canceled.json()["payment_status"] == "FAILED"

    twice = test_client.post(f"/api/v1/orders/{order_id}/cancel", json={})
    assert twice.status_code == 409


def test_counter_order(test_client: TestClient, api_catalog):
    payload = order_payload(
        api_catalog,
        order_source="COUNTER",
        fulfillment_type="INSTORE",
        shipping_address=None,
        delivery_cost="0",
        payment_method="CASH",
    )

    response = test_client.post("/api/v1/orders/counter", json=payload)

    assert response.status_code == 201, response.text
    data = response.json()
    assert data["payment_status"] == "PAID"
    assert data["fulfillment_status"] == "DELIVERED"
    assert data["receipt_generated"] is True

    online = test_client.post("/api/v1/orders/counter", json=order_payload(api_catalog, payment_method="CASH"))
    assert online.status_code == 400


def test_update_order(test_client: TestClient, api_catalog):
    order = create_order(test_client, api_catalog)

    response = test_client.patch(
        f"/api/v1/orders/{order['id']}",
        json={"delivery_cost": "50", "delivery_notes": "Call on arrival"},
    )

    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["total_payable"]) == Decimal("300.00")
    assert data["delivery_notes"] == "Call on arrival"


def test_list_orders_with_filters(test_client: TestClient, api_catalog):
    first = create_order(test_client, api_catalog)
    second = create_order(test_client, api_catalog)
    test_client.post(f"/api/v1/orders/{first['id']}/payment", json={"status": "PAID"})

    everything = test_client.get("/api/v1/orders").json()
    pending = test_client.get("/api/v1/orders", params={"payment_status": "PENDING"}).json()
    limited = test_client.get("/api/v1/orders", params={"limit": 1}).json()

    assert [o["id"] for o in everything] == [second["id"], first["id"]]
    assert [o["id"] for o in pending] == [second["id"]]
    assert len(limited) == 1


def test_gateway_payment_flow(test_client: TestClient, api_catalog, gateway):
    order = create_order(test_client, api_catalog)

    started = test_client.post(
        f"/api/v1/orders/{order['id']}/payment/initiate", params={"payment_method": "MBOB"}
    ).json()
    assert started["success"] is True

    gateway.declined.add(started["reference"])
    declined = test_client.post(
        f"/api/v1/orders/{order['id']}/payment/confirm",
        json={"reference": started["reference"], "payment_method": "MBOB"},
    ).json()

    assert declined["fulfillment_status"] == "CANCELED"
    assert declined["payment_status"] == "FAILED"

    retry = test_client.post(
        f"/api/v1/orders/{order['id']}/payment/initiate", params={"payment_method": "MBOB"}
    )
    assert retry.status_code == 400


def test_health(test_client: TestClient):
    assert test_client.get("/health").json() == {"status": "healthy"}
