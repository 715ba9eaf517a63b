"""Integration tests for the discount preview endpoint."""

import asyncio
from datetime import timedelta
from decimal import Decimal

from fastapi.testclient import TestClient

from core.domain.enums import DiscountType
from core.utils.datetime import utc_now


def test_preview_with_voucher(test_client: TestClient, api_catalog, api_session_factory, seeders):
    now = utc_now()
    window = {"start": now - timedelta(days=1), "end": now + timedelta(days=1)}
    asyncio.run(
        seeders.discount(
            api_session_factory,
            name="Dairy week",
            discount_type=DiscountType.SELECTED_CATEGORIES,
            value="20",
            category_ids=[api_catalog["dairy"]],
            voucher_code="DAIRY20",
            **window,
        )
    )

    items = [
        {"product_id": api_catalog["cheese"], "quantity": 2},
        {"product_id": api_catalog["apple"], "quantity": 1},
    ]
    plain = test_client.post("/api/v1/discounts/calculate", json={"items": items}).json()
    with_voucher = test_client.post(
        "/api/v1/discounts/calculate", json={"items": items, "voucher_code": "dairy20"}
    ).json()

    assert Decimal(plain["final_total"]) == Decimal("600.00")
    assert Decimal(with_voucher["final_total"]) == Decimal("500.00")
    assert [d["product_id"] for d in with_voucher["line_item_discounts"]] == [api_catalog["cheese"]]
    assert with_voucher["applied_discounts"][0]["name"] == "Dairy week"
    assert with_voucher["discount_breakdown"] == (
        f"Dairy week on Product {api_catalog['cheese']}: 20% (Nu. 100.00)"
    )


def test_preview_rejects_unknown_product(test_client: TestClient, api_catalog):
    response = test_client.post(
        "/api/v1/discounts/calculate", json={"items": [{"product_id": 4242, "quantity": 1}]}
    )

    assert response.status_code == 404


def test_preview_requires_items(test_client: TestClient):
    assert test_client.post("/api/v1/discounts/calculate", json={"items": []}).status_code == 422
