"""Tests for the Klar export API."""

from http import HTTPStatus

import pytest
from fastapi.testclient import TestClient

from klar_export import __version__
from klar_export.server import app


def test_version():
    assert __version__ == "0.1.0"


@pytest.fixture
def test_client():
    """Create a test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def export_request():
    """Export request for one discounted item with a configurable child and shipping tax."""
    return {
        "order": {
            "id": 1001,
            "items": [
                {
                    "item_id": 1,
                    "order_id": 1001,
                    "sku": "SHOE-001",
                    "name": "Trail Runner",
                    "qty_ordered": 2,
                    "price_incl_tax": 100.0,
                    "original_price": 50.0,
                    "discount_amount": 10.0,
                    "tax_amount": 8.0,
                    "applied_rule_ids": "7",
                    "product_id": 42,
                    "product": {"id": 42, "weight": 10, "category_ids": [3, 9]},
                    "product_options": {"simple_name": "Trail Runner 42", "simple_sku": "SHOE-001-42"},
                }
            ],
        },
        "tax_items": [
            {"item_id": 1, "taxable_item_type": "product", "tax_percent": 25, "real_amount": 8.0, "title": "VAT"},
            {"taxable_item_type": "shipping", "tax_percent": 25, "real_amount": 1.25, "title": "Shipping VAT"},
        ],
        "rules": [
            {
                "rule_id": 7,
                "name": "Save 20",
                "discount_amount": 20,
                "simple_action": "by_percent",
                "coupon_type": "SPECIFIC_COUPON",
            }
        ],
        "coupon_codes": {"7": "SAVE20"},
        "categories": [{"id": 3, "name": "Shoes", "level": 2}, {"id": 9, "name": "RunningShoes", "level": 4}],
        "weight_unit": "lbs",
    }


def test_health_check(test_client):
    """Test the health check endpoint."""
    response = test_client.get("/health")
    assert response.status_code == HTTPStatus.OK
    assert response.json() == {"status": "healthy"}


def test_build_order_line_items(test_client, export_request):
    """Test that the export is built in camelCase with line items and shipping taxes."""
    response = test_client.post("/orders/line-items", json=export_request)

    assert response.status_code == HTTPStatus.OK
    body = response.json()
    assert body["orderId"] == "1001"
    assert body["shippingTaxes"] == [{"title": "Shipping VAT", "taxRate": 0.25, "taxAmount": 1.25}]

    line_item = body["lineItems"][0]
    assert line_item["productVariantId"] == "SHOE-001-42"
    assert line_item["productCollection"] == "RunningShoes"
    assert line_item["productShippingWeightInGrams"] == pytest.approx(4536.0)
    assert line_item["discounts"] == [
        {
            "title": "Save 20",
            "isVoucher": True,
            "voucherCode": "SAVE20",
            "discountAmount": pytest.approx(10.0),
        }
    ]
    assert line_item["taxes"][0]["taxAmount"] == pytest.approx(9.0)
    assert line_item["totalAmountAfterTaxesAndDiscounts"] == pytest.approx(82.0)


def test_unknown_weight_unit_is_rejected(test_client, export_request):
    """Test that an unsupported weight unit override returns 422."""
    export_request["weight_unit"] = "stones"

    response = test_client.post("/orders/line-items", json=export_request)

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY


def test_malformed_order_is_rejected(test_client):
    """Test that a request without an order fails validation."""
    response = test_client.post("/orders/line-items", json={"tax_items": []})

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY


def test_builder_failure_returns_500(mocker, test_client, export_request):
    """Test that an unexpected builder error is reported as a server error."""
    mocker.patch(
        "klar_export.server.LineItemsBuilder.build_from_sales_order",
        side_effect=RuntimeError("boom"),
    )

    response = test_client.post("/orders/line-items", json=export_request)

    assert response.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert response.json() == {"detail": "Failed to build line items"}
