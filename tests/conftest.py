"""Test fixtures for the Klar export tests."""

import pytest

from klar_export.repositories import InMemoryCategoryRepository, InMemoryRuleRepository, InMemoryTaxItemSource
from klar_export.schemas import Category, CouponType, OrderItem, Product, PromotionRule, TaxLineRecord


@pytest.fixture
def save20_rule():
    """Create a 20% specific-coupon sales rule.

    Returns:
        PromotionRule: Rule 7, redeemed with coupon SAVE20.
    """
    return PromotionRule(
        rule_id=7,
        name="Save 20",
        description="20% off with SAVE20",
        discount_amount=20,
        simple_action="by_percent",
        coupon_type=CouponType.SPECIFIC_COUPON,
    )


@pytest.fixture
def rule_repository(save20_rule):
    """Create a rule repository holding the SAVE20 rule."""
    return InMemoryRuleRepository([save20_rule], {7: "SAVE20"})


@pytest.fixture
def categories():
    """Create a category repository with a shoes hierarchy."""
    return InMemoryCategoryRepository(
        [
            Category(id=3, name="Shoes", level=2),
            Category(id=8, name="Sneakers", level=4),
            Category(id=9, name="RunningShoes", level=4),
        ]
    )


@pytest.fixture
def order_item():
    """Create an order item discounted by the SAVE20 coupon.

    Returns:
        OrderItem: Two units at an original price of 50.
    """
    return OrderItem(
        item_id=1,
        order_id=1001,
        sku="SHOE-001",
        name="Trail Runner",
        qty_ordered=2,
        price_incl_tax=100.0,
        original_price=50.0,
        discount_amount=10.0,
        tax_amount=8.0,
        applied_rule_ids="7",
        base_cost=20.0,
        product_id=42,
        product=Product(id=42, weight=1.5, category_ids=[3, 8, 9]),
    )


@pytest.fixture
def tax_items():
    """Create the tax lines of order 1001."""
    return InMemoryTaxItemSource(
        1001,
        [
            TaxLineRecord(item_id=1, taxable_item_type="product", tax_percent=25, real_amount=8.0, title="VAT"),
            TaxLineRecord(item_id=2, taxable_item_type="product", tax_percent=10, real_amount=1.0, title="VAT"),
            TaxLineRecord(taxable_item_type="shipping", tax_percent=25, real_amount=1.25, title="Shipping VAT"),
        ],
    )
