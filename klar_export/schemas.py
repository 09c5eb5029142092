"""Pydantic models for order records consumed and export records produced."""

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TaxableItemType(str, Enum):
    """Kind of charge a tax line applies to."""

    PRODUCT = "product"
    SHIPPING = "shipping"


class CouponType(str, Enum):
    """How a sales rule is tied to coupon codes."""

    NO_COUPON = "NO_COUPON"
    SPECIFIC_COUPON = "SPECIFIC_COUPON"
    AUTO = "AUTO"


class DiscountAction(str, Enum):
    """How a sales rule applies its discount amount."""

    BY_PERCENT = "by_percent"
    BY_FIXED = "by_fixed"
    CART_FIXED = "cart_fixed"
    BUY_X_GET_Y = "buy_x_get_y"


# --- Records consumed from the host platform ---


class Product(BaseModel):
    """Catalog product referenced by an order item."""

    id: int
    weight: Optional[float] = None
    category_ids: list[int] = Field(default_factory=list, description="Linked category ids, in host order")


class OrderItem(BaseModel):
    """A single line of a sales order.

    Attributes:
        item_id (int): Order item identifier.
        order_id (int): Identifier of the owning order.
        qty_ordered (float): Ordered quantity; truncated to an integer for calculations.
        price_incl_tax (float): Unit price including tax after catalog price rules.
        original_price (float): Unit price before any discount.
        discount_amount (float): Discount for the whole line.
        tax_amount (float): Tax for the whole line.
        applied_rule_ids (str | None): Comma-separated sales rule ids.
        product_options (dict): Product option mapping; configurable children carry
            ``simple_name`` and ``simple_sku``.
    """

    item_id: int
    order_id: int = 0
    sku: str
    name: str
    qty_ordered: float = Field(0, ge=0)
    price_incl_tax: float = 0.0
    original_price: float = 0.0
    discount_amount: float = 0.0
    tax_amount: float = 0.0
    applied_rule_ids: Optional[str] = None
    base_cost: Optional[float] = None
    product_id: Optional[int] = None
    product: Optional[Product] = None
    product_options: dict[str, Any] = Field(default_factory=dict)

    @property
    def quantity(self) -> int:
        """Ordered quantity as a whole number."""
        return int(self.qty_ordered)

    @property
    def rule_ids(self) -> list[int]:
        """Applied sales rule ids, skipping blank or non-numeric entries."""
        if not self.applied_rule_ids:
            return []
        return [int(part) for part in self.applied_rule_ids.split(",") if part.strip().isdigit()]


class Order(BaseModel):
    """A sales order with its items."""

    id: int
    items: list[OrderItem] = Field(default_factory=list)


class PromotionRule(BaseModel):
    """A sales rule that may have discounted an order item."""

    rule_id: int
    name: str = ""
    description: Optional[str] = None
    discount_amount: float = 0.0
    simple_action: Union[DiscountAction, str, None] = Field(
        None, union_mode="left_to_right", description="Known actions parse to DiscountAction, others stay strings"
    )
    coupon_type: CouponType = CouponType.NO_COUPON


class TaxLineRecord(BaseModel):
    """A row of the order's tax item table."""

    item_id: Optional[int] = None
    taxable_item_type: Union[TaxableItemType, str] = Field(TaxableItemType.PRODUCT, union_mode="left_to_right")
    tax_percent: float = 0.0
    real_amount: float = 0.0
    title: str = ""


class Category(BaseModel):
    """Catalog category; a higher level means a deeper, more specific category."""

    id: int
    name: str
    level: int = 0


# --- Records produced for the Klar export ---


class ExportRecord(BaseModel):
    """Base for export records, serialized with camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the export wire shape, omitting unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Discount(ExportRecord):
    """Discount applied to one unit of a line item."""

    title: str
    descriptor: Optional[str] = None
    is_voucher: Optional[bool] = None
    voucher_code: Optional[str] = None
    discount_amount: float


class Tax(ExportRecord):
    """Tax applied to one unit of a line item or to shipping."""

    title: str
    tax_rate: float = Field(..., description="Fraction, e.g. 0.21 for 21%")
    tax_amount: float


class LineItem(ExportRecord):
    """One exported order line."""

    id: str
    product_name: str
    product_id: str
    product_variant_name: Optional[str] = None
    product_variant_id: Optional[str] = None
    product_collection: Optional[str] = None
    product_cogs: float = 0.0
    product_gmv: float = 0.0
    product_shipping_weight_in_grams: float = 0.0
    sku: str
    quantity: int
    discounts: list[Discount] = Field(default_factory=list)
    taxes: list[Tax] = Field(default_factory=list)
    total_amount_before_taxes_and_discounts: float
    total_amount_after_taxes_and_discounts: float


class ExportRequest(BaseModel):
    """An order together with the records needed to build its export."""

    order: Order
    tax_items: list[TaxLineRecord] = Field(default_factory=list)
    rules: list[PromotionRule] = Field(default_factory=list)
    coupon_codes: dict[int, str] = Field(default_factory=dict, description="Coupon code per sales rule id")
    categories: list[Category] = Field(default_factory=list)
    weight_unit: Optional[str] = Field(None, description="Overrides the configured weight unit (kgs or lbs)")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
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
                            "applied_rule_ids": "7",
                        }
                    ],
                },
                "tax_items": [{"item_id": 1, "taxable_item_type": "product", "tax_percent": 21, "title": "VAT"}],
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
            }
        }
    )
