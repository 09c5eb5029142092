"""Assembly of exported line items from a sales order."""

from typing import Optional, Protocol, Union

from .config import WeightUnit, config
from .discounts import LineItemDiscountsBuilder
from .logger import logger
from .repositories import CategoryRepository, CouponCodeLookup, EntityNotFoundError, RuleRepository, TaxItemSource
from .schemas import Discount, LineItem, Order, OrderItem, Product, Tax, TaxableItemType
from .taxes import TaxesBuilder

LBS_TO_KGS = 0.45359237


class DiscountsBuilder(Protocol):
    """Protocol for building the discounts of an order item."""

    def build_from_sales_order_item(self, item: OrderItem) -> list[Discount]:
        ...


class TaxBreakdownBuilder(Protocol):
    """Protocol for building the taxes of an order item or shipping."""

    def build(
        self,
        order_id: int,
        item: Optional[OrderItem] = None,
        taxable_item_type: Union[TaxableItemType, str] = TaxableItemType.PRODUCT,
    ) -> list[Tax]:
        ...


class LineItemsBuilder:
    """Builds the exported line items of a sales order.

    Discounts and taxes are delegated to the injected builders, which default to
    LineItemDiscountsBuilder and TaxesBuilder over the given repositories.
    """

    def __init__(
        self,
        category_repository: CategoryRepository,
        rule_repository: Optional[RuleRepository] = None,
        coupon_lookup: Optional[CouponCodeLookup] = None,
        tax_item_source: Optional[TaxItemSource] = None,
        weight_unit: Optional[WeightUnit] = None,
        discounts_builder: Optional[DiscountsBuilder] = None,
        taxes_builder: Optional[TaxBreakdownBuilder] = None,
    ):
        if discounts_builder is None:
            if rule_repository is None:
                raise ValueError("rule_repository is required when no discounts_builder is given")
            discounts_builder = LineItemDiscountsBuilder(rule_repository, coupon_lookup or rule_repository)
        if taxes_builder is None:
            if tax_item_source is None:
                raise ValueError("tax_item_source is required when no taxes_builder is given")
            taxes_builder = TaxesBuilder(tax_item_source)

        self.category_repository = category_repository
        self.weight_unit = WeightUnit(weight_unit or config.weight_unit)
        self.discounts_builder = discounts_builder
        self.taxes_builder = taxes_builder

    def build_from_sales_order(self, order: Order) -> list[LineItem]:
        """Build one line item per order item.

        Args:
            order: The sales order.

        Returns:
            list[LineItem]: Line items in order item order.
        """
        line_items = []

        for item in order.items:
            line_items.append(self._build_line_item(order, item))

        logger.debug(f"Built {len(line_items)} line items for order {order.id}")
        return line_items

    def _build_line_item(self, order: Order, item: OrderItem) -> LineItem:
        quantity = item.quantity
        original_price = item.original_price
        discount_amount = item.discount_amount
        tax_amount = item.tax_amount

        if item.price_incl_tax == 0.0:
            discount_amount = original_price * quantity

        total_before = original_price * quantity
        total_after = total_before - tax_amount - discount_amount

        variant = get_product_variant(item)

        return LineItem(
            id=str(item.item_id),
            product_name=item.name,
            product_id="" if item.product_id is None else str(item.product_id),
            product_variant_name=variant[0] if variant else None,
            product_variant_id=variant[1] if variant else None,
            product_collection=self.get_category_name(item),
            product_cogs=item.base_cost or 0.0,
            product_gmv=original_price,
            product_shipping_weight_in_grams=self.get_weight_in_grams(item.product),
            sku=item.sku,
            quantity=quantity,
            discounts=self.discounts_builder.build_from_sales_order_item(item),
            taxes=self.taxes_builder.build(order.id, item, TaxableItemType.PRODUCT),
            total_amount_before_taxes_and_discounts=total_before,
            total_amount_after_taxes_and_discounts=total_after,
        )

    def get_category_name(self, item: OrderItem) -> Optional[str]:
        """Name of the deepest category linked to the item's product.

        Among categories of equal depth the last one in the product's category
        order wins, so the result follows the host's category id ordering.
        """
        if item.product is None:
            return None

        names_by_level = {}
        for category_id in item.product.category_ids:
            try:
                category = self.category_repository.get(category_id)
            except EntityNotFoundError:
                continue
            except Exception as e:
                logger.warning(f"Failed to load category {category_id}: {e}")
                continue

            names_by_level[category.level] = category.name

        if not names_by_level:
            return None
        return names_by_level[max(names_by_level)]

    def get_weight_in_grams(self, product: Optional[Product]) -> float:
        """Shipping weight of a product in grams, 0 when unknown."""
        if product is None or not product.weight:
            return 0.0

        weight_in_kgs = product.weight
        if self.weight_unit == WeightUnit.LBS:
            weight_in_kgs = convert_lbs_to_kgs(product.weight)

        return weight_in_kgs * 1000


def get_product_variant(item: OrderItem) -> Optional[tuple[str, str]]:
    """Variant (name, id) of a configurable product's child, if any."""
    options = item.product_options
    if options.get("simple_name") is not None and options.get("simple_sku") is not None:
        return str(options["simple_name"]), str(options["simple_sku"])
    return None


def convert_lbs_to_kgs(weight_lbs: float) -> float:
    """Convert pounds to kilograms, rounded to 3 decimals."""
    return round(weight_lbs * LBS_TO_KGS, 3)
