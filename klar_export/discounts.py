"""Per-unit discount breakdown for a sales order item."""

from typing import Optional

from .logger import logger
from .repositories import CouponCodeLookup, EntityNotFoundError, RuleRepository
from .schemas import CouponType, Discount, DiscountAction, OrderItem, PromotionRule

SPECIAL_PRICE_DISCOUNT_TITLE = "Special Price"
SPECIAL_PRICE_DISCOUNT_DESCRIPTOR = "Discount from a special or catalog price"

# Residual discount at or below this is treated as rounding drift
RESIDUAL_TOLERANCE = 0.02


class LineItemDiscountsBuilder:
    """Builds the discount breakdown of an order item.

    The item's total discount is attributed first to the specific-coupon sales
    rules applied to it. Whatever is left is reported as a single special price
    discount.

    Attributes:
        rule_repository: Source of sales rules.
        coupon_lookup: Resolves the coupon code of a sales rule.
    """

    def __init__(self, rule_repository: RuleRepository, coupon_lookup: CouponCodeLookup):
        self.rule_repository = rule_repository
        self.coupon_lookup = coupon_lookup

    def build_from_sales_order_item(self, item: OrderItem) -> list[Discount]:
        """Build the discounts of one order item.

        Args:
            item: The order item.

        Returns:
            list[Discount]: Voucher discounts followed by an optional special price discount.
        """
        discounts = []
        quantity = item.quantity
        divisor = quantity or 1

        discount_amount = item.discount_amount / divisor

        # Free items carry an unreliable discount amount
        if item.price_incl_tax == 0.0:
            discount_amount = item.original_price * quantity

        if discount_amount and item.rule_ids:
            for rule_id in item.rule_ids:
                discount = self._build_rule_discount(rule_id, item.price_incl_tax, divisor)
                if discount is None:
                    continue

                discounts.append(discount)
                if discount.discount_amount > 0:
                    discount_amount -= discount.discount_amount

        if discount_amount > RESIDUAL_TOLERANCE:
            discounts.append(self._build_special_price_discount(discount_amount))

        return discounts

    def _build_rule_discount(self, rule_id: int, item_price: float, quantity: int) -> Optional[Discount]:
        """Build the voucher discount a sales rule contributes to one unit.

        Returns:
            Discount | None: None when the rule cannot be attributed to the item.
        """
        rule = self._load_rule(rule_id)
        if rule is None:
            return None

        if not rule.discount_amount:
            return None

        if rule.coupon_type != CouponType.SPECIFIC_COUPON:
            return None

        try:
            coupon_code = self.coupon_lookup.load_rule_coupon_code(rule_id)
        except Exception as e:
            logger.warning(f"Failed to load coupon code for sales rule {rule_id}: {e}")
            return None

        if rule.simple_action == DiscountAction.BY_PERCENT:
            amount = item_price * (rule.discount_amount / 100)
        elif rule.simple_action == DiscountAction.BY_FIXED:
            amount = rule.discount_amount
        else:
            logger.debug(f"Sales rule {rule_id} uses unsupported action {rule.simple_action!r}, skipping")
            return None

        if amount > 0:
            amount = amount / quantity

        return Discount(
            title=rule.name,
            descriptor=rule.description,
            is_voucher=True,
            voucher_code=coupon_code,
            discount_amount=amount,
        )

    def _load_rule(self, rule_id: int) -> Optional[PromotionRule]:
        try:
            return self.rule_repository.get_by_id(rule_id)
        except EntityNotFoundError:
            logger.debug(f"Sales rule {rule_id} not found, skipping")
        except Exception as e:
            logger.warning(f"Failed to load sales rule {rule_id}: {e}")
        return None

    @staticmethod
    def _build_special_price_discount(discount_amount: float) -> Discount:
        return Discount(
            title=SPECIAL_PRICE_DISCOUNT_TITLE,
            descriptor=SPECIAL_PRICE_DISCOUNT_DESCRIPTOR,
            discount_amount=discount_amount,
        )
