"""Tax breakdown for order items and shipping."""

from typing import Optional, Union

from .repositories import TaxItemSource
from .schemas import OrderItem, Tax, TaxableItemType


class TaxesBuilder:
    """Builds taxes from the tax lines stored for an order.

    Product tax lines only hold an order-level aggregate, so per-unit product tax
    is extracted from the item's tax-inclusive price. Other tax lines (shipping)
    use the stored amount as is.
    """

    def __init__(self, tax_item_source: TaxItemSource):
        self.tax_item_source = tax_item_source

    def build(
        self,
        order_id: int,
        item: Optional[OrderItem] = None,
        taxable_item_type: Union[TaxableItemType, str] = TaxableItemType.PRODUCT,
    ) -> list[Tax]:
        """Get the taxes of an order for one taxable item type.

        Args:
            order_id: Order whose tax lines are read.
            item: Restrict product tax lines to this item and compute their amount from its price.
            taxable_item_type: Type of tax lines to return.

        Returns:
            list[Tax]: Matching taxes, empty when none match.
        """
        taxable_item_type = TaxableItemType(taxable_item_type)
        taxes = []

        for tax_item in self.tax_item_source.get_tax_items_by_order_id(order_id):
            tax_rate = tax_item.tax_percent / 100

            if tax_item.taxable_item_type == TaxableItemType.PRODUCT and item is not None:
                if tax_item.item_id != item.item_id:
                    continue
                tax_amount = extract_included_tax(unit_price_after_discount(item), tax_rate)
            else:
                tax_amount = tax_item.real_amount

            if tax_item.taxable_item_type == taxable_item_type:
                taxes.append(Tax(title=tax_item.title, tax_rate=tax_rate, tax_amount=tax_amount))

        return taxes


def unit_price_after_discount(item: OrderItem) -> float:
    """Original unit price minus the item's per-unit discount."""
    qty = item.qty_ordered or 1
    return item.original_price - item.discount_amount / qty


def extract_included_tax(price: float, tax_rate: float) -> float:
    """Tax component of a tax-inclusive price."""
    return price - price / (1 + tax_rate)
