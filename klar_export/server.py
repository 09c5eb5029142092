"""FastAPI server for building Klar order exports."""

from fastapi import APIRouter, FastAPI, HTTPException

from .config import WeightUnit
from .line_items import LineItemsBuilder
from .logger import logger
from .repositories import InMemoryCategoryRepository, InMemoryRuleRepository, InMemoryTaxItemSource
from .schemas import ExportRequest, TaxableItemType
from .taxes import TaxesBuilder

app = FastAPI(title="Klar Export")
router = APIRouter()


@router.get("/health")
def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy"}


@router.post("/orders/line-items")
def build_order_line_items(request: ExportRequest):
    """Build the exported line items and shipping taxes of an order.

    Args:
        request (ExportRequest): The order and the records its export depends on.

    Returns:
        dict: ``orderId``, ``lineItems`` and ``shippingTaxes`` in export format.
    """
    order = request.order
    logger.info(f"Building line items for order {order.id} ({len(order.items)} items)")

    try:
        weight_unit = WeightUnit(request.weight_unit.lower()) if request.weight_unit else None
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Unsupported weight unit: {request.weight_unit}") from None

    rules = InMemoryRuleRepository(request.rules, request.coupon_codes)
    tax_items = InMemoryTaxItemSource(order.id, request.tax_items)
    taxes_builder = TaxesBuilder(tax_items)
    builder = LineItemsBuilder(
        InMemoryCategoryRepository(request.categories),
        rule_repository=rules,
        coupon_lookup=rules,
        weight_unit=weight_unit,
        taxes_builder=taxes_builder,
    )

    try:
        line_items = builder.build_from_sales_order(order)
        shipping_taxes = taxes_builder.build(order.id, None, TaxableItemType.SHIPPING)
    except Exception as e:
        logger.error(f"Failed to build line items for order {order.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to build line items") from e

    return {
        "orderId": str(order.id),
        "lineItems": [line_item.to_payload() for line_item in line_items],
        "shippingTaxes": [tax.to_payload() for tax in shipping_taxes],
    }


app.include_router(router)
logger.info("API router mounted.")
