"""Read-only lookups the builders depend on, with in-memory implementations."""

from typing import Iterable, Mapping, Protocol

from .schemas import Category, PromotionRule, TaxLineRecord


class EntityNotFoundError(LookupError):
    """Raised when a referenced rule, coupon or category does not exist."""

    def __init__(self, entity: str, entity_id: int):
        super().__init__(f"{entity} with id {entity_id} does not exist")
        self.entity = entity
        self.entity_id = entity_id


class RuleRepository(Protocol):
    """Protocol for loading sales rules."""

    def get_by_id(self, rule_id: int) -> PromotionRule:
        """Load a sales rule.

        Raises:
            EntityNotFoundError: If no rule has this id.
        """
        ...


class CouponCodeLookup(Protocol):
    """Protocol for resolving the coupon code of a sales rule."""

    def load_rule_coupon_code(self, rule_id: int) -> str:
        ...


class CategoryRepository(Protocol):
    """Protocol for loading catalog categories."""

    def get(self, category_id: int) -> Category:
        """Load a category.

        Raises:
            EntityNotFoundError: If no category has this id.
        """
        ...


class TaxItemSource(Protocol):
    """Protocol for reading the tax lines of an order."""

    def get_tax_items_by_order_id(self, order_id: int) -> list[TaxLineRecord]:
        ...


class InMemoryRuleRepository:
    """Rule repository and coupon-code lookup backed by dictionaries."""

    def __init__(self, rules: Iterable[PromotionRule] = (), coupon_codes: Mapping[int, str] | None = None):
        self._rules = {rule.rule_id: rule for rule in rules}
        self._coupon_codes = dict(coupon_codes or {})

    def get_by_id(self, rule_id: int) -> PromotionRule:
        try:
            return self._rules[rule_id]
        except KeyError:
            raise EntityNotFoundError("Sales rule", rule_id) from None

    def load_rule_coupon_code(self, rule_id: int) -> str:
        try:
            return self._coupon_codes[rule_id]
        except KeyError:
            raise EntityNotFoundError("Coupon for sales rule", rule_id) from None


class InMemoryCategoryRepository:
    """Category repository backed by a dictionary."""

    def __init__(self, categories: Iterable[Category] = ()):
        self._categories = {category.id: category for category in categories}

    def get(self, category_id: int) -> Category:
        try:
            return self._categories[category_id]
        except KeyError:
            raise EntityNotFoundError("Category", category_id) from None


class InMemoryTaxItemSource:
    """Tax-line accessor holding the tax lines of a single order."""

    def __init__(self, order_id: int, tax_items: Iterable[TaxLineRecord] = ()):
        self._order_id = order_id
        self._tax_items = list(tax_items)

    def get_tax_items_by_order_id(self, order_id: int) -> list[TaxLineRecord]:
        if order_id != self._order_id:
            return []
        return list(self._tax_items)
