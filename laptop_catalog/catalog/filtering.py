"""Storefront product filtering."""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional, Sequence

from laptop_catalog.config.configuration import DEFAULT_PRICE_CEILING
from laptop_catalog.models import CONDITIONS, Product


def max_price(products: Sequence[Product], fallback: float = DEFAULT_PRICE_CEILING) -> float:
    """Highest price in the list, or ``fallback`` when the list is empty."""
    if not products:
        return fallback
    return max(product.price for product in products)


def _contains(haystack: str, needle: str) -> bool:
    return needle == "" or needle.lower() in haystack.lower()


@dataclass(frozen=True)
class FilterState:
    """Active storefront filters.

    Empty strings and an empty condition set place no restriction.
    """

    price_ceiling: float
    brand: str = ""
    conditions: FrozenSet[str] = field(default_factory=frozenset)
    processor: str = ""
    ram: str = ""

    @classmethod
    def reset(
        cls,
        products: Sequence[Product],
        fallback: float = DEFAULT_PRICE_CEILING,
    ) -> "FilterState":
        """Filters cleared, ceiling set to the current maximum price."""
        return cls(price_ceiling=max_price(products, fallback))

    @classmethod
    def from_query(
        cls,
        products: Sequence[Product],
        brand: Optional[str] = None,
        price_ceiling: Optional[float] = None,
        conditions: Optional[Iterable[str]] = None,
        processor: Optional[str] = None,
        ram: Optional[str] = None,
        fallback: float = DEFAULT_PRICE_CEILING,
    ) -> "FilterState":
        """
        Build a filter state from optional storefront inputs.

        The ceiling is clamped to ``[0, max_price(products)]``; unknown
        condition names are dropped.
        """
        upper = max_price(products, fallback)
        ceiling = upper if price_ceiling is None else min(max(price_ceiling, 0), upper)
        return cls(
            price_ceiling=ceiling,
            brand=(brand or "").strip(),
            conditions=frozenset(c for c in (conditions or ()) if c in CONDITIONS),
            processor=(processor or "").strip(),
            ram=(ram or "").strip(),
        )

    def matches(self, product: Product) -> bool:
        return (
            _contains(product.brand, self.brand)
            and product.price <= self.price_ceiling
            and (not self.conditions or product.condition in self.conditions)
            and _contains(product.specs.processor, self.processor)
            and _contains(product.specs.ram, self.ram)
        )

    def to_dict(self) -> dict:
        return {
            "brand": self.brand,
            "maxPrice": self.price_ceiling,
            "conditions": sorted(self.conditions),
            "processor": self.processor,
            "ram": self.ram,
        }


def filter_products(products: Sequence[Product], state: FilterState) -> List[Product]:
    """Products matching every active filter, in their original order."""
    return [product for product in products if state.matches(product)]


def featured_products(products: Sequence[Product]) -> List[Product]:
    return [product for product in products if product.featured]


def new_arrivals(products: Sequence[Product]) -> List[Product]:
    return [product for product in products if product.new_arrival]
