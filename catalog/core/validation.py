"""
Field-level constraint checks for Product records.

Each field carries its own rules; there are no cross-field constraints.
`validate` evaluates every rule and returns the full set of violations
instead of raising, so an empty set means the product is valid.

Usage:
    violations = validate(product)
    if not violations:
        service.save(product)
"""
from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional, Set, Tuple
import logging

from catalog.models.product import Product, ProductStatus

logger = logging.getLogger(__name__)

TITLE_MIN, TITLE_MAX = 3, 100
KEYWORDS_MAX = 200
DESCRIPTION_MIN = 50
RATING_MIN, RATING_MAX = 1, 10
DIMENSIONS_MAX = 50
PRICE_MAX = Decimal("9999")

NOT_NULL = "must not be null"


@dataclass(frozen=True)
class Violation:
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


Predicate = Callable[[Any], bool]


@dataclass(frozen=True)
class Rule:
    """One constraint on one field, consulted only when the value is present."""
    field: str
    predicate: Predicate
    message: str


def _length_between(lo: int, hi: Optional[int]) -> Predicate:
    def check(value: str) -> bool:
        n = len(value)
        return n >= lo and (hi is None or n <= hi)
    return check


def _description_ok(value: str) -> bool:
    # empty is treated like absent; otherwise there is only a lower bound
    return len(value) == 0 or len(value) >= DESCRIPTION_MIN


def _price_ok(value: Any) -> bool:
    try:
        price = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        return False
    # NaN and infinities never compare into range
    return price.is_finite() and Decimal(0) < price <= PRICE_MAX


# absence of any of these is reported as NOT_NULL
REQUIRED_FIELDS: Tuple[str, ...] = (
    "title",
    "quantity_in_stock",
    "price",
    "status",
    "date_added",
)

RULES: Tuple[Rule, ...] = (
    Rule("title", _length_between(TITLE_MIN, TITLE_MAX),
         f"size must be between {TITLE_MIN} and {TITLE_MAX}"),
    Rule("keywords", _length_between(0, KEYWORDS_MAX),
         f"size must be between 0 and {KEYWORDS_MAX}"),
    Rule("description", _description_ok,
         f"size must be at least {DESCRIPTION_MIN} when not empty"),
    Rule("rating", lambda v: v >= RATING_MIN,
         f"must be greater than or equal to {RATING_MIN}"),
    Rule("rating", lambda v: v <= RATING_MAX,
         f"must be less than or equal to {RATING_MAX}"),
    Rule("quantity_in_stock", lambda v: v >= 0,
         "must be greater than or equal to 0"),
    Rule("dimensions", _length_between(0, DIMENSIONS_MAX),
         f"size must be between 0 and {DIMENSIONS_MAX}"),
    Rule("price", _price_ok,
         f"must be greater than 0 and less than or equal to {PRICE_MAX}"),
    Rule("status", lambda v: isinstance(v, ProductStatus),
         "must be one of " + ", ".join(s.name for s in ProductStatus)),
    Rule("weight", lambda v: v >= 0,
         "must be greater than or equal to 0"),
    # date_added only needs to be present; date_modified is unconstrained
)


def validate(product: Product) -> Set[Violation]:
    """
    Apply every rule to `product` and return all violations found.
    Pure: the product is not modified and repeated calls give equal sets.
    """
    violations: Set[Violation] = set()
    for name in REQUIRED_FIELDS:
        if getattr(product, name) is None:
            violations.add(Violation(name, NOT_NULL))
    for rule in RULES:
        value = getattr(product, rule.field)
        if value is None:
            continue
        if not rule.predicate(value):
            violations.add(Violation(rule.field, rule.message))
    logger.debug("Validated Product id=%s: %d violation(s)", product.id, len(violations))
    return violations


def is_valid(product: Product) -> bool:
    return not validate(product)
