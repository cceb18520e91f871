"""Promotion eligibility and per-item discount pricing.

Everything here works on in-memory snapshots (ORM rows or any object with
the same attributes) and never touches the database.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, Mapping

from menuboard.errors import InvalidArgument
from menuboard.models.core import DiscountType
from menuboard.services.windows import is_within_window

logger = logging.getLogger("menuboard.promotions")

ZERO = Decimal("0")
HUNDRED = Decimal("100")


# ---------- eligibility ----------

def is_eligible(promotion: Any, today: date) -> bool:
    return bool(promotion.is_active) and is_within_window(today, promotion.start_date, promotion.end_date)


def eligible(promotions: Iterable[Any], today: date) -> list:
    return [p for p in promotions if is_eligible(p, today)]


def sort_for_display(promotions: Iterable[Any]) -> list:
    """Newest first; rows without a creation time go last."""
    floor = datetime.min.replace(tzinfo=timezone.utc)

    def key(p):
        ts = getattr(p, "created_at", None)
        if ts is None:
            return floor
        return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)

    return sorted(promotions, key=key, reverse=True)


# ---------- discounts ----------

@dataclass(frozen=True)
class NoDiscount:
    def apply(self, base: Decimal) -> Decimal:
        return base


@dataclass(frozen=True)
class Percentage:
    value: Decimal

    def apply(self, base: Decimal) -> Decimal:
        return max(ZERO, base * (1 - self.value / HUNDRED))


@dataclass(frozen=True)
class Fixed:
    value: Decimal

    def apply(self, base: Decimal) -> Decimal:
        return max(ZERO, base - self.value)


Discount = NoDiscount | Percentage | Fixed


def _decimal(value, name: str) -> Decimal:
    if isinstance(value, bool):
        raise InvalidArgument(f"{name} must be numeric")
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value))
    except ArithmeticError:
        raise InvalidArgument(f"{name} must be numeric, got {value!r}")
    if not d.is_finite():
        raise InvalidArgument(f"{name} must be finite")
    if d < 0:
        raise InvalidArgument(f"{name} must not be negative")
    return d


def discount_from_link(discount_type, discount_value) -> Discount:
    """Turn the loosely typed (type, value) pair stored on a link into a variant."""
    if discount_type is None or discount_value is None:
        return NoDiscount()
    value = _decimal(discount_value, "discount_value")
    if value == 0:
        return NoDiscount()
    if isinstance(discount_type, str):
        try:
            discount_type = DiscountType(discount_type)
        except ValueError:
            raise InvalidArgument(f"unknown discount type {discount_type!r}")
    if discount_type is DiscountType.PERCENTAGE:
        return Percentage(value)
    if discount_type is DiscountType.FIXED:
        return Fixed(value)
    raise InvalidArgument(f"unknown discount type {discount_type!r}")


def compute_discounted_price(base_price, discount_type=None, discount_value=None) -> Decimal:
    base = _decimal(base_price, "base_price")
    return discount_from_link(discount_type, discount_value).apply(base)


# ---------- offers ----------

@dataclass(frozen=True)
class Offer:
    promotion: Any
    discount: Discount
    price: Decimal
    discounted_price: Decimal

    @property
    def has_discount(self) -> bool:
        return not isinstance(self.discount, NoDiscount) and self.discounted_price < self.price


def best_offers(
    items: Iterable[Any],
    links: Iterable[Any],
    promotions: Iterable[Any],
    today: date,
) -> dict[str, Offer]:
    """Best eligible offer per menu item id.

    Lowest resulting price wins; on a tie the promotion shown first in the
    banner (newest) wins. Links whose item or promotion is missing from the
    snapshot are skipped.
    """
    items_by_id: Mapping[str, Any] = {i.id: i for i in items}
    ordered = sort_for_display(eligible(promotions, today))
    rank = {p.id: n for n, p in enumerate(ordered)}
    promos_by_id = {p.id: p for p in ordered}

    out: dict[str, Offer] = {}
    for link in links:
        item = items_by_id.get(link.menu_item_id)
        promo = promos_by_id.get(link.promotion_id)
        if item is None or promo is None:
            continue
        price = _decimal(item.price, "price")
        discount = discount_from_link(link.discount_type, link.discount_value)
        offer = Offer(promo, discount, price, discount.apply(price))
        current = out.get(item.id)
        if current is None or (offer.discounted_price, rank[promo.id]) < (
            current.discounted_price, rank[current.promotion.id]
        ):
            out[item.id] = offer
    logger.debug("computed %d offers from %d eligible promotions", len(out), len(ordered))
    return out
