# backend/services/pricing.py
"""Order-total arithmetic over server-resolved prices.

Everything here is pure: callers pass in the variants they loaded, and the
functions never touch the database. Money is integer cents throughout.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Mapping, Optional

from utils.errors import ValidationError

EMPTY_CART_MESSAGE = "Cart cannot be empty"


@dataclass(frozen=True)
class ResolvedLine:
    variant_id: str
    product_id: Optional[str]
    collection_id: Optional[str]
    product_name: str
    variant_label: str
    quantity: int
    unit_price_cents: int

    @property
    def line_total_cents(self) -> int:
        return self.unit_price_cents * self.quantity


@dataclass(frozen=True)
class OrderTotals:
    subtotal_cents: int
    shipping_cents: int
    discount_cents: int = 0
    tax_cents: int = 0

    @property
    def total_cents(self) -> int:
        return self.subtotal_cents + self.shipping_cents - self.discount_cents + self.tax_cents


def _wick_label(wick_type) -> str:
    value = getattr(wick_type, "value", wick_type)
    return "Wood Wick" if value == "WOOD" else "Cotton Wick"


def _format_size(size_oz) -> str:
    size = float(size_oz)
    return str(int(size)) if size.is_integer() else str(size)


def variant_label(variant) -> str:
    return f"{variant.vessel} - {_format_size(variant.size_oz)}oz - {_wick_label(variant.wick_type)}"


def resolve_lines(items: Iterable, variants: Mapping[str, object]) -> List[ResolvedLine]:
    """Price each cart line from the authoritative variant.

    ``items`` only contribute ``variant_id`` and ``quantity``; any price the
    client sent is ignored. Unknown variants fail the whole cart.
    """
    items = list(items)
    if not items:
        raise ValidationError(EMPTY_CART_MESSAGE)

    lines: List[ResolvedLine] = []
    for item in items:
        quantity = item.quantity
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError(f"Quantity must be a positive integer for variant: {item.variant_id}")

        variant = variants.get(item.variant_id)
        if variant is None:
            raise ValidationError(f"Invalid variant: {item.variant_id}")

        product = getattr(variant, "product", None)
        lines.append(ResolvedLine(
            variant_id=variant.id,
            product_id=getattr(product, "id", None),
            collection_id=getattr(product, "collection_id", None),
            product_name=product.name if product is not None else "Unknown Product",
            variant_label=variant_label(variant),
            quantity=quantity,
            unit_price_cents=variant.price_cents,
        ))
    return lines


def subtotal(lines: Iterable[ResolvedLine]) -> int:
    return sum(line.line_total_cents for line in lines)


def compute_shipping(subtotal_cents: int, flat_cents: int, free_threshold_cents: Optional[int] = None) -> int:
    if free_threshold_cents and subtotal_cents >= free_threshold_cents:
        return 0
    return flat_cents


def _eligible_subtotal(promotion, lines: List[ResolvedLine]) -> int:
    product_id = getattr(promotion, "applies_to_product_id", None)
    collection_id = getattr(promotion, "applies_to_collection_id", None)
    eligible = lines
    if product_id:
        eligible = [l for l in eligible if l.product_id == product_id]
    if collection_id:
        eligible = [l for l in eligible if l.collection_id == collection_id]
    return subtotal(eligible)


def is_shipping_discount(promotion) -> bool:
    discount_type = getattr(promotion.discount_type, "value", promotion.discount_type)
    return discount_type == "FREE_SHIPPING"


def compute_discount(promotion, lines: List[ResolvedLine], shipping_cents: int) -> int:
    if promotion is None:
        return 0
    discount_type = getattr(promotion.discount_type, "value", promotion.discount_type)
    value = max(int(promotion.discount_value or 0), 0)

    if discount_type == "FREE_SHIPPING":
        return shipping_cents

    eligible = _eligible_subtotal(promotion, lines)
    if discount_type == "PERCENTAGE":
        return eligible * min(value, 100) // 100
    if discount_type == "FIXED_AMOUNT":
        return min(value, eligible)
    raise ValidationError(f"Unsupported discount type: {discount_type}")


def compute_tax(taxable_cents: int, rate_percent) -> int:
    rate = Decimal(str(rate_percent or 0))
    if rate <= 0 or taxable_cents <= 0:
        return 0
    tax = Decimal(taxable_cents) * rate / Decimal(100)
    return int(tax.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def compute_totals(lines: List[ResolvedLine], shipping_cents: int, discount_cents: int = 0, tax_cents: int = 0) -> OrderTotals:
    return OrderTotals(
        subtotal_cents=subtotal(lines),
        shipping_cents=shipping_cents,
        discount_cents=discount_cents,
        tax_cents=tax_cents,
    )


def price_cart(
    lines: List[ResolvedLine],
    *,
    flat_shipping_cents: int,
    free_shipping_threshold_cents: Optional[int] = None,
    promotion=None,
    tax_rate_percent=0,
) -> OrderTotals:
    """Shipping, then discount, then tax on the discounted goods total."""
    sub = subtotal(lines)
    shipping = compute_shipping(sub, flat_shipping_cents, free_shipping_threshold_cents)
    discount = compute_discount(promotion, lines, shipping)
    goods_discount = 0 if promotion is None or is_shipping_discount(promotion) else discount
    tax = compute_tax(sub - goods_discount, tax_rate_percent)
    return compute_totals(lines, shipping, discount, tax)
