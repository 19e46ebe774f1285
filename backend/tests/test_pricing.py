from decimal import Decimal
from types import SimpleNamespace

import pytest

from models.product import WickType
from models.promotion import DiscountType
from services import pricing
from utils.errors import ValidationError


def _variant(variant_id="v1", price_cents=1800, product_name="Lavender Fields Forever", collection_id=None):
    product = SimpleNamespace(id=f"p-{variant_id}", name=product_name, collection_id=collection_id)
    return SimpleNamespace(
        id=variant_id, price_cents=price_cents, vessel="Glass Jar", size_oz=8.0,
        wick_type=WickType.WOOD, product=product,
    )


def _item(variant_id, quantity, **client_fields):
    return SimpleNamespace(variant_id=variant_id, quantity=quantity, **client_fields)


def _promo(discount_type, value=0, **fields):
    return SimpleNamespace(discount_type=discount_type, discount_value=value, code="TEST", **fields)


def test_resolve_lines_uses_server_price_and_snapshots_labels():
    variants = {"v1": _variant()}
    lines = pricing.resolve_lines([_item("v1", 2, price_cents=1)], variants)

    assert len(lines) == 1
    line = lines[0]
    assert line.unit_price_cents == 1800
    assert line.line_total_cents == 3600
    assert line.product_name == "Lavender Fields Forever"
    assert line.variant_label == "Glass Jar - 8oz - Wood Wick"


def test_resolve_lines_rejects_empty_cart():
    with pytest.raises(ValidationError, match="Cart cannot be empty"):
        pricing.resolve_lines([], {})


def test_resolve_lines_names_unknown_variant():
    with pytest.raises(ValidationError, match="Invalid variant: nope"):
        pricing.resolve_lines([_item("v1", 1), _item("nope", 1)], {"v1": _variant()})


@pytest.mark.parametrize("quantity", [0, -1, 1.5, True])
def test_resolve_lines_rejects_non_positive_quantity(quantity):
    with pytest.raises(ValidationError):
        pricing.resolve_lines([_item("v1", quantity)], {"v1": _variant()})


def test_totals_identity_holds_for_mixed_cart():
    variants = {"a": _variant("a", 1800), "b": _variant("b", 2650)}
    lines = pricing.resolve_lines([_item("a", 3), _item("b", 1)], variants)
    totals = pricing.price_cart(lines, flat_shipping_cents=800)

    assert totals.subtotal_cents == sum(l.unit_price_cents * l.quantity for l in lines) == 8050
    assert totals.total_cents == totals.subtotal_cents + totals.shipping_cents - totals.discount_cents + totals.tax_cents


def test_scenario_a_two_units_plus_flat_shipping():
    lines = pricing.resolve_lines([_item("v1", 2)], {"v1": _variant(price_cents=1800)})
    totals = pricing.price_cart(lines, flat_shipping_cents=800)
    assert totals.total_cents == 4400


def test_free_shipping_threshold_waives_shipping():
    assert pricing.compute_shipping(5000, 800, 5000) == 0
    assert pricing.compute_shipping(4999, 800, 5000) == 800
    assert pricing.compute_shipping(10000, 800, None) == 800


def test_percentage_discount_floors_cents():
    lines = pricing.resolve_lines([_item("v1", 1)], {"v1": _variant(price_cents=1999)})
    promo = _promo(DiscountType.PERCENTAGE, 15)
    assert pricing.compute_discount(promo, lines, 800) == 299


def test_fixed_discount_never_exceeds_eligible_subtotal():
    lines = pricing.resolve_lines([_item("v1", 1)], {"v1": _variant(price_cents=500)})
    assert pricing.compute_discount(_promo(DiscountType.FIXED_AMOUNT, 900), lines, 800) == 500


def test_free_shipping_discount_equals_shipping_and_is_not_taxed():
    lines = pricing.resolve_lines([_item("v1", 1)], {"v1": _variant(price_cents=2000)})
    totals = pricing.price_cart(
        lines, flat_shipping_cents=800, promotion=_promo(DiscountType.FREE_SHIPPING), tax_rate_percent=10
    )
    assert totals.discount_cents == 800
    assert totals.tax_cents == 200
    assert totals.total_cents == 2000 + 800 - 800 + 200


def test_product_restricted_promotion_only_discounts_that_product():
    variants = {"a": _variant("a", 1000), "b": _variant("b", 3000)}
    lines = pricing.resolve_lines([_item("a", 1), _item("b", 1)], variants)
    promo = _promo(DiscountType.PERCENTAGE, 50, applies_to_product_id="p-b")
    assert pricing.compute_discount(promo, lines, 800) == 1500


def test_tax_rounds_half_up_on_discounted_goods():
    assert pricing.compute_tax(1250, Decimal("7.5")) == 94
    assert pricing.compute_tax(1000, 0) == 0

    lines = pricing.resolve_lines([_item("v1", 1)], {"v1": _variant(price_cents=2000)})
    totals = pricing.price_cart(
        lines, flat_shipping_cents=0, promotion=_promo(DiscountType.FIXED_AMOUNT, 500), tax_rate_percent=10
    )
    assert totals.tax_cents == 150
    assert totals.total_cents == 2000 - 500 + 150
