from datetime import datetime, timezone

from models.log import AuditLog
from models.product import Variant
from models.stock import InventoryAdjustment, AdjustmentReason


def _adjust(client, headers, variant_id, change, reason="SALE", **extra):
    body = {"variantId": variant_id, "quantityChange": change, "reason": reason}
    body.update(extra)
    return client.post("/api/admin/inventory/adjust", json=body, headers=headers)


def test_adjustment_updates_stock_and_ledger(client, db_session, admin_headers, make_product):
    _, variant = make_product(stock_on_hand=10)

    res = _adjust(client, admin_headers, variant.id, -3, notes="Market stall")

    assert res.status_code == 200
    body = res.json()
    assert (body["previousOnHand"], body["newOnHand"], body["quantityChange"]) == (10, 7, -3)
    assert body["reason"] == "SALE"

    db_session.expire_all()
    assert db_session.get(Variant, variant.id).stock_on_hand == 7
    row = db_session.query(InventoryAdjustment).one()
    assert row.new_on_hand == row.previous_on_hand + row.quantity_change

    audit = db_session.query(AuditLog).filter(AuditLog.entity_type == "inventory").one()
    assert audit.action == "adjust"
    assert audit.entity_id == variant.id
    assert audit.before_data == {"stock_on_hand": 10}
    assert audit.after_data == {"stock_on_hand": 7}


def test_consecutive_adjustments_chain(client, db_session, admin_headers, make_product):
    _, variant = make_product(stock_on_hand=4)

    _adjust(client, admin_headers, variant.id, 6, reason="restock")
    _adjust(client, admin_headers, variant.id, -2, reason="DAMAGE")

    rows = client.get(
        "/api/admin/inventory/adjustments", params={"variant_id": variant.id}, headers=admin_headers
    ).json()
    levels = sorted((r["previousOnHand"], r["newOnHand"]) for r in rows)
    assert levels == [(4, 10), (10, 8)]


def test_zero_change_is_rejected(client, db_session, admin_headers, make_product):
    _, variant = make_product(stock_on_hand=10)

    res = _adjust(client, admin_headers, variant.id, 0)

    assert res.status_code == 400
    assert res.json() == {"error": "quantityChange must be non-zero"}
    db_session.expire_all()
    assert db_session.query(InventoryAdjustment).count() == 0


def test_unknown_reason_is_rejected(client, db_session, admin_headers, make_product):
    _, variant = make_product()

    res = _adjust(client, admin_headers, variant.id, 1, reason="GIFT")

    assert res.status_code == 400
    assert res.json()["error"].startswith("Invalid reason: GIFT")


def test_unknown_variant_is_404(client, db_session, admin_headers):
    res = _adjust(client, admin_headers, "missing", 5, reason="RESTOCK")

    assert res.status_code == 404
    assert res.json() == {"error": "Variant not found"}
    db_session.expire_all()
    assert db_session.query(InventoryAdjustment).count() == 0


def test_readonly_cannot_adjust(client, db_session, make_admin_user, make_product):
    _, variant = make_product()
    _, headers = make_admin_user(role="READONLY", email="viewer@example.com")

    assert _adjust(client, headers, variant.id, 1, reason="RESTOCK").status_code == 403


def test_low_stock_uses_reorder_point(client, db_session, admin_headers, make_product):
    _, low = make_product(stock_on_hand=2, reorder_point=5)
    make_product(stock_on_hand=20, reorder_point=5)
    make_product(stock_on_hand=0, variant_active=False)

    res = client.get("/api/admin/inventory/low-stock", headers=admin_headers)

    assert res.status_code == 200
    body = res.json()
    assert body["count"] == 1
    assert body["items"][0]["variantId"] == low.id
    assert body["items"][0]["variantLabel"] == "Glass Jar - 8oz - Cotton Wick"


def test_low_stock_threshold_override(client, db_session, admin_headers, make_product):
    make_product(stock_on_hand=2, reorder_point=1)
    make_product(stock_on_hand=8, reorder_point=1)

    body = client.get(
        "/api/admin/inventory/low-stock", params={"threshold": 10}, headers=admin_headers
    ).json()
    assert body["count"] == 2


def test_low_stock_reflects_latest_adjustment(client, db_session, admin_headers, make_product):
    _, variant = make_product(stock_on_hand=6, reorder_point=5)
    assert client.get("/api/admin/inventory/low-stock", headers=admin_headers).json()["count"] == 0

    _adjust(client, admin_headers, variant.id, -1)

    assert client.get("/api/admin/inventory/low-stock", headers=admin_headers).json()["count"] == 1


def test_inventory_overview_lists_variants(client, db_session, admin_headers, make_product):
    make_product(name="Amber Glow", stock_on_hand=4)

    rows = client.get("/api/admin/inventory", headers=admin_headers).json()

    assert len(rows) == 1
    assert rows[0]["productName"] == "Amber Glow"
    assert rows[0]["stockOnHand"] == 4


def test_adjustments_with_same_timestamp_list_in_stable_order(client, db_session, admin_headers, make_product):
    _, variant = make_product(stock_on_hand=10)
    stamp = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)
    db_session.add_all([
        InventoryAdjustment(
            id=f"adj-{n}", variant_id=variant.id, quantity_change=1, reason=AdjustmentReason.RESTOCK,
            previous_on_hand=10, new_on_hand=11, created_at=stamp,
        )
        for n in (1, 3, 2)
    ])
    db_session.commit()

    rows = client.get("/api/admin/inventory/adjustments", headers=admin_headers).json()

    assert [r["id"] for r in rows] == ["adj-3", "adj-2", "adj-1"]
