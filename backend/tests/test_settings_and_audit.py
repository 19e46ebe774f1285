from datetime import datetime, timezone

import pytest

from models.log import AuditLog
from models.setting import Setting
from utils.audit import write_log


def test_settings_defaults_are_blank(client, db_session, admin_headers):
    res = client.get("/api/admin/settings", headers=admin_headers)

    assert res.status_code == 200
    body = res.json()
    assert body["shippingFlatCents"] == ""
    assert "taxRatePercent" in body


def test_patch_settings_stores_strings_and_audits(client, db_session, admin_headers):
    res = client.patch(
        "/api/admin/settings",
        json={"storeName": "Hearth & Wick", "shippingFlatCents": 650, "taxRatePercent": 8.25},
        headers=admin_headers,
    )

    assert res.status_code == 200
    body = res.json()
    assert body["storeName"] == "Hearth & Wick"
    assert body["shippingFlatCents"] == "650"
    assert body["taxRatePercent"] == "8.25"

    db_session.expire_all()
    audit = db_session.query(AuditLog).filter(AuditLog.entity_type == "settings").one()
    assert audit.before_data["shippingFlatCents"] == ""
    assert audit.after_data["shippingFlatCents"] == "650"


def test_non_numeric_shipping_is_rejected(client, db_session, admin_headers):
    res = client.patch("/api/admin/settings", json={"shippingFlatCents": "eight"}, headers=admin_headers)

    assert res.status_code == 400
    assert res.json() == {"error": "shippingFlatCents must be a non-negative whole number of cents"}


def test_audit_log_filters(client, db_session, admin_headers):
    write_log(db_session, entity_type="product", entity_id="p1", action="create")
    write_log(db_session, entity_type="product", entity_id="p2", action="update")
    write_log(db_session, entity_type="order", entity_id="o1", action="refund")

    products = client.get("/api/admin/audit-logs", params={"entity_type": "product"}, headers=admin_headers).json()
    assert {row["entityId"] for row in products} == {"p1", "p2"}

    refunds = client.get("/api/admin/audit-logs", params={"action": "refund"}, headers=admin_headers).json()
    assert [row["entityId"] for row in refunds] == ["o1"]

    limited = client.get("/api/admin/audit-logs", params={"limit": 1}, headers=admin_headers).json()
    assert len(limited) == 1


def test_audit_write_failure_does_not_raise(db_session):
    entry = write_log(db_session, entity_type=None, entity_id="x", action="create")

    assert entry is None
    assert db_session.query(AuditLog).count() == 0


def test_admin_action_records_author_and_ip(client, db_session, make_admin_user, make_product):
    _, variant = make_product()
    _, headers = make_admin_user(name="Jordan")

    client.post(
        "/api/admin/inventory/adjust",
        json={"variantId": variant.id, "quantityChange": 2, "reason": "RESTOCK"},
        headers=headers,
    )

    db_session.expire_all()
    audit = db_session.query(AuditLog).filter(AuditLog.entity_type == "inventory").one()
    assert audit.author_name == "Jordan"
    assert audit.ip == "testclient"


@pytest.mark.parametrize("rate", ["NaN", "Infinity", "-1", "seven"])
def test_unusable_tax_rate_is_rejected(client, db_session, admin_headers, make_product, checkout_payload, rate):
    _, variant = make_product(price_cents=2000)

    res = client.patch("/api/admin/settings", json={"taxRatePercent": rate}, headers=admin_headers)

    assert res.status_code == 400
    assert res.json() == {"error": "taxRatePercent must be a non-negative number"}
    checkout = client.post("/api/checkout", json=checkout_payload([{"variantId": variant.id, "quantity": 1}]))
    assert checkout.status_code == 200
    assert checkout.json()["total"] == 2800


def test_stored_non_finite_tax_rate_falls_back_to_zero(client, db_session, make_product, checkout_payload):
    _, variant = make_product(price_cents=2000)
    db_session.add(Setting(key="taxRatePercent", value="NaN"))
    db_session.commit()

    res = client.post("/api/checkout", json=checkout_payload([{"variantId": variant.id, "quantity": 1}]))

    assert res.status_code == 200
    assert res.json()["total"] == 2800


def test_audit_logs_with_same_timestamp_list_in_stable_order(client, db_session, admin_headers):
    stamp = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)
    db_session.add_all([
        AuditLog(id=f"log-{n}", entity_type="product", entity_id=f"p{n}", action="update", created_at=stamp)
        for n in (2, 3, 1)
    ])
    db_session.commit()

    rows = client.get("/api/admin/audit-logs", headers=admin_headers).json()

    assert [row["id"] for row in rows] == ["log-3", "log-2", "log-1"]
