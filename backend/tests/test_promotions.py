from datetime import timedelta

from models.promotion import Promotion, DiscountType
from utils.time_utils import utcnow


def test_create_promotion_normalizes_code(client, db_session, admin_headers):
    res = client.post(
        "/api/admin/promotions",
        json={"code": " spring20 ", "discountType": "PERCENTAGE", "discountValue": 20},
        headers=admin_headers,
    )

    assert res.status_code == 201
    body = res.json()
    assert body["code"] == "SPRING20"
    assert body["usedCount"] == 0


def test_duplicate_code_conflicts(client, db_session, admin_headers):
    body = {"code": "DUP", "discountType": "FIXED_AMOUNT", "discountValue": 500}
    assert client.post("/api/admin/promotions", json=body, headers=admin_headers).status_code == 201

    res = client.post("/api/admin/promotions", json=body, headers=admin_headers)
    assert res.status_code == 409
    assert res.json() == {"error": "Promo code already exists: DUP"}


def test_percentage_over_100_is_rejected(client, db_session, admin_headers):
    res = client.post(
        "/api/admin/promotions",
        json={"code": "TOOMUCH", "discountType": "PERCENTAGE", "discountValue": 150},
        headers=admin_headers,
    )
    assert res.status_code == 400


def test_update_and_delete_promotion(client, db_session, admin_headers):
    created = client.post(
        "/api/admin/promotions",
        json={"code": "EDITME", "discountType": "FIXED_AMOUNT", "discountValue": 500},
        headers=admin_headers,
    ).json()

    patched = client.patch(f"/api/admin/promotions/{created['id']}", json={"active": False}, headers=admin_headers)
    assert patched.status_code == 200
    assert patched.json()["active"] is False

    assert client.delete(f"/api/admin/promotions/{created['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/admin/promotions/{created['id']}", headers=admin_headers).status_code == 404


def test_expired_promo_is_refused_at_checkout(client, db_session, make_product, checkout_payload):
    _, variant = make_product()
    db_session.add(Promotion(
        code="OLD", discount_type=DiscountType.FIXED_AMOUNT, discount_value=100,
        ends_at=utcnow() - timedelta(days=1),
    ))
    db_session.commit()

    res = client.post(
        "/api/checkout",
        json=checkout_payload([{"variantId": variant.id, "quantity": 1}], promoCode="OLD"),
    )
    assert res.status_code == 400
    assert res.json() == {"error": "Promo code has expired: OLD"}


def test_customer_restricted_promo(client, db_session, make_product, checkout_payload):
    _, variant = make_product()
    db_session.add(Promotion(
        code="JUSTYOU", discount_type=DiscountType.FIXED_AMOUNT, discount_value=100,
        customer_email="vip@example.com",
    ))
    db_session.commit()

    other = client.post(
        "/api/checkout",
        json=checkout_payload([{"variantId": variant.id, "quantity": 1}], promoCode="JUSTYOU"),
    )
    assert other.status_code == 400

    vip = client.post(
        "/api/checkout",
        json=checkout_payload([{"variantId": variant.id, "quantity": 1}], email="VIP@example.com", promoCode="JUSTYOU"),
    )
    assert vip.status_code == 200


def test_min_spend_is_enforced(client, db_session, make_product, checkout_payload):
    _, variant = make_product(price_cents=1000)
    db_session.add(Promotion(
        code="BIGSPEND", discount_type=DiscountType.FIXED_AMOUNT, discount_value=500, min_spend_cents=5000,
    ))
    db_session.commit()

    res = client.post(
        "/api/checkout",
        json=checkout_payload([{"variantId": variant.id, "quantity": 1}], promoCode="BIGSPEND"),
    )
    assert res.status_code == 400
    assert "Minimum spend" in res.json()["error"]


def test_promo_performance(client, db_session, admin_headers, make_product, checkout_payload):
    _, variant = make_product(price_cents=2000)
    db_session.add(Promotion(code="TENOFF", discount_type=DiscountType.PERCENTAGE, discount_value=10))
    db_session.commit()
    for _ in range(2):
        client.post(
            "/api/checkout",
            json=checkout_payload([{"variantId": variant.id, "quantity": 1}], promoCode="TENOFF"),
        )

    rows = client.get("/api/admin/promo-performance", headers=admin_headers).json()

    assert len(rows) == 1
    assert rows[0]["promoCode"] == "TENOFF"
    assert rows[0]["usageCount"] == 2
    assert rows[0]["totalDiscount"] == 400
    assert rows[0]["totalRevenue"] == 2 * (2000 + 800 - 200)


def test_auto_stop_when_linked_product_sells_out(client, db_session, admin_headers, make_product):
    product, _ = make_product(stock_on_hand=0)
    in_stock, _ = make_product(stock_on_hand=3)
    sold_out = Promotion(code="LASTCALL", discount_type=DiscountType.PERCENTAGE, discount_value=15,
                         applies_to_product_id=product.id)
    still_on = Promotion(code="KEEP", discount_type=DiscountType.PERCENTAGE, discount_value=15,
                         applies_to_product_id=in_stock.id)
    db_session.add_all([sold_out, still_on])
    db_session.commit()

    stopped = client.post(f"/api/admin/promotions/{sold_out.id}/auto-stop", headers=admin_headers).json()
    kept = client.post(f"/api/admin/promotions/{still_on.id}/auto-stop", headers=admin_headers).json()

    assert stopped == {"ok": True, "stopped": True, "reason": "out_of_stock"}
    assert kept["stopped"] is False
    db_session.expire_all()
    assert db_session.get(Promotion, sold_out.id).active is False
