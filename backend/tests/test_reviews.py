from models.promotion import Promotion
from models.review import Review


def _review(**extra):
    body = {"customerEmail": "fan@example.com", "customerName": "Fan", "rating": 5, "title": "Lovely"}
    body.update(extra)
    return body


def test_unverified_review_waits_for_approval(client, db_session, admin_headers, make_product):
    make_product(slug="cozy")

    res = client.post("/api/products/cozy/reviews", json=_review())

    assert res.status_code == 200
    assert res.json()["couponCode"] is None
    assert res.json()["review"]["verified"] is False
    assert client.get("/api/products/cozy/reviews").json() == []

    review_id = res.json()["review"]["id"]
    approved = client.patch(f"/api/admin/reviews/{review_id}", json={"approved": True}, headers=admin_headers)
    assert approved.status_code == 200
    assert [r["id"] for r in client.get("/api/products/cozy/reviews").json()] == [review_id]


def test_verified_review_earns_single_use_coupon(
    client, db_session, make_product, checkout_payload
):
    _, variant = make_product(slug="cozy")
    order_id = client.post(
        "/api/checkout",
        json=checkout_payload([{"variantId": variant.id, "quantity": 1}], email="fan@example.com"),
    ).json()["orderId"]

    res = client.post("/api/products/cozy/reviews", json=_review(customerEmail="FAN@example.com", orderId=order_id))

    assert res.status_code == 200
    body = res.json()
    assert body["review"]["verified"] is True
    assert body["couponCode"].startswith("REVIEW")

    db_session.expire_all()
    coupon = db_session.query(Promotion).filter(Promotion.code == body["couponCode"]).one()
    assert coupon.max_usage_count == 1
    assert coupon.discount_value == 10
    assert coupon.customer_email == "FAN@example.com"


def test_order_of_someone_else_does_not_verify(client, db_session, make_product, checkout_payload):
    _, variant = make_product(slug="cozy")
    order_id = client.post(
        "/api/checkout",
        json=checkout_payload([{"variantId": variant.id, "quantity": 1}], email="owner@example.com"),
    ).json()["orderId"]

    res = client.post("/api/products/cozy/reviews", json=_review(orderId=order_id))

    assert res.json()["review"]["verified"] is False
    assert res.json()["couponCode"] is None


def test_review_requires_email_name_and_rating(client, db_session, make_product):
    make_product(slug="cozy")

    res = client.post("/api/products/cozy/reviews", json={"customerName": "Fan", "rating": 4})

    assert res.status_code == 400
    assert res.json() == {"error": "Email, name, and rating required"}


def test_rating_is_clamped(client, db_session, make_product):
    make_product(slug="cozy")

    client.post("/api/products/cozy/reviews", json=_review(rating=9))

    db_session.expire_all()
    assert db_session.query(Review).one().rating == 5


def test_review_for_unknown_product_is_404(client, db_session):
    assert client.post("/api/products/nope/reviews", json=_review()).status_code == 404


def test_delete_review(client, db_session, admin_headers, make_product):
    make_product(slug="cozy")
    review_id = client.post("/api/products/cozy/reviews", json=_review()).json()["review"]["id"]

    assert client.delete(f"/api/admin/reviews/{review_id}", headers=admin_headers).status_code == 200
    assert client.get("/api/admin/reviews", headers=admin_headers).json() == []


def test_waitlist_join_and_notify(client, db_session, admin_headers, make_product):
    product, _ = make_product(stock_on_hand=0)

    joined = client.post("/api/waitlist", json={"productId": product.id, "email": "wait@example.com"})
    assert joined.status_code == 200
    assert joined.json()["notified"] is False

    entries = client.get("/api/admin/waitlist", headers=admin_headers).json()
    assert len(entries) == 1

    notified = client.post(f"/api/admin/waitlist/{entries[0]['id']}/notify", headers=admin_headers)
    assert notified.json()["notified"] is True


def test_waitlist_validation(client, db_session):
    missing = client.post("/api/waitlist", json={"email": "wait@example.com"})
    assert missing.status_code == 400
    assert missing.json() == {"error": "Product ID and email required"}

    unknown = client.post("/api/waitlist", json={"productId": "nope", "email": "wait@example.com"})
    assert unknown.status_code == 404
