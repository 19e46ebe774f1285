from datetime import timedelta

from models.log import AuditLog
from models.product import Product, ProductStatus, Variant
from models.stock import InventoryAdjustment
from utils.time_utils import utcnow


def _product_body(slug="amber-glow", **extra):
    body = {
        "name": "Amber Glow",
        "slug": slug,
        "description": "Warm amber and vanilla.",
        "variants": [
            {"vessel": "Tin", "sizeOz": 4, "wickType": "COTTON", "priceCents": 1400, "sku": f"{slug}-tin",
             "initialStock": 12},
        ],
    }
    body.update(extra)
    return body


def test_create_product_books_initial_stock(client, db_session, admin_headers):
    res = client.post("/api/admin/products", json=_product_body(), headers=admin_headers)

    assert res.status_code == 201
    body = res.json()
    assert body["slug"] == "amber-glow"
    assert body["variants"][0]["stockOnHand"] == 12

    db_session.expire_all()
    entry = db_session.query(InventoryAdjustment).one()
    assert (entry.reason.value, entry.previous_on_hand, entry.new_on_hand) == ("INITIAL", 0, 12)
    assert db_session.query(AuditLog).filter(AuditLog.entity_type == "product", AuditLog.action == "create").count() == 1


def test_duplicate_slug_conflicts(client, db_session, admin_headers):
    assert client.post("/api/admin/products", json=_product_body(), headers=admin_headers).status_code == 201

    body = _product_body()
    body["variants"][0]["sku"] = "another-sku"
    res = client.post("/api/admin/products", json=body, headers=admin_headers)

    assert res.status_code == 409
    assert "already exists" in res.json()["error"]


def test_invalid_slug_is_rejected(client, db_session, admin_headers):
    res = client.post("/api/admin/products", json=_product_body(slug="Not A Slug"), headers=admin_headers)
    assert res.status_code == 400
    assert res.json()["error"].startswith("slug")


def test_list_and_search_products(client, db_session, admin_headers, make_product):
    make_product(name="Lavender Fields Forever", tags="floral")
    make_product(name="Cinnamon Swirl", tags="gourmand")

    res = client.get("/api/admin/products", params={"q": "floral"}, headers=admin_headers)

    assert res.status_code == 200
    body = res.json()
    assert body["total"] == 1
    assert body["items"][0]["name"] == "Lavender Fields Forever"


def test_delete_archives_product(client, db_session, admin_headers, make_product):
    product, _ = make_product(slug="to-archive")

    res = client.delete(f"/api/admin/products/{product.id}", headers=admin_headers)

    assert res.status_code == 200
    db_session.expire_all()
    stored = db_session.get(Product, product.id)
    assert stored.status == ProductStatus.ARCHIVED
    assert stored.active is False
    assert client.get("/api/products/to-archive").status_code == 404

    archived = client.get("/api/admin/products", params={"status": "ARCHIVED"}, headers=admin_headers).json()
    assert archived["total"] == 1


def test_price_change_is_audited_separately(client, db_session, admin_headers, make_product):
    _, variant = make_product(price_cents=1800)

    res = client.patch(f"/api/admin/variants/{variant.id}", json={"priceCents": 2200}, headers=admin_headers)

    assert res.status_code == 200
    assert res.json()["priceCents"] == 2200
    db_session.expire_all()
    actions = sorted(a for (a,) in db_session.query(AuditLog.action).filter(AuditLog.entity_id == variant.id))
    assert actions == ["price_change", "update"]
    change = db_session.query(AuditLog).filter(AuditLog.action == "price_change").one()
    assert change.before_data == {"price_cents": 1800}
    assert change.after_data == {"price_cents": 2200}


def test_variant_delete_deactivates(client, db_session, admin_headers, make_product, checkout_payload):
    _, variant = make_product()

    assert client.delete(f"/api/admin/variants/{variant.id}", headers=admin_headers).status_code == 200

    db_session.expire_all()
    assert db_session.get(Variant, variant.id).active is False
    res = client.post("/api/checkout", json=checkout_payload([{"variantId": variant.id, "quantity": 1}]))
    assert res.status_code == 400


def test_add_variant_to_existing_product(client, db_session, admin_headers, make_product):
    product, _ = make_product()

    res = client.post(
        f"/api/admin/products/{product.id}/variants",
        json={"vessel": "Ceramic", "sizeOz": 12, "wickType": "WOOD", "priceCents": 3200, "initialStock": 5},
        headers=admin_headers,
    )

    assert res.status_code == 201
    assert res.json()["stockOnHand"] == 5
    detail = client.get(f"/api/admin/products/{product.id}", headers=admin_headers).json()
    assert len(detail["variants"]) == 2


def test_categories_and_collections(client, db_session, admin_headers, make_product):
    collection = client.post(
        "/api/admin/collections", json={"name": "Fall", "slug": "fall"}, headers=admin_headers
    ).json()
    product, _ = make_product(collection_id=collection["id"])

    assert client.post(
        "/api/admin/categories", json={"name": "Jars", "slug": "jars"}, headers=admin_headers
    ).status_code == 201
    assert len(client.get("/api/admin/categories", headers=admin_headers).json()) == 1

    assert client.delete(f"/api/admin/collections/{collection['id']}", headers=admin_headers).status_code == 200
    db_session.expire_all()
    assert db_session.get(Product, product.id).collection_id is None


def test_storefront_lists_only_visible_products(client, db_session, make_product):
    make_product(name="Visible", slug="visible", featured=True)
    make_product(name="Hidden", slug="hidden", active=False)
    make_product(name="Draft", slug="draft", status=ProductStatus.DRAFT)
    make_product(name="Later", slug="later", scheduled_at=utcnow() + timedelta(days=3))

    names = [p["name"] for p in client.get("/api/products").json()]
    assert names == ["Visible"]

    featured = client.get("/api/products/featured").json()
    assert [p["slug"] for p in featured] == ["visible"]


def test_storefront_product_hides_inactive_variants_and_costs(client, db_session, make_product):
    product, variant = make_product(slug="two-variants", price_cents=1800)
    db_session.add(Variant(
        product_id=product.id, vessel="Tin", size_oz=4, wick_type="WOOD", price_cents=900, active=False,
    ))
    db_session.commit()

    res = client.get("/api/products/two-variants")

    assert res.status_code == 200
    variants = res.json()["variants"]
    assert [v["id"] for v in variants] == [variant.id]
    assert "stockOnHand" not in variants[0]
    assert "costCents" not in variants[0]


def test_unknown_storefront_product_is_404(client, db_session):
    res = client.get("/api/products/nope")
    assert res.status_code == 404
    assert res.json() == {"error": "Product not found"}
