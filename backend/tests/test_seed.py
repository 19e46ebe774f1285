from models.product import Product, Variant
from models.setting import Setting
from models.stock import InventoryAdjustment
from seed import seed_database


def test_seed_creates_catalog_once(db_session):
    assert seed_database(db_session) is True
    assert seed_database(db_session) is False

    assert db_session.query(Product).count() == 4
    variants = db_session.query(Variant).all()
    assert len(variants) == 9
    assert {v.stock_on_hand for v in variants} == {25}
    assert db_session.query(InventoryAdjustment).count() == 9
    assert db_session.get(Setting, "shippingFlatCents").value == "800"


def test_seeded_catalog_is_purchasable(client, db_session, checkout_payload):
    seed_database(db_session)
    variant = db_session.query(Variant).filter(Variant.sku == "wss-glassjar-8oz-cotton").one()

    res = client.post("/api/checkout", json=checkout_payload([{"variantId": variant.id, "quantity": 2}]))

    assert res.status_code == 200
    assert res.json()["total"] == 4400
