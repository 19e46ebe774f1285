# backend/seed.py
"""Populate an empty database with the starter candle catalog.

Run with ``python seed.py`` from the backend directory. Safe to re-run:
nothing is written once the first seed product exists.
"""
import logging

from sqlalchemy.orm import Session

from config import settings
from database import SessionLocal, init_db
from models.product import Product, WickType
from services import catalog_service, settings_service
from utils.logging_setup import setup_logging

logger = logging.getLogger(__name__)

SEED_MARKER_SLUG = "whipped-strawberry-sundae"
OPENING_STOCK = 25


def _variant(vessel: str, size_oz: float, wick: WickType, price_cents: int, sku: str) -> dict:
    return {
        "vessel": vessel,
        "size_oz": size_oz,
        "wick_type": wick,
        "price_cents": price_cents,
        "sku": sku,
        "active": True,
        "initial_stock": OPENING_STOCK,
    }


SEED_PRODUCTS = [
    {
        "name": "Whipped Strawberry Sundae",
        "slug": "whipped-strawberry-sundae",
        "description": "A luscious whipped-top dessert candle with a sweet, bakery vibe. "
                       "Notes of fresh strawberries, vanilla cream, and a hint of sugar cone.",
        "image_url": "/images/candle-strawberry.png",
        "variants": [
            _variant("Glass Jar", 8, WickType.COTTON, 1800, "wss-glassjar-8oz-cotton"),
            _variant("Glass Jar", 8, WickType.WOOD, 2000, "wss-glassjar-8oz-wood"),
            _variant("Ceramic Bowl", 12, WickType.WOOD, 2800, "wss-ceramic-12oz-wood"),
        ],
    },
    {
        "name": "Vanilla Caramel Drizzle",
        "slug": "vanilla-caramel-drizzle",
        "description": "Rich, warm vanilla bean swirled with buttery caramel and a touch of sea salt. "
                       "The ultimate cozy evening companion.",
        "image_url": "/images/candle-vanilla.png",
        "variants": [
            _variant("Amber Jar", 8, WickType.COTTON, 1800, "vcd-amber-8oz-cotton"),
            _variant("Amber Jar", 8, WickType.WOOD, 2000, "vcd-amber-8oz-wood"),
        ],
    },
    {
        "name": "Lavender Fields Forever",
        "slug": "lavender-fields-forever",
        "description": "A calming blend of French lavender, chamomile, and soft musk. "
                       "Drift away into tranquility with every light.",
        "image_url": "/images/candle-lavender.png",
        "variants": [
            _variant("Glass Jar", 8, WickType.COTTON, 1800, "lff-glass-8oz-cotton"),
            _variant("Glass Jar", 12, WickType.WOOD, 2600, "lff-glass-12oz-wood"),
        ],
    },
    {
        "name": "Chocolate Truffle Bliss",
        "slug": "chocolate-truffle-bliss",
        "description": "Decadent dark chocolate fused with hazelnut praline and espresso undertones. "
                       "A dessert candle for the true indulgent.",
        "image_url": "/images/candle-chocolate.png",
        "variants": [
            _variant("Ceramic Bowl", 10, WickType.WOOD, 2400, "ctb-ceramic-10oz-wood"),
            _variant("Glass Jar", 8, WickType.COTTON, 1800, "ctb-glass-8oz-cotton"),
        ],
    },
]


def seed_database(db: Session) -> bool:
    """Returns False when seed data is already present."""
    if db.query(Product.id).filter(Product.slug == SEED_MARKER_SLUG).first():
        logger.info("Seed data already exists, skipping.")
        return False

    logger.info("Seeding database...")
    settings_service.set_setting(db, settings_service.SHIPPING_FLAT_CENTS, settings.DEFAULT_SHIPPING_CENTS)
    db.commit()

    for data in SEED_PRODUCTS:
        product = catalog_service.create_product(
            db, {**data, "active": True, "featured": True}, author="Seed"
        )
        logger.info("Created %s with %d variants", product.name, len(product.variants))

    logger.info("Seed complete!")
    return True


if __name__ == "__main__":
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    init_db()
    session = SessionLocal()
    try:
        seed_database(session)
    finally:
        session.close()
