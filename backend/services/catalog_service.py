# backend/services/catalog_service.py
import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload, contains_eager

from models.product import Product, Variant, ProductStatus, Category, Collection
from models.stock import AdjustmentReason
from services import inventory_service
from utils.errors import NotFoundError, ConflictError, PersistenceError
from utils.time_utils import utcnow

logger = logging.getLogger(__name__)


# Products a shopper may see: active, published and not scheduled for later
def _visible(query):
    return query.filter(
        Product.active.is_(True),
        Product.status == ProductStatus.ACTIVE,
        or_(Product.scheduled_at.is_(None), Product.scheduled_at <= utcnow()),
    )


def _with_active_variants(products: List[Product]) -> List[dict]:
    return [
        {"product": p, "variants": [v for v in p.variants if v.active]}
        for p in products
    ]


def list_storefront_products(db: Session, featured_only: bool = False) -> List[dict]:
    query = _visible(db.query(Product)).options(selectinload(Product.variants))
    if featured_only:
        query = query.filter(Product.featured.is_(True))
    return _with_active_variants(query.order_by(Product.created_at.desc()).all())


def get_storefront_product(db: Session, slug: str) -> Optional[dict]:
    product = _visible(db.query(Product)).options(selectinload(Product.variants)).filter(Product.slug == slug).first()
    if not product:
        return None
    return _with_active_variants([product])[0]


def load_purchasable_variants(db: Session, variant_ids: Iterable[str]) -> Dict[str, Variant]:
    """Authoritative variants for a cart, keyed by id.

    Inactive variants and variants of hidden products are left out, so the
    pricing step rejects them like unknown ids.
    """
    ids = set(variant_ids)
    if not ids:
        return {}
    rows = (
        _visible(db.query(Variant).join(Variant.product))
        .options(contains_eager(Variant.product))
        .filter(Variant.id.in_(ids), Variant.active.is_(True))
        .all()
    )
    return {v.id: v for v in rows}


# Admin stock overview, one row per variant
def inventory_overview(db: Session) -> List[dict]:
    rows = (
        db.query(Variant, Product.name)
        .join(Product, Product.id == Variant.product_id)
        .order_by(Product.name.asc(), Variant.price_cents.asc())
        .all()
    )
    return [
        {
            "variant_id": v.id,
            "product_name": name,
            "sku": v.sku,
            "vessel": v.vessel,
            "size_oz": v.size_oz,
            "wick_type": v.wick_type,
            "stock_on_hand": v.stock_on_hand,
            "stock_reserved": v.stock_reserved,
            "reorder_point": v.reorder_point,
            "price_cents": v.price_cents,
            "active": v.active,
        }
        for v, name in rows
    ]


# ---- Admin catalog management ----

def get_product(db: Session, product_id: str) -> Product:
    product = db.query(Product).options(selectinload(Product.variants)).filter(Product.id == product_id).first()
    if not product:
        raise NotFoundError("Product not found")
    return product


def get_variant(db: Session, variant_id: str) -> Variant:
    variant = db.query(Variant).filter(Variant.id == variant_id).first()
    if not variant:
        raise NotFoundError("Variant not found")
    return variant


def list_products(db: Session, q: Optional[str] = None, status=None, page: int = 1, page_size: int = 20) -> dict:
    query = db.query(Product)
    if q:
        like = f"%{q}%"
        query = query.filter(or_(Product.name.ilike(like), Product.slug.ilike(like), Product.tags.ilike(like)))
    if status:
        query = query.filter(Product.status == status)
    total = query.count()
    items = (
        query.options(selectinload(Product.variants))
        .order_by(Product.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return {"items": items, "total": total, "page": page, "page_size": page_size}


def _commit_catalog(db: Session, what: str) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"{what} with this slug or SKU already exists")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Catalog write failed: %s", what)
        raise PersistenceError(f"Failed to save {what.lower()}")


# Stage a variant; opening stock goes through the ledger as INITIAL
def _add_variant(db: Session, product: Product, data: dict, author: str) -> Variant:
    data = dict(data)
    initial_stock = data.pop("initial_stock", 0) or 0
    variant = Variant(product_id=product.id, stock_on_hand=0, **data)
    db.add(variant)
    db.flush()
    if initial_stock:
        inventory_service.apply_adjustment(
            db, variant.id, initial_stock, AdjustmentReason.INITIAL, notes="Opening stock", author=author
        )
    return variant


def create_product(db: Session, data: dict, author: str = "Admin") -> Product:
    data = dict(data)
    variants = data.pop("variants", []) or []
    product = Product(**data)
    db.add(product)
    try:
        db.flush()
        for variant_data in variants:
            _add_variant(db, product, variant_data, author)
    except IntegrityError:
        db.rollback()
        raise ConflictError("Product with this slug or SKU already exists")
    _commit_catalog(db, "Product")
    db.refresh(product)
    return product


def update_product(db: Session, product_id: str, data: dict) -> Product:
    product = get_product(db, product_id)
    for key, value in data.items():
        setattr(product, key, value)
    _commit_catalog(db, "Product")
    db.refresh(product)
    return product


# Products are archived rather than deleted so ledger history stays intact
def archive_product(db: Session, product_id: str) -> Product:
    product = get_product(db, product_id)
    product.status = ProductStatus.ARCHIVED
    product.active = False
    _commit_catalog(db, "Product")
    db.refresh(product)
    return product


def create_variant(db: Session, product_id: str, data: dict, author: str = "Admin") -> Variant:
    product = get_product(db, product_id)
    try:
        variant = _add_variant(db, product, data, author)
    except IntegrityError:
        db.rollback()
        raise ConflictError("Variant with this SKU already exists")
    _commit_catalog(db, "Variant")
    db.refresh(variant)
    return variant


def update_variant(db: Session, variant_id: str, data: dict) -> Variant:
    variant = get_variant(db, variant_id)
    for key, value in data.items():
        setattr(variant, key, value)
    _commit_catalog(db, "Variant")
    db.refresh(variant)
    return variant


def deactivate_variant(db: Session, variant_id: str) -> Variant:
    variant = get_variant(db, variant_id)
    variant.active = False
    _commit_catalog(db, "Variant")
    db.refresh(variant)
    return variant


def list_categories(db: Session) -> List[Category]:
    return db.query(Category).order_by(Category.sort_order.asc(), Category.name.asc()).all()


def create_category(db: Session, data: dict) -> Category:
    category = Category(**data)
    db.add(category)
    _commit_catalog(db, "Category")
    db.refresh(category)
    return category


def delete_category(db: Session, category_id: str) -> None:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise NotFoundError("Category not found")
    db.query(Product).filter(Product.category_id == category_id).update(
        {Product.category_id: None}, synchronize_session=False
    )
    db.delete(category)
    _commit_catalog(db, "Category")


def list_collections(db: Session) -> List[Collection]:
    return db.query(Collection).order_by(Collection.name.asc()).all()


def create_collection(db: Session, data: dict) -> Collection:
    collection = Collection(**data)
    db.add(collection)
    _commit_catalog(db, "Collection")
    db.refresh(collection)
    return collection


def delete_collection(db: Session, collection_id: str) -> None:
    collection = db.query(Collection).filter(Collection.id == collection_id).first()
    if not collection:
        raise NotFoundError("Collection not found")
    db.query(Product).filter(Product.collection_id == collection_id).update(
        {Product.collection_id: None}, synchronize_session=False
    )
    db.delete(collection)
    _commit_catalog(db, "Collection")
