# backend/models/product.py
import enum
from sqlalchemy import (
    Column, Integer, String, Text, Boolean, Float, ForeignKey, DateTime, Enum, CheckConstraint, func
)
from sqlalchemy.orm import relationship
from database import Base, new_id
from utils.time_utils import utcnow


class ProductStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"


class WickType(str, enum.Enum):
    COTTON = "COTTON"
    WOOD = "WOOD"


# Catalog entry; purchasable SKUs live in Variant
class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False, index=True)
    slug = Column(String, unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)

    active = Column(Boolean, nullable=False, default=True)
    featured = Column(Boolean, nullable=False, default=False)
    status = Column(Enum(ProductStatus), nullable=False, default=ProductStatus.ACTIVE)

    scent_notes = Column(String, nullable=True)
    tags = Column(String, nullable=True)
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    collection_id = Column(String(36), ForeignKey("collections.id", ondelete="SET NULL"), nullable=True)

    cost_cents = Column(Integer, nullable=True)
    compare_at_price_cents = Column(Integer, nullable=True)

    # Future "drop" date; the storefront hides the product until then
    scheduled_at = Column(DateTime(timezone=True), nullable=True)
    is_limited_edition = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow, server_default=func.now())

    variants = relationship(
        "Variant", back_populates="product", cascade="all, delete-orphan", order_by="Variant.price_cents"
    )


# One purchasable vessel/size/wick combination of a Product
class Variant(Base):
    __tablename__ = "variants"

    id = Column(String(36), primary_key=True, default=new_id)
    product_id = Column(String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    vessel = Column(String, nullable=False)
    size_oz = Column(Float, nullable=False)
    wick_type = Column(Enum(WickType), nullable=False)

    # Money is always integer cents
    price_cents = Column(Integer, CheckConstraint("price_cents >= 0"), nullable=False)
    cost_cents = Column(Integer, nullable=True)
    compare_at_price_cents = Column(Integer, nullable=True)
    sku = Column(String, unique=True, nullable=True)
    active = Column(Boolean, nullable=False, default=True)

    # Mutated only through services.inventory_service
    stock_on_hand = Column(Integer, nullable=False, default=0)
    stock_reserved = Column(Integer, nullable=False, default=0)
    reorder_point = Column(Integer, nullable=False, default=5)
    quantity_cap = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())

    product = relationship("Product", back_populates="variants")


class Category(Base):
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, nullable=False)
    description = Column(Text, nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())


class Collection(Base):
    __tablename__ = "collections"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
