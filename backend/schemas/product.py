# backend/schemas/product.py
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from models.product import ProductStatus, WickType
from schemas.base import ORMBase


# Storefront view of a variant; cost and stock figures stay private
class VariantPublic(ORMBase):
    id: str
    vessel: str
    size_oz: float
    wick_type: WickType
    price_cents: int
    compare_at_price_cents: Optional[int] = None
    quantity_cap: Optional[int] = None


class ProductPublic(ORMBase):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    featured: bool
    scent_notes: Optional[str] = None
    tags: Optional[str] = None
    collection_id: Optional[str] = None
    is_limited_edition: bool
    variants: List[VariantPublic] = []


# Shared base attributes for variant writes
class VariantBase(ORMBase):
    vessel: str
    size_oz: float = Field(gt=0)
    wick_type: WickType
    price_cents: int = Field(ge=0)
    cost_cents: Optional[int] = Field(default=None, ge=0)
    compare_at_price_cents: Optional[int] = Field(default=None, ge=0)
    sku: Optional[str] = None
    active: bool = True
    reorder_point: int = Field(default=5, ge=0)
    quantity_cap: Optional[int] = Field(default=None, gt=0)


# Starting stock is booked through the ledger as an INITIAL adjustment
class VariantCreate(VariantBase):
    initial_stock: int = Field(default=0, ge=0)


class VariantUpdate(ORMBase):
    """Schema for PATCH requests - all fields optional. Stock is not editable here."""
    vessel: Optional[str] = None
    size_oz: Optional[float] = Field(None, gt=0)
    wick_type: Optional[WickType] = None
    price_cents: Optional[int] = Field(None, ge=0)
    cost_cents: Optional[int] = Field(None, ge=0)
    compare_at_price_cents: Optional[int] = Field(None, ge=0)
    sku: Optional[str] = None
    active: Optional[bool] = None
    reorder_point: Optional[int] = Field(None, ge=0)
    quantity_cap: Optional[int] = Field(None, gt=0)


class VariantOut(VariantBase):
    id: str
    product_id: str
    stock_on_hand: int
    stock_reserved: int
    created_at: datetime


# Shared base attributes for product entities
class ProductBase(ORMBase):
    name: str = Field(min_length=1)
    slug: str = Field(min_length=1, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: Optional[str] = None
    image_url: Optional[str] = None
    active: bool = True
    featured: bool = False
    status: ProductStatus = ProductStatus.ACTIVE
    scent_notes: Optional[str] = None
    tags: Optional[str] = None
    category_id: Optional[str] = None
    collection_id: Optional[str] = None
    cost_cents: Optional[int] = Field(default=None, ge=0)
    compare_at_price_cents: Optional[int] = Field(default=None, ge=0)
    scheduled_at: Optional[datetime] = None
    is_limited_edition: bool = False


class ProductCreate(ProductBase):
    variants: List[VariantCreate] = []


class ProductUpdate(ORMBase):
    """Schema for PATCH requests - all fields optional."""
    name: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = Field(None, min_length=1, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: Optional[str] = None
    image_url: Optional[str] = None
    active: Optional[bool] = None
    featured: Optional[bool] = None
    status: Optional[ProductStatus] = None
    scent_notes: Optional[str] = None
    tags: Optional[str] = None
    category_id: Optional[str] = None
    collection_id: Optional[str] = None
    cost_cents: Optional[int] = Field(None, ge=0)
    compare_at_price_cents: Optional[int] = Field(None, ge=0)
    scheduled_at: Optional[datetime] = None
    is_limited_edition: Optional[bool] = None


# Full product representation for the admin
class ProductOut(ProductBase):
    id: str
    created_at: datetime
    updated_at: datetime
    variants: List[VariantOut] = []


class CategoryCreate(ORMBase):
    name: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    description: Optional[str] = None
    sort_order: int = 0


class CategoryOut(CategoryCreate):
    id: str
    created_at: datetime


class CollectionCreate(ORMBase):
    name: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    description: Optional[str] = None
    image_url: Optional[str] = None
    active: bool = True


class CollectionOut(CollectionCreate):
    id: str
    created_at: datetime


# Paginated response for admin product listings
class ProductListPage(ORMBase):
    items: List[ProductOut]
    total: int
    page: int
    page_size: int
