# backend/routes/products.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from database import get_db
from models.product import ProductStatus
import schemas.product as product_schemas
from schemas.base import OkResponse
from services import catalog_service
from utils.audit import log_admin_action, snapshot
from utils.tokenJWT import AdminPrincipal, get_current_admin, require_writer

router = APIRouter(prefix="/api/admin", tags=["Products"])


# ==========================================
#  PRODUCTS
# ==========================================
@router.get("/products", response_model=product_schemas.ProductListPage)
def list_products(
    q: Optional[str] = Query(None, description="Search by name, slug or tag"),
    product_status: Optional[ProductStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(get_current_admin),
):
    return catalog_service.list_products(db, q=q, status=product_status, page=page, page_size=page_size)


@router.get("/products/{product_id}", response_model=product_schemas.ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db), admin: AdminPrincipal = Depends(get_current_admin)):
    return catalog_service.get_product(db, product_id)


@router.post("/products", response_model=product_schemas.ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: product_schemas.ProductCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    product = catalog_service.create_product(db, payload.model_dump(), author=admin.name)
    log_admin_action(db, request, admin, entity_type="product", entity_id=product.id, action="create",
                     description=f"Created product {product.name}", after=product)
    return catalog_service.get_product(db, product.id)


@router.patch("/products/{product_id}", response_model=product_schemas.ProductOut)
def update_product(
    product_id: str,
    payload: product_schemas.ProductUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    before = snapshot(catalog_service.get_product(db, product_id))
    product = catalog_service.update_product(db, product_id, payload.model_dump(exclude_unset=True))
    log_admin_action(db, request, admin, entity_type="product", entity_id=product.id, action="update",
                     description=f"Updated product {product.name}", before=before, after=product)
    return catalog_service.get_product(db, product_id)


@router.delete("/products/{product_id}", response_model=OkResponse)
def delete_product(
    product_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    before = snapshot(catalog_service.get_product(db, product_id))
    product = catalog_service.archive_product(db, product_id)
    log_admin_action(db, request, admin, entity_type="product", entity_id=product.id, action="archive",
                     description=f"Archived product {product.name}", before=before, after=product)
    return {"ok": True}


# ==========================================
#  VARIANTS
# ==========================================
@router.post("/products/{product_id}/variants", response_model=product_schemas.VariantOut,
             status_code=status.HTTP_201_CREATED)
def create_variant(
    product_id: str,
    payload: product_schemas.VariantCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    variant = catalog_service.create_variant(db, product_id, payload.model_dump(), author=admin.name)
    log_admin_action(db, request, admin, entity_type="variant", entity_id=variant.id, action="create",
                     description=f"Created variant {variant.vessel} {variant.size_oz}oz", after=variant)
    return catalog_service.get_variant(db, variant.id)


@router.patch("/variants/{variant_id}", response_model=product_schemas.VariantOut)
def update_variant(
    variant_id: str,
    payload: product_schemas.VariantUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    before = snapshot(catalog_service.get_variant(db, variant_id))
    variant = catalog_service.update_variant(db, variant_id, payload.model_dump(exclude_unset=True))
    after = snapshot(variant)

    # Price edits get their own action so they can be filtered in the audit trail
    if before["price_cents"] != after["price_cents"]:
        log_admin_action(db, request, admin, entity_type="variant", entity_id=variant_id, action="price_change",
                         description=f"Price changed from {before['price_cents']} to {after['price_cents']} cents",
                         before={"price_cents": before["price_cents"]}, after={"price_cents": after["price_cents"]})
    log_admin_action(db, request, admin, entity_type="variant", entity_id=variant_id, action="update",
                     description="Updated variant", before=before, after=after)
    return catalog_service.get_variant(db, variant_id)


@router.delete("/variants/{variant_id}", response_model=OkResponse)
def delete_variant(
    variant_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    before = snapshot(catalog_service.get_variant(db, variant_id))
    variant = catalog_service.deactivate_variant(db, variant_id)
    log_admin_action(db, request, admin, entity_type="variant", entity_id=variant_id, action="deactivate",
                     description="Deactivated variant", before=before, after=variant)
    return {"ok": True}


# ==========================================
#  CATEGORIES & COLLECTIONS
# ==========================================
@router.get("/categories", response_model=List[product_schemas.CategoryOut])
def list_categories(db: Session = Depends(get_db), admin: AdminPrincipal = Depends(get_current_admin)):
    return catalog_service.list_categories(db)


@router.post("/categories", response_model=product_schemas.CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: product_schemas.CategoryCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    category = catalog_service.create_category(db, payload.model_dump())
    log_admin_action(db, request, admin, entity_type="category", entity_id=category.id, action="create",
                     description=f"Created category {category.name}", after=category)
    return category


@router.delete("/categories/{category_id}", response_model=OkResponse)
def delete_category(
    category_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    catalog_service.delete_category(db, category_id)
    log_admin_action(db, request, admin, entity_type="category", entity_id=category_id, action="delete",
                     description="Deleted category")
    return {"ok": True}


@router.get("/collections", response_model=List[product_schemas.CollectionOut])
def list_collections(db: Session = Depends(get_db), admin: AdminPrincipal = Depends(get_current_admin)):
    return catalog_service.list_collections(db)


@router.post("/collections", response_model=product_schemas.CollectionOut, status_code=status.HTTP_201_CREATED)
def create_collection(
    payload: product_schemas.CollectionCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    collection = catalog_service.create_collection(db, payload.model_dump())
    log_admin_action(db, request, admin, entity_type="collection", entity_id=collection.id, action="create",
                     description=f"Created collection {collection.name}", after=collection)
    return collection


@router.delete("/collections/{collection_id}", response_model=OkResponse)
def delete_collection(
    collection_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    catalog_service.delete_collection(db, collection_id)
    log_admin_action(db, request, admin, entity_type="collection", entity_id=collection_id, action="delete",
                     description="Deleted collection")
    return {"ok": True}
