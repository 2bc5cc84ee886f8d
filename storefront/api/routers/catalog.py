# storefront/api/routers/catalog.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import CategoryOut, ProductOut
from storefront.services.catalog_service import CatalogService

router = APIRouter(tags=["catalog"])


def get_service(db: Session):
    return CatalogService(db)


@router.get("/products", response_model=List[ProductOut])
def list_products(
    category_id: int | None = Query(None),
    q: str | None = Query(None, max_length=100),
    limit: int | None = Query(None, gt=0, le=200),
    db: Session = Depends(get_db),
):
    return get_service(db).list_products(category_id=category_id, search=q, limit=limit)


@router.get("/products/featured", response_model=List[ProductOut])
def featured_products(db: Session = Depends(get_db)):
    return get_service(db).featured_products()


@router.get("/products/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    try:
        return get_service(db).get_product(product_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/categories", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return get_service(db).list_categories()
