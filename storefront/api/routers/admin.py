# storefront/api/routers/admin.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.api.deps import require_admin
from storefront.data.database import get_db
from storefront.domain.schemas import (
    CategoryIn,
    CategoryOut,
    DeliveryFeeIn,
    DeliveryFeeOut,
    OrderOut,
    ProductIn,
    ProductOut,
    ReservationOut,
    StatsOut,
    StatusUpdateIn,
)
from storefront.domain.statuses import InvalidStatusTransition
from storefront.services.admin_service import AdminService
from storefront.services.catalog_service import CatalogService

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def get_service(db: Session):
    return AdminService(db)


def handle(fn, *args):
    try:
        return fn(*args)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStatusTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


# produkty

@router.get("/products", response_model=List[ProductOut])
def list_products(q: str | None = Query(None, max_length=100), db: Session = Depends(get_db)):
    return get_service(db).list_products(q)


@router.post("/products", response_model=ProductOut, status_code=201)
def create_product(payload: ProductIn, db: Session = Depends(get_db)):
    return handle(get_service(db).create_product, payload)


@router.put("/products/{product_id}", response_model=ProductOut)
def update_product(product_id: int, payload: ProductIn, db: Session = Depends(get_db)):
    return handle(get_service(db).update_product, product_id, payload)


@router.delete("/products/{product_id}", status_code=204)
def delete_product(product_id: int, db: Session = Depends(get_db)):
    handle(get_service(db).delete_product, product_id)


# kategorie

@router.get("/categories", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return CatalogService(db).list_categories(newest_first=True)


@router.post("/categories", response_model=CategoryOut, status_code=201)
def create_category(payload: CategoryIn, db: Session = Depends(get_db)):
    return handle(get_service(db).create_category, payload)


@router.put("/categories/{category_id}", response_model=CategoryOut)
def update_category(category_id: int, payload: CategoryIn, db: Session = Depends(get_db)):
    return handle(get_service(db).update_category, category_id, payload)


@router.delete("/categories/{category_id}", status_code=204)
def delete_category(category_id: int, db: Session = Depends(get_db)):
    handle(get_service(db).delete_category, category_id)


# zamowienia i rezerwacje

@router.get("/orders", response_model=List[OrderOut])
def list_orders(db: Session = Depends(get_db)):
    return get_service(db).list_orders()


@router.patch("/orders/{order_id}/status", response_model=OrderOut)
def update_order_status(order_id: int, payload: StatusUpdateIn, db: Session = Depends(get_db)):
    return handle(get_service(db).update_order_status, order_id, payload.status)


@router.get("/reservations", response_model=List[ReservationOut])
def list_reservations(db: Session = Depends(get_db)):
    return get_service(db).list_reservations()


@router.patch("/reservations/{reservation_id}/status", response_model=ReservationOut)
def update_reservation_status(reservation_id: int, payload: StatusUpdateIn, db: Session = Depends(get_db)):
    return handle(get_service(db).update_reservation_status, reservation_id, payload.status)


# ustawienia i statystyki

@router.get("/settings/delivery-fee", response_model=DeliveryFeeOut)
def get_delivery_fee(db: Session = Depends(get_db)):
    return DeliveryFeeOut(delivery_fee=get_service(db).get_delivery_fee())


@router.put("/settings/delivery-fee", response_model=DeliveryFeeOut)
def set_delivery_fee(payload: DeliveryFeeIn, db: Session = Depends(get_db)):
    return DeliveryFeeOut(delivery_fee=handle(get_service(db).set_delivery_fee, payload.delivery_fee))


@router.get("/stats", response_model=StatsOut)
def stats(db: Session = Depends(get_db)):
    return get_service(db).stats()
