# storefront/api/routers/cart.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import get_cart_session, get_cart_store
from storefront.data.database import get_db
from storefront.domain.schemas import CartItemIn, CartOut, CartQuantityIn
from storefront.services.cart_store import CartStore
from storefront.services.catalog_service import CatalogService

router = APIRouter(prefix="/cart", tags=["cart"])


def to_out(session: str, store: CartStore) -> CartOut:
    return CartOut(
        session=session,
        items=store.items,
        item_count=store.item_count,
        total_amount=store.total_amount,
    )


@router.get("", response_model=CartOut)
def get_cart(
    session: str = Depends(get_cart_session),
    store: CartStore = Depends(get_cart_store),
):
    return to_out(session, store)


@router.post("/items", response_model=CartOut)
def add_item(
    payload: CartItemIn,
    session: str = Depends(get_cart_session),
    store: CartStore = Depends(get_cart_store),
    db: Session = Depends(get_db),
):
    try:
        product = CatalogService(db).get_product(payload.product_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if not product.in_stock:
        raise HTTPException(status_code=400, detail="Produkt jest niedostepny")

    store.add(product)
    return to_out(session, store)


@router.put("/items/{product_id}", response_model=CartOut)
def set_quantity(
    product_id: int,
    payload: CartQuantityIn,
    session: str = Depends(get_cart_session),
    store: CartStore = Depends(get_cart_store),
):
    store.set_quantity(product_id, payload.quantity)
    return to_out(session, store)


@router.delete("/items/{product_id}", response_model=CartOut)
def remove_item(
    product_id: int,
    session: str = Depends(get_cart_session),
    store: CartStore = Depends(get_cart_store),
):
    store.remove(product_id)
    return to_out(session, store)


@router.delete("", response_model=CartOut)
def clear_cart(
    session: str = Depends(get_cart_session),
    store: CartStore = Depends(get_cart_store),
):
    store.clear()
    return to_out(session, store)
