# storefront/api/routers/checkout.py
from fastapi import APIRouter, Depends, HTTPException, Query
from redis.exceptions import RedisError

from storefront.api.deps import get_cart_store, get_checkout_service, get_current_user
from storefront.data.models.user import UserModel
from storefront.domain.schemas import (
    CheckoutMode,
    CheckoutSummaryOut,
    DeliveryForm,
    ReservationForm,
    SubmissionOut,
)
from storefront.services.auth_service import AuthenticationRequired
from storefront.services.cart_store import CartStore
from storefront.services.checkout_service import (
    CheckoutService,
    SubmissionFailed,
    SubmissionInProgress,
)

router = APIRouter(prefix="/checkout", tags=["checkout"])

SIGN_IN_URL = "/auth/sign-in"


def submit(
    svc: CheckoutService,
    form: ReservationForm | DeliveryForm,
    store: CartStore,
    mode: CheckoutMode,
    user: UserModel | None,
):
    try:
        result = svc.submit(form, store, mode, user)
    except AuthenticationRequired as e:
        # klient ma przejsc do logowania i wyslac ponownie sam
        raise HTTPException(
            status_code=401,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer", "X-Sign-In-Url": SIGN_IN_URL},
        )
    except SubmissionInProgress as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SubmissionFailed as e:
        raise HTTPException(status_code=502, detail=str(e) or "Nie udalo sie zlozyc zamowienia")
    except RedisError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return SubmissionOut(
        id=result.id,
        kind=result.kind,
        total_amount=result.total_amount,
        order_number=result.order_number,
    )


@router.get("/summary", response_model=CheckoutSummaryOut)
def summary(
    mode: CheckoutMode = Query("reservation"),
    store: CartStore = Depends(get_cart_store),
    user: UserModel | None = Depends(get_current_user),
    svc: CheckoutService = Depends(get_checkout_service),
):
    return svc.summary(store, mode, user)


@router.post("/reservation", response_model=SubmissionOut, status_code=201)
def submit_reservation(
    form: ReservationForm,
    store: CartStore = Depends(get_cart_store),
    user: UserModel | None = Depends(get_current_user),
    svc: CheckoutService = Depends(get_checkout_service),
):
    return submit(svc, form, store, "reservation", user)


@router.post("/delivery", response_model=SubmissionOut, status_code=201)
def submit_delivery(
    form: DeliveryForm,
    store: CartStore = Depends(get_cart_store),
    user: UserModel | None = Depends(get_current_user),
    svc: CheckoutService = Depends(get_checkout_service),
):
    return submit(svc, form, store, "delivery", user)
