# storefront/api/routers/orders.py
import json

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from storefront.api.deps import require_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import CountdownOut, MyOrdersOut, OrderOut, ReservationOut
from storefront.services.order_service import OrderService

router = APIRouter(tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


def fetch_reservation(svc: OrderService, reservation_id: int, user: UserModel):
    try:
        return svc.get_reservation(reservation_id, user)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/me/orders", response_model=MyOrdersOut)
def my_orders(user: UserModel = Depends(require_user), db: Session = Depends(get_db)):
    """
    Historia zamówień i rezerwacji zalogowanego klienta, najnowsze pierwsze.
    """
    return get_service(db).my_orders(user)


@router.get("/orders/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user: UserModel = Depends(require_user),
    db: Session = Depends(get_db),
):
    """
    Ekran potwierdzenia zamówienia z dostawą.
    """
    svc = get_service(db)
    try:
        return svc.get_order(order_id, user)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/reservations/{reservation_id}", response_model=ReservationOut)
def get_reservation(
    reservation_id: int,
    user: UserModel = Depends(require_user),
    db: Session = Depends(get_db),
):
    return fetch_reservation(get_service(db), reservation_id, user)


@router.get("/reservations/{reservation_id}/countdown", response_model=CountdownOut)
def reservation_countdown(
    reservation_id: int,
    user: UserModel = Depends(require_user),
    db: Session = Depends(get_db),
):
    reservation = fetch_reservation(get_service(db), reservation_id, user)

    countdown = OrderService.countdown_for(reservation.id, reservation.expires_at)
    left = countdown.tick()
    return OrderService.countdown_out(reservation.id, countdown, left)


@router.get("/reservations/{reservation_id}/countdown/stream")
def reservation_countdown_stream(
    reservation_id: int,
    user: UserModel = Depends(require_user),
    db: Session = Depends(get_db),
):
    """
    Server-sent events: jedno zdarzenie `tick` na sekunde, na koniec `expired`
    i zamkniecie strumienia.
    """
    reservation = fetch_reservation(get_service(db), reservation_id, user)
    countdown = OrderService.countdown_for(reservation.id, reservation.expires_at)
    rid = reservation.id

    async def events():
        async for left in countdown.updates():
            payload = OrderService.countdown_out(rid, countdown, left).model_dump(mode="json")
            event = "expired" if countdown.expired else "tick"
            yield f"event: {event}\ndata: {json.dumps(payload)}\n\n"

    return StreamingResponse(events(), media_type="text/event-stream")
