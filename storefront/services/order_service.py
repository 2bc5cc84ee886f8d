# storefront/services/order_service.py
from datetime import datetime

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.reservation import ReservationModel
from storefront.data.models.user import UserModel
from storefront.domain.schemas import CountdownOut, MyOrdersOut, OrderOut, ReservationOut
from storefront.repos.order_repo import OrderRepo
from storefront.repos.reservation_repo import ReservationRepo
from storefront.services.countdown import ExpiryCountdown, TimeLeft
from storefront.utils.dates import utcnow
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Serwis odpowiedzialny za odczyt zamówień i rezerwacji po stronie klienta
    (historia, ekrany potwierdzenia, odliczanie rezerwacji).
    Separacja od CheckoutService (zapis) i AdminService (statusy).
    """

    def __init__(self, db: Session):
        self.db = db
        self.orders = OrderRepo(db)
        self.reservations = ReservationRepo(db)

    def my_orders(self, user: UserModel) -> MyOrdersOut:
        return MyOrdersOut(
            orders=[OrderOut.model_validate(o) for o in self.orders.list_orders(user_id=user.id)],
            reservations=[
                ReservationOut.model_validate(r)
                for r in self.reservations.list_reservations(user_id=user.id)
            ],
        )

    def get_order(self, order_id: int, user: UserModel) -> OrderModel:
        order = self.orders.get_order(order_id)

        if not order:
            raise LookupError("Zamówienie nie istnieje")

        if order.user_id != user.id and not user.is_admin:
            raise PermissionError("Brak dostępu do zamówienia")

        return order

    def get_reservation(self, reservation_id: int, user: UserModel) -> ReservationModel:
        reservation = self.reservations.get_reservation(reservation_id)

        if not reservation:
            raise LookupError("Rezerwacja nie istnieje")

        if reservation.user_id != user.id and not user.is_admin:
            raise PermissionError("Brak dostępu do rezerwacji")

        return reservation

    @staticmethod
    def countdown_for(reservation_id: int, expires_at: datetime, clock=utcnow, period: float = 1.0) -> ExpiryCountdown:
        # tylko wyswietlanie - status w bazie zostaje bez zmian
        return ExpiryCountdown(
            expires_at,
            on_expire=lambda: logger.info(f"Reservation {reservation_id} hold window elapsed"),
            clock=clock,
            period=period,
        )

    @staticmethod
    def countdown_out(reservation_id: int, countdown: ExpiryCountdown, left: TimeLeft) -> CountdownOut:
        return CountdownOut(
            reservation_id=reservation_id,
            expires_at=countdown.expires_at,
            state=countdown.state.value,
            hours=left.hours,
            minutes=left.minutes,
            seconds=left.seconds,
            total_ms=left.total_ms,
            is_urgent=left.is_urgent,
            is_very_urgent=left.is_very_urgent,
        )
