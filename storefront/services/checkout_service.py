# storefront/services/checkout_service.py
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone, timedelta
from decimal import Decimal

from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.reservation import ReservationModel
from storefront.data.models.user import UserModel
from storefront.domain.schemas import (
    CheckoutMode,
    CheckoutSummaryOut,
    ContactPrefill,
    DeliveryForm,
    ReservationForm,
    SubmissionItem,
)
from storefront.domain.statuses import ORDER_FLOW, RESERVATION_FLOW
from storefront.repos.order_repo import OrderRepo
from storefront.repos.reservation_repo import ReservationRepo
from storefront.services.auth_service import AuthenticationRequired
from storefront.services.cart_store import CartStore
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.settings_service import SettingsService
from storefront.utils.settings import RESERVATION_HOLD_HOURS, CHECKOUT_LOCK_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class SubmissionInProgress(RuntimeError):
    pass


class SubmissionFailed(RuntimeError):
    pass


@dataclass(frozen=True)
class SubmissionResult:
    id: int
    kind: CheckoutMode
    total_amount: Decimal
    order_number: str | None = None


class CheckoutService:
    """
    Zamiana koszyka + formularza kontaktowego w zamowienie (dostawa)
    albo rezerwacje (odbior osobisty).

    1. Wymaga zalogowanego uzytkownika (inaczej AuthenticationRequired, bez insertu)
    2. Blokada "busy" na koszyk - druga wysylka w trakcie pierwszej dostaje SubmissionInProgress
    3. Pod blokada koszyk czytany ponownie ze storage;
       snapshot pozycji przez wartosc, total (+ oplata za dostawe)
    4. Insert; sukces -> czyszczenie koszyka, blad -> koszyk nietkniety
    Brak retry, ponowna wysylka tylko z inicjatywy uzytkownika.
    """

    def __init__(
        self,
        db: Session,
        lock_service: LockService,
        notification_service: NotificationService | None = None,
    ):
        self.db = db
        self.orders = OrderRepo(db)
        self.reservations = ReservationRepo(db)
        self.settings = SettingsService(db)
        self.lock_service = lock_service
        self.notification_service = notification_service

    #query
    def summary(self, cart: CartStore, mode: CheckoutMode, user: UserModel | None) -> CheckoutSummaryOut:
        subtotal = cart.total_amount
        fee = self.settings.get_delivery_fee() if mode == "delivery" else Decimal("0")

        contact = ContactPrefill()
        if user:
            contact = ContactPrefill(name=user.full_name or "", email=user.email)

        return CheckoutSummaryOut(
            mode=mode,
            items=cart.items,
            subtotal=subtotal,
            delivery_fee=fee,
            total_amount=subtotal + fee,
            contact=contact,
        )

    #command
    def submit(
        self,
        form: ReservationForm | DeliveryForm,
        cart: CartStore,
        mode: CheckoutMode,
        user: UserModel | None,
    ) -> SubmissionResult:
        if user is None:
            raise AuthenticationRequired("Zaloguj sie, aby dokonczyc zamowienie")

        if mode == "delivery" and not isinstance(form, DeliveryForm):
            raise ValueError("Zamowienie z dostawa wymaga adresu")

        if cart.is_empty():
            raise ValueError("Nie można złożyć zamówienia z pustym koszykiem")

        lock_name = LockService.checkout_key(cart.key)
        owner = uuid.uuid4().hex

        if not self.lock_service.acquire(lock_name, owner, ttl=CHECKOUT_LOCK_TTL_SECONDS):
            raise SubmissionInProgress("Zamowienie jest juz wysylane, poczekaj na wynik")

        try:
            # koszyk mogl zostac zlozony przez inne zadanie, czytamy go ponownie pod blokada
            cart.load()
            if cart.is_empty():
                raise ValueError("Koszyk jest pusty, zamowienie moglo juz zostac zlozone")

            items = self._snapshot(cart)
            subtotal = sum((i.price * i.quantity for i in items), Decimal("0"))

            try:
                if mode == "delivery":
                    result = self._create_order(form, items, subtotal, user)
                else:
                    result = self._create_reservation(form, items, subtotal, user)
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Nie udalo sie zapisac ({mode}) dla uzytkownika {user.id}: {e}")
                raise SubmissionFailed(str(e.orig) if getattr(e, "orig", None) else str(e)) from e

            cart.clear()
            logger.info(f"{mode} {result.id} zapisane, total {result.total_amount}, koszyk {cart.key} wyczyszczony")

            self._notify(result, form.email)
            return result

        finally:
            try:
                self.lock_service.release(lock_name, owner)
            except RedisError as e:
                # lock i tak wygasnie po CHECKOUT_LOCK_TTL_SECONDS
                logger.warning(f"Failed to release {lock_name}: {e}")

    # internals

    @staticmethod
    def _snapshot(cart: CartStore) -> list[SubmissionItem]:
        # kopia przez wartosc, pozniejsze zmiany koszyka/cen nie wplywaja na zamowienie
        return [
            SubmissionItem(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                price=item.product_price,
            )
            for item in cart.items
        ]

    def _create_order(
        self,
        form: DeliveryForm,
        items: list[SubmissionItem],
        subtotal: Decimal,
        user: UserModel,
    ) -> SubmissionResult:
        fee = self.settings.get_delivery_fee()
        total = subtotal + fee

        order = self.orders.create_order(
            OrderModel(
                created_at=datetime.now(timezone.utc),
                user_id=user.id,
                user_name=form.name,
                user_email=form.email,
                user_phone=form.phone,
                delivery_address=form.address,
                notes=form.notes,
                items=[i.model_dump(mode="json") for i in items],
                total_amount=total,
                status=ORDER_FLOW[0].value,
                payment_status="pending",
                payment_method="cash_on_delivery",
            )
        )
        return SubmissionResult(id=order.id, kind="delivery", total_amount=total, order_number=order.order_number)

    def _create_reservation(
        self,
        form: ReservationForm,
        items: list[SubmissionItem],
        subtotal: Decimal,
        user: UserModel,
    ) -> SubmissionResult:
        now = datetime.now(timezone.utc)

        reservation = self.reservations.create_reservation(
            ReservationModel(
                user_id=user.id,
                user_name=form.name,
                user_email=form.email,
                user_phone=form.phone,
                items=[i.model_dump(mode="json") for i in items],
                total_amount=subtotal,
                status=RESERVATION_FLOW[0].value,
                created_at=now,
                expires_at=now + timedelta(hours=RESERVATION_HOLD_HOURS),
            )
        )
        return SubmissionResult(id=reservation.id, kind="reservation", total_amount=subtotal)

    def _notify(self, result: SubmissionResult, email: str):
        if not self.notification_service:
            return
        try:
            self.notification_service.send_submission_notification(result.kind, result.id, email)
        except Exception as e:
            logger.warning(f"Failed to enqueue notification for {result.kind} {result.id}: {e}")
