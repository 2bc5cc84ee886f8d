import re
from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import SQLAlchemyError

from storefront.data.models import OrderModel, ReservationModel
from storefront.domain.schemas import DeliveryForm, ProductIn, ReservationForm
from storefront.services.admin_service import AdminService
from storefront.services.auth_service import AuthenticationRequired
from storefront.services.cart_store import CartStore
from storefront.services.checkout_service import (
    CheckoutService,
    SubmissionFailed,
    SubmissionInProgress,
)
from storefront.services.lock_service import LockService
from storefront.services.settings_service import SettingsService
from storefront.utils.dates import as_utc


DELIVERY = DeliveryForm(name="Ada Obi", email="ada@example.com", phone="08030000000", address="12 Allen Avenue, Ikeja")
RESERVATION = ReservationForm(name="Ada Obi", email="ada@example.com", phone="08030000000")


@pytest.fixture
def filled_cart(cart, make_product):
    a = make_product("Product A", "1000")
    b = make_product("Product B", "500")
    cart.add(a)
    cart.add(a)
    cart.add(b)
    return cart


@pytest.fixture
def service(db, lock, notifier):
    return CheckoutService(db, lock, notifier)


def test_delivery_submission_adds_fee_and_clears_cart(db, service, filled_cart, shopper, notifier):
    SettingsService(db).set_delivery_fee(Decimal("1500"))
    assert filled_cart.total_amount == Decimal("2500")

    result = service.submit(DELIVERY, filled_cart, "delivery", shopper)

    assert result.id
    assert result.kind == "delivery"
    assert result.total_amount == Decimal("4000")
    assert filled_cart.is_empty()

    order = db.get(OrderModel, result.id)
    assert order.status == "pending"
    assert order.payment_status == "pending"
    assert order.payment_method == "cash_on_delivery"
    assert order.total_amount == Decimal("4000")
    assert order.delivery_address == "12 Allen Avenue, Ikeja"
    assert notifier.sent == [("delivery", result.id, "ada@example.com")]


def test_reservation_has_no_fee_and_hold_window(db, service, filled_cart, shopper):
    result = service.submit(RESERVATION, filled_cart, "reservation", shopper)

    assert result.total_amount == Decimal("2500")
    reservation = db.get(ReservationModel, result.id)
    assert reservation.status == "pending"
    assert as_utc(reservation.expires_at) - as_utc(reservation.created_at) == timedelta(hours=36)
    assert filled_cart.is_empty()


def test_delivery_fee_falls_back_to_default(service, filled_cart, shopper):
    result = service.submit(DELIVERY, filled_cart, "delivery", shopper)

    assert result.total_amount == Decimal("4000")


def test_unauthenticated_submission_never_inserts(db, service, filled_cart, lock):
    with pytest.raises(AuthenticationRequired):
        service.submit(DELIVERY, filled_cart, "delivery", None)

    assert lock.acquired == []
    assert db.query(OrderModel).count() == 0
    assert filled_cart.item_count == 3


def test_rejected_insert_leaves_cart_intact(service, filled_cart, shopper, lock, monkeypatch):
    def reject(order):
        raise SQLAlchemyError("insert rejected by database")

    monkeypatch.setattr(service.orders, "create_order", reject)

    with pytest.raises(SubmissionFailed) as exc:
        service.submit(DELIVERY, filled_cart, "delivery", shopper)

    assert str(exc.value)
    assert [i.product_name for i in filled_cart.items] == ["Product A", "Product B"]
    assert filled_cart.item_count == 3
    assert lock.held == {}


def test_second_submission_while_busy_is_refused(service, filled_cart, shopper, lock):
    lock.acquire(LockService.checkout_key(filled_cart.key), "other-request", ttl=30)

    with pytest.raises(SubmissionInProgress):
        service.submit(RESERVATION, filled_cart, "reservation", shopper)

    assert filled_cart.item_count == 3


def test_empty_cart_is_rejected(service, cart, shopper):
    with pytest.raises(ValueError):
        service.submit(RESERVATION, cart, "reservation", shopper)


def test_submitted_items_are_frozen(db, service, filled_cart, shopper):
    product_id = filled_cart.items[0].product_id
    result = service.submit(RESERVATION, filled_cart, "reservation", shopper)

    AdminService(db).update_product(product_id, ProductIn(name="Renamed", price=Decimal("9999")))

    db.expire_all()
    items = db.get(ReservationModel, result.id).items
    assert items[0]["product_name"] == "Product A"
    assert Decimal(items[0]["price"]) == Decimal("1000")
    assert items[0]["quantity"] == 2


def test_notification_failure_does_not_fail_checkout(db, lock, filled_cart, shopper):
    class BrokenNotifier:
        def send_submission_notification(self, kind, record_id, email):
            raise ConnectionError("broker down")

    result = CheckoutService(db, lock, BrokenNotifier()).submit(RESERVATION, filled_cart, "reservation", shopper)

    assert result.id
    assert filled_cart.is_empty()


def test_summary_prefills_contact_from_user(db, service, filled_cart, shopper):
    SettingsService(db).set_delivery_fee(Decimal("2000"))

    summary = service.summary(filled_cart, "delivery", shopper)

    assert summary.subtotal == Decimal("2500")
    assert summary.delivery_fee == Decimal("2000")
    assert summary.total_amount == Decimal("4500")
    assert summary.contact.name == "Ada Obi"
    assert summary.contact.email == "ada@example.com"


def test_forms_require_non_blank_fields():
    with pytest.raises(ValueError):
        ReservationForm(name="  ", email="a@b.c", phone="1")
    with pytest.raises(ValueError):
        DeliveryForm(name="A", email="a@b.c", phone="1", address="")

    form = DeliveryForm(name=" A ", email="a@b.c", phone="1", address="x", notes="   ")
    assert form.name == "A"
    assert form.notes is None


def test_stale_copy_of_submitted_cart_cannot_order_again(db, service, storage, make_product, shopper):
    product = make_product("Product A", "1000")
    CartStore(storage, "cart:s1").load().add(product)

    first = CartStore(storage, "cart:s1").load()
    stale = CartStore(storage, "cart:s1").load()

    service.submit(DELIVERY, first, "delivery", shopper)

    with pytest.raises(ValueError):
        service.submit(DELIVERY, stale, "delivery", shopper)

    assert db.query(OrderModel).count() == 1
    assert stale.is_empty()


def test_submission_uses_stored_cart_contents(db, service, storage, make_product, shopper):
    a = make_product("Product A", "1000")
    b = make_product("Product B", "500")
    request_copy = CartStore(storage, "cart:s2").load()
    request_copy.add(a)

    # ktos inny dodal produkt w miedzyczasie
    other = CartStore(storage, "cart:s2").load()
    other.add(b)

    result = service.submit(RESERVATION, request_copy, "reservation", shopper)

    names = [i["product_name"] for i in db.get(ReservationModel, result.id).items]
    assert names == ["Product A", "Product B"]


def test_delivery_order_gets_readable_number(db, service, filled_cart, shopper):
    result = service.submit(DELIVERY, filled_cart, "delivery", shopper)

    order = db.get(OrderModel, result.id)
    assert result.order_number == order.order_number
    assert re.fullmatch(rf"ORD-\d{{8}}-{result.id:06d}", order.order_number)


def test_failed_cart_delete_after_insert_does_not_resurrect_items(db, service, storage, make_product, shopper, monkeypatch):
    def refuse(key):
        raise OSError("delete refused")

    monkeypatch.setattr(storage, "delete", refuse)
    CartStore(storage, "cart:s3").load().add(make_product("Product A", "1000"))
    cart = CartStore(storage, "cart:s3").load()

    service.submit(RESERVATION, cart, "reservation", shopper)

    assert CartStore(storage, "cart:s3").load().is_empty()
    with pytest.raises(ValueError):
        service.submit(RESERVATION, CartStore(storage, "cart:s3").load(), "reservation", shopper)
    assert db.query(ReservationModel).count() == 1
