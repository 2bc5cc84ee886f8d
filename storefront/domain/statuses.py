# storefront/domain/statuses.py
from enum import Enum


class InvalidStatusTransition(ValueError):
    pass


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class ReservationStatus(str, Enum):
    PENDING = "pending"
    READY = "ready"
    PICKED_UP = "picked_up"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


# kolejnosc "do przodu"; pierwszy element to zawsze status poczatkowy
ORDER_FLOW = [
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
]
RESERVATION_FLOW = [
    ReservationStatus.PENDING,
    ReservationStatus.READY,
    ReservationStatus.PICKED_UP,
]

ORDER_TERMINAL = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}
RESERVATION_TERMINAL = {
    ReservationStatus.PICKED_UP,
    ReservationStatus.EXPIRED,
    ReservationStatus.CANCELLED,
}


def allowed_order_transitions(current: OrderStatus) -> set[OrderStatus]:
    if current in ORDER_TERMINAL:
        return set()
    nxt = ORDER_FLOW[ORDER_FLOW.index(current) + 1]
    return {nxt, OrderStatus.CANCELLED}


def allowed_reservation_transitions(current: ReservationStatus) -> set[ReservationStatus]:
    if current in RESERVATION_TERMINAL:
        return set()
    nxt = RESERVATION_FLOW[RESERVATION_FLOW.index(current) + 1]
    return {nxt, ReservationStatus.EXPIRED, ReservationStatus.CANCELLED}


def check_order_transition(current: str, new: str) -> OrderStatus:
    """
    Zwraca docelowy status albo rzuca InvalidStatusTransition.
    Ustawienie tego samego statusu to no-op.
    """
    try:
        cur, target = OrderStatus(current), OrderStatus(new)
    except ValueError:
        raise InvalidStatusTransition(f"Nieznany status zamowienia: {new}")

    if cur == target:
        return target
    if target not in allowed_order_transitions(cur):
        raise InvalidStatusTransition(
            f"Niedozwolona zmiana statusu zamowienia {cur.value} -> {target.value}"
        )
    return target


def check_reservation_transition(current: str, new: str) -> ReservationStatus:
    try:
        cur, target = ReservationStatus(current), ReservationStatus(new)
    except ValueError:
        raise InvalidStatusTransition(f"Nieznany status rezerwacji: {new}")

    if cur == target:
        return target
    if target not in allowed_reservation_transitions(cur):
        raise InvalidStatusTransition(
            f"Niedozwolona zmiana statusu rezerwacji {cur.value} -> {target.value}"
        )
    return target
