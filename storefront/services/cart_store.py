# storefront/services/cart_store.py
import json
import uuid
from decimal import Decimal
from typing import Any, Protocol

import redis
from pydantic import TypeAdapter, ValidationError
from redis.exceptions import RedisError

from storefront.domain.schemas import CartItem
from storefront.utils.retry import redis_retry
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_ITEMS = TypeAdapter(list[CartItem])


class CartStorage(Protocol):
    def read(self, key: str) -> str | None: ...

    def write(self, key: str, raw: str) -> None: ...

    def delete(self, key: str) -> None: ...


class RedisCartStorage:
    """Trwaly zapis koszyka pod jednym kluczem w redisie (last writer wins)."""

    def __init__(self, client: redis.Redis):
        self.redis = client

    @staticmethod
    def key_for(session: str) -> str:
        return f"cart:{session}"

    @redis_retry()
    def read(self, key: str) -> str | None:
        return self.redis.get(key)

    @redis_retry()
    def write(self, key: str, raw: str) -> None:
        self.redis.set(key, raw)

    @redis_retry()
    def delete(self, key: str) -> None:
        self.redis.delete(key)


def _field(product: Any, name: str, default: Any = None) -> Any:
    if isinstance(product, dict):
        return product.get(name, default)
    return getattr(product, name, default)


class CartStore:
    """
    Koszyk klienta: stan w pamieci + trwala kopia w storage.

    Stan w pamieci jest zrodlem prawdy dla biezacej sesji; bledy storage
    sa tylko logowane i nigdy nie wychodza do wywolujacego.
    item_count i total_amount liczone od nowa przy kazdym odczycie.
    """

    def __init__(self, storage: CartStorage, key: str):
        self.storage = storage
        self.key = key
        self._items: list[CartItem] = []

    # lifecycle

    def load(self) -> "CartStore":
        self._items = []
        try:
            raw = self.storage.read(self.key)
        except (RedisError, OSError) as e:
            logger.warning(
                f"Nie udalo sie odczytac koszyka {self.key}: {e}",
                extra={"event": "cart_storage_read_failed", "cart_key": self.key},
            )
            return self

        if not raw:
            return self

        try:
            self._items = _ITEMS.validate_python(json.loads(raw))
        except (ValueError, ValidationError) as e:
            # uszkodzone dane = pusty koszyk
            logger.warning(
                f"Uszkodzony koszyk {self.key}, traktuje jako pusty: {e}",
                extra={"event": "cart_storage_corrupt", "cart_key": self.key},
            )
            self._items = []
        return self

    def dispose(self):
        self._items = []

    # query

    @property
    def items(self) -> list[CartItem]:
        # kopie, nikt poza store nie trzyma zywych referencji
        return [item.model_copy() for item in self._items]

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self._items)

    @property
    def total_amount(self) -> Decimal:
        return sum((item.product_price * item.quantity for item in self._items), Decimal("0"))

    def is_empty(self) -> bool:
        return not self._items

    # commands

    def add(self, product: Any) -> CartItem:
        product_id = _field(product, "id")
        name = _field(product, "name")
        price = _field(product, "price")

        if product_id is None or name is None or price is None:
            raise ValueError("Produkt musi miec id, nazwe i cene")

        # "5" i 5 to ten sam produkt, jedna pozycja na produkt
        product_id = int(product_id)

        existing = self._find(product_id)
        if existing:
            existing.quantity += 1
            logger.info(f"Produkt {product_id} juz jest w koszyku, ilosc {existing.quantity}")
            item = existing
        else:
            item = CartItem(
                id=uuid.uuid4().hex,
                product_id=product_id,
                product_name=name,
                product_price=Decimal(str(price)),
                product_image=_field(product, "image_url"),
                quantity=1,
            )
            self._items.append(item)
            logger.info(f"Dodano produkt {product_id} do koszyka {self.key}")

        self._persist()
        return item.model_copy()

    def remove(self, product_id: int):
        before = len(self._items)
        self._items = [item for item in self._items if item.product_id != product_id]

        if len(self._items) != before:
            logger.info(f"Usunieto produkt {product_id} z koszyka {self.key}")
        self._persist()

    def set_quantity(self, product_id: int, quantity: int):
        if quantity <= 0:
            self.remove(product_id)
            return

        item = self._find(product_id)
        if not item:
            return

        item.quantity = quantity
        logger.info(f"Ilosc produktu {product_id} w koszyku {self.key} = {quantity}")
        self._persist()

    def clear(self):
        self._items = []
        try:
            self.storage.delete(self.key)
        except (RedisError, OSError) as e:
            logger.warning(
                f"Nie udalo sie usunac koszyka {self.key}, nadpisuje pustym: {e}",
                extra={"event": "cart_storage_delete_failed", "cart_key": self.key},
            )
            # stary koszyk nie moze wrocic przy nastepnym load
            self._persist()
        logger.info(f"Koszyk {self.key} wyczyszczony")

    # internals

    def _find(self, product_id: int) -> CartItem | None:
        return next((item for item in self._items if item.product_id == product_id), None)

    def _persist(self):
        raw = _ITEMS.dump_json(self._items).decode()
        try:
            self.storage.write(self.key, raw)
        except (RedisError, OSError) as e:
            logger.warning(
                f"Nie udalo sie zapisac koszyka {self.key}: {e}",
                extra={"event": "cart_storage_write_failed", "cart_key": self.key},
            )
