# storefront/services/admin_service.py
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel
from storefront.data.models.order import OrderModel
from storefront.data.models.product import ProductModel
from storefront.data.models.reservation import ReservationModel
from storefront.domain.schemas import CategoryIn, ProductIn, StatsOut
from storefront.domain.statuses import check_order_transition, check_reservation_transition
from storefront.repos.category_repo import CategoryRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.reservation_repo import ReservationRepo
from storefront.services.settings_service import SettingsService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class AdminService:
    """
    Back-office: CRUD produktow i kategorii, statusy zamowien/rezerwacji,
    oplata za dostawe, statystyki. Tylko dla admina (sprawdzane w routerze).
    """

    def __init__(self, db: Session):
        self.products = ProductRepo(db)
        self.categories = CategoryRepo(db)
        self.orders = OrderRepo(db)
        self.reservations = ReservationRepo(db)
        self.settings = SettingsService(db)

    # ------------------------------------------------------------ produkty

    def list_products(self, search: str | None = None) -> list[ProductModel]:
        return self.products.list_products(search=search.strip() if search else None)

    def create_product(self, payload: ProductIn) -> ProductModel:
        self._check_category(payload.category_id)
        product = self.products.save(ProductModel(**payload.model_dump()))
        logger.info(f"Utworzono produkt {product.id} ({product.name})")
        return product

    def update_product(self, product_id: int, payload: ProductIn) -> ProductModel:
        product = self.products.get_product(product_id)
        if not product:
            raise LookupError("Produkt nie istnieje")

        self._check_category(payload.category_id)
        for field, value in payload.model_dump().items():
            setattr(product, field, value)

        # zmiana ceny nie rusza zapisanych zamowien (snapshot w items)
        product = self.products.save(product)
        logger.info(f"Zaktualizowano produkt {product.id}")
        return product

    def delete_product(self, product_id: int):
        product = self.products.get_product(product_id)
        if not product:
            raise LookupError("Produkt nie istnieje")
        self.products.delete(product)
        logger.info(f"Usunieto produkt {product_id}")

    def _check_category(self, category_id: int | None):
        if category_id is not None and not self.categories.get_category(category_id):
            raise ValueError("Kategoria nie istnieje")

    # ------------------------------------------------------------ kategorie

    def create_category(self, payload: CategoryIn) -> CategoryModel:
        if self.categories.get_by_name(payload.name):
            raise ValueError("Kategoria o tej nazwie juz istnieje")

        category = self._save_category(CategoryModel(**payload.model_dump()))
        logger.info(f"Utworzono kategorie {category.id} ({category.name})")
        return category

    def update_category(self, category_id: int, payload: CategoryIn) -> CategoryModel:
        category = self.categories.get_category(category_id)
        if not category:
            raise LookupError("Kategoria nie istnieje")

        other = self.categories.get_by_name(payload.name)
        if other and other.id != category_id:
            raise ValueError("Kategoria o tej nazwie juz istnieje")

        for field, value in payload.model_dump().items():
            setattr(category, field, value)
        return self._save_category(category)

    def _save_category(self, category: CategoryModel) -> CategoryModel:
        # unikalnosc nazwy pilnuje baza, sprawdzenie wyzej nie wyklucza wyscigu
        name = category.name
        try:
            return self.categories.save(category)
        except IntegrityError as e:
            self.categories.db.rollback()
            logger.warning(f"Konflikt nazwy kategorii {name}: {e.orig}")
            raise ValueError("Kategoria o tej nazwie juz istnieje") from e

    def delete_category(self, category_id: int):
        category = self.categories.get_category(category_id)
        if not category:
            raise LookupError("Kategoria nie istnieje")

        # produkty zostaja bez kategorii
        for product in category.products:
            product.category_id = None
        self.categories.delete(category)
        logger.info(f"Usunieto kategorie {category_id}")

    # ------------------------------------------------------------ zamowienia i rezerwacje

    def list_orders(self) -> list[OrderModel]:
        return self.orders.list_orders()

    def list_reservations(self) -> list[ReservationModel]:
        return self.reservations.list_reservations()

    def update_order_status(self, order_id: int, status: str) -> OrderModel:
        order = self.orders.get_order(order_id)
        if not order:
            raise LookupError("Zamowienie nie istnieje")

        target = check_order_transition(order.status, status)
        logger.info(f"Order {order_id}: {order.status} -> {target.value}")
        return self.orders.update_order_status(order_id, target.value)

    def update_reservation_status(self, reservation_id: int, status: str) -> ReservationModel:
        reservation = self.reservations.get_reservation(reservation_id)
        if not reservation:
            raise LookupError("Rezerwacja nie istnieje")

        target = check_reservation_transition(reservation.status, status)
        logger.info(f"Reservation {reservation_id}: {reservation.status} -> {target.value}")
        return self.reservations.update_reservation_status(reservation_id, target.value)

    # ------------------------------------------------------------ ustawienia i statystyki

    def get_delivery_fee(self) -> Decimal:
        return self.settings.get_delivery_fee()

    def set_delivery_fee(self, fee: Decimal) -> Decimal:
        return self.settings.set_delivery_fee(fee)

    def stats(self) -> StatsOut:
        total = self.products.count()
        in_stock = self.products.count(in_stock_only=True)
        return StatsOut(
            total_products=total,
            total_categories=self.categories.count(),
            in_stock_products=in_stock,
            out_of_stock_products=total - in_stock,
        )
