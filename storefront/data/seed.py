# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models import CategoryModel, ProductModel, SettingModel
from storefront.services.settings_service import DELIVERY_FEE_KEY
from storefront.utils.settings import DEFAULT_DELIVERY_FEE
from storefront.utils.logging import setup_logging, get_logger

logger = get_logger(__name__)

CATEGORIES = [
    {"name": "Beverages", "icon": "CupSoda", "color": "from-cyan-500 to-blue-600", "bg_color": "bg-cyan-50"},
    {"name": "Groceries", "icon": "ShoppingBasket", "color": "from-emerald-500 to-green-600", "bg_color": "bg-emerald-50"},
    {"name": "Baby Care", "icon": "Baby", "color": "from-pink-500 to-purple-600", "bg_color": "bg-pink-50"},
]

PRODUCTS = [
    {"name": "Bottled Water (75cl)", "price": Decimal("300.00"), "category": "Beverages"},
    {"name": "Golden Penny Spaghetti", "price": Decimal("1000.00"), "category": "Groceries"},
    {"name": "Baby Wipes", "price": Decimal("1500.00"), "category": "Baby Care"},
]


def seed():
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.get(SettingModel, DELIVERY_FEE_KEY) is None:
            db.add(SettingModel(key=DELIVERY_FEE_KEY, value=str(DEFAULT_DELIVERY_FEE)))

        if db.query(CategoryModel).first():
            db.commit()
            return

        by_name = {}
        for data in CATEGORIES:
            category = CategoryModel(**data)
            db.add(category)
            by_name[data["name"]] = category
        db.flush()

        for data in PRODUCTS:
            db.add(
                ProductModel(
                    name=data["name"],
                    price=data["price"],
                    category_id=by_name[data["category"]].id,
                    in_stock=True,
                )
            )
        db.commit()
        logger.info(f"Seeded {len(CATEGORIES)} categories and {len(PRODUCTS)} products")
    finally:
        db.close()


if __name__ == "__main__":
    setup_logging()
    Base.metadata.create_all(bind=engine)
    seed()
