#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from storefront.data.models.user import UserModel, AuthSessionModel
from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.data.models.order import OrderModel
from storefront.data.models.reservation import ReservationModel
from storefront.data.models.setting import SettingModel

__all__ = [
    "UserModel",
    "AuthSessionModel",
    "CategoryModel",
    "ProductModel",
    "OrderModel",
    "ReservationModel",
    "SettingModel",
]
