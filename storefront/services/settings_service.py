# storefront/services/settings_service.py
from decimal import Decimal, InvalidOperation

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.repos.setting_repo import SettingRepo
from storefront.utils.settings import DEFAULT_DELIVERY_FEE
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

DELIVERY_FEE_KEY = "delivery_fee"


class SettingsService:
    def __init__(self, db: Session):
        self.repo = SettingRepo(db)

    def get_delivery_fee(self) -> Decimal:
        """Oplata za dostawe z tabeli settings; przy braku lub bledzie - wartosc domyslna."""
        try:
            value = self.repo.get_value(DELIVERY_FEE_KEY)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching delivery fee: {e}")
            self.repo.db.rollback()
            return DEFAULT_DELIVERY_FEE

        if value is None:
            return DEFAULT_DELIVERY_FEE

        try:
            return Decimal(value)
        except InvalidOperation:
            logger.warning(f"Niepoprawna wartosc delivery_fee w settings: {value!r}")
            return DEFAULT_DELIVERY_FEE

    def set_delivery_fee(self, fee: Decimal) -> Decimal:
        if fee < 0:
            raise ValueError("Oplata za dostawe nie moze byc ujemna")

        setting = self.repo.set_value(DELIVERY_FEE_KEY, str(fee))
        logger.info(f"Delivery fee updated to {setting.value}")
        return Decimal(setting.value)
