# storefront/repos/setting_repo.py
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from storefront.data.models.setting import SettingModel


class SettingRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_value(self, key: str) -> str | None:
        setting = self.db.get(SettingModel, key)
        return setting.value if setting else None

    def set_value(self, key: str, value: str) -> SettingModel:
        setting = self.db.get(SettingModel, key)
        if setting:
            setting.value = value
            setting.updated_at = datetime.now(timezone.utc)
        else:
            setting = SettingModel(key=key, value=value)
            self.db.add(setting)
        self.db.commit()
        self.db.refresh(setting)
        return setting
