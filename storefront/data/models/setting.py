from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime

from storefront.data.database import Base


class SettingModel(Base):
    __tablename__ = "settings"

    key = Column(String(100), primary_key=True)
    value = Column(String(500), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
