from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric, JSON
from datetime import datetime, timezone

from storefront.data.database import Base


class ReservationModel(Base):
    """Rezerwacja do odbioru osobistego, bez oplaty za dostawe."""

    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    user_name = Column(String(200), nullable=False)
    user_email = Column(String(255), nullable=False)
    user_phone = Column(String(50), nullable=False)

    items = Column(JSON, nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False)

    status = Column(String(20), nullable=False, default="pending")  # pending, ready, picked_up, expired, cancelled
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    expires_at = Column(DateTime(timezone=True), nullable=False)
