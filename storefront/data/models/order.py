from sqlalchemy import Column, Integer, ForeignKey, String, Text, DateTime, Numeric, JSON
from datetime import datetime, timezone

from storefront.data.database import Base


class OrderModel(Base):
    """Zamowienie z dostawa (platnosc przy odbiorze)."""

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    # czytelny numer dla klienta, np. ORD-20261019-000042; nadawany przy insercie
    order_number = Column(String(32), nullable=True, unique=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    user_name = Column(String(200), nullable=False)
    user_email = Column(String(255), nullable=False)
    user_phone = Column(String(50), nullable=False)
    delivery_address = Column(Text, nullable=False)
    notes = Column(Text, nullable=True)

    # snapshot pozycji z koszyka, nie referencja do produktow
    items = Column(JSON, nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False)

    status = Column(String(20), nullable=False, default="pending")  # pending, confirmed, processing, shipped, delivered, cancelled
    payment_status = Column(String(20), nullable=False, default="pending")
    payment_method = Column(String(30), nullable=False, default="cash_on_delivery")
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
