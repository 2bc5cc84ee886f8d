from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, Numeric, Float, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(12, 2), nullable=False)
    image_url = Column(String(500), nullable=True)

    rating = Column(Float, nullable=False, default=0)
    reviews_count = Column(Integer, nullable=False, default=0)
    badge = Column(String(50), nullable=True)
    discount = Column(String(50), nullable=True)
    in_stock = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    category = relationship("CategoryModel", back_populates="products")
