# storefront/repos/order_repo.py
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel


def order_number_for(order_id: int, created_at: datetime) -> str:
    return f"ORD-{created_at:%Y%m%d}-{order_id:06d}"


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        if order.created_at is None:
            order.created_at = datetime.now(timezone.utc)

        self.db.add(order)
        # id potrzebne do numeru zamowienia, jeden commit na calosc
        self.db.flush()
        order.order_number = order_number_for(order.id, order.created_at)
        self.db.commit()
        self.db.refresh(order)
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def list_orders(self, user_id: int | None = None) -> list[OrderModel]:
        stmt = select(OrderModel).order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        if user_id is not None:
            stmt = stmt.where(OrderModel.user_id == user_id)
        return list(self.db.execute(stmt).scalars().all())

    def update_order_status(self, order_id: int, status: str) -> OrderModel | None:
        order = self.get_order(order_id)
        if order:
            order.status = status
            self.db.commit()
            self.db.refresh(order)
        return order
