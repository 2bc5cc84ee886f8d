# storefront/repos/reservation_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.reservation import ReservationModel


class ReservationRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_reservation(self, reservation: ReservationModel) -> ReservationModel:
        self.db.add(reservation)
        self.db.commit()
        self.db.refresh(reservation)
        return reservation

    def get_reservation(self, reservation_id: int) -> ReservationModel | None:
        return self.db.get(ReservationModel, reservation_id)

    def list_reservations(self, user_id: int | None = None) -> list[ReservationModel]:
        stmt = select(ReservationModel).order_by(
            ReservationModel.created_at.desc(), ReservationModel.id.desc()
        )
        if user_id is not None:
            stmt = stmt.where(ReservationModel.user_id == user_id)
        return list(self.db.execute(stmt).scalars().all())

    def update_reservation_status(self, reservation_id: int, status: str) -> ReservationModel | None:
        reservation = self.get_reservation(reservation_id)
        if reservation:
            reservation.status = status
            self.db.commit()
            self.db.refresh(reservation)
        return reservation
