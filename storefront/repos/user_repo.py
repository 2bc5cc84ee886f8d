from datetime import datetime, timezone

from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel, AuthSessionModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_by_email(self, email: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.email == email)
        ).scalar_one_or_none()

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def create_session(self, session: AuthSessionModel) -> AuthSessionModel:
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        return session

    def get_session(self, token: str) -> AuthSessionModel | None:
        return self.db.get(AuthSessionModel, token)

    def delete_session(self, token: str):
        self.db.execute(delete(AuthSessionModel).where(AuthSessionModel.token == token))
        self.db.commit()

    def purge_expired_sessions(self) -> int:
        result = self.db.execute(
            delete(AuthSessionModel).where(AuthSessionModel.expires_at < datetime.now(timezone.utc))
        )
        self.db.commit()
        return result.rowcount
