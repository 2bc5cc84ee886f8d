# storefront/api/deps.py
import re
import uuid

import redis
from fastapi import Depends, Header, HTTPException, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.services.auth_service import AuthService
from storefront.services.cart_store import CartStore, CartStorage, RedisCartStorage
from storefront.services.checkout_service import CheckoutService
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService

CART_COOKIE = "cart_session"
CART_HEADER = "X-Cart-Session"
_SESSION_RE = re.compile(r"^[A-Za-z0-9_-]{8,64}$")

bearer = HTTPBearer(auto_error=False)


def get_redis(request: Request) -> redis.Redis:
    # klient tworzony raz przy starcie aplikacji (lifespan w main.py)
    return request.app.state.redis


def get_cart_session(
    request: Request,
    response: Response,
    x_cart_session: str | None = Header(default=None, alias=CART_HEADER),
) -> str:
    session = x_cart_session or request.cookies.get(CART_COOKIE)
    if not session or not _SESSION_RE.match(session):
        session = uuid.uuid4().hex

    response.set_cookie(CART_COOKIE, session, httponly=True, samesite="lax")
    response.headers[CART_HEADER] = session
    return session


def get_cart_storage(client: redis.Redis = Depends(get_redis)) -> CartStorage:
    return RedisCartStorage(client)


def get_cart_store(
    session: str = Depends(get_cart_session),
    storage: CartStorage = Depends(get_cart_storage),
):
    store = CartStore(storage, RedisCartStorage.key_for(session)).load()
    try:
        yield store
    finally:
        store.dispose()


def get_lock_service(client: redis.Redis = Depends(get_redis)) -> LockService:
    return LockService(client)


def get_notification_service() -> NotificationService:
    return NotificationService()


def get_checkout_service(
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
    notification_service: NotificationService = Depends(get_notification_service),
) -> CheckoutService:
    return CheckoutService(db, lock_service, notification_service)


def get_token(credentials: HTTPAuthorizationCredentials | None = Depends(bearer)) -> str | None:
    return credentials.credentials if credentials else None


def get_current_user(
    token: str | None = Depends(get_token),
    db: Session = Depends(get_db),
) -> UserModel | None:
    return AuthService(db).current_user(token)


def require_user(user: UserModel | None = Depends(get_current_user)) -> UserModel:
    if user is None:
        raise HTTPException(
            status_code=401,
            detail="Wymagane logowanie",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_admin(user: UserModel = Depends(require_user)) -> UserModel:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Brak uprawnien administratora")
    return user
