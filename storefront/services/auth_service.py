# storefront/services/auth_service.py
import hashlib
import hmac
import secrets
from datetime import datetime, timezone, timedelta

from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel, AuthSessionModel
from storefront.domain.schemas import SignUpIn, UserRead, SessionOut
from storefront.repos.user_repo import UserRepo
from storefront.utils.dates import as_utc
from storefront.utils.settings import SESSION_TTL_HOURS, ADMIN_EMAIL, ADMIN_PASSWORD
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_ITERATIONS = 200_000


class AuthenticationRequired(Exception):
    """Brak zalogowanego uzytkownika tam, gdzie jest wymagany."""


class InvalidCredentials(Exception):
    pass


def hash_password(password: str) -> str:
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), bytes.fromhex(salt), _ITERATIONS)
    return f"pbkdf2_sha256${_ITERATIONS}${salt}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        _, iterations, salt, expected = stored.split("$")
    except ValueError:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), bytes.fromhex(salt), int(iterations))
    return hmac.compare_digest(digest.hex(), expected)


class AuthService:
    """
    Sesje i konta: sign up, sign in, sign out, biezaca sesja.
    Dla checkoutu to tylko sprawdzenie "czy jest zalogowany uzytkownik".
    """

    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def sign_up(self, payload: SignUpIn, is_admin: bool = False) -> UserRead:
        email = payload.email.strip().lower()
        if self.repo.get_by_email(email):
            raise ValueError("Uzytkownik o tym adresie email juz istnieje")

        user = self.repo.create_user(
            UserModel(
                email=email,
                full_name=payload.full_name.strip(),
                password_hash=hash_password(payload.password),
                is_admin=is_admin,
            )
        )
        logger.info(f"Utworzono konto {user.id} ({email})")
        return UserRead.model_validate(user)

    def sign_in(self, email: str, password: str) -> SessionOut:
        user = self.repo.get_by_email(email.strip().lower())
        if not user or not verify_password(password, user.password_hash):
            raise InvalidCredentials("Invalid login credentials")

        self.repo.purge_expired_sessions()

        session = self.repo.create_session(
            AuthSessionModel(
                token=secrets.token_urlsafe(32),
                user_id=user.id,
                expires_at=datetime.now(timezone.utc) + timedelta(hours=SESSION_TTL_HOURS),
            )
        )
        logger.info(f"Uzytkownik {user.id} zalogowany")
        return SessionOut(
            access_token=session.token,
            expires_at=session.expires_at,
            user=UserRead.model_validate(user),
        )

    def sign_out(self, token: str):
        self.repo.delete_session(token)

    def current_user(self, token: str | None) -> UserModel | None:
        if not token:
            return None

        session = self.repo.get_session(token)
        if not session:
            return None

        if as_utc(session.expires_at) <= datetime.now(timezone.utc):
            self.repo.delete_session(token)
            return None

        return session.user

    def admin_sign_in(self, email: str, password: str) -> SessionOut:
        """
        Logowanie admina: tylko skonfigurowane dane, konto zakladane przy
        pierwszym uzyciu.
        """
        if email.strip().lower() != ADMIN_EMAIL.lower() or password != ADMIN_PASSWORD:
            raise InvalidCredentials("Invalid admin credentials")

        if not self.repo.get_by_email(ADMIN_EMAIL.lower()):
            self.sign_up(
                SignUpIn(email=ADMIN_EMAIL, password=ADMIN_PASSWORD, full_name="Admin"),
                is_admin=True,
            )

        session = self.sign_in(ADMIN_EMAIL, ADMIN_PASSWORD)
        if not session.user.is_admin:
            raise InvalidCredentials("Konto nie ma uprawnien administratora")
        return session
