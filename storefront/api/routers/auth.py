# storefront/api/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import get_token, require_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import SignUpIn, SignInIn, SessionOut, UserRead
from storefront.services.auth_service import AuthService, InvalidCredentials

router = APIRouter(prefix="/auth", tags=["auth"])


def get_service(db: Session):
    return AuthService(db)


@router.post("/sign-up", response_model=UserRead, status_code=201)
def sign_up(payload: SignUpIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.sign_up(payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/sign-in", response_model=SessionOut)
def sign_in(payload: SignInIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.sign_in(payload.email, payload.password)
    except InvalidCredentials as e:
        raise HTTPException(status_code=401, detail=str(e))


@router.post("/admin/sign-in", response_model=SessionOut)
def admin_sign_in(payload: SignInIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.admin_sign_in(payload.email, payload.password)
    except InvalidCredentials as e:
        raise HTTPException(status_code=401, detail=str(e))


@router.post("/sign-out", status_code=204)
def sign_out(token: str | None = Depends(get_token), db: Session = Depends(get_db)):
    if token:
        get_service(db).sign_out(token)


@router.get("/session", response_model=UserRead)
def current_session(user: UserModel = Depends(require_user)):
    return user
