# complaints/user/routes.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from complaints.core.database import get_db
from complaints.core.security import Principal, get_current_principal
from complaints.user import services as user_service
from complaints.user.schemas import AuthOut, LoginIn, RegisterIn, UserOut

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=AuthOut, status_code=201)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    user, token = user_service.register(db, payload)
    return AuthOut(user=UserOut.model_validate(user), token=token)


@router.post("/login", response_model=AuthOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    user, token = user_service.login(db, payload)
    return AuthOut(user=UserOut.model_validate(user), token=token)


@router.get("/profile", response_model=UserOut)
def profile(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return user_service.get_profile(db, principal)
