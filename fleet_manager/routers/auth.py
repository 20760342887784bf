# fleet_manager/routers/auth.py
"""Registration, login and the current-user profile."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from fleet_manager.database import get_db
from fleet_manager.routers.deps import raise_for_failure, require_session
from fleet_manager.schemas.user import RegisterRequest, LoginRequest, TokenOut, UserOut
from fleet_manager.services import user_service
from fleet_manager.services.auth_service import AuthSession

router = APIRouter()


@router.post("/auth/register", response_model=TokenOut, summary="Register a new user")
def register(body: RegisterRequest, db: Session = Depends(get_db)):
    """
    First user becomes admin. Refused with 400 once the user limit is reached.
    """
    user, token = raise_for_failure(user_service.register(db, body.name, body.email, body.password))
    return {"token": token}


@router.post("/auth/login", response_model=TokenOut, summary="Log in")
def login(body: LoginRequest, db: Session = Depends(get_db)):
    token = raise_for_failure(user_service.login(db, body.email, body.password))
    return {"token": token}


@router.get("/auth/me", response_model=UserOut, summary="Current user profile")
def me(session: AuthSession = Depends(require_session), db: Session = Depends(get_db)):
    return raise_for_failure(user_service.get_user(db, session.principal.id))
