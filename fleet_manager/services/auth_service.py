# fleet_manager/services/auth_service.py
"""
Credentials and sessions.

- Passwords: passlib CryptContext (bcrypt).
- Tokens: HS256 JWTs signed with JWT_SECRET, carrying
  {sub, name, email, role, permissions, exp}.
- open_session() turns a bearer token into an explicit AuthSession.
  Signature and expiry are checked here, and the user is reloaded from the
  database so permission changes take effect on the next request.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from passlib.exc import UnknownHashError
from sqlalchemy.orm import Session

from fleet_manager.config import settings
from fleet_manager.models.user import User
from fleet_manager.services.authorization import Principal
from fleet_manager.services.outcomes import Unauthenticated
from fleet_manager.utils.logger import get_logger

logger = get_logger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class AuthSession:
    token: str
    principal: Principal
    expires_at: datetime


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(plain_password, password_hash)
    except (UnknownHashError, ValueError):
        # Corrupt/unknown hash counts as bad credentials, not a server error
        return False


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {
        "sub": str(user.id),
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "permissions": user.permissions,
        "exp": expire,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str):
    """Returns the token payload, or Unauthenticated if it's invalid or expired."""
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        return Unauthenticated("Token expired")
    except JWTError:
        return Unauthenticated("Invalid token")


def open_session(db: Session, token: Optional[str]):
    """Resolve a bearer token to an AuthSession (or Unauthenticated)."""
    if not token:
        return Unauthenticated("No token, authorization denied")

    payload = decode_token(token)
    if isinstance(payload, Unauthenticated):
        logger.info(f"[AUTH] Rejected token: {payload.reason}")
        return payload

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        return Unauthenticated("Invalid token")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        return Unauthenticated("User not found")

    return AuthSession(
        token=token,
        principal=Principal.from_user(user),
        expires_at=datetime.utcfromtimestamp(payload["exp"]),
    )
