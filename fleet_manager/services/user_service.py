# fleet_manager/services/user_service.py
"""
Registration, login and user administration.

- Registration closes once MAX_USERS accounts exist.
- The first account becomes admin with every permission; later accounts are
  standard users that can only view until an admin grants more.
- Admin accounts can't be deleted, and their permissions can only be changed
  by that same admin (they always report all-true anyway).
"""

from datetime import datetime
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fleet_manager.config import settings
from fleet_manager.models.user import User, ROLE_ADMIN, ROLE_STANDARD
from fleet_manager.services.auth_service import hash_password, verify_password, create_access_token
from fleet_manager.services.authorization import (
    Principal, check_permission_update, check_user_deletion, check_registration_capacity,
)
from fleet_manager.services.outcomes import NotFound, Conflict, ValidationFailed, Removed
from fleet_manager.utils.logger import get_logger

logger = get_logger(__name__)

ADMIN_PERMISSIONS = {"canView": True, "canEdit": True, "canExport": True, "canManageUsers": True}
STANDARD_PERMISSIONS = {"canView": True, "canEdit": False, "canExport": False, "canManageUsers": False}


def count_users(db: Session) -> int:
    return db.query(func.count(User.id)).scalar() or 0


def check_user_limit(db: Session) -> dict:
    user_count = count_users(db)
    return {
        "is_limit_reached": user_count >= settings.MAX_USERS,
        "user_count": user_count,
        "max_users": settings.MAX_USERS,
    }


def register(db: Session, name: str, email: str, password: str):
    """Create an account and return (user, token), or a failure."""
    user_count = count_users(db)
    capacity = check_registration_capacity(user_count)
    if not capacity.allowed:
        logger.warning(f"[USERS] Registration refused for {email}: limit reached")
        return capacity.reason

    email = email.strip().lower()
    if db.query(User).filter(User.email == email).first():
        return Conflict("email", "User already exists")

    is_first = user_count == 0
    user = User(
        name=name.strip(),
        email=email,
        password_hash=hash_password(password),
        role=ROLE_ADMIN if is_first else ROLE_STANDARD,
        created_at=datetime.utcnow(),
    )
    user.set_permissions(ADMIN_PERMISSIONS if is_first else STANDARD_PERMISSIONS)

    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return Conflict("email", "User already exists")
    db.refresh(user)
    logger.info(f"[USERS] Registered {email} as {user.role}")
    return user, create_access_token(user)


def login(db: Session, email: str, password: str):
    user = db.query(User).filter(User.email == email.strip().lower()).first()
    if not user or not verify_password(password, user.password_hash):
        logger.info(f"[AUTH] Failed login for {email}")
        return ValidationFailed("credentials", "Invalid credentials")
    logger.info(f"[AUTH] Login {user.email}")
    return create_access_token(user)


def get_user(db: Session, user_id: int):
    user = db.query(User).filter(User.id == user_id).first()
    return user or NotFound("User", user_id)


def list_users(db: Session):
    return db.query(User).order_by(User.id).all()


def update_permissions(db: Session, actor: Principal, user_id: int, permissions: dict):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        return NotFound("User", user_id)

    decision = check_permission_update(actor, user)
    if not decision.allowed:
        logger.warning(f"[USERS] user={actor.id} tried to edit admin user={user_id}'s permissions")
        return decision.reason

    user.set_permissions(permissions)
    db.commit()
    db.refresh(user)
    logger.info(f"[USERS] Permissions of {user.email} → {user.permissions}")
    return user


def delete_user(db: Session, actor: Principal, user_id: int):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        return NotFound("User", user_id)

    decision = check_user_deletion(actor, user, count_users(db))
    if not decision.allowed:
        logger.warning(f"[USERS] Delete of user={user_id} refused ({decision.rule})")
        return decision.reason

    db.delete(user)
    db.commit()
    logger.info(f"[USERS] Removed {user.email}")
    return Removed("User", user_id)
