# fleet_manager/routers/users.py
"""User administration: admin only."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from fleet_manager.database import get_db
from fleet_manager.routers.deps import raise_for_failure, require
from fleet_manager.schemas.user import PermissionUpdate, UserOut, UserLimitOut
from fleet_manager.services import user_service
from fleet_manager.services.auth_service import AuthSession
from fleet_manager.services.authorization import Capability

router = APIRouter()

admin_only = require(Capability.IS_ADMIN)


@router.get("/users", response_model=list[UserOut], summary="List users")
def list_users(db: Session = Depends(get_db), session: AuthSession = Depends(admin_only)):
    return user_service.list_users(db)


@router.get("/users/check-limit", response_model=UserLimitOut, summary="Is the user limit reached?")
def check_limit(db: Session = Depends(get_db), session: AuthSession = Depends(admin_only)):
    return user_service.check_user_limit(db)


@router.get("/users/{user_id}", response_model=UserOut, summary="Get a user")
def get_user(user_id: int, db: Session = Depends(get_db), session: AuthSession = Depends(admin_only)):
    return raise_for_failure(user_service.get_user(db, user_id))


@router.put("/users/{user_id}/permissions", response_model=UserOut, summary="Update user permissions")
def update_permissions(user_id: int, body: PermissionUpdate, db: Session = Depends(get_db),
                       session: AuthSession = Depends(admin_only)):
    """Merges the given flags. Another admin's permissions can't be changed (403)."""
    return raise_for_failure(
        user_service.update_permissions(db, session.principal, user_id, body.permissions)
    )


@router.delete("/users/{user_id}", summary="Delete a user")
def delete_user(user_id: int, db: Session = Depends(get_db), session: AuthSession = Depends(admin_only)):
    removed = raise_for_failure(user_service.delete_user(db, session.principal, user_id))
    return {"message": removed.message}
