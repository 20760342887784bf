# fleet_manager/models/user.py
"""
Users table: at most MAX_USERS accounts.
The first account registered becomes admin; later ones are standard users
with a per-user permission set (view / edit / export / manage users).
"""

from sqlalchemy import Column, Integer, String, DateTime, Boolean
from fleet_manager.database import Base

ROLE_ADMIN = "admin"
ROLE_STANDARD = "standard"

PERMISSION_FIELDS = ("canView", "canEdit", "canExport", "canManageUsers")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=ROLE_STANDARD)  # admin | standard
    can_view = Column(Boolean, nullable=False, default=True)
    can_edit = Column(Boolean, nullable=False, default=False)
    can_export = Column(Boolean, nullable=False, default=False)
    can_manage_users = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def stored_permissions(self) -> dict:
        return {
            "canView": bool(self.can_view),
            "canEdit": bool(self.can_edit),
            "canExport": bool(self.can_export),
            "canManageUsers": bool(self.can_manage_users),
        }

    @property
    def permissions(self) -> dict:
        """Effective permissions. Admins always report all-true."""
        if self.is_admin:
            return {name: True for name in PERMISSION_FIELDS}
        return self.stored_permissions

    def set_permissions(self, permissions: dict):
        """Merge the given flags into the stored set; unknown keys are ignored."""
        columns = {
            "canView": "can_view",
            "canEdit": "can_edit",
            "canExport": "can_export",
            "canManageUsers": "can_manage_users",
        }
        for name, value in permissions.items():
            if name in columns and value is not None:
                setattr(self, columns[name], bool(value))

    def __repr__(self):
        return f"<User {self.id} email={self.email} role={self.role}>"
