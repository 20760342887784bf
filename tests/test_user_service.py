# tests/test_user_service.py
"""Unit tests for registration, the user limit and user administration."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import MagicMock, patch
from fleet_manager.models.user import User
from fleet_manager.services import user_service
from fleet_manager.services.authorization import Principal
from fleet_manager.services.outcomes import Blocked, Conflict, NotFound, PermissionDenied, Removed

ADMIN = Principal(id=1, role="admin", permissions={})


def make_user(user_id=2, role="standard", **flags):
    user = User(id=user_id, name="Dana", email=f"user{user_id}@example.com", role=role,
                can_view=True, can_edit=False, can_export=False, can_manage_users=False)
    for name, value in flags.items():
        setattr(user, name, value)
    return user


def db_with(user_count, existing=None):
    db = MagicMock()
    db.query.return_value.scalar.return_value = user_count
    db.query.return_value.filter.return_value.first.return_value = existing
    return db


class TestUserModel:
    def test_admin_reports_all_permissions(self):
        admin = make_user(role="admin", can_view=False)
        assert admin.permissions == {"canView": True, "canEdit": True, "canExport": True, "canManageUsers": True}
        assert admin.stored_permissions["canView"] is False

    def test_set_permissions_merges(self):
        user = make_user()
        user.set_permissions({"canEdit": True, "canExport": None, "bogus": True})
        assert user.permissions == {"canView": True, "canEdit": True, "canExport": False, "canManageUsers": False}


@patch("fleet_manager.services.user_service.hash_password", return_value="hashed")
class TestRegister:
    def test_first_user_is_admin(self, _hash):
        db = db_with(0)
        user, token = user_service.register(db, "Ada", "Ada@Example.com", "secret1")
        assert user.role == "admin"
        assert user.email == "ada@example.com"
        assert all(user.stored_permissions.values())
        assert token
        db.add.assert_called_once_with(user)

    def test_later_user_is_view_only(self, _hash):
        user, _ = user_service.register(db_with(2), "Bo", "bo@example.com", "secret1")
        assert user.role == "standard"
        assert user.permissions == {"canView": True, "canEdit": False, "canExport": False, "canManageUsers": False}

    def test_sixth_user_refused(self, _hash):
        db = db_with(5)
        result = user_service.register(db, "Six", "six@example.com", "secret1")
        assert isinstance(result, Blocked)
        assert "limit" in result.message
        db.add.assert_not_called()
        db.commit.assert_not_called()

    def test_duplicate_email(self, _hash):
        db = db_with(2, existing=make_user())
        result = user_service.register(db, "Dup", "user2@example.com", "secret1")
        assert isinstance(result, Conflict)
        db.add.assert_not_called()


class TestCheckLimit:
    @pytest.mark.parametrize("count,reached", [(4, False), (5, True)])
    def test_limit(self, count, reached):
        assert user_service.check_user_limit(db_with(count))["is_limit_reached"] is reached


class TestUpdatePermissions:
    def test_grants_flags(self):
        user = make_user()
        result = user_service.update_permissions(db_with(3, user), ADMIN, 2, {"canEdit": True})
        assert result is user
        assert user.can_edit is True

    def test_other_admin_protected(self):
        other_admin = make_user(user_id=5, role="admin")
        db = db_with(3, other_admin)
        result = user_service.update_permissions(db, ADMIN, 5, {"canEdit": False})
        assert isinstance(result, PermissionDenied)
        db.commit.assert_not_called()
        assert other_admin.permissions["canEdit"] is True

    def test_admin_stays_all_true_after_own_update(self):
        me = make_user(user_id=1, role="admin")
        user_service.update_permissions(db_with(3, me), ADMIN, 1, {"canExport": False})
        assert me.permissions["canExport"] is True

    def test_missing_user(self):
        assert isinstance(user_service.update_permissions(db_with(3), ADMIN, 9, {}), NotFound)


class TestDeleteUser:
    def test_removes_standard_user(self):
        user = make_user()
        db = db_with(3, user)
        assert isinstance(user_service.delete_user(db, ADMIN, 2), Removed)
        db.delete.assert_called_once_with(user)

    def test_admin_cannot_be_deleted(self):
        db = db_with(3, make_user(user_id=4, role="admin"))
        assert isinstance(user_service.delete_user(db, ADMIN, 4), PermissionDenied)
        db.delete.assert_not_called()

    def test_only_user_cannot_be_deleted(self):
        db = db_with(1, make_user())
        assert isinstance(user_service.delete_user(db, ADMIN, 2), Blocked)
        db.delete.assert_not_called()
