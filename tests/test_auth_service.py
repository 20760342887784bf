# tests/test_auth_service.py
"""Unit tests for password hashing, tokens and session resolution."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from unittest.mock import MagicMock
from datetime import timedelta
from fleet_manager.models.user import User
from fleet_manager.services.auth_service import (
    AuthSession, create_access_token, hash_password, open_session, verify_password,
)
from fleet_manager.services.outcomes import Unauthenticated


def make_user(role="standard"):
    return User(id=3, name="Kim", email="kim@example.com", role=role,
                can_view=True, can_edit=True, can_export=False, can_manage_users=False)


def db_returning(user):
    db = MagicMock()
    db.query.return_value.filter.return_value.first.return_value = user
    return db


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("s3cret!")
        assert hashed != "s3cret!"
        assert verify_password("s3cret!", hashed)
        assert not verify_password("wrong", hashed)

    def test_garbage_hash_is_bad_credentials(self):
        assert verify_password("s3cret!", "not-a-hash") is False


class TestSessions:
    def test_valid_token_opens_session(self):
        user = make_user()
        session = open_session(db_returning(user), create_access_token(user))
        assert isinstance(session, AuthSession)
        assert session.principal.id == 3
        assert session.principal.permissions["canEdit"] is True
        assert session.expires_at is not None

    def test_permissions_reloaded_from_db(self):
        user = make_user()
        token = create_access_token(user)
        user.can_edit = False   # revoked after the token was issued
        session = open_session(db_returning(user), token)
        assert session.principal.permissions["canEdit"] is False

    def test_expired_token(self):
        token = create_access_token(make_user(), expires_delta=timedelta(seconds=-30))
        result = open_session(db_returning(make_user()), token)
        assert isinstance(result, Unauthenticated)
        assert result.reason == "Token expired"

    def test_tampered_token(self):
        result = open_session(db_returning(make_user()), "abc.def.ghi")
        assert isinstance(result, Unauthenticated)
        assert result.reason == "Invalid token"

    def test_missing_token(self):
        assert isinstance(open_session(MagicMock(), None), Unauthenticated)

    def test_deleted_user(self):
        token = create_access_token(make_user())
        result = open_session(db_returning(None), token)
        assert isinstance(result, Unauthenticated)
        assert result.reason == "User not found"
