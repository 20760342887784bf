# tests/test_authorization.py
"""Unit tests for the authorization engine and the user-management rules."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import MagicMock
from fleet_manager.services.authorization import (
    Capability, Principal, authorize, DEFAULT_RULES, AdminBypassRule, PermissionFlagRule,
    check_permission_update, check_user_deletion, check_registration_capacity,
)
from fleet_manager.services.outcomes import Unauthenticated, PermissionDenied, Blocked


def make_principal(user_id=2, role="standard", **flags):
    permissions = {"canView": True, "canEdit": False, "canExport": False, "canManageUsers": False}
    permissions.update(flags)
    return Principal(id=user_id, role=role, permissions=permissions)


def make_target(user_id=3, admin=False):
    target = MagicMock()
    target.id = user_id
    target.is_admin = admin
    return target


class TestAuthorize:
    def test_missing_principal_is_unauthenticated(self):
        decision = authorize(None, Capability.CAN_VIEW)
        assert not decision.allowed
        assert isinstance(decision.reason, Unauthenticated)
        assert decision.reason.status_code == 401

    def test_standard_user_allowed_by_flag(self):
        decision = authorize(make_principal(), Capability.CAN_VIEW)
        assert decision.allowed
        assert decision.rule == "permission-flag"

    def test_standard_user_denied_without_flag(self):
        decision = authorize(make_principal(), Capability.CAN_EDIT)
        assert not decision.allowed
        assert isinstance(decision.reason, PermissionDenied)
        assert decision.reason.capability == "canEdit"
        assert decision.reason.status_code == 403

    def test_capability_accepts_plain_string(self):
        assert authorize(make_principal(canExport=True), "canExport").allowed

    def test_admin_bypasses_stored_flags(self):
        admin = make_principal(user_id=1, role="admin", canView=False, canEdit=False)
        for capability in Capability:
            decision = authorize(admin, capability)
            assert decision.allowed
            assert decision.rule == "admin-bypass"

    def test_is_admin_denied_even_with_every_flag(self):
        user = make_principal(canEdit=True, canExport=True, canManageUsers=True)
        decision = authorize(user, Capability.IS_ADMIN)
        assert not decision.allowed
        assert decision.rule == "admin-only"

    def test_rules_can_be_targeted_individually(self):
        admin = make_principal(user_id=1, role="admin")
        assert AdminBypassRule().evaluate(make_principal(), Capability.CAN_EDIT) is None
        assert AdminBypassRule().evaluate(admin, Capability.CAN_EDIT).allowed
        assert not PermissionFlagRule().evaluate(make_principal(), Capability.CAN_EDIT).allowed

    def test_no_deciding_rule_means_deny(self):
        decision = authorize(make_principal(), Capability.CAN_VIEW, rules=(DEFAULT_RULES[0],))
        assert not decision.allowed
        assert decision.rule == "default-deny"


class TestPermissionUpdateRule:
    def test_other_admin_cannot_be_changed(self):
        actor = make_principal(user_id=1, role="admin")
        decision = check_permission_update(actor, make_target(user_id=5, admin=True))
        assert not decision.allowed
        assert isinstance(decision.reason, PermissionDenied)

    def test_admin_may_send_own_permissions(self):
        actor = make_principal(user_id=1, role="admin")
        assert check_permission_update(actor, make_target(user_id=1, admin=True)).allowed

    def test_standard_target_allowed(self):
        actor = make_principal(user_id=1, role="admin")
        assert check_permission_update(actor, make_target(user_id=4)).allowed


class TestUserDeletionRule:
    def test_admin_target_denied(self):
        decision = check_user_deletion(make_principal(user_id=1, role="admin"), make_target(admin=True), 3)
        assert isinstance(decision.reason, PermissionDenied)

    def test_self_deletion_blocked(self):
        actor = make_principal(user_id=4, role="admin")
        decision = check_user_deletion(actor, make_target(user_id=4), 3)
        assert isinstance(decision.reason, Blocked)

    def test_last_user_blocked(self):
        decision = check_user_deletion(make_principal(user_id=1, role="admin"), make_target(), 1)
        assert not decision.allowed
        assert "only user" in decision.reason.message

    def test_regular_deletion_allowed(self):
        assert check_user_deletion(make_principal(user_id=1, role="admin"), make_target(), 3).allowed


class TestRegistrationCapacity:
    @pytest.mark.parametrize("count", [0, 1, 4])
    def test_open_below_limit(self, count):
        assert check_registration_capacity(count).allowed

    @pytest.mark.parametrize("count", [5, 6])
    def test_limit_reached(self, count):
        decision = check_registration_capacity(count)
        assert not decision.allowed
        assert isinstance(decision.reason, Blocked)
        assert decision.reason.status_code == 400
