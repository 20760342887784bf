# fleet_manager/services/authorization.py
"""
Authorization engine: decides whether a principal may use a capability.

Base check: authorize(principal, capability):
  Rules are evaluated in order; the first rule that returns a Decision wins,
  a rule returning None abstains. If every rule abstains the request is denied.

    1. authenticated-principal  no principal            → Deny(Unauthenticated)
    2. admin-bypass             role == admin           → Allow (any capability)
    3. admin-only               isAdmin, not admin      → Deny(PermissionDenied)
    4. permission-flag          permissions[capability] → Allow / Deny

Point-of-use rules (user management and registration) are separate
functions, checked by the services that own those operations.
Denial is a normal return value, never an exception.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from fleet_manager.config import settings
from fleet_manager.models.user import ROLE_ADMIN
from fleet_manager.services.outcomes import Failure, Unauthenticated, PermissionDenied, Blocked
from fleet_manager.utils.logger import get_logger

logger = get_logger(__name__)


class Capability(str, Enum):
    CAN_VIEW = "canView"
    CAN_EDIT = "canEdit"
    CAN_EXPORT = "canExport"
    CAN_MANAGE_USERS = "canManageUsers"
    IS_ADMIN = "isAdmin"


@dataclass(frozen=True)
class Principal:
    """The authenticated user making a request."""
    id: int
    role: str
    permissions: dict = field(default_factory=dict)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @classmethod
    def from_user(cls, user) -> "Principal":
        return cls(id=user.id, role=user.role, permissions=dict(user.permissions))


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[Failure] = None
    rule: Optional[str] = None   # name of the rule that decided

    @classmethod
    def allow(cls, rule: str = None) -> "Decision":
        return cls(allowed=True, rule=rule)

    @classmethod
    def deny(cls, reason: Failure, rule: str = None) -> "Decision":
        return cls(allowed=False, reason=reason, rule=rule)


# ── Base capability rules ────────────────────────────────────────────────────

class AuthorizationRule:
    name = "rule"

    def evaluate(self, principal: Optional[Principal], capability: Capability) -> Optional[Decision]:
        raise NotImplementedError


class AuthenticatedPrincipalRule(AuthorizationRule):
    name = "authenticated-principal"

    def evaluate(self, principal, capability):
        if principal is None:
            return Decision.deny(Unauthenticated("Not authenticated"), self.name)
        return None


class AdminBypassRule(AuthorizationRule):
    name = "admin-bypass"

    def evaluate(self, principal, capability):
        if principal.is_admin:
            return Decision.allow(self.name)
        return None


class AdminOnlyRule(AuthorizationRule):
    name = "admin-only"

    def evaluate(self, principal, capability):
        if capability == Capability.IS_ADMIN:
            return Decision.deny(
                PermissionDenied(capability.value, "Access denied. Admin role required."), self.name
            )
        return None


class PermissionFlagRule(AuthorizationRule):
    name = "permission-flag"

    def evaluate(self, principal, capability):
        if principal.permissions.get(capability.value):
            return Decision.allow(self.name)
        return Decision.deny(PermissionDenied(capability.value), self.name)


DEFAULT_RULES = (
    AuthenticatedPrincipalRule(),
    AdminBypassRule(),
    AdminOnlyRule(),
    PermissionFlagRule(),
)


def authorize(principal: Optional[Principal], capability, rules=DEFAULT_RULES) -> Decision:
    """Evaluate `rules` in order for (principal, capability)."""
    capability = Capability(capability)
    for rule in rules:
        decision = rule.evaluate(principal, capability)
        if decision is not None:
            if not decision.allowed:
                who = principal.id if principal else "anonymous"
                logger.warning(f"[AUTH] Denied {capability.value} for user={who} by {decision.rule}")
            return decision
    return Decision.deny(PermissionDenied(capability.value), "default-deny")


# ── Point-of-use rules ───────────────────────────────────────────────────────

def check_permission_update(actor: Principal, target) -> Decision:
    """An admin's permissions can't be changed by anyone but that admin."""
    if target.is_admin and actor.id != target.id:
        return Decision.deny(
            PermissionDenied(Capability.IS_ADMIN.value, "Cannot change permissions of an admin user"),
            "protect-admin-permissions",
        )
    return Decision.allow("protect-admin-permissions")


def check_user_deletion(actor: Principal, target, user_count: int) -> Decision:
    if target.is_admin:
        return Decision.deny(
            PermissionDenied(Capability.IS_ADMIN.value, "Cannot delete an admin user"),
            "protect-admin-account",
        )
    if actor.id == target.id:
        return Decision.deny(Blocked("Cannot delete your own account"), "no-self-delete")
    if user_count <= 1:
        return Decision.deny(Blocked("Cannot delete the only user in the system"), "keep-last-user")
    return Decision.allow("user-deletion")


def check_registration_capacity(user_count: int) -> Decision:
    if user_count >= settings.MAX_USERS:
        return Decision.deny(
            Blocked(f"User limit reached ({settings.MAX_USERS} users maximum)"),
            "registration-capacity",
        )
    return Decision.allow("registration-capacity")
