"""Role-based capability checks for the code governance workflow."""

from __future__ import annotations

from typing import Dict, FrozenSet

from pydantic import BaseModel, Field

from rca_taxonomy.entities.core import CodeScope, CodeStatus, Role, Site

_ROLE_LEVELS: Dict[Role, int] = {
    Role.QA_MEMBER: 1,
    Role.QA_LEAD: 2,
    Role.MANAGER: 3,
    Role.ADMIN: 4,
}
_ALL_ROLES: FrozenSet[Role] = frozenset(Role)
_REVIEWERS: FrozenSet[Role] = frozenset({Role.MANAGER, Role.ADMIN})
_LEADS_AND_ABOVE: FrozenSet[Role] = frozenset({Role.QA_LEAD, Role.MANAGER, Role.ADMIN})


class AuthorizationError(PermissionError):
    """Raised when a principal attempts an operation its role does not grant."""


class Principal(BaseModel):
    """Authenticated user on whose behalf an operation runs."""

    id: str = Field(..., min_length=1)
    site: Site
    role: Role
    is_active: bool = Field(default=True)


def can_view_code(role: Role, site: Site, scope: CodeScope, code_site: Site | None) -> bool:
    """Reviewers see every code; others see global codes and their own site's codes."""

    if role in _REVIEWERS:
        return True
    if scope == CodeScope.GLOBAL:
        return True
    return code_site == site


def can_create_proposal(role: Role) -> bool:
    return role in _ALL_ROLES


def can_edit_pending_proposal(role: Role, is_creator: bool) -> bool:
    return role in _LEADS_AND_ABOVE or is_creator


def can_approve_reject(role: Role) -> bool:
    return role in _REVIEWERS


def can_merge_code(role: Role) -> bool:
    return role in _REVIEWERS


def can_deprecate_code(role: Role) -> bool:
    return role in _REVIEWERS


def can_edit_approved_code(role: Role) -> bool:
    return role in _REVIEWERS


def can_manage_users(role: Role) -> bool:
    return role == Role.ADMIN


def can_view_audit_logs(role: Role) -> bool:
    return role in _REVIEWERS


def can_view_all_sites(role: Role) -> bool:
    return role in _REVIEWERS


def can_comment(role: Role) -> bool:
    return role in _ALL_ROLES


def can_suggest_merge(role: Role) -> bool:
    return role in _LEADS_AND_ABOVE


def can_edit_proposal(role: Role, is_creator: bool, status: CodeStatus) -> bool:
    """Admins edit anything, managers edit live codes, creators edit their pending drafts."""

    if role == Role.ADMIN:
        return True
    if role == Role.MANAGER:
        return status in (CodeStatus.PENDING, CodeStatus.APPROVED)
    return is_creator and status == CodeStatus.PENDING


def can_delete_proposal(role: Role, is_creator: bool, status: CodeStatus) -> bool:
    return can_edit_proposal(role, is_creator, status)


def role_level(role: Role) -> int:
    return _ROLE_LEVELS[role]


def can_manage_role(actor_role: Role, target_role: Role) -> bool:
    """Admins manage every role; everyone else only strictly lower roles."""

    if actor_role == Role.ADMIN:
        return True
    return role_level(actor_role) > role_level(target_role)


def require_active(principal: Principal) -> None:
    if not principal.is_active:
        raise AuthorizationError(f"Principal {principal.id} is deactivated")


__all__ = [
    "AuthorizationError",
    "Principal",
    "can_view_code",
    "can_create_proposal",
    "can_edit_pending_proposal",
    "can_approve_reject",
    "can_merge_code",
    "can_deprecate_code",
    "can_edit_approved_code",
    "can_manage_users",
    "can_view_audit_logs",
    "can_view_all_sites",
    "can_comment",
    "can_suggest_merge",
    "can_edit_proposal",
    "can_delete_proposal",
    "role_level",
    "can_manage_role",
    "require_active",
]
