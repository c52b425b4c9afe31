"""Governance rules: who may propose, review and view RCA codes."""

from .permissions import (
    AuthorizationError,
    Principal,
    can_approve_reject,
    can_comment,
    can_create_proposal,
    can_delete_proposal,
    can_deprecate_code,
    can_edit_approved_code,
    can_edit_pending_proposal,
    can_edit_proposal,
    can_manage_role,
    can_manage_users,
    can_merge_code,
    can_suggest_merge,
    can_view_all_sites,
    can_view_audit_logs,
    can_view_code,
    require_active,
    role_level,
)

__all__ = [
    "AuthorizationError",
    "Principal",
    "can_approve_reject",
    "can_comment",
    "can_create_proposal",
    "can_delete_proposal",
    "can_deprecate_code",
    "can_edit_approved_code",
    "can_edit_pending_proposal",
    "can_edit_proposal",
    "can_manage_role",
    "can_manage_users",
    "can_merge_code",
    "can_suggest_merge",
    "can_view_all_sites",
    "can_view_audit_logs",
    "can_view_code",
    "require_active",
    "role_level",
]
