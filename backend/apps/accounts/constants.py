"""
Membership role constants.

Roles are local to this system; the Identity Directory only records that
a user belongs to an organization.
"""

from apps.accounts.models import Member

VALID_ROLES = frozenset(Member.Role.values)

MANAGER_ROLES = frozenset({Member.Role.OWNER, Member.Role.ADMIN})
"""Roles allowed to invite members and cancel invitations."""

DEFAULT_RECONCILED_ROLE = Member.Role.MEMBER
"""Role given to memberships discovered in the directory during reconciliation."""
