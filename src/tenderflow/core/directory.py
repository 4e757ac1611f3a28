"""
Organization membership lookups.

The services never resolve identity themselves; they are handed a
directory that answers two questions: which organization a user is
responsible for, and who is responsible for an organization.
"""

from __future__ import annotations

from typing import Mapping, Protocol, Sequence


class MemberDirectory(Protocol):
    """Resolver for organization membership."""

    def organization_of(self, user_id: str) -> str | None:
        """Organization the user is responsible for, or None."""
        ...

    def members_of(self, organization_id: str) -> list[str]:
        """Ids of every user responsible for the organization."""
        ...


class StaticDirectory:
    """Directory backed by an in-memory organization -> members mapping."""

    def __init__(self, organizations: Mapping[str, Sequence[str]] | None = None):
        self._members: dict[str, list[str]] = {
            org_id: list(members) for org_id, members in (organizations or {}).items()
        }
        self._organization_by_user: dict[str, str] = {
            user_id: org_id
            for org_id, members in self._members.items()
            for user_id in members
        }

    def organization_of(self, user_id: str) -> str | None:
        return self._organization_by_user.get(user_id)

    def members_of(self, organization_id: str) -> list[str]:
        return list(self._members.get(organization_id, []))

    def __repr__(self) -> str:
        return f"<StaticDirectory(organizations={len(self._members)})>"
