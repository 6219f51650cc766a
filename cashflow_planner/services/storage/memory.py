"""
In-memory storage backends.

Used by default when no profile directory is configured, and by tests.
"""

from typing import Optional
from uuid import UUID

from cashflow_planner.models.audit import AuditEvent
from cashflow_planner.models.finance import UserProfile
from cashflow_planner.services.storage.interface import (
    AuditStorageInterface,
    ProfileStorageInterface,
)


class InMemoryProfileStorage(ProfileStorageInterface):
    """Profiles held in a dict, copied on the way in and out."""

    def __init__(self, profiles: Optional[list[UserProfile]] = None):
        self._profiles: dict[str, UserProfile] = {}
        for profile in profiles or []:
            self._profiles[profile.id] = profile.model_copy(deep=True)

    async def save_profile(self, profile: UserProfile) -> bool:
        self._profiles[profile.id] = profile.model_copy(deep=True)
        return True

    async def get_profile(self, profile_id: str) -> Optional[UserProfile]:
        profile = self._profiles.get(profile_id)
        return profile.model_copy(deep=True) if profile else None

    async def delete_profile(self, profile_id: str) -> bool:
        return self._profiles.pop(profile_id, None) is not None

    async def list_profiles(self, limit: int = 100) -> list[UserProfile]:
        ids = sorted(self._profiles)[:limit]
        return [self._profiles[profile_id].model_copy(deep=True) for profile_id in ids]


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        return [
            e for e in self._events
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
