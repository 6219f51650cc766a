"""
Abstract Storage Interface

DESIGN DECISION: The forecast engine never talks to storage. Whatever holds
profiles hands the engine a UserProfile snapshot, and whatever keeps the
audit trail receives AuditEvents. These interfaces are that seam, so a real
database can replace the bundled implementations without touching the
engine.

Implementations must hand out copies: a profile returned by get_profile must
not share Pot instances with the stored one.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from cashflow_planner.models.audit import AuditEvent
from cashflow_planner.models.finance import UserProfile


class ProfileStorageInterface(ABC):
    """
    Abstract interface for profile storage operations.
    """

    @abstractmethod
    async def save_profile(self, profile: UserProfile) -> bool:
        """
        Save (insert or replace) a profile.

        Returns:
            True if saved successfully

        Raises:
            StorageError: If save fails
        """
        pass

    @abstractmethod
    async def get_profile(self, profile_id: str) -> Optional[UserProfile]:
        """
        Retrieve a profile by its ID.

        Returns:
            An independent copy of the profile if found, None otherwise
        """
        pass

    @abstractmethod
    async def delete_profile(self, profile_id: str) -> bool:
        """
        Delete a profile by ID.

        Returns:
            True if deleted, False if it did not exist
        """
        pass

    @abstractmethod
    async def list_profiles(self, limit: int = 100) -> list[UserProfile]:
        """
        List stored profiles ordered by ID.
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one forecast request).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific entity.

        Returns:
            List of events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass
