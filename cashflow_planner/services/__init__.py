"""Services package."""

from cashflow_planner.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    InMemoryProfileStorage,
    JsonFileProfileStorage,
    NotFoundError,
    ProfileStorageInterface,
    StorageError,
)

__all__ = [
    "AuditStorageInterface",
    "InMemoryAuditStorage",
    "InMemoryProfileStorage",
    "JsonFileProfileStorage",
    "NotFoundError",
    "ProfileStorageInterface",
    "StorageError",
]
