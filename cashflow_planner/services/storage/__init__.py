"""
Storage Services Package

Provides abstract interfaces and concrete implementations for profile and
audit storage. The forecast engine itself never touches storage.
"""

from cashflow_planner.services.storage.interface import (
    AuditStorageInterface,
    NotFoundError,
    ProfileStorageInterface,
    StorageError,
)
from cashflow_planner.services.storage.json_files import JsonFileProfileStorage
from cashflow_planner.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryProfileStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "ProfileStorageInterface",
    # Exceptions
    "NotFoundError",
    "StorageError",
    # Implementations
    "InMemoryAuditStorage",
    "InMemoryProfileStorage",
    "JsonFileProfileStorage",
]
