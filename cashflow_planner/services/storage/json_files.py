"""
JSON File Storage Implementation

DESIGN DECISION: One JSON document per profile, named after the profile id.
Users can read and edit their profile with any text editor, and the Pydantic
models do the translation in both directions, so a malformed file fails
loudly instead of producing a half-filled profile.

TRADEOFFS:
- No locking (single-user, personal use)
- Listing reads every file (we only ever hold a handful of profiles)
"""

import re
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from cashflow_planner.models.finance import UserProfile
from cashflow_planner.services.storage.interface import (
    ProfileStorageInterface,
    StorageError,
)


SAFE_ID = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileProfileStorage(ProfileStorageInterface):
    """Profiles stored as <directory>/<profile_id>.json."""

    def __init__(self, directory: Path):
        self._directory = Path(directory)
        self._directory.mkdir(parents=True, exist_ok=True)

    def _path_for(self, profile_id: str) -> Path:
        if not SAFE_ID.match(profile_id) or profile_id.startswith("."):
            raise StorageError(f"Profile id cannot be used as a file name: {profile_id!r}")
        return self._directory / f"{profile_id}.json"

    def _read(self, path: Path) -> UserProfile:
        try:
            return UserProfile.model_validate_json(path.read_text(encoding="utf-8"))
        except ValidationError as e:
            raise StorageError(f"Malformed profile document {path.name}: {e}")
        except OSError as e:
            raise StorageError(f"Failed to read profile {path.name}: {e}")

    async def save_profile(self, profile: UserProfile) -> bool:
        path = self._path_for(profile.id)
        try:
            path.write_text(profile.model_dump_json(indent=2), encoding="utf-8")
            return True
        except OSError as e:
            raise StorageError(f"Failed to save profile: {e}")

    async def get_profile(self, profile_id: str) -> Optional[UserProfile]:
        path = self._path_for(profile_id)
        if not path.exists():
            return None
        return self._read(path)

    async def delete_profile(self, profile_id: str) -> bool:
        path = self._path_for(profile_id)
        if not path.exists():
            return False
        try:
            path.unlink()
            return True
        except OSError as e:
            raise StorageError(f"Failed to delete profile: {e}")

    async def list_profiles(self, limit: int = 100) -> list[UserProfile]:
        paths = sorted(self._directory.glob("*.json"))[:limit]
        return [self._read(path) for path in paths]
