"""Tests for profile and audit storage backends."""

import asyncio
import pytest
from decimal import Decimal
from uuid import uuid4

from cashflow_planner.models.audit import AuditEventBuilder
from cashflow_planner.sample_data import sample_profile
from cashflow_planner.services.storage import (
    InMemoryAuditStorage,
    InMemoryProfileStorage,
    JsonFileProfileStorage,
    StorageError,
)


class TestInMemoryProfileStorage:
    """Tests for the dict-backed profile store."""

    def test_save_and_get(self):
        """Test a saved profile can be read back."""
        storage = InMemoryProfileStorage()
        profile = sample_profile()

        assert asyncio.run(storage.save_profile(profile)) is True
        loaded = asyncio.run(storage.get_profile("user-1"))

        assert loaded == profile
        assert loaded is not profile

    def test_copies_isolate_callers(self):
        """Test changes to a loaded profile do not reach the store."""
        storage = InMemoryProfileStorage([sample_profile()])

        loaded = asyncio.run(storage.get_profile("user-1"))
        loaded.pots[0].current_balance = Decimal("999")

        reloaded = asyncio.run(storage.get_profile("user-1"))
        assert reloaded.pots[0].current_balance == Decimal("0")

    def test_missing_profile(self):
        """Test unknown ids give None and deletes report False."""
        storage = InMemoryProfileStorage()
        assert asyncio.run(storage.get_profile("nobody")) is None
        assert asyncio.run(storage.delete_profile("nobody")) is False

    def test_list_profiles_sorted_and_limited(self):
        """Test listing orders by id and honours the limit."""
        profiles = []
        for profile_id in ["c", "a", "b"]:
            profile = sample_profile()
            profile.id = profile_id
            profiles.append(profile)
        storage = InMemoryProfileStorage(profiles)

        listed = asyncio.run(storage.list_profiles(limit=2))
        assert [p.id for p in listed] == ["a", "b"]


class TestJsonFileProfileStorage:
    """Tests for the JSON document store."""

    def test_round_trip(self, tmp_path):
        """Test a profile survives being written to disk."""
        storage = JsonFileProfileStorage(tmp_path / "profiles")
        profile = sample_profile()

        asyncio.run(storage.save_profile(profile))

        assert (tmp_path / "profiles" / "user-1.json").exists()
        loaded = asyncio.run(storage.get_profile("user-1"))
        assert loaded.model_dump() == profile.model_dump()

    def test_missing_file(self, tmp_path):
        """Test a missing document reads as None."""
        storage = JsonFileProfileStorage(tmp_path)
        assert asyncio.run(storage.get_profile("ghost")) is None
        assert asyncio.run(storage.delete_profile("ghost")) is False

    def test_delete(self, tmp_path):
        """Test deleting removes the document."""
        storage = JsonFileProfileStorage(tmp_path)
        asyncio.run(storage.save_profile(sample_profile()))

        assert asyncio.run(storage.delete_profile("user-1")) is True
        assert not (tmp_path / "user-1.json").exists()

    @pytest.mark.parametrize("profile_id", ["../escape", ".hidden", "a/b", ""])
    def test_unsafe_ids_rejected(self, tmp_path, profile_id):
        """Test ids that are not plain file names are refused."""
        storage = JsonFileProfileStorage(tmp_path)
        with pytest.raises(StorageError):
            asyncio.run(storage.get_profile(profile_id))

    def test_malformed_document(self, tmp_path):
        """Test a broken document fails loudly."""
        (tmp_path / "broken.json").write_text('{"income_type": "hourly"}', encoding="utf-8")
        storage = JsonFileProfileStorage(tmp_path)

        with pytest.raises(StorageError, match="Malformed profile document"):
            asyncio.run(storage.get_profile("broken"))

    def test_list_profiles(self, tmp_path):
        """Test listing reads every document."""
        storage = JsonFileProfileStorage(tmp_path)
        for profile_id in ["b", "a"]:
            profile = sample_profile()
            profile.id = profile_id
            asyncio.run(storage.save_profile(profile))

        listed = asyncio.run(storage.list_profiles())
        assert [p.id for p in listed] == ["a", "b"]


class TestInMemoryAuditStorage:
    """Tests for the audit event list."""

    def test_queries(self):
        """Test lookups by correlation id, entity and recency."""
        storage = InMemoryAuditStorage()
        first_id, second_id = uuid4(), uuid4()

        first = AuditEventBuilder.profile_loaded("user-1", first_id)
        second = AuditEventBuilder.profile_not_found("user-2", second_id)
        asyncio.run(storage.append_event(first))
        asyncio.run(storage.append_event(second))

        assert asyncio.run(storage.get_events_by_correlation_id(first_id)) == [first]
        assert asyncio.run(storage.get_events_by_entity("profile", "user-2")) == [second]
        assert asyncio.run(storage.get_recent_events(limit=1)) == [second]
        assert asyncio.run(storage.get_recent_events()) == [second, first]
