"""
Flow tests for the Cash-Flow Planner

Runs the orchestrator end to end with in-memory storage, and checks the
settings layer it is built from.
"""

import asyncio
import logging
import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from cashflow_planner.audit import AuditLogger, configure_logging, create_correlation_id
from cashflow_planner.config import (
    AppSettings,
    ForecastSettings,
    get_settings,
    validate_all_settings,
)
from cashflow_planner.engine import ForecastConfigurationError, PotReferenceError
from cashflow_planner.models.audit import AuditEventBuilder, AuditEventType, AuditSeverity
from cashflow_planner.models.forecast import ValidationResult
from cashflow_planner.orchestrator import ForecastFlow, create_app_components
from cashflow_planner.sample_data import sample_profile
from cashflow_planner.services.storage import (
    InMemoryAuditStorage,
    InMemoryProfileStorage,
    JsonFileProfileStorage,
    NotFoundError,
    StorageError,
)
from cashflow_planner.validation import ProfileValidator


OCTOBER = date(2025, 10, 1)


class FailingAuditStorage(InMemoryAuditStorage):
    async def append_event(self, event):
        raise StorageError("disk full")


class PermissiveValidator(ProfileValidator):
    def validate(self, profile, month=None):
        return ValidationResult(
            profile_id=profile.id,
            structure_valid=True,
            semantic_valid=True,
            is_valid=True,
        )


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def flow(audit_storage):
    return ForecastFlow(
        profile_storage=InMemoryProfileStorage([sample_profile()]),
        audit_logger=AuditLogger(audit_storage),
        settings=ForecastSettings(),
    )


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestForecastFlow:
    """Tests for ForecastFlow."""

    def test_forecast_profile_audit_trail(self, flow, audit_storage):
        """Test one request produces a complete audit trail."""
        correlation_id = create_correlation_id()

        forecast, validation = asyncio.run(
            flow.forecast_profile(sample_profile(), OCTOBER, correlation_id)
        )

        assert validation.is_valid is True
        assert len(forecast.daily_plans) == 31

        events = asyncio.run(audit_storage.get_events_by_correlation_id(correlation_id))
        types = [event.event_type for event in events]
        shortfalls = len(forecast.shortfall_days)

        assert shortfalls > 0
        assert types[0] == AuditEventType.FORECAST_REQUESTED
        assert types[1] == AuditEventType.PROFILE_VALIDATION_PASSED
        assert types.count(AuditEventType.SHORTFALL_DETECTED) == shortfalls
        assert types[-1] == AuditEventType.FORECAST_COMPLETED
        assert events[-1].details["shortfall_days"] == shortfalls

    def test_structural_errors_block_forecast(self, flow, audit_storage):
        """Test a dangling pot reference is refused with an audit record."""
        profile = sample_profile()
        profile.expenses[1].pot_id = "pot-99"
        correlation_id = uuid4()

        with pytest.raises(ForecastConfigurationError, match="cannot be forecast"):
            asyncio.run(flow.forecast_profile(profile, OCTOBER, correlation_id))

        events = asyncio.run(audit_storage.get_events_by_correlation_id(correlation_id))
        assert [e.event_type for e in events] == [
            AuditEventType.FORECAST_REQUESTED,
            AuditEventType.PROFILE_VALIDATION_FAILED,
        ]

    def test_engine_configuration_error_is_audited(self, audit_storage):
        """Test an engine rejection is recorded before it propagates."""
        flow = ForecastFlow(
            validator=PermissiveValidator(),
            audit_logger=AuditLogger(audit_storage),
            settings=ForecastSettings(),
        )
        profile = sample_profile()
        profile.expenses[0].pot_id = "pot-99"
        correlation_id = uuid4()

        with pytest.raises(PotReferenceError):
            asyncio.run(flow.forecast_profile(profile, OCTOBER, correlation_id))

        events = asyncio.run(audit_storage.get_events_by_correlation_id(correlation_id))
        assert [e.event_type for e in events] == [
            AuditEventType.FORECAST_REQUESTED,
            AuditEventType.PROFILE_VALIDATION_PASSED,
            AuditEventType.CONFIGURATION_ERROR,
        ]
        assert "pot-99" in events[-1].error_message

    def test_unexpected_engine_error_is_audited(self, flow, audit_storage, monkeypatch):
        """Test an unexpected engine failure is recorded as a system error."""
        def broken_forecast(profile, month, settings=None):
            raise RuntimeError("calendar exploded")

        monkeypatch.setattr("cashflow_planner.orchestrator.forecast_month", broken_forecast)
        correlation_id = uuid4()

        with pytest.raises(RuntimeError):
            asyncio.run(flow.forecast_profile(sample_profile(), OCTOBER, correlation_id))

        events = asyncio.run(audit_storage.get_events_by_correlation_id(correlation_id))
        error = events[-1]
        assert error.event_type == AuditEventType.SYSTEM_ERROR
        assert error.severity == AuditSeverity.ERROR
        assert error.error_message == "calendar exploded"
        assert error.details == {"profile_id": "user-1", "month": "2025-10-01"}
        assert AuditEventType.FORECAST_COMPLETED not in [e.event_type for e in events]

    def test_forecast_stored_profile(self, flow, audit_storage):
        """Test forecasting a stored profile logs the load."""
        correlation_id = uuid4()

        forecast, _ = asyncio.run(
            flow.forecast_stored_profile("user-1", OCTOBER, correlation_id)
        )

        assert forecast.month == OCTOBER
        events = asyncio.run(audit_storage.get_events_by_correlation_id(correlation_id))
        assert events[0].event_type == AuditEventType.PROFILE_LOADED

    def test_stored_profile_not_found(self, flow, audit_storage):
        """Test a missing profile raises and is audited."""
        correlation_id = uuid4()

        with pytest.raises(NotFoundError):
            asyncio.run(flow.forecast_stored_profile("ghost", OCTOBER, correlation_id))

        events = asyncio.run(audit_storage.get_events_by_correlation_id(correlation_id))
        assert [e.event_type for e in events] == [AuditEventType.PROFILE_NOT_FOUND]

    def test_no_storage_configured(self):
        """Test stored forecasts need a profile store."""
        flow = ForecastFlow()
        with pytest.raises(StorageError):
            asyncio.run(flow.forecast_stored_profile("user-1", OCTOBER))

    def test_runs_without_audit_logger(self):
        """Test the flow works with no audit logger at all."""
        flow = ForecastFlow(settings=ForecastSettings())
        forecast, _ = asyncio.run(flow.forecast_profile(sample_profile(), OCTOBER))
        assert forecast.closing_balance is not None

    def test_flow_uses_its_settings(self):
        """Test forecast policy comes from the flow's settings."""
        settings = ForecastSettings(next_month_weeks=0)
        flow = ForecastFlow(settings=settings)
        forecast, _ = asyncio.run(flow.forecast_profile(sample_profile(), OCTOBER))
        assert {w.leftover_allocation for w in forecast.weekly_summaries} == {"Buffer Pot"}


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_storage_failure_is_not_raised(self):
        """Test a failing store reports False instead of raising."""
        logger = AuditLogger(FailingAuditStorage())
        event = AuditEventBuilder.profile_loaded("user-1", uuid4())
        assert asyncio.run(logger.log(event)) is False

    def test_local_only(self):
        """Test logging without storage succeeds."""
        logger = AuditLogger()
        event = AuditEventBuilder.profile_loaded("user-1", uuid4())
        assert asyncio.run(logger.log(event)) is True


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_lower_case_level(self):
        """Test level names are accepted in any case."""
        configure_logging("info")
        assert logging.getLogger().level == logging.INFO

        configure_logging(" Debug ")
        assert logging.getLogger().level == logging.DEBUG

    def test_unknown_level(self):
        """Test an unknown level name is rejected."""
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging("chatty")


class TestSettings:
    """Tests for the configuration layer."""

    def test_forecast_defaults(self):
        """Test the default forecast policy."""
        settings = ForecastSettings()
        assert settings.warning_balance_threshold == Decimal("100")
        assert settings.currency_symbol == "£"
        assert settings.next_month_weeks == 2

    def test_forecast_env_override(self, monkeypatch):
        """Test forecast settings read FORECAST_ variables."""
        monkeypatch.setenv("FORECAST_WARNING_BALANCE_THRESHOLD", "250")
        assert ForecastSettings().warning_balance_threshold == Decimal("250")

    def test_log_level_normalized(self, monkeypatch):
        """Test the log level is upper-cased."""
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert AppSettings().log_level == "DEBUG"

    def test_invalid_log_level(self, monkeypatch):
        """Test unknown log levels are rejected."""
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        with pytest.raises(ValueError):
            AppSettings()

    def test_validate_all_settings(self, monkeypatch):
        """Test the startup check reports each settings group."""
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        results = validate_all_settings()
        assert results["forecast"] is True
        assert results["app"] is False
        assert "app_error" in results


class TestAppComponents:
    """Tests for create_app_components."""

    def test_in_memory_by_default(self, monkeypatch):
        """Test in-memory storage is used without a profiles path."""
        monkeypatch.delenv("PROFILES_PATH", raising=False)
        flow, profiles, audit = create_app_components()
        assert isinstance(flow, ForecastFlow)
        assert isinstance(profiles, InMemoryProfileStorage)
        assert isinstance(audit, InMemoryAuditStorage)

    def test_json_profiles(self, monkeypatch, tmp_path):
        """Test a profiles path switches to JSON documents."""
        monkeypatch.setenv("PROFILES_PATH", str(tmp_path))
        flow, profiles, _ = create_app_components()
        assert isinstance(profiles, JsonFileProfileStorage)

        asyncio.run(profiles.save_profile(sample_profile()))
        forecast, _ = asyncio.run(flow.forecast_stored_profile("user-1", OCTOBER))
        assert len(forecast.daily_plans) == 31

    def test_without_storage(self, monkeypatch):
        """Test storage can be left out."""
        monkeypatch.delenv("PROFILES_PATH", raising=False)
        _, profiles, audit = create_app_components(use_storage=False)
        assert profiles is None
        assert audit is None
