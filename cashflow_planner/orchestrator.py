"""
Main Orchestrator for the Cash-Flow Planner

This module ties together storage, validation, the forecast engine and the
audit trail:

    profile → validate → forecast month → audit

DESIGN DECISION: The orchestrator enforces the boundaries:
- A profile with structural errors is never forecast
- The engine only ever sees a snapshot, never the stored profile
- Every request is audited under one correlation ID

The forecast itself is synchronous and pure; only storage and auditing
are async.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from cashflow_planner.audit import AuditLogger, configure_logging, create_correlation_id
from cashflow_planner.config import ForecastSettings, get_settings
from cashflow_planner.engine import ForecastConfigurationError, forecast_month
from cashflow_planner.models.finance import UserProfile
from cashflow_planner.models.forecast import MonthForecast, ValidationResult
from cashflow_planner.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    InMemoryProfileStorage,
    JsonFileProfileStorage,
    NotFoundError,
    ProfileStorageInterface,
    StorageError,
)
from cashflow_planner.validation import ProfileValidator


class ForecastFlow:
    """
    Orchestrates a month forecast.

    Flow:
    1. Load → Fetch the profile snapshot (stored profiles only)
    2. Validate → Two-stage profile validation
    3. Forecast → Simulate every day of the month
    4. Audit → Completion plus one event per shortfall day
    """

    def __init__(
        self,
        profile_storage: Optional[ProfileStorageInterface] = None,
        validator: Optional[ProfileValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[ForecastSettings] = None,
    ):
        self._profile_storage = profile_storage
        self._validator = validator or ProfileValidator()
        self._audit_logger = audit_logger
        self._settings = settings

    async def forecast_profile(
        self,
        profile: UserProfile,
        month: date,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[MonthForecast, ValidationResult]:
        """
        Validate and forecast a profile for the month containing `month`.

        Returns:
            (forecast, validation_result)

        Raises:
            ForecastConfigurationError: If the profile has structural errors
        """
        correlation_id = correlation_id or create_correlation_id()

        if self._audit_logger:
            await self._audit_logger.log_forecast_requested(
                profile_id=profile.id,
                month=month,
                correlation_id=correlation_id,
            )

        validation = self._validator.validate(profile, month)

        if validation.has_errors:
            if self._audit_logger:
                await self._audit_logger.log_validation_failed(
                    profile_id=profile.id,
                    issues=[issue.model_dump() for issue in validation.issues],
                    correlation_id=correlation_id,
                )
            raise ForecastConfigurationError(
                self._validator.get_user_friendly_summary(validation)
            )

        if self._audit_logger:
            await self._audit_logger.log_validation_passed(
                profile_id=profile.id,
                warning_count=len(validation.warnings),
                correlation_id=correlation_id,
            )

        try:
            forecast = forecast_month(profile, month, self._settings)
        except ForecastConfigurationError as e:
            if self._audit_logger:
                await self._audit_logger.log_configuration_error(
                    profile_id=profile.id,
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise
        except Exception as e:
            if self._audit_logger:
                await self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    details={"profile_id": profile.id, "month": month.isoformat()},
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            for plan in forecast.shortfall_days:
                await self._audit_logger.log_shortfall(
                    profile_id=profile.id,
                    day=plan.date,
                    alerts=list(plan.shortfall_alerts),
                    correlation_id=correlation_id,
                )
            await self._audit_logger.log_forecast_completed(
                profile_id=profile.id,
                month=forecast.month,
                closing_balance=str(forecast.closing_balance),
                shortfall_days=len(forecast.shortfall_days),
                correlation_id=correlation_id,
            )

        return forecast, validation

    async def forecast_stored_profile(
        self,
        profile_id: str,
        month: date,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[MonthForecast, ValidationResult]:
        """
        Load a profile from storage and forecast it.

        Raises:
            StorageError: If no profile storage is configured
            NotFoundError: If the profile does not exist
            ForecastConfigurationError: If the profile has structural errors
        """
        correlation_id = correlation_id or create_correlation_id()

        if self._profile_storage is None:
            raise StorageError("Profile storage is not configured")

        profile = await self._profile_storage.get_profile(profile_id)

        if profile is None:
            if self._audit_logger:
                await self._audit_logger.log_profile_not_found(profile_id, correlation_id)
            raise NotFoundError(f"Profile not found: {profile_id}")

        if self._audit_logger:
            await self._audit_logger.log_profile_loaded(profile_id, correlation_id)

        return await self.forecast_profile(profile, month, correlation_id)


def create_app_components(
    use_storage: bool = True,
) -> tuple[ForecastFlow, Optional[ProfileStorageInterface], Optional[AuditStorageInterface]]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to attach profile and audit storage.
                    Profiles live in JSON files when `profiles_path` is
                    configured, in memory otherwise.

    Returns:
        (forecast_flow, profile_storage, audit_storage)
    """
    settings = get_settings()
    configure_logging(settings.app.log_level)

    profile_storage = None
    audit_storage = None

    if use_storage:
        profiles_dir = settings.app.profiles_dir
        if profiles_dir is not None:
            profile_storage = JsonFileProfileStorage(profiles_dir)
        else:
            profile_storage = InMemoryProfileStorage()
        audit_storage = InMemoryAuditStorage()

    flow = ForecastFlow(
        profile_storage=profile_storage,
        audit_logger=AuditLogger(audit_storage),
        settings=settings.forecast,
    )

    return flow, profile_storage, audit_storage
