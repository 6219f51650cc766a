"""
Audit Logger

DESIGN DECISION: Every forecast request is logged.
This provides:
1. Traceability from a stored profile to the forecast shown to the user
2. A record of which days fell short, and when that was predicted
3. Debugging capability when a profile is rejected

The audit logger:
- Is async to not block main flow
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
"""

import logging
from datetime import date
from typing import Optional
from uuid import UUID, uuid4

import structlog

from cashflow_planner.config import get_settings
from cashflow_planner.models.audit import AuditEvent, AuditEventBuilder
from cashflow_planner.services.storage import AuditStorageInterface


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure structlog for local JSON logging.

    Safe to call more than once; the last call wins.
    """
    level = (level or get_settings().app.log_level).strip().upper()
    numeric_level = getattr(logging, level, None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    logging.basicConfig(format="%(message)s", level=numeric_level)
    logging.getLogger().setLevel(numeric_level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence), when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("cashflow_planner.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_profile_loaded(self, profile_id: str, correlation_id: UUID) -> None:
        await self.log(AuditEventBuilder.profile_loaded(profile_id, correlation_id))

    async def log_profile_not_found(self, profile_id: str, correlation_id: UUID) -> None:
        await self.log(AuditEventBuilder.profile_not_found(profile_id, correlation_id))

    async def log_validation_passed(
        self,
        profile_id: str,
        warning_count: int,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.validation_passed(
            profile_id=profile_id,
            warning_count=warning_count,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_validation_failed(
        self,
        profile_id: str,
        issues: list[dict],
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.validation_failed(
            profile_id=profile_id,
            issues=issues,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_forecast_requested(
        self,
        profile_id: str,
        month: date,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.forecast_requested(
            profile_id=profile_id,
            month=month,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_forecast_completed(
        self,
        profile_id: str,
        month: date,
        closing_balance: str,
        shortfall_days: int,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.forecast_completed(
            profile_id=profile_id,
            month=month,
            closing_balance=closing_balance,
            shortfall_days=shortfall_days,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_shortfall(
        self,
        profile_id: str,
        day: date,
        alerts: list[str],
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.shortfall_detected(
            profile_id=profile_id,
            day=day,
            alerts=alerts,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_configuration_error(
        self,
        profile_id: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.configuration_error(
            profile_id=profile_id,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a forecast request and pass it through all
    subsequent operations.
    """
    return uuid4()
