"""
Audit Models for the Cash-Flow Planner

Every forecast request leaves a trail: which profile was loaded, whether it
validated, what the forecast concluded and which days fell short.

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Profile handling
    PROFILE_LOADED = "profile_loaded"
    PROFILE_NOT_FOUND = "profile_not_found"
    PROFILE_VALIDATION_PASSED = "profile_validation_passed"
    PROFILE_VALIDATION_FAILED = "profile_validation_failed"

    # Forecasting
    FORECAST_REQUESTED = "forecast_requested"
    FORECAST_COMPLETED = "forecast_completed"
    SHORTFALL_DETECTED = "shortfall_detected"

    # Failures
    CONFIGURATION_ERROR = "configuration_error"
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'profile', 'forecast')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate the events of one forecast request"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    # Error information (if applicable)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.profile_loaded(profile_id, correlation_id)
        event = AuditEventBuilder.forecast_completed(...)
    """

    @staticmethod
    def profile_loaded(
        profile_id: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_LOADED,
            entity_type="profile",
            entity_id=profile_id,
            correlation_id=correlation_id,
            description=f"Profile loaded: {profile_id}",
        )

    @staticmethod
    def profile_not_found(
        profile_id: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_NOT_FOUND,
            severity=AuditSeverity.WARNING,
            entity_type="profile",
            entity_id=profile_id,
            correlation_id=correlation_id,
            description=f"Profile not found: {profile_id}",
        )

    @staticmethod
    def validation_passed(
        profile_id: str,
        warning_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_VALIDATION_PASSED,
            entity_type="profile",
            entity_id=profile_id,
            correlation_id=correlation_id,
            description=f"Profile validated with {warning_count} warnings",
            details={"warning_count": warning_count},
        )

    @staticmethod
    def validation_failed(
        profile_id: str,
        issues: list[dict],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="profile",
            entity_id=profile_id,
            correlation_id=correlation_id,
            description=f"Profile validation failed with {len(issues)} issues",
            details={"issues": issues},
        )

    @staticmethod
    def forecast_requested(
        profile_id: str,
        month: date,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FORECAST_REQUESTED,
            entity_type="profile",
            entity_id=profile_id,
            correlation_id=correlation_id,
            description=f"Forecast requested for {month:%B %Y}",
            details={"month": month.isoformat()},
        )

    @staticmethod
    def forecast_completed(
        profile_id: str,
        month: date,
        closing_balance: str,
        shortfall_days: int,
        correlation_id: UUID
    ) -> AuditEvent:
        severity = AuditSeverity.WARNING if shortfall_days else AuditSeverity.INFO
        return AuditEvent(
            event_type=AuditEventType.FORECAST_COMPLETED,
            severity=severity,
            entity_type="forecast",
            entity_id=profile_id,
            correlation_id=correlation_id,
            description=(
                f"Forecast for {month:%B %Y} closed at {closing_balance} "
                f"with {shortfall_days} shortfall days"
            ),
            details={
                "month": month.isoformat(),
                "closing_balance": closing_balance,
                "shortfall_days": shortfall_days,
            },
        )

    @staticmethod
    def shortfall_detected(
        profile_id: str,
        day: date,
        alerts: list[str],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SHORTFALL_DETECTED,
            severity=AuditSeverity.WARNING,
            entity_type="forecast",
            entity_id=profile_id,
            correlation_id=correlation_id,
            description=f"{len(alerts)} expenses cannot be covered on {day.isoformat()}",
            details={
                "date": day.isoformat(),
                "alerts": alerts,
            },
        )

    @staticmethod
    def configuration_error(
        profile_id: str,
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CONFIGURATION_ERROR,
            severity=AuditSeverity.ERROR,
            entity_type="profile",
            entity_id=profile_id,
            correlation_id=correlation_id,
            description="Profile configuration rejected by the forecast engine",
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
