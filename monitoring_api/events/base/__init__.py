"""
Event sink base classes and the envelope used on the wire.
"""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..schemas import ExceptionReport, TelemetryEvent


class BaseEvent(BaseModel):
    """Envelope for telemetry leaving the service"""

    event_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    event_type: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version: str = "1.0"
    source_service: str = "monitoring-lab-api"
    correlation_id: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class EventSink(ABC):
    """Abstract base class for telemetry sinks"""

    async def start(self) -> None:
        """Acquire connections; no-op by default"""

    async def stop(self) -> None:
        """Release connections; no-op by default"""

    async def health_check(self) -> bool:
        return True

    @abstractmethod
    async def track_event(
        self, event: TelemetryEvent, correlation_id: Optional[str] = None
    ) -> None:
        """Deliver a named custom event"""

    @abstractmethod
    async def track_exception(
        self, report: ExceptionReport, correlation_id: Optional[str] = None
    ) -> None:
        """Deliver an exception report"""


def envelope_for_event(
    event: TelemetryEvent, source_service: str, correlation_id: Optional[str] = None
) -> BaseEvent:
    return BaseEvent(
        event_type="telemetry.event",
        source_service=source_service,
        correlation_id=correlation_id,
        data=event.model_dump(),
    )


def envelope_for_exception(
    report: ExceptionReport, source_service: str, correlation_id: Optional[str] = None
) -> BaseEvent:
    return BaseEvent(
        event_type="telemetry.exception",
        source_service=source_service,
        correlation_id=correlation_id,
        data=report.model_dump(),
    )
