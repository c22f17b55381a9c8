from typing import Optional

from ...core.settings import get_settings
from ...utils.logging import setup_api_logging as setup_logging
from ..schemas import ExceptionReport, TelemetryEvent
from . import EventSink

logger = setup_logging("monitoring_api.telemetry", log_level=get_settings().LOG_LEVEL)


class LoggingEventSink(EventSink):
    """Writes telemetry as structured log lines"""

    async def track_event(
        self, event: TelemetryEvent, correlation_id: Optional[str] = None
    ) -> None:
        logger.info(
            f"Telemetry event: {event.name}",
            extra={
                "telemetry_type": "event",
                "event_name": event.name,
                "properties": event.properties,
                "metrics": event.metrics,
                "correlation_id": correlation_id,
            },
        )

    async def track_exception(
        self, report: ExceptionReport, correlation_id: Optional[str] = None
    ) -> None:
        logger.warning(
            f"Telemetry exception: {report.message}",
            extra={
                "telemetry_type": "exception",
                "exception_type": report.exception_type,
                "properties": report.properties,
                "correlation_id": correlation_id,
            },
        )
