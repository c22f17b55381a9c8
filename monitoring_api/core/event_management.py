"""
Monitoring Lab API Event Management
Builds and manages the telemetry sink selected by configuration.
"""

from ..events.base import EventSink
from ..events.base.kafka_client import KafkaEventSink
from ..events.base.logging_sink import LoggingEventSink
from ..utils.logging import setup_api_logging as setup_logging
from .settings import ApiSettings, get_settings

logger = setup_logging("monitoring_api.event_management", log_level=get_settings().LOG_LEVEL)


def create_event_sink(settings: ApiSettings) -> EventSink:
    """Select the telemetry sink for the configured backend"""
    if settings.TELEMETRY_BACKEND == "kafka":
        logger.info(
            "Using Kafka telemetry sink",
            extra={
                "operation": "create_event_sink",
                "kafka_servers": settings.KAFKA_BOOTSTRAP_SERVERS,
                "topic": settings.KAFKA_TELEMETRY_TOPIC,
            },
        )
        return KafkaEventSink(
            bootstrap_servers=settings.KAFKA_BOOTSTRAP_SERVERS,
            client_id=settings.KAFKA_CLIENT_ID or f"{settings.SERVICE_NAME}-telemetry",
            topic=settings.KAFKA_TELEMETRY_TOPIC,
            source_service=settings.SERVICE_NAME,
            max_retries=settings.KAFKA_MAX_RETRIES,
            retry_delay=settings.KAFKA_RETRY_DELAY,
        )

    logger.info(
        "Using logging telemetry sink", extra={"operation": "create_event_sink"}
    )
    return LoggingEventSink()


async def init_events(sink: EventSink) -> None:
    """Start the telemetry sink, continuing in degraded mode on failure"""
    try:
        await sink.start()
        logger.info(
            "Telemetry sink started",
            extra={"operation": "init_events", "sink": type(sink).__name__},
        )
    except Exception as e:
        logger.warning(
            "Telemetry sink initialization failed - operating in degraded mode",
            extra={
                "operation": "init_events_failed",
                "error": str(e),
                "degraded_mode": True,
            },
        )


async def close_events(sink: EventSink) -> None:
    """Stop the telemetry sink"""
    try:
        await sink.stop()
        logger.info("Telemetry sink closed", extra={"operation": "close_events"})
    except Exception as e:
        logger.error(
            "Error closing telemetry sink",
            extra={"operation": "close_events_error", "error": str(e)},
        )
