import asyncio
import json
from typing import Optional

from aiokafka import AIOKafkaProducer  # type: ignore
from aiokafka.errors import KafkaConnectionError, KafkaError  # type: ignore

from ...core.settings import get_settings
from ...utils.logging import setup_api_logging as setup_logging
from ..schemas import ExceptionReport, TelemetryEvent
from . import BaseEvent, EventSink, envelope_for_event, envelope_for_exception

logger = setup_logging("monitoring_api.events.kafka", log_level=get_settings().LOG_LEVEL)


class KafkaEventSink(EventSink):
    """
    Telemetry sink publishing envelopes to a Kafka topic, with connection
    retry logic and graceful degradation to structured logs.
    """

    def __init__(
        self,
        bootstrap_servers: str,
        client_id: str,
        topic: str,
        source_service: str = "monitoring-lab-api",
        max_retries: int = 3,
        retry_delay: float = 2.0,
        enable_graceful_degradation: bool = True,
    ):
        self.bootstrap_servers = bootstrap_servers
        self.client_id = client_id
        self.topic = topic
        self.source_service = source_service
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.enable_graceful_degradation = enable_graceful_degradation
        self.producer: Optional[AIOKafkaProducer] = None
        self.is_connected = False
        self._connection_lock = asyncio.Lock()

    async def start(self, timeout: float = 30.0) -> None:
        """Start Kafka producer with retry logic"""
        async with self._connection_lock:
            if self.producer and self.is_connected:
                return

            # Retry connection with exponential backoff
            for attempt in range(self.max_retries):
                self.producer = AIOKafkaProducer(
                    bootstrap_servers=self.bootstrap_servers,
                    client_id=self.client_id,
                    value_serializer=lambda x: json.dumps(x, default=str).encode("utf-8"),
                    key_serializer=lambda x: x.encode("utf-8") if x else None,
                    retry_backoff_ms=1000,
                    request_timeout_ms=30000,
                )
                try:
                    logger.info(
                        "Attempting Kafka connection",
                        extra={
                            "attempt": attempt + 1,
                            "max_retries": self.max_retries,
                            "operation": "kafka_connect",
                        },
                    )

                    await asyncio.wait_for(self.producer.start(), timeout=timeout)

                    self.is_connected = True
                    logger.info("Successfully connected to Kafka")
                    return

                except (KafkaConnectionError, asyncio.TimeoutError) as e:
                    await self._discard_producer()
                    delay = self.retry_delay * (2**attempt)
                    logger.warning(
                        f"Kafka connection attempt {attempt + 1} failed: {e}",
                        extra={"retry_in_seconds": delay, "operation": "kafka_connect"},
                    )
                    if attempt < self.max_retries - 1:
                        await asyncio.sleep(delay)

            logger.error(
                f"Failed to connect to Kafka after {self.max_retries} attempts. "
                "Running in degraded mode (telemetry will be logged but not published)"
            )
            if not self.enable_graceful_degradation:
                raise KafkaConnectionError("Kafka producer not connected")

    async def _discard_producer(self) -> None:
        if self.producer is not None:
            try:
                await self.producer.stop()
            except KafkaError as e:
                logger.debug("Error discarding Kafka producer", extra={"error": str(e)})
        self.producer = None
        self.is_connected = False

    async def stop(self) -> None:
        """Stop Kafka producer"""
        async with self._connection_lock:
            if self.producer:
                try:
                    await self.producer.stop()
                    logger.info("Kafka producer stopped")
                except KafkaError as e:
                    logger.warning(
                        "Error stopping Kafka producer",
                        extra={"error": str(e), "operation": "stop_producer"},
                    )
                finally:
                    self.producer = None
                    self.is_connected = False

    async def health_check(self) -> bool:
        return self.is_connected

    async def track_event(
        self, event: TelemetryEvent, correlation_id: Optional[str] = None
    ) -> None:
        await self._publish(
            envelope_for_event(event, self.source_service, correlation_id)
        )

    async def track_exception(
        self, report: ExceptionReport, correlation_id: Optional[str] = None
    ) -> None:
        await self._publish(
            envelope_for_exception(report, self.source_service, correlation_id)
        )

    async def _publish(self, event: BaseEvent) -> None:
        """Publish envelope with fallback handling"""
        if not self.is_connected or not self.producer:
            if self.enable_graceful_degradation:
                logger.warning(
                    f"Kafka not available, logging telemetry instead: {event.event_type}",
                    extra={
                        "event_id": event.event_id,
                        "event_type": event.event_type,
                        "event_data": event.model_dump(mode="json"),
                    },
                )
                return
            raise KafkaConnectionError("Kafka producer not connected")

        try:
            await self.producer.send_and_wait(
                topic=self.topic,
                value=event.model_dump(mode="json"),
                key=event.correlation_id,
            )
            logger.debug(
                "Published telemetry to Kafka topic",
                extra={
                    "event_type": event.event_type,
                    "topic": self.topic,
                    "event_id": event.event_id,
                    "correlation_id": event.correlation_id,
                    "operation": "publish_event",
                },
            )

        except KafkaError as e:
            if not self.enable_graceful_degradation:
                raise
            logger.error(
                f"Failed to publish telemetry {event.event_type}, logging instead: {e}",
                extra={
                    "event_id": event.event_id,
                    "event_type": event.event_type,
                    "event_data": event.model_dump(mode="json"),
                },
            )
