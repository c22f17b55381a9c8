import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from aiokafka.errors import KafkaConnectionError, KafkaError

from monitoring_api.core.event_management import close_events, create_event_sink, init_events
from monitoring_api.core.settings import get_settings
from monitoring_api.events.base import BaseEvent
from monitoring_api.events.base.kafka_client import KafkaEventSink
from monitoring_api.events.base.logging_sink import LoggingEventSink
from monitoring_api.events.schemas import ExceptionReport, TelemetryEvent

PRODUCER_PATH = "monitoring_api.events.base.kafka_client.AIOKafkaProducer"


class TestBaseEvent:
    def test_each_envelope_gets_its_own_id_and_timestamp(self):
        first = BaseEvent(event_type="telemetry.event")
        second = BaseEvent(event_type="telemetry.event")

        assert first.event_id != second.event_id
        assert first.source_service == "monitoring-lab-api"


class TestKafkaEventSink:
    @pytest.fixture
    def sink(self):
        return KafkaEventSink(
            bootstrap_servers="localhost:9092",
            client_id="monitoring-lab-api-telemetry",
            topic="telemetry.events",
            max_retries=2,
            retry_delay=0.0,
        )

    @pytest.mark.asyncio
    async def test_start_and_publish_event(self, sink):
        producer = MagicMock()
        producer.start = AsyncMock()
        producer.send_and_wait = AsyncMock()
        with patch(PRODUCER_PATH, return_value=producer):
            await sink.start(timeout=1.0)

        assert sink.is_connected is True

        event = TelemetryEvent(name="ProductCreated", properties={"productId": "3"})
        await sink.track_event(event, correlation_id="corr-1")

        producer.send_and_wait.assert_awaited_once()
        kwargs = producer.send_and_wait.await_args.kwargs
        assert kwargs["topic"] == "telemetry.events"
        assert kwargs["key"] == "corr-1"
        assert kwargs["value"]["event_type"] == "telemetry.event"
        assert kwargs["value"]["data"]["name"] == "ProductCreated"
        assert kwargs["value"]["data"]["properties"] == {"productId": "3"}

    @pytest.mark.asyncio
    async def test_publish_exception_report(self, sink):
        producer = MagicMock()
        producer.start = AsyncMock()
        producer.send_and_wait = AsyncMock()
        with patch(PRODUCER_PATH, return_value=producer):
            await sink.start(timeout=1.0)

        report = ExceptionReport(exception_type="ProductNotFoundError", message="Product not found: 9")
        await sink.track_exception(report)

        value = producer.send_and_wait.await_args.kwargs["value"]
        assert value["event_type"] == "telemetry.exception"
        assert value["data"]["message"] == "Product not found: 9"

    @pytest.mark.asyncio
    async def test_start_gives_up_after_retries_in_degraded_mode(self, sink):
        producer = MagicMock()
        producer.start = AsyncMock(side_effect=KafkaConnectionError("refused"))
        producer.stop = AsyncMock()
        with patch(PRODUCER_PATH, return_value=producer):
            await sink.start(timeout=1.0)

        assert producer.start.await_count == 2
        assert sink.is_connected is False
        assert sink.producer is None

    @pytest.mark.asyncio
    async def test_start_raises_without_graceful_degradation(self):
        sink = KafkaEventSink(
            bootstrap_servers="localhost:9092",
            client_id="client",
            topic="telemetry.events",
            max_retries=1,
            retry_delay=0.0,
            enable_graceful_degradation=False,
        )
        producer = MagicMock()
        producer.start = AsyncMock(side_effect=KafkaConnectionError("refused"))
        producer.stop = AsyncMock()
        with patch(PRODUCER_PATH, return_value=producer):
            with pytest.raises(KafkaConnectionError):
                await sink.start(timeout=1.0)

    @pytest.mark.asyncio
    async def test_disconnected_sink_logs_instead_of_publishing(self, sink, caplog):
        with caplog.at_level(logging.WARNING):
            await sink.track_event(TelemetryEvent(name="ProductViewed"))

        assert "Kafka not available" in caplog.text

    @pytest.mark.asyncio
    async def test_send_failure_is_logged_in_degraded_mode(self, sink, caplog):
        producer = MagicMock()
        producer.start = AsyncMock()
        producer.send_and_wait = AsyncMock(side_effect=KafkaError("broker gone"))
        with patch(PRODUCER_PATH, return_value=producer):
            await sink.start(timeout=1.0)

        with caplog.at_level(logging.ERROR):
            await sink.track_event(TelemetryEvent(name="ProductViewed"))

        assert "Failed to publish telemetry" in caplog.text

    @pytest.mark.asyncio
    async def test_stop_releases_producer(self, sink):
        producer = MagicMock()
        producer.start = AsyncMock()
        producer.stop = AsyncMock()
        with patch(PRODUCER_PATH, return_value=producer):
            await sink.start(timeout=1.0)

        await sink.stop()

        producer.stop.assert_awaited_once()
        assert sink.producer is None
        assert await sink.health_check() is False


class TestLoggingEventSink:
    @pytest.mark.asyncio
    async def test_event_is_logged(self, caplog):
        sink = LoggingEventSink()
        with caplog.at_level(logging.INFO):
            await sink.track_event(
                TelemetryEvent(name="ProductsRequested", properties={"operation": "getAllProducts"})
            )

        record = next(r for r in caplog.records if r.getMessage() == "Telemetry event: ProductsRequested")
        assert record.properties == {"operation": "getAllProducts"}

    @pytest.mark.asyncio
    async def test_exception_is_logged_as_warning(self, caplog):
        sink = LoggingEventSink()
        with caplog.at_level(logging.WARNING):
            await sink.track_exception(
                ExceptionReport(exception_type="ProductNotFoundError", message="Product not found: 2")
            )

        assert "Telemetry exception: Product not found: 2" in caplog.text


class TestEventManagement:
    def test_log_backend_by_default(self):
        settings = get_settings().model_copy(update={"TELEMETRY_BACKEND": "log"})
        assert isinstance(create_event_sink(settings), LoggingEventSink)

    def test_kafka_backend(self):
        settings = get_settings().model_copy(
            update={"TELEMETRY_BACKEND": "kafka", "KAFKA_TELEMETRY_TOPIC": "lab.telemetry"}
        )
        sink = create_event_sink(settings)

        assert isinstance(sink, KafkaEventSink)
        assert sink.topic == "lab.telemetry"
        assert sink.client_id == "monitoring-lab-api-telemetry"

    @pytest.mark.asyncio
    async def test_init_events_survives_start_failure(self):
        sink = MagicMock()
        sink.start = AsyncMock(side_effect=RuntimeError("no broker"))

        await init_events(sink)

        sink.start.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_events_stops_sink(self):
        sink = MagicMock()
        sink.stop = AsyncMock()

        await close_events(sink)

        sink.stop.assert_awaited_once()
