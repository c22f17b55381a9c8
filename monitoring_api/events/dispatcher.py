"""
Telemetry Dispatcher
====================

Delivers a request's telemetry batch to the event sink in the background.
Delivery is best-effort: failures are logged and never reach the caller.
"""

import asyncio
from typing import Optional, Set

from ..core.settings import get_settings
from ..utils.logging import setup_api_logging as setup_logging
from .base import EventSink
from .schemas import TelemetryBatch, TelemetryEvent, TelemetryRecord

logger = setup_logging(
    "monitoring_api.events.dispatcher", log_level=get_settings().LOG_LEVEL
)


class TelemetryDispatcher:
    """Fire-and-forget delivery of telemetry batches"""

    def __init__(self, sink: EventSink, timeout: Optional[float] = 5.0):
        self.sink = sink
        self.timeout = timeout
        self._pending: Set[asyncio.Task[None]] = set()

    def dispatch(self, batch: TelemetryBatch) -> Optional[asyncio.Task[None]]:
        """Schedule delivery of the batch and return without waiting"""
        if not batch.records:
            return None

        task = asyncio.get_running_loop().create_task(self._deliver(batch))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _deliver(self, batch: TelemetryBatch) -> None:
        for record in list(batch.records):
            try:
                await asyncio.wait_for(
                    self._send(record, batch.correlation_id), timeout=self.timeout
                )
            except asyncio.TimeoutError:
                logger.warning(
                    "Telemetry delivery timed out",
                    extra={
                        "record_type": type(record).__name__,
                        "timeout_seconds": self.timeout,
                        "correlation_id": batch.correlation_id,
                    },
                )
            except Exception as e:
                logger.warning(
                    f"Telemetry delivery failed: {e}",
                    extra={
                        "record_type": type(record).__name__,
                        "error_type": type(e).__name__,
                        "correlation_id": batch.correlation_id,
                    },
                )

    async def _send(self, record: TelemetryRecord, correlation_id: Optional[str]) -> None:
        if isinstance(record, TelemetryEvent):
            await self.sink.track_event(record, correlation_id=correlation_id)
        else:
            await self.sink.track_exception(record, correlation_id=correlation_id)

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every scheduled delivery to finish"""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
