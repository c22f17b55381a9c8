"""
Telemetry events for the Monitoring Lab API.

Sinks:
    - EventSink: abstract target for custom events and exception reports
    - KafkaEventSink: publishes envelopes to a Kafka topic
    - LoggingEventSink: writes telemetry as structured log lines

Side channel:
    - TelemetryBatch: per-request records written by the request handler
    - TelemetryDispatcher: delivers batches in the background
"""

from .base import BaseEvent, EventSink
from .base.logging_sink import LoggingEventSink
from .dispatcher import TelemetryDispatcher
from .schemas import ExceptionReport, TelemetryBatch, TelemetryEvent

__all__ = [
    "BaseEvent",
    "EventSink",
    "LoggingEventSink",
    "TelemetryDispatcher",
    "ExceptionReport",
    "TelemetryBatch",
    "TelemetryEvent",
]
