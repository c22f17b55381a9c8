"""
Telemetry Schemas
=================

Imports all schemas from telemetry_schemas.py for clean module structure.
"""

from .telemetry_schemas import (
    # Constants
    PRODUCT_CREATED,
    PRODUCT_VIEWED,
    PRODUCTS_REQUESTED,
    # Records
    ExceptionReport,
    TelemetryBatch,
    TelemetryEvent,
    TelemetryRecord,
)

__all__ = [
    "ExceptionReport",
    "TelemetryBatch",
    "TelemetryEvent",
    "TelemetryRecord",
    "PRODUCTS_REQUESTED",
    "PRODUCT_VIEWED",
    "PRODUCT_CREATED",
]
