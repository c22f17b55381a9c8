"""
Telemetry Event Schemas
=======================

Records the request handler emits on the telemetry side channel.
"""

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

# ==============================================
# EVENT NAME CONSTANTS
# ==============================================

PRODUCTS_REQUESTED = "ProductsRequested"
PRODUCT_VIEWED = "ProductViewed"
PRODUCT_CREATED = "ProductCreated"


class TelemetryEvent(BaseModel):
    """A named custom event with a string-keyed property bag"""

    name: str
    properties: Dict[str, str] = Field(default_factory=dict)
    metrics: Optional[Dict[str, float]] = None


class ExceptionReport(BaseModel):
    """An exception report destined for the event sink"""

    exception_type: str
    message: str
    properties: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_exception(
        cls, error: BaseException, properties: Optional[Dict[str, str]] = None
    ) -> "ExceptionReport":
        return cls(
            exception_type=type(error).__name__,
            message=str(error),
            properties=properties or {},
        )


TelemetryRecord = Union[TelemetryEvent, ExceptionReport]


class TelemetryBatch:
    """
    Ordered records produced while handling one request.

    The service writes into the batch; delivery happens elsewhere once the
    request is finished.
    """

    def __init__(self, correlation_id: Optional[str] = None):
        self.correlation_id = correlation_id
        self.records: List[TelemetryRecord] = []

    def track_event(
        self,
        name: str,
        properties: Optional[Dict[str, str]] = None,
        metrics: Optional[Dict[str, float]] = None,
    ) -> None:
        self.records.append(
            TelemetryEvent(name=name, properties=properties or {}, metrics=metrics)
        )

    def track_exception(
        self, error: BaseException, properties: Optional[Dict[str, str]] = None
    ) -> None:
        self.records.append(ExceptionReport.from_exception(error, properties))

    @property
    def events(self) -> List[TelemetryEvent]:
        return [r for r in self.records if isinstance(r, TelemetryEvent)]

    @property
    def exceptions(self) -> List[ExceptionReport]:
        return [r for r in self.records if isinstance(r, ExceptionReport)]

    def __len__(self) -> int:
        return len(self.records)
