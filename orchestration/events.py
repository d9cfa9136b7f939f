"""Orchestration events - Event, EventMetadata."""

from dataclasses import dataclass
from datetime import datetime

from core.application.dtos.report_dto import to_jsonable
from polytrade_sdk.utils.datetime import isoformat_z


@dataclass
class EventMetadata:
    """Run the event belongs to."""

    execution_id: str
    service: str
    operation: str | None
    timestamp: datetime


@dataclass
class Event:
    """Progress event published while a workflow runs."""

    name: str
    payload: dict[str, object]
    metadata: EventMetadata

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "payload": to_jsonable(self.payload),
            "executionId": self.metadata.execution_id,
            "operation": self.metadata.operation,
            "timestamp": isoformat_z(self.metadata.timestamp),
        }
