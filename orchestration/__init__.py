"""Orchestration layer - workflow orchestration with eventing."""

from .bus import EventBusProtocol, InMemoryEventBus
from .events import Event, EventMetadata
from .models import ExecutionContext, StepResult, WorkflowReport
from .orchestrator import Orchestrator
from .workflow import Activity, WorkflowDefinition, WorkflowStep

__all__ = [
    "Activity",
    "Event",
    "EventBusProtocol",
    "EventMetadata",
    "ExecutionContext",
    "InMemoryEventBus",
    "Orchestrator",
    "StepResult",
    "WorkflowDefinition",
    "WorkflowReport",
    "WorkflowStep",
]
