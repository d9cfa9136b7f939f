"""Orchestration models - ExecutionContext, plus the run result types."""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime

from core.application.dtos.report_dto import ErrorInfo, StepResult, WorkflowReport
from core.domain.enums import WorkflowState
from core.domain.value_objects import ExecutionID


@dataclass
class ExecutionContext:
    """Context object for workflow execution."""

    execution_id: ExecutionID
    service: str
    operation: str | None
    started_at: datetime
    report: WorkflowReport
    state: WorkflowState = WorkflowState.INIT
    cancel_event: asyncio.Event | None = None
    metadata: dict[str, object] = field(default_factory=dict)

    @property
    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()


__all__ = ["ErrorInfo", "ExecutionContext", "StepResult", "WorkflowReport"]
