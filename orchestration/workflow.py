"""Workflow definitions - Activity, WorkflowStep, WorkflowDefinition."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from core.domain.enums import WorkflowState

from .models import ExecutionContext, StepResult

# An activity either returns its StepResult or raises a WorkflowError.
Activity = Callable[[ExecutionContext], Awaitable[StepResult]]


@dataclass
class WorkflowStep:
    """A single step in a workflow.

    ``reaches`` is the state the run enters once the step succeeded or was
    skipped. A step with ``required=False`` records its failure and lets
    the workflow continue.
    """

    name: str
    activity: Activity
    reaches: WorkflowState | None = None
    required: bool = True


@dataclass
class WorkflowDefinition:
    """Definition of a workflow."""

    name: str
    service: str
    operation: str | None
    steps: list[WorkflowStep]
