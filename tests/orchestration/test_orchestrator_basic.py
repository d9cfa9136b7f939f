"""Tests for Orchestrator - step sequencing, halting and cancellation."""

import asyncio

import pytest

from core.domain.enums import StepStatus, WorkflowState
from core.domain.errors import PermissionMissing, SimulationFailed
from core.domain.value_objects import ExecutionID
from orchestration.models import ExecutionContext, StepResult, WorkflowReport
from orchestration.orchestrator import Orchestrator
from orchestration.workflow import WorkflowDefinition, WorkflowStep
from polytrade_sdk.utils.datetime import utc_now


class FakeEventBus:
    """Fake EventBus for testing."""

    def __init__(self) -> None:
        self.events: list[object] = []

    async def publish(self, event: object) -> None:
        self.events.append(event)

    def subscribe(self, pattern: str, handler: object) -> None:
        pass

    @property
    def names(self) -> list[str]:
        return [event.name for event in self.events]


def _context(cancel_event: asyncio.Event | None = None) -> ExecutionContext:
    execution_id = ExecutionID.generate()
    return ExecutionContext(
        execution_id=execution_id,
        service="test",
        operation="simple",
        started_at=utc_now(),
        report=WorkflowReport(operation="simple", execution_id=str(execution_id)),
        cancel_event=cancel_event,
    )


def _workflow(*steps: WorkflowStep) -> WorkflowDefinition:
    return WorkflowDefinition(name="test_workflow", service="test", operation="simple", steps=list(steps))


@pytest.mark.asyncio
async def test_orchestrator_basic_success():
    """Test basic orchestrator workflow success."""
    bus = FakeEventBus()

    async def step_1(ctx: ExecutionContext) -> StepResult:
        return StepResult.succeeded("step_1", "ok")

    orchestrator = Orchestrator(event_bus=bus, service="test", operation="simple")
    ctx = _context()
    report = await orchestrator.run(_workflow(WorkflowStep("step_1", step_1, WorkflowState.VERIFIED)), ctx)

    assert report.success is True
    assert [s.name for s in report.steps] == ["step_1"]
    assert report.steps[0].status == StepStatus.SUCCEEDED
    assert report.finished_at is not None
    assert ctx.state == WorkflowState.DONE
    assert report.data["finalState"] == "done"
    assert bus.names == [
        "workflow.started",
        "workflow.step.started",
        "workflow.step.succeeded",
        "workflow.finished",
    ]


@pytest.mark.asyncio
async def test_orchestrator_skipped_steps_count_as_success():
    bus = FakeEventBus()

    async def already_done(ctx: ExecutionContext) -> StepResult:
        return StepResult.skipped("whitelist", "collection is already whitelisted")

    report = await Orchestrator(bus, "test").run(_workflow(WorkflowStep("whitelist", already_done)), _context())

    assert report.success is True
    assert report.steps[0].status == StepStatus.SKIPPED
    assert "workflow.step.skipped" in bus.names
    assert any("already whitelisted" in line for line in report.logs)


@pytest.mark.asyncio
async def test_orchestrator_stops_at_first_required_failure():
    """A raised WorkflowError halts the run; later steps never start."""
    bus = FakeEventBus()
    calls: list[str] = []

    async def step_ok(ctx: ExecutionContext) -> StepResult:
        calls.append("whitelist")
        return StepResult.succeeded("whitelist")

    async def step_denied(ctx: ExecutionContext) -> StepResult:
        calls.append("grant_role")
        raise PermissionMissing("DEFAULT_ADMIN_ROLE", "0xabc", "0xdef")

    async def step_never(ctx: ExecutionContext) -> StepResult:
        calls.append("approve")
        return StepResult.succeeded("approve")

    ctx = _context()
    report = await Orchestrator(bus, "test").run(
        _workflow(
            WorkflowStep("whitelist", step_ok, WorkflowState.WHITELISTED),
            WorkflowStep("grant_role", step_denied, WorkflowState.ROLE_GRANTED),
            WorkflowStep("approve", step_never, WorkflowState.APPROVED),
        ),
        ctx,
    )

    assert calls == ["whitelist", "grant_role"]
    assert report.success is False
    assert [s.status for s in report.steps] == [StepStatus.SUCCEEDED, StepStatus.FAILED]
    assert report.failed_step.error.code == "PermissionMissing"
    assert ctx.state == WorkflowState.ABORTED
    assert report.to_dict()["error"]["code"] == "PermissionMissing"


@pytest.mark.asyncio
async def test_orchestrator_optional_failure_continues():
    bus = FakeEventBus()

    async def failing(ctx: ExecutionContext) -> StepResult:
        raise SimulationFailed("AccessControlUnauthorizedAccount(...)", "setBaseURI",
                               "AccessControlUnauthorizedAccount")

    async def passing(ctx: ExecutionContext) -> StepResult:
        return StepResult.succeeded("second")

    report = await Orchestrator(bus, "test").run(
        _workflow(WorkflowStep("first", failing, required=False), WorkflowStep("second", passing)),
        _context(),
    )

    assert [s.name for s in report.steps] == ["first", "second"]
    assert report.success is False
    assert any(line.startswith("Hint:") for line in report.logs)


@pytest.mark.asyncio
async def test_orchestrator_unexpected_exception_becomes_failed_step():
    async def crashing(ctx: ExecutionContext) -> StepResult:
        raise KeyError("mainId")

    report = await Orchestrator(FakeEventBus(), "test").run(
        _workflow(WorkflowStep("wrap", crashing)), _context()
    )

    assert report.success is False
    assert report.steps[0].error.code == "UnexpectedError"


@pytest.mark.asyncio
async def test_orchestrator_cancellation_between_steps():
    cancel = asyncio.Event()
    calls: list[str] = []

    async def first(ctx: ExecutionContext) -> StepResult:
        calls.append("first")
        cancel.set()
        return StepResult.succeeded("first")

    async def second(ctx: ExecutionContext) -> StepResult:
        calls.append("second")
        return StepResult.succeeded("second")

    ctx = _context(cancel)
    report = await Orchestrator(FakeEventBus(), "test").run(
        _workflow(WorkflowStep("first", first), WorkflowStep("second", second)), ctx
    )

    assert calls == ["first"]
    assert [s.name for s in report.steps] == ["first", "cancelled"]
    assert report.steps[-1].error.code == "RunAborted"
    assert report.success is False
    assert ctx.state == WorkflowState.ABORTED
